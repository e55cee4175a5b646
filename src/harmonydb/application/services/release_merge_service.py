"""Release Merge Service - from merge form to pending edit.

Hey future me - this is the I/O shell around the pure planning in release_merge/. The flow is
the classic form state machine:

    Form Displayed ──submit──► Validated ──┬─► Rejected ──► Form Displayed (errors shown)
                                           └─► Accepted ──► Edit Created ──► Redirect

Rejections are NOT exceptions: they come back as MergeFormErrors so the router can re-render the
form with field errors. Only real breakage raises (unknown release → 404, submitted medium that
isn't on the loaded releases → MergeLookupError/500).

Nothing is committed here. The router's session_scope() is the unit of work: either the edit and
its release links are written together, or nothing is.

Usage:
    service = ReleaseMergeService(ReleaseRepository(session), EditService(EditRepository(session)))
    view = await service.prepare_form([1, 2])
    outcome = await service.submit(context, submission)
    if outcome.accepted:
        redirect_to(f"/edit/{outcome.edit.id}")
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from harmonydb.application.context import RequestContext
from harmonydb.application.services.edit_service import EditService
from harmonydb.application.services.release_merge import (
    ReleaseMediumGroup,
    build_merge_parameters,
    calculate_recording_merges,
    can_merge,
    find_bad_recording_merges,
    group_by_release,
    reconcile_medium_positions,
)
from harmonydb.domain.entities import EDIT_RELEASE_MERGE, Edit, Release
from harmonydb.domain.exceptions import BusinessRuleViolation, EntityNotFoundException
from harmonydb.domain.ports import IReleaseRepository
from harmonydb.domain.value_objects.merge import (
    MediumPosition,
    MediumPositionInput,
    MergeStrategy,
    MergeSubmission,
    RecordingMergeGroup,
)
from harmonydb.i18n import expand

logger = logging.getLogger(__name__)

STRATEGY_NOT_APPLICABLE = (
    "This merge strategy is not applicable to the releases you have selected."
)
BAD_RECORDING_MERGES = (
    "The recordings at {positions} are credited to different artists. "
    "Confirm that you want to merge them anyway."
)
TOO_FEW_RELEASES = "Select at least two releases to merge."
DUPLICATE_MEDIUM = "Each medium can only be given one position."


class MergeFormErrors:
    """Field errors collected while validating a merge submission."""

    def __init__(self) -> None:
        self._errors: dict[str, list[str]] = {}

    def add(self, field_name: str, message: str) -> None:
        self._errors.setdefault(field_name, []).append(message)

    def for_field(self, field_name: str) -> list[str]:
        return list(self._errors.get(field_name, []))

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(messages) for name, messages in self._errors.items()}

    def __bool__(self) -> bool:
        return bool(self._errors)


@dataclass
class MergeFormView:
    """Everything the merge form renders."""

    releases: list[Release]
    target_id: int
    medium_positions: list[MediumPosition]
    medium_groups: list[ReleaseMediumGroup]
    recording_merges: list[RecordingMergeGroup]
    bad_recording_merges: list[RecordingMergeGroup]

    def to_json(self) -> dict[str, Any]:
        return {
            "target": self.target_id,
            "releases": [
                {
                    "id": release.id,
                    "gid": release.gid,
                    "name": release.name,
                    "artist_credit": release.artist_credit.name,
                    "medium_count": release.medium_count,
                }
                for release in self.releases
            ],
            "medium_positions": [p.to_form_data() for p in self.medium_positions],
            "recording_merges": [g.to_json() for g in self.recording_merges],
            "bad_recording_merges": [
                {
                    **group.to_json(),
                    "artist_credits": [r.artist_credit.name for r in group.recordings],
                }
                for group in self.bad_recording_merges
            ],
        }


@dataclass
class MergeOutcome:
    """Result of a merge submission: an edit, or errors plus the form to re-render."""

    view: MergeFormView
    errors: MergeFormErrors = field(default_factory=MergeFormErrors)
    edit: Edit | None = None

    @property
    def accepted(self) -> bool:
        return self.edit is not None


def _unique(ids: Sequence[int]) -> list[int]:
    return list(dict.fromkeys(ids))


class ReleaseMergeService:
    """Builds the merge form and turns valid submissions into merge edits."""

    def __init__(
        self, release_repository: IReleaseRepository, edit_service: EditService
    ) -> None:
        self._releases = release_repository
        self._edits = edit_service

    async def _load_releases(self, release_ids: Sequence[int]) -> list[Release]:
        wanted = _unique(release_ids)
        releases = await self._releases.get_by_ids(wanted)
        found = {release.id for release in releases}
        for release_id in wanted:
            if release_id not in found:
                raise EntityNotFoundException("Release", release_id)
        return releases

    async def prepare_form(
        self, release_ids: Sequence[int], target_id: int | None = None
    ) -> MergeFormView:
        """Load the candidates and compute the form's proposals.

        Args:
            release_ids: Candidate releases, in selection order
            target_id: Preferred surviving release; defaults to the first one

        Raises:
            EntityNotFoundException: A release id doesn't exist
            BusinessRuleViolation: Fewer than two distinct releases
        """
        releases = await self._load_releases(release_ids)
        if len(releases) < 2:
            raise BusinessRuleViolation(TOO_FEW_RELEASES)

        by_id = {release.id: release for release in releases}
        target = by_id.get(target_id) if target_id is not None else None
        if target is None:
            target = releases[0]

        positions = reconcile_medium_positions(releases, target.id)
        recording_merges = calculate_recording_merges(
            target, [release for release in releases if release.id != target.id]
        )
        bad = find_bad_recording_merges(recording_merges)
        if bad:
            logger.info(
                f"{len(bad)} recording merge group(s) with mismatched artist credits "
                f"for releases {[r.id for r in releases]}"
            )

        return MergeFormView(
            releases=releases,
            target_id=target.id,
            medium_positions=positions,
            medium_groups=group_by_release(positions, releases),
            recording_merges=recording_merges,
            bad_recording_merges=bad,
        )

    async def submit(
        self, context: RequestContext, submission: MergeSubmission
    ) -> MergeOutcome:
        """Validate a submission and create the merge edit if it's acceptable.

        Raises:
            AuthenticationError: No editor in context
            EntityNotFoundException: A candidate release doesn't exist
            MergeLookupError: Submitted medium positions reference unknown data
        """
        context.require_editor()
        view = await self.prepare_form(submission.release_ids, submission.target_id)
        outcome = MergeOutcome(view=view)

        if submission.target_id not in submission.release_ids:
            outcome.errors.add("merge_strategy", STRATEGY_NOT_APPLICABLE)
            return outcome

        # Appending without explicit positions means "take the proposals as shown".
        if submission.strategy is MergeStrategy.APPEND and not submission.medium_positions:
            submission = dataclasses.replace(
                submission,
                medium_positions=tuple(
                    MediumPositionInput(
                        medium_id=p.medium_id,
                        release_id=p.release_id,
                        position=p.new_position,
                        name=p.new_name,
                    )
                    for p in view.medium_positions
                ),
            )

        # medium_position_map() keeps only the last row per medium, so a repeat must not get past here.
        submitted_ids = [row.medium_id for row in submission.medium_positions]
        if submission.strategy is MergeStrategy.APPEND and len(submitted_ids) != len(
            set(submitted_ids)
        ):
            outcome.errors.add("medium_positions", DUPLICATE_MEDIUM)
            return outcome

        directive = build_merge_parameters(submission, view.releases)

        medium_positions = (
            directive.medium_position_map()
            if submission.strategy is MergeStrategy.APPEND
            else None
        )
        if not can_merge(
            submission.strategy, submission.target_id, view.releases, medium_positions
        ):
            logger.info(
                f"Rejected {submission.strategy.name} merge into release {submission.target_id}",
                extra={"release_ids": list(submission.release_ids)},
            )
            outcome.errors.add("merge_strategy", STRATEGY_NOT_APPLICABLE)
            return outcome

        if submission.strategy is MergeStrategy.MERGE:
            bad = find_bad_recording_merges(directive.recording_merges)
            if bad and not submission.confirm_bad_recording_merges:
                positions = ", ".join(f"{g.medium}.{g.track}" for g in bad)
                outcome.errors.add(
                    "confirm_bad_recording_merges",
                    expand(BAD_RECORDING_MERGES, {"positions": positions}),
                )
                return outcome

        data = directive.to_edit_data()
        if submission.edit_note:
            data["edit_note"] = submission.edit_note

        outcome.edit = await self._edits.create_edit(
            context,
            EDIT_RELEASE_MERGE,
            data,
            release_ids=[directive.target_id, *directive.source_ids],
        )
        return outcome
