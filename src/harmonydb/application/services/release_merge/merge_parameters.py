"""Turn a validated merge submission into a MergeDirective.

Pure function, no I/O: the same submission + releases always yields an equal directive.
"""

from collections.abc import Sequence

from harmonydb.application.services.release_merge.recording_merges import (
    calculate_recording_merges,
)
from harmonydb.domain.entities import Release
from harmonydb.domain.exceptions import MergeLookupError
from harmonydb.domain.value_objects.merge import (
    MediumChange,
    MergeDirective,
    MergeStrategy,
    MergeSubmission,
    ReleaseMediumChanges,
)


def _medium_changes(
    submission: MergeSubmission, releases: Sequence[Release]
) -> tuple[ReleaseMediumChanges, ...]:
    release_map = {release.id: release for release in releases}
    changes: dict[int, list[MediumChange]] = {}

    for requested in submission.medium_positions:
        release = release_map.get(requested.release_id)
        if release is None:
            raise MergeLookupError("release", requested.release_id)

        medium = release.medium_by_id(requested.medium_id)
        if medium is None:
            raise MergeLookupError("medium", requested.medium_id)

        changes.setdefault(release.id, []).append(
            MediumChange(
                medium_id=medium.id,
                old_position=medium.position,
                new_position=requested.position,
                old_name=medium.name or "",
                new_name=requested.name,
            )
        )

    # Candidate order, not dict/hash order: keeps edit data stable across replans.
    return tuple(
        ReleaseMediumChanges(
            release_id=release.id,
            release_name=release.name,
            mediums=tuple(changes[release.id]),
        )
        for release in releases
        if release.id in changes
    )


def build_merge_parameters(
    submission: MergeSubmission, releases: Sequence[Release]
) -> MergeDirective:
    """Build the directive handed to the edit system.

    Args:
        submission: Validated form input
        releases: Loaded candidate releases, in candidate order

    Returns:
        MergeDirective with medium changes (APPEND) or recording merges (MERGE)

    Raises:
        MergeLookupError: A submitted release or medium isn't among ``releases``
    """
    release_map = {release.id: release for release in releases}

    target = release_map.get(submission.target_id)
    if target is None:
        raise MergeLookupError("release", submission.target_id)

    sources: list[Release] = []
    for source_id in submission.source_ids:
        source = release_map.get(source_id)
        if source is None:
            raise MergeLookupError("release", source_id)
        sources.append(source)

    directive_args = {
        "strategy": submission.strategy,
        "target_id": target.id,
        "source_ids": tuple(source.id for source in sources),
        "new_entity": target.extra_entity_data(),
        "old_entities": tuple(source.extra_entity_data() for source in sources),
    }

    if submission.strategy is MergeStrategy.APPEND:
        return MergeDirective(
            medium_changes=_medium_changes(submission, releases),
            **directive_args,
        )

    return MergeDirective(
        recording_merges=tuple(calculate_recording_merges(target, sources)),
        **directive_args,
    )
