"""Value objects for planning release merges.

Hey future me - everything here is IMMUTABLE on purpose. A merge request flows:

    form data ─validate─► MergeSubmission ─plan─► MergeDirective ─persist─► Edit

Each arrow produces a new value; nothing upstream gets mutated, so replanning the same
submission gives an identical directive (and identical edit data).
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from harmonydb.domain.entities import Recording


class MergeStrategy(IntEnum):
    """How releases are combined.

    APPEND concatenates the mediums of all releases into the target.
    MERGE unifies mediums at the same position and merges their recordings.
    """

    APPEND = 1
    MERGE = 2


@dataclass(frozen=True)
class MediumPositionInput:
    """Position/name requested for one medium in an append merge."""

    medium_id: int
    release_id: int
    position: int
    name: str = ""


@dataclass(frozen=True)
class MergeSubmission:
    """Validated merge form input."""

    strategy: MergeStrategy
    target_id: int
    release_ids: tuple[int, ...]
    medium_positions: tuple[MediumPositionInput, ...] = ()
    edit_note: str = ""
    confirm_bad_recording_merges: bool = False

    @property
    def source_ids(self) -> tuple[int, ...]:
        return tuple(dict.fromkeys(rid for rid in self.release_ids if rid != self.target_id))


@dataclass(frozen=True)
class MediumPosition:
    """Proposed placement of a medium when releases are appended."""

    medium_id: int
    release_id: int
    old_position: int
    new_position: int
    old_name: str
    new_name: str

    def to_form_data(self) -> dict[str, Any]:
        return {
            "id": self.medium_id,
            "release_id": self.release_id,
            "position": self.new_position,
            "name": self.new_name,
        }


def _recording_ref(recording: Recording) -> dict[str, Any]:
    return {"id": recording.id, "name": recording.name, "length": recording.length}


@dataclass(frozen=True)
class RecordingMergeGroup:
    """Recordings at one medium/track position that a merge would unify."""

    medium: int
    track: int
    destination: Recording
    sources: tuple[Recording, ...]

    @property
    def recordings(self) -> tuple[Recording, ...]:
        return (self.destination, *self.sources)

    # Listen up, a group is BAD when its recordings don't all carry one artist credit. That's
    # usually two different songs that happen to sit at the same track position. Bad groups
    # need an explicit confirmation from the editor; we never silently drop them.
    @property
    def is_bad(self) -> bool:
        return len({r.artist_credit_id for r in self.recordings}) > 1

    def to_json(self) -> dict[str, Any]:
        return {
            "medium": self.medium,
            "track": self.track,
            "destination": _recording_ref(self.destination),
            "sources": [_recording_ref(r) for r in self.sources],
        }


@dataclass(frozen=True)
class MediumChange:
    """Old and new position/name of one medium in an append merge."""

    medium_id: int
    old_position: int
    new_position: int
    old_name: str
    new_name: str

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.medium_id,
            "old_position": self.old_position,
            "new_position": self.new_position,
            "old_name": self.old_name,
            "new_name": self.new_name,
        }


@dataclass(frozen=True)
class ReleaseMediumChanges:
    """All medium changes belonging to one release."""

    release_id: int
    release_name: str
    mediums: tuple[MediumChange, ...]

    def to_json(self) -> dict[str, Any]:
        return {
            "release": {"id": self.release_id, "name": self.release_name},
            "mediums": [m.to_json() for m in self.mediums],
        }


@dataclass(frozen=True)
class MergeDirective:
    """Everything the moderation system needs to carry out a release merge."""

    strategy: MergeStrategy
    target_id: int
    source_ids: tuple[int, ...]
    medium_changes: tuple[ReleaseMediumChanges, ...] = ()
    recording_merges: tuple[RecordingMergeGroup, ...] = ()
    new_entity: dict[str, Any] = field(default_factory=dict)
    old_entities: tuple[dict[str, Any], ...] = ()

    def medium_position_map(self) -> dict[int, int]:
        """Map medium id to its new position (append merges only)."""
        return {
            change.medium_id: change.new_position
            for release in self.medium_changes
            for change in release.mediums
        }

    def to_edit_data(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "merge_strategy": int(self.strategy),
            "new_entity": self.new_entity,
            "old_entities": list(self.old_entities),
        }
        if self.strategy is MergeStrategy.APPEND:
            data["medium_changes"] = [c.to_json() for c in self.medium_changes]
        else:
            data["recording_merges"] = [g.to_json() for g in self.recording_merges]
        return data
