"""Domain entities."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from harmonydb.domain.value_objects.artist_codes import IpiCode, IsniCode

# Edit type identifiers stored in edit.edit_type. The numbers are part of the persisted data,
# never renumber them.
EDIT_RELEASE_MERGE = 223
EDIT_RELEASE_CHANGE_QUALITY = 263


class EditStatus(str, Enum):
    """Lifecycle of an edit in the moderation queue."""

    OPEN = "open"
    APPLIED = "applied"
    FAILED_VOTE = "failed_vote"
    FAILED_DEPENDENCY = "failed_dependency"
    ERROR = "error"
    CANCELLED = "cancelled"


class ReleaseQuality(int, Enum):
    """Data quality level of a release."""

    LOW = 0
    NORMAL = 1
    HIGH = 2


@dataclass
class Artist:
    """Artist referenced from artist credits."""

    id: int
    gid: str
    name: str
    sort_name: str = ""
    ipi_codes: list[IpiCode] = field(default_factory=list)
    isni_codes: list[IsniCode] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "gid": self.gid,
            "name": self.name,
            "sort_name": self.sort_name or self.name,
            "ipi_codes": [code.to_json() for code in self.ipi_codes],
            "isni_codes": [code.to_json() for code in self.isni_codes],
        }


@dataclass
class ArtistCreditName:
    """One artist inside an artist credit, with the name as credited."""

    artist: Artist
    name: str
    join_phrase: str = ""


# Yo, an ArtistCredit is how a recording/release names its artists, e.g.
# "Simon & Garfunkel" = [Simon (join " & "), Garfunkel]. Two recordings share a credit only when
# the ids are equal - equal rendered names are NOT enough, that's exactly what bad merges catch.
@dataclass
class ArtistCredit:
    """Ordered list of credited artists."""

    id: int
    names: list[ArtistCreditName] = field(default_factory=list)

    @property
    def name(self) -> str:
        return "".join(n.name + n.join_phrase for n in self.names)

    def to_ref(self) -> dict[str, Any]:
        """Serialize for edit data."""
        return {
            "id": self.id,
            "names": [
                {
                    "artist": {"id": n.artist.id, "name": n.artist.name},
                    "name": n.name,
                    "join_phrase": n.join_phrase,
                }
                for n in self.names
            ],
        }

    def to_json(self) -> list[dict[str, Any]]:
        """Credited artists in full, IPI/ISNI codes included."""
        return [
            {"artist": n.artist.to_json(), "name": n.name, "join_phrase": n.join_phrase}
            for n in self.names
        ]


@dataclass
class Recording:
    """A recorded performance, shared by tracks across releases."""

    id: int
    gid: str
    name: str
    artist_credit: ArtistCredit
    length: int | None = None

    @property
    def artist_credit_id(self) -> int:
        return self.artist_credit.id


@dataclass
class Track:
    """A track on a medium, pointing at exactly one recording."""

    id: int
    medium_id: int
    position: int
    name: str
    recording: Recording
    number: str = ""
    length: int | None = None

    @property
    def recording_id(self) -> int:
        return self.recording.id


@dataclass
class Medium:
    """A disc or side of a release."""

    id: int
    release_id: int
    position: int
    name: str = ""
    format_name: str | None = None
    tracks: list[Track] = field(default_factory=list)

    @property
    def track_count(self) -> int:
        return len(self.tracks)

    def track_at(self, position: int) -> Track | None:
        return next((t for t in self.tracks if t.position == position), None)


@dataclass
class Release:
    """Release aggregate root: a published edition made of mediums."""

    id: int
    gid: str
    name: str
    artist_credit: ArtistCredit
    status: str | None = None
    barcode: str | None = None
    quality: ReleaseQuality = ReleaseQuality.NORMAL
    mediums: list[Medium] = field(default_factory=list)

    def __post_init__(self) -> None:
        positions = [m.position for m in self.mediums]
        if len(positions) != len(set(positions)):
            raise ValueError(f"Release {self.id} has duplicate medium positions")

    @property
    def medium_count(self) -> int:
        return len(self.mediums)

    @property
    def all_tracks(self) -> list[Track]:
        return [t for m in self.mediums for t in m.tracks]

    def medium_at(self, position: int) -> Medium | None:
        return next((m for m in self.mediums if m.position == position), None)

    def medium_by_id(self, medium_id: int) -> Medium | None:
        return next((m for m in self.mediums if m.id == medium_id), None)

    def extra_entity_data(self) -> dict[str, Any]:
        """Summary stored alongside a release in edit data so reviewers see what changes."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "artist_credit": self.artist_credit.to_ref(),
            "mediums": [
                {"track_count": m.track_count, "format_name": m.format_name}
                for m in self.mediums
            ],
        }
        if self.barcode:
            data["barcode"] = self.barcode
        return data


@dataclass
class Edit:
    """A reviewable proposed change in the moderation queue."""

    id: int | None
    edit_type: int
    editor_id: int
    data: dict[str, Any]
    status: EditStatus = EditStatus.OPEN
    # Releases touched by the edit, so release pages can list their open edits.
    release_ids: list[int] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


__all__ = [
    "EDIT_RELEASE_CHANGE_QUALITY",
    "EDIT_RELEASE_MERGE",
    "Artist",
    "ArtistCredit",
    "ArtistCreditName",
    "Edit",
    "EditStatus",
    "Medium",
    "Recording",
    "Release",
    "ReleaseQuality",
    "Track",
]
