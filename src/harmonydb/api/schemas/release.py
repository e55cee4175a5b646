"""API schemas for releases, release merges and edits."""

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from starlette.datastructures import FormData

from harmonydb.domain.entities import Edit, Release, ReleaseQuality
from harmonydb.domain.value_objects.merge import (
    MediumPositionInput,
    MergeStrategy,
    MergeSubmission,
)

# medium_positions.<index>.<field>
_MEDIUM_POSITION_KEY = re.compile(r"^medium_positions\.(\d+)\.(id|release_id|position|name)$")


class MediumPositionField(BaseModel):
    """One row of the append-merge medium table."""

    id: int = Field(..., description="Medium ID")
    release_id: int = Field(..., description="Release the medium currently belongs to")
    position: int = Field(..., description="New medium position on the target")
    name: str = Field(default="", description="New medium name")


class MergeRequest(BaseModel):
    """Request schema for a release merge submission."""

    merge_strategy: MergeStrategy = Field(..., description="1 = append, 2 = merge")
    target: int = Field(..., description="Release that survives the merge")
    merging: list[int] = Field(
        ..., min_length=1, description="All candidate releases, target included"
    )
    medium_positions: list[MediumPositionField] = Field(
        default_factory=list, description="Append only: new positions for every medium"
    )
    edit_note: str = Field(default="", description="Note for the voters")
    confirm_bad_recording_merges: bool = Field(
        default=False, description="Acknowledge merging recordings of different artists"
    )

    def to_submission(self) -> MergeSubmission:
        return MergeSubmission(
            strategy=self.merge_strategy,
            target_id=self.target,
            release_ids=tuple(dict.fromkeys(self.merging)),
            medium_positions=tuple(
                MediumPositionInput(
                    medium_id=row.id,
                    release_id=row.release_id,
                    position=row.position,
                    name=row.name,
                )
                for row in self.medium_positions
            ),
            edit_note=self.edit_note.strip(),
            confirm_bad_recording_merges=self.confirm_bad_recording_merges,
        )


# Hey future me - HTML forms can't post nested lists, so the medium table comes in flattened as
# medium_positions.0.id, medium_positions.0.position, ... This rebuilds the nested structure
# (ordered by index) so MergeRequest can validate form posts and JSON bodies the same way.
def parse_merge_form(form: FormData) -> dict[str, Any]:
    """Turn a posted merge form into MergeRequest input."""
    rows: dict[int, dict[str, str]] = {}
    for key, value in form.multi_items():
        match = _MEDIUM_POSITION_KEY.match(key)
        if match and isinstance(value, str):
            rows.setdefault(int(match.group(1)), {})[match.group(2)] = value

    data: dict[str, Any] = {
        "merging": form.getlist("merging"),
        "medium_positions": [rows[index] for index in sorted(rows)],
        "edit_note": form.get("edit_note") or "",
        # Checkbox: present means checked
        "confirm_bad_recording_merges": form.get("confirm_bad_recording_merges") is not None,
    }
    for key in ("merge_strategy", "target"):
        if form.get(key) not in (None, ""):
            data[key] = form.get(key)
    return data


class ChangeQualityRequest(BaseModel):
    """Request schema for changing release data quality."""

    quality: ReleaseQuality = Field(..., description="0 = low, 1 = normal, 2 = high")


class TrackResponse(BaseModel):
    """Response schema for a track."""

    id: int
    position: int
    number: str
    name: str
    length: int | None
    recording_id: int
    artist_credit: str


class MediumResponse(BaseModel):
    """Response schema for a medium."""

    id: int
    position: int
    name: str
    format_name: str | None
    tracks: list[TrackResponse]


class ReleaseResponse(BaseModel):
    """Response schema for a release with mediums and tracks."""

    id: int
    gid: str
    name: str
    artist_credit: str
    artists: list[dict[str, Any]]
    status: str | None
    barcode: str | None
    quality: ReleaseQuality
    mediums: list[MediumResponse]

    @classmethod
    def from_entity(cls, release: Release) -> "ReleaseResponse":
        return cls(
            id=release.id,
            gid=release.gid,
            name=release.name,
            artist_credit=release.artist_credit.name,
            artists=release.artist_credit.to_json(),
            status=release.status,
            barcode=release.barcode,
            quality=release.quality,
            mediums=[
                MediumResponse(
                    id=medium.id,
                    position=medium.position,
                    name=medium.name,
                    format_name=medium.format_name,
                    tracks=[
                        TrackResponse(
                            id=track.id,
                            position=track.position,
                            number=track.number,
                            name=track.name,
                            length=track.length,
                            recording_id=track.recording_id,
                            artist_credit=track.recording.artist_credit.name,
                        )
                        for track in medium.tracks
                    ],
                )
                for medium in release.mediums
            ],
        )


class EditResponse(BaseModel):
    """Response schema for an edit."""

    id: int
    edit_type: int
    editor_id: int
    status: str
    data: dict[str, Any]
    release_ids: list[int]
    created_at: datetime

    @classmethod
    def from_entity(cls, edit: Edit) -> "EditResponse":
        if edit.id is None:
            raise ValueError("Edit has not been persisted yet")
        return cls(
            id=edit.id,
            edit_type=edit.edit_type,
            editor_id=edit.editor_id,
            status=edit.status.value,
            data=edit.data,
            release_ids=edit.release_ids,
            created_at=edit.created_at,
        )


class MergeRejectedResponse(BaseModel):
    """Response schema for a merge submission that was not accepted."""

    errors: dict[str, list[str]] = Field(..., description="Field name → messages")
    form: dict[str, Any] = Field(..., description="The merge form as it would be re-rendered")
