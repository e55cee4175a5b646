"""Repository implementations for domain entities."""

from __future__ import annotations

import json
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from harmonydb.domain.entities import (
    Artist,
    ArtistCredit,
    ArtistCreditName,
    Edit,
    EditStatus,
    Medium,
    Recording,
    Release,
    ReleaseQuality,
    Track,
)
from harmonydb.domain.ports import IEditRepository, IReleaseRepository
from harmonydb.domain.value_objects import IpiCode, IsniCode

from .models import (
    ArtistCreditModel,
    ArtistCreditNameModel,
    ArtistModel,
    EditModel,
    EditReleaseModel,
    MediumModel,
    RecordingModel,
    ReleaseModel,
    TrackModel,
    ensure_utc_aware,
)


def _artist_credit_loader(path):  # type: ignore[no-untyped-def]
    return path.selectinload(ArtistCreditModel.names).selectinload(ArtistCreditNameModel.artist)


# Hey future me - release loading is ALWAYS eager. The merge planner walks releases → mediums →
# tracks → recordings → artist credits in plain Python, and async SQLAlchemy blows up with
# MissingGreenlet if anything in that chain lazy-loads. Add new relationships here, not in callers.
def _release_load_options() -> list:  # type: ignore[type-arg]
    return [
        _artist_credit_loader(selectinload(ReleaseModel.artist_credit)),
        _artist_credit_loader(
            selectinload(ReleaseModel.mediums)
            .selectinload(MediumModel.tracks)
            .selectinload(TrackModel.recording)
            .selectinload(RecordingModel.artist_credit)
        ),
    ]


def _artist_to_entity(model: ArtistModel) -> Artist:
    # ipi/isni are JSON text lists for SQLite compatibility
    return Artist(
        id=model.id,
        gid=model.gid,
        name=model.name,
        sort_name=model.sort_name,
        ipi_codes=[IpiCode(code) for code in json.loads(model.ipi_codes or "[]")],
        isni_codes=[IsniCode(code) for code in json.loads(model.isni_codes or "[]")],
    )


def _artist_credit_to_entity(model: ArtistCreditModel) -> ArtistCredit:
    return ArtistCredit(
        id=model.id,
        names=[
            ArtistCreditName(
                artist=_artist_to_entity(name.artist),
                name=name.name,
                join_phrase=name.join_phrase,
            )
            for name in model.names
        ],
    )


class ReleaseRepository(IReleaseRepository):
    """SQLAlchemy implementation of Release repository."""

    # Yo, same contract as every repo here: the session is injected and NEVER committed in the
    # repo. The request's session_scope() owns the transaction.
    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    def _model_to_entity(self, model: ReleaseModel) -> Release:
        """Convert ReleaseModel (with eager-loaded children) to a Release aggregate.

        Hey future me - this is the ONE place that maps DB → Release!
        When you add fields to Release/Medium/Track, UPDATE THIS FUNCTION!
        """
        credits: dict[int, ArtistCredit] = {}

        def credit(ac_model: ArtistCreditModel) -> ArtistCredit:
            # Share one entity per credit id inside the aggregate
            if ac_model.id not in credits:
                credits[ac_model.id] = _artist_credit_to_entity(ac_model)
            return credits[ac_model.id]

        mediums = [
            Medium(
                id=medium.id,
                release_id=medium.release_id,
                position=medium.position,
                name=medium.name or "",
                format_name=medium.format_name,
                tracks=[
                    Track(
                        id=track.id,
                        medium_id=track.medium_id,
                        position=track.position,
                        name=track.name,
                        number=track.number,
                        length=track.length,
                        recording=Recording(
                            id=track.recording.id,
                            gid=track.recording.gid,
                            name=track.recording.name,
                            artist_credit=credit(track.recording.artist_credit),
                            length=track.recording.length,
                        ),
                    )
                    for track in medium.tracks
                ],
            )
            for medium in model.mediums
        ]
        return Release(
            id=model.id,
            gid=model.gid,
            name=model.name,
            artist_credit=credit(model.artist_credit),
            status=model.status,
            barcode=model.barcode,
            quality=ReleaseQuality(model.quality),
            mediums=mediums,
        )

    async def get_by_id(self, release_id: int) -> Release | None:
        """Get a release by row id."""
        stmt = (
            select(ReleaseModel)
            .where(ReleaseModel.id == release_id)
            .options(*_release_load_options())
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def get_by_gid(self, gid: str) -> Release | None:
        """Get a release by gid."""
        stmt = (
            select(ReleaseModel)
            .where(ReleaseModel.gid == gid)
            .options(*_release_load_options())
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def get_by_ids(self, release_ids: Sequence[int]) -> list[Release]:
        """Get releases in the order they were asked for; unknown ids are skipped."""
        if not release_ids:
            return []
        stmt = (
            select(ReleaseModel)
            .where(ReleaseModel.id.in_(set(release_ids)))
            .options(*_release_load_options())
        )
        result = await self.session.execute(stmt)
        by_id = {model.id: model for model in result.scalars().all()}
        ordered = dict.fromkeys(rid for rid in release_ids if rid in by_id)
        return [self._model_to_entity(by_id[rid]) for rid in ordered]


class EditRepository(IEditRepository):
    """SQLAlchemy implementation of Edit repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    def _model_to_entity(self, model: EditModel) -> Edit:
        return Edit(
            id=model.id,
            edit_type=model.edit_type,
            editor_id=model.editor_id,
            data=model.data,
            status=EditStatus(model.status),
            release_ids=sorted(link.release_id for link in model.releases),
            created_at=ensure_utc_aware(model.created_at),
        )

    # Listen up, add() FLUSHES (not commits) so the autoincrement id exists before we hand the edit
    # back - the merge route redirects to /edit/{id}. The commit still belongs to session_scope().
    async def add(self, edit: Edit) -> Edit:
        """Stage a new edit and return it with its id."""
        model = EditModel(
            edit_type=edit.edit_type,
            editor_id=edit.editor_id,
            status=edit.status.value,
            data=edit.data,
            created_at=edit.created_at,
            releases=[
                EditReleaseModel(release_id=rid) for rid in dict.fromkeys(edit.release_ids)
            ],
        )
        self.session.add(model)
        await self.session.flush()
        edit.id = model.id
        return edit

    async def get_by_id(self, edit_id: int) -> Edit | None:
        """Get an edit by id."""
        stmt = (
            select(EditModel)
            .where(EditModel.id == edit_id)
            .options(selectinload(EditModel.releases))
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def list_open_for_release(self, release_id: int) -> list[Edit]:
        """Open edits linked to the release, oldest first."""
        stmt = (
            select(EditModel)
            .join(EditReleaseModel, EditReleaseModel.edit_id == EditModel.id)
            .where(
                EditReleaseModel.release_id == release_id,
                EditModel.status == EditStatus.OPEN.value,
            )
            .options(selectinload(EditModel.releases))
            .order_by(EditModel.id)
        )
        result = await self.session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().unique().all()]
