"""Shared fixtures.

Hey future me - two kinds of fixtures live here:
- `entities`: builds in-memory domain aggregates for the pure merge planning tests
- `client`: a TestClient on a real app backed by a temporary SQLite file, seeded with a
  small catalogue (see _seed below) so API tests can merge actual releases
"""

import asyncio
import itertools
from collections.abc import AsyncIterator, Iterator, Sequence
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from harmonydb.config import Settings
from harmonydb.config.settings import DatabaseSettings
from harmonydb.domain.entities import (
    Artist,
    ArtistCredit,
    ArtistCreditName,
    Medium,
    Recording,
    Release,
    Track,
)
from harmonydb.infrastructure.persistence import (
    ArtistCreditModel,
    ArtistCreditNameModel,
    ArtistModel,
    Database,
    MediumModel,
    RecordingModel,
    ReleaseModel,
    TrackModel,
)
from harmonydb.main import create_app


class EntityFactory:
    """Builds Release aggregates with unique ids."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.default_credit = self.credit("The Example Band")

    def next_id(self) -> int:
        return next(self._ids)

    def credit(self, *names: str) -> ArtistCredit:
        credit_id = self.next_id()
        return ArtistCredit(
            id=credit_id,
            names=[
                ArtistCreditName(
                    artist=Artist(id=self.next_id(), gid=f"artist-{credit_id}-{i}", name=name),
                    name=name,
                    join_phrase=" & " if i < len(names) - 1 else "",
                )
                for i, name in enumerate(names)
            ],
        )

    def recording(
        self,
        name: str = "Song",
        credit: ArtistCredit | None = None,
        length: int | None = 180000,
    ) -> Recording:
        recording_id = self.next_id()
        return Recording(
            id=recording_id,
            gid=f"recording-{recording_id}",
            name=name,
            artist_credit=credit or self.default_credit,
            length=length,
        )

    def release(
        self,
        name: str = "Album",
        discs: Sequence[int | Sequence[Recording]] = (2,),
        positions: Sequence[int] | None = None,
        medium_names: Sequence[str] | None = None,
        credit: ArtistCredit | None = None,
        barcode: str | None = None,
    ) -> Release:
        """Build a release.

        Args:
            discs: Per medium, either a track count (fresh recordings) or the recordings
            positions: Medium positions, default 1..N
            medium_names: Medium names, default unnamed
        """
        release_id = self.next_id()
        positions = positions or list(range(1, len(discs) + 1))
        medium_names = medium_names or [""] * len(discs)

        mediums = []
        for disc, position, medium_name in zip(discs, positions, medium_names, strict=True):
            medium_id = self.next_id()
            recordings = (
                [self.recording(f"{name} track {n}") for n in range(1, disc + 1)]
                if isinstance(disc, int)
                else list(disc)
            )
            mediums.append(
                Medium(
                    id=medium_id,
                    release_id=release_id,
                    position=position,
                    name=medium_name,
                    format_name="CD",
                    tracks=[
                        Track(
                            id=self.next_id(),
                            medium_id=medium_id,
                            position=track_position,
                            number=str(track_position),
                            name=recording.name,
                            recording=recording,
                        )
                        for track_position, recording in enumerate(recordings, start=1)
                    ],
                )
            )

        return Release(
            id=release_id,
            gid=f"release-{release_id}",
            name=name,
            artist_credit=credit or self.default_credit,
            barcode=barcode,
            mediums=mediums,
        )


@pytest.fixture
def entities() -> EntityFactory:
    """Fresh factory per test, so ids restart at 1."""
    return EntityFactory()


# =============================================================================
# SEEDED DATABASE
# =============================================================================

EDITOR_HEADERS = {"X-Editor-Id": "42"}

GID_HITS = "5b11f4ce-a62d-471e-81fc-a69a8278c7da"
GID_HITS_BONUS = "8a1a3b0e-33a4-4a5f-9b3e-0c3f5d0e2a11"
GID_OTHER_ARTIST = "c0b2e1f4-7d3e-4f7e-8f66-1b2d3c4e5f60"
GID_SINGLE = "e4d3c2b1-0a9f-4e8d-b7c6-a5b4c3d2e1f0"


# Hey future me - the catalogue every integration test starts from:
#   release 1 "Greatest Hits"                  credit 1, medium 1 @1: Opening, Closing
#   release 2 "Greatest Hits (disc 2: Bonus)"  credit 1, medium 2 @1: Opening, Closing (same credit)
#   release 3 "Other Hits"                     credit 2, medium 3 @1: Opening, Closing (other artist)
#   release 4 "Single"                         credit 1, medium 4 @1: one track
async def _seed(db: Database) -> None:
    async with db.session_scope() as session:
        session.add_all(
            [
                ArtistModel(
                    id=1,
                    gid="0383dadf-2a4e-4d10-a46a-e9e041da8eb3",
                    name="The Example Band",
                    sort_name="Example Band, The",
                    ipi_codes='["00014107338"]',
                ),
                ArtistModel(id=2, gid="1f9df192-a621-4f54-8850-2c5373b7eac9", name="Somebody Else"),
                ArtistCreditModel(id=1, name="The Example Band"),
                ArtistCreditModel(id=2, name="Somebody Else"),
            ]
        )
        await session.flush()
        session.add_all(
            [
                ArtistCreditNameModel(
                    artist_credit_id=1, position=0, artist_id=1, name="The Example Band"
                ),
                ArtistCreditNameModel(
                    artist_credit_id=2, position=0, artist_id=2, name="Somebody Else"
                ),
            ]
        )
        recordings = [
            (1, "Opening", 1),
            (2, "Closing", 1),
            (3, "Opening", 1),
            (4, "Closing", 1),
            (5, "Opening", 2),
            (6, "Closing", 2),
            (7, "Opening", 1),
        ]
        session.add_all(
            [
                RecordingModel(
                    id=rid, gid=f"00000000-0000-0000-0000-{rid:012d}", name=name,
                    artist_credit_id=credit_id, length=200000 + rid,
                )
                for rid, name, credit_id in recordings
            ]
        )
        releases = [
            (1, GID_HITS, "Greatest Hits", 1, "0123456789012"),
            (2, GID_HITS_BONUS, "Greatest Hits (disc 2: Bonus)", 1, None),
            (3, GID_OTHER_ARTIST, "Other Hits", 2, None),
            (4, GID_SINGLE, "Single", 1, None),
        ]
        session.add_all(
            [
                ReleaseModel(
                    id=rid, gid=gid, name=name, artist_credit_id=credit_id,
                    status="official", barcode=barcode,
                )
                for rid, gid, name, credit_id, barcode in releases
            ]
        )
        await session.flush()
        session.add_all(
            [
                MediumModel(id=mid, release_id=mid, position=1, format_name="CD")
                for mid in (1, 2, 3, 4)
            ]
        )
        await session.flush()
        tracks = [
            (1, 1, 1, 1, "Opening"),
            (2, 1, 2, 2, "Closing"),
            (3, 2, 1, 3, "Opening"),
            (4, 2, 2, 4, "Closing"),
            (5, 3, 1, 5, "Opening"),
            (6, 3, 2, 6, "Closing"),
            (7, 4, 1, 7, "Opening"),
        ]
        session.add_all(
            [
                TrackModel(
                    id=tid, medium_id=mid, position=pos, number=str(pos),
                    recording_id=rid, name=name,
                )
                for tid, mid, pos, rid, name in tracks
            ]
        )


async def _prepare_database(settings: Settings) -> None:
    db = Database(settings)
    try:
        await db.create_tables()
        await _seed(db)
    finally:
        await db.close()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database=DatabaseSettings(
            url=f"sqlite+aiosqlite:///{tmp_path / 'harmonydb-test.db'}",
            create_tables_on_startup=True,
        ),
    )


@pytest.fixture
async def seeded_db(settings: Settings) -> AsyncIterator[Database]:
    """Seeded database for repository tests, without the app."""
    db = Database(settings)
    await db.create_tables()
    await _seed(db)
    try:
        yield db
    finally:
        await db.close()


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """TestClient on a seeded temporary database (lifespan runs inside the `with`)."""
    asyncio.run(_prepare_database(settings))
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def editor_headers() -> dict[str, str]:
    """Headers identifying a logged-in editor."""
    return dict(EDITOR_HEADERS)


@pytest.fixture
def release_gids() -> dict[str, str]:
    """Gids of the seeded releases, keyed by a short name."""
    return {
        "hits": GID_HITS,
        "hits_bonus": GID_HITS_BONUS,
        "other_artist": GID_OTHER_ARTIST,
        "single": GID_SINGLE,
    }
