"""SQLAlchemy ORM models for harmonydb."""

import uuid
from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


# Hey future me - SQLite drops tzinfo on the way back. Use this before comparing DB datetimes
# with datetime.now(UTC) or you'll get "can't compare offset-naive and offset-aware".
def ensure_utc_aware(dt: datetime) -> datetime:
    """Ensure datetime is UTC-aware, assuming naive datetimes are UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def new_gid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ArtistModel(Base):
    """SQLAlchemy model for artists."""

    __tablename__ = "artist"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    gid: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=new_gid)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    sort_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    # JSON text lists, e.g. '["00014107338"]' (SQLite compatible)
    ipi_codes: Mapped[str | None] = mapped_column(Text, nullable=True)
    isni_codes: Mapped[str | None] = mapped_column(Text, nullable=True)


class ArtistCreditModel(Base):
    """An ordered list of credited artists, shared by releases and recordings."""

    __tablename__ = "artist_credit"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Rendered credit ("Simon & Garfunkel"), kept for listings/search
    name: Mapped[str] = mapped_column(String(512), nullable=False)

    names: Mapped[list["ArtistCreditNameModel"]] = relationship(
        "ArtistCreditNameModel",
        back_populates="artist_credit",
        order_by="ArtistCreditNameModel.position",
        cascade="all, delete-orphan",
    )


class ArtistCreditNameModel(Base):
    """One artist within an artist credit."""

    __tablename__ = "artist_credit_name"

    artist_credit_id: Mapped[int] = mapped_column(
        ForeignKey("artist_credit.id", ondelete="CASCADE"), primary_key=True
    )
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    artist_id: Mapped[int] = mapped_column(ForeignKey("artist.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    join_phrase: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    artist_credit: Mapped["ArtistCreditModel"] = relationship(
        "ArtistCreditModel", back_populates="names"
    )
    artist: Mapped["ArtistModel"] = relationship("ArtistModel")


class RecordingModel(Base):
    """SQLAlchemy model for recordings."""

    __tablename__ = "recording"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    gid: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=new_gid)
    name: Mapped[str] = mapped_column(String(512), nullable=False)
    artist_credit_id: Mapped[int] = mapped_column(
        ForeignKey("artist_credit.id"), nullable=False, index=True
    )
    # Milliseconds
    length: Mapped[int | None] = mapped_column(Integer, nullable=True)

    artist_credit: Mapped["ArtistCreditModel"] = relationship("ArtistCreditModel")


class ReleaseModel(Base):
    """SQLAlchemy model for releases (aggregate root)."""

    __tablename__ = "release"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    gid: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=new_gid)
    name: Mapped[str] = mapped_column(String(512), nullable=False, index=True)
    artist_credit_id: Mapped[int] = mapped_column(
        ForeignKey("artist_credit.id"), nullable=False, index=True
    )
    status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    barcode: Mapped[str | None] = mapped_column(String(255), nullable=True)
    quality: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )

    artist_credit: Mapped["ArtistCreditModel"] = relationship("ArtistCreditModel")
    mediums: Mapped[list["MediumModel"]] = relationship(
        "MediumModel",
        back_populates="release",
        order_by="MediumModel.position",
        cascade="all, delete-orphan",
    )


# Listen up, (release_id, position) is UNIQUE - a release can't have two "disc 2"s. Append merges
# renumber mediums, which is why the merge rules insist on collision-free positions before an
# edit is even created.
class MediumModel(Base):
    """SQLAlchemy model for mediums (discs/sides of a release)."""

    __tablename__ = "medium"
    __table_args__ = (
        UniqueConstraint("release_id", "position", name="medium_uniq_release_position"),
        Index("medium_idx_release_position", "release_id", "position"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    release_id: Mapped[int] = mapped_column(
        ForeignKey("release.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    format_name: Mapped[str | None] = mapped_column(String(64), nullable=True)

    release: Mapped["ReleaseModel"] = relationship("ReleaseModel", back_populates="mediums")
    tracks: Mapped[list["TrackModel"]] = relationship(
        "TrackModel",
        back_populates="medium",
        order_by="TrackModel.position",
        cascade="all, delete-orphan",
    )


class TrackModel(Base):
    """SQLAlchemy model for tracks."""

    __tablename__ = "track"
    __table_args__ = (
        UniqueConstraint("medium_id", "position", name="track_uniq_medium_position"),
        Index("track_idx_medium_position", "medium_id", "position"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    medium_id: Mapped[int] = mapped_column(
        ForeignKey("medium.id", ondelete="CASCADE"), nullable=False
    )
    recording_id: Mapped[int] = mapped_column(
        ForeignKey("recording.id"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    number: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    name: Mapped[str] = mapped_column(String(512), nullable=False)
    length: Mapped[int | None] = mapped_column(Integer, nullable=True)

    medium: Mapped["MediumModel"] = relationship("MediumModel", back_populates="tracks")
    recording: Mapped["RecordingModel"] = relationship("RecordingModel")


class EditModel(Base):
    """A pending/closed edit in the moderation queue."""

    __tablename__ = "edit"
    __table_args__ = (Index("edit_idx_status_type", "status", "edit_type"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    edit_type: Mapped[int] = mapped_column(Integer, nullable=False)
    editor_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="open")
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, nullable=False
    )

    releases: Mapped[list["EditReleaseModel"]] = relationship(
        "EditReleaseModel", back_populates="edit", cascade="all, delete-orphan"
    )


class EditReleaseModel(Base):
    """Link between an edit and the releases it touches."""

    __tablename__ = "edit_release"

    edit_id: Mapped[int] = mapped_column(
        ForeignKey("edit.id", ondelete="CASCADE"), primary_key=True
    )
    release_id: Mapped[int] = mapped_column(
        ForeignKey("release.id", ondelete="CASCADE"), primary_key=True, index=True
    )

    edit: Mapped["EditModel"] = relationship("EditModel", back_populates="releases")
