"""initial release schema

Revision ID: 0001_initial_release_schema
Revises:
Create Date: 2026-10-16 10:00:00.000000

Hey future me - THE BASELINE!

Creates the release aggregate tables plus the edit queue:

    artist ─┐
            artist_credit_name ── artist_credit ─┬─ recording ── track ── medium ── release
                                                 └────────────────────────────────┘
    edit ── edit_release ── release

KEY CONSTRAINTS:
1. (release_id, position) is unique on medium - no two "disc 2"s on one release
2. (medium_id, position) is unique on track
3. edit.data is JSON; the merge payload lives there untouched until the edit is applied
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_release_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create release, medium, track, recording, artist credit and edit tables."""
    op.create_table(
        "artist",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("gid", sa.String(36), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("sort_name", sa.String(255), nullable=False, server_default=""),
        # JSON text lists
        sa.Column("ipi_codes", sa.Text(), nullable=True),
        sa.Column("isni_codes", sa.Text(), nullable=True),
    )
    op.create_index("ix_artist_name", "artist", ["name"])

    op.create_table(
        "artist_credit",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(512), nullable=False),
    )

    op.create_table(
        "artist_credit_name",
        sa.Column(
            "artist_credit_id",
            sa.Integer(),
            sa.ForeignKey("artist_credit.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("position", sa.Integer(), primary_key=True),
        sa.Column("artist_id", sa.Integer(), sa.ForeignKey("artist.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("join_phrase", sa.String(64), nullable=False, server_default=""),
    )

    op.create_table(
        "recording",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("gid", sa.String(36), nullable=False, unique=True),
        sa.Column("name", sa.String(512), nullable=False),
        sa.Column(
            "artist_credit_id", sa.Integer(), sa.ForeignKey("artist_credit.id"), nullable=False
        ),
        sa.Column("length", sa.Integer(), nullable=True),
    )
    op.create_index("ix_recording_artist_credit_id", "recording", ["artist_credit_id"])

    op.create_table(
        "release",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("gid", sa.String(36), nullable=False, unique=True),
        sa.Column("name", sa.String(512), nullable=False),
        sa.Column(
            "artist_credit_id", sa.Integer(), sa.ForeignKey("artist_credit.id"), nullable=False
        ),
        sa.Column("status", sa.String(32), nullable=True),
        sa.Column("barcode", sa.String(255), nullable=True),
        # 0 = low, 1 = normal, 2 = high
        sa.Column("quality", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_release_name", "release", ["name"])
    op.create_index("ix_release_artist_credit_id", "release", ["artist_credit_id"])

    op.create_table(
        "medium",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "release_id",
            sa.Integer(),
            sa.ForeignKey("release.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(512), nullable=False, server_default=""),
        sa.Column("format_name", sa.String(64), nullable=True),
        sa.UniqueConstraint("release_id", "position", name="medium_uniq_release_position"),
    )
    op.create_index("medium_idx_release_position", "medium", ["release_id", "position"])

    op.create_table(
        "track",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "medium_id",
            sa.Integer(),
            sa.ForeignKey("medium.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("recording_id", sa.Integer(), sa.ForeignKey("recording.id"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("number", sa.String(16), nullable=False, server_default=""),
        sa.Column("name", sa.String(512), nullable=False),
        sa.Column("length", sa.Integer(), nullable=True),
        sa.UniqueConstraint("medium_id", "position", name="track_uniq_medium_position"),
    )
    op.create_index("track_idx_medium_position", "track", ["medium_id", "position"])
    op.create_index("ix_track_recording_id", "track", ["recording_id"])

    op.create_table(
        "edit",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("edit_type", sa.Integer(), nullable=False),
        sa.Column("editor_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="open"),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_edit_editor_id", "edit", ["editor_id"])
    op.create_index("edit_idx_status_type", "edit", ["status", "edit_type"])

    op.create_table(
        "edit_release",
        sa.Column(
            "edit_id",
            sa.Integer(),
            sa.ForeignKey("edit.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "release_id",
            sa.Integer(),
            sa.ForeignKey("release.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index("ix_edit_release_release_id", "edit_release", ["release_id"])


def downgrade() -> None:
    """Drop everything, children first."""
    op.drop_index("ix_edit_release_release_id", table_name="edit_release")
    op.drop_table("edit_release")
    op.drop_index("edit_idx_status_type", table_name="edit")
    op.drop_index("ix_edit_editor_id", table_name="edit")
    op.drop_table("edit")
    op.drop_index("ix_track_recording_id", table_name="track")
    op.drop_index("track_idx_medium_position", table_name="track")
    op.drop_table("track")
    op.drop_index("medium_idx_release_position", table_name="medium")
    op.drop_table("medium")
    op.drop_index("ix_release_artist_credit_id", table_name="release")
    op.drop_index("ix_release_name", table_name="release")
    op.drop_table("release")
    op.drop_index("ix_recording_artist_credit_id", table_name="recording")
    op.drop_table("recording")
    op.drop_table("artist_credit_name")
    op.drop_table("artist_credit")
    op.drop_index("ix_artist_name", table_name="artist")
    op.drop_table("artist")
