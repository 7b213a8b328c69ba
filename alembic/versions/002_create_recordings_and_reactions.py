"""Create recordings and reactions tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "recordings",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("user_email", sa.String(length=256), nullable=False),
        sa.Column("audio_url", sa.String(length=1024), nullable=False),
        sa.Column("caption", sa.String(length=100), nullable=True),
        sa.Column("mood", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_recordings_user_id"), "recordings", ["user_id"])
    op.create_index(op.f("ix_recordings_created_at"), "recordings", ["created_at"])

    op.create_table(
        "reactions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("recording_id", sa.String(length=36), sa.ForeignKey("recordings.id"), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("emoji", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_reactions_recording_id"), "reactions", ["recording_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_reactions_recording_id"), table_name="reactions")
    op.drop_table("reactions")
    op.drop_index(op.f("ix_recordings_created_at"), table_name="recordings")
    op.drop_index(op.f("ix_recordings_user_id"), table_name="recordings")
    op.drop_table("recordings")
