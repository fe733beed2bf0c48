"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("CREATE SCHEMA IF NOT EXISTS reborn")

    # ---------------------------------------------------------------------------
    # reborn schema
    # ---------------------------------------------------------------------------

    op.create_table(
        "player_profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("rsn", sa.String(12), nullable=False, unique=True),
        sa.Column("discord_id", sa.String(25)),
        sa.Column("join_date", sa.Date()),
        sa.Column("scaling", sa.String(50)),
        sa.Column("checklist", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("temple_synced_at", TIMESTAMP(timezone=True)),
        sa.Column("created_at", TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", TIMESTAMP(timezone=True), server_default=sa.func.now()),
        schema="reborn",
    )

    op.create_table(
        "review_requests",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "player_id",
            sa.Integer(),
            sa.ForeignKey("reborn.player_profiles.id", ondelete="SET NULL"),
        ),
        sa.Column("rsn", sa.String(12), nullable=False),
        sa.Column("requested_rank", sa.String(50), nullable=False),
        sa.Column("requested_role", sa.String(50), nullable=False),
        sa.Column("requester_discord_id", sa.String(25), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("item_points_earned", sa.Integer()),
        sa.Column("item_next_threshold", sa.Integer()),
        sa.Column("item_qualified_rank_label", sa.String(50)),
        sa.Column("item_next_rank_label", sa.String(50)),
        sa.Column("total_level", sa.Integer()),
        sa.Column("raids_total", sa.Integer()),
        sa.Column("boss_kills_total", sa.Integer()),
        sa.Column("pets_unique", sa.Integer()),
        sa.Column("collection_log_completed", sa.Integer()),
        sa.Column("discord_channel_id", sa.String(25)),
        sa.Column("discord_message_id", sa.String(25)),
        sa.Column("decided_at", TIMESTAMP(timezone=True)),
        sa.Column("decided_by_discord_id", sa.String(25)),
        sa.Column("created_at", TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'denied')",
            name="ck_review_requests_status",
        ),
        schema="reborn",
    )
    op.create_index(
        "ix_review_requests_status", "review_requests", ["status"], schema="reborn"
    )


def downgrade() -> None:
    op.drop_index("ix_review_requests_status", table_name="review_requests", schema="reborn")
    op.drop_table("review_requests", schema="reborn")
    op.drop_table("player_profiles", schema="reborn")
