"""SQLAlchemy ORM models for the Reborn rank calculator.

reborn schema: player_profiles, review_requests
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# reborn schema
# ---------------------------------------------------------------------------


class PlayerProfile(Base):
    __tablename__ = "player_profiles"
    __table_args__ = {"schema": "reborn"}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    rsn: Mapped[str] = mapped_column(String(12), nullable=False, unique=True)
    discord_id: Mapped[Optional[str]] = mapped_column(String(25))
    join_date: Mapped[Optional[date]] = mapped_column(Date)
    scaling: Mapped[Optional[str]] = mapped_column(String(50))
    # item id → owned; False means the player unticked it by hand
    checklist: Mapped[dict] = mapped_column(JSONB, nullable=False, server_default=text("'{}'::jsonb"), default=dict)
    temple_synced_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    review_requests: Mapped[list["ReviewRequest"]] = relationship(back_populates="player")


class ReviewRequest(Base):
    __tablename__ = "review_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'denied')",
            name="ck_review_requests_status",
        ),
        {"schema": "reborn"},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("reborn.player_profiles.id", ondelete="SET NULL")
    )
    rsn: Mapped[str] = mapped_column(String(12), nullable=False)
    requested_rank: Mapped[str] = mapped_column(String(50), nullable=False)
    requested_role: Mapped[str] = mapped_column(String(50), nullable=False)
    requester_discord_id: Mapped[str] = mapped_column(String(25), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", server_default="pending")

    item_points_earned: Mapped[Optional[int]] = mapped_column(Integer)
    item_next_threshold: Mapped[Optional[int]] = mapped_column(Integer)
    item_qualified_rank_label: Mapped[Optional[str]] = mapped_column(String(50))
    item_next_rank_label: Mapped[Optional[str]] = mapped_column(String(50))
    total_level: Mapped[Optional[int]] = mapped_column(Integer)
    raids_total: Mapped[Optional[int]] = mapped_column(Integer)
    boss_kills_total: Mapped[Optional[int]] = mapped_column(Integer)
    pets_unique: Mapped[Optional[int]] = mapped_column(Integer)
    collection_log_completed: Mapped[Optional[int]] = mapped_column(Integer)

    discord_channel_id: Mapped[Optional[str]] = mapped_column(String(25))
    discord_message_id: Mapped[Optional[str]] = mapped_column(String(25))
    decided_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True))
    decided_by_discord_id: Mapped[Optional[str]] = mapped_column(String(25))
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    player: Mapped[Optional["PlayerProfile"]] = relationship(back_populates="review_requests")
