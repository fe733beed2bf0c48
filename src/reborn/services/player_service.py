"""Player profile CRUD and the stored checklist."""

import logging
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from osrs_common.db.models import PlayerProfile

logger = logging.getLogger(__name__)


async def create_player(
    db: AsyncSession,
    *,
    rsn: str,
    discord_id: str | None = None,
    join_date: date | None = None,
    scaling: str | None = None,
) -> PlayerProfile:
    rsn = rsn.strip()
    if not rsn:
        raise ValueError("RSN is required")
    existing = await db.execute(
        select(PlayerProfile).where(PlayerProfile.rsn.ilike(rsn))
    )
    if existing.scalar_one_or_none() is not None:
        raise ValueError(f"Player {rsn!r} already exists")

    player = PlayerProfile(
        rsn=rsn,
        discord_id=discord_id,
        join_date=join_date,
        scaling=scaling,
        checklist={},
    )
    db.add(player)
    await db.flush()
    logger.info("Player %d created (%s)", player.id, rsn)
    return player


async def get_player(db: AsyncSession, player_id: int) -> PlayerProfile | None:
    return await db.get(PlayerProfile, player_id)


async def list_players(db: AsyncSession) -> list[PlayerProfile]:
    result = await db.execute(select(PlayerProfile).order_by(PlayerProfile.rsn))
    return list(result.scalars().all())


async def delete_player(db: AsyncSession, player_id: int) -> bool:
    player = await get_player(db, player_id)
    if player is None:
        return False
    await db.delete(player)
    await db.flush()
    logger.info("Player %d deleted", player_id)
    return True


async def save_checklist(
    db: AsyncSession,
    player: PlayerProfile,
    checklist: dict[str, bool],
    *,
    from_temple: bool = False,
) -> PlayerProfile:
    # Reassign rather than mutate so the JSONB column is flagged dirty
    player.checklist = dict(checklist)
    if from_temple:
        player.temple_synced_at = datetime.now(timezone.utc)
    await db.flush()
    return player
