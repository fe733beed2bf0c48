"""FastAPI dependencies shared across routes."""

from collections.abc import AsyncGenerator

from fastapi import HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from osrs_common.db.engine import get_session_factory
from osrs_common.discord.staff_review import StaffNotifier
from osrs_common.trackers.temple_client import TempleClient
from osrs_common.trackers.wom_client import WiseOldManClient
from reborn.config import get_settings


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields a database session per request."""
    settings = get_settings()
    factory = get_session_factory(settings.database_url)
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_temple_client(request: Request) -> TempleClient:
    client = getattr(request.app.state, "temple_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="TempleOSRS client not available.")
    return client


def get_wom_client(request: Request) -> WiseOldManClient:
    client = getattr(request.app.state, "wom_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="Wise Old Man client not available.")
    return client


def get_staff_notifier(request: Request) -> StaffNotifier:
    notifier = getattr(request.app.state, "staff_notifier", None)
    if notifier is None:
        raise HTTPException(
            status_code=503,
            detail="Staff notifications are not configured (DISCORD_BOT_TOKEN / DISCORD_STAFF_CHANNEL_ID).",
        )
    return notifier
