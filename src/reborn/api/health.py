"""Health check endpoint."""

from fastapi import APIRouter, Request
from sqlalchemy import text

from osrs_common.catalog.items import get_catalog
from osrs_common.db.engine import get_session_factory
from reborn.config import get_settings

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    settings = get_settings()
    db_status = "disconnected"
    try:
        factory = get_session_factory(settings.database_url)
        async with factory() as session:
            await session.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as exc:
        db_status = f"error: {exc}"

    return {
        "ok": True,
        "data": {
            "db": db_status,
            "catalog_items": len(get_catalog()),
            "staff_notifier": getattr(request.app.state, "staff_notifier", None) is not None,
            "version": "0.1.0",
        },
    }
