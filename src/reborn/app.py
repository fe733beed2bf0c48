"""Reborn rank calculator application factory."""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from osrs_common.db.engine import dispose_engine, get_session_factory
from osrs_common.trackers.temple_client import TempleClient
from osrs_common.trackers.wom_client import WiseOldManClient
from reborn.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
# Surface discord.py logs at WARNING and above in production
logging.getLogger("discord").setLevel(logging.WARNING)
logging.getLogger("discord.gateway").setLevel(logging.INFO)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Reborn rank calculator (env=%s)", settings.app_env)

        tracker_kwargs = {
            "user_agent": settings.tracker_user_agent,
            "timeout": settings.tracker_timeout_seconds,
        }
        app.state.temple_client = TempleClient(settings.temple_base_url, **tracker_kwargs)
        app.state.wom_client = WiseOldManClient(settings.wom_base_url, **tracker_kwargs)
        await app.state.temple_client.initialize()
        await app.state.wom_client.initialize()

        # Start the Discord bot in a background task (skipped if no token)
        bot_task = None
        app.state.staff_notifier = None
        if settings.discord_bot_token:
            from osrs_common.discord.bot import (
                configure_reviews,
                get_bot,
                set_session_factory,
                start_bot,
            )
            from osrs_common.discord.staff_review import StaffNotifier

            set_session_factory(get_session_factory(settings.database_url))
            role_map = settings.role_map()
            configure_reviews(settings.discord_guild_id, role_map)
            if not role_map:
                logger.warning("DISCORD_ROLE_MAP_JSON is empty; approvals will report no role mapping")

            bot_task = asyncio.create_task(start_bot(settings.discord_bot_token))
            logger.info("Discord bot task started")

            if settings.discord_staff_channel_id:
                app.state.staff_notifier = StaffNotifier(get_bot(), settings.discord_staff_channel_id)
            else:
                logger.info("No DISCORD_STAFF_CHANNEL_ID — review requests cannot be submitted")
        else:
            logger.info("No DISCORD_BOT_TOKEN — bot not started")

        yield

        # Graceful shutdown
        if bot_task is not None:
            from osrs_common.discord.bot import stop_bot
            await stop_bot()
            bot_task.cancel()
            try:
                await bot_task
            except asyncio.CancelledError:
                pass

        await app.state.temple_client.close()
        await app.state.wom_client.close()
        await dispose_engine()
        logger.info("Reborn shutdown complete")

    app = FastAPI(
        title="Reborn Iron Ranks",
        version="0.1.0",
        lifespan=lifespan,
    )

    # ---------------------------------------------------------------------------
    # Exception handlers
    # ---------------------------------------------------------------------------

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc):
        detail = getattr(exc, "detail", None) or "Not found"
        return JSONResponse({"ok": False, "error": detail}, status_code=404)

    @app.exception_handler(500)
    async def server_error_handler(request: Request, exc):
        error_id = str(uuid.uuid4())[:8]
        logger.error("Server error %s on %s: %s", error_id, request.url.path, exc)
        return JSONResponse(
            {"ok": False, "error": "Internal server error", "error_id": error_id},
            status_code=500,
        )

    # Register API routes
    from reborn.api.health import router as health_router
    from reborn.api.rank_routes import router as rank_router
    from reborn.api.calculator_routes import router as calculator_router
    from reborn.api.player_routes import router as player_router
    from reborn.api.review_routes import router as review_router

    app.include_router(health_router, prefix="/api")
    app.include_router(rank_router)
    app.include_router(calculator_router)
    app.include_router(player_router)
    app.include_router(review_router)

    return app
