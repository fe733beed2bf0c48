"""Reborn staff bot.

Provides the bot instance used throughout the application.
The bot is started as a background task during FastAPI lifespan.
"""

import asyncio
import logging

import discord
from discord.ext import commands

from .staff_review import CUSTOM_ID_PREFIX, handle_review_decision

logger = logging.getLogger(__name__)

# Intents: members needed to fetch the requester when granting a role
intents = discord.Intents.default()
intents.members = True
intents.message_content = False

bot = commands.Bot(command_prefix="!", intents=intents)

# Set by the FastAPI lifespan after startup
_session_factory = None
_guild_id: str = ""
_role_map: dict[str, str] = {}

# Strong refs so in-flight decision tasks are not garbage collected
_tasks: set[asyncio.Task] = set()


def set_session_factory(session_factory):
    """Called from FastAPI lifespan to give the bot access to the database."""
    global _session_factory
    _session_factory = session_factory


def configure_reviews(guild_id: str, role_map: dict[str, str]):
    global _guild_id, _role_map
    _guild_id = guild_id
    _role_map = dict(role_map)


def is_review_interaction(interaction: discord.Interaction) -> bool:
    if interaction.type is not discord.InteractionType.component:
        return False
    custom_id = (interaction.data or {}).get("custom_id") or ""
    return custom_id.startswith(f"{CUSTOM_ID_PREFIX}:")


@bot.event
async def on_ready():
    logger.info("Reborn bot connected as %s (id=%s)", bot.user, bot.user.id)


@bot.event
async def on_interaction(interaction: discord.Interaction):
    if not is_review_interaction(interaction):
        return

    # Acknowledge within Discord's 3s window; the decision runs afterwards
    await interaction.response.defer()

    if _session_factory is None:
        logger.warning("on_interaction: session factory not set, ignoring review click")
        await interaction.followup.send("Review handling is not ready yet.", ephemeral=True)
        return

    task = asyncio.create_task(
        handle_review_decision(
            interaction,
            _session_factory,
            guild_id=_guild_id,
            role_map=_role_map,
        )
    )
    _tasks.add(task)
    task.add_done_callback(_task_done)


def _task_done(task: asyncio.Task) -> None:
    _tasks.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.error("Review decision task failed", exc_info=task.exception())


async def start_bot(token: str) -> None:
    """Start the bot. Intended to be run as an asyncio background task."""
    await bot.start(token)


async def stop_bot() -> None:
    """Gracefully close the bot connection."""
    if not bot.is_closed():
        await bot.close()


def get_bot() -> commands.Bot:
    """Return the global bot instance."""
    return bot
