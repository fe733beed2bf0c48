"""Staff review workflow on Discord.

A review request is posted to the staff channel with Approve/Deny buttons.
Clicks come back through the bot's on_interaction handler, which defers
the interaction and hands off to handle_review_decision().
"""

import logging
from typing import Optional

import discord
from sqlalchemy.ext.asyncio import async_sessionmaker

from osrs_common.promotion.review_service import (
    DecisionOutcome,
    ReviewAction,
    apply_decision,
    get_review_request,
    transition,
)

logger = logging.getLogger(__name__)

CUSTOM_ID_PREFIX = "review"


class StaffNotificationError(Exception):
    """The staff review message could not be delivered."""


# ---------------------------------------------------------------------------
# Custom id codec
# ---------------------------------------------------------------------------


def format_custom_id(action: ReviewAction, request_id: int) -> str:
    return f"{CUSTOM_ID_PREFIX}:{ReviewAction(action).value}:{request_id}"


def parse_custom_id(custom_id: Optional[str]) -> Optional[tuple[ReviewAction, int]]:
    """Return (action, request_id), or None for ids this workflow does not own."""
    parts = (custom_id or "").split(":")
    if len(parts) != 3 or parts[0] != CUSTOM_ID_PREFIX:
        return None
    try:
        return ReviewAction(parts[1]), int(parts[2])
    except ValueError:
        return None


def build_review_view(request_id: int, *, disabled: bool = False) -> discord.ui.View:
    """Approve/Deny buttons; clicks are dispatched by custom id, not by View callbacks."""
    view = discord.ui.View(timeout=None)
    view.add_item(discord.ui.Button(
        label="Approve",
        style=discord.ButtonStyle.success,
        custom_id=format_custom_id(ReviewAction.APPROVE, request_id),
        disabled=disabled,
    ))
    view.add_item(discord.ui.Button(
        label="Deny",
        style=discord.ButtonStyle.danger,
        custom_id=format_custom_id(ReviewAction.DENY, request_id),
        disabled=disabled,
    ))
    return view


# ---------------------------------------------------------------------------
# Outbound
# ---------------------------------------------------------------------------


class StaffNotifier:
    """Delivers review requests to the staff channel."""

    def __init__(self, bot: discord.Client, channel_id: str):
        self.bot = bot
        self.channel_id = channel_id

    async def _channel(self):
        channel = self.bot.get_channel(int(self.channel_id))
        if channel is None:
            channel = await self.bot.fetch_channel(int(self.channel_id))
        return channel

    async def post_review(self, request_id: int, lines: list[str]) -> tuple[str, str]:
        """Post the summary with buttons; returns (channel_id, message_id)."""
        if not self.channel_id:
            raise StaffNotificationError("Staff channel is not configured")
        try:
            channel = await self._channel()
            message = await channel.send(
                content="\n".join(lines),
                view=build_review_view(request_id),
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except (discord.HTTPException, ValueError) as exc:
            logger.error("Failed to post review request %d to %s: %s", request_id, self.channel_id, exc)
            raise StaffNotificationError(f"Failed to post staff review message: {exc}") from exc

        logger.info("Review request %d posted as message %s", request_id, message.id)
        return str(channel.id), str(message.id)


async def grant_role(bot: discord.Client, guild_id: str, user_id: str, role_id: str) -> None:
    guild = bot.get_guild(int(guild_id))
    if guild is None:
        guild = await bot.fetch_guild(int(guild_id))
    member = guild.get_member(int(user_id)) or await guild.fetch_member(int(user_id))
    role = guild.get_role(int(role_id))
    if role is None:
        raise ValueError(f"Role {role_id} not found in guild {guild_id}")
    await member.add_roles(role, reason="Rank up review approved")
    logger.info("Granted role %s to %s", role.name, user_id)


async def disable_review_buttons(message: discord.Message, request_id: int) -> None:
    try:
        await message.edit(view=build_review_view(request_id, disabled=True))
    except discord.HTTPException as exc:
        logger.warning("Could not disable buttons for review request %d: %s", request_id, exc)


async def _followup(interaction: discord.Interaction, content: str) -> None:
    try:
        await interaction.followup.send(content, ephemeral=True)
    except discord.HTTPException as exc:
        logger.warning("Follow-up to %s failed: %s", interaction.user, exc)


# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------


async def handle_review_decision(
    interaction: discord.Interaction,
    session_factory: async_sessionmaker,
    *,
    guild_id: str,
    role_map: dict[str, str],
) -> Optional[DecisionOutcome]:
    """
    Apply a staff button click.  The interaction must already be deferred.

    A request that is no longer pending is reported as such first.  Approve
    needs a role mapping for the requested role before anything changes.
    The status transition is claimed next; only the click that claims it
    grants the role, so a double click cannot grant twice.
    """
    parsed = parse_custom_id((interaction.data or {}).get("custom_id"))
    if parsed is None:
        return None
    action, request_id = parsed
    clicked_by = str(interaction.user.id)
    logger.info("Review decision: %s request=%d by=%s", action.value, request_id, clicked_by)

    async with session_factory() as db:
        request = await get_review_request(db, request_id)
        if request is None:
            await _followup(interaction, "Request not found.")
            return DecisionOutcome.NOT_FOUND

        if transition(request.status, action) is None:
            await _followup(interaction, f"Already {request.status}.")
            return DecisionOutcome.ALREADY_DECIDED

        role_id = None
        if action is ReviewAction.APPROVE:
            role_id = role_map.get(request.requested_role)
            if not role_id:
                logger.warning("No role mapping for %r", request.requested_role)
                await _followup(
                    interaction,
                    f'No role mapping found for "{request.requested_role}". '
                    "Add it to DISCORD_ROLE_MAP_JSON.",
                )
                return None

        result = await apply_decision(db, request_id, action, decided_by=clicked_by)
        await db.commit()

    if result.outcome is DecisionOutcome.NOT_FOUND:
        await _followup(interaction, "Request not found.")
        return result.outcome
    if result.outcome is DecisionOutcome.ALREADY_DECIDED:
        await _followup(interaction, f"Already {result.status.value}.")
        return result.outcome

    requester = result.request.requester_discord_id
    role_label = result.request.requested_role
    if action is ReviewAction.APPROVE:
        try:
            await grant_role(interaction.client, guild_id, requester, role_id)
        except (discord.HTTPException, ValueError) as exc:
            logger.error("Approved request %d but role grant failed: %s", request_id, exc)
            await _followup(interaction, f"Approved, but adding the role failed: {exc}")
            if interaction.message is not None:
                await disable_review_buttons(interaction.message, request_id)
            return result.outcome

    if interaction.message is not None:
        await disable_review_buttons(interaction.message, request_id)

    if action is ReviewAction.APPROVE:
        await _followup(interaction, f"✅ Approved. Added **{role_label}** to <@{requester}>.")
    else:
        await _followup(interaction, "❌ Denied.")
    return result.outcome
