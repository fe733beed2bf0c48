"""Submit a promotion request: persist, summarise, notify staff."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from osrs_common.discord.staff_review import StaffNotificationError, StaffNotifier
from osrs_common.promotion.checks import PromotionInputs, build_checks, build_summary_lines
from osrs_common.promotion.review_service import attach_message_ids, create_review_request
from osrs_common.db.models import PlayerProfile
from reborn.services.calculator_service import evaluate_checklist

logger = logging.getLogger(__name__)


async def submit_review_request(
    db: AsyncSession,
    notifier: StaffNotifier,
    inputs: PromotionInputs,
    *,
    player: PlayerProfile | None = None,
) -> dict:
    """
    Create the pending request and post it to staff.

    When the player has a stored checklist the item fields are computed
    server-side and override whatever the client sent.
    The row is committed before staff are notified so a button click can
    never race ahead of it.  If the post fails the row is removed again and
    StaffNotificationError propagates.
    """
    if player is not None and player.checklist:
        inputs = inputs.with_evaluation(evaluate_checklist(player.checklist))

    request = await create_review_request(
        db, inputs, player_id=player.id if player is not None else None
    )
    await db.commit()
    lines = build_summary_lines(inputs, request_id=str(request.id))
    try:
        channel_id, message_id = await notifier.post_review(request.id, lines)
    except StaffNotificationError:
        logger.warning("Staff post failed; removing review request %d", request.id)
        await db.delete(request)
        await db.commit()
        raise
    await attach_message_ids(db, request.id, channel_id=channel_id, message_id=message_id)

    return {
        "request_id": request.id,
        "status": request.status,
        "checks": [c.to_dict() for c in build_checks(inputs)],
        "summary": lines,
    }
