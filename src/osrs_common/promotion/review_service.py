"""Promotion review request lifecycle: create, fetch, decide once."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from osrs_common.db.models import ReviewRequest

from .checks import PromotionInputs

logger = logging.getLogger(__name__)


class ReviewRequestNotFound(LookupError):
    pass


class ReviewStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class ReviewAction(str, Enum):
    APPROVE = "approve"
    DENY = "deny"


class DecisionOutcome(str, Enum):
    APPLIED = "applied"
    ALREADY_DECIDED = "already_decided"
    NOT_FOUND = "not_found"


_ACTION_TARGET = {
    ReviewAction.APPROVE: ReviewStatus.APPROVED,
    ReviewAction.DENY: ReviewStatus.DENIED,
}


@dataclass
class DecisionResult:
    outcome: DecisionOutcome
    status: Optional[ReviewStatus] = None
    request: Optional[ReviewRequest] = None

    @property
    def applied(self) -> bool:
        return self.outcome is DecisionOutcome.APPLIED


def transition(current: str, action: ReviewAction) -> Optional[ReviewStatus]:
    """Next status for a decision, or None when the request is already terminal."""
    if ReviewStatus(current) is not ReviewStatus.PENDING:
        return None
    return _ACTION_TARGET[ReviewAction(action)]


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


async def create_review_request(
    db: AsyncSession,
    inputs: PromotionInputs,
    *,
    player_id: int | None = None,
) -> ReviewRequest:
    """Persist a new pending request from the builder inputs."""
    notes = (inputs.notes or "").strip() or None
    request = ReviewRequest(
        player_id=player_id,
        rsn=inputs.rsn,
        requested_rank=inputs.requested_rank or inputs.requested_role,
        requested_role=inputs.requested_role,
        requester_discord_id=inputs.requester_discord_id,
        notes=notes,
        status=ReviewStatus.PENDING.value,
        item_points_earned=inputs.item_points_earned,
        item_next_threshold=inputs.item_next_threshold,
        item_qualified_rank_label=inputs.item_qualified_rank_label,
        item_next_rank_label=inputs.item_next_rank_label,
        total_level=inputs.total_level,
        raids_total=inputs.raids_total,
        boss_kills_total=inputs.boss_kills_total,
        pets_unique=inputs.pets_unique,
        collection_log_completed=inputs.collection_log_completed,
    )
    db.add(request)
    await db.flush()
    logger.info(
        "Review request %d created for %s (role=%s, requester=%s)",
        request.id, request.rsn, request.requested_role, request.requester_discord_id,
    )
    return request


async def get_review_request(db: AsyncSession, request_id: int) -> ReviewRequest | None:
    result = await db.execute(select(ReviewRequest).where(ReviewRequest.id == request_id))
    return result.scalar_one_or_none()


async def require_review_request(db: AsyncSession, request_id: int) -> ReviewRequest:
    request = await get_review_request(db, request_id)
    if request is None:
        raise ReviewRequestNotFound(f"Review request {request_id} not found")
    return request


async def attach_message_ids(
    db: AsyncSession, request_id: int, *, channel_id: str, message_id: str
) -> None:
    """Remember where the staff message lives so its buttons can be disabled later."""
    await db.execute(
        update(ReviewRequest)
        .where(ReviewRequest.id == request_id)
        .values(discord_channel_id=str(channel_id), discord_message_id=str(message_id))
    )


def inputs_from_request(request: ReviewRequest) -> PromotionInputs:
    return PromotionInputs(
        rsn=request.rsn,
        requested_role=request.requested_role,
        requester_discord_id=request.requester_discord_id,
        requested_rank=request.requested_rank,
        notes=request.notes,
        item_points_earned=request.item_points_earned,
        item_next_threshold=request.item_next_threshold,
        item_qualified_rank_label=request.item_qualified_rank_label,
        item_next_rank_label=request.item_next_rank_label,
        total_level=request.total_level,
        raids_total=request.raids_total,
        boss_kills_total=request.boss_kills_total,
        pets_unique=request.pets_unique,
        collection_log_completed=request.collection_log_completed,
    )


# ---------------------------------------------------------------------------
# Decision
# ---------------------------------------------------------------------------


async def apply_decision(
    db: AsyncSession,
    request_id: int,
    action: ReviewAction,
    *,
    decided_by: str | None = None,
) -> DecisionResult:
    """
    Move a pending request to approved/denied, at most once.

    The status check and the write are one conditional UPDATE, so two
    concurrent clicks (or a redelivered interaction) cannot both apply.
    """
    action = ReviewAction(action)
    target = _ACTION_TARGET[action]
    result = await db.execute(
        update(ReviewRequest)
        .where(
            ReviewRequest.id == request_id,
            ReviewRequest.status == ReviewStatus.PENDING.value,
        )
        .values(
            status=target.value,
            decided_at=datetime.now(timezone.utc),
            decided_by_discord_id=decided_by,
        )
        .returning(ReviewRequest.id)
        .execution_options(synchronize_session=False)
    )
    claimed = result.scalar_one_or_none()

    if claimed is None:
        existing = await get_review_request(db, request_id)
        if existing is None:
            logger.warning("Decision %s on unknown review request %d", action.value, request_id)
            return DecisionResult(DecisionOutcome.NOT_FOUND)
        logger.info(
            "Review request %d already %s; ignoring %s by %s",
            request_id, existing.status, action.value, decided_by,
        )
        return DecisionResult(
            DecisionOutcome.ALREADY_DECIDED, ReviewStatus(existing.status), existing
        )

    request = await db.get(ReviewRequest, request_id, populate_existing=True)
    logger.info("Review request %d %s by %s", request_id, target.value, decided_by)
    return DecisionResult(DecisionOutcome.APPLIED, target, request)
