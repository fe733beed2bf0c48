"""Promotion review request routes.

    POST /api/v1/review-requests
    GET  /api/v1/review-requests/{id}
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from osrs_common.discord.staff_review import StaffNotificationError, StaffNotifier
from osrs_common.promotion.checks import PromotionInputs, build_checks
from osrs_common.promotion.review_service import (
    ReviewRequestNotFound,
    inputs_from_request,
    require_review_request,
)
from reborn.deps import get_db, get_staff_notifier
from reborn.services import player_service
from reborn.services.review_submission_service import submit_review_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/review-requests", tags=["review-requests"])


class ReviewRequestCreate(BaseModel):
    player_id: int | None = None
    rsn: str = Field(min_length=1)
    requested_rank: str = Field(min_length=1)
    requested_role: str = Field(min_length=1)
    requester_discord_id: str = Field(min_length=1)
    notes: str | None = None

    item_points_earned: int | None = Field(default=None, ge=0)
    item_next_threshold: int | None = Field(default=None, ge=0)
    item_qualified_rank_label: str | None = None
    item_next_rank_label: str | None = None
    total_level: int | None = Field(default=None, ge=0)
    raids_total: int | None = Field(default=None, ge=0)
    boss_kills_total: int | None = Field(default=None, ge=0)
    pets_unique: int | None = Field(default=None, ge=0)
    collection_log_completed: int | None = Field(default=None, ge=0)


@router.post("")
async def create_review_request(
    body: ReviewRequestCreate,
    db: AsyncSession = Depends(get_db),
    notifier: StaffNotifier = Depends(get_staff_notifier),
):
    player = None
    if body.player_id is not None:
        player = await player_service.get_player(db, body.player_id)
        if player is None:
            raise HTTPException(status_code=404, detail=f"Player {body.player_id} not found")

    inputs = PromotionInputs(**body.model_dump(exclude={"player_id"}))
    try:
        result = await submit_review_request(db, notifier, inputs, player=player)
    except StaffNotificationError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {"ok": True, "requestId": str(result["request_id"]), "data": result}


@router.get("/{request_id}")
async def get_review_request(request_id: int, db: AsyncSession = Depends(get_db)):
    try:
        request = await require_review_request(db, request_id)
    except ReviewRequestNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {
        "ok": True,
        "data": {
            "id": request.id,
            "rsn": request.rsn,
            "requested_rank": request.requested_rank,
            "requested_role": request.requested_role,
            "status": request.status,
            "decided_at": request.decided_at.isoformat() if request.decided_at else None,
            "decided_by_discord_id": request.decided_by_discord_id,
            "checks": [c.to_dict() for c in build_checks(inputs_from_request(request))],
        },
    }
