"""Integration tests for submitting and deciding promotion review requests."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from osrs_common.db.models import ReviewRequest
from osrs_common.discord.staff_review import StaffNotificationError
from osrs_common.promotion.review_service import (
    DecisionOutcome,
    ReviewAction,
    ReviewStatus,
    apply_decision,
)

pytestmark = pytest.mark.asyncio(loop_scope="session")


def _request_body(player=None, **overrides) -> dict:
    body = {
        "rsn": "Iron Tester",
        "requested_rank": "Hellcat",
        "requested_role": "Hellcat",
        "requester_discord_id": "222222222222222222",
    }
    if player is not None:
        body["player_id"] = player.id
    body.update(overrides)
    return body


async def _checklist_worth_300(client: AsyncClient, player) -> None:
    await client.put(
        f"/api/v1/players/{player.id}/checklist",
        json={"items": {"twisted_bow": True, "kodai_wand": True, "elder_maul": True}},
    )


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


async def test_submit_uses_stored_checklist(client: AsyncClient, player, mock_notifier):
    await _checklist_worth_300(client, player)

    response = await client.post(
        "/api/v1/review-requests",
        json=_request_body(player, item_points_earned=9999, item_qualified_rank_label="Beast"),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["data"]["status"] == "pending"
    assert body["requestId"] == str(body["data"]["request_id"])

    request_id, lines = mock_notifier.posted[0]
    assert request_id == body["data"]["request_id"]
    assert "• **Item points:** 300 / 500" in lines
    assert "• **Item qualified:** Hellcat (Next: Imp)" in lines
    assert "• **Item request check:** ✅ matches qualified" in lines
    assert lines[-1] == f"Request ID: `{request_id}`"


async def test_submit_without_player_uses_client_fields(client: AsyncClient, mock_notifier):
    response = await client.post(
        "/api/v1/review-requests",
        json=_request_body(
            requested_rank="Zamorakian",
            requested_role="Zamorakian",
            raids_total=3200,
            boss_kills_total=1000,
        ),
    )

    assert response.status_code == 200
    checks = response.json()["data"]["checks"]
    assert checks == [{
        "label": "Zamorakian check",
        "status": "matches_qualified",
        "detail": "Raids 3,200/3,000 • Bossing 1,000/35,000 • needs ONE",
        "missing_input": False,
    }]


async def test_submit_unknown_player(client: AsyncClient):
    response = await client.post("/api/v1/review-requests", json=_request_body(player_id=999999))
    assert response.status_code == 404


async def test_submit_rejects_negative_totals(client: AsyncClient):
    response = await client.post("/api/v1/review-requests", json=_request_body(total_level=-5))
    assert response.status_code == 422


async def test_submit_staff_channel_failure(client: AsyncClient, db_session: AsyncSession, mock_notifier):
    mock_notifier.post_review.side_effect = StaffNotificationError("Staff channel is not configured")
    response = await client.post("/api/v1/review-requests", json=_request_body())
    assert response.status_code == 502

    remaining = await db_session.scalar(select(func.count()).select_from(ReviewRequest))
    assert remaining == 0


# ---------------------------------------------------------------------------
# Decision
# ---------------------------------------------------------------------------


async def test_decision_applies_once(client: AsyncClient, db_session: AsyncSession, player):
    response = await client.post("/api/v1/review-requests", json=_request_body(player))
    request_id = response.json()["data"]["request_id"]

    first = await apply_decision(db_session, request_id, ReviewAction.APPROVE, decided_by="333")
    assert first.outcome is DecisionOutcome.APPLIED
    assert first.request.status == "approved"
    assert first.request.decided_by_discord_id == "333"

    second = await apply_decision(db_session, request_id, ReviewAction.DENY, decided_by="444")
    assert second.outcome is DecisionOutcome.ALREADY_DECIDED
    assert second.status is ReviewStatus.APPROVED

    data = (await client.get(f"/api/v1/review-requests/{request_id}")).json()["data"]
    assert data["status"] == "approved"
    assert data["decided_by_discord_id"] == "333"
    assert data["decided_at"] is not None


async def test_decision_on_missing_request(db_session: AsyncSession):
    decision = await apply_decision(db_session, 999999, ReviewAction.DENY)
    assert decision.outcome is DecisionOutcome.NOT_FOUND


async def test_get_missing_request(client: AsyncClient):
    response = await client.get("/api/v1/review-requests/999999")
    assert response.status_code == 404
