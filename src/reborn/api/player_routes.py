"""Player profile routes.

    GET    /api/v1/players
    POST   /api/v1/players
    GET    /api/v1/players/{id}
    DELETE /api/v1/players/{id}
    GET    /api/v1/players/{id}/checklist
    PUT    /api/v1/players/{id}/checklist
    POST   /api/v1/players/{id}/temple-sync
    POST   /api/v1/players/{id}/wom-update
    GET    /api/v1/players/{id}/calculator
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from osrs_common.db.models import PlayerProfile
from osrs_common.trackers.base import TrackerError
from osrs_common.trackers.temple_client import TempleClient
from osrs_common.trackers.wom_client import WiseOldManClient
from reborn.deps import get_db, get_temple_client, get_wom_client
from reborn.services import calculator_service, player_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/players", tags=["players"])


class PlayerCreate(BaseModel):
    rsn: str = Field(min_length=1, max_length=12)
    discord_id: str | None = None
    join_date: date | None = None
    scaling: str | None = None


class ChecklistUpdate(BaseModel):
    # Partial: only the ids present are changed; False is a manual uncheck
    items: dict[str, bool]
    replace: bool = False


def _player_dict(player: PlayerProfile) -> dict:
    return {
        "id": player.id,
        "rsn": player.rsn,
        "discord_id": player.discord_id,
        "join_date": player.join_date.isoformat() if player.join_date else None,
        "scaling": player.scaling,
        "checked_items": sum(1 for v in (player.checklist or {}).values() if v),
        "temple_synced_at": player.temple_synced_at.isoformat() if player.temple_synced_at else None,
    }


async def _require_player(db: AsyncSession, player_id: int) -> PlayerProfile:
    player = await player_service.get_player(db, player_id)
    if player is None:
        raise HTTPException(status_code=404, detail=f"Player {player_id} not found")
    return player


@router.get("")
async def list_players(db: AsyncSession = Depends(get_db)):
    players = await player_service.list_players(db)
    return {"ok": True, "data": [_player_dict(p) for p in players]}


@router.post("")
async def create_player(body: PlayerCreate, db: AsyncSession = Depends(get_db)):
    try:
        player = await player_service.create_player(
            db,
            rsn=body.rsn,
            discord_id=body.discord_id,
            join_date=body.join_date,
            scaling=body.scaling,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "data": _player_dict(player)}


@router.get("/{player_id}")
async def get_player(player_id: int, db: AsyncSession = Depends(get_db)):
    player = await _require_player(db, player_id)
    return {"ok": True, "data": _player_dict(player)}


@router.delete("/{player_id}")
async def delete_player(player_id: int, db: AsyncSession = Depends(get_db)):
    deleted = await player_service.delete_player(db, player_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Player {player_id} not found")
    return {"ok": True, "data": {"deleted": True}}


@router.get("/{player_id}/checklist")
async def get_checklist(player_id: int, db: AsyncSession = Depends(get_db)):
    player = await _require_player(db, player_id)
    return {"ok": True, "data": {"checklist": dict(player.checklist or {})}}


@router.put("/{player_id}/checklist")
async def update_checklist(
    player_id: int,
    body: ChecklistUpdate,
    db: AsyncSession = Depends(get_db),
):
    player = await _require_player(db, player_id)
    try:
        updates = calculator_service.validate_checklist(body.items)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    checklist = {} if body.replace else dict(player.checklist or {})
    checklist.update(updates)
    await player_service.save_checklist(db, player, checklist)
    evaluation = calculator_service.evaluate_checklist(checklist)
    return {"ok": True, "data": {"checklist": checklist, "evaluation": evaluation.to_dict()}}


@router.post("/{player_id}/temple-sync")
async def temple_sync(
    player_id: int,
    db: AsyncSession = Depends(get_db),
    temple: TempleClient = Depends(get_temple_client),
):
    player = await _require_player(db, player_id)
    before = dict(player.checklist or {})
    try:
        snapshot, report, merged = await calculator_service.sync_from_temple(
            temple, player.rsn, before
        )
    except TrackerError as e:
        raise HTTPException(status_code=502, detail=f"TempleOSRS request failed: {e}")

    await player_service.save_checklist(db, player, merged, from_temple=True)
    newly_checked = sorted(k for k, v in merged.items() if v and not before.get(k))
    return {
        "ok": True,
        "data": {
            "temple": snapshot.to_dict(),
            "reconcile": report.to_dict(),
            "newly_checked": newly_checked,
            "checklist": merged,
            "evaluation": calculator_service.evaluate_checklist(merged).to_dict(),
        },
    }


@router.post("/{player_id}/wom-update")
async def wom_update(
    player_id: int,
    db: AsyncSession = Depends(get_db),
    wom: WiseOldManClient = Depends(get_wom_client),
):
    player = await _require_player(db, player_id)
    try:
        refreshed = await calculator_service.refresh_from_wom(wom, player.rsn)
    except TrackerError as e:
        raise HTTPException(status_code=502, detail=f"Wise Old Man request failed: {e}")
    return {"ok": True, "data": refreshed}


@router.get("/{player_id}/calculator")
async def calculator_view(
    player_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    player = await _require_player(db, player_id)
    view = await calculator_service.build_calculator_view(
        player.rsn,
        player.checklist or {},
        wom=getattr(request.app.state, "wom_client", None),
        temple=getattr(request.app.state, "temple_client", None),
    )
    return {"ok": True, "data": {"player": _player_dict(player), **view}}
