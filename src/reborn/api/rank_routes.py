"""Rank structure: the static tables behind every evaluation.

    GET /api/v1/ranks/structure
"""

from fastapi import APIRouter

from osrs_common.catalog.items import BASE_REQUIREMENTS, get_catalog
from osrs_common.promotion.checks import SPECIAL_REQ, ZAM_TARGET_BOSS_KC, ZAM_TARGET_RAIDS
from osrs_common.ranks.pvm import CAPABILITY_ITEM_ID, PVM_RANKS
from osrs_common.ranks.skilling import SKILLING_RANKS

router = APIRouter(prefix="/api/v1/ranks", tags=["ranks"])


@router.get("/structure")
async def rank_structure():
    catalog = get_catalog()
    return {
        "ok": True,
        "data": {
            "groups": [
                {
                    "name": group,
                    "items": [
                        {"id": it.id, "name": it.name, "points": it.points, "notes": it.notes}
                        for it in items
                    ],
                }
                for group, items in catalog.groups().items()
            ],
            "points_max": catalog.points_max(),
            "base_requirements": [
                {"type": r.type, "label": r.label, "item_ids": list(r.item_ids)}
                for r in BASE_REQUIREMENTS
            ],
            "capability_item_id": CAPABILITY_ITEM_ID,
            "pvm_ranks": [
                {
                    "id": r.id,
                    "label": r.label,
                    "threshold_points": r.threshold_points,
                    "requires_base": r.requires_base,
                    "requires_capability": r.requires_capability,
                }
                for r in PVM_RANKS
            ],
            "skilling_ranks": [
                {"id": r.id, "label": r.label, "total_level_required": r.total_level_required}
                for r in SKILLING_RANKS
            ],
            "zamorakian": {"raids": ZAM_TARGET_RAIDS, "boss_kills": ZAM_TARGET_BOSS_KC},
            "special": {
                label: {"pets": req.pets, "collection_log": req.clog}
                for label, req in SPECIAL_REQ.items()
            },
        },
    }
