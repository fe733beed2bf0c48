"""Stateless calculator routes.

    POST /api/v1/calculator/evaluate
    POST /api/v1/calculator/reconcile
    GET  /api/v1/calculator/skilling?total_level=N
"""

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from osrs_common.ranks.skilling import evaluate_skilling_rank
from reborn.services import calculator_service

router = APIRouter(prefix="/api/v1/calculator", tags=["calculator"])


class EvaluateBody(BaseModel):
    checklist: dict[str, bool] = Field(default_factory=dict)


class ReconcileBody(BaseModel):
    names: list[str]
    quantities: dict[str, int] | None = None
    checklist: dict[str, bool] | None = None


@router.post("/evaluate")
async def evaluate(body: EvaluateBody):
    try:
        checklist = calculator_service.validate_checklist(body.checklist)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    evaluation = calculator_service.evaluate_checklist(checklist)
    return {"ok": True, "data": evaluation.to_dict()}


@router.post("/reconcile")
async def reconcile(body: ReconcileBody):
    report, merged = calculator_service.reconcile_and_merge(
        body.names, body.checklist, quantities=body.quantities
    )
    return {
        "ok": True,
        "data": {
            **report.to_dict(),
            "checklist": merged,
        },
    }


@router.get("/skilling")
async def skilling(total_level: int = Query(..., ge=0)):
    return {"ok": True, "data": evaluate_skilling_rank(total_level).to_dict()}
