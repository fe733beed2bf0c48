"""Rank calculator orchestration: tracker data → reconcile → merge → evaluate."""

import logging
from typing import Mapping, Optional

from osrs_common.catalog.items import DEFAULT_CATALOG, ItemCatalog
from osrs_common.ranks.pvm import RankEvaluation, evaluate_pvm_rank
from osrs_common.ranks.skilling import evaluate_skilling_rank
from osrs_common.reconcile.runner import (
    ReconcileReport,
    merge_into_checklist,
    reconcile_item_names,
)
from osrs_common.trackers.base import TrackerError
from osrs_common.trackers.temple_client import CollectionLogSnapshot, TempleClient
from osrs_common.trackers.wom_client import (
    WiseOldManClient,
    extract_total_level,
    partition_pvm_totals,
)

logger = logging.getLogger(__name__)


def validate_checklist(
    checklist: Mapping[str, bool],
    catalog: ItemCatalog = DEFAULT_CATALOG,
) -> dict[str, bool]:
    """Reject ids the catalog does not know; coerce values to bool."""
    unknown = sorted(k for k in checklist if k not in catalog)
    if unknown:
        raise ValueError(f"Unknown item ids: {', '.join(unknown)}")
    return {k: bool(v) for k, v in checklist.items()}


def evaluate_checklist(
    checklist: Mapping[str, bool],
    catalog: ItemCatalog = DEFAULT_CATALOG,
) -> RankEvaluation:
    # Ids outside the catalog never count; they are not an error here
    return evaluate_pvm_rank(dict(checklist), catalog)


def reconcile_and_merge(
    names: list[str],
    checklist: Optional[Mapping[str, bool]] = None,
    quantities: Optional[Mapping[str, int]] = None,
    catalog: ItemCatalog = DEFAULT_CATALOG,
) -> tuple[ReconcileReport, dict[str, bool]]:
    report = reconcile_item_names(names, catalog, quantities=quantities)
    merged = merge_into_checklist(checklist or {}, report.matched_ids)
    return report, merged


async def sync_from_temple(
    temple: TempleClient,
    rsn: str,
    checklist: Mapping[str, bool],
) -> tuple[CollectionLogSnapshot, ReconcileReport, dict[str, bool]]:
    """Fetch the collection log and merge its items into a checklist copy.

    TrackerError propagates; the caller decides how to surface it.
    """
    snapshot = await temple.get_collection_log(rsn)
    report, merged = reconcile_and_merge(
        snapshot.item_names, checklist, quantities=snapshot.quantities
    )
    newly_checked = sorted(k for k, v in merged.items() if v and not checklist.get(k))
    logger.info(
        "Temple sync for %s: %d matched, %d newly checked, %d unmatched",
        rsn, len(report.matched_ids), len(newly_checked), len(report.unmatched_names),
    )
    return snapshot, report, merged


async def refresh_from_wom(wom: WiseOldManClient, rsn: str) -> dict:
    """Ask Wise Old Man for fresh hiscores and summarise the updated player.

    TrackerError propagates.
    """
    player = await wom.update_player(rsn)
    total_level = extract_total_level(player)
    logger.info("WOM update for %s: total level %s", rsn, total_level)
    return {
        "rsn": rsn,
        "total_level": total_level,
        "skilling": evaluate_skilling_rank(total_level).to_dict() if total_level is not None else None,
        "pvm_totals": partition_pvm_totals(player).to_dict(),
    }


async def build_calculator_view(
    rsn: str,
    checklist: Mapping[str, bool],
    wom: Optional[WiseOldManClient] = None,
    temple: Optional[TempleClient] = None,
) -> dict:
    """
    Everything the calculator page shows for one player.

    Tracker failures do not fail the view: the affected section is null
    and a warning is added, matching how staff verify by hand.
    """
    evaluation = evaluate_checklist(checklist)
    warnings: list[str] = []

    total_level = None
    pvm_totals = None
    if wom is not None:
        try:
            player = await wom.get_player(rsn)
            total_level = extract_total_level(player)
            pvm_totals = partition_pvm_totals(player).to_dict()
        except TrackerError as exc:
            logger.warning("WOM lookup failed for %s: %s", rsn, exc)
            warnings.append(f"Wise Old Man unavailable ({exc.status_code or 'network'})")

    temple_totals = None
    if temple is not None:
        try:
            temple_totals = (await temple.get_collection_log(rsn)).to_dict()
        except TrackerError as exc:
            logger.warning("Temple lookup failed for %s: %s", rsn, exc)
            warnings.append(f"TempleOSRS unavailable ({exc.status_code or 'network'})")

    return {
        "rsn": rsn,
        "pvm": evaluation.to_dict(),
        "skilling": evaluate_skilling_rank(total_level).to_dict() if total_level is not None else None,
        "pvm_totals": pvm_totals,
        "temple": temple_totals,
        "warnings": warnings,
    }
