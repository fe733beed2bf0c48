"""PvM rank rules — base requirement, item points, and the Infernal Cape gate."""

from dataclasses import dataclass
from typing import Optional

from osrs_common.catalog.items import (
    BASE_REQUIREMENTS,
    DEFAULT_CATALOG,
    ItemCatalog,
    Requirement,
)

# Hard gate for the top three ranks
CAPABILITY_ITEM_ID = "infernal_cape"


@dataclass(frozen=True)
class RankDefinition:
    id: str
    label: str
    threshold_points: Optional[int] = None
    requires_base: bool = True
    requires_capability: bool = False


# Ordered ascending; list order is the rank order.
PVM_RANKS: tuple[RankDefinition, ...] = (
    RankDefinition("bob", "Bob"),
    RankDefinition("hellcat", "Hellcat", threshold_points=250),
    RankDefinition("imp", "Imp", threshold_points=500),
    RankDefinition("goblin", "Goblin", threshold_points=1000),
    RankDefinition("skulled", "Skulled", threshold_points=1500),
    RankDefinition("soul", "Soul", threshold_points=2000),
    RankDefinition("gnome_child", "Gnome Child", threshold_points=2400, requires_capability=True),
    RankDefinition("wrath", "Wrath", threshold_points=2800, requires_capability=True),
    RankDefinition("beast", "Beast", threshold_points=3200, requires_capability=True),
)


@dataclass(frozen=True)
class RankEvaluation:
    base_ok: bool
    base_missing_item_ids: tuple[str, ...]
    points_earned: int
    points_max: int
    capability_flag_satisfied: bool
    qualified_rank: RankDefinition
    next_rank: Optional[RankDefinition]

    @property
    def next_threshold(self) -> Optional[int]:
        return self.next_rank.threshold_points if self.next_rank else None

    @property
    def next_rank_locked(self) -> bool:
        """True when the next rank is blocked by the capability gate."""
        return bool(
            self.next_rank
            and self.next_rank.requires_capability
            and not self.capability_flag_satisfied
        )

    def progress_to_next(self) -> float:
        """Fraction of the next rank's point threshold earned, clamped to [0, 1]."""
        threshold = self.next_threshold
        if not threshold:
            return 1.0
        return max(0.0, min(1.0, self.points_earned / threshold))

    def to_dict(self) -> dict:
        return {
            "base_ok": self.base_ok,
            "base_missing_item_ids": list(self.base_missing_item_ids),
            "points_earned": self.points_earned,
            "points_max": self.points_max,
            "capability_flag_satisfied": self.capability_flag_satisfied,
            "qualified_rank": _rank_dict(self.qualified_rank),
            "next_rank": _rank_dict(self.next_rank) if self.next_rank else None,
            "next_rank_locked": self.next_rank_locked,
            "progress_to_next": self.progress_to_next(),
        }


def _rank_dict(rank: RankDefinition) -> dict:
    return {
        "id": rank.id,
        "label": rank.label,
        "threshold_points": rank.threshold_points,
        "requires_base": rank.requires_base,
        "requires_capability": rank.requires_capability,
    }


def compute_base_requirement(
    checklist: dict[str, bool],
    requirements: tuple[Requirement, ...] = BASE_REQUIREMENTS,
) -> tuple[bool, list[str]]:
    """Return (ok, missing_ids) across every base requirement."""
    missing: list[str] = []
    for req in requirements:
        ok, req_missing = req.evaluate(checklist)
        if not ok:
            missing.extend(req_missing)
    return not missing, missing


def compute_points(checklist: dict[str, bool], catalog: ItemCatalog = DEFAULT_CATALOG) -> tuple[int, int]:
    """Return (earned, max) over all point-bearing catalog items."""
    earned = 0
    total = 0
    for it in catalog.list_items():
        if it.points is None:
            continue
        total += it.points
        if checklist.get(it.id):
            earned += it.points
    return earned, total


def evaluate_pvm_rank(
    checklist: dict[str, bool],
    catalog: ItemCatalog = DEFAULT_CATALOG,
    ranks: tuple[RankDefinition, ...] = PVM_RANKS,
    requirements: tuple[Requirement, ...] = BASE_REQUIREMENTS,
    capability_item_id: str = CAPABILITY_ITEM_ID,
) -> RankEvaluation:
    """Evaluate a checklist against the PvM rank table.

    Every rank is checked in order (no early exit); the last one whose
    gates all hold is the qualified rank.  The first rank is returned when
    nothing qualifies, so there is always a result.
    """
    base_ok, base_missing = compute_base_requirement(checklist, requirements)
    earned, total = compute_points(checklist, catalog)
    capability_ok = capability_item_id in catalog and bool(checklist.get(capability_item_id))

    qualified_idx = 0
    for idx, rank in enumerate(ranks):
        if rank.requires_base and not base_ok:
            continue
        if rank.threshold_points is not None and earned < rank.threshold_points:
            continue
        if rank.requires_capability and not capability_ok:
            continue
        qualified_idx = idx

    next_rank = ranks[qualified_idx + 1] if qualified_idx + 1 < len(ranks) else None

    return RankEvaluation(
        base_ok=base_ok,
        base_missing_item_ids=tuple(base_missing),
        points_earned=earned,
        points_max=total,
        capability_flag_satisfied=capability_ok,
        qualified_rank=ranks[qualified_idx],
        next_rank=next_rank,
    )


def rank_index(rank_id: str, ranks: tuple[RankDefinition, ...] = PVM_RANKS) -> int:
    for idx, rank in enumerate(ranks):
        if rank.id == rank_id:
            return idx
    raise ValueError(f"Unknown PvM rank {rank_id!r}")
