"""Skilling rank rules — ranks by total level alone."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SkillingRankDefinition:
    id: str
    label: str
    total_level_required: int


# Ordered ascending; the first entry must require 0 so a rank always exists.
SKILLING_RANKS: tuple[SkillingRankDefinition, ...] = (
    SkillingRankDefinition("unranked", "Unranked", 0),
    SkillingRankDefinition("emerald", "Emerald", 1000),
    SkillingRankDefinition("onyx", "Onyx", 1500),
    SkillingRankDefinition("zenyte", "Zenyte", 2000),
    SkillingRankDefinition("maxed", "Maxed", 2376),
)


@dataclass(frozen=True)
class SkillingEvaluation:
    total_level: int
    qualified: SkillingRankDefinition
    next: Optional[SkillingRankDefinition]

    def to_dict(self) -> dict:
        return {
            "total_level": self.total_level,
            "qualified": {"id": self.qualified.id, "label": self.qualified.label,
                          "total_level_required": self.qualified.total_level_required},
            "next": (
                {"id": self.next.id, "label": self.next.label,
                 "total_level_required": self.next.total_level_required}
                if self.next else None
            ),
        }


def evaluate_skilling_rank(
    total_level: int,
    ranks: tuple[SkillingRankDefinition, ...] = SKILLING_RANKS,
) -> SkillingEvaluation:
    qualified_idx = 0
    for idx, rank in enumerate(ranks):
        if total_level >= rank.total_level_required:
            qualified_idx = idx
    next_rank = ranks[qualified_idx + 1] if qualified_idx + 1 < len(ranks) else None
    return SkillingEvaluation(total_level=total_level, qualified=ranks[qualified_idx], next=next_rank)


def skilling_requirements(
    ranks: tuple[SkillingRankDefinition, ...] = SKILLING_RANKS,
) -> dict[str, int]:
    """Label → total level for every tier above the zero-requirement entry."""
    return {r.label: r.total_level_required for r in ranks if r.total_level_required > 0}
