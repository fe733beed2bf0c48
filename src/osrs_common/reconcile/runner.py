"""
Reconciliation runner.

Runs every registered rule once, in order, over a single context built
from the tracker's name list.  Rules only add ids, so one pass is enough;
the result is a pure function of the names, quantities and catalog.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, Mapping, Optional

from osrs_common.catalog.items import DEFAULT_CATALOG, ItemCatalog

from . import get_registered_rules
from .base import ReconcileContext, RuleResult
from .composite_rule import consumed_keys
from .lookup import CatalogLookup, normalize_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileReport:
    matched_ids: frozenset[str]
    unmatched_names: tuple[str, ...] = ()
    results: tuple[RuleResult, ...] = field(default=(), compare=False)

    @property
    def ambiguous(self) -> int:
        return sum(r.ambiguous for r in self.results)

    def to_dict(self) -> dict:
        return {
            "matched_ids": sorted(self.matched_ids),
            "unmatched_names": list(self.unmatched_names),
            "ambiguous": self.ambiguous,
            "rules": [
                {
                    "rule": r.rule_name,
                    "ids_added": list(r.ids_added),
                    "ambiguous": r.ambiguous,
                    "details": list(r.details),
                }
                for r in self.results
            ],
        }


@lru_cache(maxsize=8)
def lookup_for(catalog: ItemCatalog) -> CatalogLookup:
    """One normalized index per catalog instance."""
    return CatalogLookup(catalog)


def build_context(
    names: Iterable[str],
    lookup: CatalogLookup,
    quantities: Optional[Mapping[str, int]] = None,
) -> ReconcileContext:
    """
    Count every raw name under its normalized key.

    Each occurrence contributes its quantity (default 1), so a tracker
    that reports "Zenyte shard" once with quantity 4 and one that lists
    it four times give the same count.
    """
    raw_names = [n for n in names if n and str(n).strip()]
    quantities = quantities or {}

    counts: Counter = Counter()
    for raw in raw_names:
        qty = quantities.get(raw, 1)
        if qty and qty > 0:
            counts[normalize_name(raw)] += int(qty)

    context = ReconcileContext(raw_names=raw_names, counts=dict(counts), lookup=lookup)
    context.consumed = consumed_keys(context)
    return context


def reconcile_item_names(
    names: Iterable[str],
    catalog: ItemCatalog = DEFAULT_CATALOG,
    quantities: Optional[Mapping[str, int]] = None,
    rules: Optional[list] = None,
) -> ReconcileReport:
    """Map free-form tracker item names onto catalog ids.

    Never raises for unknown or ambiguous names; they are reported in the
    returned ReconcileReport and otherwise dropped.
    """
    context = build_context(names, lookup_for(catalog), quantities)
    results: list[RuleResult] = []

    for rule in rules if rules is not None else get_registered_rules():
        result = rule.run(context)
        results.append(result)
        if result.changed_anything:
            logger.debug("Rule %s added %s", result.rule_name, result.ids_added)

    report = ReconcileReport(
        matched_ids=frozenset(context.matched_ids),
        unmatched_names=tuple(
            n for n in context.unmatched_names if normalize_name(n) not in context.used
        ),
        results=tuple(results),
    )
    logger.info(
        "Reconciled %d tracker name(s): %d matched id(s), %d unmatched, %d ambiguous",
        len(context.raw_names),
        len(report.matched_ids),
        len(report.unmatched_names),
        report.ambiguous,
    )
    return report


def merge_into_checklist(
    checklist: Mapping[str, bool],
    item_ids: Iterable[str],
) -> dict[str, bool]:
    """
    Return a new checklist with item_ids marked owned.

    An id the player explicitly set to False stays False; everything else
    is left as-is or set to True.
    """
    merged = dict(checklist)
    for item_id in sorted(set(item_ids)):
        if merged.get(item_id) is False:
            continue
        merged[item_id] = True
    return merged
