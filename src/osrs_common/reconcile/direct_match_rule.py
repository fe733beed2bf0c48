"""
Rule 1: Direct Match Rule

Maps each tracker name onto the catalog on its own: alias table first,
then the normalized-name index, then the safe fuzzy fallback.  Names a
composite rule has absorbed are skipped.  Names that only count towards
a threshold rule get the exact lookup but never the fuzzy fallback.
"""

import logging

from .base import MatchResult, ReconcileContext, RuleResult
from .lookup import normalize_name, variant_key
from .tables import ALIASES, COUNT_THRESHOLDS

logger = logging.getLogger(__name__)

# Items that only unlock in bulk; never fuzzy-matched
_COUNT_ONLY_KEYS = frozenset(
    normalize_name(source) for rule in COUNT_THRESHOLDS for source in rule.sources
)


class DirectMatchRule:
    name = "direct_match"
    description = "Match each tracker name through the alias table and catalog index"
    order = 10

    def run(self, context: ReconcileContext) -> RuleResult:
        result = RuleResult(rule_name=self.name)
        seen: set[str] = set()

        for raw in context.raw_names:
            key = normalize_name(raw)
            raw_key = variant_key(raw)
            if not key or raw_key in seen:
                continue
            seen.add(raw_key)

            if raw_key in context.consumed:
                result.details.append(f"{raw}: consumed by a composite")
                continue

            canonical = ALIASES.get(key, raw)
            if key in _COUNT_ONLY_KEYS:
                item_id = context.lookup.find_id(canonical)
                if item_id is None:
                    result.details.append(f"{raw}: left to the count rule")
                    continue
                match = MatchResult.matched(item_id)
            else:
                match = context.lookup.find_any([canonical])
            if match.resolved_id is None:
                context.unmatched_names.append(raw)
            context.add(result, match, raw)

        logger.debug(
            "direct_match: %d id(s) added, %d unmatched, %d ambiguous",
            len(result.ids_added),
            len(context.unmatched_names),
            result.ambiguous,
        )
        return result
