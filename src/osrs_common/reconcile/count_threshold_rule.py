"""
Rule 4: Count Threshold Rule

Sums the quantity of a source item across its synonym spellings; at or
above the minimum, every target in the rule is credited.
"""

from .base import ReconcileContext, RuleResult
from .tables import COUNT_THRESHOLDS


class CountThresholdRule:
    name = "count_threshold"
    description = "Credit items unlocked by collecting enough of a source item"
    order = 40

    def __init__(self, rules=COUNT_THRESHOLDS):
        self.rules = rules

    def run(self, context: ReconcileContext) -> RuleResult:
        result = RuleResult(rule_name=self.name)
        for rule in self.rules:
            total = context.count_any(rule.sources)
            if total < rule.minimum:
                continue
            for target in rule.targets:
                context.add(
                    result,
                    context.lookup.find_any([target]),
                    f"{rule.sources[0]} x{total}",
                )
            context.mark_used(rule.sources)
        return result
