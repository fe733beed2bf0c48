"""
Rule 2: Part Implies Rule

Owning a component (a godsword hilt, a Nightmare orb) means the finished
item was made at some point.  A target is credited only when exactly one
catalog item answers to the rule's candidate names.
"""

from .base import ReconcileContext, RuleResult
from .tables import PART_IMPLIES


class PartImpliesRule:
    name = "part_implies"
    description = "Credit the finished item for a tracked component"
    order = 20

    def __init__(self, rules=PART_IMPLIES):
        self.rules = rules

    def run(self, context: ReconcileContext) -> RuleResult:
        result = RuleResult(rule_name=self.name)
        for rule in self.rules:
            if not context.has(rule.part):
                continue
            match = context.lookup.find_any(rule.targets)
            context.add(result, match, rule.part)
            if match.resolved_id:
                context.mark_used([rule.part])
        return result
