"""
Rule 3: Composite Rule

Fires when every required part of a combined item is present.  A part
may list several spellings (charge states); any one of them satisfies it.
"""

from typing import Iterable

from .base import ReconcileContext, RuleResult
from .lookup import variant_key
from .tables import REQUIRES_ALL, CompositeRule as CompositeDefinition


def is_satisfied(rule: CompositeDefinition, context: ReconcileContext) -> bool:
    return all(
        any(context.has(spelling) for spelling in part) for part in rule.parts
    )


def consumed_keys(
    context: ReconcileContext,
    rules: Iterable[CompositeDefinition] = REQUIRES_ALL,
) -> set[str]:
    """Variant keys of the part names swallowed by composites whose parts are all present."""
    keys: set[str] = set()
    for rule in rules:
        if rule.consumes and is_satisfied(rule, context):
            keys.update(variant_key(n) for n in rule.consumes)
    return keys


class CompositeRule:
    name = "composite"
    description = "Credit a combined item when all of its parts are present"
    order = 30

    def __init__(self, rules=REQUIRES_ALL):
        self.rules = rules

    def run(self, context: ReconcileContext) -> RuleResult:
        result = RuleResult(rule_name=self.name)
        for rule in self.rules:
            if not is_satisfied(rule, context):
                continue
            source = " + ".join(part[0] for part in rule.parts)
            match = context.lookup.find_any(rule.targets)
            context.add(result, match, source)
            if match.resolved_id:
                context.mark_used(spelling for part in rule.parts for spelling in part)
        return result
