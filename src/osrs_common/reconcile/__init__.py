"""
Reconciliation rules package.

Rules are executed in order (lowest order first) by the runner and only
ever add ids.  Adding a new pattern means:
  1. Create a new rule class in a new file
  2. Import it here and add it to get_registered_rules()
"""

from .composite_rule import CompositeRule
from .count_threshold_rule import CountThresholdRule
from .direct_match_rule import DirectMatchRule
from .part_implies_rule import PartImpliesRule


def get_registered_rules() -> list:
    """Return all reconciliation rules sorted by execution order."""
    return sorted(
        [
            CountThresholdRule(),
            CompositeRule(),
            PartImpliesRule(),
            DirectMatchRule(),
        ],
        key=lambda r: r.order,
    )
