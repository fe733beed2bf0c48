"""
Base types for the reconciliation rule system.

MatchResult      — tri-state outcome of a catalog lookup
RuleResult       — what one rule produced
ReconcileContext — shared state for one reconciliation run
ReconcileRule    — Protocol defining the interface every rule must implement
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from .lookup import CatalogLookup


class MatchStatus(str, Enum):
    MATCHED = "matched"
    NO_MATCH = "no_match"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class MatchResult:
    status: MatchStatus
    item_id: Optional[str] = None
    candidates: tuple[str, ...] = ()

    @classmethod
    def matched(cls, item_id: str) -> "MatchResult":
        return cls(MatchStatus.MATCHED, item_id, (item_id,))

    @classmethod
    def no_match(cls) -> "MatchResult":
        return cls(MatchStatus.NO_MATCH)

    @classmethod
    def ambiguous(cls, candidates) -> "MatchResult":
        return cls(MatchStatus.AMBIGUOUS, None, tuple(candidates))

    @property
    def resolved_id(self) -> Optional[str]:
        """The matched id; ambiguous and missing both collapse to None."""
        return self.item_id if self.status is MatchStatus.MATCHED else None


@dataclass
class RuleResult:
    """What a single rule produced in one run."""

    rule_name: str
    ids_added: list[str] = field(default_factory=list)
    ambiguous: int = 0
    details: list[str] = field(default_factory=list)

    @property
    def changed_anything(self) -> bool:
        return bool(self.ids_added)


@dataclass
class ReconcileContext:
    """Shared state for a reconciliation run."""

    # Raw tracker names, in input order
    raw_names: list[str]

    # normalized name → summed quantity
    counts: dict[str, int]

    lookup: "CatalogLookup"

    # Variant keys (see variant_key) absorbed by a composite rule that fired
    consumed: set[str] = field(default_factory=set)

    # Accumulating output; rules only ever add
    matched_ids: set[str] = field(default_factory=set)

    # Raw names the direct-match rule could not place
    unmatched_names: list[str] = field(default_factory=list)

    # Normalized names a later rule turned into an item
    used: set[str] = field(default_factory=set)

    def count(self, name: str) -> int:
        from .lookup import normalize_name

        return self.counts.get(normalize_name(name), 0)

    def has(self, name: str) -> bool:
        return self.count(name) > 0

    def count_any(self, names) -> int:
        from .lookup import normalize_name

        # Synonym spellings can normalize to the same key; count each key once
        keys = {normalize_name(n) for n in names}
        return sum(self.counts.get(k, 0) for k in keys)

    def mark_used(self, names) -> None:
        from .lookup import normalize_name

        self.used.update(normalize_name(n) for n in names if self.has(n))

    def add(self, result: RuleResult, match: MatchResult, source: str) -> None:
        """Record a rule's match into the context and its RuleResult."""
        item_id = match.resolved_id
        if item_id is None:
            if match.status is MatchStatus.AMBIGUOUS:
                result.ambiguous += 1
                result.details.append(f"{source}: ambiguous {list(match.candidates)}")
            return
        if item_id not in self.matched_ids:
            self.matched_ids.add(item_id)
            result.ids_added.append(item_id)


class ReconcileRule(Protocol):
    """Interface every reconciliation rule must satisfy."""

    name: str           # short identifier used in results & logs
    description: str    # human-readable summary
    order: int          # lower = runs first

    def run(self, context: ReconcileContext) -> RuleResult:
        """Add matched ids to context.matched_ids and return what was added."""
        ...
