"""
Catalog lookup for tracker item names.

normalize_name() folds a free-form tracker name onto the form used to
index the catalog.  CatalogLookup answers exact lookups and a safe fuzzy
fallback: a fuzzy hit is only accepted when exactly one catalog item
contains every token of the needle.
"""

import re
from typing import Iterable, Optional

from osrs_common.catalog.items import ItemCatalog

from .base import MatchResult

# Variant-state suffixes that do not change which item the player owns
_VARIANT_SUFFIXES = re.compile(
    r"\((?:f|u|uncharged|broken|damaged|active|inactive)\)"
)


def variant_key(name: str) -> str:
    """Like normalize_name() but keeps variant suffixes as a token.

    "Craw's bow (u)" → "craws bow u", distinct from the finished "craws bow".
    """
    if not name:
        return ""
    key = re.sub(r"['’]", "", str(name).lower())
    return re.sub(r"[^a-z0-9]+", " ", key).strip()


def normalize_name(name: str) -> str:
    """Lowercase, drop variant suffixes and possessives, collapse to single spaces.

    "Craw's bow (u)" → "craws bow"
    "Tumeken's shadow (uncharged)" → "tumekens shadow"
    """
    if not name:
        return ""
    normalized = str(name).lower()
    normalized = _VARIANT_SUFFIXES.sub(" ", normalized)
    normalized = re.sub(r"['’]", "", normalized)
    normalized = re.sub(r"[^a-z0-9]+", " ", normalized)
    return normalized.strip()


class CatalogLookup:
    """Normalized-name index over a catalog, built once per catalog."""

    def __init__(self, catalog: ItemCatalog):
        self.catalog = catalog
        # normalized name → id, or None when two items share a normalized name
        self._by_name: dict[str, Optional[str]] = {}
        self._entries: list[tuple[str, str]] = []  # (id, normalized name)

        for it in catalog.list_items():
            key = normalize_name(it.name)
            if key in self._by_name and self._by_name[key] != it.id:
                self._by_name[key] = None
            else:
                self._by_name[key] = it.id
            self._entries.append((it.id, key))

    def find_id(self, needle: str) -> Optional[str]:
        """Exact lookup by item id or normalized display name."""
        if not needle:
            return None
        if needle in self.catalog:
            return needle
        return self._by_name.get(normalize_name(needle))

    def fuzzy_find(self, needles: Iterable[str]) -> MatchResult:
        """Token-containment match across all needles; ambiguity is reported, not resolved."""
        token_sets = [
            normalize_name(n).split() for n in needles
        ]
        token_sets = [tokens for tokens in token_sets if tokens]
        if not token_sets:
            return MatchResult.no_match()

        matches: list[str] = []
        for item_id, norm in self._entries:
            if any(all(t in norm for t in tokens) for tokens in token_sets):
                if item_id not in matches:
                    matches.append(item_id)

        if len(matches) == 1:
            return MatchResult.matched(matches[0])
        if matches:
            return MatchResult.ambiguous(matches)
        return MatchResult.no_match()

    def find_any(self, needles: Iterable[str]) -> MatchResult:
        """Try each needle exactly, then fall back to the fuzzy match."""
        needles = list(needles)
        for needle in needles:
            item_id = self.find_id(needle)
            if item_id:
                return MatchResult.matched(item_id)
        return self.fuzzy_find(needles)
