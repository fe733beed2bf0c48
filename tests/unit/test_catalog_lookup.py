"""Unit tests for tracker name normalization and catalog lookup."""

import pytest

from osrs_common.catalog.items import DEFAULT_CATALOG, ItemCatalog, item
from osrs_common.reconcile.base import MatchResult, MatchStatus
from osrs_common.reconcile.lookup import CatalogLookup, normalize_name


@pytest.fixture(scope="module")
def lookup():
    return CatalogLookup(DEFAULT_CATALOG)


class TestNormalizeName:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Craw's bow (u)", "craws bow"),
            ("Tumeken's shadow (uncharged)", "tumekens shadow"),
            ("Torva platebody (damaged)", "torva platebody"),
            ("Torva full helm (broken)", "torva full helm"),
            ("Masori body (f)", "masori body"),
            ("Trident of the seas (charged)", "trident of the seas charged"),
            ("  Dragon   Claws!! ", "dragon claws"),
            ("", ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_name(raw) == expected


class TestCatalogLookup:
    def test_find_by_id(self, lookup):
        assert lookup.find_id("twisted_bow") == "twisted_bow"

    def test_find_by_display_name_case_insensitive(self, lookup):
        assert lookup.find_id("TWISTED BOW") == "twisted_bow"

    def test_find_variant_suffix(self, lookup):
        assert lookup.find_id("Scythe of vitur (uncharged)") == "scythe_of_vitur"

    def test_find_masori_without_suffix(self, lookup):
        assert lookup.find_id("Masori mask") == "masori_mask_f"

    def test_find_missing(self, lookup):
        assert lookup.find_id("Bronze dagger") is None

    def test_fuzzy_unique_match(self, lookup):
        result = lookup.fuzzy_find(["faerdhinen"])
        assert result == MatchResult.matched("bow_of_faerdhinen")

    def test_fuzzy_ambiguous_resolves_to_nothing(self, lookup):
        result = lookup.fuzzy_find(["torva"])
        assert result.status is MatchStatus.AMBIGUOUS
        assert result.resolved_id is None
        assert set(result.candidates) == {"torva_full_helm", "torva_platebody", "torva_platelegs"}

    def test_fuzzy_no_match(self, lookup):
        assert lookup.fuzzy_find(["venenatis"]).status is MatchStatus.NO_MATCH

    def test_fuzzy_requires_every_token(self, lookup):
        # "fang" alone would hit Osmumten's fang; "magic" rules it out
        assert lookup.fuzzy_find(["Magic fang"]).resolved_id is None

    def test_find_any_prefers_exact(self, lookup):
        assert lookup.find_any(["Nope", "Kodai wand"]).resolved_id == "kodai_wand"

    def test_shared_tokens_are_ambiguous(self):
        catalog = ItemCatalog([
            item("Abyssal whip red", 1, "x"),
            item("Abyssal whip blue", 1, "x"),
        ])
        result = CatalogLookup(catalog).find_any(["Abyssal whip"])
        assert result.status is MatchStatus.AMBIGUOUS
        assert result.resolved_id is None
