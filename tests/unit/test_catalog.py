"""Unit tests for the item catalog and id derivation."""

import pytest

from osrs_common.catalog.items import (
    BASE_REQUIREMENTS,
    DEFAULT_CATALOG,
    CatalogIntegrityError,
    ItemCatalog,
    Requirement,
    item,
    slugify,
)


class TestSlugify:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Ava's Assembler", "avas_assembler"),
            ("Salve (ei)", "salve_ei"),
            ("Berserker Ring (i)", "berserker_ring_i"),
            ("Elidinis' Ward", "elidinis_ward"),
            ("Tumeken’s Shadow", "tumekens_shadow"),
            ("Oathplate helm†", "oathplate_helm"),
            ("Staff of the Dead*", "staff_of_the_dead"),
            ("  Masori Mask (f) ", "masori_mask_f"),
        ],
    )
    def test_slugify(self, name, expected):
        assert slugify(name) == expected

    def test_slugify_is_stable(self):
        assert slugify("Dragon Warhammer") == slugify("dragon warhammer")


class TestItemCatalog:
    def test_duplicate_ids_rejected(self):
        with pytest.raises(CatalogIntegrityError):
            ItemCatalog([item("Fire cape", None, "Req"), item("Fire Cape", 5, "Misc")])

    def test_integrity_error_is_value_error(self):
        assert issubclass(CatalogIntegrityError, ValueError)

    def test_lookup_by_id(self):
        found = DEFAULT_CATALOG.lookup_by_id("infernal_cape")
        assert found is not None
        assert found.name == "Infernal Cape"
        assert found.points == 25

    def test_lookup_missing_returns_none(self):
        assert DEFAULT_CATALOG.lookup_by_id("not_an_item") is None

    def test_list_items_preserves_order(self):
        items = DEFAULT_CATALOG.list_items()
        assert items[0].id == "elite_void_top"
        assert len(items) == len(DEFAULT_CATALOG)

    def test_points_max_sums_point_items_only(self):
        expected = sum(i.points for i in DEFAULT_CATALOG.list_items() if i.points is not None)
        assert DEFAULT_CATALOG.points_max() == expected

    def test_groups_keep_required_group_first(self):
        groups = list(DEFAULT_CATALOG.groups())
        assert groups[0] == "Required Items"
        assert "Wilderness Drops" in groups

    def test_all_ids_unique(self):
        ids = [i.id for i in DEFAULT_CATALOG.list_items()]
        assert len(ids) == len(set(ids))


class TestRequirements:
    def test_base_requirement_ids_exist(self):
        for req in BASE_REQUIREMENTS:
            for item_id in req.item_ids:
                assert item_id in DEFAULT_CATALOG

    def test_base_has_eighteen_all_of_items(self):
        all_of = [r for r in BASE_REQUIREMENTS if r.type == "all_of"]
        assert len(all_of) == 1
        assert len(all_of[0].item_ids) == 18

    def test_any_of_is_dwh_or_bgs(self):
        any_of = [r for r in BASE_REQUIREMENTS if r.type == "any_of"][0]
        assert set(any_of.item_ids) == {"dragon_warhammer", "bandos_godsword"}

    def test_all_of_reports_missing(self):
        req = Requirement("all_of", ("a", "b", "c"))
        ok, missing = req.evaluate({"a": True, "b": False})
        assert ok is False
        assert missing == ["b", "c"]

    def test_any_of_satisfied_by_one(self):
        req = Requirement("any_of", ("a", "b"))
        assert req.evaluate({"b": True}) == (True, [])

    def test_any_of_missing_lists_all(self):
        req = Requirement("any_of", ("a", "b"))
        assert req.evaluate({}) == (False, ["a", "b"])
