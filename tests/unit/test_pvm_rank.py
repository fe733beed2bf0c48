"""Unit tests for PvM rank evaluation."""

import pytest

from osrs_common.catalog.items import (
    BASE_REQUIREMENTS,
    ItemCatalog,
    Requirement,
    item,
)
from osrs_common.ranks.pvm import (
    PVM_RANKS,
    RankDefinition,
    compute_base_requirement,
    compute_points,
    evaluate_pvm_rank,
    rank_index,
)


def _base_checklist() -> dict[str, bool]:
    checklist = {i: True for i in BASE_REQUIREMENTS[0].item_ids}
    checklist["dragon_warhammer"] = True
    return checklist


@pytest.fixture
def small_catalog():
    return ItemCatalog([
        item("Gate", None, "Required Items"),
        item("Big", 3000, "Misc"),
        item("Infernal Cape", 25, "Misc"),
    ])


SMALL_REQUIREMENTS = (Requirement(type="all_of", item_ids=("gate",)),)


# ---------------------------------------------------------------------------
# Base requirement and points
# ---------------------------------------------------------------------------


class TestBaseRequirement:
    def test_empty_checklist_misses_everything(self):
        ok, missing = compute_base_requirement({})
        assert ok is False
        assert "elite_void_top" in missing
        assert "dragon_warhammer" in missing and "bandos_godsword" in missing

    def test_either_special_weapon_satisfies_any_of(self):
        checklist = _base_checklist()
        del checklist["dragon_warhammer"]
        checklist["bandos_godsword"] = True
        assert compute_base_requirement(checklist) == (True, [])

    def test_false_entries_are_not_owned(self):
        checklist = _base_checklist()
        checklist["fire_cape"] = False
        ok, missing = compute_base_requirement(checklist)
        assert ok is False
        assert missing == ["fire_cape"]


class TestPoints:
    def test_gate_items_carry_no_points(self):
        earned, _ = compute_points(_base_checklist())
        assert earned == 0

    def test_points_summed(self):
        earned, total = compute_points({"twisted_bow": True, "kodai_wand": True, "elder_maul": False})
        assert earned == 200
        assert total > earned

    def test_unknown_ids_ignored(self):
        assert compute_points({"not_an_item": True})[0] == 0


# ---------------------------------------------------------------------------
# Rank evaluation
# ---------------------------------------------------------------------------


class TestEvaluatePvmRank:
    def test_empty_checklist_is_lowest_rank(self):
        ev = evaluate_pvm_rank({})
        assert ev.qualified_rank.id == "bob"
        assert ev.points_earned == 0
        assert ev.base_ok is False
        assert ev.next_rank.id == "hellcat"

    def test_base_only(self):
        ev = evaluate_pvm_rank(_base_checklist())
        assert ev.base_ok is True
        assert ev.base_missing_item_ids == ()
        assert ev.qualified_rank.id == "bob"

    def test_points_without_base_stay_at_lowest_rank(self):
        ev = evaluate_pvm_rank({"twisted_bow": True, "kodai_wand": True, "elder_maul": True})
        assert ev.points_earned == 300
        assert ev.qualified_rank.id == "bob"

    def test_points_with_base(self):
        checklist = _base_checklist() | {"twisted_bow": True, "kodai_wand": True, "elder_maul": True}
        ev = evaluate_pvm_rank(checklist)
        assert ev.qualified_rank.id == "hellcat"
        assert ev.next_threshold == 500

    def test_capability_gate_blocks_top_ranks(self, small_catalog):
        ev = evaluate_pvm_rank(
            {"gate": True, "big": True},
            catalog=small_catalog,
            requirements=SMALL_REQUIREMENTS,
        )
        assert ev.points_earned == 3000
        assert ev.capability_flag_satisfied is False
        assert ev.qualified_rank.id == "soul"
        assert ev.next_rank.id == "gnome_child"
        assert ev.next_rank_locked is True
        assert ev.progress_to_next() == 1.0

    def test_capability_gate_open(self, small_catalog):
        ev = evaluate_pvm_rank(
            {"gate": True, "big": True, "infernal_cape": True},
            catalog=small_catalog,
            requirements=SMALL_REQUIREMENTS,
        )
        assert ev.points_earned == 3025
        assert ev.qualified_rank.id == "wrath"
        assert ev.next_rank.id == "beast"
        assert ev.next_rank_locked is False

    def test_capability_item_missing_from_catalog(self):
        catalog = ItemCatalog([item("Gate", None, "Required Items"), item("Big", 5000, "Misc")])
        ev = evaluate_pvm_rank(
            {"gate": True, "big": True, "infernal_cape": True},
            catalog=catalog,
            requirements=SMALL_REQUIREMENTS,
        )
        assert ev.capability_flag_satisfied is False
        assert ev.qualified_rank.id == "soul"

    def test_every_rank_is_scanned(self, small_catalog):
        ranks = (
            RankDefinition("a", "A"),
            RankDefinition("b", "B", threshold_points=100, requires_capability=True),
            RankDefinition("c", "C", threshold_points=200),
        )
        ev = evaluate_pvm_rank(
            {"gate": True, "big": True},
            catalog=small_catalog,
            ranks=ranks,
            requirements=SMALL_REQUIREMENTS,
        )
        assert ev.qualified_rank.id == "c"
        assert ev.next_rank is None

    def test_top_rank_has_no_next(self, small_catalog):
        catalog = ItemCatalog(small_catalog.list_items() + [item("Huge", 1000, "Misc")])
        ev = evaluate_pvm_rank(
            {"gate": True, "big": True, "huge": True, "infernal_cape": True},
            catalog=catalog,
            requirements=SMALL_REQUIREMENTS,
        )
        assert ev.qualified_rank.id == "beast"
        assert ev.next_rank is None
        assert ev.next_threshold is None
        assert ev.progress_to_next() == 1.0

    def test_adding_items_never_lowers_rank(self):
        checklist = _base_checklist()
        previous = rank_index(evaluate_pvm_rank(checklist).qualified_rank.id)
        for it_id in ("twisted_bow", "scythe_of_vitur", "tumekens_shadow", "elysian_spirit_shield",
                      "infernal_cape", "harmonised_nightmare_staff", "kodai_wand", "elder_maul"):
            checklist[it_id] = True
            current = rank_index(evaluate_pvm_rank(checklist).qualified_rank.id)
            assert current >= previous
            previous = current

    def test_progress_fraction(self):
        checklist = _base_checklist() | {"twisted_bow": True}
        ev = evaluate_pvm_rank(checklist)
        assert ev.progress_to_next() == pytest.approx(100 / 250)

    def test_to_dict(self):
        data = evaluate_pvm_rank(_base_checklist()).to_dict()
        assert data["qualified_rank"]["id"] == "bob"
        assert data["next_rank"]["threshold_points"] == 250
        assert data["next_rank_locked"] is False
        assert data["base_missing_item_ids"] == []


class TestRankIndex:
    def test_known(self):
        assert rank_index("bob") == 0
        assert rank_index("beast") == len(PVM_RANKS) - 1

    def test_unknown(self):
        with pytest.raises(ValueError):
            rank_index("dragon")
