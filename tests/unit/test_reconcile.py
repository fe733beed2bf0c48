"""Unit tests for the tracker name reconciliation pipeline."""

from osrs_common.reconcile import get_registered_rules
from osrs_common.reconcile.base import RuleResult
from osrs_common.reconcile.runner import (
    ReconcileReport,
    merge_into_checklist,
    reconcile_item_names,
)


def _ids(names, **kwargs):
    return set(reconcile_item_names(names, **kwargs).matched_ids)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_rules_sorted_by_order(self):
        orders = [r.order for r in get_registered_rules()]
        assert orders == sorted(orders)

    def test_rule_names(self):
        assert [r.name for r in get_registered_rules()] == [
            "direct_match",
            "part_implies",
            "composite",
            "count_threshold",
        ]

    def test_rule_result_changed_anything(self):
        assert RuleResult(rule_name="x").changed_anything is False
        assert RuleResult(rule_name="x", ids_added=["a"]).changed_anything is True


# ---------------------------------------------------------------------------
# Direct / alias
# ---------------------------------------------------------------------------


class TestDirectMatch:
    def test_exact_names(self):
        assert _ids(["Twisted bow", "Dragon claws"]) == {"twisted_bow", "dragon_claws"}

    def test_variant_suffixes(self):
        names = ["Tumeken's shadow (uncharged)", "Torva platebody (damaged)", "Masori chaps (f)"]
        assert _ids(names) == {"tumekens_shadow", "torva_platebody", "masori_chaps_f"}

    def test_alias_table(self):
        assert _ids(["Basilisk jaw"]) == {"neitiznot_faceguard"}

    def test_charged_trident_alias(self):
        assert _ids(["Trident of the seas (charged)"]) == {"trident_of_the_seas"}

    def test_unmatched_names_reported(self):
        report = reconcile_item_names(["Bronze dagger", "Twisted bow"])
        assert report.matched_ids == frozenset({"twisted_bow"})
        assert report.unmatched_names == ("Bronze dagger",)

    def test_parts_turned_into_items_are_not_unmatched(self):
        report = reconcile_item_names(["Bandos hilt", "Magic fang", "Bronze dagger"])
        assert report.matched_ids == frozenset({"bandos_godsword"})
        assert report.unmatched_names == ("Magic fang", "Bronze dagger")

    def test_ambiguous_name_matches_nothing(self):
        report = reconcile_item_names(["Torva"])
        assert report.matched_ids == frozenset()
        assert report.ambiguous == 1

    def test_blank_names_ignored(self):
        assert _ids(["", "   "]) == set()

    def test_duplicates_collapse(self):
        assert _ids(["Twisted bow", "twisted bow", "TWISTED BOW"]) == {"twisted_bow"}


# ---------------------------------------------------------------------------
# Part implies / composite
# ---------------------------------------------------------------------------


class TestPartImplies:
    def test_hilt_implies_godsword(self):
        assert _ids(["Bandos hilt"]) == {"bandos_godsword"}

    def test_orb_implies_nightmare_staff(self):
        assert _ids(["Harmonised orb"]) == {"harmonised_nightmare_staff"}

    def test_serpentine_visage(self):
        assert _ids(["Serpentine visage"]) == {"serpentine_helm"}

    def test_tanzanite_fang(self):
        assert _ids(["Tanzanite fang"]) == {"toxic_blowpipe"}


class TestComposite:
    def test_crafted_bow_replaces_its_parts(self):
        assert _ids(["Craw's bow (u)", "Fangs of venenatis"]) == {"webweaver_bow"}

    def test_untrimmed_weapon_alone_counts_as_itself(self):
        assert _ids(["Craw's bow (u)"]) == {"craws_bow"}

    def test_finished_weapon_is_not_consumed_by_its_untrimmed_part(self):
        assert _ids(["Craw's bow", "Fangs of venenatis"]) == {"craws_bow", "webweaver_bow"}
        assert _ids(["Craw's bow (u)", "Craw's bow", "Fangs of venenatis"]) == {
            "craws_bow",
            "webweaver_bow",
        }

    def test_accursed_sceptre(self):
        assert _ids(["Thammaron's sceptre (u)", "Skull of vet'ion"]) == {"accursed_sceptre"}

    def test_all_parts_required(self):
        assert _ids(["Bludgeon spine", "Bludgeon claw"]) == set()
        assert _ids(["Bludgeon spine", "Bludgeon claw", "Bludgeon axon"]) == {"abyssal_bludgeon"}

    def test_trident_accepts_any_charge_state(self):
        ids = _ids(["Magic fang", "Trident of the seas (uncharged)"])
        assert ids == {"trident_of_the_seas", "trident_of_the_swamp"}

    def test_ring_upgrade_needs_ingot_and_ring(self):
        assert "ultor_ring" not in _ids(["Ultor vestige", "Berserker ring"])
        assert "ultor_ring" in _ids(["Ultor vestige", "Chromium ingot", "Berserker ring"])

    def test_boots_keep_both_items(self):
        ids = _ids(["Primordial crystal", "Dragon boots"])
        assert "primordial_boots" in ids


# ---------------------------------------------------------------------------
# Count thresholds
# ---------------------------------------------------------------------------


class TestCountThreshold:
    def test_zenyte_shards_below_threshold(self):
        assert _ids(["Zenyte shard"], quantities={"Zenyte shard": 3}) == set()

    def test_zenyte_shards_at_threshold(self):
        ids = _ids(["Zenyte shard"], quantities={"Zenyte shard": 4})
        assert ids == {
            "ring_of_suffering",
            "amulet_of_torture",
            "necklace_of_anguish",
            "tormented_bracelet",
        }

    def test_repeated_names_are_counted(self):
        assert _ids(["Venator shard"] * 5) == {"venator_bow"}

    def test_synonym_spellings_summed(self):
        ids = _ids(
            ["Tormented synapse", "Tormented synapses"],
            quantities={"Tormented synapse": 2, "Tormented synapses": 1},
        )
        assert ids == {"emberlight", "purging_staff", "scorching_bow"}

    def test_single_burning_claw_is_not_enough(self):
        assert _ids(["Burning claw"]) == set()
        assert _ids(["Burning claw"], quantities={"Burning claw": 2}) == {"burning_claws"}

    def test_finished_item_name_matches_directly(self):
        assert _ids(["Burning claws"]) == {"burning_claws"}
        assert _ids(["Zenyte shard", "Amulet of torture"]) == {"amulet_of_torture"}


# ---------------------------------------------------------------------------
# Purity and merge
# ---------------------------------------------------------------------------


class TestDeterminism:
    def test_same_input_same_report(self):
        names = ["Bandos hilt", "Twisted bow", "Craw's bow (u)", "Fangs of venenatis", "Torva"]
        first = reconcile_item_names(names)
        second = reconcile_item_names(list(names))
        assert first == second
        assert isinstance(first, ReconcileReport)

    def test_input_not_mutated(self):
        names = ["Twisted bow"]
        reconcile_item_names(names)
        assert names == ["Twisted bow"]

    def test_to_dict_sorted(self):
        data = reconcile_item_names(["Kodai wand", "Elder maul"]).to_dict()
        assert data["matched_ids"] == ["elder_maul", "kodai_wand"]
        assert [r["rule"] for r in data["rules"]][0] == "direct_match"


class TestMergeIntoChecklist:
    def test_manual_uncheck_preserved(self):
        report = reconcile_item_names(["Craw's bow (u)", "Fangs of venenatis"])
        merged = merge_into_checklist({"webweaver_bow": False}, report.matched_ids)
        assert merged["webweaver_bow"] is False

    def test_unset_ids_become_true(self):
        merged = merge_into_checklist({"twisted_bow": True}, {"kodai_wand"})
        assert merged == {"twisted_bow": True, "kodai_wand": True}

    def test_input_checklist_untouched(self):
        checklist = {"kodai_wand": False}
        merge_into_checklist(checklist, {"kodai_wand", "elder_maul"})
        assert checklist == {"kodai_wand": False}
