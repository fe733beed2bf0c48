"""
Fixed rule tables for reconciling TempleOSRS collection-log names.

Names are written the way the tracker spells them; every comparison goes
through normalize_name(), so case and variant suffixes do not matter.
"""

from dataclasses import dataclass

from .lookup import normalize_name


@dataclass(frozen=True)
class PartImpliesRule:
    part: str
    targets: tuple[str, ...]


@dataclass(frozen=True)
class CompositeRule:
    # Each entry is one required part; a tuple of spellings means any one will do
    parts: tuple[tuple[str, ...], ...]
    targets: tuple[str, ...]
    # Part names turned into the target in-game; not credited on their own
    consumes: tuple[str, ...] = ()


@dataclass(frozen=True)
class CountThresholdRule:
    sources: tuple[str, ...]
    minimum: int
    targets: tuple[str, ...]


# Tracker spellings that do not normalize onto the catalog name
ALIASES: dict[str, str] = {
    normalize_name(k): v
    for k, v in {
        "Basilisk jaw": "Neitiznot faceguard",
        "Serpentine visage": "Serpentine helm",
        "Trident of the seas (charged)": "Trident of the seas",
        "Trident of the seas (full)": "Trident of the seas",
    }.items()
}


PART_IMPLIES: tuple[PartImpliesRule, ...] = (
    PartImpliesRule("Bandos hilt", ("Bandos godsword",)),
    PartImpliesRule("Saradomin hilt", ("Saradomin godsword",)),
    PartImpliesRule("Zamorak hilt", ("Zamorak godsword",)),
    PartImpliesRule("Armadyl hilt", ("Armadyl godsword",)),
    PartImpliesRule("Harmonised orb", ("Harmonised nightmare staff", "Harmonised staff")),
    PartImpliesRule("Eldritch orb", ("Eldritch nightmare staff", "Eldritch staff")),
    PartImpliesRule("Volatile orb", ("Volatile nightmare staff", "Volatile staff")),
    PartImpliesRule("Avernic defender hilt", ("Avernic defender",)),
    PartImpliesRule("Hydra leather", ("Ferocious gloves",)),
    PartImpliesRule("Tanzanite fang", ("Toxic blowpipe",)),
    PartImpliesRule("Ancient icon", ("Ancient sceptre",)),
    PartImpliesRule("Serpentine visage", ("Serpentine helm",)),
)


_TRIDENT_OF_THE_SEAS = (
    "Trident of the seas",
    "Trident of the seas (uncharged)",
    "Trident of the seas (charged)",
    "Trident of the seas (full)",
)

REQUIRES_ALL: tuple[CompositeRule, ...] = (
    CompositeRule((("Nihil horn",), ("Armadyl crossbow",)), ("Zaryte crossbow",)),
    CompositeRule((("Kodai insignia",), ("Master wand",)), ("Kodai wand",)),
    CompositeRule((("Magic fang",), _TRIDENT_OF_THE_SEAS), ("Trident of the swamp",)),
    CompositeRule((("Mokhaiotl cloth",), ("Tormented bracelet",)), ("Confliction gauntlets",)),
    CompositeRule((("Zamorakian hasta",), ("Hydra's claw",)), ("Dragon hunter lance",)),
    CompositeRule(
        (("Bludgeon spine",), ("Bludgeon claw",), ("Bludgeon axon",)),
        ("Abyssal bludgeon",),
    ),
    CompositeRule(
        (("Voidwaker hilt",), ("Voidwaker blade",), ("Voidwaker gem",)),
        ("Voidwaker",),
    ),
    CompositeRule((("Dragon boots",), ("Primordial crystal",)), ("Primordial boots",)),
    CompositeRule((("Ranger boots",), ("Pegasian crystal",)), ("Pegasian boots",)),
    CompositeRule((("Infinity boots",), ("Eternal crystal",)), ("Eternal boots",)),
    CompositeRule((("Araxyte fang",), ("Amulet of torture",)), ("Amulet of rancour",)),
    CompositeRule(
        (("Craw's bow (u)",), ("Fangs of venenatis",)),
        ("Webweaver bow",),
        consumes=("Craw's bow (u)",),
    ),
    CompositeRule(
        (("Thammaron's sceptre (u)",), ("Skull of vet'ion",)),
        ("Accursed sceptre",),
        consumes=("Thammaron's sceptre (u)",),
    ),
    CompositeRule(
        (("Viggora's chainmace (u)",), ("Claws of callisto",)),
        ("Ursine chainmace",),
        consumes=("Viggora's chainmace (u)",),
    ),
    CompositeRule(
        (
            ("Executioner's axe head",),
            ("Leviathan's lure",),
            ("Siren's staff",),
            ("Eye of the duke",),
        ),
        ("Soulreaper axe",),
    ),
    CompositeRule(
        (("Noxious point",), ("Noxious blade",), ("Noxious pommel",)),
        ("Noxious halberd",),
    ),
    # DT2 rings
    CompositeRule((("Magus vestige",), ("Chromium ingot",), ("Seers ring",)), ("Magus ring",)),
    CompositeRule((("Venator vestige",), ("Chromium ingot",), ("Archers ring",)), ("Venator ring",)),
    CompositeRule((("Ultor vestige",), ("Chromium ingot",), ("Berserker ring",)), ("Ultor ring",)),
    CompositeRule((("Bellator vestige",), ("Chromium ingot",), ("Warrior ring",)), ("Bellator ring",)),
)


COUNT_THRESHOLDS: tuple[CountThresholdRule, ...] = (
    CountThresholdRule(
        ("Tormented synapse", "Tormented synapses"),
        3,
        ("Emberlight", "Purging staff", "Scorching bow"),
    ),
    CountThresholdRule(("Venator shard", "Venator shards"), 5, ("Venator bow",)),
    CountThresholdRule(
        ("Zenyte shard", "Zenyte shards"),
        4,
        ("Ring of suffering", "Amulet of torture", "Necklace of anguish", "Tormented bracelet"),
    ),
    # Dropped one claw at a time; two make the finished weapon
    CountThresholdRule(("Burning claw", "Burning claws"), 2, ("Burning claws",)),
)
