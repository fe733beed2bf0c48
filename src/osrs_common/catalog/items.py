"""
Item catalog — the clan's tracked PvM items and their point values.

Item ids are slugs derived from display names by slugify().  Ids are the
join key everywhere else (checklists, reconciliation, base requirements),
so slugify() must stay stable and two names must never share an id.

Items with points=None are gate items: they count toward the base
requirement but are worth no points.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


class CatalogIntegrityError(ValueError):
    """Two distinct display names collapse to the same item id."""


def slugify(name: str) -> str:
    """Derive a stable item id from a display name.

    "Ava's Assembler" → "avas_assembler", "Salve (ei)" → "salve_ei",
    "Oathplate helm†" → "oathplate_helm".
    """
    slug = name.lower()
    slug = re.sub(r"['’]", "", slug)
    slug = re.sub(r"\*+", "", slug)
    slug = slug.replace("†", "")
    slug = re.sub(r"[^a-z0-9]+", "_", slug)
    return slug.strip("_")


@dataclass(frozen=True)
class ItemDefinition:
    id: str
    name: str
    points: Optional[int]   # None = gate item, no points
    group: str
    notes: Optional[str] = None   # "*", "**", "***", "†" annotations


@dataclass(frozen=True)
class Requirement:
    """A gate over the catalog: every id (all_of) or at least one (any_of)."""

    type: str   # 'all_of' or 'any_of'
    item_ids: tuple[str, ...]
    label: str = ""

    def evaluate(self, checklist: dict[str, bool]) -> tuple[bool, list[str]]:
        """Return (ok, missing_ids) for this requirement."""
        if self.type == "all_of":
            missing = [i for i in self.item_ids if not checklist.get(i)]
            return not missing, missing
        ok = any(checklist.get(i) for i in self.item_ids)
        return ok, [] if ok else list(self.item_ids)


def item(name: str, points: Optional[int], group: str, notes: Optional[str] = None) -> ItemDefinition:
    return ItemDefinition(id=slugify(name), name=name, points=points, group=group, notes=notes)


class ItemCatalog:
    """Immutable, id-indexed view over a list of ItemDefinitions."""

    def __init__(self, items: list[ItemDefinition]):
        by_id: dict[str, ItemDefinition] = {}
        for it in items:
            existing = by_id.get(it.id)
            if existing is not None:
                raise CatalogIntegrityError(
                    f"Item id '{it.id}' produced by both {existing.name!r} and {it.name!r}"
                )
            by_id[it.id] = it
        self._items = tuple(items)
        self._by_id = by_id

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._by_id

    def list_items(self) -> list[ItemDefinition]:
        return list(self._items)

    def lookup_by_id(self, item_id: str) -> Optional[ItemDefinition]:
        """Return the item, or None when the id is not in the catalog."""
        return self._by_id.get(item_id)

    def points_max(self) -> int:
        return sum(it.points for it in self._items if it.points is not None)

    def groups(self) -> dict[str, list[ItemDefinition]]:
        """Items grouped by category, in catalog order."""
        grouped: dict[str, list[ItemDefinition]] = {}
        for it in self._items:
            grouped.setdefault(it.group or "Other", []).append(it)
        return grouped


REQUIRED_GROUP = "Required Items"

BASE_REQUIREMENTS: tuple[Requirement, ...] = (
    Requirement(
        type="all_of",
        label="Required Items",
        item_ids=tuple(
            slugify(n)
            for n in (
                "Elite Void Top",
                "Elite Void Robe",
                "Void Knight Gloves",
                "Void Melee Helm",
                "Void Mage Helm",
                "Void Ranger Helm",
                "Abyssal Tentacle",
                "Barrows Gloves",
                "Fighter Torso",
                "Dragon Defender",
                "Salve (ei)",
                "Fire cape",
                "Warped sceptre",
                "Dragon Sword",
                "Ava's Assembler",
                "Rune Crossbow",
                "Helm of Neitiznot",
                "Berserker Ring (i)",
            )
        ),
    ),
    Requirement(
        type="any_of",
        label="Dragon Warhammer or BGS",
        item_ids=(slugify("Dragon Warhammer"), slugify("Bandos Godsword")),
    ),
)

ITEMS: list[ItemDefinition] = [
    # Required items (gates, no points)
    item("Elite Void Top", None, REQUIRED_GROUP),
    item("Elite Void Robe", None, REQUIRED_GROUP),
    item("Void Knight Gloves", None, REQUIRED_GROUP),
    item("Void Melee Helm", None, REQUIRED_GROUP, "***"),
    item("Void Mage Helm", None, REQUIRED_GROUP, "***"),
    item("Void Ranger Helm", None, REQUIRED_GROUP),
    item("Abyssal Tentacle", None, REQUIRED_GROUP),
    item("Barrows Gloves", None, REQUIRED_GROUP),
    item("Fighter Torso", None, REQUIRED_GROUP),
    item("Dragon Defender", None, REQUIRED_GROUP),
    item("Salve (ei)", None, REQUIRED_GROUP),
    item("Fire cape", None, REQUIRED_GROUP),
    item("Warped sceptre", None, REQUIRED_GROUP),
    item("Dragon Sword", None, REQUIRED_GROUP),
    item("Ava's Assembler", None, REQUIRED_GROUP),
    item("Rune Crossbow", None, REQUIRED_GROUP),
    item("Helm of Neitiznot", None, REQUIRED_GROUP),
    item("Berserker Ring (i)", None, REQUIRED_GROUP),
    # Either one satisfies the any_of requirement; both stay checkable
    item("Dragon Warhammer", None, REQUIRED_GROUP),
    item("Bandos Godsword", None, REQUIRED_GROUP),

    # God Wars Dungeon
    item("Armadyl Godsword", 16, "God Wars Dungeon"),
    item("Armadyl Helmet", 12, "God Wars Dungeon"),
    item("Armadyl Chestplate", 12, "God Wars Dungeon"),
    item("Armadyl Chainskirt", 12, "God Wars Dungeon"),
    item("Saradomin Godsword", 15, "God Wars Dungeon"),
    item("Armadyl Crossbow", 15, "God Wars Dungeon"),
    item("Bandos Chestplate", 13, "God Wars Dungeon"),
    item("Bandos Tassets", 13, "God Wars Dungeon"),
    item("Bandos Boots", 13, "God Wars Dungeon", "*"),
    item("Zamorak Godsword", 17, "God Wars Dungeon"),
    item("Staff of the Dead", 17, "God Wars Dungeon", "*"),
    item("Zamorakian Spear", 5, "God Wars Dungeon"),
    item("Ancient Godsword", 72, "God Wars Dungeon"),
    item("Zaryte Crossbow", 65, "God Wars Dungeon"),
    item("Torva Full helm", 65, "God Wars Dungeon"),
    item("Torva Platebody", 65, "God Wars Dungeon"),
    item("Torva Platelegs", 65, "God Wars Dungeon"),
    item("Zaryte Vambraces", 43, "God Wars Dungeon"),

    # Yama
    item("Soulflame horn", 15, "Yama"),
    item("Oathplate helm", 30, "Yama", "†"),
    item("Oathplate chest", 30, "Yama", "†"),
    item("Oathplate legs", 30, "Yama", "†"),

    # Doom of Mokhaiotl
    item("Avernic treads", 37, "Doom of Mokhaiotl"),
    item("Eye of ayak", 34, "Doom of Mokhaiotl"),
    item("Confliction gauntlets", 23, "Doom of Mokhaiotl"),

    # Zulrah
    item("Trident of the Swamp", 11, "Zulrah"),
    item("Serpentine Helm", 11, "Zulrah"),
    item("Toxic Blowpipe", 11, "Zulrah"),

    # Chambers of Xeric
    item("Twisted Bow", 100, "Chambers of Xeric"),
    item("Kodai Wand", 100, "Chambers of Xeric"),
    item("Elder Maul", 100, "Chambers of Xeric"),
    item("Ancestral Hat", 65, "Chambers of Xeric"),
    item("Ancestral Robe Top", 65, "Chambers of Xeric"),
    item("Ancestral Robe Bottom", 65, "Chambers of Xeric"),
    item("Dragon Claws", 65, "Chambers of Xeric"),
    item("Dinh's Bulwark", 55, "Chambers of Xeric"),
    item("Dragon Hunter Crossbow", 50, "Chambers of Xeric"),
    item("Twisted Buckler", 50, "Chambers of Xeric"),
    item("Dexterous Prayer Scroll", 10, "Chambers of Xeric"),
    item("Arcane Prayer Scroll", 10, "Chambers of Xeric"),

    # Theatre of Blood
    item("Scythe of Vitur", 89, "Theatre of Blood"),
    item("Ghrazi Rapier", 44, "Theatre of Blood"),
    item("Sanguinesti Staff", 44, "Theatre of Blood"),
    item("Justiciar Faceguard", 35, "Theatre of Blood"),
    item("Justiciar Chestguard", 35, "Theatre of Blood"),
    item("Justiciar Legguards", 35, "Theatre of Blood"),
    item("Avernic Defender", 12, "Theatre of Blood"),

    # Tombs of Amascut
    item("Tumeken's Shadow", 70, "Tombs of Amascut"),
    item("Masori Mask (f)", 34, "Tombs of Amascut"),
    item("Masori Body (f)", 34, "Tombs of Amascut"),
    item("Masori Chaps (f)", 34, "Tombs of Amascut"),
    item("Elidinis' Ward", 19, "Tombs of Amascut", "**"),
    item("Osmumten's Fang", 8, "Tombs of Amascut"),
    item("Lightbearer", 8, "Tombs of Amascut"),

    # Gauntlet
    item("Bow of Faerdhinen", 56, "Gauntlet"),
    item("Blade of Saeldor", 48, "Gauntlet"),
    item("Crystal Helm", 7, "Gauntlet"),
    item("Crystal Body", 21, "Gauntlet"),
    item("Crystal Legs", 14, "Gauntlet"),

    # The Nightmare
    item("Eldritch nightmare staff", 111, "The Nightmare"),
    item("Harmonised nightmare staff", 130, "The Nightmare"),
    item("Volatile nightmare staff", 111, "The Nightmare"),
    item("Inquisitor's Mace", 87, "The Nightmare"),
    item("Inquisitor's great helm", 43, "The Nightmare"),
    item("Inquisitor's Hauberk", 43, "The Nightmare"),
    item("Inquisitor's Plateskirt", 43, "The Nightmare"),
    item("Nightmare Staff", 25, "The Nightmare"),

    # Corporeal Beast
    item("Elysian Spirit Shield", 199, "Corporeal Beast"),
    item("Arcane Spirit Shield", 69, "Corporeal Beast", "**"),
    item("Spectral Spirit Shield", 69, "Corporeal Beast"),

    # Misc
    item("Dragonfire Shield", 43, "Misc"),
    item("Ancient Wyvern Shield", 43, "Misc"),
    item("Dragonfire Ward", 43, "Misc"),
    item("Imbued Heart", 65, "Misc"),
    item("Saturated Heart", 8, "Misc"),
    item("Infernal Cape", 25, "Misc"),
    item("Neitiznot Faceguard", 14, "Misc"),
    item("Ring of Suffering", 18, "Misc"),
    item("Amulet of Torture", 15, "Misc"),
    item("Necklace of Anguish", 18, "Misc"),
    item("Tormented Bracelet", 18, "Misc"),
    item("Occult Necklace", 4, "Misc"),
    item("Primordial Boots", 9, "Misc"),
    item("Pegasian Boots", 9, "Misc"),
    item("Eternal Boots", 9, "Misc"),
    item("Guardian Boots", 15, "Misc"),
    item("Ferocious Gloves", 18, "Misc"),
    item("Dragon Pickaxe", 9, "Misc"),
    item("Trident of the Seas", 8, "Misc"),
    item("Abyssal Bludgeon", 15, "Misc"),
    item("Dragon Hunter Lance", 35, "Misc"),
    item("Swift Blade", 18, "Misc"),
    item("Ham Joint", 23, "Misc"),
    item("Ancient Sceptre", 2, "Misc"),
    item("Venator Bow", 20, "Misc"),
    item("Dizana's quiver", 25, "Misc"),
    item("Burning claws", 25, "Misc"),
    item("Emberlight", 12, "Misc"),
    item("Purging staff", 12, "Misc"),
    item("Scorching bow", 12, "Misc"),
    item("Amulet of rancour", 16, "Misc"),
    item("Noxious halberd", 14, "Misc"),
    item("Aranea boots", 6, "Misc"),
    item("Tonalztics of ralos", 19, "Misc"),

    # Wilderness Drops
    item("Treasonous ring", 13, "Wilderness Drops", "*"),
    item("Tyrannical ring", 17, "Wilderness Drops", "*"),
    item("Ring of the gods", 19, "Wilderness Drops", "*"),
    item("Amulet of avarice", 27, "Wilderness Drops"),
    item("Voidwaker", 50, "Wilderness Drops"),
    item("Craw's bow", 40, "Wilderness Drops"),
    item("Webweaver bow", 6, "Wilderness Drops"),
    item("Thammaron's sceptre", 40, "Wilderness Drops"),
    item("Accursed sceptre", 9, "Wilderness Drops"),
    item("Viggora's chainmace", 40, "Wilderness Drops"),
    item("Ursine chainmace", 7, "Wilderness Drops"),

    # Desert Treasure Drops
    item("Ultor ring", 27, "Desert Treasure Drops"),
    item("Bellator ring", 18, "Desert Treasure Drops"),
    item("Venator ring", 22, "Desert Treasure Drops"),
    item("Magus ring", 23, "Desert Treasure Drops"),
    item("Virtus mask", 20, "Desert Treasure Drops"),
    item("Virtus robe top", 20, "Desert Treasure Drops"),
    item("Virtus robe bottom", 20, "Desert Treasure Drops"),
    item("Soulreaper axe", 59, "Desert Treasure Drops"),
]


def _check_requirements(catalog: ItemCatalog, requirements: tuple[Requirement, ...]) -> None:
    for req in requirements:
        unknown = [i for i in req.item_ids if i not in catalog]
        if unknown:
            raise CatalogIntegrityError(
                f"Requirement {req.label!r} references unknown item ids: {unknown}"
            )


# Built at import: a colliding or dangling id refuses to start the process.
DEFAULT_CATALOG = ItemCatalog(ITEMS)
_check_requirements(DEFAULT_CATALOG, BASE_REQUIREMENTS)
logger.debug("Item catalog loaded: %d items", len(DEFAULT_CATALOG))


def get_catalog() -> ItemCatalog:
    return DEFAULT_CATALOG
