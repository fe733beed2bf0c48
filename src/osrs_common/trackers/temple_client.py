"""
TempleOSRS client — collection log, pet list, and the payload extractors.

The collection-log payload is deeply nested and its shape varies by
category, so obtained items are found by walking the whole document
rather than by a fixed path.

Usage:
    client = TempleClient(base_url)
    await client.initialize()
    snapshot = await client.get_collection_log("Some Rsn")
    report = reconcile_item_names(snapshot.item_names, quantities=snapshot.quantities)
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from .base import TrackerClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://templeosrs.com/api"

MAX_WALK_DEPTH = 12
NAME_KEYS = ("name", "item_name", "itemName", "title")
COUNT_KEYS = ("count", "quantity", "qty", "obtained", "owned")

PET_CACHE_TTL_SECONDS = 60 * 60


@dataclass
class CollectionLogSnapshot:
    """What one collection-log fetch tells us about a player."""
    rsn: str
    quantities: dict[str, int] = field(default_factory=dict)
    pets_unique: int = 0
    completed: Optional[int] = None
    available: Optional[int] = None

    @property
    def item_names(self) -> list[str]:
        return list(self.quantities)

    def to_dict(self) -> dict:
        return {
            "rsn": self.rsn,
            "items_obtained": len(self.quantities),
            "pets_unique": self.pets_unique,
            "collection_log_completed": self.completed,
            "collection_log_available": self.available,
        }


# ---------------------------------------------------------------------------
# Pure extractors
# ---------------------------------------------------------------------------


def _first_present(node: dict, keys: tuple[str, ...]):
    for key in keys:
        if node.get(key) is not None:
            return node[key]
    return None


def _row_quantity(count: Any) -> int:
    """Quantity for an item row; 0 means the row is not obtained."""
    if count is None or count is True:
        # Obtained-only responses omit the count
        return 1
    if count is False:
        return 0
    if isinstance(count, (int, float)):
        return int(count) if count > 0 else 0
    if isinstance(count, str):
        text = count.strip()
        if text == "0":
            return 0
        try:
            return max(int(float(text)), 0)
        except ValueError:
            return 1
    return 1


def extract_obtained_items(payload: Any) -> dict[str, int]:
    """
    Walk a collection-log payload and return obtained item name → quantity.

    Names are de-duplicated case-insensitively (first spelling wins,
    largest quantity wins).  Rows whose count is False, <= 0 or "0" are
    skipped.
    """
    found: dict[str, int] = {}
    spelling: dict[str, str] = {}

    root = payload.get("data", payload) if isinstance(payload, dict) else payload

    def walk(node: Any, depth: int = 0) -> None:
        if not node or depth > MAX_WALK_DEPTH:
            return
        if isinstance(node, list):
            for value in node:
                walk(value, depth + 1)
            return
        if not isinstance(node, dict):
            return

        name = _first_present(node, NAME_KEYS)
        if isinstance(name, str) and name.strip():
            qty = _row_quantity(_first_present(node, COUNT_KEYS))
            if qty > 0:
                trimmed = name.strip()
                key = trimmed.lower()
                display = spelling.setdefault(key, trimmed)
                found[display] = max(found.get(display, 0), qty)

        for value in node.values():
            walk(value, depth + 1)

    walk(root)
    return found


def extract_collection_totals(payload: Any) -> tuple[Optional[int], Optional[int]]:
    """Return (completed, available) collection-log counts, None when absent."""
    if not isinstance(payload, dict):
        return None, None
    data = payload.get("data", payload)
    if not isinstance(data, dict):
        return None, None

    def as_int(value) -> Optional[int]:
        try:
            return int(value) if value is not None else None
        except (TypeError, ValueError):
            return None

    completed = None
    for key in ("total_collections_in_response", "total_collections_found", "total_collections"):
        completed = as_int(data.get(key))
        if completed is not None:
            break
    return completed, as_int(data.get("total_collections_available"))


def extract_pet_names(payload: Any) -> set[str]:
    """Lowercased pet names from the pets/hours payload (dict or list of rows)."""
    names: set[str] = set()
    if not isinstance(payload, dict):
        return names
    data = payload.get("data", payload)
    rows = data if isinstance(data, list) else list(data.values()) if isinstance(data, dict) else []
    for row in rows:
        if isinstance(row, dict):
            pet = str(row.get("pet_name") or "").strip()
            if pet:
                names.add(pet.lower())
    return names


def count_unique_pets(obtained_names, pet_names: set[str]) -> int:
    return len({n.lower() for n in obtained_names if n.lower() in pet_names})


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class TempleClient(TrackerClient):
    """Async client for the TempleOSRS API."""

    service_name = "TempleOSRS"

    def __init__(self, base_url: str = DEFAULT_BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)
        self._pet_names: Optional[set[str]] = None
        self._pet_names_fetched_at: float = 0.0

    async def get_collection_log_raw(self, rsn: str) -> dict:
        return await self._request(
            "GET",
            "/collection-log/player_collection_log.php",
            params={
                "player": rsn,
                "categories": "all",
                "includenames": 1,
                "yearlygains": 0,
                "categoryhours": 0,
                "includemissingitems": 0,
                "onlyitems": 0,
                "dateformat": "unix",
            },
        )

    async def get_pet_names(self) -> set[str]:
        """Authoritative pet name list, cached in-process for an hour."""
        now = time.monotonic()
        if self._pet_names is not None and now - self._pet_names_fetched_at < PET_CACHE_TTL_SECONDS:
            return self._pet_names

        payload = await self._request("GET", "/pets/hours.php")
        self._pet_names = extract_pet_names(payload)
        self._pet_names_fetched_at = now
        logger.info("Loaded %d pet names from TempleOSRS", len(self._pet_names))
        return self._pet_names

    async def get_collection_log(self, rsn: str) -> CollectionLogSnapshot:
        payload = await self.get_collection_log_raw(rsn)
        quantities = extract_obtained_items(payload)
        completed, available = extract_collection_totals(payload)
        pet_names = await self.get_pet_names()

        snapshot = CollectionLogSnapshot(
            rsn=rsn,
            quantities=quantities,
            pets_unique=count_unique_pets(quantities, pet_names),
            completed=completed,
            available=available,
        )
        logger.info(
            "Temple collection log for %s: %d obtained, %d pets, %s/%s logged",
            rsn, len(quantities), snapshot.pets_unique, completed, available,
        )
        return snapshot
