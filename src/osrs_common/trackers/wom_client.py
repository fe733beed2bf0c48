"""
Wise Old Man client and the PvM total partitioning.

Boss metrics are split three ways: raid keys feed raids_total, a small
set of skilling-boss and minigame keys are ignored, and everything else
feeds boss_kills_total.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import quote

from .base import TrackerClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.wiseoldman.net/v2"

RAID_KEYS = frozenset({
    "chambers_of_xeric",
    "chambers_of_xeric_challenge_mode",
    "theatre_of_blood",
    "theatre_of_blood_hard_mode",
    "tombs_of_amascut",
    "tombs_of_amascut_expert",
})

# Not counted towards the Zamorakian boss path
ZAM_BOSS_EXCLUDE_KEYS = frozenset({
    "wintertodt",
    "zalcano",
    "hespori",
    "guardians_of_the_rift",
    "gotr",
})

GOTR_ACTIVITY_KEYS = ("guardians_of_the_rift", "guardians_of_the_rift_games", "gotr")

_PRETTY_OVERRIDES = {
    "chambers_of_xeric": "Chambers of Xeric",
    "chambers_of_xeric_challenge_mode": "Challenge Mode Chambers of Xeric",
    "theatre_of_blood": "Theatre of Blood",
    "theatre_of_blood_hard_mode": "Hard Mode Theatre of Blood",
    "tombs_of_amascut": "Tombs of Amascut",
    "tombs_of_amascut_expert": "Expert Tombs of Amascut",
    "guardians_of_the_rift": "Guardians of the Rift",
}


@dataclass
class PvmHighlight:
    key: str = ""
    name: str = "—"
    kc: int = 0


@dataclass
class PvmTotals:
    raids_total: int = 0
    boss_kills_total: int = 0
    highest_raid: PvmHighlight = field(default_factory=PvmHighlight)
    highest_boss: PvmHighlight = field(default_factory=PvmHighlight)
    gotr_activity_kc: int = 0

    def to_dict(self) -> dict:
        return {
            "raids_total": self.raids_total,
            "boss_kills_total": self.boss_kills_total,
            "highest_raid": vars(self.highest_raid).copy(),
            "highest_boss": vars(self.highest_boss).copy(),
            "gotr_activity_kc": self.gotr_activity_kc,
        }


def pretty_boss_name(key: str) -> str:
    if key in _PRETTY_OVERRIDES:
        return _PRETTY_OVERRIDES[key]
    return " ".join(w[:1].upper() + w[1:].lower() for w in key.replace("_", " ").split())


def metric_to_kc(metric: Any) -> int:
    """kills, else score, else kc; WOM reports unranked as -1, treated as 0."""
    if not isinstance(metric, dict):
        return 0
    for key in ("kills", "score", "kc"):
        value = metric.get(key)
        if value is None:
            continue
        try:
            return max(int(value), 0)
        except (TypeError, ValueError):
            return 0
    return 0


def _snapshot_data(player: Any) -> dict:
    if not isinstance(player, dict):
        return {}
    snapshot = player.get("latestSnapshot") or {}
    return snapshot.get("data") or {}


def extract_total_level(player: Any) -> Optional[int]:
    """latestSnapshot.data.skills.overall.level, or None when missing."""
    overall = (_snapshot_data(player).get("skills") or {}).get("overall") or {}
    level = overall.get("level")
    try:
        return int(level) if level is not None else None
    except (TypeError, ValueError):
        return None


def partition_pvm_totals(player: Any) -> PvmTotals:
    data = _snapshot_data(player)
    bosses = data.get("bosses") or {}
    activities = data.get("activities") or {}

    totals = PvmTotals()
    for key, metric in bosses.items():
        kc = metric_to_kc(metric)
        if key in RAID_KEYS:
            totals.raids_total += kc
            if kc > totals.highest_raid.kc:
                totals.highest_raid = PvmHighlight(key, pretty_boss_name(key), kc)
            continue
        if key in ZAM_BOSS_EXCLUDE_KEYS:
            continue
        totals.boss_kills_total += kc
        if kc > totals.highest_boss.kc:
            totals.highest_boss = PvmHighlight(key, pretty_boss_name(key), kc)

    for key in GOTR_ACTIVITY_KEYS:
        kc = metric_to_kc(activities.get(key))
        if kc > 0:
            totals.gotr_activity_kc = kc
            break

    return totals


class WiseOldManClient(TrackerClient):
    """Async client for the Wise Old Man v2 API."""

    service_name = "Wise Old Man"

    def __init__(self, base_url: str = DEFAULT_BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)

    async def get_player(self, rsn: str) -> dict:
        """Latest stored snapshot for a player."""
        return await self._request("GET", f"/players/{quote(rsn, safe='')}")

    async def update_player(self, rsn: str) -> dict:
        """Ask WOM to pull fresh hiscores; returns the updated player."""
        logger.info("Requesting Wise Old Man update for %s", rsn)
        return await self._request("POST", f"/players/{quote(rsn, safe='')}")
