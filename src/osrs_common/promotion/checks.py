"""
Promotion request builder — qualification checks and the staff summary.

Everything here is a pure function of PromotionInputs.  Each check
applies only to certain requested role labels and returns None
otherwise; a missing numeric input gives a VERIFY result, never an error.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from osrs_common.ranks.pvm import RankEvaluation
from osrs_common.ranks.skilling import skilling_requirements

SKILL_TOTAL_LEVEL_REQ: dict[str, int] = skilling_requirements()

ZAMORAKIAN_LABEL = "Zamorakian"
ZAM_TARGET_RAIDS = 3000
ZAM_TARGET_BOSS_KC = 35000


@dataclass(frozen=True)
class SpecialRequirement:
    pets: int
    clog: int


SPECIAL_REQ: dict[str, SpecialRequirement] = {
    "Proselyte": SpecialRequirement(pets=2, clog=700),
    "Major": SpecialRequirement(pets=10, clog=850),
    "Master": SpecialRequirement(pets=15, clog=1000),
    "Colonel": SpecialRequirement(pets=25, clog=1250),
}


class CheckStatus(str, Enum):
    MATCHES = "matches_qualified"
    VERIFY = "verify"


_STATUS_TEXT = {
    CheckStatus.MATCHES: "✅ matches qualified",
    CheckStatus.VERIFY: "⚠️ verify",
}


@dataclass(frozen=True)
class CheckResult:
    label: str
    status: CheckStatus
    detail: Optional[str] = None
    missing_input: bool = False

    @property
    def passed(self) -> bool:
        return self.status is CheckStatus.MATCHES

    def to_line(self) -> str:
        line = f"• **{self.label}:** {_STATUS_TEXT[self.status]}"
        return f"{line} ({self.detail})" if self.detail else line

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "status": self.status.value,
            "detail": self.detail,
            "missing_input": self.missing_input,
        }


@dataclass(frozen=True)
class PromotionInputs:
    rsn: str
    requested_role: str
    requester_discord_id: str
    requested_rank: Optional[str] = None
    notes: Optional[str] = None
    item_points_earned: Optional[int] = None
    item_next_threshold: Optional[int] = None
    item_qualified_rank_label: Optional[str] = None
    item_next_rank_label: Optional[str] = None
    total_level: Optional[int] = None
    raids_total: Optional[int] = None
    boss_kills_total: Optional[int] = None
    pets_unique: Optional[int] = None
    collection_log_completed: Optional[int] = None

    def with_evaluation(self, evaluation: RankEvaluation) -> "PromotionInputs":
        """Fill the item fields from a server-side PvM evaluation."""
        return replace(
            self,
            item_points_earned=evaluation.points_earned,
            item_next_threshold=evaluation.next_threshold,
            item_qualified_rank_label=evaluation.qualified_rank.label,
            item_next_rank_label=evaluation.next_rank.label if evaluation.next_rank else None,
        )


def fmt_int(n) -> str:
    if n is None:
        return "—"
    try:
        return f"{int(n):,}"
    except (TypeError, ValueError):
        return "—"


def is_non_item_rank_label(label: str) -> bool:
    return label == ZAMORAKIAN_LABEL or label in SKILL_TOTAL_LEVEL_REQ or label in SPECIAL_REQ


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def item_request_check(requested_role: str, qualified_label: Optional[str]) -> Optional[CheckResult]:
    if not qualified_label or not requested_role or is_non_item_rank_label(requested_role):
        return None
    status = CheckStatus.MATCHES if requested_role == qualified_label else CheckStatus.VERIFY
    return CheckResult("Item request check", status)


def skilling_check(requested_role: str, total_level: Optional[int]) -> Optional[CheckResult]:
    req = SKILL_TOTAL_LEVEL_REQ.get(requested_role)
    if not req:
        return None
    if total_level is None:
        return CheckResult("Skilling check", CheckStatus.VERIFY, "missing total level", missing_input=True)
    status = CheckStatus.MATCHES if total_level >= req else CheckStatus.VERIFY
    return CheckResult(
        "Skilling check", status, f"{fmt_int(total_level)} / {fmt_int(req)} total level"
    )


def zamorakian_check(
    requested_role: str,
    raids_total: Optional[int],
    boss_kills_total: Optional[int],
) -> Optional[CheckResult]:
    """One path is enough: raids OR boss kills."""
    if requested_role != ZAMORAKIAN_LABEL:
        return None
    if raids_total is None or boss_kills_total is None:
        return CheckResult("Zamorakian check", CheckStatus.VERIFY, "missing PvM totals", missing_input=True)

    ok = raids_total >= ZAM_TARGET_RAIDS or boss_kills_total >= ZAM_TARGET_BOSS_KC
    detail = (
        f"Raids {fmt_int(raids_total)}/{fmt_int(ZAM_TARGET_RAIDS)} • "
        f"Bossing {fmt_int(boss_kills_total)}/{fmt_int(ZAM_TARGET_BOSS_KC)} • needs ONE"
    )
    return CheckResult("Zamorakian check", CheckStatus.MATCHES if ok else CheckStatus.VERIFY, detail)


def special_check(
    requested_role: str,
    pets_unique: Optional[int],
    collection_log_completed: Optional[int],
) -> Optional[CheckResult]:
    """Pets AND collection log must both meet the milestone."""
    req = SPECIAL_REQ.get(requested_role)
    if req is None:
        return None
    label = f"{requested_role} check"
    if pets_unique is None or collection_log_completed is None:
        return CheckResult(label, CheckStatus.VERIFY, "missing pets/clog", missing_input=True)

    ok = pets_unique >= req.pets and collection_log_completed >= req.clog
    detail = (
        f"Pets {fmt_int(pets_unique)}/{fmt_int(req.pets)}, "
        f"CLog {fmt_int(collection_log_completed)}/{fmt_int(req.clog)}"
    )
    return CheckResult(label, CheckStatus.MATCHES if ok else CheckStatus.VERIFY, detail)


def build_checks(inputs: PromotionInputs) -> list[CheckResult]:
    """Every check that applies to the requested role, in display order."""
    role = inputs.requested_role
    checks = [
        item_request_check(role, inputs.item_qualified_rank_label),
        skilling_check(role, inputs.total_level),
        zamorakian_check(role, inputs.raids_total, inputs.boss_kills_total),
        special_check(role, inputs.pets_unique, inputs.collection_log_completed),
    ]
    return [c for c in checks if c is not None]


# ---------------------------------------------------------------------------
# Staff summary
# ---------------------------------------------------------------------------


def build_summary_lines(inputs: PromotionInputs, request_id: Optional[str] = None) -> list[str]:
    """Markdown lines for the staff review message; inapplicable lines are omitted."""
    role = inputs.requested_role
    requester = inputs.requester_discord_id

    if inputs.item_points_earned is not None:
        next_part = fmt_int(inputs.item_next_threshold) if inputs.item_next_threshold is not None else "—"
        points_line = f"• **Item points:** {fmt_int(inputs.item_points_earned)} / {next_part}"
    else:
        points_line = "• **Item points:** —"

    qualified_line = None
    if inputs.item_qualified_rank_label:
        qualified_line = f"• **Item qualified:** {inputs.item_qualified_rank_label}"
        if inputs.item_next_rank_label:
            qualified_line += f" (Next: {inputs.item_next_rank_label})"

    item_check = item_request_check(role, inputs.item_qualified_rank_label)
    skill = skilling_check(role, inputs.total_level)
    zam = zamorakian_check(role, inputs.raids_total, inputs.boss_kills_total)
    special = special_check(role, inputs.pets_unique, inputs.collection_log_completed)

    notes = (inputs.notes or "").strip()

    lines = [
        "📝 **Rank Up Review Request**",
        f"• **RSN:** {inputs.rsn}",
        f"• **Requested Role:** {role}",
        f"• **Requester:** <@{requester}> (`{requester}`)",
        f"• **Total level:** {fmt_int(inputs.total_level)}",
        points_line,
        qualified_line,
        item_check.to_line() if item_check else None,
        f"• **Unique pets:** {fmt_int(inputs.pets_unique)}" if inputs.pets_unique is not None else None,
        (
            f"• **Collection log:** {fmt_int(inputs.collection_log_completed)}"
            if inputs.collection_log_completed is not None
            else None
        ),
        skill.to_line() if skill else None,
        zam.to_line() if zam else None,
        special.to_line() if special else None,
        f"• **Notes:** {notes}" if notes else None,
        f"Request ID: `{request_id}`" if request_id else None,
    ]
    return [line for line in lines if line]
