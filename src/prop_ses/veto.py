"""Hard auto-fail rules evaluated before scoring.

Rules run in a fixed order and the first match wins. A matched rule forces a
`reject` decision no matter how well the proposition scores.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from prop_ses.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from prop_ses.models import Archetype, Proposition
from prop_ses.stat_shape import REBOUNDS, has_component, is_combination_stat, is_half_point

VETO_COMBO_HALF_UNDER = "combo_half_under"
VETO_MEDIAN_DEAD_ZONE = "median_dead_zone"
VETO_REBOUNDER_IMMUNITY = "rebounder_immunity"
VETO_BLOWOUT_OVERRULE = "blowout_overrule"
VETO_CEILING = "ceiling_check"


@dataclass(frozen=True)
class VetoHit:
    rule_id: str
    title: str
    rationale: str
    detail: str

    @property
    def reason(self) -> str:
        return f"{self.title}: {self.detail}"


VetoCheck = Callable[[Proposition, Archetype, EngineConfig], str | None]


@dataclass(frozen=True)
class VetoRule:
    rule_id: str
    title: str
    rationale: str
    check: VetoCheck


def _combo_half_under(prop: Proposition, archetype: Archetype, config: EngineConfig) -> str | None:
    if prop.side == "under" and is_half_point(prop.line) and is_combination_stat(prop.stat):
        return f"{prop.stat} under on half-point line {prop.line:g}"
    return None


def _median_dead_zone(prop: Proposition, archetype: Archetype, config: EngineConfig) -> str | None:
    gap = prop.median_gap
    if gap is None or abs(gap) > config.dead_zone:
        return None
    return f"line {prop.line:g} within {config.dead_zone:g} of median {prop.rolling_median:g}"


def _rebounder_immunity(
    prop: Proposition, archetype: Archetype, config: EngineConfig
) -> str | None:
    if archetype != "Big" or prop.side != "under":
        return None
    if not (is_combination_stat(prop.stat) and has_component(prop.stat, REBOUNDS)):
        return None
    if not config.is_high_usage_rebounder(prop.player):
        return None
    median = prop.rolling_median
    if median is not None and prop.line >= median + config.rebounder_override_gap:
        return None
    return f"{prop.player} is on the high-usage rebounder list"


def _blowout_overrule(prop: Proposition, archetype: Archetype, config: EngineConfig) -> str | None:
    if prop.side != "under" or prop.spread is None or prop.avg_minutes is None:
        return None
    if abs(prop.spread) >= config.blowout_spread and prop.avg_minutes >= config.blowout_minutes:
        return f"spread {abs(prop.spread):g} with {prop.avg_minutes:g} avg minutes"
    return None


def _ceiling_check(prop: Proposition, archetype: Archetype, config: EngineConfig) -> str | None:
    if prop.side != "under" or len(prop.recent_games) < config.ceiling_min_games:
        return None
    if prop.line <= 0:
        return None
    ceiling = max(prop.recent_games)
    ratio = ceiling / prop.line
    if ratio > config.ceiling_ratio:
        pct = round((ratio - 1.0) * 100)
        return (
            f"max {ceiling:g} in last {len(prop.recent_games)} is {pct}% above line {prop.line:g}"
        )
    return None


VETO_RULES: tuple[VetoRule, ...] = (
    VetoRule(
        rule_id=VETO_COMBO_HALF_UNDER,
        title="Half-point combo under ban",
        rationale=(
            "Late-game padding and rebound variance make half-point combo unders too risky"
        ),
        check=_combo_half_under,
    ),
    VetoRule(
        rule_id=VETO_MEDIAN_DEAD_ZONE,
        title="Median dead-zone",
        rationale="Line sits on the recent median, a coin-flip with no edge",
        check=_median_dead_zone,
    ),
    VetoRule(
        rule_id=VETO_REBOUNDER_IMMUNITY,
        title="High-usage rebounder immunity",
        rationale="High-minute bigs keep a stable rebound floor; do not fade their combos",
        check=_rebounder_immunity,
    ),
    VetoRule(
        rule_id=VETO_BLOWOUT_OVERRULE,
        title="Blowout overrule",
        rationale="Never fade 30+ minute players on blowout risk alone",
        check=_blowout_overrule,
    ),
    VetoRule(
        rule_id=VETO_CEILING,
        title="Ceiling check",
        rationale="A recent outlier far above the line makes the under unsafe",
        check=_ceiling_check,
    ),
)


def find_veto(
    prop: Proposition,
    archetype: Archetype,
    *,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    rules: tuple[VetoRule, ...] = VETO_RULES,
) -> VetoHit | None:
    """Return the first matching rule, or None when the proposition survives."""
    for rule in rules:
        detail = rule.check(prop, archetype, config)
        if detail is not None:
            return VetoHit(
                rule_id=rule.rule_id,
                title=rule.title,
                rationale=rule.rationale,
                detail=detail,
            )
    return None
