"""Signal Evaluation Score (SES): five capped components summed into 0-100."""

from __future__ import annotations

from dataclasses import dataclass

from prop_ses.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from prop_ses.environment import select_model
from prop_ses.models import (
    SES_COMPONENT_CAPS,
    Archetype,
    MinutesTier,
    Proposition,
    SesComponents,
)
from prop_ses.stat_shape import ASSISTS, REBOUNDS, has_component, line_structure, minutes_tier

NO_MEDIAN_SCORE = 15.0
GUARD_ASSIST_OVER_BONUS = 4.0
BIG_REBOUND_HALF_UNDER_PENALTY = 6.0
DEMON_MIN_CLEARANCE = 0.20
GOBLIN_MIN_GAP = 2.0

_MINUTES_SCORES: dict[MinutesTier, float] = {"locked": 15.0, "medium": 10.0, "risky": 4.0}


@dataclass(frozen=True)
class SesScore:
    components: SesComponents
    score: float
    minutes_tier: MinutesTier
    environment_model: str


def side_gap(prop: Proposition) -> float | None:
    """Median distance from the line in the bet's favor (positive is good)."""
    if prop.rolling_median is None:
        return None
    if prop.side == "over":
        return prop.rolling_median - prop.line
    return prop.line - prop.rolling_median


def median_gap_score(prop: Proposition) -> float:
    gap = prop.median_gap
    if gap is None:
        return NO_MEDIAN_SCORE
    if prop.side == "over":
        if gap <= -2:
            return 40.0
        if gap <= -1:
            return 32.0
        if gap <= 0:
            return 24.0
        if gap <= 1:
            return 12.0
        return 0.0
    if gap >= 2:
        return 40.0
    if gap >= 1:
        return 28.0
    if gap >= 0.5:
        return 16.0
    return 0.0


def line_structure_score(prop: Proposition) -> float:
    if line_structure(prop.line) == "whole":
        return 20.0
    return 12.0 if prop.side == "over" else 6.0


def minutes_certainty_score(tier: MinutesTier) -> float:
    return _MINUTES_SCORES[tier]


def market_type_score(prop: Proposition, tier: MinutesTier) -> float:
    if prop.market_type == "Goblin":
        gap = side_gap(prop)
        return 10.0 if gap is not None and gap >= GOBLIN_MIN_GAP else 3.0
    if prop.market_type == "Demon":
        gap = side_gap(prop)
        if gap is None or prop.line <= 0:
            return 2.0
        clearance = gap / prop.line
        return 12.0 if clearance >= DEMON_MIN_CLEARANCE and tier == "locked" else 2.0
    return 15.0


def score_proposition(
    prop: Proposition,
    archetype: Archetype,
    *,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> SesScore:
    tier = minutes_tier(prop.avg_minutes, config=config)
    model = select_model(prop)

    median_gap = median_gap_score(prop)
    structure = line_structure_score(prop)
    environment = round(model.score(prop, config=config), 2)

    if archetype == "Guard" and prop.side == "over" and has_component(prop.stat, ASSISTS):
        median_gap = min(SES_COMPONENT_CAPS["median_gap"], median_gap + GUARD_ASSIST_OVER_BONUS)
    if (
        archetype == "Big"
        and prop.side == "under"
        and has_component(prop.stat, REBOUNDS)
        and line_structure(prop.line) == "half"
    ):
        structure = max(0.0, structure - BIG_REBOUND_HALF_UNDER_PENALTY)

    components = SesComponents(
        median_gap=median_gap,
        line_structure=structure,
        minutes_certainty=minutes_certainty_score(tier),
        market_type=market_type_score(prop, tier),
        environment=environment,
    )
    score = max(0.0, min(100.0, components.total))
    return SesScore(
        components=components,
        score=score,
        minutes_tier=tier,
        environment_model=model.family,
    )
