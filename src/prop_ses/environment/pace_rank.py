"""Weighted pace / defensive-rank environment blend."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from prop_ses.engine_config import EngineConfig
from prop_ses.environment.base import ENVIRONMENT_CAP, NEUTRAL_ENVIRONMENT, SportFamily, clamp
from prop_ses.models import PaceContext, Proposition
from prop_ses.stat_shape import ASSISTS, POINTS, REBOUNDS, stat_components

RANK_COUNT = 30
NEUTRAL_FACTOR = 0.5
SCALE = 12.5

WEIGHT_OPPONENT_DEFENSE = 0.30
WEIGHT_TEAM_OFFENSE = 0.20
WEIGHT_LEAGUE_PACE = 0.15
WEIGHT_OPPONENT_PACE = 0.05
WEIGHT_BLOWOUT = -0.10

PACE_RATING_FACTORS = {"HIGH": 1.0, "MEDIUM": 0.5, "LOW": 0.0}

COMBO_STAT_WEIGHTS: dict[tuple[str, ...], dict[str, float]] = {
    (POINTS, REBOUNDS): {POINTS: 0.60, REBOUNDS: 0.40},
    (POINTS, ASSISTS): {POINTS: 0.65, ASSISTS: 0.35},
    (REBOUNDS, ASSISTS): {REBOUNDS: 0.50, ASSISTS: 0.50},
    (POINTS, REBOUNDS, ASSISTS): {POINTS: 0.50, REBOUNDS: 0.25, ASSISTS: 0.25},
}


def blowout_probability(spread: float | None) -> float:
    """Rough chance the game gets out of hand, from the point spread."""
    if spread is None:
        return 0.15
    magnitude = abs(spread)
    if magnitude >= 12:
        return 0.75
    if magnitude >= 10:
        return 0.65
    if magnitude >= 8:
        return 0.55
    if magnitude >= 6:
        return 0.40
    if magnitude >= 4:
        return 0.25
    return 0.15


def pace_rating_from_total(total: float | None) -> str | None:
    if total is None:
        return None
    if total >= 235:
        return "HIGH"
    if total >= 220:
        return "MEDIUM"
    return "LOW"


def _clamp_rank(rank: int) -> int:
    return max(1, min(RANK_COUNT, int(rank)))


def rank_softness(rank: int) -> float:
    """1 -> 0.0 (best defense), 30 -> 1.0 (worst defense)."""
    return (_clamp_rank(rank) - 1) / (RANK_COUNT - 1)


def rank_strength(rank: int) -> float:
    """1 -> 1.0 (best), 30 -> 0.0 (worst)."""
    return (RANK_COUNT - _clamp_rank(rank)) / (RANK_COUNT - 1)


def stat_weights(stat: str) -> dict[str, float]:
    components = stat_components(stat)
    if not components:
        return {}
    fixed = COMBO_STAT_WEIGHTS.get(components)
    if fixed is not None:
        return dict(fixed)
    share = 1.0 / len(components)
    return {component: share for component in components}


def blended_factor(
    ranks: Mapping[str, int], stat: str, *, transform: Callable[[int], float]
) -> float | None:
    """Blend per-stat ranks with the stat's sub-weights, skipping missing ranks."""
    weights = stat_weights(stat)
    total_weight = 0.0
    total = 0.0
    for component, weight in weights.items():
        rank = ranks.get(component)
        if rank is None:
            continue
        total += weight * transform(rank)
        total_weight += weight
    if total_weight <= 0:
        return None
    return total / total_weight


def league_pace_factor(context: PaceContext) -> float:
    label = (context.pace_rating or "").strip().upper() or pace_rating_from_total(
        context.game_total
    )
    if label is None:
        return NEUTRAL_FACTOR
    return PACE_RATING_FACTORS.get(label, NEUTRAL_FACTOR)


class PaceRankModel:
    family: SportFamily = "pace_rank"

    def applies(self, prop: Proposition) -> bool:
        return True

    def factors(self, prop: Proposition) -> dict[str, float]:
        context = prop.pace_context or PaceContext()
        defense = blended_factor(
            dict(context.opponent_defense_ranks), prop.stat, transform=rank_softness
        )
        if defense is None:
            defense = NEUTRAL_FACTOR
        elif prop.side == "under":
            defense = 1.0 - defense
        offense = blended_factor(
            dict(context.team_offense_ranks), prop.stat, transform=rank_strength
        )
        return {
            "opponent_defense": defense,
            "team_offense": NEUTRAL_FACTOR if offense is None else offense,
            "league_pace": league_pace_factor(context),
            "opponent_pace": (
                NEUTRAL_FACTOR
                if context.opponent_pace_rank is None
                else rank_strength(context.opponent_pace_rank)
            ),
            "blowout": blowout_probability(prop.spread),
        }

    def score(self, prop: Proposition, *, config: EngineConfig) -> float:
        if prop.pace_context is None or not prop.pace_context.has_data:
            return NEUTRAL_ENVIRONMENT
        factors = self.factors(prop)
        weighted = (
            WEIGHT_OPPONENT_DEFENSE * factors["opponent_defense"]
            + WEIGHT_TEAM_OFFENSE * factors["team_offense"]
            + WEIGHT_LEAGUE_PACE * factors["league_pace"]
            + WEIGHT_OPPONENT_PACE * factors["opponent_pace"]
            + WEIGHT_BLOWOUT * factors["blowout"]
        )
        return clamp(weighted * SCALE, 0.0, ENVIRONMENT_CAP)
