"""Additive tempo/efficiency environment around a neutral baseline of 5."""

from __future__ import annotations

from prop_ses.engine_config import EngineConfig
from prop_ses.environment.base import ENVIRONMENT_CAP, NEUTRAL_ENVIRONMENT, SportFamily, clamp
from prop_ses.models import GameContext, Proposition
from prop_ses.stat_shape import is_counting_stat

PACE_MAX_ADJUSTMENT = 4.0
PACE_POSSESSIONS_PER_POINT = 1.5
DEFENSE_MAX_ADJUSTMENT = 3.0
DEFENSE_EFFICIENCY_PER_POINT = 2.0
ELITE_OFFENSE_BONUS = 2.0


def pace_adjustment(context: GameContext) -> float:
    """Signed pace swing; positive means a faster-than-league game."""
    if context.team_adj_tempo is None or context.opponent_adj_tempo is None:
        return 0.0
    combined = (context.team_adj_tempo + context.opponent_adj_tempo) / 2.0
    delta = (combined - context.league_avg_tempo) / PACE_POSSESSIONS_PER_POINT
    return clamp(delta, -PACE_MAX_ADJUSTMENT, PACE_MAX_ADJUSTMENT)


def defense_adjustment(context: GameContext) -> float:
    """Signed defensive swing; positive means a softer-than-league opponent.

    Adjusted defense is points allowed per 100 possessions, so lower is stronger.
    """
    if context.opponent_adj_defense is None:
        return 0.0
    delta = (
        context.opponent_adj_defense - context.league_avg_efficiency
    ) / DEFENSE_EFFICIENCY_PER_POINT
    return clamp(delta, -DEFENSE_MAX_ADJUSTMENT, DEFENSE_MAX_ADJUSTMENT)


class TempoEfficiencyModel:
    family: SportFamily = "tempo_efficiency"

    def applies(self, prop: Proposition) -> bool:
        context = prop.game_context
        if context is None or not (context.has_tempo or context.has_efficiency):
            return False
        return is_counting_stat(prop.stat)

    def score(self, prop: Proposition, *, config: EngineConfig) -> float:
        context = prop.game_context
        if context is None:
            return NEUTRAL_ENVIRONMENT
        direction = 1.0 if prop.side == "over" else -1.0
        value = NEUTRAL_ENVIRONMENT
        value += direction * pace_adjustment(context)
        value += direction * defense_adjustment(context)
        if (
            prop.side == "over"
            and context.team_adj_offense is not None
            and context.team_adj_offense >= config.elite_offense_efficiency
        ):
            value += ELITE_OFFENSE_BONUS
        return clamp(value, 0.0, ENVIRONMENT_CAP)
