from dataclasses import replace

import pytest

from prop_ses.engine_config import DEFAULT_ENGINE_CONFIG
from prop_ses.environment import NEUTRAL_ENVIRONMENT, get_model, resolve_sport_family, select_model
from prop_ses.environment.pace_rank import (
    PaceRankModel,
    blended_factor,
    blowout_probability,
    pace_rating_from_total,
    rank_softness,
    rank_strength,
)
from prop_ses.environment.tempo_efficiency import TempoEfficiencyModel
from prop_ses.models import GameContext, PaceContext, Proposition


def _prop(**overrides: object) -> Proposition:
    base = Proposition(player="Player A", stat="points", line=15.5, side="over")
    return replace(base, **overrides)


def _tempo_score(prop: Proposition) -> float:
    return TempoEfficiencyModel().score(prop, config=DEFAULT_ENGINE_CONFIG)


def _pace_score(prop: Proposition) -> float:
    return PaceRankModel().score(prop, config=DEFAULT_ENGINE_CONFIG)


def test_tempo_branch_rewards_fast_games_for_overs() -> None:
    context = GameContext(team_adj_tempo=72.0, opponent_adj_tempo=72.0)
    assert _tempo_score(_prop(game_context=context)) == pytest.approx(8.0)
    assert _tempo_score(_prop(side="under", game_context=context)) == pytest.approx(2.0)


def test_tempo_branch_neutral_context_stays_at_baseline() -> None:
    context = GameContext(team_adj_tempo=67.5, opponent_adj_tempo=67.5, opponent_adj_defense=105.0)
    assert _tempo_score(_prop(game_context=context)) == pytest.approx(NEUTRAL_ENVIRONMENT)


def test_tempo_branch_strong_defense_penalizes_over() -> None:
    context = GameContext(team_adj_tempo=67.5, opponent_adj_tempo=67.5, opponent_adj_defense=99.0)
    assert _tempo_score(_prop(game_context=context)) == pytest.approx(2.0)
    assert _tempo_score(_prop(side="under", game_context=context)) == pytest.approx(8.0)


def test_tempo_branch_clamps_to_cap() -> None:
    context = GameContext(
        team_adj_tempo=80.0,
        opponent_adj_tempo=80.0,
        team_adj_offense=118.0,
        opponent_adj_defense=112.0,
    )
    assert _tempo_score(_prop(game_context=context)) == 10.0
    assert _tempo_score(_prop(side="under", game_context=context)) == 0.0


def test_tempo_branch_elite_offense_bonus_only_for_overs() -> None:
    context = GameContext(team_adj_tempo=67.5, opponent_adj_tempo=67.5, team_adj_offense=116.0)
    assert _tempo_score(_prop(game_context=context)) == pytest.approx(7.0)
    assert _tempo_score(_prop(side="under", game_context=context)) == pytest.approx(5.0)


def test_pace_rank_factors_for_soft_fast_matchup() -> None:
    context = PaceContext(
        opponent_defense_ranks=(("points", 30),),
        team_offense_ranks=(("points", 1),),
        pace_rating="HIGH",
        opponent_pace_rank=1,
    )
    assert _pace_score(_prop(pace_context=context, spread=0.0)) == pytest.approx(8.5625)
    assert _pace_score(_prop(side="under", pace_context=context, spread=0.0)) == pytest.approx(
        4.8125
    )


def test_pace_rank_without_data_is_neutral() -> None:
    assert _pace_score(_prop()) == NEUTRAL_ENVIRONMENT
    assert _pace_score(_prop(pace_context=PaceContext())) == NEUTRAL_ENVIRONMENT


def test_pace_rank_blowout_penalty_lowers_score() -> None:
    context = PaceContext(opponent_defense_ranks=(("points", 15),))
    close = _pace_score(_prop(pace_context=context, spread=1.0))
    blowout = _pace_score(_prop(pace_context=context, spread=13.0))
    assert blowout < close
    assert close - blowout == pytest.approx((0.75 - 0.15) * 0.10 * 12.5)


def test_combination_stats_blend_defensive_ranks() -> None:
    ranks = {"points": 30, "rebounds": 1}
    assert blended_factor(ranks, "points_rebounds", transform=rank_softness) == pytest.approx(0.6)
    assert blended_factor({"points": 30}, "points_rebounds", transform=rank_softness) == 1.0
    assert blended_factor({}, "points", transform=rank_softness) is None


def test_rank_normalization_bounds() -> None:
    assert rank_softness(1) == 0.0
    assert rank_softness(30) == 1.0
    assert rank_strength(1) == 1.0
    assert rank_strength(30) == 0.0
    assert rank_softness(45) == 1.0


@pytest.mark.parametrize(
    ("spread", "expected"),
    [(None, 0.15), (2.0, 0.15), (-4.0, 0.25), (6.5, 0.40), (-8.0, 0.55), (10.0, 0.65), (14, 0.75)],
)
def test_blowout_probability_table(spread: float | None, expected: float) -> None:
    assert blowout_probability(spread) == expected


def test_pace_rating_from_total() -> None:
    assert pace_rating_from_total(236.5) == "HIGH"
    assert pace_rating_from_total(225.0) == "MEDIUM"
    assert pace_rating_from_total(210.0) == "LOW"
    assert pace_rating_from_total(None) is None


def test_sport_family_resolution() -> None:
    context = GameContext(team_adj_tempo=70.0, opponent_adj_tempo=66.0)
    assert resolve_sport_family(_prop(sport="basketball_ncaab")) == "tempo_efficiency"
    assert resolve_sport_family(_prop(sport="NBA")) == "pace_rank"
    assert resolve_sport_family(_prop(game_context=context)) == "tempo_efficiency"
    assert resolve_sport_family(_prop()) == "pace_rank"
    assert resolve_sport_family(_prop(sport="nba", game_context=context)) == "tempo_efficiency"
    assert resolve_sport_family(_prop(sport="nba", game_context=GameContext())) == "pace_rank"


def test_select_model_requires_tempo_inputs_and_counting_stat() -> None:
    context = GameContext(team_adj_tempo=70.0, opponent_adj_tempo=66.0)
    assert select_model(_prop(sport="ncaab", game_context=context)).family == "tempo_efficiency"
    assert select_model(_prop(sport="ncaab")).family == "pace_rank"
    non_counting = _prop(sport="ncaab", stat="fantasy_score", game_context=context)
    assert select_model(non_counting).family == "pace_rank"
    assert select_model(_prop(sport="nba", game_context=context)).family == "tempo_efficiency"


def test_get_model_rejects_unknown_family() -> None:
    with pytest.raises(ValueError, match="unknown sport family"):
        get_model("cricket")  # type: ignore[arg-type]
