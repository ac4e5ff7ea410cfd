from dataclasses import replace

import pytest

from prop_ses.engine import (
    build_combination,
    evaluate,
    evaluate_one,
    summarize_results,
)
from prop_ses.engine_config import DEFAULT_ENGINE_CONFIG
from prop_ses.models import Combination, GameContext, Proposition


def _prop(**overrides: object) -> Proposition:
    base = Proposition(
        player="Jalen Brunson",
        stat="points",
        line=22.5,
        side="over",
        team="NYK",
        opponent="BOS",
        avg_minutes=34.0,
        rolling_median=25.0,
    )
    return replace(base, **overrides)


def test_strong_over_scores_and_bets() -> None:
    result = evaluate_one(_prop())

    assert result.veto_reason is None
    assert result.components.as_dict() == {
        "median_gap": 40.0,
        "line_structure": 12.0,
        "minutes_certainty": 15.0,
        "market_type": 15.0,
        "environment": 5.0,
    }
    assert result.score == pytest.approx(87.0)
    assert result.decision == "bet"
    assert result.line_structure == "half"
    assert result.minutes_tier == "locked"
    assert result.median_gap == pytest.approx(-2.5)
    assert result.environment_model == "pace_rank"
    assert result.justification.startswith("Strong edge: line 2.5 below median")


def test_veto_forces_reject_but_keeps_score() -> None:
    prop = _prop(stat="points_rebounds", line=24.5, side="under", rolling_median=20.0)
    result = evaluate_one(prop)

    assert result.vetoed is True
    assert result.decision == "reject"
    assert result.veto_reason is not None
    assert result.veto_reason.startswith("Half-point combo under ban")
    assert result.score > 0


def test_blowout_risk_flag_follows_spread() -> None:
    assert evaluate_one(_prop(spread=-9.5)).blowout_risk is True
    assert evaluate_one(_prop(spread=3.0)).blowout_risk is False
    assert evaluate_one(_prop()).blowout_risk is False


def test_tempo_context_selects_tempo_model() -> None:
    context = GameContext(team_adj_tempo=72.0, opponent_adj_tempo=72.0)
    result = evaluate_one(_prop(game_context=context))

    assert result.environment_model == "tempo_efficiency"
    assert result.components.environment == pytest.approx(8.0)


def test_evaluate_preserves_order_and_is_idempotent() -> None:
    props = [
        _prop(player="A Player"),
        _prop(player="B Player", stat="rebounds", line=8.0, side="under", rolling_median=5.5),
        _prop(player="C Player", stat="points_rebounds", line=24.5, side="under"),
    ]

    first = evaluate(props)
    second = evaluate(props)

    assert [row.player for row in first] == ["A Player", "B Player", "C Player"]
    assert first == second


def test_thresholds_come_from_config() -> None:
    strict = DEFAULT_ENGINE_CONFIG.with_overrides(bet_threshold=90.0, lean_threshold=80.0)
    result = evaluate_one(_prop(), config=strict)
    assert result.decision == "lean"


def test_summary_counts() -> None:
    results = evaluate(
        [
            _prop(player="A Player"),
            _prop(player="B Player", stat="points_rebounds", line=24.5, side="under"),
            _prop(player="C Player", rolling_median=21.5, avg_minutes=20.0),
        ]
    )

    summary = summarize_results(results)

    assert summary["total"] == 3
    assert summary["bets"] == 1
    assert summary["vetoed"] == 1
    assert summary["rejects"] == 2
    assert summarize_results([])["avg_score"] == 0.0


def test_combination_from_evaluated_batch() -> None:
    results = evaluate(
        [
            _prop(player="A Player", team="BOS", opponent="NYK"),
            _prop(
                player="B Player",
                stat="rebounds",
                line=8.0,
                side="under",
                rolling_median=5.5,
                position="C",
                team="NYK",
            ),
            _prop(player="C Player", stat="points_rebounds", line=24.5, side="under"),
        ]
    )

    outcome = build_combination(results)

    assert isinstance(outcome, Combination)
    assert [leg.player for leg in outcome.legs] == ["A Player", "B Player"]
    assert outcome.combined_score == pytest.approx(91.0)