"""Public entry points: evaluate a batch of propositions and combine the survivors.

Each proposition runs through three pure stages (veto -> score -> decide); the
combination search then reads the full evaluated batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from prop_ses import combination as _combination
from prop_ses.archetype import infer_archetype
from prop_ses.decision import build_justification, classify_decision
from prop_ses.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from prop_ses.models import (
    Archetype,
    Combination,
    CombinationFailure,
    EvaluationResult,
    Proposition,
)
from prop_ses.ses import SesScore, score_proposition
from prop_ses.stat_shape import line_structure
from prop_ses.veto import VetoHit, find_veto

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VetoStage:
    prop: Proposition
    archetype: Archetype
    veto: VetoHit | None


@dataclass(frozen=True)
class ScoreStage:
    veto_stage: VetoStage
    ses: SesScore


def veto_stage(prop: Proposition, *, config: EngineConfig) -> VetoStage:
    archetype = infer_archetype(prop.position, prop.stat)
    return VetoStage(prop=prop, archetype=archetype, veto=find_veto(prop, archetype, config=config))


def score_stage(stage: VetoStage, *, config: EngineConfig) -> ScoreStage:
    return ScoreStage(
        veto_stage=stage,
        ses=score_proposition(stage.prop, stage.archetype, config=config),
    )


def decide_stage(stage: ScoreStage, *, config: EngineConfig) -> EvaluationResult:
    prop = stage.veto_stage.prop
    veto = stage.veto_stage.veto
    ses = stage.ses
    decision = classify_decision(ses.score, vetoed=veto is not None, config=config)
    return EvaluationResult(
        player=prop.player,
        stat=prop.stat,
        line=prop.line,
        side=prop.side,
        team=prop.team,
        opponent=prop.opponent,
        event_id=prop.event_id,
        game_date=prop.game_date,
        price=prop.price,
        market_type=prop.market_type,
        sport=prop.sport,
        line_structure=line_structure(prop.line),
        archetype=stage.veto_stage.archetype,
        rolling_median=prop.rolling_median,
        median_gap=prop.median_gap,
        minutes_tier=ses.minutes_tier,
        blowout_risk=prop.spread is not None and abs(prop.spread) >= config.blowout_spread,
        environment_model=ses.environment_model,
        components=ses.components,
        score=ses.score,
        decision=decision,
        veto_reason=veto.reason if veto is not None else None,
        justification=build_justification(
            prop,
            score=ses.score,
            decision=decision,
            components=ses.components,
            veto=veto,
        ),
    )


def evaluate_one(
    prop: Proposition, *, config: EngineConfig = DEFAULT_ENGINE_CONFIG
) -> EvaluationResult:
    scored = score_stage(veto_stage(prop, config=config), config=config)
    result = decide_stage(scored, config=config)
    if result.veto_reason is not None:
        logger.debug("vetoed %s %s %s: %s", prop.player, prop.stat, prop.side, result.veto_reason)
    return result


def evaluate(
    propositions: Iterable[Proposition], *, config: EngineConfig = DEFAULT_ENGINE_CONFIG
) -> list[EvaluationResult]:
    """Evaluate every proposition independently; output order follows input order."""
    results = [evaluate_one(prop, config=config) for prop in propositions]
    summary = summarize_results(results)
    logger.info(
        "evaluated %d props: %d bet, %d lean, %d reject (%d vetoed)",
        summary["total"],
        summary["bets"],
        summary["leans"],
        summary["rejects"],
        summary["vetoed"],
    )
    return results


def build_combination(
    results: Iterable[EvaluationResult], *, config: EngineConfig = DEFAULT_ENGINE_CONFIG
) -> Combination | CombinationFailure:
    outcome = _combination.build_combination(results, config=config)
    if isinstance(outcome, Combination):
        first, second = outcome.legs
        logger.info(
            "combination built: %s %s + %s %s (%.1f)",
            first.player,
            first.side,
            second.player,
            second.side,
            outcome.combined_score,
        )
    else:
        logger.info("combination failed: %s", outcome.reason)
    return outcome


def summarize_results(results: Iterable[EvaluationResult]) -> dict[str, Any]:
    rows = list(results)
    total = len(rows)
    return {
        "total": total,
        "bets": sum(1 for row in rows if row.decision == "bet"),
        "leans": sum(1 for row in rows if row.decision == "lean"),
        "rejects": sum(1 for row in rows if row.decision == "reject"),
        "vetoed": sum(1 for row in rows if row.veto_reason is not None),
        "avg_score": round(sum(row.score for row in rows) / total, 2) if total else 0.0,
    }
