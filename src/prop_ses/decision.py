"""Threshold decision labels and the one-line justification shown with them."""

from __future__ import annotations

from prop_ses.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from prop_ses.models import DecisionLabel, Proposition, SesComponents
from prop_ses.stat_shape import line_structure
from prop_ses.veto import VetoHit

DECISION_BET: DecisionLabel = "bet"
DECISION_LEAN: DecisionLabel = "lean"
DECISION_REJECT: DecisionLabel = "reject"

_WEAKEST_MESSAGES = {
    "median_gap": "Weak median gap, line too close to expected output",
    "line_structure": "Half-point line structure adds avoidable risk",
    "minutes_certainty": "Minutes are too uncertain to trust the line",
    "market_type": "Shaded market line leaves no cushion",
    "environment": "Game environment works against this side",
}


def classify_decision(
    score: float,
    *,
    vetoed: bool,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> DecisionLabel:
    if vetoed:
        return DECISION_REJECT
    if score >= config.bet_threshold:
        return DECISION_BET
    if score >= config.lean_threshold:
        return DECISION_LEAN
    return DECISION_REJECT


def _structure_label(line: float) -> str:
    return "half-point" if line_structure(line) == "half" else "whole-point"


def _gap_phrase(prop: Proposition) -> str | None:
    gap = prop.median_gap
    if gap is None:
        return None
    direction = "below" if gap < 0 else "above"
    return f"line {abs(gap):.1f} {direction} median"


def build_justification(
    prop: Proposition,
    *,
    score: float,
    decision: DecisionLabel,
    components: SesComponents,
    veto: VetoHit | None,
) -> str:
    if veto is not None:
        return veto.rationale

    structure = _structure_label(prop.line)
    gap = _gap_phrase(prop)
    if decision == DECISION_BET:
        if gap is not None:
            return f"Strong edge: {gap} with {structure} structure"
        return f"High SES ({score:.1f}) with {structure} structure"
    if decision == DECISION_LEAN:
        detail = f"{gap}, {structure} structure" if gap is not None else f"{structure} structure"
        return f"Marginal edge (SES {score:.1f}): {detail}; combination leg only"

    weakest = components.weakest()
    return f"{_WEAKEST_MESSAGES[weakest]} (SES {score:.1f})"
