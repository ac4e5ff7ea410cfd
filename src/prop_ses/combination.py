"""Deterministic two-leg combination search over approved evaluation results."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from prop_ses.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from prop_ses.models import Combination, CombinationFailure, EvaluationResult
from prop_ses.normalize import normalize_person_name, normalize_team_key

COMBINATION_REASON_BUILT = "combination_built"
COMBINATION_REASON_INSUFFICIENT = "combination_insufficient_picks"
COMBINATION_REASON_REQUIRES_OVER = "combination_requires_over"
COMBINATION_REASON_SAME_TEAM = "combination_same_team"


def _candidate_sort_key(result: EvaluationResult) -> tuple[float, str, str, float]:
    return (-result.score, normalize_person_name(result.player), result.stat, result.line)


def eligible_candidates(
    results: Iterable[EvaluationResult], *, config: EngineConfig = DEFAULT_ENGINE_CONFIG
) -> list[EvaluationResult]:
    """Non-vetoed, non-reject results at or above the combination bar, best first."""
    candidates = [
        result
        for result in results
        if result.decision != "reject"
        and result.veto_reason is None
        and result.score >= config.combination_min_score
    ]
    return sorted(candidates, key=_candidate_sort_key)


def _compatible(first: EvaluationResult, second: EvaluationResult) -> bool:
    if normalize_person_name(first.player) == normalize_person_name(second.player):
        return False
    first_team = normalize_team_key(first.team)
    second_team = normalize_team_key(second.team)
    if first_team and second_team and first_team == second_team:
        return False
    return True


def _best_pair(
    pairs: Iterable[tuple[EvaluationResult, EvaluationResult]],
) -> tuple[tuple[EvaluationResult, EvaluationResult], float] | None:
    best: tuple[EvaluationResult, EvaluationResult] | None = None
    best_score = float("-inf")
    for first, second in pairs:
        if not _compatible(first, second):
            continue
        combined = (first.score + second.score) / 2.0
        if combined > best_score:
            best = (first, second)
            best_score = combined
    if best is None:
        return None
    return best, best_score


def _over_under_pairs(
    overs: Sequence[EvaluationResult], unders: Sequence[EvaluationResult]
) -> Iterable[tuple[EvaluationResult, EvaluationResult]]:
    for over in overs:
        for under in unders:
            yield over, under


def _over_over_pairs(
    overs: Sequence[EvaluationResult],
) -> Iterable[tuple[EvaluationResult, EvaluationResult]]:
    for index, first in enumerate(overs):
        for second in overs[index + 1 :]:
            yield first, second


def build_combination(
    results: Iterable[EvaluationResult],
    *,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> Combination | CombinationFailure:
    """Pick the best diversified two-leg combination, or explain why none exists.

    One over plus one under is preferred; two overs are the fallback. Legs never
    share a player, and never share a team when both teams are known.
    """
    candidates = eligible_candidates(results, config=config)
    if len(candidates) < 2:
        return CombinationFailure(
            reason=COMBINATION_REASON_INSUFFICIENT,
            message=(
                "Insufficient picks: need 2+ unvetoed picks with SES >= "
                f"{config.combination_min_score:g}"
            ),
            candidate_count=len(candidates),
        )

    overs = [result for result in candidates if result.side == "over"]
    unders = [result for result in candidates if result.side == "under"]
    if not overs:
        return CombinationFailure(
            reason=COMBINATION_REASON_REQUIRES_OVER,
            message="No over picks available: combination requires at least 1 over",
            candidate_count=len(candidates),
        )

    found = _best_pair(_over_under_pairs(overs, unders))
    if found is None:
        found = _best_pair(_over_over_pairs(overs))
    if found is None:
        return CombinationFailure(
            reason=COMBINATION_REASON_SAME_TEAM,
            message="Cannot build combination: all qualifying picks are from the same team",
            candidate_count=len(candidates),
        )

    legs, combined = found
    return Combination(
        legs=legs,
        combined_score=combined,
        reason=COMBINATION_REASON_BUILT,
        message=f"2-leg combination with combined SES {combined:.1f}",
    )
