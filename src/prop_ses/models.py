"""Immutable records flowing through one evaluation pass."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any, Literal

Side = Literal["over", "under"]
MarketType = Literal["Standard", "Goblin", "Demon"]
Archetype = Literal["Guard", "Wing", "Big"]
LineStructure = Literal["half", "whole"]
MinutesTier = Literal["locked", "medium", "risky"]
DecisionLabel = Literal["bet", "lean", "reject"]

SIDES: tuple[Side, ...] = ("over", "under")
MARKET_TYPES: tuple[MarketType, ...] = ("Standard", "Goblin", "Demon")

SES_COMPONENT_CAPS: dict[str, float] = {
    "median_gap": 40.0,
    "line_structure": 20.0,
    "minutes_certainty": 15.0,
    "market_type": 15.0,
    "environment": 10.0,
}


@dataclass(frozen=True)
class GameContext:
    """Tempo/efficiency figures for the tempo-driven sport family."""

    team_adj_tempo: float | None = None
    opponent_adj_tempo: float | None = None
    team_adj_offense: float | None = None
    opponent_adj_defense: float | None = None
    league_avg_tempo: float = 67.5
    league_avg_efficiency: float = 105.0

    @property
    def has_tempo(self) -> bool:
        return self.team_adj_tempo is not None and self.opponent_adj_tempo is not None

    @property
    def has_efficiency(self) -> bool:
        return self.opponent_adj_defense is not None or self.team_adj_offense is not None


RankTable = tuple[tuple[str, int], ...]


def rank_table(ranks: Mapping[str, int]) -> RankTable:
    """Freeze a stat -> rank mapping into a sorted, hashable table."""
    return tuple(sorted((str(stat), int(rank)) for stat, rank in ranks.items()))


@dataclass(frozen=True)
class PaceContext:
    """Pace and defensive-rank tables for the rank-driven sport family.

    Ranks run 1..30. Defensive rank 1 is the stingiest defense for that stat,
    offensive rank 1 the most productive offense, pace rank 1 the fastest team.
    """

    opponent_defense_ranks: RankTable = ()
    team_offense_ranks: RankTable = ()
    pace_rating: str | None = None
    game_total: float | None = None
    opponent_pace_rank: int | None = None

    @property
    def has_data(self) -> bool:
        return bool(
            self.opponent_defense_ranks
            or self.team_offense_ranks
            or self.pace_rating
            or self.game_total is not None
            or self.opponent_pace_rank is not None
        )


@dataclass(frozen=True)
class Proposition:
    """One candidate prop, already shaped by upstream collaborators."""

    player: str
    stat: str
    line: float
    side: Side
    team: str | None = None
    opponent: str | None = None
    price: int | None = None
    avg_minutes: float | None = None
    rolling_median: float | None = None
    recent_games: tuple[float, ...] = ()
    spread: float | None = None
    position: str | None = None
    market_type: MarketType = "Standard"
    sport: str | None = None
    event_id: str | None = None
    game_date: str | None = None
    game_context: GameContext | None = None
    pace_context: PaceContext | None = None

    @property
    def median_gap(self) -> float | None:
        if self.rolling_median is None:
            return None
        return self.line - self.rolling_median


@dataclass(frozen=True)
class SesComponents:
    median_gap: float
    line_structure: float
    minutes_certainty: float
    market_type: float
    environment: float

    @property
    def total(self) -> float:
        return (
            self.median_gap
            + self.line_structure
            + self.minutes_certainty
            + self.market_type
            + self.environment
        )

    def as_dict(self) -> dict[str, float]:
        return asdict(self)

    def weakest(self) -> str:
        """Component name with the lowest share of its cap (first wins on ties)."""
        values = self.as_dict()
        return min(SES_COMPONENT_CAPS, key=lambda name: values[name] / SES_COMPONENT_CAPS[name])


@dataclass(frozen=True)
class EvaluationResult:
    player: str
    stat: str
    line: float
    side: Side
    team: str | None
    opponent: str | None
    event_id: str | None
    game_date: str | None
    price: int | None
    market_type: MarketType
    sport: str | None
    line_structure: LineStructure
    archetype: Archetype
    rolling_median: float | None
    median_gap: float | None
    minutes_tier: MinutesTier
    blowout_risk: bool
    environment_model: str
    components: SesComponents
    score: float
    decision: DecisionLabel
    veto_reason: str | None
    justification: str

    @property
    def vetoed(self) -> bool:
        return self.veto_reason is not None

    def to_row(self) -> dict[str, Any]:
        """Flat JSON-safe row for storage and export."""
        row = asdict(self)
        row.pop("components")
        row["ses_components"] = self.components.as_dict()
        return row


@dataclass(frozen=True)
class Combination:
    """A built two-leg combination."""

    legs: tuple[EvaluationResult, EvaluationResult]
    combined_score: float
    reason: str
    message: str

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "reason": self.reason,
            "message": self.message,
            "combined_score": self.combined_score,
            "legs": [leg.to_row() for leg in self.legs],
        }


@dataclass(frozen=True)
class CombinationFailure:
    reason: str
    message: str
    candidate_count: int = 0

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "reason": self.reason,
            "message": self.message,
            "combined_score": 0.0,
            "candidate_count": self.candidate_count,
            "legs": [],
        }
