"""Named, overridable tuning constants for the evaluation engine."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from prop_ses.normalize import normalize_person_name

HIGH_USAGE_REBOUNDERS: tuple[str, ...] = (
    "Julius Randle",
    "Giannis Antetokounmpo",
    "Domantas Sabonis",
    "Nikola Jokic",
    "Rudy Gobert",
    "Bam Adebayo",
    "Anthony Davis",
    "Karl-Anthony Towns",
    "Evan Mobley",
    "Jaren Jackson Jr.",
)


def rebounder_keys(names: Iterable[str]) -> frozenset[str]:
    return frozenset(key for key in (normalize_person_name(name) for name in names) if key)


@dataclass(frozen=True)
class EngineConfig:
    """Thresholds shared by veto, scoring, decision and combination stages."""

    dead_zone: float = 0.5
    rebounder_override_gap: float = 2.0
    blowout_spread: float = 8.0
    blowout_minutes: float = 30.0
    ceiling_ratio: float = 1.5
    ceiling_min_games: int = 5
    locked_minutes: float = 32.0
    medium_minutes: float = 24.0
    elite_offense_efficiency: float = 115.0
    bet_threshold: float = 72.0
    lean_threshold: float = 64.0
    combination_min_score: float = 68.0
    high_usage_rebounders: frozenset[str] = field(
        default_factory=lambda: rebounder_keys(HIGH_USAGE_REBOUNDERS)
    )

    def is_high_usage_rebounder(self, player: str) -> bool:
        return normalize_person_name(player) in self.high_usage_rebounders

    def with_overrides(self, **overrides: Any) -> EngineConfig:
        """Return a copy with selected constants replaced."""
        rebounders = overrides.pop("high_usage_rebounders", None)
        if rebounders is not None:
            overrides["high_usage_rebounders"] = rebounder_keys(rebounders)
        return replace(self, **overrides)

    def as_dict(self) -> dict[str, Any]:
        return {
            "dead_zone": self.dead_zone,
            "rebounder_override_gap": self.rebounder_override_gap,
            "blowout_spread": self.blowout_spread,
            "blowout_minutes": self.blowout_minutes,
            "ceiling_ratio": self.ceiling_ratio,
            "ceiling_min_games": self.ceiling_min_games,
            "locked_minutes": self.locked_minutes,
            "medium_minutes": self.medium_minutes,
            "elite_offense_efficiency": self.elite_offense_efficiency,
            "bet_threshold": self.bet_threshold,
            "lean_threshold": self.lean_threshold,
            "combination_min_score": self.combination_min_score,
            "high_usage_rebounders": sorted(self.high_usage_rebounders),
        }


DEFAULT_ENGINE_CONFIG = EngineConfig()
