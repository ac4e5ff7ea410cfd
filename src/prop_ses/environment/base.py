from __future__ import annotations

from typing import Literal, Protocol

from prop_ses.engine_config import EngineConfig
from prop_ses.models import Proposition

SportFamily = Literal["tempo_efficiency", "pace_rank"]

ENVIRONMENT_CAP = 10.0
NEUTRAL_ENVIRONMENT = 5.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class EnvironmentModel(Protocol):
    family: SportFamily

    def applies(self, prop: Proposition) -> bool:
        """Whether this model has the context it needs for `prop`."""
        raise NotImplementedError

    def score(self, prop: Proposition, *, config: EngineConfig) -> float:
        raise NotImplementedError
