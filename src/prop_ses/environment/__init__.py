"""Environment scoring models, one per sport family.

Each model turns game context into a 0-10 adjustment for the SES environment
component and is selected by sport family, not by inspecting field contents.
"""

from prop_ses.environment.base import (
    ENVIRONMENT_CAP,
    NEUTRAL_ENVIRONMENT,
    EnvironmentModel,
    SportFamily,
)
from prop_ses.environment.registry import get_model, resolve_sport_family, select_model

__all__ = [
    "ENVIRONMENT_CAP",
    "NEUTRAL_ENVIRONMENT",
    "EnvironmentModel",
    "SportFamily",
    "get_model",
    "resolve_sport_family",
    "select_model",
]
