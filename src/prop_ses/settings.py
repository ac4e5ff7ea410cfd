"""Application settings for prop-ses."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from prop_ses.runtime_config import MANAGED_ENV_KEYS, current_runtime_config


class Settings(BaseSettings):
    """Process-level settings; env vars (PROP_SES_*) win over defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PROP_SES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    picks_dir: str = "data/picks"
    default_sport: str = "basketball_nba"
    log_level: str = "WARNING"
    bet_threshold: float = Field(default=72.0, ge=0.0, le=100.0)
    lean_threshold: float = Field(default=64.0, ge=0.0, le=100.0)
    combination_min_score: float = Field(default=68.0, ge=0.0, le=100.0)

    @classmethod
    def from_runtime(cls) -> "Settings":
        """Construct settings from the current runtime config; set PROP_SES_* env vars win."""
        runtime = current_runtime_config()
        values = dict(
            picks_dir=str(runtime.picks_dir),
            default_sport=runtime.default_sport,
            log_level=runtime.log_level,
            bet_threshold=runtime.engine.bet_threshold,
            lean_threshold=runtime.engine.lean_threshold,
            combination_min_score=runtime.engine.combination_min_score,
        )
        overridden = {key for key in MANAGED_ENV_KEYS if os.environ.get(key, "").strip()}
        explicit = {
            name: value
            for name, value in values.items()
            if f"PROP_SES_{name.upper()}" not in overridden
        }
        return cls(**explicit)
