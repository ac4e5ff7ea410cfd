"""Runtime configuration loader (config-first, flag-overrides)."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from prop_ses.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig, rebounder_keys

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "runtime.toml"
DEFAULT_LOCAL_OVERRIDE_PATH = Path(__file__).resolve().parents[2] / "config" / "runtime.local.toml"

MANAGED_ENV_KEYS: tuple[str, ...] = (
    "PROP_SES_PICKS_DIR",
    "PROP_SES_DEFAULT_SPORT",
    "PROP_SES_LOG_LEVEL",
    "PROP_SES_BET_THRESHOLD",
    "PROP_SES_LEAN_THRESHOLD",
    "PROP_SES_COMBINATION_MIN_SCORE",
)


@dataclass(frozen=True)
class RuntimeConfig:
    """Materialized runtime configuration."""

    config_path: Path
    picks_dir: Path
    default_sport: str
    log_level: str
    engine: EngineConfig

    def with_path_overrides(self, *, picks_dir: Path | None = None) -> RuntimeConfig:
        """Return copy with explicit CLI path overrides applied."""
        return replace(self, picks_dir=picks_dir or self.picks_dir)


_CURRENT_RUNTIME_CONFIG: RuntimeConfig | None = None


def set_current_runtime_config(config: RuntimeConfig | None) -> None:
    global _CURRENT_RUNTIME_CONFIG
    _CURRENT_RUNTIME_CONFIG = config


def current_runtime_config() -> RuntimeConfig:
    config = _CURRENT_RUNTIME_CONFIG
    if config is not None:
        return config
    loaded = load_runtime_config()
    set_current_runtime_config(loaded)
    return loaded


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for key, value in overlay.items():
        existing = out.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            out[key] = _deep_merge(existing, value)
        else:
            out[key] = value
    return out


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        payload = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RuntimeError(f"failed reading runtime config: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise RuntimeError(f"invalid runtime config TOML: {path}") from exc
    if not isinstance(payload, dict):
        raise RuntimeError(f"runtime config root must be a table: {path}")
    return payload


def _as_table(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key, {})
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise RuntimeError(f"runtime config section [{key}] must be a table")
    return value


def _as_str(value: Any, *, default: str) -> str:
    if isinstance(value, str):
        stripped = value.strip()
        if stripped:
            return stripped
    return default


def _as_int(value: Any, *, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def _as_float(value: Any, *, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return default
    return default


def _as_csv_list(values: Any, *, default: tuple[str, ...]) -> tuple[str, ...]:
    if isinstance(values, list):
        cleaned = [str(value).strip() for value in values if str(value).strip()]
        return tuple(cleaned) if cleaned else default
    if isinstance(values, str):
        cleaned = [part.strip() for part in values.split(",") if part.strip()]
        return tuple(cleaned) if cleaned else default
    return default


def _resolve_path(raw: Any, *, default: str, base_dir: Path) -> Path:
    value = _as_str(raw, default=default)
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return path


def engine_config_from_tables(
    *,
    engine: dict[str, Any],
    veto: dict[str, Any],
    combination: dict[str, Any],
    base: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> EngineConfig:
    """Overlay TOML tables on the default engine constants."""
    rebounders = _as_csv_list(veto.get("high_usage_rebounders"), default=())
    return replace(
        base,
        dead_zone=_as_float(veto.get("dead_zone"), default=base.dead_zone),
        rebounder_override_gap=_as_float(
            veto.get("rebounder_override_gap"), default=base.rebounder_override_gap
        ),
        blowout_spread=_as_float(veto.get("blowout_spread"), default=base.blowout_spread),
        blowout_minutes=_as_float(veto.get("blowout_minutes"), default=base.blowout_minutes),
        ceiling_ratio=_as_float(veto.get("ceiling_ratio"), default=base.ceiling_ratio),
        ceiling_min_games=_as_int(veto.get("ceiling_min_games"), default=base.ceiling_min_games),
        locked_minutes=_as_float(engine.get("locked_minutes"), default=base.locked_minutes),
        medium_minutes=_as_float(engine.get("medium_minutes"), default=base.medium_minutes),
        elite_offense_efficiency=_as_float(
            engine.get("elite_offense_efficiency"), default=base.elite_offense_efficiency
        ),
        bet_threshold=_as_float(engine.get("bet_threshold"), default=base.bet_threshold),
        lean_threshold=_as_float(engine.get("lean_threshold"), default=base.lean_threshold),
        combination_min_score=_as_float(
            combination.get("min_score"), default=base.combination_min_score
        ),
        high_usage_rebounders=(
            rebounder_keys(rebounders) if rebounders else base.high_usage_rebounders
        ),
    )


def load_runtime_config(config_path: Path | None = None) -> RuntimeConfig:
    """Load runtime config from `config/runtime.toml` plus optional local override."""
    source = (config_path or DEFAULT_CONFIG_PATH).expanduser().resolve()
    if not source.exists():
        raise RuntimeError(f"runtime config file not found: {source}")

    payload = _read_toml(source)
    if source == DEFAULT_CONFIG_PATH and DEFAULT_LOCAL_OVERRIDE_PATH.exists():
        payload = _deep_merge(payload, _read_toml(DEFAULT_LOCAL_OVERRIDE_PATH))

    paths = _as_table(payload, "paths")
    general = _as_table(payload, "general")
    base_dir = source.parent

    return RuntimeConfig(
        config_path=source,
        picks_dir=_resolve_path(paths.get("picks_dir"), default="data/picks", base_dir=base_dir),
        default_sport=_as_str(general.get("default_sport"), default="basketball_nba"),
        log_level=_as_str(general.get("log_level"), default="WARNING").upper(),
        engine=engine_config_from_tables(
            engine=_as_table(payload, "engine"),
            veto=_as_table(payload, "veto"),
            combination=_as_table(payload, "combination"),
        ),
    )
