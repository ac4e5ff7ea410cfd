from collections.abc import Iterator
from pathlib import Path

import pytest
from pydantic import ValidationError

from prop_ses.runtime_config import (
    MANAGED_ENV_KEYS,
    load_runtime_config,
    set_current_runtime_config,
)
from prop_ses.settings import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in MANAGED_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
    set_current_runtime_config(None)


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "runtime.toml"
    path.write_text(
        '[general]\ndefault_sport = "basketball_ncaab"\n[engine]\nbet_threshold = 75\n',
        encoding="utf-8",
    )
    return path


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.default_sport == "basketball_nba"
    assert settings.bet_threshold == 72.0


def test_env_vars_are_read(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROP_SES_LEAN_THRESHOLD", "60")
    assert Settings(_env_file=None).lean_threshold == 60.0


def test_threshold_bounds_are_validated(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROP_SES_BET_THRESHOLD", "140")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_from_runtime_uses_config_values(tmp_path: Path) -> None:
    set_current_runtime_config(load_runtime_config(_write_config(tmp_path)))

    settings = Settings.from_runtime()

    assert settings.default_sport == "basketball_ncaab"
    assert settings.bet_threshold == 75.0


def test_from_runtime_env_wins(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    set_current_runtime_config(load_runtime_config(_write_config(tmp_path)))
    monkeypatch.setenv("PROP_SES_BET_THRESHOLD", "81")

    assert Settings.from_runtime().bet_threshold == 81.0


def test_every_setting_has_a_managed_env_key() -> None:
    expected = {f"PROP_SES_{name.upper()}" for name in Settings.model_fields}
    assert expected == set(MANAGED_ENV_KEYS)


def test_from_runtime_ignores_blank_env_values(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    set_current_runtime_config(load_runtime_config(_write_config(tmp_path)))
    monkeypatch.setenv("PROP_SES_DEFAULT_SPORT", "  ")

    assert Settings.from_runtime().default_sport == "basketball_ncaab"
