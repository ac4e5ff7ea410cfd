"""File-backed picks store keyed by (player, stat, game date)."""

from __future__ import annotations

import json
import os
import uuid
from collections.abc import Iterable
from contextlib import suppress
from pathlib import Path
from typing import Any

from prop_ses import __version__
from prop_ses.errors import PicksStoreError
from prop_ses.models import EvaluationResult
from prop_ses.normalize import normalize_person_name
from prop_ses.stat_shape import normalize_stat_key
from prop_ses.time_utils import utc_now_str

SCHEMA_VERSION = 1


def pick_key(player: str, stat: str, game_date: str) -> str:
    return f"{normalize_person_name(player)}|{normalize_stat_key(stat)}|{game_date}"


def _atomic_write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".tmp-{path.name}-{uuid.uuid4().hex}")
    try:
        tmp_path.write_text(content, encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError:
        with suppress(FileNotFoundError):
            tmp_path.unlink()
        raise


def _atomic_write_json(path: Path, value: Any) -> None:
    payload = json.dumps(value, sort_keys=True, ensure_ascii=True, indent=2) + "\n"
    _atomic_write_text(path, payload)


class PicksStore:
    """One JSON document per game date; re-evaluating the same key overwrites it."""

    def __init__(self, root: Path | str = Path("data/picks")) -> None:
        self.root = Path(root)

    def day_path(self, game_date: str) -> Path:
        return self.root / f"{game_date}.json"

    def _load_day(self, game_date: str) -> dict[str, dict[str, Any]]:
        path = self.day_path(game_date)
        if not path.exists():
            return {}
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PicksStoreError(f"failed reading picks file: {path}") from exc
        picks = payload.get("picks") if isinstance(payload, dict) else None
        if not isinstance(picks, dict):
            raise PicksStoreError(f"invalid picks file: {path}")
        return picks

    def upsert(self, results: Iterable[EvaluationResult], *, game_date: str) -> int:
        """Insert or overwrite picks for `game_date`; returns the number written."""
        picks = self._load_day(game_date)
        written = 0
        saved_at = utc_now_str()
        for result in results:
            row = result.to_row()
            row["game_date"] = game_date
            row["saved_at_utc"] = saved_at
            picks[pick_key(result.player, result.stat, game_date)] = row
            written += 1
        _atomic_write_json(
            self.day_path(game_date),
            {
                "schema_version": SCHEMA_VERSION,
                "engine_version": __version__,
                "game_date": game_date,
                "updated_at_utc": saved_at,
                "picks": picks,
            },
        )
        return written

    def list_picks(self, game_date: str) -> list[dict[str, Any]]:
        """Stored picks for a date, highest score first."""
        rows = list(self._load_day(game_date).values())
        rows.sort(key=lambda row: (-float(row.get("score", 0.0)), str(row.get("player", ""))))
        return rows

    def list_dates(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(path.stem for path in self.root.glob("*.json"))
