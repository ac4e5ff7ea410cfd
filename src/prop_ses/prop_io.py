"""Shape upstream records into propositions and export evaluation results."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import polars as pl

from prop_ses.errors import InvalidPropositionError
from prop_ses.models import (
    MARKET_TYPES,
    EvaluationResult,
    GameContext,
    MarketType,
    PaceContext,
    Proposition,
    Side,
    rank_table,
)
from prop_ses.stat_shape import BASE_STATS, median
from prop_ses.util.parsing import safe_float, safe_float_list, safe_int, safe_str, to_price

_KEY_ALIASES: dict[str, tuple[str, ...]] = {
    "player": ("player", "player_name", "name"),
    "stat": ("stat", "prop_type", "stat_type", "market"),
    "line": ("line", "point"),
    "side": ("side", "recommended_side"),
    "team": ("team", "team_name"),
    "opponent": ("opponent", "opponent_name"),
    "price": ("price", "odds"),
    "avg_minutes": ("avg_minutes", "minutes"),
    "rolling_median": ("rolling_median", "median"),
    "recent_games": ("recent_games", "recent", "game_log"),
    "spread": ("spread", "point_spread"),
    "position": ("position", "pos"),
    "market_type": ("market_type",),
    "sport": ("sport", "sport_key"),
    "event_id": ("event_id", "game_id"),
    "game_date": ("game_date", "date"),
}

_GAME_CONTEXT_KEYS = (
    "team_adj_tempo",
    "opponent_adj_tempo",
    "team_adj_offense",
    "opponent_adj_defense",
    "league_avg_tempo",
    "league_avg_efficiency",
)

_OPP_DEF_PREFIX = "opp_def_rank_"
_TEAM_OFF_PREFIX = "team_off_rank_"


def _pick(row: Mapping[str, Any], field: str) -> Any:
    for key in _KEY_ALIASES[field]:
        value = row.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def _parse_side(value: Any) -> Side:
    raw = str(value or "").strip().lower()
    if raw in {"over", "o"}:
        return "over"
    if raw in {"under", "u"}:
        return "under"
    raise InvalidPropositionError(f"invalid side: {value!r}")


def _parse_market_type(value: Any) -> MarketType:
    raw = safe_str(value)
    if raw is None:
        return "Standard"
    for market_type in MARKET_TYPES:
        if raw.lower() == market_type.lower():
            return market_type
    raise InvalidPropositionError(f"invalid market_type: {value!r}")


def _parse_ranks(value: Any) -> dict[str, int]:
    if not isinstance(value, Mapping):
        return {}
    out: dict[str, int] = {}
    for key, raw_rank in value.items():
        rank = safe_int(raw_rank)
        if rank is not None:
            out[str(key).strip().lower()] = rank
    return out


def _flat_ranks(row: Mapping[str, Any], prefix: str) -> dict[str, int]:
    out: dict[str, int] = {}
    for stat in BASE_STATS:
        rank = safe_int(row.get(f"{prefix}{stat}"))
        if rank is not None:
            out[stat] = rank
    return out


def _parse_game_context(row: Mapping[str, Any]) -> GameContext | None:
    nested = row.get("game_context")
    source: Mapping[str, Any] = nested if isinstance(nested, Mapping) else row
    values = {key: safe_float(source.get(key)) for key in _GAME_CONTEXT_KEYS}
    if all(values[key] is None for key in _GAME_CONTEXT_KEYS[:4]):
        return None
    kwargs: dict[str, float] = {
        key: value for key, value in values.items() if value is not None
    }
    return GameContext(**kwargs)


def _parse_pace_context(row: Mapping[str, Any]) -> PaceContext | None:
    nested = row.get("pace_context")
    if isinstance(nested, Mapping):
        defense = _parse_ranks(nested.get("opponent_defense_ranks"))
        offense = _parse_ranks(nested.get("team_offense_ranks"))
        source: Mapping[str, Any] = nested
    else:
        defense = _flat_ranks(row, _OPP_DEF_PREFIX)
        offense = _flat_ranks(row, _TEAM_OFF_PREFIX)
        source = row
    context = PaceContext(
        opponent_defense_ranks=rank_table(defense),
        team_offense_ranks=rank_table(offense),
        pace_rating=safe_str(source.get("pace_rating")),
        game_total=safe_float(source.get("game_total")),
        opponent_pace_rank=safe_int(source.get("opponent_pace_rank")),
    )
    return context if context.has_data else None


def proposition_from_row(row: Mapping[str, Any]) -> Proposition:
    """Validate and coerce one upstream record.

    When a recent-performance series arrives without a rolling median, the
    median is resolved from the series.
    """
    player = safe_str(_pick(row, "player"))
    if player is None:
        raise InvalidPropositionError("missing player")
    stat = safe_str(_pick(row, "stat"))
    if stat is None:
        raise InvalidPropositionError(f"missing stat for {player}")
    line = safe_float(_pick(row, "line"))
    if line is None:
        raise InvalidPropositionError(f"missing or invalid line for {player} {stat}")

    recent_games = safe_float_list(_pick(row, "recent_games"))
    rolling_median = safe_float(_pick(row, "rolling_median"))
    if rolling_median is None and recent_games:
        rolling_median = median(recent_games)

    return Proposition(
        player=player,
        stat=stat,
        line=line,
        side=_parse_side(_pick(row, "side")),
        team=safe_str(_pick(row, "team")),
        opponent=safe_str(_pick(row, "opponent")),
        price=to_price(_pick(row, "price")),
        avg_minutes=safe_float(_pick(row, "avg_minutes")),
        rolling_median=rolling_median,
        recent_games=recent_games,
        spread=safe_float(_pick(row, "spread")),
        position=safe_str(_pick(row, "position")),
        market_type=_parse_market_type(_pick(row, "market_type")),
        sport=safe_str(_pick(row, "sport")),
        event_id=safe_str(_pick(row, "event_id")),
        game_date=safe_str(_pick(row, "game_date")),
        game_context=_parse_game_context(row),
        pace_context=_parse_pace_context(row),
    )


def read_rows(path: Path) -> list[dict[str, Any]]:
    """Read raw proposition records from JSON, JSONL, CSV or Parquet."""
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pl.read_csv(path, infer_schema_length=None).to_dicts()
    if suffix == ".parquet":
        return pl.read_parquet(path).to_dicts()
    text = path.read_text(encoding="utf-8")
    if suffix == ".jsonl":
        return [json.loads(line) for line in text.splitlines() if line.strip()]
    payload = json.loads(text)
    if isinstance(payload, dict):
        payload = payload.get("props", payload.get("propositions"))
    if not isinstance(payload, list):
        raise ValueError(f"expected a list of proposition records in {path}")
    return [row for row in payload if isinstance(row, dict)]


def parse_propositions(
    rows: Iterable[Mapping[str, Any]], *, strict: bool = True
) -> tuple[list[Proposition], list[dict[str, Any]]]:
    """Parse rows; lenient mode skips bad rows and reports them as warnings."""
    props: list[Proposition] = []
    warnings: list[dict[str, Any]] = []
    for index, row in enumerate(rows):
        try:
            props.append(proposition_from_row(row))
        except InvalidPropositionError as exc:
            if strict:
                raise InvalidPropositionError(f"row {index}: {exc}") from exc
            warnings.append({"row": index, "error": str(exc)})
    return props, warnings


def load_propositions(
    path: Path | str, *, strict: bool = True
) -> tuple[list[Proposition], list[dict[str, Any]]]:
    return parse_propositions(read_rows(Path(path)), strict=strict)


def _flat_result_row(result: EvaluationResult) -> dict[str, Any]:
    row = result.to_row()
    components = row.pop("ses_components")
    for name, value in components.items():
        row[f"ses_{name}"] = value
    return row


def results_frame(results: Iterable[EvaluationResult]) -> pl.DataFrame:
    rows = [_flat_result_row(result) for result in results]
    if not rows:
        return pl.DataFrame()
    return pl.DataFrame(rows, infer_schema_length=None).sort("score", descending=True)


def write_results(path: Path | str, results: Iterable[EvaluationResult]) -> Path:
    """Write results as CSV (flattened components) or JSON (nested components)."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    rows = list(results)
    if target.suffix.lower() == ".csv":
        results_frame(rows).write_csv(target)
        return target
    payload = [result.to_row() for result in rows]
    target.write_text(
        json.dumps(payload, sort_keys=True, ensure_ascii=True, indent=2) + "\n", encoding="utf-8"
    )
    return target
