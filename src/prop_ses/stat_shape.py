"""Pure helpers describing the shape of a line and of a statistic tag."""

from __future__ import annotations

import re
from collections.abc import Iterable
from statistics import median as _median

from prop_ses.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from prop_ses.models import LineStructure, MinutesTier

POINTS = "points"
REBOUNDS = "rebounds"
ASSISTS = "assists"
THREES = "threes"
STEALS = "steals"
BLOCKS = "blocks"
TURNOVERS = "turnovers"

BASE_STATS: tuple[str, ...] = (POINTS, REBOUNDS, ASSISTS, THREES, STEALS, BLOCKS, TURNOVERS)

_TOKEN_ALIASES: dict[str, str] = {
    "points": POINTS,
    "point": POINTS,
    "pts": POINTS,
    "pt": POINTS,
    "p": POINTS,
    "rebounds": REBOUNDS,
    "rebound": REBOUNDS,
    "reb": REBOUNDS,
    "rebs": REBOUNDS,
    "trb": REBOUNDS,
    "r": REBOUNDS,
    "assists": ASSISTS,
    "assist": ASSISTS,
    "ast": ASSISTS,
    "asts": ASSISTS,
    "a": ASSISTS,
    "threes": THREES,
    "three": THREES,
    "3pm": THREES,
    "3pt": THREES,
    "fg3m": THREES,
    "steals": STEALS,
    "steal": STEALS,
    "stl": STEALS,
    "stls": STEALS,
    "blocks": BLOCKS,
    "block": BLOCKS,
    "blk": BLOCKS,
    "blks": BLOCKS,
    "turnovers": TURNOVERS,
    "turnover": TURNOVERS,
    "tov": TURNOVERS,
    "to": TURNOVERS,
}

_PHRASE_ALIASES: dict[str, tuple[str, ...]] = {
    "pra": (POINTS, REBOUNDS, ASSISTS),
    "pr": (POINTS, REBOUNDS),
    "pa": (POINTS, ASSISTS),
    "ra": (REBOUNDS, ASSISTS),
    "stocks": (STEALS, BLOCKS),
    "three_pointers": (THREES,),
    "three_pointers_made": (THREES,),
    "threes_made": (THREES,),
    "3_pointers": (THREES,),
    "3_pointers_made": (THREES,),
    "3pt_made": (THREES,),
}

_SEPARATORS = re.compile(r"[+_\-&/\s]+")
_FILLER_TOKENS = frozenset({"and", "plus"})


def line_structure(line: float) -> LineStructure:
    """Classify a line as a half-point (`x.5`) or whole-point line."""
    return "half" if line % 1 == 0.5 else "whole"


def is_half_point(line: float) -> bool:
    return line_structure(line) == "half"


def normalize_stat_key(stat: str) -> str:
    raw = stat.strip().lower()
    raw = _SEPARATORS.sub("_", raw).strip("_")
    if raw.startswith("player_"):
        raw = raw[len("player_") :]
    return raw


def stat_components(stat: str) -> tuple[str, ...]:
    """Resolve a statistic tag into ordered, de-duplicated components.

    Known base stats come back canonical (`pts` -> `points`); unknown tokens are
    kept verbatim so callers can tell counting stats from everything else.
    """
    key = normalize_stat_key(stat)
    if not key:
        return ()
    phrase = _PHRASE_ALIASES.get(key)
    if phrase is not None:
        return phrase
    out: list[str] = []
    for token in key.split("_"):
        if not token or token in _FILLER_TOKENS:
            continue
        parts = _PHRASE_ALIASES.get(token) or (_TOKEN_ALIASES.get(token, token),)
        for part in parts:
            if part not in out:
                out.append(part)
    return tuple(out)


def is_combination_stat(stat: str) -> bool:
    """True when the stat is a sum of two or more base stats (e.g. points+rebounds)."""
    known = [part for part in stat_components(stat) if part in BASE_STATS]
    return len(known) >= 2


def is_counting_stat(stat: str) -> bool:
    components = stat_components(stat)
    return bool(components) and all(part in BASE_STATS for part in components)


def has_component(stat: str, component: str) -> bool:
    return component in stat_components(stat)


def median(values: Iterable[float]) -> float | None:
    """Median of a numeric series; None for an empty series."""
    series = [float(value) for value in values]
    if not series:
        return None
    return float(_median(series))


def minutes_tier(
    avg_minutes: float | None, *, config: EngineConfig = DEFAULT_ENGINE_CONFIG
) -> MinutesTier:
    """Bucket average minutes; missing data falls back to the medium tier."""
    if avg_minutes is None:
        return "medium"
    if avg_minutes >= config.locked_minutes:
        return "locked"
    if avg_minutes >= config.medium_minutes:
        return "medium"
    return "risky"
