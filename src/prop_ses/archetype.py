"""Player archetype inference (Guard / Wing / Big)."""

from __future__ import annotations

import re

from prop_ses.models import Archetype
from prop_ses.stat_shape import ASSISTS, REBOUNDS, stat_components

_POSITION_WORDS: dict[str, str] = {
    "point guard": "PG",
    "shooting guard": "SG",
    "small forward": "SF",
    "power forward": "PF",
    "center": "C",
    "centre": "C",
    "guard": "G",
    "forward": "F",
}

_BIG_TOKENS = frozenset({"C", "PF"})
_GUARD_TOKENS = frozenset({"PG", "SG"})


def _position_tokens(position: str) -> set[str]:
    text = position.strip().lower()
    for word, abbrev in _POSITION_WORDS.items():
        text = text.replace(word, abbrev.lower())
    return {token.upper() for token in re.split(r"[^a-z]+", text) if token}


def infer_archetype(position: str | None, stat: str) -> Archetype:
    """Map an explicit position, or failing that the stat being bet, to an archetype."""
    tokens = _position_tokens(position) if position else set()
    if tokens:
        if tokens & _BIG_TOKENS or tokens == {"F"}:
            return "Big"
        if tokens & _GUARD_TOKENS or tokens == {"G"}:
            return "Guard"
        return "Wing"

    components = stat_components(stat)
    if REBOUNDS in components:
        return "Big"
    if ASSISTS in components:
        return "Guard"
    return "Wing"
