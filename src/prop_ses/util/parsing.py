"""Tolerant coercion helpers for upstream proposition records."""

from __future__ import annotations

from typing import Any


def safe_float(value: Any) -> float | None:
    """Parse number-like input into float, returning None when invalid."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if value != value:
            return None
        return float(value)
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            parsed = float(raw)
        except ValueError:
            return None
        return None if parsed != parsed else parsed
    return None


def safe_int(value: Any) -> int | None:
    """Parse number-like input into int, returning None when invalid."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value:
            return None
        return int(value)
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        if raw.startswith("+"):
            raw = raw[1:]
        try:
            return int(raw)
        except ValueError:
            return None
    return None


def to_price(value: Any) -> int | None:
    """Parse American-odds integer price."""
    return safe_int(value)


def safe_str(value: Any) -> str | None:
    """Return a stripped string, or None for blank/missing values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def safe_float_list(value: Any) -> tuple[float, ...]:
    """Parse a list or comma-separated string of numbers, dropping invalid entries."""
    if value is None:
        return ()
    if isinstance(value, str):
        parts: list[Any] = [part for part in value.replace(";", ",").split(",")]
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        return ()
    out: list[float] = []
    for part in parts:
        parsed = safe_float(part)
        if parsed is not None:
            out.append(parsed)
    return tuple(out)
