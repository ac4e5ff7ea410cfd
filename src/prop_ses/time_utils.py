"""Shared UTC timestamp and slate-date helpers."""

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

ET_ZONE = ZoneInfo("America/New_York")


def utc_now() -> datetime:
    """Return current UTC time with second precision."""
    return datetime.now(UTC).replace(microsecond=0)


def iso_z(value: datetime) -> str:
    """Format a datetime as ISO-8601 with trailing Z in UTC."""
    normalized = value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)
    return normalized.isoformat().replace("+00:00", "Z")


def utc_now_str() -> str:
    """Return current UTC timestamp in ISO-Z format."""
    return iso_z(utc_now())


def et_today_str(now: datetime | None = None) -> str:
    """Slate date (YYYY-MM-DD) in US Eastern time."""
    current = now or utc_now()
    if current.tzinfo is None:
        current = current.replace(tzinfo=UTC)
    return current.astimezone(ET_ZONE).date().isoformat()


def parse_game_date(value: str) -> str:
    """Validate a YYYY-MM-DD string and return it normalized."""
    raw = value.strip()
    try:
        return date.fromisoformat(raw).isoformat()
    except ValueError as exc:
        raise ValueError(f"invalid game date (expected YYYY-MM-DD): {value}") from exc
