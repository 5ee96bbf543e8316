"""Timestamp helpers. Business logic never calls ``now()`` itself; callers pass it in."""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_provider_datetime(value: str) -> datetime:
    """Parse an ISO 8601 provider datetime (e.g. ``2026-01-20T14:30:00+03:00``).

    The result is always timezone-aware; naive input is taken as UTC.
    Raises ValueError on malformed input.
    """
    raw = (value or "").strip()
    if not raw:
        raise ValueError("empty datetime string")
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // timedelta(milliseconds=1)


def days_ago(days: int, now: datetime) -> date:
    """UTC calendar date *days* before *now*."""
    return (now.astimezone(timezone.utc) - timedelta(days=days)).date()
