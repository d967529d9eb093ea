from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current UTC time as a naive datetime; every stored timestamp uses this form."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    ISO-8601 text to a naive UTC datetime. Blank or None gives None.

    Text without an offset is taken to be UTC already; a "Z" suffix or an
    explicit offset is converted. Malformed text raises ValueError.
    """
    text = (value or "").strip()
    if not text:
        return None
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_range_end(value: Optional[str]) -> Optional[datetime]:
    """
    Parse the inclusive end of a date range.

    A bare date ("2026-01-31") covers the whole day, so it resolves to the
    last microsecond of that day rather than midnight.
    """
    dt = parse_iso_datetime(value)
    if dt is None:
        return None
    if len(value.strip()) == 10:
        return datetime.combine(dt.date(), time.max)
    return dt


def start_of_day(now: datetime) -> datetime:
    return datetime.combine(now.date(), time.min)


def start_of_week(now: datetime) -> datetime:
    """Monday 00:00 of the current week."""
    monday: date = now.date() - timedelta(days=now.weekday())
    return datetime.combine(monday, time.min)


def start_of_month(now: datetime) -> datetime:
    return datetime.combine(now.date().replace(day=1), time.min)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """Second-precision ISO-8601 string ending in Z; naive input counts as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.replace(microsecond=0).isoformat() + "Z"
