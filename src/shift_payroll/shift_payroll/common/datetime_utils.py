from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Union

from ..core.exceptions import ValidationError

DateLike = Union[date, datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive local datetime.

    Aware values (``...Z`` or ``+hh:mm``) are converted to local time first so
    they compare correctly with values stored by :func:`now_local`.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Timestamp is required")
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Invalid timestamp {value!r}, expected ISO-8601")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def start_of_day(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def end_of_day(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.max)


def week_window(week_start: DateLike, days: int) -> tuple[datetime, datetime]:
    """Half-open window ``[week_start, week_start + days)``."""
    start = start_of_day(week_start)
    return start, start + timedelta(days=days)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
