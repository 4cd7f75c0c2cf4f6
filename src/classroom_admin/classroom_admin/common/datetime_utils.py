from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Union

from ..core.exceptions import ValidationError

_WALL_CLOCK = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")

DateLike = Union[date, datetime, str]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def canonical_day(value: DateLike) -> date:
    """Normalize a date-like value to the calendar day used in ledger keys.

    A datetime keeps only its own year/month/day, so two writes at different
    times of the same day land on the same key.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value[:10])
    raise ValidationError(f"Unsupported date value: {value!r}")


def parse_wall_clock(value: str) -> time:
    """Parse an "HH:MM" wall-clock string. Raises ValidationError when malformed."""
    m = _WALL_CLOCK.match(value or "")
    if not m:
        raise ValidationError(f"Invalid time {value!r} (expected HH:MM)")
    hours, minutes = int(m.group(1)), int(m.group(2))
    seconds = int(m.group(3) or 0)
    try:
        return time(hour=hours, minute=minutes, second=seconds)
    except ValueError:
        raise ValidationError(f"Invalid time {value!r} (expected HH:MM)")


def wall_clock_or_midnight(value: str) -> time:
    try:
        return parse_wall_clock(value)
    except ValidationError:
        return time(0, 0)


def sunday_based_weekday(d: date) -> int:
    """Day of week with Sunday=0 .. Saturday=6."""
    return (d.weekday() + 1) % 7


def iter_days(start: date, end: date):
    """Every calendar day from start to end inclusive. Empty when start > end."""
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
