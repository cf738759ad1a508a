from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Iterator, Optional


def parse_hhmm(value: Optional[str]) -> Optional[time]:
    """Parse an optional HH:MM string (e.g. LATE_AFTER setting)."""
    v = (value or "").strip()
    if not v:
        return None
    return datetime.strptime(v, "%H:%M").time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield each date from start to end (inclusive)."""
    for ordinal in range(start.toordinal(), end.toordinal() + 1):
        yield date.fromordinal(ordinal)


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


def format_hours(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
