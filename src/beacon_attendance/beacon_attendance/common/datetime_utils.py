from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_window(day: date) -> tuple[datetime, datetime]:
    """Local-midnight window for ``day``: inclusive start, exclusive end."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def in_day(moment: datetime, day: date) -> bool:
    start, end = day_window(day)
    return start <= moment < end


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def parse_day(value: str) -> date:
    """Accept YYYY-MM-DD or a full ISO datetime and return its date."""
    value = (value or "").strip()
    if len(value) > 10:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return parse_iso_date(value)
