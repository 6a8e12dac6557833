from __future__ import annotations

from datetime import date, datetime, time
from typing import Union

from ..core.constants import NORMALIZED_DAY_HOUR

DateLike = Union[date, datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def normalize_day(value: DateLike) -> datetime:
    """Canonical instant of a calendar day: 12:00 local time.

    Any time within the same day (00:00 .. 23:59) maps to the same value, so
    equality between normalized days never depends on the time of day.
    """
    return datetime.combine(_as_date(value), time(hour=NORMALIZED_DAY_HOUR))


def start_of_day(value: DateLike) -> datetime:
    return datetime.combine(_as_date(value), time.min)


def end_of_day(value: DateLike) -> datetime:
    return datetime.combine(_as_date(value), time.max)


def same_day(a: DateLike, b: DateLike) -> bool:
    return _as_date(a) == _as_date(b)
