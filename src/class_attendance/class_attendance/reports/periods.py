"""Convenience report ranges. Computed from the selected year, never stored."""
from __future__ import annotations

import calendar
from datetime import date
from typing import Optional, Union

from ..core.enums import Semester
from ..core.exceptions import ValidationError


def month_range(year: int, month: int) -> tuple[date, date]:
    """First to last day of the month."""
    if not 1 <= int(month) <= 12:
        raise ValidationError("Bulan tidak valid")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def semester_range(year: int, semester: Union[Semester, int]) -> tuple[date, date]:
    """Semester Ganjil = Jul 1 - Dec 31, Semester Genap = Jan 1 - Jun 30 (same year)."""
    try:
        semester = Semester(int(semester))
    except ValueError:
        raise ValidationError("Semester tidak valid")

    if semester == Semester.GANJIL:
        return date(int(year), 7, 1), date(int(year), 12, 31)
    return date(int(year), 1, 1), date(int(year), 6, 30)


def current_month_range(today: Optional[date] = None) -> tuple[date, date]:
    today = today or date.today()
    return month_range(today.year, today.month)
