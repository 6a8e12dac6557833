from __future__ import annotations

from datetime import date

import pytest

from src.class_attendance.class_attendance.core.enums import Semester
from src.class_attendance.class_attendance.core.exceptions import ValidationError
from src.class_attendance.class_attendance.reports.periods import current_month_range, month_range, semester_range


def test_month_range_handles_leap_february():
    assert month_range(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_range(2026, 2) == (date(2026, 2, 1), date(2026, 2, 28))


def test_month_range_rejects_invalid_month():
    with pytest.raises(ValidationError):
        month_range(2026, 13)


def test_semesters():
    assert semester_range(2026, Semester.GANJIL) == (date(2026, 7, 1), date(2026, 12, 31))
    assert semester_range(2026, Semester.GENAP) == (date(2026, 1, 1), date(2026, 6, 30))
    assert semester_range(2026, 2) == (date(2026, 1, 1), date(2026, 6, 30))

    with pytest.raises(ValidationError):
        semester_range(2026, 3)


def test_current_month_is_default_range():
    assert current_month_range(date(2026, 4, 17)) == (date(2026, 4, 1), date(2026, 4, 30))
