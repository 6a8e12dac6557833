from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import DateLike, end_of_day, start_of_day
from ..common.validators import require_id
from ..core.constants import STATUS_ORDER
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..database.subscriptions import ErrorCallback, Subscription, fallback_to_empty

log = logging.getLogger(__name__)

Summary = dict[AttendanceStatus, int]


@dataclass(frozen=True)
class StudentReport:
    student_id: str
    summary: Summary = field(default_factory=dict)
    details: list[AttendanceRecord] = field(default_factory=list)


def tally(records: Iterable[AttendanceRecord]) -> Summary:
    """Count per status, every status present (zero included), fixed order."""
    counts = {status: 0 for status in STATUS_ORDER}
    for r in records:
        if r.status in counts:
            counts[r.status] += 1
    return counts


def summary_to_dict(summary: Summary) -> dict[str, int]:
    return {status.value: count for status, count in summary.items()}


def _range_bounds(start: DateLike, end: DateLike):
    lower = start_of_day(start)
    # Inclusive end: the whole last calendar day counts.
    upper = end_of_day(end)
    if lower > upper:
        raise ValidationError("Tanggal mulai harus sebelum tanggal akhir")
    return lower, upper


def summarize_range(records: Iterable[AttendanceRecord], start: DateLike, end: DateLike) -> Summary:
    lower, upper = _range_bounds(start, end)
    counts = tally(r for r in records if lower <= r.date <= upper)
    # Zero slices are dropped for the pie chart.
    return {status: n for status, n in counts.items() if n > 0}


class ReportService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def class_summary(self, *, class_id: str, start: DateLike, end: DateLike) -> Summary:
        class_id = require_id(class_id, "Kelas")
        _range_bounds(start, end)
        return summarize_range(self._attendance.list_for_class(class_id), start, end)

    def class_records(self, *, class_id: str, start: DateLike, end: DateLike) -> list[AttendanceRecord]:
        """Records of the range, oldest first (used by exports)."""
        class_id = require_id(class_id, "Kelas")
        lower, upper = _range_bounds(start, end)
        rows = [r for r in self._attendance.list_for_class(class_id) if lower <= r.date <= upper]
        rows.sort(key=lambda r: (r.date, r.student_id))
        return rows

    def student_report(self, *, student_id: str) -> StudentReport:
        student_id = require_id(student_id, "Siswa")
        details = sorted(self._attendance.list_for_student(student_id), key=lambda r: r.date, reverse=True)
        return StudentReport(student_id=student_id, summary=tally(details), details=details)

    def watch_class_summary(
        self,
        *,
        class_id: str,
        start: DateLike,
        end: DateLike,
        on_summary: Callable[[Summary], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        """Live class summary; recomputed on every attendance change of the class."""
        class_id = require_id(class_id, "Kelas")
        _range_bounds(start, end)

        def _on_change(records: Sequence[AttendanceRecord]) -> None:
            on_summary(summarize_range(records, start, end))

        return self._attendance.subscribe_for_class(
            class_id,
            _on_change,
            on_error=on_error or fallback_to_empty(on_summary, empty=dict, what="attendance report"),
        )
