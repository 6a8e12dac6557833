from __future__ import annotations

import logging
from typing import Any, Mapping

from ..common.datetime_utils import DateLike, normalize_day, same_day
from ..common.validators import require_id
from ..core.constants import DEFAULT_STATUS
from ..core.exceptions import PartialSaveError, StoreError, ValidationError
from ..roster.repository import StudentRepository
from .model import AttendanceEntry, NewAttendance, SaveResult
from .repository import AttendanceRepository

log = logging.getLogger(__name__)


class AttendanceReconciler:
    """Saves a whole class day at once: old records of that day are replaced.

    The replace runs as two batches (delete, then insert). Between them the
    day is empty, never duplicated, so repeating the same save converges.
    Concurrent saves of the same class/day are not coordinated; the last
    batch pair to finish wins.
    """

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository):
        self._attendance = attendance
        self._students = students

    def load_day(self, *, class_id: str, day: DateLike) -> dict[str, AttendanceEntry]:
        """Saved entries of the day for every roster student, `Hadir` if none."""
        class_id = require_id(class_id, "Kelas")
        roster = self._students.list_for_class(class_id)
        saved = {
            r.student_id: AttendanceEntry(status=r.status, note=r.note)
            for r in self._attendance.list_for_class(class_id)
            if same_day(r.date, day)
        }
        return {s.student_id: saved.get(s.student_id, AttendanceEntry(status=DEFAULT_STATUS)) for s in roster}

    def save_day(self, *, class_id: str, day: DateLike, entries: Mapping[str, Any]) -> SaveResult:
        class_id = require_id(class_id, "Kelas")
        parsed = {str(student_id): AttendanceEntry.coerce(value) for student_id, value in entries.items()}

        roster = {s.student_id for s in self._students.list_for_class(class_id)}
        if not roster:
            raise ValidationError("Tidak ada siswa di kelas ini untuk diabsen.")

        target = normalize_day(day)

        stale = [r.attendance_id for r in self._attendance.list_for_class(class_id) if same_day(r.date, target)]
        deleted = self._attendance.delete_many(stale) if stale else 0

        records = [
            NewAttendance(
                student_id=student_id,
                class_id=class_id,
                date=target,
                status=entry.status,
                note=entry.note or "",
            )
            for student_id, entry in parsed.items()
            if student_id in roster
        ]

        try:
            saved = self._attendance.insert_many(records) if records else []
        except StoreError as e:
            if not stale:
                raise
            log.error("Attendance for class %s on %s emptied but not re-saved: %s", class_id, target.date(), e)
            raise PartialSaveError(
                "Gagal menyimpan absensi. Coba lagi.",
                class_id=class_id,
                deleted=deleted,
            ) from e

        log.info("Saved %d attendance records for class %s on %s", len(saved), class_id, target.date())
        return SaveResult(class_id=class_id, date=target, deleted=deleted, saved=len(saved))
