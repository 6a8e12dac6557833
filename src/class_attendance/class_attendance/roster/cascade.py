from __future__ import annotations

import logging
from dataclasses import dataclass

from ..attendance.repository import AttendanceRepository
from ..common.validators import require_id
from ..core.exceptions import CascadeIncompleteError, StoreError
from .repository import ClassRepository, StudentRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CascadeResult:
    deleted: bool
    students_deleted: int = 0
    attendance_deleted: int = 0


class CascadeDeletionService:
    """Deletes a class or student together with everything referencing it.

    Each step is its own write (parent, then one batch per child collection).
    A failure between steps leaves orphans behind and is reported, not
    compensated; running the same delete again finishes the job.
    """

    def __init__(
        self,
        classes: ClassRepository,
        students: StudentRepository,
        attendance: AttendanceRepository,
    ):
        self._classes = classes
        self._students = students
        self._attendance = attendance

    def delete_class(self, class_id: str) -> CascadeResult:
        class_id = require_id(class_id, "Kelas")
        completed: list[str] = []
        try:
            deleted = self._classes.delete(class_id)
            completed.append("class")

            student_ids = [s.student_id for s in self._students.list_for_class(class_id)]
            students_deleted = self._students.delete_many(student_ids) if student_ids else 0
            completed.append("students")

            attendance_ids = [r.attendance_id for r in self._attendance.list_for_class(class_id)]
            attendance_deleted = self._attendance.delete_many(attendance_ids) if attendance_ids else 0
            completed.append("attendance")
        except StoreError as e:
            raise self._incomplete("class", class_id, completed, e) from e

        log.info(
            "Deleted class %s (%d students, %d attendance records)",
            class_id,
            students_deleted,
            attendance_deleted,
        )
        return CascadeResult(deleted=deleted, students_deleted=students_deleted, attendance_deleted=attendance_deleted)

    def delete_student(self, student_id: str) -> CascadeResult:
        student_id = require_id(student_id, "Siswa")
        completed: list[str] = []
        try:
            deleted = self._students.delete(student_id)
            completed.append("student")

            attendance_ids = [r.attendance_id for r in self._attendance.list_for_student(student_id)]
            attendance_deleted = self._attendance.delete_many(attendance_ids) if attendance_ids else 0
            completed.append("attendance")
        except StoreError as e:
            raise self._incomplete("student", student_id, completed, e) from e

        log.info("Deleted student %s (%d attendance records)", student_id, attendance_deleted)
        return CascadeResult(deleted=deleted, attendance_deleted=attendance_deleted)

    @staticmethod
    def _incomplete(entity: str, entity_id: str, completed: list[str], cause: Exception) -> StoreError:
        if not completed:
            # Nothing was written yet: a plain, fully retryable failure.
            return StoreError(f"Gagal menghapus: {cause}")
        log.error("Cascade delete of %s %s stopped after %s: %s", entity, entity_id, completed, cause)
        return CascadeIncompleteError(
            "Gagal menghapus sebagian data. Coba lagi.",
            entity=entity,
            entity_id=entity_id,
            completed=completed,
        )
