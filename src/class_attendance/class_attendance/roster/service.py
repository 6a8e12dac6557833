from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..common.validators import require_id, require_non_empty
from ..core.exceptions import ValidationError
from ..database.subscriptions import ErrorCallback, Subscription, fallback_to_empty
from .model import SchoolClass, Student
from .repository import ClassRepository, StudentRepository


def _matches(name: str, term: Optional[str]) -> bool:
    return not term or term.strip().lower() in name.lower()


class RosterService:
    """Use case: manage classes and their student rosters."""

    def __init__(self, classes: ClassRepository, students: StudentRepository):
        self._classes = classes
        self._students = students

    def create_class(self, name: str) -> SchoolClass:
        name = require_non_empty(name, "Nama kelas")
        class_id = self._classes.create(name=name)
        return self._classes.get_by_id(class_id) or SchoolClass(class_id=class_id, name=name)

    def rename_class(self, class_id: str, name: str) -> None:
        class_id = require_id(class_id, "Kelas")
        name = require_non_empty(name, "Nama kelas")
        if not self._classes.rename(class_id, name=name):
            raise ValidationError("Kelas tidak ditemukan")

    def create_student(self, name: str, class_id: str) -> Student:
        name = require_non_empty(name, "Nama siswa")
        class_id = require_id(class_id, "Kelas")
        if not self._classes.get_by_id(class_id):
            raise ValidationError("Kelas tidak ditemukan")

        student_id = self._students.create(name=name, class_id=class_id)
        return self._students.get_by_id(student_id) or Student(student_id=student_id, name=name, class_id=class_id)

    def rename_student(self, student_id: str, name: str) -> None:
        student_id = require_id(student_id, "Siswa")
        name = require_non_empty(name, "Nama siswa")
        if not self._students.rename(student_id, name=name):
            raise ValidationError("Siswa tidak ditemukan")

    def get_class(self, class_id: str) -> Optional[SchoolClass]:
        return self._classes.get_by_id(class_id)

    def get_student(self, student_id: str) -> Optional[Student]:
        return self._students.get_by_id(student_id)

    def list_classes(self) -> Sequence[SchoolClass]:
        return self._classes.list_all()

    def list_students(self, class_id: Optional[str] = None) -> Sequence[Student]:
        if class_id:
            return self._students.list_for_class(class_id)
        return self._students.list_all()

    def search_classes(self, term: Optional[str]) -> list[SchoolClass]:
        return [c for c in self._classes.list_all() if _matches(c.name, term)]

    def search_students(self, term: Optional[str], *, class_id: Optional[str] = None) -> list[Student]:
        return [s for s in self.list_students(class_id) if _matches(s.name, term)]

    def subscribe_classes(
        self,
        on_change: Callable[[list[SchoolClass]], None],
        *,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        return self._classes.subscribe(
            on_change,
            on_error=on_error or fallback_to_empty(on_change, empty=list, what="classes"),
        )

    def subscribe_students(
        self,
        on_change: Callable[[list[Student]], None],
        *,
        class_id: Optional[str] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        return self._students.subscribe(
            on_change,
            class_id=class_id,
            on_error=on_error or fallback_to_empty(on_change, empty=list, what="students"),
        )
