from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

from ..database.subscriptions import ErrorCallback, Subscription
from .model import AttendanceRecord, NewAttendance


class AttendanceRepository(Protocol):
    def list_for_class(self, class_id: str) -> Sequence[AttendanceRecord]:
        """All records of a class (no date filter; there is no date index)."""

        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def insert_many(self, records: Sequence[NewAttendance]) -> list[str]:
        """Insert all records in one atomic batch."""

        raise NotImplementedError

    def delete_many(self, attendance_ids: Sequence[str]) -> int:
        """Delete all records in one atomic batch."""

        raise NotImplementedError

    def subscribe_for_class(
        self,
        class_id: str,
        on_change: Callable[[list[AttendanceRecord]], None],
        *,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        raise NotImplementedError
