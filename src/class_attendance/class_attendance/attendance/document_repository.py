from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..core.enums import AttendanceStatus, Collection
from ..database.model import Document, Snapshot
from ..database.store import DocumentStore
from ..database.subscriptions import ErrorCallback, Subscription
from ..identity.service import Namespace
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository


def _to_record(doc: Document) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=doc.id,
        student_id=doc.get("studentId", ""),
        class_id=doc.get("classId", ""),
        date=doc.get("date"),
        status=AttendanceStatus(doc.get("status")),
        note=doc.get("note") or "",
        created_at=doc.get("createdAt"),
    )


def _to_records(docs) -> list[AttendanceRecord]:
    # Documents without a date are never counted, as in every read path.
    return [_to_record(d) for d in docs if d.get("date") is not None]


class DocumentAttendanceRepository(AttendanceRepository):
    def __init__(self, store: DocumentStore, namespace: Namespace):
        self._store = store
        self._ns = namespace.path

    def list_for_class(self, class_id: str) -> Sequence[AttendanceRecord]:
        return _to_records(self._store.query(self._ns, Collection.ATTENDANCE.value, where=("classId", class_id)))

    def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        return _to_records(self._store.query(self._ns, Collection.ATTENDANCE.value, where=("studentId", student_id)))

    def insert_many(self, records: Sequence[NewAttendance]) -> list[str]:
        batch = self._store.batch(self._ns)
        ids = [
            batch.insert(
                Collection.ATTENDANCE.value,
                {
                    "studentId": r.student_id,
                    "classId": r.class_id,
                    "date": r.date,
                    "status": r.status.value,
                    "note": r.note,
                },
            )
            for r in records
        ]
        batch.commit()
        return ids

    def delete_many(self, attendance_ids: Sequence[str]) -> int:
        batch = self._store.batch(self._ns)
        for attendance_id in attendance_ids:
            batch.delete(Collection.ATTENDANCE.value, attendance_id)
        return batch.commit()

    def subscribe_for_class(
        self,
        class_id: str,
        on_change: Callable[[list[AttendanceRecord]], None],
        *,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        def _on_snapshot(snapshot: Snapshot) -> None:
            on_change(_to_records(snapshot))

        return self._store.subscribe(
            self._ns,
            Collection.ATTENDANCE.value,
            _on_snapshot,
            where=("classId", class_id),
            on_error=on_error,
        )
