from __future__ import annotations

from datetime import date

import pytest

from src.class_attendance.class_attendance.container import build_namespace_services
from src.class_attendance.class_attendance.core.enums import AttendanceStatus
from src.class_attendance.class_attendance.core.exceptions import CascadeIncompleteError, StoreError
from src.class_attendance.class_attendance.database.memory_store import InMemoryDocumentStore
from src.class_attendance.class_attendance.identity.service import Namespace


class FlakyStore(InMemoryDocumentStore):
    """Fails the N-th committed batch (1-based) once."""

    def __init__(self):
        super().__init__()
        self.fail_on = None
        self._batches = 0

    def _apply(self, namespace, ops):
        self._batches += 1
        if self.fail_on is not None and self._batches == self.fail_on:
            self.fail_on = None
            raise ConnectionError("network down")
        return super()._apply(namespace, ops)

    def fail_after(self, successful_batches: int) -> None:
        self.fail_on = self._batches + successful_batches + 1


def _seed(store):
    svc = build_namespace_services(store, Namespace(app_id="test", user_id="teacher-1"))
    a = svc.roster_service.create_class("7A")
    b = svc.roster_service.create_class("7B")
    svc.bulk_import_service.import_students(a.class_id, "Alice\nBob")
    svc.bulk_import_service.import_students(b.class_id, "Carol")

    for c in (a, b):
        roster = svc.roster_service.list_students(c.class_id)
        for day in (date(2026, 2, 2), date(2026, 2, 3)):
            svc.attendance_service.save_day(
                class_id=c.class_id,
                day=day,
                entries={s.student_id: {"status": AttendanceStatus.HADIR.value} for s in roster},
            )
    return svc, a, b


def _attendance(store, svc):
    return store.query(svc.namespace.path, "attendance")


def test_delete_class_removes_students_and_attendance():
    store = InMemoryDocumentStore()
    svc, a, b = _seed(store)

    result = svc.cascade_service.delete_class(a.class_id)

    assert result.deleted is True
    assert result.students_deleted == 2
    assert result.attendance_deleted == 4
    assert svc.roster_service.get_class(a.class_id) is None
    assert svc.roster_service.list_students(a.class_id) == []
    assert all(d.data["classId"] != a.class_id for d in _attendance(store, svc))
    # Other class untouched.
    assert len(svc.roster_service.list_students(b.class_id)) == 1
    assert len(_attendance(store, svc)) == 2


def test_delete_student_only_touches_that_student():
    store = InMemoryDocumentStore()
    svc, a, _ = _seed(store)
    alice, bob = sorted(svc.roster_service.list_students(a.class_id), key=lambda s: s.name)

    result = svc.cascade_service.delete_student(alice.student_id)

    assert result.attendance_deleted == 2
    remaining = _attendance(store, svc)
    assert all(d.data["studentId"] != alice.student_id for d in remaining)
    assert sum(1 for d in remaining if d.data["studentId"] == bob.student_id) == 2
    assert [s.name for s in svc.roster_service.list_students(a.class_id)] == ["Bob"]


def test_failure_between_steps_is_reported_and_retry_finishes():
    store = FlakyStore()
    svc, a, _ = _seed(store)

    # class delete + student batch succeed, attendance batch fails
    store.fail_after(2)
    with pytest.raises(CascadeIncompleteError) as exc_info:
        svc.cascade_service.delete_class(a.class_id)

    assert exc_info.value.completed == ("class", "students")
    assert any(d.data["classId"] == a.class_id for d in _attendance(store, svc))

    result = svc.cascade_service.delete_class(a.class_id)

    assert result.deleted is False
    assert result.attendance_deleted == 4
    assert all(d.data["classId"] != a.class_id for d in _attendance(store, svc))


def test_first_step_failure_is_a_plain_store_error():
    store = FlakyStore()
    svc, a, _ = _seed(store)
    alice = svc.roster_service.list_students(a.class_id)[0]

    store.fail_after(0)
    with pytest.raises(StoreError) as exc_info:
        svc.cascade_service.delete_student(alice.student_id)

    assert not isinstance(exc_info.value, CascadeIncompleteError)
    assert svc.roster_service.get_student(alice.student_id) is not None
