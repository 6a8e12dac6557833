from __future__ import annotations

from datetime import date, datetime

import pytest

from src.class_attendance.class_attendance.attendance.model import AttendanceEntry
from src.class_attendance.class_attendance.container import build_namespace_services
from src.class_attendance.class_attendance.core.enums import AttendanceStatus
from src.class_attendance.class_attendance.core.exceptions import PartialSaveError, StoreError, ValidationError
from src.class_attendance.class_attendance.database.memory_store import InMemoryDocumentStore
from src.class_attendance.class_attendance.identity.service import Namespace


class FailingInsertStore(InMemoryDocumentStore):
    def __init__(self):
        super().__init__()
        self.fail_inserts = False

    def _apply(self, namespace, ops):
        if self.fail_inserts and any(op.kind == "insert" for op in ops):
            self.fail_inserts = False
            raise ConnectionError("network down")
        return super()._apply(namespace, ops)


def _setup(store=None):
    store = store or InMemoryDocumentStore()
    svc = build_namespace_services(store, Namespace(app_id="test", user_id="teacher-1"))
    c = svc.roster_service.create_class("7A")
    svc.bulk_import_service.import_students(c.class_id, "Alice\nBob\nCarol")
    students = {s.name: s.student_id for s in svc.roster_service.list_students(c.class_id)}
    return store, svc, c.class_id, students


def _records(store, svc):
    return [d.data for d in store.query(svc.namespace.path, "attendance")]


def test_save_writes_one_record_per_student_at_noon():
    store, svc, class_id, students = _setup()

    result = svc.attendance_service.save_day(
        class_id=class_id,
        day=date(2026, 3, 2),
        entries={
            students["Alice"]: {"status": "Hadir"},
            students["Bob"]: {"status": "Sakit", "note": "demam"},
            students["Carol"]: AttendanceEntry(status=AttendanceStatus.ALPA),
        },
    )

    assert result.saved == 3
    assert result.deleted == 0
    docs = _records(store, svc)
    assert {d["date"] for d in docs} == {datetime(2026, 3, 2, 12, 0)}
    by_student = {d["studentId"]: d for d in docs}
    assert by_student[students["Bob"]]["status"] == "Sakit"
    assert by_student[students["Bob"]]["note"] == "demam"
    assert by_student[students["Alice"]]["note"] == ""


def test_saving_twice_is_idempotent():
    store, svc, class_id, students = _setup()
    entries = {sid: {"status": "Izin", "note": "acara keluarga"} for sid in students.values()}

    svc.attendance_service.save_day(class_id=class_id, day=date(2026, 3, 2), entries=entries)
    first = sorted((d["studentId"], d["status"], d["note"]) for d in _records(store, svc))
    result = svc.attendance_service.save_day(class_id=class_id, day=date(2026, 3, 2), entries=entries)
    second = sorted((d["studentId"], d["status"], d["note"]) for d in _records(store, svc))

    assert first == second
    assert result.deleted == 3
    assert len(second) == 3


def test_save_replaces_instead_of_merging():
    store, svc, class_id, students = _setup()
    svc.attendance_service.save_day(
        class_id=class_id,
        day=date(2026, 3, 2),
        entries={sid: {"status": "Hadir"} for sid in students.values()},
    )

    svc.attendance_service.save_day(
        class_id=class_id,
        day=date(2026, 3, 2),
        entries={students["Alice"]: {"status": "Alpa"}},
    )

    docs = _records(store, svc)
    assert len(docs) == 1
    assert docs[0]["studentId"] == students["Alice"]
    assert docs[0]["status"] == "Alpa"


def test_time_of_day_does_not_change_the_target_day():
    store, svc, class_id, students = _setup()
    entries = {students["Alice"]: {"status": "Hadir"}}

    svc.attendance_service.save_day(class_id=class_id, day=datetime(2026, 3, 2, 0, 0), entries=entries)
    svc.attendance_service.save_day(class_id=class_id, day=datetime(2026, 3, 2, 23, 59), entries=entries)

    docs = _records(store, svc)
    assert len(docs) == 1
    assert docs[0]["date"] == datetime(2026, 3, 2, 12, 0)


def test_other_days_are_left_alone():
    store, svc, class_id, students = _setup()
    entries = {sid: {"status": "Hadir"} for sid in students.values()}

    svc.attendance_service.save_day(class_id=class_id, day=date(2026, 3, 2), entries=entries)
    svc.attendance_service.save_day(class_id=class_id, day=date(2026, 3, 3), entries=entries)
    svc.attendance_service.save_day(class_id=class_id, day=date(2026, 3, 3), entries={})

    days = [d["date"].date() for d in _records(store, svc)]
    assert days == [date(2026, 3, 2)] * 3


def test_entries_for_students_outside_the_roster_are_ignored():
    store, svc, class_id, students = _setup()
    other = svc.roster_service.create_class("7B")
    outsider = svc.roster_service.create_student("Dewi", other.class_id)

    result = svc.attendance_service.save_day(
        class_id=class_id,
        day=date(2026, 3, 2),
        entries={students["Alice"]: {"status": "Hadir"}, outsider.student_id: {"status": "Hadir"}},
    )

    assert result.saved == 1
    assert all(d["classId"] == class_id for d in _records(store, svc))


def test_validation_happens_before_any_write():
    store, svc, class_id, students = _setup()
    empty = svc.roster_service.create_class("Kosong")

    with pytest.raises(ValidationError):
        svc.attendance_service.save_day(class_id="", day=date(2026, 3, 2), entries={})
    with pytest.raises(ValidationError):
        svc.attendance_service.save_day(
            class_id=class_id,
            day=date(2026, 3, 2),
            entries={students["Alice"]: {"status": "Terlambat"}},
        )
    with pytest.raises(ValidationError):
        svc.attendance_service.save_day(
            class_id=empty.class_id,
            day=date(2026, 3, 2),
            entries={"x": {"status": "Hadir"}},
        )

    assert _records(store, svc) == []


@pytest.mark.parametrize("entry", [{}, {"status": ""}, {"status": None, "note": "x"}, ""])
def test_entry_without_status_is_rejected(entry):
    store, svc, class_id, students = _setup()

    with pytest.raises(ValidationError):
        svc.attendance_service.save_day(
            class_id=class_id,
            day=date(2026, 3, 2),
            entries={students["Alice"]: {"status": "Hadir"}, students["Bob"]: entry},
        )

    assert _records(store, svc) == []


def test_load_day_defaults_to_hadir():
    _, svc, class_id, students = _setup()
    svc.attendance_service.save_day(
        class_id=class_id,
        day=date(2026, 3, 2),
        entries={students["Bob"]: {"status": "Izin", "note": "lomba"}},
    )

    loaded = svc.attendance_service.load_day(class_id=class_id, day=date(2026, 3, 2))

    assert loaded[students["Bob"]] == AttendanceEntry(status=AttendanceStatus.IZIN, note="lomba")
    assert loaded[students["Alice"]] == AttendanceEntry(status=AttendanceStatus.HADIR, note="")
    assert set(loaded) == set(students.values())


def test_failed_insert_after_delete_reports_partial_save_and_retry_converges():
    store, svc, class_id, students = _setup(FailingInsertStore())
    entries = {sid: {"status": "Hadir"} for sid in students.values()}
    svc.attendance_service.save_day(class_id=class_id, day=date(2026, 3, 2), entries=entries)

    store.fail_inserts = True
    with pytest.raises(PartialSaveError) as exc_info:
        svc.attendance_service.save_day(class_id=class_id, day=date(2026, 3, 2), entries=entries)

    assert exc_info.value.deleted == 3
    assert exc_info.value.phase == "insert"
    # Day is empty, never duplicated.
    assert _records(store, svc) == []

    svc.attendance_service.save_day(class_id=class_id, day=date(2026, 3, 2), entries=entries)
    assert len(_records(store, svc)) == 3


def test_failed_insert_with_nothing_deleted_is_a_plain_store_error():
    store, svc, class_id, students = _setup(FailingInsertStore())
    store.fail_inserts = True

    with pytest.raises(StoreError) as exc_info:
        svc.attendance_service.save_day(
            class_id=class_id,
            day=date(2026, 3, 2),
            entries={students["Alice"]: {"status": "Hadir"}},
        )

    assert not isinstance(exc_info.value, PartialSaveError)
