from __future__ import annotations

import pytest

from src.class_attendance.class_attendance.container import build_namespace_services
from src.class_attendance.class_attendance.core.exceptions import ValidationError
from src.class_attendance.class_attendance.database.memory_store import InMemoryDocumentStore
from src.class_attendance.class_attendance.identity.service import Namespace


class OfflineStore(InMemoryDocumentStore):
    def __init__(self):
        super().__init__()
        self.offline = False

    def _query(self, namespace, collection, where):
        if self.offline:
            raise ConnectionError("offline")
        return super()._query(namespace, collection, where)


def _services(store=None):
    store = store or InMemoryDocumentStore()
    return store, build_namespace_services(store, Namespace(app_id="test", user_id="teacher-1"))


def test_create_class_trims_name():
    _, svc = _services()
    created = svc.roster_service.create_class("  7A  ")

    assert created.name == "7A"
    assert created.created_at is not None
    assert [c.name for c in svc.roster_service.list_classes()] == ["7A"]


def test_blank_class_name_is_rejected_without_writing():
    store, svc = _services()

    with pytest.raises(ValidationError):
        svc.roster_service.create_class("   ")

    assert store.query(svc.namespace.path, "classes") == []


def test_create_student_requires_existing_class():
    _, svc = _services()

    with pytest.raises(ValidationError):
        svc.roster_service.create_student("Alice", "")
    with pytest.raises(ValidationError):
        svc.roster_service.create_student("Alice", "no-such-class")

    c = svc.roster_service.create_class("7A")
    student = svc.roster_service.create_student(" Alice ", c.class_id)
    assert student.name == "Alice"
    assert student.class_id == c.class_id


def test_rename_class_and_student():
    _, svc = _services()
    c = svc.roster_service.create_class("7A")
    s = svc.roster_service.create_student("Alice", c.class_id)

    svc.roster_service.rename_class(c.class_id, " 7B ")
    svc.roster_service.rename_student(s.student_id, "Alicia")

    assert svc.roster_service.get_class(c.class_id).name == "7B"
    assert svc.roster_service.get_student(s.student_id).name == "Alicia"


def test_rename_rejects_blank_name_and_unknown_id():
    _, svc = _services()
    c = svc.roster_service.create_class("7A")

    with pytest.raises(ValidationError):
        svc.roster_service.rename_class(c.class_id, " ")
    with pytest.raises(ValidationError):
        svc.roster_service.rename_student("missing", "Bob")

    assert svc.roster_service.get_class(c.class_id).name == "7A"


def test_search_is_case_insensitive_substring():
    _, svc = _services()
    a = svc.roster_service.create_class("Kelas 7A")
    svc.roster_service.create_class("Kelas 8B")
    svc.roster_service.create_student("Budi Santoso", a.class_id)
    svc.roster_service.create_student("Siti", a.class_id)

    assert [c.name for c in svc.roster_service.search_classes("7a")] == ["Kelas 7A"]
    assert [s.name for s in svc.roster_service.search_students("SANTO")] == ["Budi Santoso"]
    assert len(svc.roster_service.search_classes("")) == 2


def test_class_subscription_pushes_changes():
    _, svc = _services()
    seen = []
    sub = svc.roster_service.subscribe_classes(lambda classes: seen.append([c.name for c in classes]))

    c = svc.roster_service.create_class("7A")
    svc.roster_service.rename_class(c.class_id, "7B")
    sub.unsubscribe()
    svc.roster_service.create_class("8A")

    assert seen == [[], ["7A"], ["7B"]]


def test_student_subscription_scoped_to_class():
    _, svc = _services()
    a = svc.roster_service.create_class("7A")
    b = svc.roster_service.create_class("7B")
    seen = []
    svc.roster_service.subscribe_students(lambda students: seen.append(len(students)), class_id=a.class_id)

    svc.roster_service.create_student("Alice", a.class_id)
    svc.roster_service.create_student("Bob", b.class_id)

    assert seen == [0, 1]


def test_failed_live_read_is_treated_as_empty():
    store = OfflineStore()
    _, svc = _services(store)
    svc.roster_service.create_class("7A")
    seen = []
    svc.roster_service.subscribe_classes(lambda classes: seen.append(len(classes)))

    store.offline = True
    store.insert(svc.namespace.path, "classes", {"name": "7B"})

    assert seen == [1, 0]
