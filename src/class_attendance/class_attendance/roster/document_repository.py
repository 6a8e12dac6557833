from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..core.enums import Collection
from ..database.model import Document, Snapshot
from ..database.store import DocumentStore
from ..database.subscriptions import ErrorCallback, Subscription
from ..identity.service import Namespace
from .model import SchoolClass, Student
from .repository import ClassRepository, StudentRepository


def _to_class(doc: Document) -> SchoolClass:
    return SchoolClass(class_id=doc.id, name=doc.get("name", ""), created_at=doc.get("createdAt"))


def _to_student(doc: Document) -> Student:
    return Student(
        student_id=doc.id,
        name=doc.get("name", ""),
        class_id=doc.get("classId", ""),
        created_at=doc.get("createdAt"),
    )


class DocumentClassRepository(ClassRepository):
    def __init__(self, store: DocumentStore, namespace: Namespace):
        self._store = store
        self._ns = namespace.path

    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        doc = self._store.get(self._ns, Collection.CLASSES.value, class_id)
        return _to_class(doc) if doc else None

    def list_all(self) -> Sequence[SchoolClass]:
        return [_to_class(d) for d in self._store.query(self._ns, Collection.CLASSES.value)]

    def create(self, *, name: str) -> str:
        return self._store.insert(self._ns, Collection.CLASSES.value, {"name": name})

    def rename(self, class_id: str, *, name: str) -> bool:
        return self._store.update(self._ns, Collection.CLASSES.value, class_id, {"name": name})

    def delete(self, class_id: str) -> bool:
        return self._store.delete(self._ns, Collection.CLASSES.value, class_id)

    def subscribe(
        self,
        on_change: Callable[[list[SchoolClass]], None],
        *,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        def _on_snapshot(snapshot: Snapshot) -> None:
            on_change([_to_class(d) for d in snapshot])

        return self._store.subscribe(self._ns, Collection.CLASSES.value, _on_snapshot, on_error=on_error)


class DocumentStudentRepository(StudentRepository):
    def __init__(self, store: DocumentStore, namespace: Namespace):
        self._store = store
        self._ns = namespace.path

    def get_by_id(self, student_id: str) -> Optional[Student]:
        doc = self._store.get(self._ns, Collection.STUDENTS.value, student_id)
        return _to_student(doc) if doc else None

    def list_all(self) -> Sequence[Student]:
        return [_to_student(d) for d in self._store.query(self._ns, Collection.STUDENTS.value)]

    def list_for_class(self, class_id: str) -> Sequence[Student]:
        docs = self._store.query(self._ns, Collection.STUDENTS.value, where=("classId", class_id))
        return [_to_student(d) for d in docs]

    def create(self, *, name: str, class_id: str) -> str:
        return self._store.insert(self._ns, Collection.STUDENTS.value, {"name": name, "classId": class_id})

    def create_many(self, *, names: Sequence[str], class_id: str) -> list[str]:
        batch = self._store.batch(self._ns)
        ids = [batch.insert(Collection.STUDENTS.value, {"name": n, "classId": class_id}) for n in names]
        batch.commit()
        return ids

    def rename(self, student_id: str, *, name: str) -> bool:
        return self._store.update(self._ns, Collection.STUDENTS.value, student_id, {"name": name})

    def delete(self, student_id: str) -> bool:
        return self._store.delete(self._ns, Collection.STUDENTS.value, student_id)

    def delete_many(self, student_ids: Sequence[str]) -> int:
        batch = self._store.batch(self._ns)
        for student_id in student_ids:
            batch.delete(Collection.STUDENTS.value, student_id)
        return batch.commit()

    def subscribe(
        self,
        on_change: Callable[[list[Student]], None],
        *,
        class_id: Optional[str] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        def _on_snapshot(snapshot: Snapshot) -> None:
            on_change([_to_student(d) for d in snapshot])

        where = ("classId", class_id) if class_id else None
        return self._store.subscribe(
            self._ns, Collection.STUDENTS.value, _on_snapshot, where=where, on_error=on_error
        )
