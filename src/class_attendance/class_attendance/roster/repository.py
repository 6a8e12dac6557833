from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

from ..database.subscriptions import ErrorCallback, Subscription
from .model import SchoolClass, Student


class ClassRepository(Protocol):
    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        raise NotImplementedError

    def list_all(self) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def create(self, *, name: str) -> str:
        raise NotImplementedError

    def rename(self, class_id: str, *, name: str) -> bool:
        raise NotImplementedError

    def delete(self, class_id: str) -> bool:
        raise NotImplementedError

    def subscribe(
        self,
        on_change: Callable[[list[SchoolClass]], None],
        *,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        raise NotImplementedError


class StudentRepository(Protocol):
    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_for_class(self, class_id: str) -> Sequence[Student]:
        raise NotImplementedError

    def create(self, *, name: str, class_id: str) -> str:
        raise NotImplementedError

    def create_many(self, *, names: Sequence[str], class_id: str) -> list[str]:
        """Insert all students in one atomic batch."""

        raise NotImplementedError

    def rename(self, student_id: str, *, name: str) -> bool:
        raise NotImplementedError

    def delete(self, student_id: str) -> bool:
        raise NotImplementedError

    def delete_many(self, student_ids: Sequence[str]) -> int:
        """Delete all given students in one atomic batch."""

        raise NotImplementedError

    def subscribe(
        self,
        on_change: Callable[[list[Student]], None],
        *,
        class_id: Optional[str] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        raise NotImplementedError
