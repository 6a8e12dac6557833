from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when an identity token cannot be verified."""


class NotReadyError(DomainError):
    """Raised when no user identity is available yet."""


class StoreError(DomainError):
    """Raised when the document store fails to read or write."""


class PartialSaveError(StoreError):
    """The delete batch of a day save committed but the insert batch did not.

    The day is left empty (never duplicated); repeating the save converges.
    """

    def __init__(self, message: str, *, class_id: str, deleted: int, phase: str = "insert"):
        super().__init__(message)
        self.class_id = class_id
        self.deleted = deleted
        self.phase = phase


class CascadeIncompleteError(StoreError):
    """A cascade delete stopped after some of its steps committed."""

    def __init__(self, message: str, *, entity: str, entity_id: str, completed: Sequence[str]):
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id
        self.completed = tuple(completed)
