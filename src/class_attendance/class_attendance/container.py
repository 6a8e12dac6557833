from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.document_repository import DocumentAttendanceRepository
from .attendance.service import AttendanceReconciler
from .database.connection import DBConfig, DatabaseConnection
from .database.memory_store import InMemoryDocumentStore
from .database.mysql_store import MySQLDocumentStore
from .database.store import BaseDocumentStore
from .identity.service import IdentityService, Namespace
from .reports.service import ReportService
from .roster.bulk_import import BulkImportService
from .roster.cascade import CascadeDeletionService
from .roster.document_repository import DocumentClassRepository, DocumentStudentRepository
from .roster.service import RosterService


@dataclass(frozen=True)
class NamespaceServices:
    """Everything one user may touch, bound to that user's namespace."""

    namespace: Namespace

    classes_repo: DocumentClassRepository
    students_repo: DocumentStudentRepository
    attendance_repo: DocumentAttendanceRepository

    roster_service: RosterService
    bulk_import_service: BulkImportService
    cascade_service: CascadeDeletionService
    attendance_service: AttendanceReconciler
    report_service: ReportService


@dataclass(frozen=True)
class Container:
    store: BaseDocumentStore
    identity_service: IdentityService

    def for_namespace(self, namespace: Namespace) -> NamespaceServices:
        return build_namespace_services(self.store, namespace)


def build_namespace_services(store: BaseDocumentStore, namespace: Namespace) -> NamespaceServices:
    classes_repo = DocumentClassRepository(store, namespace)
    students_repo = DocumentStudentRepository(store, namespace)
    attendance_repo = DocumentAttendanceRepository(store, namespace)

    return NamespaceServices(
        namespace=namespace,
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        roster_service=RosterService(classes_repo, students_repo),
        bulk_import_service=BulkImportService(classes_repo, students_repo),
        cascade_service=CascadeDeletionService(classes_repo, students_repo, attendance_repo),
        attendance_service=AttendanceReconciler(attendance_repo, students_repo),
        report_service=ReportService(attendance_repo),
    )


def build_store(*, backend: str, db_config: Optional[Mapping[str, Any]] = None) -> BaseDocumentStore:
    backend = (backend or "memory").lower()
    if backend == "memory":
        return InMemoryDocumentStore()
    if backend == "mysql":
        if not db_config:
            raise ValueError("DB_CONFIG is required for the mysql store backend")
        return MySQLDocumentStore(DatabaseConnection.get_instance(DBConfig.from_mapping(db_config)))
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")


def build_container(
    *,
    secret_key: str,
    app_id: str,
    store_backend: str = "memory",
    db_config: Optional[Mapping[str, Any]] = None,
    token_max_age: Optional[int] = None,
) -> Container:
    return Container(
        store=build_store(backend=store_backend, db_config=db_config),
        identity_service=IdentityService(secret_key=secret_key, app_id=app_id, token_max_age=token_max_age),
    )
