from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import StoreError
from .model import Document, WriteOp
from .subscriptions import ErrorCallback, SnapshotCallback, Subscription, SubscriptionHub, Where

log = logging.getLogger(__name__)

CREATED_AT = "createdAt"


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


class DocumentStore(Protocol):
    """Document store contract: collections per namespace, batches, live queries.

    Services depend on this interface, never on a concrete engine.
    """

    def get(self, namespace: str, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    def query(self, namespace: str, collection: str, *, where: Where = None) -> list[Document]:
        raise NotImplementedError

    def insert(self, namespace: str, collection: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def update(self, namespace: str, collection: str, doc_id: str, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, namespace: str, collection: str, doc_id: str) -> bool:
        raise NotImplementedError

    def batch(self, namespace: str) -> "WriteBatch":
        raise NotImplementedError

    def subscribe(
        self,
        namespace: str,
        collection: str,
        on_snapshot: SnapshotCallback,
        *,
        where: Where = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        raise NotImplementedError


class WriteBatch:
    """Atomic group of inserts and deletes. Nothing is written before `commit()`."""

    def __init__(self, store: "BaseDocumentStore", namespace: str):
        self._store = store
        self._namespace = namespace
        self._ops: list[WriteOp] = []
        self._committed = False

    def __len__(self) -> int:
        return len(self._ops)

    def insert(self, collection: str, data: Mapping[str, Any]) -> str:
        doc_id = new_document_id()
        self._ops.append(WriteOp(kind="insert", collection=collection, doc_id=doc_id, data=dict(data)))
        return doc_id

    def delete(self, collection: str, doc_id: str) -> None:
        self._ops.append(WriteOp(kind="delete", collection=collection, doc_id=doc_id))

    def commit(self) -> int:
        if self._committed:
            raise StoreError("Batch sudah pernah di-commit")
        self._committed = True
        if not self._ops:
            return 0
        return self._store.apply_batch(self._namespace, self._ops)


class BaseDocumentStore(ABC):
    """Shared behaviour: server timestamps, error wrapping and change fan-out.

    Engines only implement the raw `_get/_query/_apply/_update` primitives.
    """

    def __init__(self, *, clock: Callable[[], Any] = now_local):
        self._clock = clock
        self._hub = SubscriptionHub(self._query)

    @property
    def listener_count(self) -> int:
        return len(self._hub)

    def get(self, namespace: str, collection: str, doc_id: str) -> Optional[Document]:
        try:
            return self._get(namespace, collection, doc_id)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"Gagal membaca {collection}/{doc_id}") from exc

    def query(self, namespace: str, collection: str, *, where: Where = None) -> list[Document]:
        try:
            return self._query(namespace, collection, where)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"Gagal memuat koleksi {collection}") from exc

    def insert(self, namespace: str, collection: str, data: Mapping[str, Any]) -> str:
        batch = self.batch(namespace)
        doc_id = batch.insert(collection, data)
        batch.commit()
        return doc_id

    def delete(self, namespace: str, collection: str, doc_id: str) -> bool:
        batch = self.batch(namespace)
        batch.delete(collection, doc_id)
        return batch.commit() > 0

    def update(self, namespace: str, collection: str, doc_id: str, fields: Mapping[str, Any]) -> bool:
        try:
            changed = self._update(namespace, collection, doc_id, dict(fields))
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"Gagal memperbarui {collection}/{doc_id}") from exc
        if changed:
            self._hub.publish(namespace, [collection])
        return changed

    def batch(self, namespace: str) -> WriteBatch:
        return WriteBatch(self, namespace)

    def apply_batch(self, namespace: str, ops: Sequence[WriteOp]) -> int:
        now = self._clock()
        stamped = [
            WriteOp(kind=op.kind, collection=op.collection, doc_id=op.doc_id, data={**op.data, CREATED_AT: now})
            if op.kind == "insert"
            else op
            for op in ops
        ]
        try:
            changed = self._apply(namespace, stamped)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError("Batch gagal ditulis") from exc

        log.debug("Committed batch of %d ops to %s (%d changed)", len(ops), namespace, changed)
        if changed:
            self._hub.publish(namespace, {op.collection for op in ops})
        return changed

    def subscribe(
        self,
        namespace: str,
        collection: str,
        on_snapshot: SnapshotCallback,
        *,
        where: Where = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        return self._hub.register(
            namespace=namespace,
            collection=collection,
            where=where,
            on_snapshot=on_snapshot,
            on_error=on_error,
        )

    @abstractmethod
    def _get(self, namespace: str, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    @abstractmethod
    def _query(self, namespace: str, collection: str, where: Where) -> list[Document]:
        raise NotImplementedError

    @abstractmethod
    def _apply(self, namespace: str, ops: Sequence[WriteOp]) -> int:
        """Apply all ops atomically; return how many documents changed."""

        raise NotImplementedError

    @abstractmethod
    def _update(self, namespace: str, collection: str, doc_id: str, fields: dict[str, Any]) -> bool:
        raise NotImplementedError
