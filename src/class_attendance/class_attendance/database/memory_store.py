from __future__ import annotations

import threading
from typing import Any, Optional, Sequence

from .model import Document, WriteOp
from .store import BaseDocumentStore
from .subscriptions import Where


class InMemoryDocumentStore(BaseDocumentStore):
    """Process-local store. Used by the `memory` backend and by tests."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._data: dict[tuple[str, str], dict[str, dict[str, Any]]] = {}
        self._lock = threading.RLock()

    def _bucket(self, namespace: str, collection: str) -> dict[str, dict[str, Any]]:
        return self._data.setdefault((namespace, collection), {})

    def _get(self, namespace: str, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            data = self._bucket(namespace, collection).get(doc_id)
            return Document(doc_id, dict(data)) if data is not None else None

    def _query(self, namespace: str, collection: str, where: Where) -> list[Document]:
        with self._lock:
            docs = [Document(doc_id, dict(data)) for doc_id, data in self._bucket(namespace, collection).items()]
        if where is None:
            return docs
        field, value = where
        return [d for d in docs if d.data.get(field) == value]

    def _apply(self, namespace: str, ops: Sequence[WriteOp]) -> int:
        with self._lock:
            # Stage on copies and swap in at the end: all ops land or none do.
            staged = {op.collection: dict(self._bucket(namespace, op.collection)) for op in ops}
            changed = 0
            for op in ops:
                bucket = staged[op.collection]
                if op.kind == "insert":
                    bucket[op.doc_id] = dict(op.data or {})
                    changed += 1
                elif op.kind == "delete":
                    if bucket.pop(op.doc_id, None) is not None:
                        changed += 1
                else:
                    raise ValueError(f"Unsupported write op: {op.kind!r}")
            for collection, bucket in staged.items():
                self._data[(namespace, collection)] = bucket
            return changed

    def _update(self, namespace: str, collection: str, doc_id: str, fields: dict[str, Any]) -> bool:
        with self._lock:
            bucket = self._bucket(namespace, collection)
            current = bucket.get(doc_id)
            if current is None:
                return False
            bucket[doc_id] = {**current, **fields}
            return True
