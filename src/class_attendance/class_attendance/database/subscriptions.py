from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from .model import Document, Snapshot

log = logging.getLogger(__name__)

Where = Optional[tuple[str, Any]]
SnapshotCallback = Callable[[Snapshot], None]
ErrorCallback = Callable[[Exception], None]
FetchFn = Callable[[str, str, Where], list[Document]]


@dataclass
class _Listener:
    namespace: str
    collection: str
    where: Where
    on_snapshot: SnapshotCallback
    on_error: Optional[ErrorCallback]
    last: Optional[tuple[Document, ...]] = None


class Subscription:
    """Handle for a live query. `unsubscribe()` is idempotent.

    Usable as a context manager so the listener is always released.
    """

    def __init__(self, hub: "SubscriptionHub", key: int):
        self._hub = hub
        self._key = key
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._active = False
            self._hub.remove(self._key)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.unsubscribe()


class SubscriptionHub:
    """Observer registry shared by a store.

    Every committed change re-runs the query of each matching listener and
    pushes a snapshot when its result set differs from the last one pushed.
    Deliveries are serialized so listeners observe changes in commit order.
    """

    def __init__(self, fetch: FetchFn):
        self._fetch = fetch
        self._listeners: dict[int, _Listener] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def register(
        self,
        *,
        namespace: str,
        collection: str,
        where: Where,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        listener = _Listener(namespace, collection, where, on_snapshot, on_error)
        with self._lock:
            key = next(self._ids)
            self._listeners[key] = listener
            # Initial snapshot, like a fresh query.
            self._deliver(listener)
        return Subscription(self, key)

    def remove(self, key: int) -> None:
        with self._lock:
            self._listeners.pop(key, None)

    def publish(self, namespace: str, collections: Iterable[str]) -> None:
        touched = set(collections)
        with self._lock:
            for listener in list(self._listeners.values()):
                if listener.namespace == namespace and listener.collection in touched:
                    self._deliver(listener)

    def _deliver(self, listener: _Listener) -> None:
        try:
            docs = self._fetch(listener.namespace, listener.collection, listener.where)
        except Exception as exc:
            log.warning("Live query on %s/%s failed: %s", listener.namespace, listener.collection, exc)
            listener.last = None
            if listener.on_error is not None:
                listener.on_error(exc)
            return

        documents = tuple(docs)
        if listener.last is not None and documents == listener.last:
            return
        listener.last = documents

        try:
            listener.on_snapshot(Snapshot(documents))
        except Exception:
            # A broken listener must not fail the write that triggered it.
            log.exception("Subscriber callback for %s/%s raised", listener.namespace, listener.collection)


def fallback_to_empty(on_change: Callable[[Any], None], *, empty: Any, what: str) -> ErrorCallback:
    """Error handler for live reads: log, then show `empty` instead of failing."""

    def _on_error(exc: Exception) -> None:
        log.error("Error fetching %s: %s", what, exc)
        on_change(empty() if callable(empty) else empty)

    return _on_error
