from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional


@dataclass(frozen=True)
class Document:
    """A stored document: generated id plus its field map."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


@dataclass(frozen=True)
class Snapshot:
    """Result set pushed to subscribers after every committed change."""

    documents: tuple[Document, ...] = ()

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    @property
    def size(self) -> int:
        return len(self.documents)

    @property
    def empty(self) -> bool:
        return not self.documents


@dataclass(frozen=True)
class WriteOp:
    kind: str  # "insert" | "delete"
    collection: str
    doc_id: str
    data: Optional[dict[str, Any]] = None
