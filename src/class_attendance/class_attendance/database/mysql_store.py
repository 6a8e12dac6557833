from __future__ import annotations

import json
import re
from typing import Any, Optional, Sequence

from .connection import DatabaseConnection
from .model import Document, WriteOp
from .mysql_base import db_cursor, decode_document, encode_document, fetchall, fetchone
from .store import CREATED_AT, BaseDocumentStore
from .subscriptions import Where

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _json_path(field: str) -> str:
    if not _FIELD_RE.match(field):
        raise ValueError(f"Invalid field name: {field!r}")
    return f"$.{field}"


class MySQLDocumentStore(BaseDocumentStore):
    """Documents kept as JSON rows of the `documents` table.

    Live subscriptions only observe writes made through this process.
    """

    def __init__(self, conn_factory: DatabaseConnection, **kwargs):
        super().__init__(**kwargs)
        self._conn_factory = conn_factory

    def _get(self, namespace: str, collection: str, doc_id: str) -> Optional[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT doc_id, data
                FROM documents
                WHERE namespace=%s AND collection=%s AND doc_id=%s
                """,
                (namespace, collection, doc_id),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Document(str(r["doc_id"]), decode_document(r["data"]))

    def _query(self, namespace: str, collection: str, where: Where) -> list[Document]:
        clauses = ["namespace=%s", "collection=%s"]
        params: list[object] = [namespace, collection]

        if where is not None:
            field, value = where
            clauses.append("JSON_EXTRACT(data, %s) = CAST(%s AS JSON)")
            params.extend([_json_path(field), json.dumps(value)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT doc_id, data
                FROM documents
                WHERE {" AND ".join(clauses)}
                ORDER BY created_at ASC, doc_id ASC
                """,
                tuple(params),
            )
            return [Document(str(r["doc_id"]), decode_document(r["data"])) for r in fetchall(cur)]

    def _apply(self, namespace: str, ops: Sequence[WriteOp]) -> int:
        changed = 0
        with db_cursor(self._conn_factory) as (_, cur):
            for op in ops:
                if op.kind == "insert":
                    data = dict(op.data or {})
                    cur.execute(
                        """
                        INSERT INTO documents(namespace, collection, doc_id, data, created_at)
                        VALUES(%s,%s,%s,%s,%s)
                        """,
                        (namespace, op.collection, op.doc_id, encode_document(data), data.get(CREATED_AT)),
                    )
                elif op.kind == "delete":
                    cur.execute(
                        "DELETE FROM documents WHERE namespace=%s AND collection=%s AND doc_id=%s",
                        (namespace, op.collection, op.doc_id),
                    )
                else:
                    raise ValueError(f"Unsupported write op: {op.kind!r}")
                changed += max(cur.rowcount, 0)
        return changed

    def _update(self, namespace: str, collection: str, doc_id: str, fields: dict[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT data FROM documents
                WHERE namespace=%s AND collection=%s AND doc_id=%s
                FOR UPDATE
                """,
                (namespace, collection, doc_id),
            )
            r = fetchone(cur)
            if not r:
                return False
            merged = {**decode_document(r["data"]), **fields}
            cur.execute(
                "UPDATE documents SET data=%s WHERE namespace=%s AND collection=%s AND doc_id=%s",
                (encode_document(merged), namespace, collection, doc_id),
            )
            return True
