"""
db/postgres_store.py
--------------------
Document store on PostgreSQL: one `documents` table holding JSONB rows
keyed by (collection, key). See db/init_db.py for the schema.

Every public call runs in a transaction. Calls made inside an explicit
`transaction()` block share its connection and commit together.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

import psycopg2
from psycopg2.extras import Json

from config import DB_POOL_MAX, DB_POOL_MIN
from db.connection import close_pool, init_pool, pooled_connection, rollback_quietly
from db.store import Document, DocumentStore
from utils.errors import StoreError
from utils.logger import get_logger

logger = get_logger(__name__)


class PostgresDocumentStore(DocumentStore):
    """JSONB-backed implementation of DocumentStore."""

    def __init__(self, min_conn: int = DB_POOL_MIN, max_conn: int = DB_POOL_MAX):
        init_pool(min_conn, max_conn)
        self._cursor: ContextVar = ContextVar(f"documents_cursor_{id(self)}", default=None)

    # ── TRANSACTIONS ──────────────────────────────────────

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._cursor.get() is not None:
            yield
            return

        with pooled_connection() as conn:
            try:
                with conn.cursor() as cur:
                    token = self._cursor.set(cur)
                    try:
                        yield
                    finally:
                        self._cursor.reset(token)
                conn.commit()
            except psycopg2.Error as e:
                rollback_quietly(conn)
                logger.error(f"Document store transaction failed: {e}")
                raise StoreError(f"Document store failure: {e}") from e
            except Exception:
                rollback_quietly(conn)
                raise

    def lock(self, *parts: str) -> None:
        self._execute("SELECT pg_advisory_xact_lock(hashtext(%s));", (":".join(parts),))

    # ── READ ──────────────────────────────────────────────

    def get(self, collection: str, key: str) -> Optional[Document]:
        sql = "SELECT data FROM documents WHERE collection = %s AND key = %s;"
        rows = self._fetchall(sql, (collection, key))
        return rows[0][0] if rows else None

    def scan(self, collection: str) -> list[Document]:
        sql = "SELECT data FROM documents WHERE collection = %s ORDER BY key;"
        return [row[0] for row in self._fetchall(sql, (collection,))]

    def query(
        self,
        collection: str,
        criteria: Document,
        limit: Optional[int] = None,
        for_update: bool = False,
    ) -> list[Document]:
        sql = "SELECT data FROM documents WHERE collection = %s AND data @> %s::jsonb ORDER BY key"
        params: list = [collection, Json(criteria)]
        if limit is not None:
            sql += " LIMIT %s"
            params.append(limit)
        if for_update:
            sql += " FOR UPDATE"
        return [row[0] for row in self._fetchall(sql + ";", params)]

    # ── WRITE ─────────────────────────────────────────────

    def set(self, collection: str, key: str, document: Document) -> None:
        sql = """
            INSERT INTO documents (collection, key, data)
            VALUES (%s, %s, %s::jsonb)
            ON CONFLICT (collection, key)
            DO UPDATE SET data = EXCLUDED.data, updated_at = NOW();
        """
        self._execute(sql, (collection, key, Json(document)))

    def update(self, collection: str, key: str, fields: Document) -> bool:
        sql = """
            UPDATE documents
            SET data = data || %s::jsonb, updated_at = NOW()
            WHERE collection = %s AND key = %s;
        """
        return self._execute(sql, (Json(fields), collection, key)) > 0

    def delete(self, collection: str, key: str) -> bool:
        sql = "DELETE FROM documents WHERE collection = %s AND key = %s;"
        return self._execute(sql, (collection, key)) > 0

    def increment(self, collection: str, key: str, field: str, delta: int) -> Optional[int]:
        sql = """
            UPDATE documents
            SET data = jsonb_set(
                    data,
                    ARRAY[%(field)s],
                    to_jsonb(GREATEST(COALESCE((data ->> %(field)s)::bigint, 0) + %(delta)s, 0))
                ),
                updated_at = NOW()
            WHERE collection = %(collection)s AND key = %(key)s
            RETURNING (data ->> %(field)s)::bigint;
        """
        params = {"field": field, "delta": delta, "collection": collection, "key": key}
        rows = self._fetchall(sql, params)
        return int(rows[0][0]) if rows else None

    def close(self) -> None:
        close_pool()

    # ── HELPERS ───────────────────────────────────────────

    def _fetchall(self, sql: str, params) -> list[tuple]:
        with self.transaction():
            cur = self._cursor.get()
            cur.execute(sql, params)
            return cur.fetchall()

    def _execute(self, sql: str, params) -> int:
        """Run a statement and return the number of affected rows."""
        with self.transaction():
            cur = self._cursor.get()
            cur.execute(sql, params)
            return cur.rowcount
