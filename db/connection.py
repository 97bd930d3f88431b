"""
db/connection.py
----------------
PostgreSQL connection pool for the document store.

Connections are handed out through `pooled_connection()`, which always
returns them to the pool and drops ones the server has closed.
"""

from contextlib import contextmanager
from typing import Iterator

import psycopg2
from psycopg2 import pool
from psycopg2.extensions import connection as Connection

from config import (
    DATABASE_URL,
    DB_CONNECT_TIMEOUT,
    DB_POOL_MAX,
    DB_POOL_MIN,
    DB_STATEMENT_TIMEOUT_MS,
)
from utils.errors import StoreError
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.ThreadedConnectionPool | None = None


def init_pool(min_conn: int = DB_POOL_MIN, max_conn: int = DB_POOL_MAX) -> None:
    """
    Open the shared pool. Calling it again while open is a no-op.

    Each connection gets DB_CONNECT_TIMEOUT for the handshake and a
    server-side statement_timeout of DB_STATEMENT_TIMEOUT_MS.

    Raises:
        StoreError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.ThreadedConnectionPool(
            min_conn,
            max_conn,
            DATABASE_URL,
            connect_timeout=DB_CONNECT_TIMEOUT,
            options=f"-c statement_timeout={DB_STATEMENT_TIMEOUT_MS}",
        )
    except psycopg2.OperationalError as e:
        logger.error(f"Could not reach PostgreSQL: {e}")
        raise StoreError(f"Could not reach PostgreSQL: {e}") from e
    logger.info(f"PostgreSQL pool ready ({min_conn}-{max_conn} connections).")


def get_connection() -> Connection:
    """
    Borrow a raw connection; pair with release_connection().

    Raises:
        RuntimeError: If the pool has not been opened.
        StoreError: If every connection is in use.
    """
    if _pool is None:
        raise RuntimeError("PostgreSQL pool not initialized. Call init_pool() first.")
    try:
        return _pool.getconn()
    except pool.PoolError as e:
        logger.warning(f"Connection pool exhausted: {e}")
        raise StoreError(f"Connection pool exhausted: {e}") from e


def release_connection(conn: Connection) -> None:
    """Hand a connection back, discarding it if the server closed it."""
    if _pool is not None:
        _pool.putconn(conn, close=bool(conn.closed))


def rollback_quietly(conn: Connection) -> None:
    """Roll back, tolerating a connection the server has already closed."""
    try:
        conn.rollback()
    except psycopg2.Error as e:
        logger.warning(f"Rollback failed: {e}")


@contextmanager
def pooled_connection() -> Iterator[Connection]:
    """Borrow a connection for the duration of the block."""
    conn = get_connection()
    try:
        yield conn
    finally:
        release_connection(conn)


def close_pool() -> None:
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("PostgreSQL pool closed.")
