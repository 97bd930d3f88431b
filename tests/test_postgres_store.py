"""
PostgresDocumentStore against a mocked connection pool: checks the
transaction plumbing and the SQL each call sends, not PostgreSQL itself.
"""

from contextlib import contextmanager
from unittest.mock import MagicMock

import psycopg2
import pytest
from psycopg2 import pool

import db.connection as db_connection
import db.init_db as init_db
import db.postgres_store as postgres_store
from db.postgres_store import PostgresDocumentStore
from utils.errors import StoreError


@pytest.fixture
def conn(monkeypatch):
    connection = MagicMock()
    cursor = MagicMock()
    cursor_cm = connection.cursor.return_value
    cursor_cm.__enter__.return_value = cursor
    cursor_cm.__exit__.return_value = False
    connection.cur = cursor

    connection.borrowed = 0
    connection.returned = 0

    @contextmanager
    def pooled_connection():
        connection.borrowed += 1
        try:
            yield connection
        finally:
            connection.returned += 1

    monkeypatch.setattr(postgres_store, "init_pool", MagicMock())
    monkeypatch.setattr(postgres_store, "pooled_connection", pooled_connection)
    return connection


@pytest.fixture
def pg(conn):
    return PostgresDocumentStore()


def test_single_call_runs_in_its_own_transaction(pg, conn):
    conn.cur.fetchall.return_value = [({"name": "Alice"},)]

    assert pg.get("users", "k1") == {"name": "Alice"}

    sql, params = conn.cur.execute.call_args.args
    assert "FROM documents" in sql
    assert params == ("users", "k1")
    conn.commit.assert_called_once()
    assert conn.returned == 1


def test_get_missing_returns_none(pg, conn):
    conn.cur.fetchall.return_value = []
    assert pg.get("users", "missing") is None


def test_nested_calls_share_one_connection_and_commit(pg, conn):
    conn.cur.rowcount = 1
    conn.cur.fetchall.return_value = [(3,)]

    with pg.transaction():
        pg.set("follows", "f1", {"userId": "u", "schoolId": "s"})
        assert pg.increment("users", "s", "followersCount", 1) == 3

    assert conn.borrowed == 1
    conn.commit.assert_called_once()
    conn.rollback.assert_not_called()


def test_database_error_rolls_back_and_raises_store_error(pg, conn):
    conn.cur.execute.side_effect = psycopg2.OperationalError("connection lost")

    with pytest.raises(StoreError):
        pg.delete("likes", "l1")

    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    assert conn.returned == 1


def test_other_errors_roll_back_and_propagate(pg, conn):
    with pytest.raises(KeyError):
        with pg.transaction():
            raise KeyError("x")
    conn.rollback.assert_called_once()


def test_lost_connection_still_raises_store_error(pg, conn):
    conn.cur.execute.side_effect = psycopg2.OperationalError("server closed the connection")
    conn.rollback.side_effect = psycopg2.InterfaceError("connection already closed")

    with pytest.raises(StoreError) as raised:
        pg.get("users", "k1")

    assert isinstance(raised.value.__cause__, psycopg2.OperationalError)
    assert conn.returned == 1


def test_failed_rollback_does_not_mask_other_errors(pg, conn):
    conn.rollback.side_effect = psycopg2.InterfaceError("connection already closed")
    with pytest.raises(KeyError):
        with pg.transaction():
            raise KeyError("x")


def test_schema_setup_on_lost_connection_raises_store_error(monkeypatch, conn):
    conn.cur.execute.side_effect = psycopg2.OperationalError("server closed the connection")
    conn.rollback.side_effect = psycopg2.InterfaceError("connection already closed")

    @contextmanager
    def pooled_connection():
        yield conn

    monkeypatch.setattr(init_db, "pooled_connection", pooled_connection)
    with pytest.raises(StoreError):
        init_db.create_tables()


def test_update_and_delete_report_affected_rows(pg, conn):
    conn.cur.rowcount = 0
    assert pg.update("users", "missing", {"city": "Pune"}) is False
    assert pg.delete("users", "missing") is False
    conn.cur.rowcount = 1
    assert pg.update("users", "k1", {"city": "Pune"}) is True


def test_increment_on_missing_document_returns_none(pg, conn):
    conn.cur.fetchall.return_value = []
    assert pg.increment("posts", "missing", "likes", 1) is None
    sql, params = conn.cur.execute.call_args.args
    assert "GREATEST" in sql
    assert params == {"field": "likes", "delta": 1, "collection": "posts", "key": "missing"}


def test_query_adds_limit_and_row_locks(pg, conn):
    conn.cur.fetchall.return_value = []
    pg.query("follows", {"userId": "u"}, limit=1, for_update=True)
    sql, params = conn.cur.execute.call_args.args
    assert "data @> %s::jsonb" in sql
    assert sql.rstrip(";").endswith("LIMIT %s FOR UPDATE")
    assert params[0] == "follows"
    assert params[-1] == 1


def test_lock_takes_transaction_scoped_advisory_lock(pg, conn):
    pg.lock("likes", "u1", "p1")
    sql, params = conn.cur.execute.call_args.args
    assert "pg_advisory_xact_lock" in sql
    assert params == ("likes:u1:p1",)


# ── connection pool ───────────────────────────────────────


@pytest.fixture
def fake_pool(monkeypatch):
    pool_mock = MagicMock()
    monkeypatch.setattr(db_connection, "_pool", pool_mock)
    return pool_mock


def test_pooled_connection_discards_closed_connections(fake_pool):
    broken = MagicMock(closed=1)
    fake_pool.getconn.return_value = broken

    with db_connection.pooled_connection() as conn:
        assert conn is broken

    fake_pool.putconn.assert_called_once_with(broken, close=True)


def test_exhausted_pool_raises_store_error(fake_pool):
    fake_pool.getconn.side_effect = pool.PoolError("connection pool exhausted")
    with pytest.raises(StoreError):
        db_connection.get_connection()
