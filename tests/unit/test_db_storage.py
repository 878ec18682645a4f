"""
Unit tests for DBStorage using dummy psycopg connections.

No database is needed: `psycopg.connect` is monkeypatched to return an
in-process stand-in that records executed SQL and replays canned rows.
"""

import psycopg
import pytest

from relink_platform.errors import StorageError
from relink_platform.storage.db_storage import DBStorage, _escape_like


class DummyCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rowcount = conn.rowcount

    def execute(self, query, params=None):
        if self.conn.fail_with is not None:
            raise self.conn.fail_with
        self.conn.executed.append((query, params))
        return self

    def fetchone(self):
        return self.conn.results[0] if self.conn.results else None

    def fetchall(self):
        return list(self.conn.results)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class DummyConnection:
    def __init__(self, results=None, rowcount=1, fail_with=None):
        self.results = results or []
        self.rowcount = rowcount
        self.fail_with = fail_with
        self.executed = []
        self.autocommit = False
        self.closed = False

    def cursor(self, row_factory=None):
        return DummyCursor(self)

    def close(self):
        self.closed = True


@pytest.fixture
def connect(monkeypatch):
    """Patch psycopg.connect; returns a setter for the next DummyConnection."""
    holder = {}

    def _use(conn):
        holder["conn"] = conn
        monkeypatch.setattr("psycopg.connect", lambda dsn: conn)
        return conn

    return _use


def test_get_returns_value(connect):
    conn = connect(DummyConnection(results=[('{"url": "https://x.com"}',)]))
    assert DBStorage("fake").get("link:abc") == '{"url": "https://x.com"}'
    query, params = conn.executed[0]
    assert "expires_at" in query
    assert params == ("link:abc",)
    assert conn.closed is True


def test_get_missing_returns_none(connect):
    connect(DummyConnection(results=[]))
    assert DBStorage("fake").get("link:nope") is None


def test_put_upserts_with_ttl(connect):
    conn = connect(DummyConnection())
    DBStorage("fake").put("__session__:t", "1", ttl=86400)
    query, params = conn.executed[0]
    assert "ON CONFLICT (key) DO UPDATE" in query
    assert params == ("__session__:t", "1", 86400, 86400)
    assert conn.autocommit is True


def test_put_without_ttl_passes_null(connect):
    conn = connect(DummyConnection())
    DBStorage("fake").put("link:a", "{}")
    assert conn.executed[0][1] == ("link:a", "{}", None, None)


def test_delete(connect):
    conn = connect(DummyConnection(rowcount=0))
    DBStorage("fake").delete("link:a")
    assert conn.executed[0][0].startswith("DELETE FROM kv_store")


def test_list_keys_escapes_like_wildcards(connect):
    conn = connect(DummyConnection(results=[("link:a",), ("link:b",)]))
    assert DBStorage("fake").list_keys("link:") == ["link:a", "link:b"]
    assert conn.executed[0][1] == ("link:%",)


def test_list_keys_orders_by_code_point(connect):
    conn = connect(DummyConnection(results=[]))
    DBStorage("fake").list_keys("link:")
    assert 'ORDER BY key COLLATE "C"' in conn.executed[0][0]


def test_escape_like():
    assert _escape_like("__session__:") == "\\_\\_session\\_\\_:"
    assert _escape_like("50%") == "50\\%"


def test_purge_expired_returns_rowcount(connect):
    connect(DummyConnection(rowcount=3))
    assert DBStorage("fake").purge_expired() == 3


def test_ensure_schema_creates_table(connect):
    conn = connect(DummyConnection())
    DBStorage("fake").ensure_schema()
    assert "CREATE TABLE IF NOT EXISTS kv_store" in conn.executed[0][0]


def test_query_failure_becomes_storage_error(connect):
    conn = connect(DummyConnection(fail_with=psycopg.OperationalError("boom")))
    with pytest.raises(StorageError):
        DBStorage("fake").get("link:a")
    assert conn.closed is True


def test_connect_failure_becomes_storage_error(monkeypatch):
    def _refuse(dsn):
        raise psycopg.OperationalError("connection refused")

    monkeypatch.setattr("psycopg.connect", _refuse)
    with pytest.raises(StorageError, match="Storage unavailable"):
        DBStorage("fake").list_keys("link:")
