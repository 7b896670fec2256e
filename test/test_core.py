import sqlite3
import pytest

from fixtures.general import Web3Mock
from events_cache.core import Core, DEFAULT_TIMEOUT, connection_from_path, init_db
from events_cache.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "EVENTS_CACHE_NETWORK",
        "EVENTS_CACHE_PATH",
        "EVENTS_CACHE_TIMEOUT",
        "WEB3_PROVIDER_URI",
    ):
        monkeypatch.delenv(name, raising=False)


def test_network_explicit(w3_mock: Web3Mock, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EVENTS_CACHE_NETWORK", "fromenv")
    assert Core(network="mainnet", w3=w3_mock).network == "mainnet"
    assert Core(network=137).network == "137"


def test_network_from_env(w3_mock: Web3Mock, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EVENTS_CACHE_NETWORK", "fromenv")
    assert Core(w3=w3_mock).network == "fromenv"


def test_network_from_web3(w3_mock: Web3Mock):
    assert Core(w3=w3_mock).network == "1"


def test_network_missing():
    with pytest.raises(ConfigurationError):
        Core().network


def test_conn_from_env(cache_path: str, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EVENTS_CACHE_PATH", cache_path)
    core = Core(network="mainnet")
    core.conn.execute("SELECT * FROM events_cache_intervals").fetchall()
    assert core.cache_path == cache_path
    core.conn.close()


def test_conn_missing():
    with pytest.raises(ConfigurationError):
        Core(network="mainnet").conn


def test_conn_injected(conn: sqlite3.Connection):
    assert Core(network="mainnet", conn=conn, cache_path="/nonexistent").conn is conn


def test_timeout(monkeypatch: pytest.MonkeyPatch):
    assert Core().timeout == DEFAULT_TIMEOUT
    assert Core(timeout=1).timeout == 1.0
    monkeypatch.setenv("EVENTS_CACHE_TIMEOUT", "2.5")
    assert Core().timeout == 2.5
    monkeypatch.setenv("EVENTS_CACHE_TIMEOUT", "soon")
    with pytest.raises(ConfigurationError):
        Core().timeout


def test_init_db_is_idempotent(conn: sqlite3.Connection):
    conn.execute("INSERT INTO events_cache_intervals VALUES('n', 'k', 1, 2)")
    conn.commit()
    init_db(conn)
    assert conn.execute("SELECT * FROM events_cache_intervals").fetchall() == [
        ("n", "k", 1, 2)
    ]


def test_memory_connection():
    conn = connection_from_path(":memory:")
    assert conn.execute("SELECT COUNT(*) FROM events_cache_events").fetchone() == (0,)


def test_transaction_commits(conn: sqlite3.Connection):
    core = Core(network="mainnet", conn=conn)
    with core.transaction():
        conn.execute("INSERT INTO events_cache_intervals VALUES('n', 'k', 1, 2)")
    assert not conn.in_transaction
    assert len(conn.execute("SELECT * FROM events_cache_intervals").fetchall()) == 1


def test_transaction_rolls_back(conn: sqlite3.Connection):
    core = Core(network="mainnet", conn=conn)
    with pytest.raises(RuntimeError):
        with core.transaction():
            conn.execute("INSERT INTO events_cache_intervals VALUES('n', 'k', 1, 2)")
            raise RuntimeError("boom")
    assert not conn.in_transaction
    assert conn.execute("SELECT * FROM events_cache_intervals").fetchall() == []


def test_nested_transaction(conn: sqlite3.Connection):
    core = Core(network="mainnet", conn=conn)
    with core.transaction():
        conn.execute("INSERT INTO events_cache_intervals VALUES('n', 'k', 1, 2)")
        with pytest.raises(RuntimeError):
            with core.transaction():
                conn.execute("INSERT INTO events_cache_intervals VALUES('n', 'k', 5, 6)")
                raise RuntimeError("boom")
        with core.transaction():
            conn.execute("INSERT INTO events_cache_intervals VALUES('n', 'k', 8, 9)")
        assert conn.in_transaction
    assert conn.execute(
        "SELECT from_block FROM events_cache_intervals ORDER BY from_block"
    ).fetchall() == [(1,), (8,)]


def test_transaction_joins_pending_changes(conn: sqlite3.Connection):
    core = Core(network="mainnet", conn=conn)
    conn.execute("INSERT INTO events_cache_intervals VALUES('n', 'k', 1, 2)")
    assert conn.in_transaction
    with core.transaction():
        conn.execute("INSERT INTO events_cache_intervals VALUES('n', 'k', 5, 6)")
    assert conn.in_transaction
    core.rollback()
    assert conn.execute("SELECT * FROM events_cache_intervals").fetchall() == []


def test_transaction_guard_depth(conn: sqlite3.Connection):
    core = Core(network="mainnet", conn=conn)
    other = Core(network="mainnet", conn=conn, guard=core.guard)
    with core.transaction():
        assert core.guard.depth == 1
        with other.transaction():
            assert other.guard.depth == 2
    assert core.guard.depth == 0
    with pytest.raises(RuntimeError):
        with core.transaction():
            raise RuntimeError("boom")
    assert core.guard.depth == 0
    assert not conn.in_transaction
