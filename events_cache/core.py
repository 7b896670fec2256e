"""
Implements :class:`Core` that is used in other modules.
"""

import os
from contextlib import contextmanager
from functools import cached_property
from threading import RLock, local
from sqlite3 import Connection, connect
from typing import Iterator
from web3 import Web3

from events_cache.errors import ConfigurationError

DEFAULT_TIMEOUT = 5.0
SAVEPOINT_NAME = "events_cache"


class TransactionGuard:
    """
    Serializes the transactions of threads sharing one connection.

    The lock is held for the whole outermost transaction, so a thread never
    joins a transaction opened by another thread. The nesting depth is
    tracked per thread.
    """

    #: Reentrant lock held by the thread running a transaction
    lock: RLock

    def __init__(self):
        self.lock = RLock()
        self._local = local()

    @property
    def depth(self) -> int:
        """
        Number of transactions the current thread has open
        """
        return getattr(self._local, "depth", 0)

    @depth.setter
    def depth(self, val: int):
        self._local.depth = val


class Core:
    """
    A base class for any class that wants to use the
    Sqlite3 cache database on behalf of a single network.

    When deriving this class, you're providing arguments like the network
    identity or OS path to the database. The resources are instantiated
    on demand though. It means that if you pass the ``network`` explicitly
    there's no need to supply an rpc endpoint at all.

    **Network identity**

    Every cache key is scoped by a network. It is resolved in this order:

        1. ``network`` argument
        2. ``EVENTS_CACHE_NETWORK`` env variable
        3. ``chain_id`` of the web3 connection (``w3``, ``rpc`` or
           ``WEB3_PROVIDER_URI`` env variable)

    **Connection**

    Nothing is cached process-wide. Two instances built from the same
    ``cache_path`` open two connections, so pass ``conn`` explicitly
    when several repos must share one transaction, together with the
    same ``guard`` when the connection is shared between threads.

    Args:
        network: Network identity used for cache keys
        cache_path: OS path to the cache database
        timeout: Seconds to wait for a locked database
        rpc: An https Ethereum RPC endpoint uri
        w3: an instance of web3 (overrides rpc)
        conn: an instance of database connection (overrides cache_path)
        guard: transaction guard of the connection, a new one if ``None``
    """

    #: OS path to the cache database.
    #: Can be ``None`` if :class:`sqlite3.Connection` is injected directly.
    cache_path: str | None
    #: An https Ethereum RPC endpoint uri.
    #: Only used to resolve the network when it's not given.
    rpc: str | None

    def __init__(
        self,
        network: str | int | None = None,
        cache_path: str | None = None,
        timeout: float | None = None,
        rpc: str | None = None,
        w3: Web3 | None = None,
        conn: Connection | None = None,
        guard: TransactionGuard | None = None,
    ):
        self.cache_path = cache_path
        self.rpc = rpc
        self._network = network
        self._timeout = timeout
        self._w3 = w3
        self._conn = conn
        self.guard = guard or TransactionGuard()

    @cached_property
    def network(self) -> str:
        """
        Network identity for the cache keys
        """
        if not self._network is None:
            return str(self._network)

        env_value = os.environ.get("EVENTS_CACHE_NETWORK")
        if env_value:
            return env_value

        return str(self.w3.eth.chain_id)

    @cached_property
    def timeout(self) -> float:
        """
        Seconds to wait for a locked database before failing
        """
        if not self._timeout is None:
            return float(self._timeout)
        env_value = os.environ.get("EVENTS_CACHE_TIMEOUT")
        if env_value is None:
            return DEFAULT_TIMEOUT
        try:
            return float(env_value)
        except ValueError as e:
            raise ConfigurationError(
                f"EVENTS_CACHE_TIMEOUT must be a number, got `{env_value}`"
            ) from e

    @cached_property
    def w3(self) -> Web3:
        """
        :class:`web3.Web3` instance used to resolve the network
        """
        if not self._w3 is None:
            return self._w3

        if self.rpc is None:
            self.rpc = os.environ.get("WEB3_PROVIDER_URI")

        if self.rpc is None:
            raise ConfigurationError(
                "Network is not set. Use `EVENTS_CACHE_NETWORK` env variable, "
                "pass network explicitly or provide a web3 rpc (`WEB3_PROVIDER_URI`)"
            )

        return Web3(Web3.HTTPProvider(self.rpc))

    @cached_property
    def conn(self) -> Connection:
        """
        :class:`sqlite3.Connection` to a database cache
        """
        if not self._conn is None:
            return self._conn

        if self.cache_path is None:
            self.cache_path = os.environ.get("EVENTS_CACHE_PATH")

        if self.cache_path is None:
            raise ConfigurationError(
                "Cache database path is not set. "
                "Use `EVENTS_CACHE_PATH` env variable or pass cache_path explicitly"
            )

        return connection_from_path(self.cache_path, self.timeout)

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """
        Run a block of statements atomically.

        A fresh transaction is opened with ``BEGIN IMMEDIATE``, so the write
        lock is taken before anything is read and concurrent writers on other
        connections wait for each other. If the connection is already inside
        a transaction, a savepoint is used instead and the outer transaction
        decides whether the changes are committed.

        Threads sharing the connection wait on :attr:`guard` until the
        outermost transaction of another thread is finished.

        Everything is rolled back if the block raises.
        """
        conn = self.conn
        with self.guard.lock:
            nested = self.guard.depth > 0 or conn.in_transaction
            conn.execute(f"SAVEPOINT {SAVEPOINT_NAME}" if nested else "BEGIN IMMEDIATE")
            self.guard.depth += 1
            try:
                yield conn
            except BaseException:
                if nested:
                    conn.execute(f"ROLLBACK TO {SAVEPOINT_NAME}")
                    conn.execute(f"RELEASE {SAVEPOINT_NAME}")
                else:
                    conn.rollback()
                raise
            else:
                if nested:
                    conn.execute(f"RELEASE {SAVEPOINT_NAME}")
                else:
                    conn.commit()
            finally:
                self.guard.depth -= 1

    def commit(self):
        """
        Commits all changes pending on the database connection.
        """
        self.conn.commit()

    def rollback(self):
        """
        Rollbacks all changes pending on the database connection.
        """
        self.conn.rollback()


def connection_from_path(path: str, timeout: float = DEFAULT_TIMEOUT) -> Connection:
    """
    Creates a connection to a database at ``path``.
    If the file at ``path`` doesn't exist, creates a new one.
    The schema is initialized in both cases.

    Args:
        path: The absolute path to the database (or ``:memory:``)
        timeout: Seconds to wait for a locked database

    Returns:
        An instance of sqlite3 Connection

    Note:
        The schema migrations are currently not supported.
    """

    conn = connect(path, timeout=timeout, check_same_thread=False)
    init_db(conn)
    return conn


def init_db(conn: Connection):
    """
    Initialize db schema. Safe to call on an initialized database.

    Args:
        conn: Connection to the database
    """
    cursor = conn.cursor()
    # Intervals table
    cursor.execute(
        """CREATE TABLE IF NOT EXISTS events_cache_intervals
            (network text, key text, from_block integer, to_block integer)"""
    )
    cursor.execute(
        """CREATE INDEX IF NOT EXISTS idx_events_cache_intervals_search \
        ON events_cache_intervals(key,to_block)
    """
    )

    # Events table
    cursor.execute(
        """CREATE TABLE IF NOT EXISTS events_cache_events
            (network text, key text, block_number integer, \
            transaction_index integer, log_index integer, payload text)"""
    )
    cursor.execute(
        """CREATE UNIQUE INDEX IF NOT EXISTS idx_events_cache_events_id \
        ON events_cache_events(key,block_number,transaction_index,log_index)
    """
    )
    cursor.execute(
        """CREATE INDEX IF NOT EXISTS idx_events_cache_events_network \
        ON events_cache_events(network)
    """
    )

    conn.commit()
