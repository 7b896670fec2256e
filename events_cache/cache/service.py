from __future__ import annotations
import logging
import os
from enum import Enum
from sqlite3 import Error as SqliteError
from typing import Any, Dict, List

from events_cache.core import Core
from events_cache.errors import (
    ConfigurationError,
    InvalidRange,
    RangeViolation,
    StoreError,
)
from events_cache.events.event import CachedEvent
from events_cache.events.repo import EventsRepo
from events_cache.filters.event_filter import EventFilter
from events_cache.intervals.repo import IntervalsRepo
from events_cache.cache.result import QueryResult
from events_cache.utils import short_address

logger = logging.getLogger(__name__)


class ClearScope(str, Enum):
    """
    What :meth:`EventsCache.clear` removes.
    """

    #: Everything cached in the database, for all networks
    ALL = "all"
    #: Only the data of the current network
    NETWORK = "network"


class EventsCache(Core):
    """
    Cache of events fetched for block ranges.

    The cache remembers which block ranges were fully fetched for every
    event filter, so that the same blocks are never requested from
    the slow upstream twice.

    **Request/Response flow**

    ::

                   +-------------+               +---------------+  +------------+
                   | EventsCache |               | IntervalsRepo |  | EventsRepo |
                   +-------------+               +---------------+  +------------+
        ----------------  |                              |                 |
        | Query events |--|                              |                 |
        |--------------|  |                              |                 |
                          | Query coverage               |                 |
                          |----------------------------->|                 |
                          |                              |                 |
                          | Find events in range         |                 |
                          |----------------------------------------------->|
          --------------  |                              |                 |
          | Response   |--|                              |                 |
          |------------|  |                              |                 |
                          |                              |                 |
        ----------------  |                              |                 |
        | Save events  |--|                              |                 |
        |--------------|  |                              |                 |
                          | +-- transaction -----------------------------+ |
                          | | Upsert events              |               | |
                          | |--------------------------------------------->|
                          | | Merge interval             |               | |
                          | |--------------------------->|               | |
                          | +--------------------------------------------+ |

    Queries take no database locks. A save committing between the coverage
    read and the events read of a query is fine: the result may be stale,
    but it's never inconsistent with what was committed. Threads sharing
    one cache wait for each other's transactions, so a query never sees
    uncommitted rows of another thread.

    Args:
        events_repo: Repo of events
        intervals_repo: Repo of intervals. Must share the connection
                        with ``events_repo``
        clear_scope: What :meth:`clear` removes. Falls back to the
                     ``EVENTS_CACHE_CLEAR_SCOPE`` env variable, ``all`` by default
        kwargs: Args for the :class:`events_cache.core.Core`

    Example:
        ::

            from events_cache import EventsCache, EventFilter

            cache = EventsCache.create(network="mainnet", cache_path="cache.db")
            dai = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
            f = EventFilter(dai, [transfer_topic])
            result = cache.query(f, 15_000_000, 15_010_000)
            for interval in result.intervals.non_cached:
                logs = fetch_logs(f, interval.from_block, interval.to_block)
                events = [CachedEvent.from_log(l) for l in logs]
                cache.save(f, interval.from_block, interval.to_block, events)
    """

    _events_repo: EventsRepo
    _intervals_repo: IntervalsRepo

    def __init__(
        self,
        events_repo: EventsRepo,
        intervals_repo: IntervalsRepo,
        clear_scope: ClearScope | str | None = None,
        **kwargs,
    ):
        kwargs.setdefault("conn", events_repo.conn)
        kwargs.setdefault("network", events_repo.network)
        kwargs.setdefault("guard", events_repo.guard)
        super().__init__(**kwargs)
        if not events_repo.conn is intervals_repo.conn is self.conn:
            raise ValueError("Events and intervals repos must share a connection")
        events_repo.guard = intervals_repo.guard = self.guard
        self._events_repo = events_repo
        self._intervals_repo = intervals_repo
        self._clear_scope = clear_scope

    @staticmethod
    def create(**kwargs) -> EventsCache:
        """
        Create an instance of :class:`EventsCache`.

        The connection and the network are resolved once and shared
        by both repos.

        Args:
            kwargs: Args for the :class:`events_cache.core.Core` and ``clear_scope``

        Returns:
            An instance of :class:`EventsCache`
        """
        clear_scope = kwargs.pop("clear_scope", None)
        core = Core(**kwargs)
        shared: Dict[str, Any] = {
            "network": core.network,
            "conn": core.conn,
            "guard": core.guard,
        }
        return EventsCache(
            EventsRepo(**shared),
            IntervalsRepo(**shared),
            clear_scope=clear_scope,
            **shared,
        )

    @property
    def clear_scope(self) -> ClearScope:
        """
        What :meth:`clear` removes
        """
        value = self._clear_scope
        if value is None:
            value = os.environ.get("EVENTS_CACHE_CLEAR_SCOPE", ClearScope.ALL.value)
        try:
            return ClearScope(value)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown clear scope `{value}`, use one of "
                f"{', '.join(s.value for s in ClearScope)}"
            ) from e

    def query(
        self, event_filter: EventFilter, from_block: int, to_block: int
    ) -> QueryResult:
        """
        Get cached events and the coverage of a block range.

        Args:
            event_filter: Filter of the events
            from_block: query from this block (inclusive)
            to_block: query to this block (inclusive)

        Returns:
            Stored events of the range together with cached and non-cached intervals.
            See the warning in :class:`events_cache.cache.QueryResult`.

        Exceptions:
            :class:`events_cache.errors.InvalidRange` if ``from_block > to_block``,
            :class:`events_cache.errors.StoreError` if the database fails.
        """
        if from_block > to_block:
            raise InvalidRange(from_block, to_block)
        key = event_filter.cache_key(self.network)
        try:
            with self.guard.lock:
                intervals = self._intervals_repo.query_coverage(
                    key, from_block, to_block
                )
                events = self._events_repo.find(key, from_block, to_block)
        except SqliteError as e:
            raise StoreError(f"Query of `{key}` failed: {e}") from e
        logger.debug(
            "Query %s (%d - %d): %d cached, %d non-cached intervals, %d events",
            short_address(event_filter.address),
            from_block,
            to_block,
            len(intervals.cached),
            len(intervals.non_cached),
            len(events),
        )
        return QueryResult(events, intervals)

    def save(
        self,
        event_filter: EventFilter,
        from_block: int,
        to_block: int,
        events: List[CachedEvent],
    ):
        """
        Save all events of a block range and mark the range as cached.

        Events and the interval are written in one transaction:
        either both are visible afterwards or none.

        Args:
            event_filter: Filter of the events
            from_block: range start (inclusive)
            to_block: range end (inclusive)
            events: Every event matching the filter in the range

        Exceptions:
            :class:`events_cache.errors.InvalidRange` if ``from_block > to_block``,
            :class:`events_cache.errors.RangeViolation` if an event is outside the range
            (nothing is saved then),
            :class:`events_cache.errors.StoreError` if the database fails.
        """
        if from_block > to_block:
            raise InvalidRange(from_block, to_block)
        for e in events:
            if e.block_number < from_block or e.block_number > to_block:
                raise RangeViolation(e.block_number, from_block, to_block)

        key = event_filter.cache_key(self.network)
        try:
            with self.transaction():
                self._events_repo.save(key, events)
                union = self._intervals_repo.merge(key, from_block, to_block)
        except SqliteError as e:
            raise StoreError(f"Save of `{key}` failed: {e}") from e
        logger.info(
            "Saved %d events for %s (%d - %d), cached interval is now %d - %d",
            len(events),
            short_address(event_filter.address),
            from_block,
            to_block,
            union.from_block,
            union.to_block,
        )

    def clear(self):
        """
        Delete cached entries, either for all networks or the
        current one only (see :attr:`clear_scope`).
        """
        scope = self.clear_scope
        network = self.network if scope == ClearScope.NETWORK else None
        try:
            with self.transaction():
                self._events_repo.purge(network)
                self._intervals_repo.purge(network)
        except SqliteError as e:
            raise StoreError(f"Clear failed: {e}") from e
        logger.info("Cleared events cache (scope: %s)", scope.value)
