from __future__ import annotations
from typing import Any, Dict, List

from events_cache.events.event import CachedEvent
from events_cache.intervals.interval import Coverage


class QueryResult:
    """
    Result of :meth:`events_cache.cache.EventsCache.query`.

    Warning:
        ``events`` holds every stored event of the queried range, including
        the ones inside ``intervals.non_cached``. They're only guaranteed to be
        complete inside ``intervals.cached``. Use :meth:`cached_events` to get
        the trusted part only.
    """

    #: Stored events of the queried range
    events: List[CachedEvent]
    #: Cached and non-cached parts of the queried range
    intervals: Coverage

    def __init__(self, events: List[CachedEvent], intervals: Coverage):
        self.events = events
        self.intervals = intervals

    @property
    def is_fully_cached(self) -> bool:
        """
        ``True`` if nothing is left to fetch for the queried range
        """
        return len(self.intervals.non_cached) == 0

    def cached_events(self) -> List[CachedEvent]:
        """
        Events that lie inside the cached intervals.
        """
        return [
            e
            for e in self.events
            if any(e.block_number in i for i in self.intervals.cached)
        ]

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`QueryResult` to dict
        """
        return {
            "events": [e.to_dict() for e in self.events],
            "intervals": self.intervals.to_dict(),
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"QueryResult(events={self.events}, intervals={self.intervals})"
