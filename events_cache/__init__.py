"""
Events cache remembers which block ranges of chain events were
already fetched and keeps the fetched events in a sqlite3 database.

+---------------------------------------------+--------------------------------+
| Module                                      | Description                    |
+=============================================+================================+
| :mod:`events_cache.filters`                 | Cache keys from event filters  |
+---------------------------------------------+--------------------------------+
| :mod:`events_cache.intervals`               | Cached block intervals         |
+---------------------------------------------+--------------------------------+
| :mod:`events_cache.events`                  | Cached events                  |
+---------------------------------------------+--------------------------------+
| :mod:`events_cache.cache`                   | Query, save and clear          |
+---------------------------------------------+--------------------------------+

The best way to get started is :class:`events_cache.cache.EventsCache`.
"""

from events_cache.errors import (
    ConfigurationError,
    EventsCacheError,
    InvalidRange,
    RangeViolation,
    StoreError,
)
from events_cache.filters import AnyOf, EventFilter, Single, Wildcard, derive_key
from events_cache.intervals import BlockInterval, Coverage, IntervalsRepo
from events_cache.events import CachedEvent, EventsRepo
from events_cache.cache import ClearScope, EventsCache, QueryResult
