from sqlite3 import Connection
import pytest

from events_cache.cache.service import EventsCache
from events_cache.filters.event_filter import EventFilter
from fixtures.general import ADDRESS, NETWORK, TRANSFER_TOPIC


@pytest.fixture
def events_cache(conn: Connection) -> EventsCache:
    """
    Instance of cache.EventsCache
    """
    return EventsCache.create(network=NETWORK, conn=conn)


@pytest.fixture
def event_filter() -> EventFilter:
    """
    Filter for DAI Transfer events
    """
    return EventFilter(ADDRESS, [TRANSFER_TOPIC])
