"""
Module with the repo and model for :class:`CachedEvent`.

Events are persisted in the :code:`events_cache_events` table, one row per
``(key, block_number, transaction_index, log_index)``. Saving an event
that is already stored replaces its payload.
"""

from events_cache.events.event import CachedEvent
from events_cache.events.repo import EventsRepo
