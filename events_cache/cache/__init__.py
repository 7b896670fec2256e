"""
Module coordinating the events and intervals repos.

The main class of this module is :class:`EventsCache`.
It answers which parts of a block range are already cached for an
event filter, and saves freshly fetched events together with the
range they were fetched for.

For example, if you saved ERC20 Transfer events from block 10_000 to
block 20_000, then a query from block 15_000 to block 21_000 returns
15_000 - 20_000 as cached and 20_001 - 21_000 as non-cached.
After saving 20_001 - 21_000, the whole range is cached.

Fetching events from the upstream is left to the caller.
"""

from events_cache.cache.result import QueryResult
from events_cache.cache.service import ClearScope, EventsCache
