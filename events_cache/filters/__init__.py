"""
Module deriving cache keys from event filters.

An event filter is a contract address with a list of topic slots.
Each slot is one of

+----------------------------------------------+------------------------------+
| Variant                                      | Description                  |
+==============================================+==============================+
| :class:`events_cache.filters.Wildcard`       | matches any topic            |
+----------------------------------------------+------------------------------+
| :class:`events_cache.filters.Single`         | matches one identifier       |
+----------------------------------------------+------------------------------+
| :class:`events_cache.filters.AnyOf`          | matches any of identifiers   |
+----------------------------------------------+------------------------------+

The cache key is built from the network, the lowercase address and the
flattened list of identifiers (wildcards are dropped), so the same filter
always lands on the same cached data.

Example:
    ::

        from events_cache.filters import EventFilter

        transfer = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
        f = EventFilter.from_params({"address": "0x6B17...", "topics": [transfer, None]})
        f.cache_key(1)
"""

from events_cache.filters.topic import AnyOf, Single, Topic, Wildcard, topic_from_raw
from events_cache.filters.key import derive_key, flatten_topics
from events_cache.filters.event_filter import EventFilter
