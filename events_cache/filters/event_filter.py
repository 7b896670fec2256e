from __future__ import annotations
from typing import Any, Dict, Iterable, List

from events_cache.filters.key import derive_key, flatten_topics
from events_cache.filters.topic import Topic, topic_from_raw


class EventFilter:
    """
    Describes which events are cached together: a contract ``address``
    and a list of topic slots.

    Args:
        address: Contract address, ``None`` means any address
        topics: Topic slots. Raw web3 values are accepted and converted
                with :func:`topic_from_raw`
    """

    _address: str | None
    #: Topic slots
    topics: List[Topic]

    def __init__(self, address: str | None, topics: Iterable[Any] | None = None):
        self.address = address
        self.topics = [topic_from_raw(t) for t in (topics or [])]

    @property
    def address(self) -> str | None:
        """
        The contract address. Always stored in lowercase.
        """
        return self._address

    @address.setter
    def address(self, val: str | None):
        self._address = None if val is None else val.lower()

    @staticmethod
    def from_params(params: Dict[str, Any]) -> EventFilter:
        """
        Create :class:`EventFilter` from web3 filter params

        Args:
            params: a dict like :code:`{"address": "0x...", "topics": [...]}`
        """
        address = params.get("address")
        if not address is None and not isinstance(address, str):
            raise TypeError("Only a single filter address is supported")
        return EventFilter(address, params.get("topics"))

    def flat_topics(self) -> List[str]:
        """
        Topic identifiers in order, without wildcards
        """
        return flatten_topics(self.topics)

    def cache_key(self, network: str | int) -> str:
        """
        Cache key of this filter on ``network``. See :func:`derive_key`.
        """
        return derive_key(network, self.address, self.topics)

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"EventFilter(address={self.address}, topics={self.topics})"
