from typing import Iterable, List

from events_cache.filters.topic import Topic, topic_from_raw

KEY_SEPARATOR = ":"
TOPICS_SEPARATOR = "."


def flatten_topics(topics: Iterable[Topic] | None) -> List[str]:
    """
    Flatten topic slots into an ordered list of identifiers.
    Wildcards contribute nothing.
    """
    if topics is None:
        return []
    return [i for t in topics for i in topic_from_raw(t).identifiers()]


def derive_key(
    network: str | int, address: str | None, topics: Iterable[Topic] | None
) -> str:
    """
    Cache key for the events of a filter on a network.

    Two filters share a key when they have the same network, the same
    address (case-insensitive) and the same flattened topics. Flattening
    drops the slot structure, so :code:`[AnyOf(("0x01", "0x02"))]` and
    :code:`[Single("0x01"), Single("0x02")]` share a key as well.

    Args:
        network: Network identity
        address: Contract address (``None`` for any address)
        topics: Topic slots

    Returns:
        Cache key

    Examples:
        ::

            derive_key(1, "0xAB", [Single("0x01"), None, AnyOf(("0x02", "0x03"))])
            # 1:0xab:0x01.0x02.0x03
    """
    return KEY_SEPARATOR.join(
        [
            str(network),
            (address or "").lower(),
            TOPICS_SEPARATOR.join(flatten_topics(topics)),
        ]
    )
