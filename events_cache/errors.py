"""
Errors raised by the events cache.

Every error derives from :class:`EventsCacheError`, so callers can catch
all of them at once. Validation errors are also :class:`ValueError`.
"""


class EventsCacheError(Exception):
    """
    Base class for the events cache errors
    """


class ConfigurationError(EventsCacheError, ValueError):
    """
    Missing or malformed configuration (env variables or constructor args)
    """


class InvalidRange(EventsCacheError, ValueError):
    """
    A block range with ``from_block > to_block``.

    Args:
        from_block: Start of the range
        to_block: End of the range
    """

    from_block: int
    to_block: int

    def __init__(self, from_block: int, to_block: int):
        self.from_block = from_block
        self.to_block = to_block
        super().__init__(
            f"Invalid block range [{from_block}, {to_block}]: "
            "from_block must not be greater than to_block"
        )


class RangeViolation(EventsCacheError, ValueError):
    """
    An event being saved lies outside the declared block range.

    Args:
        block_number: The offending block number
        from_block: Start of the declared range
        to_block: End of the declared range
    """

    block_number: int
    from_block: int
    to_block: int

    def __init__(self, block_number: int, from_block: int, to_block: int):
        self.block_number = block_number
        self.from_block = from_block
        self.to_block = to_block
        super().__init__(
            f"Block number {block_number} is outside the specified range "
            f"[{from_block}, {to_block}]"
        )


class StoreError(EventsCacheError):
    """
    Failure of the underlying database. The original
    :class:`sqlite3.Error` is available as ``__cause__``.
    """
