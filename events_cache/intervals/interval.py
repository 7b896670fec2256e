from __future__ import annotations
import json
from typing import Any, Dict, List, Tuple


class BlockInterval:
    """
    A closed range of blocks ``[from_block, to_block]``.
    """

    #: First block of the interval (inclusive)
    from_block: int
    #: Last block of the interval (inclusive)
    to_block: int

    def __init__(self, from_block: int, to_block: int):
        self.from_block = from_block
        self.to_block = to_block

    @staticmethod
    def from_row(row: Tuple[int, int]) -> BlockInterval:
        """
        Deserialize from database row

        Args:
            row: database row
        """
        return BlockInterval(*row)

    def to_row(self) -> Tuple[int, int]:
        """
        Serialize to database row

        Returns:
            database row
        """
        return (self.from_block, self.to_block)

    @staticmethod
    def from_dict(dct: Dict[str, Any]) -> BlockInterval:
        """
        Create :class:`BlockInterval` from dict
        """
        return BlockInterval(from_block=dct["from"], to_block=dct["to"])

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`BlockInterval` to dict
        """
        return {"from": self.from_block, "to": self.to_block}

    def __contains__(self, block_number: int) -> bool:
        return self.from_block <= block_number <= self.to_block

    def intersection(self, other: BlockInterval) -> BlockInterval | None:
        """
        Common part of two intervals, ``None`` if they don't intersect.
        """
        if self.to_block < other.from_block or other.to_block < self.from_block:
            return None
        return BlockInterval(
            max(self.from_block, other.from_block), min(self.to_block, other.to_block)
        )

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __hash__(self):
        return hash((self.from_block, self.to_block))

    def __repr__(self):
        return f"BlockInterval({json.dumps(self.to_dict())})"


class Coverage:
    """
    Split of a queried block range into the intervals that are
    already ``cached`` and the ones that still need fetching (``non_cached``).
    Both lists are sorted by ``from_block``.
    """

    #: Intervals present in the cache
    cached: List[BlockInterval]
    #: Intervals missing in the cache
    non_cached: List[BlockInterval]

    def __init__(
        self,
        cached: List[BlockInterval] | None = None,
        non_cached: List[BlockInterval] | None = None,
    ):
        self.cached = cached or []
        self.non_cached = non_cached or []

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`Coverage` to dict
        """
        return {
            "cached": [i.to_dict() for i in self.cached],
            "nonCached": [i.to_dict() for i in self.non_cached],
        }

    @staticmethod
    def from_dict(dct: Dict[str, Any]) -> Coverage:
        """
        Create :class:`Coverage` from dict
        """
        return Coverage(
            cached=[BlockInterval.from_dict(i) for i in dct["cached"]],
            non_cached=[BlockInterval.from_dict(i) for i in dct["nonCached"]],
        )

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"Coverage({json.dumps(self.to_dict())})"
