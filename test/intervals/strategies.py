from typing import Tuple
from hypothesis.strategies import integers, lists, tuples, SearchStrategy

from events_cache.intervals.interval import BlockInterval

MAX_BLOCK = 300


def block_range(max_block: int = MAX_BLOCK) -> SearchStrategy[Tuple[int, int]]:
    return tuples(integers(0, max_block), integers(0, max_block)).map(
        lambda r: (min(r), max(r))
    )


def block_interval(max_block: int = MAX_BLOCK) -> SearchStrategy[BlockInterval]:
    return block_range(max_block).map(lambda r: BlockInterval(*r))


def block_ranges(max_size: int = 10) -> SearchStrategy:
    return lists(block_range(), max_size=max_size)
