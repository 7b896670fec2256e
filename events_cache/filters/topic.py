from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Tuple, Union

from events_cache.utils import to_hex


@dataclass(frozen=True)
class Wildcard:
    """
    A topic slot that matches anything. Contributes nothing to the cache key.
    """

    def identifiers(self) -> Tuple[str, ...]:
        return ()


@dataclass(frozen=True)
class Single:
    """
    A topic slot that matches exactly one identifier.
    """

    identifier: str

    def identifiers(self) -> Tuple[str, ...]:
        return (self.identifier,)


@dataclass(frozen=True)
class AnyOf:
    """
    A topic slot that matches any of the alternative identifiers.
    The order of the alternatives is kept as given.
    """

    alternatives: Tuple[str, ...]

    def identifiers(self) -> Tuple[str, ...]:
        return self.alternatives


Topic = Union[Wildcard, Single, AnyOf]


def topic_from_raw(raw: Any) -> Topic:
    """
    Convert a web3-style topic slot into a :data:`Topic`.

    Args:
        raw: ``None`` (wildcard), an identifier (``str`` or binary) or a
             collection of identifiers. Lists and tuples keep their order,
             sets are sorted so the result is deterministic.

    Returns:
        Topic variant
    """
    if isinstance(raw, Wildcard):
        return raw
    if isinstance(raw, Single):
        return Single(normalize_identifier(raw.identifier))
    if isinstance(raw, AnyOf):
        return AnyOf(tuple(normalize_identifier(i) for i in raw.alternatives))
    if raw is None:
        return Wildcard()
    if isinstance(raw, (str, bytes, bytearray)):
        return Single(normalize_identifier(raw))
    if isinstance(raw, (set, frozenset)):
        return AnyOf(tuple(sorted(normalize_identifier(r) for r in raw)))
    if isinstance(raw, (list, tuple)):
        return AnyOf(tuple(normalize_identifier(r) for r in raw))
    raise TypeError(f"Unsupported topic type: {type(raw).__name__}")


def normalize_identifier(raw: str | bytes) -> str:
    """
    Identifiers are stored as lowercase strings, binary values as :code:`0x...` hex.
    """
    if isinstance(raw, (bytes, bytearray)):
        return to_hex(raw)
    if isinstance(raw, str):
        return raw.lower()
    raise TypeError(f"Unsupported topic identifier type: {type(raw).__name__}")
