from __future__ import annotations
from typing import Any, Dict, Tuple
import json

from events_cache.utils import json_response

IDENTITY_FIELDS = ("blockNumber", "transactionIndex", "logIndex")


class CachedEvent:
    """
    CachedEvent represents an event log saved in the cache.

    The event is identified by ``block_number``, ``transaction_index``
    and ``log_index``. Everything else is an opaque ``payload`` that is
    replaced as a whole when the event is saved again.
    """

    #: The block this event appeared in
    block_number: int
    #: The index of the transaction inside the block
    transaction_index: int
    #: The log number for this event inside the block
    log_index: int
    #: The rest of the event fields
    payload: Dict[str, Any]

    def __init__(
        self,
        block_number: int,
        transaction_index: int,
        log_index: int,
        payload: Dict[str, Any] | None = None,
    ):
        self.block_number = block_number
        self.transaction_index = transaction_index
        self.log_index = log_index
        self.payload = payload or {}

    @property
    def identity(self) -> Tuple[int, int, int]:
        """
        ``(block_number, transaction_index, log_index)``
        """
        return (self.block_number, self.transaction_index, self.log_index)

    @staticmethod
    def from_row(row: Tuple[int, int, int, str]) -> CachedEvent:
        """
        Deserialize from database row

        Args:
            row: database row
        """
        block_number, transaction_index, log_index, payload = row
        return CachedEvent(
            block_number, transaction_index, log_index, json.loads(payload)
        )

    def to_row(self) -> Tuple[int, int, int, str]:
        """
        Serialize to database row

        Returns:
            database row
        """
        return (*self.identity, json_response(self.payload))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`CachedEvent` to dict
        """
        return {
            **self.payload,
            "blockNumber": self.block_number,
            "transactionIndex": self.transaction_index,
            "logIndex": self.log_index,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> CachedEvent:
        """
        Create :class:`CachedEvent` from dict. Keys other than
        ``blockNumber``, ``transactionIndex`` and ``logIndex`` go to the payload.
        """
        return CachedEvent(
            block_number=d["blockNumber"],
            transaction_index=d["transactionIndex"],
            log_index=d["logIndex"],
            payload={k: v for k, v in d.items() if not k in IDENTITY_FIELDS},
        )

    @staticmethod
    def from_log(log: Any) -> CachedEvent:
        """
        Create :class:`CachedEvent` from a web3 log entry
        (``AttributeDict`` with binary values).
        """
        return CachedEvent.from_dict(json.loads(json_response(log)))

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"CachedEvent({json_response(self.to_dict())})"
