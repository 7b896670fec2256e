from typing import List
from events_cache.events.event import CachedEvent
from events_cache.core import Core


class EventsRepo(Core):
    """
    Reading and writing :class:`CachedEvent` to database.
    """

    def find(self, key: str, from_block: int, to_block: int) -> List[CachedEvent]:
        """
        Find all events of a key in a block range.

        Args:
            key: Cache key
            from_block: starting from this block (inclusive)
            to_block: ending with this block (inclusive)

        Returns:
            Events sorted by ``(block_number, transaction_index, log_index)``
        """
        rows = self.conn.execute(
            "SELECT block_number, transaction_index, log_index, payload "
            "FROM events_cache_events WHERE key = ? "
            "AND block_number >= ? AND block_number <= ? "
            "ORDER BY block_number, transaction_index, log_index",
            (key, from_block, to_block),
        )
        return [CachedEvent.from_row(r) for r in rows]

    def save(self, key: str, events: List[CachedEvent]):
        """
        Insert or replace a list of events.

        Events are written in order, so when the same event appears
        several times, the last one wins.

        Args:
            key: Cache key
            events: List of events to save
        """
        if len(events) == 0:
            return
        rows = [(self.network, key, *e.to_row()) for e in events]
        self.conn.executemany(
            "INSERT INTO events_cache_events VALUES(?,?,?,?,?,?) "
            "ON CONFLICT(key,block_number,transaction_index,log_index) "
            "DO UPDATE SET payload = excluded.payload",
            rows,
        )

    def purge(self, network: str | None = None):
        """
        Clear database entries

        Args:
            network: only entries of this network, all entries if ``None``
        """
        if network is None:
            self.conn.execute("DELETE FROM events_cache_events")
        else:
            self.conn.execute(
                "DELETE FROM events_cache_events WHERE network = ?", (network,)
            )
