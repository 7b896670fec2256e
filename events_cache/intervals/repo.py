from typing import List
from events_cache.core import Core
from events_cache.intervals.interval import BlockInterval, Coverage


class IntervalsRepo(Core):
    """
    Reading and writing :class:`BlockInterval` to database.

    Intervals of a key never overlap or touch each other: :meth:`merge`
    folds every neighbour of a new interval into a single one.
    """

    def find(self, key: str, from_block: int | None = None) -> List[BlockInterval]:
        """
        Find stored intervals of a key.

        Args:
            key: Cache key
            from_block: only intervals ending at or after this block

        Returns:
            Intervals sorted by ``from_block``
        """
        statement = "SELECT from_block, to_block FROM events_cache_intervals WHERE key = ?"
        args = [key]
        if not from_block is None:
            statement += " AND to_block >= ?"
            args.append(from_block)
        rows = self.conn.execute(statement + " ORDER BY from_block", args)
        return [BlockInterval.from_row(r) for r in rows]

    def query_coverage(self, key: str, from_block: int, to_block: int) -> Coverage:
        """
        Split ``[from_block, to_block]`` into cached and non-cached intervals.

        Together the two lists cover the range exactly, without gaps and overlaps.

        Args:
            key: Cache key
            from_block: start of the range (inclusive)
            to_block: end of the range (inclusive)

        Returns:
            :class:`Coverage` of the range
        """
        coverage = Coverage()
        cursor = from_block
        for stored in self.find(key, from_block):
            cached = BlockInterval(cursor, to_block).intersection(stored)
            # stored intervals are sorted, nothing to the right can intersect either
            if cached is None:
                break
            coverage.cached.append(cached)
            if cursor < cached.from_block:
                coverage.non_cached.append(
                    BlockInterval(cursor, cached.from_block - 1)
                )
            cursor = cached.to_block + 1
            if cursor > to_block:
                break

        if cursor <= to_block:
            coverage.non_cached.append(BlockInterval(cursor, to_block))

        return coverage

    def merge(self, key: str, from_block: int, to_block: int) -> BlockInterval:
        """
        Add ``[from_block, to_block]`` to the coverage of a key.

        All stored intervals overlapping or adjacent to the new one are
        replaced with their union. Read, delete and insert run in one
        transaction, joining the caller's one if it's already open.

        Args:
            key: Cache key
            from_block: start of the range (inclusive)
            to_block: end of the range (inclusive)

        Returns:
            The stored union interval
        """
        with self.transaction() as conn:
            rows = conn.execute(
                "SELECT rowid, from_block, to_block FROM events_cache_intervals "
                "WHERE key = ? AND from_block <= ? AND to_block >= ?",
                (key, to_block + 1, from_block - 1),
            ).fetchall()
            union = BlockInterval(
                min([from_block, *(r[1] for r in rows)]),
                max([to_block, *(r[2] for r in rows)]),
            )
            if len(rows) > 0:
                conn.execute(
                    "DELETE FROM events_cache_intervals WHERE rowid IN "
                    f"({','.join('?' * len(rows))})",
                    [r[0] for r in rows],
                )
            conn.execute(
                "INSERT INTO events_cache_intervals VALUES(?,?,?,?)",
                (self.network, key, *union.to_row()),
            )
        return union

    def purge(self, network: str | None = None):
        """
        Clear database entries

        Args:
            network: only entries of this network, all entries if ``None``
        """
        if network is None:
            self.conn.execute("DELETE FROM events_cache_intervals")
        else:
            self.conn.execute(
                "DELETE FROM events_cache_intervals WHERE network = ?", (network,)
            )
