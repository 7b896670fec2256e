"""
Module with the repo and models for :class:`BlockInterval`.

A :class:`BlockInterval` records that every event of a cache key was
saved for a closed range of blocks. Intervals are persisted in the
:code:`events_cache_intervals` table.

Example
~~~~~~~

Consider how the intervals of one key evolve.

**Step1: Merge blocks 10 - 20**

+-------+-------+
| from  | to    |
+=======+=======+
| 10    | 20    |
+-------+-------+

**Step2: Merge blocks 30 - 40**

+-------+-------+
| from  | to    |
+=======+=======+
| 10    | 20    |
+-------+-------+
| 30    | 40    |
+-------+-------+

Querying coverage of 15 - 35 now returns cached ``[15, 20], [30, 35]``
and non-cached ``[21, 29]``.

**Step3: Merge blocks 21 - 29**

The new interval touches both stored ones, so all three are replaced with

+-------+-------+
| from  | to    |
+=======+=======+
| 10    | 40    |
+-------+-------+

"""

from events_cache.intervals.interval import BlockInterval, Coverage
from events_cache.intervals.repo import IntervalsRepo
