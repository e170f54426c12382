"""TimeIndex: a sorted secondary index over pickup time.

The dataset keeps records in file order, so unlike an append-ordered
store we can't bisect the records directly. Instead we sort a
permutation of positions by pickup timestamp and bisect that, using the
key= argument so each comparison dereferences a record rather than
copying timestamps into a second array.

    order[i]  -> position into the record tuple
    records[order[0]].pickup_timestamp <= records[order[1]].pickup_timestamp <= ...

Build: O(n log n). Lookup: O(log n) to find the window, O(k) for the
caller to materialize k matches.

The index does not notice if the records change after build(). Rebuild
after every reload; the dataset does this for its cached engine.
"""
from __future__ import annotations

import array
import bisect
from typing import Sequence

from taxi_query.domain.trip import TripRecord
from taxi_query.domain.types import Position, Timestamp


class TimeIndex:
    """Permutation of dataset positions ordered by pickup timestamp.

    Ties keep their original dataset order (sorted() is stable), so two
    builds over the same records always produce the same permutation.
    """

    __slots__ = ("_order", "_built")

    def __init__(self) -> None:
        self._order = array.array("q")  # int64 positions, contiguous
        self._built: bool = False

    def build(self, records: Sequence[TripRecord]) -> None:
        """Discard any previous permutation and sort positions [0, n)."""
        order = sorted(
            range(len(records)),
            key=lambda pos: records[pos].pickup_timestamp,
        )
        self._order = array.array("q", order)
        self._built = True

    def lookup(
        self,
        records: Sequence[TripRecord],
        start: Timestamp,
        end: Timestamp,
    ) -> tuple[int, int]:
        """Return the half-open window [lo, hi) into the permutation.

        lo is the first slot whose timestamp is >= start; hi is one past
        the last slot whose timestamp is <= end. The upper search starts
        at lo, so an inverted range yields an empty window, never hi < lo.
        Returns (0, 0) when the index is unbuilt or empty.
        """
        if not self._built or not self._order:
            return 0, 0

        def key(pos: Position) -> Timestamp:
            return records[pos].pickup_timestamp

        lo = bisect.bisect_left(self._order, start, key=key)
        hi = bisect.bisect_right(self._order, end, lo=lo, key=key)
        return lo, hi

    def positions(self, lo: int, hi: int) -> array.array:
        """Record positions for the window [lo, hi), in timestamp order."""
        return self._order[lo:hi]

    @property
    def order(self) -> array.array:
        """The full permutation. Treat as read-only."""
        return self._order

    @property
    def is_built(self) -> bool:
        return self._built

    def __len__(self) -> int:
        return len(self._order)
