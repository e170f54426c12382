"""QueryEngine: range and aggregate queries over one dataset snapshot.

Six fixed query shapes:

    1. search_by_time          pickup_timestamp in [start, end]   index or scan
    2. search_by_distance      trip_distance in [min, max]        scan
    3. search_by_fare          total_amount in [min, max]         scan
    4. search_by_location      pu_location_id in [min, max]       scan
    5. search_combined         time AND distance AND passengers   index + filter, or scan
    6. aggregate_fare_by_time  sum/avg/count of fare_amount       index or scan

Only pickup time has an index. When it's built, time-bounded queries
bisect the TimeIndex to a window [lo, hi) and touch only those k
candidates: O(log n + k). When it isn't, they fall back to a full scan:
O(n). Both paths return the same set of records; they differ only in
`scanned` and speed.

Every operation is total. No query input raises, an empty match is a
normal result, and nothing checks that build_indexes() was called.

The engine holds a reference to the record sequence, it doesn't own it.
Rebuilding the index or reloading the dataset while queries are running
is not supported.
"""
from __future__ import annotations

import logging
import time
from typing import Sequence

from taxi_query.domain.trip import TripRecord
from taxi_query.engine.fork_join import (
    PARALLEL_THRESHOLD,
    ForkJoinScanner,
    Predicate,
)
from taxi_query.store.queries import (
    AggregationResult,
    CombinedQuery,
    IntRange,
    NumericRange,
    QueryResult,
    TimeRange,
)
from taxi_query.store.time_index import TimeIndex

log = logging.getLogger(__name__)


def _fare_amount(record: TripRecord) -> float:
    return record.fare_amount


class QueryEngine:
    """Index-assisted and full-scan queries over a fixed record sequence.

    Args:
        records: The dataset snapshot to query. Must not change while
            this engine is in use.
        parallel_threshold: Candidate count above which scans fork across
            worker threads (default 10,000).
        max_workers: Worker threads per forked scan (default: CPU count).
    """

    __slots__ = ("_records", "_time_index", "_scanner")

    def __init__(
        self,
        records: Sequence[TripRecord],
        parallel_threshold: int = PARALLEL_THRESHOLD,
        max_workers: int | None = None,
    ) -> None:
        self._records = records
        self._time_index = TimeIndex()
        self._scanner = ForkJoinScanner(
            threshold=parallel_threshold, max_workers=max_workers
        )

    def build_indexes(self) -> float:
        """(Re)build the time index. Returns build time in milliseconds.

        Safe to call again; it re-sorts from scratch every time.
        """
        start = time.perf_counter()
        self._time_index.build(self._records)
        elapsed_ms = (time.perf_counter() - start) * 1000
        log.debug("Built time index over %d records in %.2f ms",
                  len(self._records), elapsed_ms)
        return elapsed_ms

    @property
    def indexes_built(self) -> bool:
        return self._time_index.is_built

    @property
    def time_index(self) -> TimeIndex:
        return self._time_index

    @property
    def records(self) -> Sequence[TripRecord]:
        return self._records

    @property
    def parallel_threshold(self) -> int:
        return self._scanner.threshold

    @property
    def max_workers(self) -> int:
        return self._scanner.max_workers

    # ---- helpers ----

    def _all_positions(self) -> range:
        return range(len(self._records))

    def _full_scan(self, predicate: Predicate) -> QueryResult:
        positions = self._all_positions()
        return QueryResult(
            records=self._scanner.filter(self._records, positions, predicate),
            scanned=len(positions),
        )

    # ---- Query 1: time range ----

    def search_by_time(self, q: TimeRange) -> QueryResult:
        """Trips picked up in [q.start, q.end].

        With the index: scanned == window size, and sequential results come
        back in ascending pickup order. Without: scanned == dataset size.
        """
        if self._time_index.is_built:
            lo, hi = self._time_index.lookup(self._records, q.start, q.end)
            window = self._time_index.positions(lo, hi)
            return QueryResult(
                records=self._scanner.filter(self._records, window),
                scanned=hi - lo,
            )
        return self._full_scan(
            lambda r: q.start <= r.pickup_timestamp <= q.end
        )

    # ---- Queries 2-4: unindexed single-field ranges ----

    def search_by_distance(self, q: NumericRange) -> QueryResult:
        return self._full_scan(lambda r: q.min <= r.trip_distance <= q.max)

    def search_by_fare(self, q: NumericRange) -> QueryResult:
        """Range on total_amount (the whole charge, not the base fare)."""
        return self._full_scan(lambda r: q.min <= r.total_amount <= q.max)

    def search_by_location(self, q: IntRange) -> QueryResult:
        """Range on pickup zone id."""
        return self._full_scan(lambda r: q.min <= r.pu_location_id <= q.max)

    # ---- Query 5: combined ----

    def search_combined(self, q: CombinedQuery) -> QueryResult:
        """Time window AND distance range AND passenger range.

        With the index the time predicate is answered by the window, so
        only distance and passengers are tested, and only on the window's
        candidates. scanned is the window size even when nothing matches.
        """
        d_min, d_max = q.distance_range.min, q.distance_range.max
        p_min, p_max = q.passenger_range.min, q.passenger_range.max

        if self._time_index.is_built:
            t = q.time_range
            lo, hi = self._time_index.lookup(self._records, t.start, t.end)
            window = self._time_index.positions(lo, hi)
            matches = self._scanner.filter(
                self._records,
                window,
                lambda r: (
                    d_min <= r.trip_distance <= d_max
                    and p_min <= r.passenger_count <= p_max
                ),
            )
            return QueryResult(records=matches, scanned=hi - lo)

        return self._full_scan(q.matches)

    # ---- Query 6: aggregation ----

    def aggregate_fare_by_time(self, q: TimeRange) -> AggregationResult:
        """Sum, average and count of fare_amount for pickups in [start, end]."""
        if self._time_index.is_built:
            lo, hi = self._time_index.lookup(self._records, q.start, q.end)
            total, count = self._scanner.reduce_sum(
                self._records,
                self._time_index.positions(lo, hi),
                _fare_amount,
            )
        else:
            total, count = self._scanner.reduce_sum(
                self._records,
                self._all_positions(),
                _fare_amount,
                lambda r: q.start <= r.pickup_timestamp <= q.end,
            )
        return AggregationResult.from_totals(total, count)
