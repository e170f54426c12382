"""Fork-join scan and reduction over a slice of dataset positions.

Small candidate sets are scanned in the calling thread. Past the
threshold, the candidate positions are split into contiguous chunks and
each chunk goes to a worker thread:

    caller ──fork──> worker 0: scan chunk 0 into a private list ─┐
                     worker 1: scan chunk 1 into a private list ─┤ lock, extend
                     ...                                         ─┤
              <─join── all futures done  <───────────────────────┘

Workers only read: the record tuple and the index permutation are
immutable while a query runs, so the scan itself needs no locking. The
only shared write is the final extend() into the merged list, done under
a lock. Chunks finish in any order, so merged order is unspecified.

Reductions (sum + count) don't merge lists at all: each worker returns a
partial (sum, count) and the caller adds them up in chunk order, so the
result doesn't depend on which worker finished first.

A fresh executor is created per forked query and torn down at the join.
No threads outlive a query, and there is nothing to cancel.
"""
from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence

from taxi_query.domain.trip import TripRecord
from taxi_query.domain.types import Position

log = logging.getLogger(__name__)

# Candidate count above which a scan is split across workers.
PARALLEL_THRESHOLD = 10_000

Predicate = Callable[[TripRecord], bool]
ValueFn = Callable[[TripRecord], float]


def partition(n: int, parts: int) -> list[tuple[int, int]]:
    """Split [0, n) into at most `parts` contiguous, near-equal [lo, hi) chunks.

    Chunk sizes differ by at most one. Never returns empty chunks.
    """
    if n <= 0 or parts <= 0:
        return []
    parts = min(parts, n)
    base, extra = divmod(n, parts)
    chunks = []
    lo = 0
    for i in range(parts):
        hi = lo + base + (1 if i < extra else 0)
        chunks.append((lo, hi))
        lo = hi
    return chunks


def scan_chunk(
    records: Sequence[TripRecord],
    positions: Sequence[Position],
    predicate: Predicate | None,
) -> list[TripRecord]:
    """Sequential scan: records at `positions` that satisfy `predicate`.

    predicate=None keeps every record (plain materialization of a window).
    """
    if predicate is None:
        return [records[pos] for pos in positions]
    matches = []
    for pos in positions:
        record = records[pos]
        if predicate(record):
            matches.append(record)
    return matches


def sum_chunk(
    records: Sequence[TripRecord],
    positions: Sequence[Position],
    value: ValueFn,
    predicate: Predicate | None,
) -> tuple[float, int]:
    """Sequential reduction: (sum of value(r), count) over matching records."""
    total = 0.0
    count = 0
    for pos in positions:
        record = records[pos]
        if predicate is None or predicate(record):
            total += value(record)
            count += 1
    return total, count


class ForkJoinScanner:
    """Runs scans and reductions sequentially or fork-join, by size.

    Args:
        threshold: Fork only when there are more candidates than this.
        max_workers: Worker threads per forked query (default: CPU count).
    """

    __slots__ = ("_threshold", "_max_workers")

    def __init__(
        self,
        threshold: int = PARALLEL_THRESHOLD,
        max_workers: int | None = None,
    ) -> None:
        if threshold < 0:
            raise ValueError("threshold must be >= 0")
        if max_workers is not None and max_workers <= 0:
            raise ValueError("max_workers must be a positive integer")
        self._threshold = threshold
        self._max_workers = max_workers or os.cpu_count() or 1

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def should_fork(self, candidates: int) -> bool:
        return candidates > self._threshold and self._max_workers > 1

    def filter(
        self,
        records: Sequence[TripRecord],
        positions: Sequence[Position],
        predicate: Predicate | None = None,
    ) -> list[TripRecord]:
        """Return matching records. Order is unspecified if the scan forked."""
        if not self.should_fork(len(positions)):
            return scan_chunk(records, positions, predicate)

        chunks = partition(len(positions), self._max_workers)
        merged: list[TripRecord] = []
        merge_lock = threading.Lock()

        def worker(lo: int, hi: int) -> None:
            local = scan_chunk(records, positions[lo:hi], predicate)
            with merge_lock:
                merged.extend(local)

        log.debug("Forking scan of %d candidates into %d chunks",
                  len(positions), len(chunks))
        with ThreadPoolExecutor(
            max_workers=len(chunks), thread_name_prefix="scan"
        ) as pool:
            futures = [pool.submit(worker, lo, hi) for lo, hi in chunks]
            for future in futures:
                future.result()  # join; re-raises anything a worker raised
        return merged

    def reduce_sum(
        self,
        records: Sequence[TripRecord],
        positions: Sequence[Position],
        value: ValueFn,
        predicate: Predicate | None = None,
    ) -> tuple[float, int]:
        """Return (sum, count) of value(r) over records matching predicate."""
        if not self.should_fork(len(positions)):
            return sum_chunk(records, positions, value, predicate)

        chunks = partition(len(positions), self._max_workers)
        log.debug("Forking reduction over %d candidates into %d chunks",
                  len(positions), len(chunks))
        with ThreadPoolExecutor(
            max_workers=len(chunks), thread_name_prefix="reduce"
        ) as pool:
            futures = [
                pool.submit(sum_chunk, records, positions[lo:hi], value, predicate)
                for lo, hi in chunks
            ]
            partials = [future.result() for future in futures]

        total = 0.0
        count = 0
        for part_sum, part_count in partials:
            total += part_sum
            count += part_count
        return total, count
