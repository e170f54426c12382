"""Tests for the fork-join scanner: partitioning, merge, reduction."""
from __future__ import annotations

import threading
from collections import Counter

import pytest

from taxi_query.engine.fork_join import (
    PARALLEL_THRESHOLD,
    ForkJoinScanner,
    partition,
    scan_chunk,
    sum_chunk,
)


# ---- partition ----

def test_partition_covers_range_contiguously():
    chunks = partition(10, 3)
    assert chunks == [(0, 4), (4, 7), (7, 10)]


def test_partition_sizes_differ_by_at_most_one():
    chunks = partition(1003, 8)
    sizes = [hi - lo for lo, hi in chunks]
    assert max(sizes) - min(sizes) <= 1
    assert sum(sizes) == 1003


def test_partition_never_makes_empty_chunks():
    assert partition(3, 8) == [(0, 1), (1, 2), (2, 3)]
    assert partition(0, 4) == []
    assert partition(5, 0) == []


# ---- sequential helpers ----

def test_scan_chunk_without_predicate_materializes(scenario_records):
    assert scan_chunk(scenario_records, [4, 0], None) == [
        scenario_records[4], scenario_records[0],
    ]


def test_sum_chunk(scenario_records):
    total, count = sum_chunk(
        scenario_records, range(5), lambda r: r.fare_amount,
        lambda r: r.pickup_timestamp >= 300,
    )
    assert (total, count) == (60.0, 3)


# ---- ForkJoinScanner ----

def test_defaults():
    scanner = ForkJoinScanner()
    assert scanner.threshold == PARALLEL_THRESHOLD == 10_000
    assert scanner.max_workers >= 1


def test_invalid_settings():
    with pytest.raises(ValueError):
        ForkJoinScanner(threshold=-1)
    with pytest.raises(ValueError):
        ForkJoinScanner(max_workers=0)


def test_should_fork():
    scanner = ForkJoinScanner(threshold=100, max_workers=4)
    assert not scanner.should_fork(100)
    assert scanner.should_fork(101)
    assert not ForkJoinScanner(threshold=100, max_workers=1).should_fork(10_000)


def test_sequential_filter_stays_in_caller_thread(random_trips):
    records = random_trips(50)
    seen = set()

    def pred(r):
        seen.add(threading.get_ident())
        return True

    ForkJoinScanner(threshold=1000, max_workers=4).filter(records, range(50), pred)
    assert seen == {threading.get_ident()}


def test_forked_filter_uses_worker_threads(random_trips):
    records = random_trips(400)
    seen = set()
    lock = threading.Lock()

    def pred(r):
        with lock:
            seen.add(threading.current_thread().name)
        return True

    ForkJoinScanner(threshold=10, max_workers=4).filter(records, range(400), pred)
    assert seen
    assert all(name.startswith("scan") for name in seen)


def test_forked_filter_matches_sequential_as_multiset(random_trips):
    records = random_trips(5000)
    pred = lambda r: r.passenger_count >= 3  # noqa: E731

    sequential = ForkJoinScanner(threshold=10**9).filter(records, range(5000), pred)
    forked = ForkJoinScanner(threshold=100, max_workers=7).filter(records, range(5000), pred)

    assert len(forked) == len(sequential)
    assert Counter(map(id, forked)) == Counter(map(id, sequential))


def test_forked_filter_over_array_positions(random_trips):
    import array

    records = random_trips(1000)
    positions = array.array("q", range(999, -1, -1))
    forked = ForkJoinScanner(threshold=10, max_workers=3).filter(records, positions)
    assert {id(r) for r in forked} == {id(r) for r in records}
    assert len(forked) == 1000


def test_forked_reduce_matches_sequential(random_trips):
    records = random_trips(5000)
    value = lambda r: r.fare_amount  # noqa: E731

    seq_sum, seq_count = ForkJoinScanner(threshold=10**9).reduce_sum(records, range(5000), value)
    par_sum, par_count = ForkJoinScanner(threshold=100, max_workers=6).reduce_sum(
        records, range(5000), value
    )
    assert par_count == seq_count == 5000
    assert par_sum == pytest.approx(seq_sum, rel=1e-12)


def test_forked_reduce_is_repeatable(random_trips):
    """Partials combine in chunk order, so repeated runs agree exactly."""
    records = random_trips(3000)
    scanner = ForkJoinScanner(threshold=10, max_workers=5)
    results = {
        scanner.reduce_sum(records, range(3000), lambda r: r.fare_amount)
        for _ in range(5)
    }
    assert len(results) == 1


def test_worker_exception_propagates(random_trips):
    records = random_trips(100)

    def boom(r):
        raise RuntimeError("predicate failed")

    with pytest.raises(RuntimeError, match="predicate failed"):
        ForkJoinScanner(threshold=10, max_workers=2).filter(records, range(100), boom)
