"""Benchmark and smoke-check harness for the query engine.

Both harnesses run the same six queries, with parameters derived from
the loaded data so they match something on any real TLC month:

    Q1 search_by_time          first half of the pickup time span
    Q2 search_by_distance      [1.0, 5.0] miles
    Q3 search_by_fare          [10.0, 50.0] total amount
    Q4 search_by_location      pickup zones [100, 200]
    Q5 search_combined         Q1 window, [0, 100] miles, 1-6 passengers
    Q6 aggregate_fare_by_time  the full pickup time span

run_benchmark() times each query averaged over `runs` repetitions, plus
the unindexed time scan and the dataset's plain linear filters for
comparison. run_checks() runs each query once and reports PASS/FAIL.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Sequence, TypeVar

from taxi_query.domain.trip import TripRecord
from taxi_query.engine.fork_join import PARALLEL_THRESHOLD
from taxi_query.engine.query_engine import QueryEngine
from taxi_query.ingest.base import LoadStats
from taxi_query.store.dataset import TripDataset
from taxi_query.store.queries import (
    CombinedQuery,
    IntRange,
    NumericRange,
    TimeRange,
)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class StandardQueries:
    """The query parameters both harnesses use."""
    first_half: TimeRange
    full_span: TimeRange
    distance: NumericRange
    fare: NumericRange
    location: IntRange
    combined: CombinedQuery

    @classmethod
    def for_records(cls, records: Sequence[TripRecord]) -> StandardQueries:
        """Derive time windows from the records' pickup span."""
        if records:
            min_ts = min(r.pickup_timestamp for r in records)
            max_ts = max(r.pickup_timestamp for r in records)
        else:
            min_ts = max_ts = 0
        mid_ts = min_ts + (max_ts - min_ts) // 2
        first_half = TimeRange(min_ts, mid_ts)
        return cls(
            first_half=first_half,
            full_span=TimeRange(min_ts, max_ts),
            distance=NumericRange(1.0, 5.0),
            fare=NumericRange(10.0, 50.0),
            location=IntRange(100, 200),
            combined=CombinedQuery(
                time_range=first_half,
                distance_range=NumericRange(0.0, 100.0),
                passenger_range=IntRange(1, 6),
            ),
        )


@dataclass(slots=True)
class QueryTiming:
    """Average latency and result size for one query."""
    name: str
    avg_ms: float
    matches: int
    scanned: int | None = None


@dataclass(slots=True)
class BenchmarkResult:
    """Timing results from a single benchmark run."""
    records: int
    runs: int
    load_ms: float
    build_ms: float
    load_stats: LoadStats
    parallel_threshold: int
    max_workers: int
    timings: list[QueryTiming] = field(default_factory=list)

    def timing(self, name: str) -> QueryTiming:
        for t in self.timings:
            if t.name == name:
                return t
        raise KeyError(name)


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of one smoke-check query."""
    name: str
    passed: bool
    detail: str


def time_function_ms(func: Callable[[], object], runs: int) -> float:
    """Call func() `runs` times and return the mean wall time in ms."""
    if runs <= 0:
        return 0.0
    start = time.perf_counter()
    for _ in range(runs):
        func()
    return (time.perf_counter() - start) * 1000 / runs


def _time_call(func: Callable[[], T], runs: int) -> tuple[float, T]:
    """Time func() like time_function_ms, also returning its last result."""
    results: list[T] = []

    def _run() -> None:
        results[:] = [func()]

    avg_ms = time_function_ms(_run, runs)
    if not results:
        results.append(func())
    return avg_ms, results[0]


def run_benchmark(
    dataset: TripDataset,
    runs: int = 10,
    load_ms: float = 0.0,
    parallel_threshold: int = PARALLEL_THRESHOLD,
    max_workers: int | None = None,
) -> BenchmarkResult:
    """Build an index over `dataset` and time the standard queries.

    load_ms is whatever the caller measured for loading; it's carried
    into the result for the report.
    """
    records = dataset.records()
    engine = QueryEngine(
        records, parallel_threshold=parallel_threshold, max_workers=max_workers
    )
    build_ms = engine.build_indexes()
    unindexed = QueryEngine(
        records, parallel_threshold=parallel_threshold, max_workers=max_workers
    )
    q = StandardQueries.for_records(records)

    timings = []
    for name, query in (
        ("Q1 search_by_time", lambda: engine.search_by_time(q.first_half)),
        ("Q1 search_by_time (no index)", lambda: unindexed.search_by_time(q.first_half)),
        ("Q2 search_by_distance", lambda: engine.search_by_distance(q.distance)),
        ("Q3 search_by_fare", lambda: engine.search_by_fare(q.fare)),
        ("Q4 search_by_location", lambda: engine.search_by_location(q.location)),
        ("Q5 search_combined", lambda: engine.search_combined(q.combined)),
    ):
        avg_ms, result = _time_call(query, runs)
        timings.append(QueryTiming(name, avg_ms, len(result), result.scanned))

    avg_ms, agg = _time_call(lambda: engine.aggregate_fare_by_time(q.full_span), runs)
    timings.append(QueryTiming("Q6 aggregate_fare_by_time", avg_ms, agg.count))

    for name, linear_filter in (
        ("dataset.search_by_fare", lambda: dataset.search_by_fare(10.0, 50.0)),
        ("dataset.search_by_distance", lambda: dataset.search_by_distance(1.0, 5.0)),
    ):
        avg_ms, found = _time_call(linear_filter, runs)
        timings.append(QueryTiming(name, avg_ms, len(found)))

    return BenchmarkResult(
        records=len(records),
        runs=runs,
        load_ms=load_ms,
        build_ms=build_ms,
        load_stats=dataset.load_stats,
        parallel_threshold=parallel_threshold,
        max_workers=engine.max_workers,
        timings=timings,
    )


def run_checks(dataset: TripDataset) -> list[CheckResult]:
    """Run each standard query once; a query passes if it matched anything."""
    engine = dataset.query_engine()
    q = StandardQueries.for_records(dataset.records())
    results = []

    for name, query in (
        ("Q1 search_by_time", lambda: engine.search_by_time(q.first_half)),
        ("Q2 search_by_distance", lambda: engine.search_by_distance(q.distance)),
        ("Q3 search_by_fare", lambda: engine.search_by_fare(q.fare)),
        ("Q4 search_by_location", lambda: engine.search_by_location(q.location)),
        ("Q5 search_combined", lambda: engine.search_combined(q.combined)),
    ):
        r = query()
        results.append(CheckResult(
            name=name,
            passed=len(r) > 0,
            detail=f"matches={len(r)}  scanned={r.scanned}",
        ))

    agg = engine.aggregate_fare_by_time(q.full_span)
    results.append(CheckResult(
        name="Q6 aggregate_fare_by_time",
        passed=agg.count > 0 and agg.sum > 0.0 and agg.avg > 0.0,
        detail=f"count={agg.count}  sum={agg.sum:.2f}  avg={agg.avg:.2f}",
    ))
    return results
