"""TripDataset: owns the loaded trip records and the cached query engine.

Records live in a tuple, in the order the source accepted them. A tuple
gives us two things for free: nobody can reorder or replace a record
after load, and positions stay stable, which the TimeIndex relies on.

Lifecycle:
    ds = TripDataset()
    ds.load(source)          # replaces everything, drops the cached engine
    engine = ds.query_engine()   # built + indexed on first call, then cached
    ds.clear()               # empties records, drops the cached engine

Results returned by this class or its engine reference the records of
the current load. Once load() or clear() runs they belong to a snapshot
the dataset no longer holds; keeping them around is the caller's call.

The dataset does no locking. load() and clear() must not run while
queries are in flight against the same dataset.
"""
from __future__ import annotations

import logging
import os
from operator import length_hint
from typing import Iterator

from taxi_query.domain.trip import TripRecord
from taxi_query.engine.query_engine import PARALLEL_THRESHOLD, QueryEngine
from taxi_query.ingest.base import LoadStats, TripSource
from taxi_query.ingest.csv_reader import CsvTripReader

log = logging.getLogger(__name__)

# Storage pre-size used when a source can't estimate its own length.
DEFAULT_CAPACITY_HINT = 1_000_000


class _Presized:
    """Iterable wrapper that advertises a length hint to tuple()."""

    __slots__ = ("_source", "_hint")

    def __init__(self, source: TripSource, hint: int) -> None:
        self._source = source
        self._hint = hint

    def __iter__(self) -> Iterator[TripRecord]:
        return iter(self._source)

    def __length_hint__(self) -> int:
        return self._hint


class TripDataset:
    """In-memory collection of TripRecords with a lazily built QueryEngine.

    Args:
        capacity_hint: Records to pre-size for when the source gives no
            estimate of its own (default 1M).
        parallel_threshold: Passed to the cached QueryEngine.
        max_workers: Passed to the cached QueryEngine.
    """

    __slots__ = (
        "_records", "_stats", "_generation", "_capacity_hint",
        "_engine", "_engine_generation", "_parallel_threshold", "_max_workers",
    )

    def __init__(
        self,
        capacity_hint: int = DEFAULT_CAPACITY_HINT,
        parallel_threshold: int = PARALLEL_THRESHOLD,
        max_workers: int | None = None,
    ) -> None:
        self._records: tuple[TripRecord, ...] = ()
        self._stats = LoadStats()
        self._generation = 0
        self._capacity_hint = capacity_hint
        self._engine: QueryEngine | None = None
        self._engine_generation = -1
        self._parallel_threshold = parallel_threshold
        self._max_workers = max_workers

    # ---- loading ----

    def load(self, source: TripSource) -> LoadStats:
        """Replace the current contents with everything `source` accepts.

        Raises FatalLoadError if the source can't be opened or read; the
        dataset is left empty in that case. Zero accepted rows is not an
        error: check the returned LoadStats.
        """
        self.clear()

        hint = length_hint(source) or self._capacity_hint
        records = tuple(_Presized(source, hint))

        self._records = records
        self._stats = source.stats
        self._generation += 1

        stats = self._stats
        log.info(
            "Loaded %d records (%d rows read, %d discarded)",
            stats.rows_accepted, stats.rows_read, stats.rows_discarded,
        )
        if not records and stats.rows_read > 0:
            log.warning(
                "Load read %d rows but accepted none", stats.rows_read
            )
        return stats

    def load_csv(self, path: str | os.PathLike[str]) -> LoadStats:
        """Load a TLC yellow-taxi CSV file. See CsvTripReader."""
        return self.load(CsvTripReader(path))

    def clear(self) -> None:
        """Drop all records, reset counters, invalidate the cached engine."""
        self._records = ()
        self._stats = LoadStats()
        self._generation += 1
        self._engine = None
        self._engine_generation = -1

    # ---- accessors ----

    def records(self) -> tuple[TripRecord, ...]:
        """Read-only view of the loaded records, in load order."""
        return self._records

    @property
    def size(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def load_stats(self) -> LoadStats:
        return self._stats

    @property
    def generation(self) -> int:
        """Bumped by every load() and clear()."""
        return self._generation

    # ---- cached engine ----

    def query_engine(self) -> QueryEngine:
        """Return an indexed QueryEngine over the current records.

        Built on first call and after any load() or clear(); reused
        otherwise.
        """
        if self._engine is None or self._engine_generation != self._generation:
            engine = QueryEngine(
                self._records,
                parallel_threshold=self._parallel_threshold,
                max_workers=self._max_workers,
            )
            engine.build_indexes()
            self._engine = engine
            self._engine_generation = self._generation
        return self._engine

    # ---- unindexed filters ----
    # One linear pass each, no engine involved. Useful when a caller
    # only needs a quick filter and doesn't want to pay for the sort.

    def search_by_fare(self, min_fare: float, max_fare: float) -> list[TripRecord]:
        """Records with min_fare <= fare_amount <= max_fare."""
        return [r for r in self._records if min_fare <= r.fare_amount <= max_fare]

    def search_by_distance(
        self, min_distance: float, max_distance: float
    ) -> list[TripRecord]:
        return [
            r for r in self._records
            if min_distance <= r.trip_distance <= max_distance
        ]

    def search_by_passenger_count(
        self, min_passengers: int, max_passengers: int
    ) -> list[TripRecord]:
        return [
            r for r in self._records
            if min_passengers <= r.passenger_count <= max_passengers
        ]
