"""Ingestion contract: where a TripDataset gets its records from.

A TripSource is an iterable of already-validated TripRecords that also
reports three counters once iteration has finished: rows read, rows
accepted, rows discarded. Bad rows are the source's problem: it counts
and drops them. The only failure a source raises is FatalLoadError, when
the underlying input can't be opened or read at all.

Both InMemoryTripSource and CsvTripReader implement this interface, so
TripDataset.load() doesn't care where the trips come from.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Iterator

from taxi_query.domain.trip import TripRecord


class FatalLoadError(Exception):
    """The trip source could not be opened or read."""


@dataclass(frozen=True, slots=True)
class LoadStats:
    """Row counters reported by a TripSource after a load."""
    rows_read: int = 0
    rows_accepted: int = 0
    rows_discarded: int = 0


class TripSource(ABC):
    """Interface that every record source implements."""

    @abstractmethod
    def __iter__(self) -> Iterator[TripRecord]:
        """Yield valid records in input order.

        Raises FatalLoadError on an I/O-level failure.
        """
        ...

    @property
    @abstractmethod
    def stats(self) -> LoadStats:
        """Counters for the rows consumed so far."""
        ...

    def __length_hint__(self) -> int:
        """Estimated number of records, used to pre-size storage. 0 = unknown."""
        return 0


class InMemoryTripSource(TripSource):
    """Wrap records that already exist in memory.

    Every record was validated when it was constructed, so every row
    is accepted. Used by tests and by the synthetic trip generator.
    """

    __slots__ = ("_records", "_consumed")

    def __init__(self, records: Iterable[TripRecord]) -> None:
        self._records = list(records)
        self._consumed = 0

    def __iter__(self) -> Iterator[TripRecord]:
        self._consumed = 0
        for record in self._records:
            self._consumed += 1
            yield record

    @property
    def stats(self) -> LoadStats:
        return LoadStats(
            rows_read=self._consumed,
            rows_accepted=self._consumed,
            rows_discarded=0,
        )

    def __length_hint__(self) -> int:
        return len(self._records)
