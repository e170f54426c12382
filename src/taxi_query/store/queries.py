"""Query parameter and result objects.

All ranges are closed intervals: min <= value <= max. An inverted range
(min > max) is allowed and simply matches nothing, so building a query
never raises.

Results hold references to the dataset's own TripRecord objects, not
copies. They stay meaningful until the next load() or clear() on the
dataset that produced them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from taxi_query.domain.trip import TripRecord
from taxi_query.domain.types import Timestamp


@dataclass(frozen=True, slots=True)
class TimeRange:
    """Closed pickup-time interval [start, end] in Unix epoch seconds."""
    start: Timestamp
    end: Timestamp

    def contains(self, timestamp: Timestamp) -> bool:
        """Check whether a timestamp falls within this range (inclusive)."""
        return self.start <= timestamp <= self.end

    @property
    def duration_seconds(self) -> int:
        """Length of the range in seconds (negative for an inverted range)."""
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class NumericRange:
    """Closed float interval, used for trip distance and fare amounts."""
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True, slots=True)
class IntRange:
    """Closed integer interval, used for zone ids and passenger counts."""
    min: int
    max: int

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True, slots=True)
class CombinedQuery:
    """Time window AND distance range AND passenger-count range."""
    time_range: TimeRange
    distance_range: NumericRange
    passenger_range: IntRange

    def matches(self, record: TripRecord) -> bool:
        return (
            self.time_range.contains(record.pickup_timestamp)
            and self.distance_range.contains(record.trip_distance)
            and self.passenger_range.contains(record.passenger_count)
        )


@dataclass(slots=True)
class QueryResult:
    """Matching records plus how many candidates were examined.

    `scanned` is the window size for an index-assisted query and the
    dataset size for a full scan. Record order is only meaningful for a
    sequential index-assisted time query (ascending pickup time); after a
    parallel scan it is unspecified.
    """
    records: list[TripRecord] = field(default_factory=list)
    scanned: int = 0

    @property
    def count(self) -> int:
        return len(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[TripRecord]:
        return iter(self.records)


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """Sum, average and count over a set of records.

    avg is defined as 0.0 when count is 0.
    """
    sum: float = 0.0
    avg: float = 0.0
    count: int = 0

    @classmethod
    def from_totals(cls, total: float, count: int) -> AggregationResult:
        """Build a result from a running sum and count."""
        if count == 0:
            return cls(sum=total, avg=0.0, count=0)
        return cls(sum=total, avg=total / count, count=count)
