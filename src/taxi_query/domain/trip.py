"""TripRecord: one yellow-taxi trip, immutable once created.

Field layout follows the TLC yellow trip record: vendor, pickup/dropoff
times, passenger count, distance, rate code, store-and-forward flag,
pickup/dropoff zones, payment type, and the fare breakdown.

Timestamps are integer epoch seconds (UTC). Money fields are plain floats;
the query engine only sums them, it never does currency arithmetic.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from taxi_query.domain.types import Timestamp, ZoneId


class InvalidTripRecord(ValueError):
    """Raised when a TripRecord is constructed with inconsistent values."""


def trip_invariant_violation(
    pickup_timestamp: Timestamp,
    dropoff_timestamp: Timestamp,
    passenger_count: int,
    trip_distance: float,
    total_amount: float,
) -> str | None:
    """Return why these values can't form a trip, or None if they can.

    Ingestion calls this before constructing a record so that bad rows
    are counted and dropped instead of raising.
    """
    if pickup_timestamp <= 0:
        return f"non-positive pickup timestamp {pickup_timestamp}"
    if dropoff_timestamp <= pickup_timestamp:
        return (
            f"dropoff {dropoff_timestamp} not after pickup {pickup_timestamp}"
        )
    if not passenger_count >= 0:
        return f"passenger count {passenger_count} is not >= 0"
    if not trip_distance >= 0.0:
        return f"trip distance {trip_distance} is not >= 0"
    if not total_amount >= 0.0:
        return f"total amount {total_amount} is not >= 0"
    return None


@dataclass(frozen=True, slots=True)
class TripRecord:
    """Immutable trip record.

    frozen=True: records are shared by reference between the dataset,
    the time index and every query result, so nothing may modify them.
    slots=True: datasets hold 10^5..10^6 of these.
    """
    vendor_id: int
    pickup_timestamp: Timestamp
    dropoff_timestamp: Timestamp
    passenger_count: int
    trip_distance: float                # miles
    rate_code_id: int
    store_and_fwd_flag: bool
    pu_location_id: ZoneId
    do_location_id: ZoneId
    payment_type: int
    fare_amount: float
    extra: float = 0.0
    mta_tax: float = 0.0
    tip_amount: float = 0.0
    tolls_amount: float = 0.0
    improvement_surcharge: float = 0.0
    total_amount: float = 0.0

    def __post_init__(self) -> None:
        reason = trip_invariant_violation(
            self.pickup_timestamp,
            self.dropoff_timestamp,
            self.passenger_count,
            self.trip_distance,
            self.total_amount,
        )
        if reason is not None:
            raise InvalidTripRecord(reason)

    def is_valid(self) -> bool:
        """Re-check the record invariant. Always True for a constructed record."""
        return trip_invariant_violation(
            self.pickup_timestamp,
            self.dropoff_timestamp,
            self.passenger_count,
            self.trip_distance,
            self.total_amount,
        ) is None

    @property
    def duration_seconds(self) -> int:
        return self.dropoff_timestamp - self.pickup_timestamp

    @property
    def pickup_datetime(self) -> datetime:
        """Pickup time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.pickup_timestamp, tz=timezone.utc)
