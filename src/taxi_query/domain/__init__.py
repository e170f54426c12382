"""Domain model for taxi-query.

Re-exports all public types for convenient access:
    from taxi_query.domain import TripRecord, InvalidTripRecord
"""
from taxi_query.domain.trip import (
    InvalidTripRecord,
    TripRecord,
    trip_invariant_violation,
)
from taxi_query.domain.types import Position, Timestamp, ZoneId

__all__ = [
    "InvalidTripRecord",
    "TripRecord",
    "trip_invariant_violation",
    "Position",
    "Timestamp",
    "ZoneId",
]
