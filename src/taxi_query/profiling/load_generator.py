"""Generate synthetic yellow-taxi trips for benchmarks and tests.

Trip pattern:
  - pickups spread uniformly over `span_seconds` starting at `start_ts`,
    emitted in random order (like a real file, not pre-sorted)
  - zone ids drawn with a Zipf-like skew: a few busy zones
    (Midtown, airports) account for most pickups
  - 1-6 passengers, mostly 1
  - distance 0.1-30 miles, short trips far more common
  - fare = $2.50 flag drop + $2.50/mile, plus tax/surcharge/tip

Every generated trip satisfies the TripRecord invariant, so the whole
batch loads with zero discards. Same seed, same trips.
"""
from __future__ import annotations

import random

from taxi_query.domain.trip import TripRecord
from taxi_query.domain.types import Timestamp
from taxi_query.ingest.base import InMemoryTripSource

# 2019-01-01 00:00:00 UTC
DEFAULT_START_TS: Timestamp = 1_546_300_800

_PASSENGER_WEIGHTS = [70, 14, 5, 3, 5, 3]   # 1..6 passengers
_PAYMENT_WEIGHTS = [70, 28, 1, 1]           # card, cash, no charge, dispute


class TripGenerator:
    """Deterministic synthetic trip source.

    Args:
        num_trips: How many trips to generate.
        seed: RNG seed.
        start_ts: Earliest pickup, epoch seconds.
        span_seconds: Pickups fall in [start_ts, start_ts + span_seconds).
        num_zones: Zone ids are 1..num_zones (TLC has 263).
    """

    __slots__ = (
        "_rng", "_num_trips", "_start_ts", "_span_seconds",
        "_zones", "_zone_weights",
    )

    def __init__(
        self,
        num_trips: int = 100_000,
        seed: int = 42,
        start_ts: Timestamp = DEFAULT_START_TS,
        span_seconds: int = 31 * 86_400,
        num_zones: int = 263,
    ) -> None:
        if span_seconds <= 0:
            raise ValueError("span_seconds must be positive")
        self._rng = random.Random(seed)
        self._num_trips = num_trips
        self._start_ts = start_ts
        self._span_seconds = span_seconds
        self._zones = list(range(1, num_zones + 1))
        # Zipf weights: zone i has weight 1/(i+1), shuffled so the busy
        # zones aren't always the low ids
        weights = [1.0 / (i + 1) for i in range(num_zones)]
        self._rng.shuffle(weights)
        self._zone_weights = weights

    def _make_trip(self) -> TripRecord:
        rng = self._rng
        pickup = self._start_ts + rng.randrange(self._span_seconds)
        distance = round(min(30.0, rng.expovariate(1 / 2.5) + 0.1), 2)
        # ~12 mph average plus a couple of minutes of dead time
        duration = int(distance / 12.0 * 3600) + rng.randint(60, 600)

        fare = round(2.5 + 2.5 * distance, 2)
        extra = rng.choice((0.0, 0.5, 1.0))
        mta_tax = 0.5
        improvement = 0.3
        payment_type = rng.choices((1, 2, 3, 4), weights=_PAYMENT_WEIGHTS)[0]
        tip = round(fare * rng.uniform(0.1, 0.25), 2) if payment_type == 1 else 0.0
        tolls = 5.76 if distance > 15 and rng.random() < 0.3 else 0.0
        total = round(fare + extra + mta_tax + improvement + tip + tolls, 2)

        pu_zone, do_zone = rng.choices(self._zones, weights=self._zone_weights, k=2)
        return TripRecord(
            vendor_id=rng.choice((1, 2)),
            pickup_timestamp=pickup,
            dropoff_timestamp=pickup + duration,
            passenger_count=rng.choices(range(1, 7), weights=_PASSENGER_WEIGHTS)[0],
            trip_distance=distance,
            rate_code_id=1,
            store_and_fwd_flag=rng.random() < 0.01,
            pu_location_id=pu_zone,
            do_location_id=do_zone,
            payment_type=payment_type,
            fare_amount=fare,
            extra=extra,
            mta_tax=mta_tax,
            tip_amount=tip,
            tolls_amount=tolls,
            improvement_surcharge=improvement,
            total_amount=total,
        )

    def generate(self) -> list[TripRecord]:
        """Produce all trips. Calling twice continues the RNG stream."""
        return [self._make_trip() for _ in range(self._num_trips)]

    def source(self) -> InMemoryTripSource:
        """Generate trips wrapped as a TripSource for TripDataset.load()."""
        return InMemoryTripSource(self.generate())
