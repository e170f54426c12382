"""Shared test fixtures: trip factories and small canned datasets."""
from __future__ import annotations

import random

import pytest

from taxi_query.domain.trip import TripRecord
from taxi_query.ingest.base import InMemoryTripSource
from taxi_query.store.dataset import TripDataset

# Fixed seed so randomized datasets are the same on every run
SEED = 42

BASE_TS = 1_546_300_800  # 2019-01-01 00:00:00 UTC

CSV_HEADER = (
    "VendorID,tpep_pickup_datetime,tpep_dropoff_datetime,passenger_count,"
    "trip_distance,RatecodeID,store_and_fwd_flag,PULocationID,DOLocationID,"
    "payment_type,fare_amount,extra,mta_tax,tip_amount,tolls_amount,"
    "improvement_surcharge,total_amount"
)


def _make_trip(
    pickup: int,
    fare: float = 10.0,
    distance: float = 1.0,
    passengers: int = 1,
    zone: int = 100,
    total: float | None = None,
    duration: int = 600,
    vendor: int = 1,
) -> TripRecord:
    """Build a valid TripRecord with only the interesting fields spelled out."""
    return TripRecord(
        vendor_id=vendor,
        pickup_timestamp=pickup,
        dropoff_timestamp=pickup + duration,
        passenger_count=passengers,
        trip_distance=distance,
        rate_code_id=1,
        store_and_fwd_flag=False,
        pu_location_id=zone,
        do_location_id=zone + 1,
        payment_type=1,
        fare_amount=fare,
        extra=0.5,
        mta_tax=0.5,
        tip_amount=0.0,
        tolls_amount=0.0,
        improvement_surcharge=0.3,
        total_amount=fare + 1.3 if total is None else total,
    )


def _random_trips(n: int, seed: int = SEED, span_s: int = 86_400) -> list[TripRecord]:
    """n trips with random pickups (duplicates likely), unsorted."""
    rng = random.Random(seed)
    return [
        _make_trip(
            pickup=BASE_TS + rng.randrange(span_s),
            fare=round(rng.uniform(2.5, 80.0), 2),
            distance=round(rng.uniform(0.0, 20.0), 2),
            passengers=rng.randint(0, 6),
            zone=rng.randint(1, 263),
        )
        for _ in range(n)
    ]


@pytest.fixture()
def make_trip():
    """Factory fixture: make_trip(pickup, fare=..., distance=..., ...)."""
    return _make_trip


@pytest.fixture()
def random_trips():
    """Factory fixture: random_trips(n, seed=42, span_s=86400)."""
    return _random_trips


@pytest.fixture()
def scenario_records() -> list[TripRecord]:
    """Five trips at t=100..500 with fares 5..25, in time order."""
    return [
        _make_trip(pickup=ts, fare=fare)
        for ts, fare in zip((100, 200, 300, 400, 500), (5.0, 10.0, 15.0, 20.0, 25.0))
    ]


@pytest.fixture()
def scenario_dataset(scenario_records) -> TripDataset:
    ds = TripDataset()
    ds.load(InMemoryTripSource(scenario_records))
    return ds


@pytest.fixture()
def write_csv(tmp_path):
    """Factory fixture: write_csv(rows, header=CSV_HEADER) -> path."""
    def _write(rows: list[str], header: str | None = CSV_HEADER, name: str = "trips.csv"):
        path = tmp_path / name
        lines = ([header] if header is not None else []) + list(rows)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write
