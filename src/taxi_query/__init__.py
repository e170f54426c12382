"""taxi-query: in-memory range and aggregate queries over taxi trip records.

    from taxi_query import TripDataset, TimeRange

    ds = TripDataset()
    ds.load_csv("yellow_tripdata_2019-01.csv")
    engine = ds.query_engine()
    result = engine.search_by_time(TimeRange(1546300800, 1546387200))
"""
# store must be imported before engine: the dataset module pulls in the
# engine, which in turn needs the store's query types.
from taxi_query.store import (
    AggregationResult,
    CombinedQuery,
    IntRange,
    NumericRange,
    QueryResult,
    TimeIndex,
    TimeRange,
    TripDataset,
)
from taxi_query.engine import PARALLEL_THRESHOLD, QueryEngine
from taxi_query.domain import InvalidTripRecord, TripRecord
from taxi_query.ingest import (
    CsvTripReader,
    FatalLoadError,
    InMemoryTripSource,
    LoadStats,
    TripSource,
)

__version__ = "0.1.0"

__all__ = [
    "AggregationResult",
    "CombinedQuery",
    "CsvTripReader",
    "FatalLoadError",
    "InMemoryTripSource",
    "IntRange",
    "InvalidTripRecord",
    "LoadStats",
    "NumericRange",
    "PARALLEL_THRESHOLD",
    "QueryEngine",
    "QueryResult",
    "TimeIndex",
    "TimeRange",
    "TripDataset",
    "TripRecord",
    "TripSource",
]
