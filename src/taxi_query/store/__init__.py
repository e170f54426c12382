"""In-memory trip storage: the dataset, its time index, and query types.

TripDataset owns the records. TimeIndex is the one secondary index
(pickup time). The query/result dataclasses are shared with the engine.
"""
from taxi_query.store.queries import (
    AggregationResult,
    CombinedQuery,
    IntRange,
    NumericRange,
    QueryResult,
    TimeRange,
)
from taxi_query.store.time_index import TimeIndex
from taxi_query.store.dataset import DEFAULT_CAPACITY_HINT, TripDataset

__all__ = [
    "AggregationResult",
    "CombinedQuery",
    "DEFAULT_CAPACITY_HINT",
    "IntRange",
    "NumericRange",
    "QueryResult",
    "TimeIndex",
    "TimeRange",
    "TripDataset",
]
