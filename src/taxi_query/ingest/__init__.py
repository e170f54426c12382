"""Record sources for TripDataset.

The core only depends on the TripSource contract. CsvTripReader is the
file-backed implementation for TLC yellow-taxi CSVs.
"""
from taxi_query.ingest.base import (
    FatalLoadError,
    InMemoryTripSource,
    LoadStats,
    TripSource,
)
from taxi_query.ingest.csv_reader import CsvTripReader, RowRejected, parse_row
from taxi_query.ingest.timestamps import TIMESTAMP_FORMATS, parse_timestamp

__all__ = [
    "CsvTripReader",
    "FatalLoadError",
    "InMemoryTripSource",
    "LoadStats",
    "RowRejected",
    "TIMESTAMP_FORMATS",
    "TripSource",
    "parse_row",
    "parse_timestamp",
]
