"""Streaming CSV reader for TLC yellow-taxi trip files.

Reads one line at a time through csv.reader, so the file is never held
in memory as text; only the accepted TripRecords are kept, by whoever
consumes the iterator.

Column layout (positional, the TLC yellow schema):

     0 VendorID               9 payment_type
     1 tpep_pickup_datetime  10 fare_amount
     2 tpep_dropoff_datetime 11 extra
     3 passenger_count       12 mta_tax
     4 trip_distance         13 tip_amount
     5 RatecodeID            14 tolls_amount
     6 store_and_fwd_flag    15 improvement_surcharge
     7 PULocationID          16 total_amount
     8 DOLocationID

Newer files append congestion_surcharge / airport_fee; trailing columns
beyond the first 17 are accepted and ignored, but every row must have
the same number of fields as the header.

Row problems never raise. A row that fails to parse or validate is
counted in rows_discarded and skipped. Only failing to open or read the
file raises FatalLoadError.
"""
from __future__ import annotations

import csv
import logging
import os
from typing import Iterator

from taxi_query.domain.trip import TripRecord, trip_invariant_violation
from taxi_query.ingest.base import FatalLoadError, LoadStats, TripSource
from taxi_query.ingest.timestamps import parse_timestamp

log = logging.getLogger(__name__)

EXPECTED_FIELD_COUNT = 17

_FLAG_VALUES: dict[str, bool] = {"Y": True, "N": False, "": False}


class RowRejected(ValueError):
    """A single CSV row failed parsing or validation. Counted, never propagated."""


def _to_int(text: str) -> int:
    """Parse an integer column. TLC files sometimes write "1.0" for 1."""
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        raise RowRejected(f"not an integer: {text!r}") from None
    if not value.is_integer():
        raise RowRejected(f"not an integer: {text!r}")
    return int(value)


def _to_float(text: str) -> float:
    try:
        return float(text.strip())
    except ValueError:
        raise RowRejected(f"not a number: {text!r}") from None


def _to_flag(text: str) -> bool:
    try:
        return _FLAG_VALUES[text.strip().upper()]
    except KeyError:
        raise RowRejected(f"bad store_and_fwd_flag: {text!r}") from None


def parse_row(fields: list[str]) -> TripRecord:
    """Turn one CSV row into a TripRecord, raising RowRejected if it's bad."""
    pickup = parse_timestamp(fields[1])
    if pickup <= 0:
        raise RowRejected(f"unparseable pickup time: {fields[1]!r}")
    dropoff = parse_timestamp(fields[2])

    passenger_count = _to_int(fields[3])
    trip_distance = _to_float(fields[4])
    total_amount = _to_float(fields[16])

    reason = trip_invariant_violation(
        pickup, dropoff, passenger_count, trip_distance, total_amount
    )
    if reason is not None:
        raise RowRejected(reason)

    return TripRecord(
        vendor_id=_to_int(fields[0]),
        pickup_timestamp=pickup,
        dropoff_timestamp=dropoff,
        passenger_count=passenger_count,
        trip_distance=trip_distance,
        rate_code_id=_to_int(fields[5]),
        store_and_fwd_flag=_to_flag(fields[6]),
        pu_location_id=_to_int(fields[7]),
        do_location_id=_to_int(fields[8]),
        payment_type=_to_int(fields[9]),
        fare_amount=_to_float(fields[10]),
        extra=_to_float(fields[11]),
        mta_tax=_to_float(fields[12]),
        tip_amount=_to_float(fields[13]),
        tolls_amount=_to_float(fields[14]),
        improvement_surcharge=_to_float(fields[15]),
        total_amount=total_amount,
    )


class CsvTripReader(TripSource):
    """Stream valid TripRecords out of a TLC CSV file.

    The file is opened lazily, when iteration starts. The header line is
    skipped and not counted. Blank lines are skipped and not counted.

    Args:
        path: CSV file to read.
        encoding: Text encoding (default utf-8).
    """

    __slots__ = ("_path", "_encoding", "_rows_read", "_rows_accepted", "_rows_discarded")

    def __init__(self, path: str | os.PathLike[str], encoding: str = "utf-8") -> None:
        self._path = os.fspath(path)
        self._encoding = encoding
        self._rows_read = 0
        self._rows_accepted = 0
        self._rows_discarded = 0

    @property
    def path(self) -> str:
        return self._path

    def __iter__(self) -> Iterator[TripRecord]:
        self._rows_read = self._rows_accepted = self._rows_discarded = 0
        try:
            f = open(self._path, newline="", encoding=self._encoding)
        except OSError as exc:
            raise FatalLoadError(f"Failed to open CSV file: {self._path}") from exc

        with f:
            try:
                yield from self._read_rows(csv.reader(f))
            except (OSError, UnicodeDecodeError, csv.Error) as exc:
                raise FatalLoadError(
                    f"Error reading CSV file {self._path} after "
                    f"{self._rows_read} rows"
                ) from exc

    def _read_rows(self, reader: Iterator[list[str]]) -> Iterator[TripRecord]:
        header = next(reader, None)
        if header is None:
            return
        width = len(header)

        for fields in reader:
            if not fields:
                continue
            self._rows_read += 1
            try:
                if width < EXPECTED_FIELD_COUNT or len(fields) != width:
                    raise RowRejected(
                        f"expected {width} fields (min {EXPECTED_FIELD_COUNT}), "
                        f"got {len(fields)}"
                    )
                record = parse_row(fields)
            except RowRejected as exc:
                self._rows_discarded += 1
                log.debug("Discarding row %d of %s: %s", self._rows_read, self._path, exc)
                continue
            self._rows_accepted += 1
            yield record

    @property
    def stats(self) -> LoadStats:
        return LoadStats(
            rows_read=self._rows_read,
            rows_accepted=self._rows_accepted,
            rows_discarded=self._rows_discarded,
        )

    def __length_hint__(self) -> int:
        """Estimate rows as file size / length of the first data line."""
        try:
            size = os.path.getsize(self._path)
            with open(self._path, "rb") as f:
                f.readline()  # header
                sample = f.readline()
        except OSError:
            return 0
        if not sample:
            return 0
        return size // len(sample)
