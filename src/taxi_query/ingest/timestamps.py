"""Best-effort parsing of TLC pickup/dropoff timestamps.

TLC exports have used several layouts over the years:

    2019-01-01 00:46:40          ISO-ish, 24h clock (current)
    2019-01-01T00:46:40          ISO with T separator
    01/01/2019 12:46:40 AM       US date, 12h clock (older CSV dumps)
    01/01/2019 00:46             US date, 24h, no seconds (spreadsheet exports)

All times are taken as UTC. Anything that doesn't match one of the known
layouts comes back as 0, which ingestion rejects. Two-digit years and
other ambiguous forms are deliberately not attempted.
"""
from __future__ import annotations

from datetime import datetime, timezone

from taxi_query.domain.types import Timestamp

# Tried in order; the first layout that parses wins.
TIMESTAMP_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
)


def parse_timestamp(text: str) -> Timestamp:
    """Convert a timestamp string to epoch seconds, or 0 if unparseable."""
    text = text.strip()
    if not text:
        return 0
    for fmt in TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return int(parsed.replace(tzinfo=timezone.utc).timestamp())
    return 0
