"""Shared type aliases used across the domain."""
from __future__ import annotations

from typing import TypeAlias

Timestamp: TypeAlias = int  # Unix epoch seconds, UTC
ZoneId: TypeAlias = int     # TLC taxi zone (PULocationID / DOLocationID)
Position: TypeAlias = int   # index into a dataset's record tuple
