"""Benchmark harness, smoke checks and synthetic trip generation."""

from taxi_query.profiling.harness import (
    BenchmarkResult,
    CheckResult,
    QueryTiming,
    StandardQueries,
    run_benchmark,
    run_checks,
    time_function_ms,
)
from taxi_query.profiling.load_generator import TripGenerator
from taxi_query.profiling.report import format_checks, format_report

__all__ = [
    "BenchmarkResult",
    "CheckResult",
    "QueryTiming",
    "StandardQueries",
    "TripGenerator",
    "format_checks",
    "format_report",
    "run_benchmark",
    "run_checks",
    "time_function_ms",
]
