"""Report generation for benchmark and check results.

Formats BenchmarkResult / CheckResult data into plain-text tables for
terminal output.
"""
from __future__ import annotations

from taxi_query.profiling.harness import BenchmarkResult, CheckResult


def format_report(result: BenchmarkResult, label: str = "Benchmark") -> str:
    """Format a BenchmarkResult as a readable report string."""
    stats = result.load_stats
    lines = [
        f"=== {label} ===",
        f"Records:           {result.records:,}",
        f"Rows read:         {stats.rows_read:,}",
        f"Rows discarded:    {stats.rows_discarded:,}",
        f"Load time:         {result.load_ms:.2f} ms",
        f"Index build:       {result.build_ms:.2f} ms",
        f"Runs per query:    {result.runs}",
        f"Parallel above:    {result.parallel_threshold:,} candidates "
        f"({result.max_workers} workers)",
        "",
        f"{'Query':<32} {'Avg (ms)':>10} {'Matches':>10} {'Scanned':>10}",
        "-" * 65,
    ]
    for t in result.timings:
        scanned = f"{t.scanned:,}" if t.scanned is not None else "-"
        lines.append(
            f"{t.name:<32} {t.avg_ms:>10.2f} {t.matches:>10,} {scanned:>10}"
        )
    return "\n".join(lines)


def format_checks(results: list[CheckResult]) -> str:
    """One PASS/FAIL line per check, then a summary line."""
    lines = [
        f"{'PASS' if r.passed else 'FAIL'}  {r.name}  {r.detail}"
        for r in results
    ]
    passed = sum(1 for r in results if r.passed)
    lines.append("")
    lines.append(f"{passed} passed, {len(results) - passed} failed")
    return "\n".join(lines)
