"""taxi-query CLI entry point.

Usage: taxi-query [--log-level LEVEL] {bench,check} [options]
"""
import argparse
import logging
import sys
import time

from taxi_query.engine.fork_join import PARALLEL_THRESHOLD


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return value


def _add_source_args(p: argparse.ArgumentParser) -> None:
    src = p.add_mutually_exclusive_group()
    src.add_argument(
        "--csv", metavar="PATH",
        help="TLC yellow-taxi CSV file to load.",
    )
    src.add_argument(
        "--synthetic", type=int, metavar="N", default=100_000,
        help="Generate N synthetic trips instead of reading a file (default: 100000)",
    )
    p.add_argument(
        "--seed", type=int, default=42,
        help="RNG seed for synthetic trips (default: 42)",
    )
    p.add_argument(
        "--threshold", type=_non_negative_int, default=PARALLEL_THRESHOLD,
        help=f"Candidate count above which scans run in parallel (default: {PARALLEL_THRESHOLD})",
    )
    p.add_argument(
        "--workers", type=_positive_int, default=None,
        help="Worker threads per parallel scan (default: CPU count)",
    )


def _add_bench_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "bench",
        help="Load trips, build the index and time the six standard queries.",
    )
    _add_source_args(p)
    p.add_argument(
        "--runs", type=int, default=10,
        help="Repetitions per query; timings are averaged (default: 10)",
    )


def _add_check_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "check",
        help="Run each standard query once and report PASS/FAIL.",
    )
    _add_source_args(p)


def _load(args: argparse.Namespace):
    """Load the requested source. Returns (dataset, load_ms)."""
    from taxi_query.profiling.load_generator import TripGenerator
    from taxi_query.store.dataset import TripDataset

    dataset = TripDataset(
        parallel_threshold=args.threshold,
        max_workers=args.workers,
    )
    start = time.perf_counter()
    if args.csv:
        dataset.load_csv(args.csv)
    else:
        dataset.load(TripGenerator(num_trips=args.synthetic, seed=args.seed).source())
    load_ms = (time.perf_counter() - start) * 1000
    return dataset, load_ms


def _run_bench(args: argparse.Namespace) -> int:
    from taxi_query.profiling.harness import run_benchmark
    from taxi_query.profiling.report import format_report

    dataset, load_ms = _load(args)
    result = run_benchmark(
        dataset,
        runs=args.runs,
        load_ms=load_ms,
        parallel_threshold=args.threshold,
        max_workers=args.workers,
    )
    label = f"Benchmark: {args.csv}" if args.csv else f"Benchmark: {args.synthetic:,} synthetic trips"
    print(format_report(result, label=label))
    return 0


def _run_check(args: argparse.Namespace) -> int:
    from taxi_query.profiling.harness import run_checks
    from taxi_query.profiling.report import format_checks

    dataset, _ = _load(args)
    print(f"Loaded {len(dataset):,} records")
    if len(dataset) == 0:
        print("No records loaded.", file=sys.stderr)
        return 1

    results = run_checks(dataset)
    print(format_checks(results))
    return 0 if all(r.passed for r in results) else 1


def main(argv: list[str] | None = None) -> None:
    from taxi_query.ingest.base import FatalLoadError

    parser = argparse.ArgumentParser(
        prog="taxi-query",
        description="In-memory range and aggregate queries over taxi trip records.",
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command")

    _add_bench_parser(subparsers)
    _add_check_parser(subparsers)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handlers = {"bench": _run_bench, "check": _run_check}
    try:
        status = handlers[args.command](args)
    except FatalLoadError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(2)
    sys.exit(status)
