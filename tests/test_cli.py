"""Tests for the taxi-query command line."""
from __future__ import annotations

import pytest

from taxi_query.cli import main

GOOD = "1,2019-01-01 00:46:40,2019-01-01 00:53:20,1,1.5,1,N,50,239,1,17,0.5,0.5,1.65,0,0.3,19.95"


def _exit_code(argv) -> int:
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


def test_no_command_prints_help(capsys):
    assert _exit_code([]) == 0
    assert "bench" in capsys.readouterr().out


def test_check_synthetic_passes(capsys):
    assert _exit_code(["check", "--synthetic", "2000", "--workers", "2"]) == 0
    out = capsys.readouterr().out
    assert "Loaded 2,000 records" in out
    assert "6 passed, 0 failed" in out


def test_bench_synthetic_prints_report(capsys):
    code = _exit_code([
        "bench", "--synthetic", "1500", "--runs", "1", "--threshold", "100", "--workers", "2",
    ])
    assert code == 0
    out = capsys.readouterr().out
    assert "=== Benchmark: 1,500 synthetic trips ===" in out
    assert "Q6 aggregate_fare_by_time" in out
    assert "Parallel above:    100 candidates (2 workers)" in out


def test_check_csv_with_failures(write_csv, capsys):
    # One trip: zone 50 misses the location window
    path = write_csv([GOOD])
    assert _exit_code(["check", "--csv", str(path)]) == 1
    out = capsys.readouterr().out
    assert "Loaded 1 records" in out
    assert "FAIL  Q4 search_by_location" in out


def test_check_csv_all_rows_rejected(write_csv, capsys):
    path = write_csv(["not,a,trip"])
    assert _exit_code(["check", "--csv", str(path)]) == 1
    assert "No records loaded." in capsys.readouterr().err


def test_missing_csv_exits_2(tmp_path, capsys):
    assert _exit_code(["check", "--csv", str(tmp_path / "missing.csv")]) == 2
    assert capsys.readouterr().err.startswith("error: Failed to open CSV file")


def test_csv_and_synthetic_are_exclusive(capsys):
    assert _exit_code(["bench", "--csv", "x.csv", "--synthetic", "10"]) == 2


@pytest.mark.parametrize(
    "flags",
    [
        ["--threshold", "-1"],
        ["--workers", "0"],
        ["--workers", "-3"],
        ["--workers", "many"],
    ],
)
def test_bad_scan_settings_rejected_by_parser(flags, capsys):
    assert _exit_code(["check", "--synthetic", "10", *flags]) == 2
    err = capsys.readouterr().err
    assert "usage:" in err
    assert "Traceback" not in err


def test_zero_threshold_is_allowed(capsys):
    assert _exit_code(["check", "--synthetic", "500", "--threshold", "0", "--workers", "2"]) == 0
