"""Tests for best-effort timestamp parsing."""
import pytest

from taxi_query.ingest.timestamps import parse_timestamp

JAN1_004640 = 1_546_303_600  # 2019-01-01 00:46:40 UTC


@pytest.mark.parametrize(
    "text",
    [
        "2019-01-01 00:46:40",
        "2019-01-01T00:46:40",
        "01/01/2019 12:46:40 AM",
        "01/01/2019 00:46:40",
        "  2019-01-01 00:46:40  ",
    ],
)
def test_known_layouts(text):
    assert parse_timestamp(text) == JAN1_004640


def test_minutes_only_layouts():
    assert parse_timestamp("2019-01-01 00:46") == JAN1_004640 - 40
    assert parse_timestamp("01/01/2019 00:46") == JAN1_004640 - 40


def test_pm_clock():
    assert parse_timestamp("01/01/2019 01:00:00 PM") == 1_546_300_800 + 13 * 3600


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "not a date",
        "01/01/19 00:46",          # two-digit year: rejected, not guessed
        "2019/01/01 00:46:40",     # unsupported separator mix
        "2019-13-01 00:00:00",     # month out of range
        "1546303600",              # raw epoch number
    ],
)
def test_rejected_inputs_return_zero(text):
    assert parse_timestamp(text) == 0
