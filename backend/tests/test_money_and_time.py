from datetime import datetime

import pytest

from shoppos.money import cents_to_str, to_cents
from shoppos.time_utils import parse_range_end, start_of_week, to_utc_z


@pytest.mark.parametrize(
    "value,expected",
    [(30, 3000), ("10.5", 1050), ("0.005", 1), (19.99, 1999), ("  7 ", 700), (0, 0)],
)
def test_to_cents(value, expected):
    assert to_cents(value) == expected


@pytest.mark.parametrize("value", [None, True, "abc", "", "nan", "inf"])
def test_to_cents_rejects(value):
    with pytest.raises(ValueError):
        to_cents(value)


def test_cents_to_str():
    assert cents_to_str(1050) == "10.50"
    assert cents_to_str(0) == "0.00"
    assert cents_to_str(None) is None


def test_parse_range_end_covers_whole_day():
    assert parse_range_end("2026-03-03") == datetime(2026, 3, 3, 23, 59, 59, 999999)
    assert parse_range_end("2026-03-03T12:00:00Z") == datetime(2026, 3, 3, 12, 0)
    assert parse_range_end(None) is None


def test_start_of_week_is_monday():
    assert start_of_week(datetime(2026, 3, 22, 18, 0)) == datetime(2026, 3, 16)


def test_to_utc_z():
    assert to_utc_z(datetime(2026, 3, 3, 12, 0, 5, 123)) == "2026-03-03T12:00:05Z"
