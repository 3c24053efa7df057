"""Tests for date parsing and the ``after`` cursor."""

from datetime import date

import pytest

from strava_distance.dates import date_to_epoch, parse_date
from strava_distance.exceptions import InputError, InvalidDate


def test_parse_valid_date():
    result = parse_date("2024-01-15")
    assert (result.year, result.month, result.day) == (2024, 1, 15)


def test_parse_leap_day():
    assert parse_date("2024-02-29") == date(2024, 2, 29)


@pytest.mark.parametrize(
    "text",
    ["15-01-2024", "2024/01/15", "2024-1-5", "20240115", "", "   ", "2024-01-15T00:00:00", "yesterday"],
)
def test_parse_invalid_format(text):
    with pytest.raises(InvalidDate, match="Date must be in YYYY-MM-DD format"):
        parse_date(text)


@pytest.mark.parametrize("text", ["2024-13-45", "2023-02-29", "2024-04-31", "2024-00-10"])
def test_parse_out_of_range(text):
    with pytest.raises(InvalidDate):
        parse_date(text)


def test_invalid_date_is_input_error():
    with pytest.raises(InputError):
        parse_date("nope")


def test_date_to_epoch_is_midnight_utc():
    assert date_to_epoch(date(2024, 1, 1)) == 1704067200
    assert date_to_epoch(date(1970, 1, 1)) == 0
