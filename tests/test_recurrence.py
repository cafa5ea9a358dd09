from datetime import datetime, timedelta, timezone

import pytest

from utils.errors import InvalidInput, UnsupportedFrequency
from utils.recurrence import next_run, parse_timestamp

UTC = timezone.utc


def test_daily_and_weekly_keep_time_of_day():
    start = datetime(2026, 3, 10, 18, 45, tzinfo=UTC)
    assert next_run(start, "daily") == datetime(2026, 3, 11, 18, 45, tzinfo=UTC)
    assert next_run(start, "weekly") == datetime(2026, 3, 17, 18, 45, tzinfo=UTC)


def test_monthly_step():
    assert next_run("2026-04-15T09:00:00Z", "monthly") == datetime(2026, 5, 15, 9, 0, tzinfo=UTC)


def test_monthly_clamps_to_end_of_february():
    assert next_run("2026-01-31T09:00:00Z", "monthly") == datetime(2026, 2, 28, 9, 0, tzinfo=UTC)
    assert next_run("2024-01-31T09:00:00Z", "monthly") == datetime(2024, 2, 29, 9, 0, tzinfo=UTC)


def test_yearly_from_leap_day():
    assert next_run("2024-02-29T12:00:00Z", "yearly") == datetime(2025, 2, 28, 12, 0, tzinfo=UTC)


def test_december_rolls_into_next_year():
    assert next_run("2026-12-20T08:00:00Z", "monthly") == datetime(2027, 1, 20, 8, 0, tzinfo=UTC)


def test_offset_is_preserved():
    result = next_run("2026-03-10T09:00:00+05:30", "daily")
    assert result.utcoffset() == timedelta(hours=5, minutes=30)
    assert (result.day, result.hour) == (11, 9)


def test_naive_timestamp_is_utc():
    assert parse_timestamp("2026-03-10T09:00:00").tzinfo == UTC
    assert parse_timestamp(datetime(2026, 3, 10, 9)).tzinfo == UTC


@pytest.mark.parametrize("frequency", ["hourly", "Monthly", "", None])
def test_unsupported_frequency(frequency):
    with pytest.raises(UnsupportedFrequency):
        next_run("2026-03-10T09:00:00Z", frequency)


def test_unsupported_frequency_is_a_value_error():
    with pytest.raises(ValueError):
        next_run("2026-03-10T09:00:00Z", "fortnightly")


@pytest.mark.parametrize("value", ["not-a-date", "", "   ", None, 12345])
def test_invalid_timestamp(value):
    with pytest.raises(InvalidInput):
        next_run(value, "daily")


@pytest.mark.parametrize("frequency,expected", [
    ("daily", datetime(2024, 1, 16, 10, 0, tzinfo=UTC)),
    ("weekly", datetime(2024, 1, 22, 10, 0, tzinfo=UTC)),
    ("monthly", datetime(2024, 2, 15, 10, 0, tzinfo=UTC)),
    ("yearly", datetime(2025, 1, 15, 10, 0, tzinfo=UTC)),
])
def test_each_frequency_advances_by_one_unit(frequency, expected):
    start = "2024-01-15T10:00:00Z"
    result = next_run(start, frequency)
    assert result == expected
    assert result > parse_timestamp(start)
