from datetime import date, datetime, timezone, timedelta

import pytest

from admin_console.utils.dates import (
    last_n_months, month_label, parse_datetime, period_days, shift_months, time_ago
)


def test_parse_datetime_accepts_db_and_iso_forms() -> None:
    assert parse_datetime("2025-03-15 10:24:00") == datetime(2025, 3, 15, 10, 24)
    assert parse_datetime("2025-03-15T10:24:00Z") == datetime(2025, 3, 15, 10, 24)
    assert parse_datetime(date(2025, 3, 15)) == datetime(2025, 3, 15)
    assert parse_datetime(None) is None
    assert parse_datetime("") is None


def test_parse_datetime_normalises_offsets_to_naive_utc() -> None:
    aware = datetime(2025, 3, 15, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert parse_datetime("2025-03-15T12:00:00+02:00") == datetime(2025, 3, 15, 10, 0)
    assert parse_datetime(aware).tzinfo is None


def test_parse_datetime_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_datetime("yesterday")


def test_shift_months_crosses_year_boundaries() -> None:
    assert shift_months(datetime(2025, 1, 20), -1) == datetime(2024, 12, 1)
    assert shift_months(datetime(2024, 11, 5), 3) == datetime(2025, 2, 1)


def test_last_n_months_oldest_first() -> None:
    months = last_n_months(datetime(2025, 3, 15), 6)
    assert [month_label(m) for m in months] == ["Oct", "Nov", "Dec", "Jan", "Feb", "Mar"]


def test_time_ago() -> None:
    now = datetime(2025, 3, 15, 12, 0, 0)
    assert time_ago(now - timedelta(seconds=20), now) == "just now"
    assert time_ago(now - timedelta(minutes=1), now) == "1 minute ago"
    assert time_ago(now - timedelta(hours=2), now) == "2 hours ago"
    assert time_ago(now - timedelta(days=3, hours=5), now) == "3 days ago"


def test_period_days() -> None:
    assert period_days("7d") == 7
    assert period_days("90d") == 90
    with pytest.raises(ValueError):
        period_days("1y")
