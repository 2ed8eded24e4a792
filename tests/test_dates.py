from datetime import date, datetime, timezone

import pandas as pd
import pytest

from gas_contracts.errors import InvalidDateWindowError
from gas_contracts.utils.dates import (
    calendar_days,
    day_of_week_label,
    month_label,
    parse_date_window,
    parse_month,
    to_day,
)


def test_to_day_keeps_plain_dates():
    assert to_day(date(2024, 3, 1)) == date(2024, 3, 1)


def test_to_day_naive_datetime_uses_own_date():
    assert to_day(datetime(2024, 3, 1, 23, 30)) == date(2024, 3, 1)
    assert to_day("2024-03-01") == date(2024, 3, 1)


def test_to_day_aware_datetime_uses_organization_timezone():
    """02:00 UTC is still the previous evening in São Paulo."""
    assert to_day(datetime(2024, 3, 1, 2, 0, tzinfo=timezone.utc)) == date(2024, 2, 29)
    assert to_day("2024-03-01T02:00:00Z") == date(2024, 2, 29)
    assert to_day(pd.Timestamp("2024-03-01T12:00:00Z")) == date(2024, 3, 1)


def test_to_day_explicit_timezone():
    assert to_day("2024-03-01T02:00:00Z", tz="UTC") == date(2024, 3, 1)


def test_to_day_rejects_garbage():
    with pytest.raises(InvalidDateWindowError):
        to_day("not a date")


def test_parse_month():
    assert parse_month("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
    assert parse_month("2023-12") == (date(2023, 12, 1), date(2023, 12, 31))


@pytest.mark.parametrize("value", ["2024-13", "2024/02", "", "february"])
def test_parse_month_invalid(value):
    with pytest.raises(InvalidDateWindowError):
        parse_month(value)


def test_parse_date_window():
    assert parse_date_window("2024-03-01", "2024-03-10") == (date(2024, 3, 1), date(2024, 3, 10))
    assert parse_date_window(date(2024, 3, 1), date(2024, 3, 1)) == (date(2024, 3, 1), date(2024, 3, 1))


def test_parse_date_window_inverted():
    with pytest.raises(InvalidDateWindowError):
        parse_date_window("2024-03-10", "2024-03-01")


def test_parse_date_window_malformed():
    with pytest.raises(InvalidDateWindowError):
        parse_date_window("03/01/2024", "2024-03-10")


def test_calendar_days_inclusive():
    days = calendar_days(date(2024, 2, 27), date(2024, 3, 2))
    assert days == [
        date(2024, 2, 27),
        date(2024, 2, 28),
        date(2024, 2, 29),
        date(2024, 3, 1),
        date(2024, 3, 2),
    ]


def test_labels():
    assert month_label(date(2024, 3, 15)) == "2024-03"
    assert day_of_week_label(date(2024, 3, 4)) == "Seg"
    assert day_of_week_label(date(2024, 3, 10)) == "Dom"
