from datetime import date, datetime, timezone

import pytest

from costinsights.core.utils import format_currency, parse_cost, parse_usage_date, safe_get
from costinsights.models.cost_models import ChangeEvent, day_window


@pytest.mark.parametrize("raw,expected", [
    (12.5, 12.5),
    (3, 3.0),
    ("₹1,234.50", 1234.5),
    ("-7.25", -7.25),
    ("", 0.0),
    ("abc", 0.0),
    (None, 0.0),
    (True, 0.0),
    (float("nan"), 0.0),
    (float("inf"), 0.0),
    ("1.5E+3", 1500.0),
    ("2e-05", 2e-05),
    (" 3.25e2 ", 325.0),
    ("₹1.2e3", 1200.0),
    ("INR 42.10", 42.1),
    ("nan", 0.0),
])
def test_parse_cost(raw, expected):
    assert parse_cost(raw) == expected


@pytest.mark.parametrize("raw,expected", [
    (20240301, date(2024, 3, 1)),
    ("20240301", date(2024, 3, 1)),
    ("2024-03-01", date(2024, 3, 1)),
    ("2024-03-01T00:00:00Z", date(2024, 3, 1)),
    (datetime(2024, 3, 1, 12, 0), date(2024, 3, 1)),
    (date(2024, 3, 1), date(2024, 3, 1)),
    ("20241301", None),
    ("yesterday", None),
    (None, None),
    ("", None),
])
def test_parse_usage_date(raw, expected):
    assert parse_usage_date(raw) == expected


def test_safe_get_dot_notation():
    data = {"currentSpend": {"amount": 10}}

    assert safe_get(data, "currentSpend.amount") == 10
    assert safe_get(data, "forecastSpend.amount", 0) == 0
    assert safe_get({"currentSpend": None}, "currentSpend.amount", 0) == 0


def test_format_currency():
    assert format_currency(1234.5) == "₹1234.50"
    assert format_currency(2, "$") == "$2.00"


@pytest.mark.parametrize("raw,expected", [
    ("2024-03-03T10:15:00.1234567Z", datetime(2024, 3, 3, 10, 15, 0, 123456, tzinfo=timezone.utc)),
    ("2024-03-03T10:15:00", datetime(2024, 3, 3, 10, 15, tzinfo=timezone.utc)),
    ("2024-03-03T15:45:00+05:30", datetime(2024, 3, 3, 10, 15, tzinfo=timezone.utc)),
    ("not a timestamp", None),
])
def test_change_event_timestamp(raw, expected):
    event = ChangeEvent(event_timestamp=raw, operation_name="Create")

    assert event.timestamp == expected


def test_day_window_is_one_utc_day():
    start, end = day_window(date(2024, 2, 29))

    assert start == datetime(2024, 2, 29, tzinfo=timezone.utc)
    assert end == datetime(2024, 3, 1, tzinfo=timezone.utc)
