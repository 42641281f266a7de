from datetime import date

import pytest

from costinsights.analytics.time_range import TimeRangeResolver, extract_period
from costinsights.models.cost_models import Timeframe


@pytest.fixture
def resolver(today):
    return TimeRangeResolver(today=today)


def test_month_year_resolves_to_calendar_month(resolver):
    time_range = resolver.resolve("March 2024")

    assert time_range.timeframe == Timeframe.CUSTOM
    assert time_range.start == date(2024, 3, 1)
    assert time_range.end == date(2024, 3, 31)
    assert time_range.label == "2024-03-01 to 2024-03-31"


def test_month_year_handles_leap_february(resolver):
    time_range = resolver.resolve("costs for february 2024")

    assert (time_range.start, time_range.end) == (date(2024, 2, 1), date(2024, 2, 29))


def test_last_n_days_counts_back_from_today(resolver):
    time_range = resolver.resolve("last 45 days")

    assert time_range.timeframe == Timeframe.CUSTOM
    assert time_range.start == date(2024, 1, 30)
    assert time_range.end == date(2024, 3, 15)


def test_last_n_days_is_case_insensitive(resolver):
    time_range = resolver.resolve("Last 7 Days")

    assert (time_range.start, time_range.end) == (date(2024, 3, 8), date(2024, 3, 15))


@pytest.mark.parametrize("period,start,end", [
    ("last month", date(2024, 2, 1), date(2024, 2, 29)),
    ("last 3 months", date(2023, 12, 1), date(2024, 2, 29)),
    ("Last 6 Months", date(2023, 9, 1), date(2024, 2, 29)),
])
def test_relative_month_vocabulary(resolver, period, start, end):
    time_range = resolver.resolve(period)

    assert time_range.is_custom
    assert (time_range.start, time_range.end) == (start, end)


def test_last_month_crosses_year_boundary():
    time_range = TimeRangeResolver(today=date(2024, 1, 10)).resolve("last month")

    assert (time_range.start, time_range.end) == (date(2023, 12, 1), date(2023, 12, 31))


def test_year_to_date_is_a_named_timeframe(resolver, today):
    time_range = resolver.resolve("year to date")

    assert time_range.timeframe == Timeframe.YEAR_TO_DATE
    assert time_range.start is None
    assert time_range.window(today) == (date(2024, 1, 1), today)


@pytest.mark.parametrize("period", ["current month", "", None, "next fiscal quarter", "march"])
def test_everything_else_is_month_to_date(resolver, period, today):
    time_range = resolver.resolve(period)

    assert time_range.timeframe == Timeframe.MONTH_TO_DATE
    assert time_range.label == "MonthToDate"
    assert time_range.window(today) == (date(2024, 3, 1), today)


@pytest.mark.parametrize("period", [
    "last 999999 days",
    "last 99999999999 days",
    "january 0000",
    "what did we spend in december 0000?",
])
def test_out_of_calendar_periods_fall_back_to_month_to_date(resolver, period):
    time_range = resolver.resolve(period)

    assert time_range.timeframe == Timeframe.MONTH_TO_DATE
    assert time_range.start is None


def test_last_n_days_reaching_year_one(resolver, today):
    days = (today - date.min).days

    time_range = resolver.resolve(f"last {days} days")

    assert (time_range.start, time_range.end) == (date.min, today)


@pytest.mark.parametrize("question,expected", [
    ("How much did we spend in March 2024?", "march 2024"),
    ("show costs for the last 14 days", "last 14 days"),
    ("What happened last month?", "last month"),
    ("Compare the last three months", "last 3 months"),
    ("spend over the last 6 months", "last 6 months"),
    ("YTD spend please", "year to date"),
    ("what is our bill this month", "current month"),
    ("tell me a joke", "current month"),
    ("", "current month"),
])
def test_extract_period(question, expected):
    assert extract_period(question) == expected


def test_extracted_period_feeds_the_resolver(resolver):
    time_range = resolver.resolve(extract_period("what did we spend in the last 10 days?"))

    assert (time_range.start, time_range.end) == (date(2024, 3, 5), date(2024, 3, 15))
