# src/costinsights/analytics/time_range.py
"""
Time-range resolution - maps free-text periods to Cost Management windows
"""

import calendar
import re
from datetime import date, timedelta
from typing import Optional

import structlog

from costinsights.models.cost_models import Timeframe, TimeRange

logger = structlog.get_logger(__name__)

MONTHS = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]

_MONTH_YEAR = re.compile(r"(" + "|".join(MONTHS) + r")\s+(\d{4})", re.IGNORECASE)
_LAST_DAYS = re.compile(r"last (\d+) days?", re.IGNORECASE)

# Question phrasing -> canonical period, checked in order
_PERIOD_PATTERNS = [
    ("last month", re.compile(r"last month", re.IGNORECASE)),
    ("last 3 months", re.compile(r"last (three|3) months", re.IGNORECASE)),
    ("last 6 months", re.compile(r"last (six|6) months", re.IGNORECASE)),
    ("year to date", re.compile(r"year to date|ytd", re.IGNORECASE)),
    ("current month", re.compile(r"(this|current) month", re.IGNORECASE)),
]

DEFAULT_PERIOD = "current month"


def extract_period(question: str) -> str:
    """Pull a canonical period phrase out of a free-form question."""
    text = (question or "").strip()

    match = _MONTH_YEAR.search(text)
    if match:
        return f"{match.group(1).lower()} {match.group(2)}"

    match = _LAST_DAYS.search(text)
    if match:
        return match.group(0).lower()

    for period, pattern in _PERIOD_PATTERNS:
        if pattern.search(text):
            return period

    return DEFAULT_PERIOD


def _shift_month(year: int, month: int, offset: int):
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def _month_bounds(year: int, month: int):
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


class TimeRangeResolver:
    """Resolves a period description into a TimeRange. Never fails: unknown text means month-to-date."""

    def __init__(self, today: Optional[date] = None):
        self._today = today
        self.logger = logger.bind(analytics="time_range")

    @property
    def today(self) -> date:
        return self._today or date.today()

    def resolve(self, period: Optional[str]) -> TimeRange:
        text = (period or "").strip()
        today = self.today

        match = _MONTH_YEAR.search(text)
        if match:
            month = MONTHS.index(match.group(1).lower()) + 1
            try:
                start, end = _month_bounds(int(match.group(2)), month)
            except (OverflowError, ValueError):
                self.logger.debug(f"Month outside the calendar in '{text}', defaulting to month to date")
                return TimeRange(timeframe=Timeframe.MONTH_TO_DATE)
            return TimeRange(timeframe=Timeframe.CUSTOM, start=start, end=end)

        match = _LAST_DAYS.search(text)
        if match:
            try:
                start = today - timedelta(days=int(match.group(1)))
            except (OverflowError, ValueError):
                self.logger.debug(f"Day count out of range in '{text}', defaulting to month to date")
                return TimeRange(timeframe=Timeframe.MONTH_TO_DATE)
            return TimeRange(timeframe=Timeframe.CUSTOM, start=start, end=today)

        normalized = text.lower()

        if normalized in ("last month", "last 3 months", "last 6 months"):
            months_back = {"last month": 1, "last 3 months": 3, "last 6 months": 6}[normalized]
            start_year, start_month = _shift_month(today.year, today.month, -months_back)
            end_year, end_month = _shift_month(today.year, today.month, -1)
            start = date(start_year, start_month, 1)
            end = _month_bounds(end_year, end_month)[1]
            return TimeRange(timeframe=Timeframe.CUSTOM, start=start, end=end)

        if normalized == "year to date":
            return TimeRange(timeframe=Timeframe.YEAR_TO_DATE)

        if normalized != "current month":
            self.logger.debug(f"Unrecognised period '{text}', defaulting to month to date")

        return TimeRange(timeframe=Timeframe.MONTH_TO_DATE)
