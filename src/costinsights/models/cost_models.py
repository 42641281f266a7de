"""
Cost time-series models
Daily cost records, resolved time ranges, spikes, seasonality and root causes
"""

import math
import re
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from costinsights.core.exceptions import DataValidationException

_FRACTION_OVERFLOW = re.compile(r"(\.\d{6})\d+")


class Timeframe(str, Enum):
    """Cost Management timeframe tokens."""
    CUSTOM = "Custom"
    MONTH_TO_DATE = "MonthToDate"
    YEAR_TO_DATE = "YearToDate"


class TimeRange(BaseModel):
    """Resolved reporting window: a named timeframe or an explicit date pair."""

    model_config = ConfigDict(frozen=True)

    timeframe: Timeframe = Field(Timeframe.MONTH_TO_DATE, description="Named timeframe token")
    start: Optional[date] = Field(None, description="First day (custom ranges only)")
    end: Optional[date] = Field(None, description="Last day (custom ranges only)")

    @property
    def is_custom(self) -> bool:
        return self.timeframe == Timeframe.CUSTOM

    @property
    def label(self) -> str:
        if self.start and self.end:
            return f"{self.start.isoformat()} to {self.end.isoformat()}"
        return self.timeframe.value

    def window(self, today: Optional[date] = None) -> Tuple[date, date]:
        """Concrete (start, end) dates for any timeframe."""
        if self.start and self.end:
            return self.start, self.end

        today = today or date.today()
        if self.timeframe == Timeframe.YEAR_TO_DATE:
            return date(today.year, 1, 1), today
        return today.replace(day=1), today


class ServiceCost(BaseModel):
    """Cost attributed to one service."""

    model_config = ConfigDict(frozen=True)

    service_name: str
    cost: float = 0.0
    currency: str = "INR"
    trend: Optional[str] = Field(None, description="Qualitative trend tag: increasing, decreasing, stable")


class DailyCostRecord(BaseModel):
    """One calendar day of cost with its per-service breakdown."""

    model_config = ConfigDict(frozen=True)

    usage_date: date
    total_cost: float = 0.0
    service_breakdown: Tuple[ServiceCost, ...] = ()

    @model_validator(mode="after")
    def _check_total(self) -> "DailyCostRecord":
        breakdown_total = sum(service.cost for service in self.service_breakdown)
        if not math.isclose(self.total_cost, breakdown_total, rel_tol=1e-9, abs_tol=1e-6):
            raise DataValidationException(
                "total_cost", self.total_cost,
                f"does not match service breakdown sum {breakdown_total}"
            )
        return self

    @property
    def active_services(self) -> List[ServiceCost]:
        """Services that actually cost something on this day."""
        return [service for service in self.service_breakdown if service.cost > 0]


class SpikeEvent(BaseModel):
    """A day whose cost jumped over the previous day beyond a threshold."""

    model_config = ConfigDict(frozen=True)

    spike_date: date
    previous_cost: float
    current_cost: float
    percentage_increase: float
    absolute_increase: float
    affected_services: Tuple[ServiceCost, ...] = ()
    description: str = ""


class SeasonalityKind(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    DAILY = "daily"


class SeasonalityPattern(BaseModel):
    """A recurring above-average cost concentration."""

    model_config = ConfigDict(frozen=True)

    kind: SeasonalityKind
    bucket: str
    description: str
    impact_percentage: float

    @computed_field
    @property
    def impact(self) -> str:
        return f"Costs are {self.impact_percentage:.2f}% higher than average."


class ChangeEvent(BaseModel):
    """Infrastructure change event from the activity log."""

    model_config = ConfigDict(populate_by_name=True)

    event_timestamp: str = Field(..., alias="eventTimestamp")
    operation_name: str = Field(..., alias="operationName")
    resource_group: str = Field("", alias="resourceGroup")
    resource_type: str = Field("", alias="resourceType")
    resource_name: str = Field("", alias="resourceName")

    @property
    def timestamp(self) -> Optional[datetime]:
        try:
            text = _FRACTION_OVERFLOW.sub(r"\1", self.event_timestamp.replace("Z", "+00:00"))
            parsed = datetime.fromisoformat(text)
        except (ValueError, AttributeError):
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed


class RootCauseEntry(BaseModel):
    """Change events correlated with one spike."""

    spike_date: date
    spike_description: str
    causes: List[str] = Field(default_factory=list)


def day_window(day: date) -> Tuple[datetime, datetime]:
    """Half-open [day 00:00, day+1 00:00) window for change-event lookups."""
    start = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)
