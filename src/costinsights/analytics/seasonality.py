# src/costinsights/analytics/seasonality.py
"""
Seasonality analysis - day-of-week and day-of-month cost concentration
"""

from typing import Dict, Iterable, List

import structlog

from costinsights.models.cost_models import DailyCostRecord, SeasonalityKind, SeasonalityPattern

logger = structlog.get_logger(__name__)

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

WEEKLY_BUCKETS = 7
# Fixed divisor: the monthly average is taken over 31 buckets whatever the
# number of distinct days observed. Reported percentages depend on it.
MONTHLY_BUCKETS = 31


class SeasonalityAnalyzer:
    """Reports day-of-week / day-of-month buckets whose total exceeds the bucket average."""

    def __init__(self, threshold_ratio: float = 1.2):
        self.threshold_ratio = threshold_ratio
        self.logger = logger.bind(analytics="seasonality")

    def analyze(self, records: Iterable[DailyCostRecord]) -> List[SeasonalityPattern]:
        records = list(records)
        if not records:
            return []

        patterns = self._weekly_patterns(records) + self._monthly_patterns(records)
        self.logger.info(f"Detected {len(patterns)} seasonality patterns", days=len(records))
        return patterns

    def _weekly_patterns(self, records: List[DailyCostRecord]) -> List[SeasonalityPattern]:
        buckets: Dict[int, float] = {}
        for record in records:
            weekday = record.usage_date.weekday()
            buckets[weekday] = buckets.get(weekday, 0.0) + record.total_cost

        average = sum(buckets.values()) / WEEKLY_BUCKETS
        patterns = []
        for weekday in sorted(buckets):
            impact = self._impact(buckets[weekday], average)
            if impact is not None:
                day_name = DAY_NAMES[weekday]
                patterns.append(SeasonalityPattern(
                    kind=SeasonalityKind.WEEKLY,
                    bucket=day_name,
                    description=f"Higher costs on {day_name}s",
                    impact_percentage=impact,
                ))
        return patterns

    def _monthly_patterns(self, records: List[DailyCostRecord]) -> List[SeasonalityPattern]:
        buckets: Dict[int, float] = {}
        for record in records:
            day = record.usage_date.day
            buckets[day] = buckets.get(day, 0.0) + record.total_cost

        average = sum(buckets.values()) / MONTHLY_BUCKETS
        patterns = []
        for day in sorted(buckets):
            impact = self._impact(buckets[day], average)
            if impact is not None:
                patterns.append(SeasonalityPattern(
                    kind=SeasonalityKind.MONTHLY,
                    bucket=str(day),
                    description=f"Higher costs on day {day} of the month",
                    impact_percentage=impact,
                ))
        return patterns

    def _impact(self, bucket_total: float, average: float):
        if average <= 0 or bucket_total <= average * self.threshold_ratio:
            return None
        return (bucket_total - average) / average * 100
