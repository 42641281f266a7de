# src/costinsights/analytics/history.py
"""
Historical comparison - latest service cost against its moving average
"""

from collections import defaultdict
from typing import Dict, Iterable, List

import structlog

from costinsights.models.cost_models import DailyCostRecord

logger = structlog.get_logger(__name__)


def service_history(records: Iterable[DailyCostRecord]) -> Dict[str, Dict]:
    """Per-service daily series: {service: {date: cost}} with same-day rows summed."""
    history: Dict[str, Dict] = defaultdict(dict)
    for record in records:
        for service in record.service_breakdown:
            day_costs = history[service.service_name]
            day_costs[record.usage_date] = day_costs.get(record.usage_date, 0.0) + service.cost
    return history


class HistoricalComparator:
    """Flags services whose latest daily cost exceeds the average of their earlier days."""

    def __init__(self, increase_threshold: float = 20.0):
        self.increase_threshold = increase_threshold
        self.logger = logger.bind(analytics="history")

    def compare(self, records: Iterable[DailyCostRecord]) -> Dict[str, str]:
        notes: Dict[str, str] = {}

        for service_name, day_costs in service_history(records).items():
            ordered: List[float] = [day_costs[day] for day in sorted(day_costs)]
            if len(ordered) < 2:
                continue

            current_cost = ordered[-1]
            earlier = ordered[:-1]
            moving_average = sum(earlier) / len(earlier)
            if moving_average <= 0:
                continue

            increase = (current_cost - moving_average) / moving_average * 100
            if increase > self.increase_threshold:
                notes[service_name] = (
                    f"🚨 **{service_name} costs increased by {increase:.2f}%!** "
                    "🔍 Consider reviewing recent changes to this service to understand the spike."
                )
            else:
                notes[service_name] = f"✅ **{service_name} costs are stable and within normal limits.**"

        self.logger.info(f"Historical comparison covered {len(notes)} services")
        return notes
