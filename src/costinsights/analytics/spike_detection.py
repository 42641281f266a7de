# src/costinsights/analytics/spike_detection.py
"""
Cost spike detection - day-over-day jumps in the daily cost series
"""

import re
from datetime import date
from typing import Iterable, List, Optional

import structlog

from costinsights.core.utils import format_currency
from costinsights.models.cost_models import DailyCostRecord, SpikeEvent

logger = structlog.get_logger(__name__)

_DESCRIPTOR_DATE = re.compile(r"\*\*(\d{4}-\d{2}-\d{2})\*\*")


class SpikeDetector:
    """
    Flags every day whose increase over the previous day reaches the
    percentage OR the absolute threshold. Consecutive spikes are all reported.
    """

    def __init__(self, percentage_threshold: float = 5.0, absolute_threshold: float = 50.0,
                 currency_symbol: str = "₹"):
        self.percentage_threshold = percentage_threshold
        self.absolute_threshold = absolute_threshold
        self.currency_symbol = currency_symbol
        self.logger = logger.bind(analytics="spikes")

    def detect(self, records: Iterable[DailyCostRecord]) -> List[SpikeEvent]:
        ordered = sorted(records, key=lambda record: record.usage_date)
        spikes: List[SpikeEvent] = []

        for previous, current in zip(ordered, ordered[1:]):
            previous_cost = previous.total_cost
            current_cost = current.total_cost

            # A zero baseline is replaced by 1 so the percentage stays finite
            percentage_increase = (current_cost - previous_cost) / (previous_cost or 1) * 100
            absolute_increase = current_cost - previous_cost

            if (percentage_increase >= self.percentage_threshold
                    or absolute_increase >= self.absolute_threshold):
                affected = tuple(current.active_services)
                spikes.append(SpikeEvent(
                    spike_date=current.usage_date,
                    previous_cost=previous_cost,
                    current_cost=current_cost,
                    percentage_increase=percentage_increase,
                    absolute_increase=absolute_increase,
                    affected_services=affected,
                    description=self._describe(
                        current.usage_date, percentage_increase, previous_cost, current_cost, affected
                    ),
                ))

        self.logger.info(
            f"Detected {len(spikes)} cost spikes",
            days=len(ordered),
            percentage_threshold=self.percentage_threshold,
            absolute_threshold=self.absolute_threshold
        )
        return spikes

    def _describe(self, spike_date: date, percentage_increase: float, previous_cost: float,
                  current_cost: float, affected) -> str:
        symbol = self.currency_symbol
        services = ", ".join(
            f"**{service.service_name}**: {format_currency(service.cost, symbol)}"
            for service in affected
        )
        return (
            f"🚀 **{spike_date.isoformat()}**: Cost spiked by {percentage_increase:.2f}% "
            f"({format_currency(previous_cost, symbol)} → {format_currency(current_cost, symbol)})"
            f" - Services: {services}"
        )


def extract_spike_date(description: str) -> Optional[date]:
    """Recover the spike date embedded in a formatted spike descriptor."""
    match = _DESCRIPTOR_DATE.search(description or "")
    if not match:
        return None
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        return None
