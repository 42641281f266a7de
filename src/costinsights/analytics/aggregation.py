# src/costinsights/analytics/aggregation.py
"""
Daily cost aggregation - raw Cost Management rows to per-day records
"""

from collections import OrderedDict
from datetime import date
from typing import Any, Dict, Iterable, List, Sequence

import structlog

from costinsights.core.utils import parse_cost, parse_usage_date
from costinsights.models.cost_models import DailyCostRecord, ServiceCost

logger = structlog.get_logger(__name__)


class DailyCostAggregator:
    """Groups (cost, dateKey, serviceName) rows into one record per calendar date."""

    def __init__(self, currency: str = "INR"):
        self.currency = currency
        self.logger = logger.bind(analytics="aggregation")

    def aggregate(self, rows: Iterable[Sequence[Any]]) -> "OrderedDict[date, DailyCostRecord]":
        """Aggregate raw rows; result is keyed by date in ascending order."""
        breakdowns: Dict[date, List[ServiceCost]] = {}
        skipped = 0

        for row in rows:
            try:
                raw_cost, raw_date, service_name = row[0], row[1], row[2]
            except (IndexError, TypeError, KeyError):
                self.logger.warning(f"Malformed cost row skipped: {row!r}")
                skipped += 1
                continue

            usage_date = parse_usage_date(raw_date)
            if usage_date is None:
                self.logger.warning(f"Cost row with unparsable date skipped: {raw_date!r}")
                skipped += 1
                continue

            cost = parse_cost(raw_cost)
            breakdowns.setdefault(usage_date, []).append(
                ServiceCost(service_name=str(service_name), cost=cost, currency=self.currency)
            )

        daily = OrderedDict()
        for usage_date in sorted(breakdowns):
            breakdown = tuple(breakdowns[usage_date])
            daily[usage_date] = DailyCostRecord(
                usage_date=usage_date,
                total_cost=sum(service.cost for service in breakdown),
                service_breakdown=breakdown,
            )

        self.logger.info(
            "Daily cost aggregation completed",
            days=len(daily),
            skipped_rows=skipped
        )
        return daily


def service_totals(records: Iterable[DailyCostRecord], currency: str = "INR") -> List[ServiceCost]:
    """Per-service totals across records, highest cost first."""
    totals: Dict[str, float] = {}
    for record in records:
        for service in record.service_breakdown:
            totals[service.service_name] = totals.get(service.service_name, 0.0) + service.cost

    return [
        ServiceCost(service_name=name, cost=cost, currency=currency)
        for name, cost in sorted(totals.items(), key=lambda item: item[1], reverse=True)
    ]
