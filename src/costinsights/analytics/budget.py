# src/costinsights/analytics/budget.py
"""
Budget risk evaluation
"""

from typing import Any, Mapping, Optional

import structlog

from costinsights.core.utils import format_currency, parse_cost, safe_get
from costinsights.models.report_models import BudgetAlert, BudgetAlertLevel, BudgetStatus

logger = structlog.get_logger(__name__)

URGENT_UTILIZATION_PERCENTAGE = 90.0


def budget_status_from_record(record: Optional[Mapping[str, Any]]) -> BudgetStatus:
    """
    Build a BudgetStatus from a raw budget record.

    Accepts the flat shape ``{amount, currentSpend: {amount}, forecastSpend: {amount}}``
    as well as the ARM shape with the same fields nested under ``properties``.
    A missing record yields an all-zero status.
    """
    if not record:
        return BudgetStatus()

    source = record.get("properties") or record
    return BudgetStatus(
        amount=parse_cost(safe_get(source, "amount", 0)),
        current_spend=parse_cost(safe_get(source, "currentSpend.amount", 0)),
        forecast_spend=parse_cost(safe_get(source, "forecastSpend.amount", 0)),
    )


class BudgetRiskEvaluator:
    """Two-tier budget alerting; the first matching tier wins."""

    def __init__(self, currency_symbol: str = "₹"):
        self.currency_symbol = currency_symbol
        self.logger = logger.bind(analytics="budget")

    def evaluate(self, status: BudgetStatus) -> BudgetAlert:
        if status.amount <= 0:
            return BudgetAlert()

        symbol = self.currency_symbol
        utilization = status.utilization_percentage

        if utilization >= URGENT_UTILIZATION_PERCENTAGE:
            alert = BudgetAlert(
                level=BudgetAlertLevel.LOW_REMAINING,
                message=(
                    f"🚨 **Alert**: You have used **{utilization:.2f}%** of your budget. "
                    f"Only **{format_currency(status.remaining, symbol)}** remains. "
                    "Consider optimizing your spending to avoid exceeding your budget."
                ),
            )
        elif status.is_over_budget:
            overage = status.forecast_spend - status.amount
            alert = BudgetAlert(
                level=BudgetAlertLevel.FORECAST_OVER,
                message=(
                    f"🚨 **Alert**: Your forecasted spend ({format_currency(status.forecast_spend, symbol)}) "
                    f"exceeds your budget ({format_currency(status.amount, symbol)}) by "
                    f"**{format_currency(overage, symbol)}**. Take immediate action to reduce costs."
                ),
            )
        else:
            alert = BudgetAlert()

        if alert.level != BudgetAlertLevel.NONE:
            self.logger.warning("Budget alert raised", level=alert.level.value, utilization=round(utilization, 2))
        return alert
