# src/costinsights/clients/azure/consumption_client.py
"""Azure Consumption client for budget records."""

import asyncio
from typing import Dict, Any, Optional
import structlog
from azure.mgmt.consumption import ConsumptionManagementClient
from azure.core.exceptions import AzureError, ResourceNotFoundError

from costinsights.core.base_client import BaseClient
from costinsights.core.exceptions import ClientConnectionException, DataFetchException
from costinsights.core.utils import retry_with_backoff

logger = structlog.get_logger(__name__)


def _spend(spend) -> Dict[str, Any]:
    if spend is None:
        return {"amount": 0.0, "unit": None}
    return {"amount": float(spend.amount or 0.0), "unit": spend.unit}


class ConsumptionClient(BaseClient):
    """Reads a named consumption budget."""

    def __init__(self, credential, subscription_id: str, config: Optional[Dict[str, Any]] = None):
        super().__init__(config, "ConsumptionClient")
        self.credential = credential
        self.subscription_id = subscription_id
        self._client = None

    async def connect(self) -> None:
        try:
            self._client = ConsumptionManagementClient(
                credential=self.credential,
                subscription_id=self.subscription_id
            )
            self._connected = True
            self.logger.info("Consumption client connected successfully")
        except Exception as e:
            raise ClientConnectionException("Consumption", f"Connection failed: {e}")

    async def disconnect(self) -> None:
        if self._client:
            self._client.close()
            self._connected = False
            self.logger.info("Consumption client disconnected")

    @retry_with_backoff(max_retries=3)
    async def get_budget(self, budget_name: str) -> Optional[Dict[str, Any]]:
        """Budget record in the flat shape the budget evaluator reads; None if it does not exist."""
        if not self._connected:
            raise DataFetchException("Consumption", "Client not connected")

        scope = f"/subscriptions/{self.subscription_id}"
        try:
            budget = await asyncio.to_thread(self._client.budgets.get, scope, budget_name)
        except ResourceNotFoundError:
            self.logger.warning(f"Budget {budget_name} not found")
            return None
        except AzureError as e:
            raise DataFetchException("Consumption", f"Failed to get budget {budget_name}: {e}")

        time_period = budget.time_period
        return {
            "name": budget.name,
            "amount": float(budget.amount or 0.0),
            "timeGrain": budget.time_grain,
            "timePeriod": {
                "startDate": time_period.start_date.isoformat() if time_period and time_period.start_date else None,
                "endDate": time_period.end_date.isoformat() if time_period and time_period.end_date else None,
            },
            "currentSpend": _spend(budget.current_spend),
            "forecastSpend": _spend(budget.forecast_spend),
        }
