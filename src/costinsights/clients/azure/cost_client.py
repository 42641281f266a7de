# src/costinsights/clients/azure/cost_client.py
"""Azure Cost Management client for daily per-service cost rows."""

import asyncio
from datetime import datetime, time, timezone
from typing import Dict, Any, List, Optional
import structlog
from azure.mgmt.costmanagement import CostManagementClient
from azure.mgmt.costmanagement.models import (
    QueryDefinition, QueryDataset, QueryAggregation, QueryGrouping,
    QueryTimePeriod, TimeframeType, GranularityType
)
from azure.core.exceptions import AzureError

from costinsights.core.base_client import BaseClient
from costinsights.core.exceptions import ClientConnectionException, DataFetchException
from costinsights.core.utils import retry_with_backoff
from costinsights.models.cost_models import Timeframe, TimeRange

logger = structlog.get_logger(__name__)

COST_COLUMNS = ("Cost", "PreTaxCost", "CostUSD")
DATE_COLUMN = "UsageDate"
SERVICE_COLUMN = "ServiceName"


class CostClient(BaseClient):
    """Azure Cost Management client."""

    def __init__(self, credential, subscription_id: str, config: Optional[Dict[str, Any]] = None):
        super().__init__(config, "CostClient")
        self.credential = credential
        self.subscription_id = subscription_id
        self._client = None

    @property
    def scope(self) -> str:
        return f"/subscriptions/{self.subscription_id}"

    async def connect(self) -> None:
        """Connect to Cost Management service."""
        try:
            self._client = CostManagementClient(credential=self.credential)
            self._connected = True
            self.logger.info("Cost Management client connected successfully")
        except Exception as e:
            raise ClientConnectionException("CostManagement", f"Connection failed: {e}")

    async def disconnect(self) -> None:
        """Disconnect from Cost Management service."""
        if self._client:
            self._client.close()
            self._connected = False
            self.logger.info("Cost Management client disconnected")

    def build_query(self, time_range: TimeRange) -> QueryDefinition:
        """ActualCost query, daily granularity, summed cost grouped by service."""
        dataset = QueryDataset(
            granularity=GranularityType.DAILY,
            aggregation={"totalCost": QueryAggregation(name="Cost", function="Sum")},
            grouping=[QueryGrouping(type="Dimension", name=SERVICE_COLUMN)]
        )

        if time_range.timeframe == Timeframe.MONTH_TO_DATE:
            return QueryDefinition(type="ActualCost", timeframe=TimeframeType.MONTH_TO_DATE, dataset=dataset)

        # Year to date has no timeframe token in the query API, so it goes out as a custom window
        start, end = time_range.window()
        return QueryDefinition(
            type="ActualCost",
            timeframe=TimeframeType.CUSTOM,
            time_period=QueryTimePeriod(
                from_property=datetime.combine(start, time.min, tzinfo=timezone.utc),
                to=datetime.combine(end, time.max, tzinfo=timezone.utc)
            ),
            dataset=dataset
        )

    @retry_with_backoff(max_retries=3)
    async def query_daily_costs(self, time_range: TimeRange) -> List[List[Any]]:
        """Return raw rows as [cost, dateKey, serviceName]."""
        if not self._connected:
            raise DataFetchException("CostManagement", "Client not connected")

        try:
            self.logger.info(f"Querying daily costs for {time_range.label}")
            response = await asyncio.to_thread(
                self._client.query.usage, self.scope, self.build_query(time_range)
            )
        except AzureError as e:
            self.logger.error("Failed to query daily costs", error=str(e))
            raise DataFetchException("CostManagement", f"Failed to get costs: {e}")

        rows = self._extract_rows(response)
        self.logger.info(f"Received {len(rows)} cost rows")
        return rows

    def _extract_rows(self, response) -> List[List[Any]]:
        if not getattr(response, "rows", None):
            self.logger.warning("No cost data returned")
            return []

        names = [column.name for column in (getattr(response, "columns", None) or [])]
        cost_index = next((names.index(name) for name in COST_COLUMNS if name in names), 0)
        date_index = names.index(DATE_COLUMN) if DATE_COLUMN in names else 1
        service_index = names.index(SERVICE_COLUMN) if SERVICE_COLUMN in names else 2

        rows = []
        for row in response.rows:
            try:
                rows.append([row[cost_index], row[date_index], row[service_index]])
            except (IndexError, TypeError) as e:
                self.logger.warning(f"Error processing cost row: {e}")
        return rows
