# src/costinsights/clients/azure/advisor_client.py
"""Azure Advisor client."""

import asyncio
from typing import Dict, Any, List, Optional
import structlog
from azure.mgmt.advisor import AdvisorManagementClient
from azure.core.exceptions import AzureError

from costinsights.core.base_client import BaseClient
from costinsights.core.exceptions import ClientConnectionException, DataFetchException
from costinsights.core.utils import retry_with_backoff

logger = structlog.get_logger(__name__)


class AdvisorClient(BaseClient):
    """Lists Advisor recommendations for the subscription."""

    def __init__(self, credential, subscription_id: str, config: Optional[Dict[str, Any]] = None):
        super().__init__(config, "AdvisorClient")
        self.credential = credential
        self.subscription_id = subscription_id
        self._client = None

    async def connect(self) -> None:
        try:
            self._client = AdvisorManagementClient(
                credential=self.credential,
                subscription_id=self.subscription_id
            )
            self._connected = True
            self.logger.info("Advisor client connected successfully")
        except Exception as e:
            raise ClientConnectionException("Advisor", f"Connection failed: {e}")

    async def disconnect(self) -> None:
        if self._client:
            self._client.close()
            self._connected = False
            self.logger.info("Advisor client disconnected")

    @retry_with_backoff(max_retries=3)
    async def list_recommendations(self) -> List[Dict[str, Any]]:
        if not self._connected:
            raise DataFetchException("Advisor", "Client not connected")

        try:
            recommendations = await asyncio.to_thread(lambda: list(self._client.recommendations.list()))
        except AzureError as e:
            raise DataFetchException("Advisor", f"Failed to list recommendations: {e}")

        results = []
        for rec in recommendations:
            short = rec.short_description
            results.append({
                'category': rec.category,
                'impacted_field': rec.impacted_field,
                'impacted_value': rec.impacted_value,
                'impact': rec.impact,
                'short_description': {
                    'problem': short.problem if short else None,
                    'solution': short.solution if short else None,
                },
            })

        self.logger.info(f"Retrieved {len(results)} Advisor recommendations")
        return results
