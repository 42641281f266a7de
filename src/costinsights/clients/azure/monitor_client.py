# src/costinsights/clients/azure/monitor_client.py
"""Azure Monitor client for activity-log change events."""

import asyncio
from datetime import datetime
from typing import Dict, Any, List, Optional
import structlog
from azure.mgmt.monitor import MonitorManagementClient
from azure.core.exceptions import AzureError, ClientAuthenticationError

from costinsights.core.base_client import BaseClient
from costinsights.core.exceptions import ClientConnectionException, DataFetchException
from costinsights.core.utils import retry_with_backoff
from costinsights.models.cost_models import ChangeEvent

logger = structlog.get_logger(__name__)


def _localized(value, display: bool = False) -> str:
    """Activity log fields come back as LocalizableString objects; display text carries the verb (Create, Update)."""
    if value is None:
        return ""
    if display and getattr(value, "localized_value", None):
        return value.localized_value
    return getattr(value, "value", None) or str(value)


class MonitorClient(BaseClient):
    """Reads management-plane change events from the subscription activity log."""

    def __init__(self, credential, subscription_id: str, config: Optional[Dict[str, Any]] = None):
        super().__init__(config, "MonitorClient")
        self.credential = credential
        self.subscription_id = subscription_id
        self._monitor_client = None

    async def connect(self) -> None:
        """Connect to Azure Monitor services."""
        try:
            self._monitor_client = MonitorManagementClient(
                credential=self.credential,
                subscription_id=self.subscription_id
            )
            self._connected = True
            self.logger.info("Azure Monitor client connected successfully")
        except ClientAuthenticationError as e:
            raise ClientConnectionException("AzureMonitor", f"Authentication failed: {e}")
        except Exception as e:
            raise ClientConnectionException("AzureMonitor", f"Connection failed: {e}")

    async def disconnect(self) -> None:
        """Disconnect from Azure Monitor services."""
        if self._monitor_client and hasattr(self._monitor_client, 'close'):
            try:
                self._monitor_client.close()
            except Exception as e:
                self.logger.warning(f"Error closing client: {e}")

        self._connected = False
        self.logger.info("Azure Monitor client disconnected")

    @retry_with_backoff(max_retries=3)
    async def get_change_events(self, start: datetime, end: datetime) -> List[ChangeEvent]:
        """Activity-log events with start <= eventTimestamp <= end."""
        if not self._connected:
            raise DataFetchException("AzureMonitor", "Client not connected")

        event_filter = (
            f"eventTimestamp ge '{start.isoformat()}' and eventTimestamp le '{end.isoformat()}'"
        )

        try:
            events = await asyncio.to_thread(
                lambda: list(self._monitor_client.activity_logs.list(filter=event_filter))
            )
        except AzureError as e:
            raise DataFetchException("AzureMonitor", f"Failed to read activity log: {e}")

        change_events = [self._to_change_event(event) for event in events]
        self.logger.info(
            f"Retrieved {len(change_events)} activity log events",
            start=start.isoformat(),
            end=end.isoformat()
        )
        return change_events

    def _to_change_event(self, event) -> ChangeEvent:
        timestamp = event.event_timestamp
        resource_id = event.resource_id or ""
        return ChangeEvent(
            event_timestamp=timestamp.isoformat() if hasattr(timestamp, "isoformat") else str(timestamp or ""),
            operation_name=_localized(event.operation_name, display=True),
            resource_group=event.resource_group_name or "",
            resource_type=_localized(event.resource_type),
            resource_name=resource_id.rstrip("/").split("/")[-1] if resource_id else "",
        )
