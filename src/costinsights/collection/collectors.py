"""Collectors wrapping each external source the report reads."""

from datetime import date
from typing import Dict, Any, Iterable, List, Optional

from costinsights.models.cost_models import ChangeEvent, TimeRange, day_window
from .base import BaseCollector


class CostRowsCollector(BaseCollector):
    """Daily per-service cost rows for the requested window."""

    primary = True

    def __init__(self, client, time_range: TimeRange, config: Optional[Dict[str, Any]] = None):
        super().__init__(client, config)
        self.time_range = time_range

    async def collect(self) -> List[List[Any]]:
        return await self.client.query_daily_costs(self.time_range)

    def get_collection_type(self) -> str:
        return "cost_rows"


class BudgetCollector(BaseCollector):
    def __init__(self, client, budget_name: str, config: Optional[Dict[str, Any]] = None):
        super().__init__(client, config)
        self.budget_name = budget_name

    async def collect(self) -> Optional[Dict[str, Any]]:
        return await self.client.get_budget(self.budget_name)

    def empty_result(self) -> Any:
        return None

    def get_collection_type(self) -> str:
        return "budget"


class NetworkInventoryCollector(BaseCollector):
    async def collect(self) -> Dict[str, List[Dict[str, Any]]]:
        return await self.client.discover_network_inventory()

    def empty_result(self) -> Any:
        return {
            'public_ips': [],
            'network_security_groups': [],
            'load_balancers': [],
            'virtual_networks': [],
        }

    def get_collection_type(self) -> str:
        return "network_inventory"


class AdvisorCollector(BaseCollector):
    async def collect(self) -> List[Dict[str, Any]]:
        return await self.client.list_recommendations()

    def get_collection_type(self) -> str:
        return "advisor_recommendations"


class IndustryBenchmarkCollector(BaseCollector):
    def __init__(self, client, service_names: Iterable[str], config: Optional[Dict[str, Any]] = None):
        super().__init__(client, config)
        self.service_names = list(service_names)

    async def collect(self):
        return await self.client.fetch_industry_benchmarks(self.service_names)

    def get_collection_type(self) -> str:
        return "industry_benchmarks"


class MultiCloudBenchmarkCollector(BaseCollector):
    def __init__(self, client, service_names: Iterable[str], config: Optional[Dict[str, Any]] = None):
        super().__init__(client, config)
        self.service_names = list(service_names)

    async def collect(self):
        return await self.client.fetch_multi_cloud_benchmarks(self.service_names)

    def get_collection_type(self) -> str:
        return "multi_cloud_benchmarks"


class ChangeEventCollector(BaseCollector):
    """Activity-log events for the UTC day of one spike."""

    def __init__(self, client, spike_date: date, config: Optional[Dict[str, Any]] = None):
        super().__init__(client, config)
        self.spike_date = spike_date

    async def collect(self) -> List[ChangeEvent]:
        start, end = day_window(self.spike_date)
        return await self.client.get_change_events(start, end)

    def get_collection_type(self) -> str:
        return f"change_events:{self.spike_date.isoformat()}"
