"""
Shared fixtures for the cost insights test suite.

Azure and benchmark clients are replaced by in-memory fakes exposing the
same coroutine methods the collectors call.
"""

import asyncio
from datetime import date

import pytest

from costinsights.analytics.aggregation import DailyCostAggregator
from costinsights.clients.bundle import ReportClients
from costinsights.config.settings import Settings
from costinsights.core.base_client import BaseClient
from costinsights.core.exceptions import DataFetchException
from costinsights.models.cost_models import ChangeEvent
from costinsights.models.report_models import IndustryBenchmark, MultiCloudBenchmark


class StubAzureClient(BaseClient):
    def __init__(self, fail: bool = False, ready: bool = True):
        super().__init__(name="stub")
        self.fail = fail
        self.ready = ready
        self.disconnected = False

    async def connect(self):
        if self.fail:
            raise RuntimeError("endpoint unreachable")
        self._connected = self.ready

    async def disconnect(self):
        self.disconnected = True
        self._connected = False


class FakeCostClient:
    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.calls = []

    async def query_daily_costs(self, time_range):
        self.calls.append(time_range)
        if self.error:
            raise self.error
        return list(self.rows)


class FakeConsumptionClient:
    def __init__(self, budget=None, error=None):
        self.budget = budget
        self.error = error

    async def get_budget(self, budget_name):
        if self.error:
            raise self.error
        return self.budget


class FakeMonitorClient:
    def __init__(self, events=None, delay=0.0):
        self.events = events or []
        self.delay = delay
        self.windows = []

    async def get_change_events(self, start, end):
        self.windows.append((start, end))
        if self.delay:
            await asyncio.sleep(self.delay)
        return list(self.events)


class FakeNetworkClient:
    def __init__(self, inventory=None, error=None):
        self.inventory = inventory or {}
        self.error = error

    async def discover_network_inventory(self):
        if self.error:
            raise self.error
        return self.inventory


class FakeAdvisorClient:
    def __init__(self, recommendations=None):
        self.recommendations = recommendations or []

    async def list_recommendations(self):
        return list(self.recommendations)


class FakeBenchmarkClient:
    def __init__(self, industry=None, multi_cloud=None, error=None):
        self.industry = industry or []
        self.multi_cloud = multi_cloud or []
        self.error = error
        self.disconnected = False

    async def fetch_industry_benchmarks(self, service_names):
        if self.error:
            raise self.error
        return [benchmark for benchmark in self.industry if benchmark.service in service_names]

    async def fetch_multi_cloud_benchmarks(self, service_names):
        return [benchmark for benchmark in self.multi_cloud if benchmark.service in service_names]

    async def disconnect(self):
        self.disconnected = True


@pytest.fixture
def settings(monkeypatch):
    for name in ("AZURE_SUBSCRIPTION_ID", "CLOUD_BENCHMARK_API_KEY", "LOG_LEVEL", "LOG_FORMAT", "DEBUG", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
    return Settings(_env_file=None)


@pytest.fixture
def today():
    return date(2024, 3, 15)


@pytest.fixture
def cost_rows():
    """Three days of rows; the third day jumps from 100 to 200."""
    return [
        [60.0, 20240301, "Virtual Machines"],
        [40.0, 20240301, "Storage"],
        [60.0, 20240302, "Virtual Machines"],
        [40.0, 20240302, "Storage"],
        [150.0, 20240303, "Virtual Machines"],
        [50.0, 20240303, "Storage"],
        [0.0, 20240303, "Bandwidth"],
    ]


@pytest.fixture
def daily_records(cost_rows):
    return list(DailyCostAggregator().aggregate(cost_rows).values())


@pytest.fixture
def make_records():
    """Consecutive daily records with one service each."""
    def _make(costs, start=date(2024, 3, 1), service="Storage"):
        rows = []
        for offset, cost in enumerate(costs):
            day = date.fromordinal(start.toordinal() + offset)
            rows.append([cost, day.strftime("%Y%m%d"), service])
        return list(DailyCostAggregator().aggregate(rows).values())
    return _make


@pytest.fixture
def change_events():
    return [
        ChangeEvent(
            eventTimestamp="2024-03-03T10:15:00.1234567Z",
            operationName="Create or Update Virtual Machine",
            resourceGroup="rg-prod",
            resourceType="Microsoft.Compute/virtualMachines",
            resourceName="vm-batch-01",
        ),
        ChangeEvent(
            eventTimestamp="2024-03-03T11:00:00Z",
            operationName="Delete Virtual Machine",
            resourceGroup="rg-prod",
            resourceType="Microsoft.Compute/virtualMachines",
            resourceName="vm-old",
        ),
    ]


@pytest.fixture
def network_inventory():
    return {
        'public_ips': [
            {'name': 'pip-orphan', 'ip_configuration': None},
            {'name': 'pip-used', 'ip_configuration': '/subscriptions/x/ipConfigurations/cfg'},
        ],
        'network_security_groups': [
            {'name': 'nsg-orphan', 'subnets': [], 'network_interfaces': []},
            {'name': 'nsg-used', 'subnets': ['default'], 'network_interfaces': []},
        ],
        'load_balancers': [
            {'name': 'lb-orphan', 'backend_address_pools': [], 'frontend_ip_configurations': []},
        ],
        'virtual_networks': [
            {'name': 'vnet-hub', 'peerings': ['hub-to-spoke'], 'gateways': ['vpn-gw'], 'subnets': ['GatewaySubnet']},
            {'name': 'vnet-lonely', 'peerings': [], 'gateways': [], 'subnets': []},
        ],
    }


@pytest.fixture
def advisor_recommendations():
    return [
        {
            'category': 'Performance',
            'impacted_field': 'Microsoft.Compute/virtualMachines',
            'impacted_value': 'vm-idle-01',
            'short_description': {
                'problem': 'Underutilized virtual machine detected',
                'solution': 'Resize or shut down the VM',
            },
        },
        {
            'category': 'Cost',
            'impacted_field': 'Microsoft.Dashboard/grafana',
            'impacted_value': 'grafana-main',
            'short_description': {'problem': 'Unused dashboards', 'solution': 'Downgrade the SKU'},
        },
    ]


@pytest.fixture
def report_clients(cost_rows, change_events, network_inventory, advisor_recommendations):
    return ReportClients(
        cost=FakeCostClient(cost_rows),
        consumption=FakeConsumptionClient({
            'amount': 1000.0,
            'currentSpend': {'amount': 950.0},
            'forecastSpend': {'amount': 1000.0},
        }),
        monitor=FakeMonitorClient(change_events),
        network=FakeNetworkClient(network_inventory),
        advisor=FakeAdvisorClient(advisor_recommendations),
        benchmark=FakeBenchmarkClient(
            industry=[IndustryBenchmark(
                service="Storage", average_cost_per_unit=100.0, unit_type="GB",
                percentile50=90.0, percentile90=120.0,
            )],
            multi_cloud=[MultiCloudBenchmark(
                service="Virtual Machines", azure_cost=12300, aws_cost=9800, gcp_cost=10500,
            )],
        ),
    )


@pytest.fixture
def failing_cost_clients(report_clients):
    report_clients.cost = FakeCostClient(error=DataFetchException("CostManagement", "quota exceeded"))
    return report_clients
