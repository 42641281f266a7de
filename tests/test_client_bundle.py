import pytest

from costinsights.clients.azure import AdvisorClient, AzureClientFactory
from costinsights.clients.benchmark import BenchmarkClient
from costinsights.clients.bundle import ReportClients
from conftest import StubAzureClient


@pytest.fixture
def azure_stubs(monkeypatch, settings):
    settings.azure.subscription_id = "00000000-0000-0000-0000-000000000000"
    stubs = {}

    def _create(factory, client_cls):
        fail = client_cls is AdvisorClient
        return stubs.setdefault(client_cls, StubAzureClient(fail=fail))

    monkeypatch.setattr(AzureClientFactory, "_create", _create)
    return stubs


async def test_unavailable_clients_are_left_out(settings, azure_stubs):
    clients = await ReportClients.connect(settings)

    assert clients.advisor is None
    assert clients.monitor is not None
    assert isinstance(clients.benchmark, BenchmarkClient)
    assert len(clients.connection_errors) == 1
    assert clients.connection_errors[0].startswith("advisor: ")

    await clients.close()
    assert all(stub.disconnected for cls, stub in azure_stubs.items() if cls is not AdvisorClient)


async def test_benchmark_connect_failure_keeps_azure_clients_closable(settings, azure_stubs, monkeypatch):
    async def _refuse(self):
        raise OSError("no route to benchmark feed")

    monkeypatch.setattr(BenchmarkClient, "connect", _refuse)

    clients = await ReportClients.connect(settings)

    assert clients.benchmark is None
    assert "benchmark: no route to benchmark feed" in clients.connection_errors
    assert clients.cost.is_connected

    await clients.close()
    assert not clients.cost.is_connected
