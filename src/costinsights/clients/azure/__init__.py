"""Azure service clients."""

from .advisor_client import AdvisorClient
from .client_factory import AzureClientFactory
from .consumption_client import ConsumptionClient
from .cost_client import CostClient
from .monitor_client import MonitorClient
from .network_client import NetworkClient

__all__ = [
    "AdvisorClient",
    "AzureClientFactory",
    "ConsumptionClient",
    "CostClient",
    "MonitorClient",
    "NetworkClient",
]
