# src/costinsights/clients/azure/client_factory.py
"""Azure client factory for creating and managing Azure service clients."""

from typing import Dict, Any
import structlog
from azure.identity import DefaultAzureCredential, ClientSecretCredential

from costinsights.core.exceptions import ClientConnectionException, ConfigurationException
from .advisor_client import AdvisorClient
from .consumption_client import ConsumptionClient
from .cost_client import CostClient
from .monitor_client import MonitorClient
from .network_client import NetworkClient

logger = structlog.get_logger(__name__)

REQUIRED_CLIENT = "cost"


class AzureClientFactory:
    """Factory for creating Azure service clients."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.subscription_id = config.get("subscription_id")
        self.tenant_id = config.get("tenant_id")
        self.client_id = config.get("client_id")
        self.client_secret = config.get("client_secret")

        if not self.subscription_id:
            raise ConfigurationException("Azure subscription_id is required")

        self._credential = None
        self._clients = {}
        self.connection_errors: Dict[str, str] = {}
        self.logger = logger.bind(factory="azure")

    def _get_credential(self):
        """Get Azure credential based on configuration."""
        if self._credential:
            return self._credential

        try:
            if self.client_id and self.client_secret and self.tenant_id:
                self._credential = ClientSecretCredential(
                    tenant_id=self.tenant_id,
                    client_id=self.client_id,
                    client_secret=self.client_secret
                )
                self.logger.info("Using service principal authentication")
            else:
                # Managed identity, CLI login, environment variables
                self._credential = DefaultAzureCredential()
                self.logger.info("Using default credential chain")

            return self._credential

        except Exception as e:
            raise ClientConnectionException("Azure", f"Failed to create credential: {e}")

    def _create(self, client_cls):
        return client_cls(
            credential=self._get_credential(),
            subscription_id=self.subscription_id,
            config=self.config
        )

    def create_cost_client(self) -> CostClient:
        return self._create(CostClient)

    def create_consumption_client(self) -> ConsumptionClient:
        return self._create(ConsumptionClient)

    def create_monitor_client(self) -> MonitorClient:
        return self._create(MonitorClient)

    def create_network_client(self) -> NetworkClient:
        return self._create(NetworkClient)

    def create_advisor_client(self) -> AdvisorClient:
        return self._create(AdvisorClient)

    async def create_all_clients(self) -> Dict[str, Any]:
        """
        Create and connect every Azure client the report needs.

        Only the cost client is required. An enrichment client that fails to
        connect comes back as None and its error is kept in connection_errors.
        """
        clients = {
            "cost": self.create_cost_client(),
            "consumption": self.create_consumption_client(),
            "monitor": self.create_monitor_client(),
            "network": self.create_network_client(),
            "advisor": self.create_advisor_client(),
        }

        connected: Dict[str, Any] = {}
        self.connection_errors = {}
        for name, client in clients.items():
            try:
                await client.connect()
                if not await client.health_check():
                    raise ClientConnectionException(name, "client not ready after connect")
                self.logger.info(f"Connected {name} client successfully")
                connected[name] = client
            except Exception as e:
                if name == REQUIRED_CLIENT:
                    self.logger.error(f"Failed to connect {name} client", error=str(e))
                    self._clients = connected
                    await self.disconnect_all()
                    raise ClientConnectionException(name, str(e))
                self.logger.warning(f"Skipping {name} client, connection failed", error=str(e))
                self.connection_errors[name] = str(e)
                connected[name] = None

        self._clients = {name: client for name, client in connected.items() if client is not None}
        return connected

    async def disconnect_all(self) -> None:
        """Disconnect all clients (for cleanup)."""
        for name, client in self._clients.items():
            try:
                await client.disconnect()
                self.logger.info(f"Disconnected {name} client successfully")
            except Exception as e:
                self.logger.warning(f"Error disconnecting {name} client: {e}")

        self._clients = {}
        self.logger.info("Azure client factory cleanup completed")
