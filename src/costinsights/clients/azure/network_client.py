# src/costinsights/clients/azure/network_client.py
"""Azure Network client for hygiene inventories."""

import asyncio
from typing import Dict, Any, List, Optional
import structlog
from azure.mgmt.network import NetworkManagementClient
from azure.core.exceptions import AzureError

from costinsights.core.base_client import BaseClient
from costinsights.core.exceptions import ClientConnectionException, DataFetchException
from costinsights.core.utils import retry_with_backoff

logger = structlog.get_logger(__name__)

GATEWAY_MARKER = "/virtualNetworkGateways/"


def _resource_names(items) -> List[str]:
    return [item.id.rstrip("/").split("/")[-1] for item in (items or []) if getattr(item, "id", None)]


class NetworkClient(BaseClient):
    """Lists public IPs, NSGs, load balancers and virtual networks across the subscription."""

    def __init__(self, credential, subscription_id: str, config: Optional[Dict[str, Any]] = None):
        super().__init__(config, "NetworkClient")
        self.credential = credential
        self.subscription_id = subscription_id
        self._network_client = None

    async def connect(self) -> None:
        try:
            self._network_client = NetworkManagementClient(
                credential=self.credential,
                subscription_id=self.subscription_id
            )
            self._connected = True
            self.logger.info("Azure Network client connected successfully")
        except Exception as e:
            raise ClientConnectionException("AzureNetwork", f"Connection failed: {e}")

    async def disconnect(self) -> None:
        if self._network_client:
            self._network_client.close()
        self._connected = False
        self.logger.info("Azure Network client disconnected")

    @retry_with_backoff(max_retries=3)
    async def discover_network_inventory(self) -> Dict[str, List[Dict[str, Any]]]:
        """Flattened inventories keyed by resource kind."""
        if not self._connected:
            raise DataFetchException("NetworkManagement", "Client not connected")

        try:
            inventory = await asyncio.to_thread(self._collect_inventory)
        except AzureError as e:
            raise DataFetchException("NetworkManagement", f"Failed to discover network resources: {e}")

        total_resources = sum(len(resources) for resources in inventory.values())
        self.logger.info(f"Discovered {total_resources} network resources")
        return inventory

    def _collect_inventory(self) -> Dict[str, List[Dict[str, Any]]]:
        client = self._network_client
        return {
            'public_ips': [
                {
                    'name': pip.name,
                    'ip_address': pip.ip_address,
                    'ip_configuration': pip.ip_configuration.id if pip.ip_configuration else None,
                }
                for pip in client.public_ip_addresses.list_all()
            ],
            'network_security_groups': [
                {
                    'name': nsg.name,
                    'subnets': _resource_names(nsg.subnets),
                    'network_interfaces': _resource_names(nsg.network_interfaces),
                }
                for nsg in client.network_security_groups.list_all()
            ],
            'load_balancers': [
                {
                    'name': lb.name,
                    'backend_address_pools': [pool.name for pool in (lb.backend_address_pools or [])],
                    'frontend_ip_configurations': [
                        config.name for config in (lb.frontend_ip_configurations or [])
                    ],
                }
                for lb in client.load_balancers.list_all()
            ],
            'virtual_networks': [self._vnet_data(vnet) for vnet in client.virtual_networks.list_all()],
        }

    def _vnet_data(self, vnet) -> Dict[str, Any]:
        gateways = []
        for subnet in vnet.subnets or []:
            for ip_config in subnet.ip_configurations or []:
                config_id = ip_config.id or ""
                if GATEWAY_MARKER in config_id:
                    gateway = config_id.split(GATEWAY_MARKER, 1)[1].split("/")[0]
                    if gateway not in gateways:
                        gateways.append(gateway)

        return {
            'name': vnet.name,
            'peerings': [peering.name for peering in (vnet.virtual_network_peerings or [])],
            'gateways': gateways,
            'subnets': [subnet.name for subnet in (vnet.subnets or [])],
        }
