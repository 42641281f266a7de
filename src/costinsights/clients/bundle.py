"""Connected client set for one report run."""

from dataclasses import dataclass, field
from typing import Any, List, Optional
import structlog

from .azure.client_factory import AzureClientFactory
from .benchmark.benchmark_client import BenchmarkClient

logger = structlog.get_logger(__name__)


@dataclass
class ReportClients:
    """
    Only the cost client is mandatory. Any other client left as None simply
    means that enrichment is not collected; connection_errors says why.
    """

    cost: Any
    consumption: Any = None
    monitor: Any = None
    network: Any = None
    advisor: Any = None
    benchmark: Any = None
    factory: Optional[AzureClientFactory] = None
    connection_errors: List[str] = field(default_factory=list)

    @classmethod
    async def connect(cls, settings) -> "ReportClients":
        """Create and connect the Azure clients plus the benchmark feed client."""
        factory = AzureClientFactory(settings.azure.model_dump())
        azure_clients = await factory.create_all_clients()
        errors = [f"{name}: {error}" for name, error in factory.connection_errors.items()]

        benchmark = BenchmarkClient.from_settings(settings.benchmark)
        try:
            await benchmark.connect()
        except Exception as e:
            logger.warning("Benchmark client unavailable", error=str(e))
            await benchmark.disconnect()
            errors.append(f"benchmark: {e}")
            benchmark = None

        connected = [client for client in azure_clients.values() if client is not None]
        logger.info(
            "Report clients connected",
            clients=len(connected) + (benchmark is not None),
            skipped=len(errors)
        )
        return cls(
            cost=azure_clients["cost"],
            consumption=azure_clients["consumption"],
            monitor=azure_clients["monitor"],
            network=azure_clients["network"],
            advisor=azure_clients["advisor"],
            benchmark=benchmark,
            factory=factory,
            connection_errors=errors,
        )

    async def close(self) -> None:
        if self.benchmark is not None:
            await self.benchmark.disconnect()
        if self.factory is not None:
            await self.factory.disconnect_all()
