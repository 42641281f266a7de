from .base import BaseCollector, CollectionResult
from .collectors import (
    AdvisorCollector,
    BudgetCollector,
    ChangeEventCollector,
    CostRowsCollector,
    IndustryBenchmarkCollector,
    MultiCloudBenchmarkCollector,
    NetworkInventoryCollector,
)
from .orchestrator import CollectionOrchestrator

__all__ = [
    "BaseCollector",
    "CollectionResult",
    "CollectionOrchestrator",
    "AdvisorCollector",
    "BudgetCollector",
    "ChangeEventCollector",
    "CostRowsCollector",
    "IndustryBenchmarkCollector",
    "MultiCloudBenchmarkCollector",
    "NetworkInventoryCollector",
]
