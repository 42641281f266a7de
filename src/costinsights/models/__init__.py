from .cost_models import *
from .report_models import *

__all__ = [
    "Timeframe",
    "TimeRange",
    "ServiceCost",
    "DailyCostRecord",
    "SpikeEvent",
    "SeasonalityKind",
    "SeasonalityPattern",
    "ChangeEvent",
    "RootCauseEntry",
    "day_window",
    "BenchmarkSeverity",
    "IndustryBenchmark",
    "MultiCloudBenchmark",
    "BenchmarkComparison",
    "BudgetAlertLevel",
    "BudgetStatus",
    "BudgetAlert",
    "UnusedResources",
    "VirtualNetwork",
    "TrafficSpike",
    "NetworkFindings",
    "AdvisorInsights",
    "CostReport",
]
