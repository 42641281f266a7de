# src/costinsights/analytics/__init__.py
"""
Cost analytics pipeline stages and the engine that runs them
"""

from .time_range import TimeRangeResolver, extract_period
from .aggregation import DailyCostAggregator, service_totals
from .spike_detection import SpikeDetector, extract_spike_date
from .seasonality import SeasonalityAnalyzer
from .root_cause import RootCauseCorrelator, summarize_change_events
from .benchmarking import BenchmarkComparator
from .budget import BudgetRiskEvaluator, budget_status_from_record
from .history import HistoricalComparator
from .report_assembler import ReportAssembler
from .analytics_engine import CostReportEngine

__all__ = [
    "TimeRangeResolver",
    "extract_period",
    "DailyCostAggregator",
    "service_totals",
    "SpikeDetector",
    "extract_spike_date",
    "SeasonalityAnalyzer",
    "RootCauseCorrelator",
    "summarize_change_events",
    "BenchmarkComparator",
    "BudgetRiskEvaluator",
    "budget_status_from_record",
    "HistoricalComparator",
    "ReportAssembler",
    "CostReportEngine",
]
