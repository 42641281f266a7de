# src/costinsights/analytics/report_assembler.py
"""
Report assembly - merges stage outputs into one CostReport
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Union

import structlog

from costinsights.analytics.aggregation import service_totals
from costinsights.models.cost_models import (
    DailyCostRecord,
    RootCauseEntry,
    SeasonalityPattern,
    SpikeEvent,
    TimeRange,
)
from costinsights.models.report_models import (
    AdvisorInsights,
    BenchmarkComparison,
    BudgetAlert,
    BudgetStatus,
    CostReport,
    MultiCloudBenchmark,
    NetworkFindings,
    UnusedResources,
    VirtualNetwork,
)

logger = structlog.get_logger(__name__)


class ReportAssembler:
    """Every input is optional; anything missing becomes an explicit empty value."""

    def __init__(self, currency: str = "INR", top_services: int = 5):
        self.currency = currency
        self.top_services = top_services
        self.logger = logger.bind(analytics="report")

    def assemble(
        self,
        time_range: Optional[TimeRange] = None,
        daily_costs: Optional[Union[Mapping[object, DailyCostRecord], Iterable[DailyCostRecord]]] = None,
        spikes: Optional[List[SpikeEvent]] = None,
        major_spikes: Optional[List[SpikeEvent]] = None,
        seasonality: Optional[List[SeasonalityPattern]] = None,
        root_causes: Optional[List[RootCauseEntry]] = None,
        historical_comparison: Optional[Dict[str, str]] = None,
        budget: Optional[BudgetStatus] = None,
        budget_alert: Optional[BudgetAlert] = None,
        benchmark_comparisons: Optional[List[BenchmarkComparison]] = None,
        multi_cloud_benchmarks: Optional[List[MultiCloudBenchmark]] = None,
        unused_resources: Optional[UnusedResources] = None,
        underutilized_vms: Optional[AdvisorInsights] = None,
        grafana: Optional[AdvisorInsights] = None,
        cognitive_services: Optional[AdvisorInsights] = None,
        virtual_networks: Optional[List[VirtualNetwork]] = None,
        network_findings: Optional[NetworkFindings] = None,
        collection_errors: Optional[List[str]] = None,
    ) -> CostReport:
        if isinstance(daily_costs, Mapping):
            records = list(daily_costs.values())
        else:
            records = list(daily_costs or [])
        records.sort(key=lambda record: record.usage_date)

        breakdown = [
            service for service in service_totals(records, self.currency)
            if service.cost > 0
        ]
        spikes = list(spikes or [])

        report = CostReport(
            total_cost=sum(record.total_cost for record in records),
            currency=self.currency,
            period=time_range.label if time_range else "",
            top_services=breakdown[:self.top_services],
            service_breakdown=breakdown,
            daily_costs=records,
            cost_spikes=[spike.description for spike in spikes],
            spike_events=spikes,
            major_cost_spikes=[spike.description for spike in (major_spikes or [])],
            seasonality=list(seasonality or []),
            root_cause_analysis=list(root_causes or []),
            historical_comparison=dict(historical_comparison or {}),
            budget=budget or BudgetStatus(),
            budget_alert=budget_alert or BudgetAlert(),
            benchmark_comparisons=list(benchmark_comparisons or []),
            multi_cloud_benchmarks=list(multi_cloud_benchmarks or []),
            unused_resources=unused_resources or UnusedResources(),
            underutilized_vms=underutilized_vms or AdvisorInsights(),
            grafana=grafana or AdvisorInsights(),
            cognitive_services=cognitive_services or AdvisorInsights(),
            virtual_networks=list(virtual_networks or []),
            network_findings=network_findings or NetworkFindings(),
            collection_errors=list(collection_errors or []),
            generated_at=datetime.now(timezone.utc).isoformat(),
        )

        self.logger.info(
            "Cost report assembled",
            period=report.period,
            total_cost=round(report.total_cost, 2),
            spikes=len(report.cost_spikes),
            degraded_sources=len(report.collection_errors)
        )
        return report
