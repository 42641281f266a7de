# src/costinsights/analytics/analytics_engine.py
"""
Cost Report Engine
Runs the full pipeline for one request: resolve the window, fetch, analyze, assemble
"""

from datetime import date
from typing import Any, Dict, List, Mapping, Optional
import structlog

from costinsights.analytics.aggregation import DailyCostAggregator, service_totals
from costinsights.analytics.benchmarking import BenchmarkComparator
from costinsights.analytics.budget import BudgetRiskEvaluator, budget_status_from_record
from costinsights.analytics.history import HistoricalComparator
from costinsights.analytics.hygiene import (
    COGNITIVE_SERVICES_RESOURCE_TYPE,
    GRAFANA_RESOURCE_TYPE,
    build_network_findings,
    find_unused_resources,
    service_recommendations,
    summarize_virtual_networks,
    underutilized_vm_recommendations,
)
from costinsights.analytics.report_assembler import ReportAssembler
from costinsights.analytics.root_cause import RootCauseCorrelator, spike_dates
from costinsights.analytics.seasonality import SeasonalityAnalyzer
from costinsights.analytics.spike_detection import SpikeDetector
from costinsights.analytics.time_range import TimeRangeResolver, extract_period
from costinsights.collection import (
    AdvisorCollector,
    BudgetCollector,
    ChangeEventCollector,
    CollectionOrchestrator,
    CollectionResult,
    CostRowsCollector,
    IndustryBenchmarkCollector,
    MultiCloudBenchmarkCollector,
    NetworkInventoryCollector,
)
from costinsights.config.settings import Settings
from costinsights.core.exceptions import CostDataFetchException
from costinsights.models.cost_models import TimeRange
from costinsights.models.report_models import CostReport

logger = structlog.get_logger(__name__)

COST_ROWS = "cost_rows"


class CostReportEngine:
    """
    Builds a CostReport from a period phrase or a free-form question.

    Only the primary cost feed is required. Every other source degrades to an
    empty value and is named in the report's collection_errors.
    """

    def __init__(self, settings: Settings, clients):
        self.settings = settings
        self.clients = clients
        self.logger = logger.bind(engine="cost_report")

        analytics = settings.analytics
        self.aggregator = DailyCostAggregator(analytics.currency)
        self.spike_detector = SpikeDetector(
            analytics.spike_percentage_threshold,
            analytics.spike_absolute_threshold,
            analytics.currency_symbol
        )
        self.major_spike_detector = SpikeDetector(
            analytics.strict_spike_percentage_threshold,
            analytics.strict_spike_absolute_threshold,
            analytics.currency_symbol
        )
        self.seasonality_analyzer = SeasonalityAnalyzer(analytics.seasonality_threshold_ratio)
        self.historical_comparator = HistoricalComparator(analytics.historical_increase_threshold)
        self.root_cause_correlator = RootCauseCorrelator()
        self.benchmark_comparator = BenchmarkComparator()
        self.budget_evaluator = BudgetRiskEvaluator(analytics.currency_symbol)
        self.assembler = ReportAssembler(analytics.currency, analytics.top_services)

    def resolve_time_range(self, period: Optional[str] = None, question: Optional[str] = None,
                           today: Optional[date] = None) -> TimeRange:
        if not period and question:
            period = extract_period(question)
            self.logger.debug("Extracted period from question", period=period)
        return TimeRangeResolver(today).resolve(period)

    async def generate_report(self,
                              period: Optional[str] = None,
                              question: Optional[str] = None,
                              traffic_logs: Optional[Mapping[str, List[Dict[str, Any]]]] = None,
                              today: Optional[date] = None) -> CostReport:
        """Raises CostDataFetchException when the cost feed fails; never returns a report without it."""
        time_range = self.resolve_time_range(period, question, today)
        self.logger.info(f"Generating cost report for {time_range.label}")

        stage_one = await self._collect(self._stage_one_collectors(time_range))
        cost_result = stage_one[COST_ROWS]
        if not cost_result.ok:
            self.logger.error("Cost data unavailable", status=cost_result.status, error=cost_result.error)
            raise CostDataFetchException(
                cost_result.error or "Cost query failed",
                details={'status': cost_result.status, 'period': time_range.label}
            )

        daily_costs = self.aggregator.aggregate(cost_result.data)
        records = list(daily_costs.values())
        spikes = self.spike_detector.detect(records)
        major_spikes = self.major_spike_detector.detect(records)
        seasonality = self.seasonality_analyzer.analyze(records)
        historical_comparison = self.historical_comparator.compare(records)
        service_costs = service_totals(records, self.settings.analytics.currency)

        dates = spike_dates(spikes)
        stage_two = await self._collect(
            self._stage_two_collectors([service.service_name for service in service_costs], dates)
        )

        events_by_date = {}
        for spike_date in dates:
            result = stage_two.get(f"change_events:{spike_date.isoformat()}")
            events_by_date[spike_date] = result.data if result else []
        root_causes = self.root_cause_correlator.correlate(spikes, events_by_date)

        industry = self._data(stage_two, "industry_benchmarks", [])
        benchmark_comparisons = self.benchmark_comparator.compare(service_costs, industry)

        budget = budget_status_from_record(self._data(stage_one, "budget", None))
        budget_alert = self.budget_evaluator.evaluate(budget)

        inventory = self._data(stage_one, "network_inventory", {})
        virtual_networks = summarize_virtual_networks(inventory.get("virtual_networks", []))
        recommendations = self._data(stage_one, "advisor_recommendations", [])

        collection_errors = list(self.clients.connection_errors) + [
            f"{result.type}: {result.error}"
            for results in (stage_one, stage_two)
            for result in results.values()
            if not result.ok
        ]

        return self.assembler.assemble(
            time_range=time_range,
            daily_costs=daily_costs,
            spikes=spikes,
            major_spikes=major_spikes,
            seasonality=seasonality,
            root_causes=root_causes,
            historical_comparison=historical_comparison,
            budget=budget,
            budget_alert=budget_alert,
            benchmark_comparisons=benchmark_comparisons,
            multi_cloud_benchmarks=self._data(stage_two, "multi_cloud_benchmarks", []),
            unused_resources=find_unused_resources(
                inventory.get("public_ips", []),
                inventory.get("network_security_groups", []),
                inventory.get("load_balancers", []),
            ),
            underutilized_vms=underutilized_vm_recommendations(recommendations),
            grafana=service_recommendations(recommendations, GRAFANA_RESOURCE_TYPE),
            cognitive_services=service_recommendations(recommendations, COGNITIVE_SERVICES_RESOURCE_TYPE),
            virtual_networks=virtual_networks,
            network_findings=build_network_findings(
                virtual_networks, traffic_logs, self.settings.analytics.traffic_spike_threshold
            ),
            collection_errors=collection_errors,
        )

    def _stage_one_collectors(self, time_range: TimeRange) -> list:
        clients = self.clients
        collectors = [CostRowsCollector(clients.cost, time_range)]
        if clients.consumption is not None:
            collectors.append(BudgetCollector(clients.consumption, self.settings.azure.budget_name))
        if clients.network is not None:
            collectors.append(NetworkInventoryCollector(clients.network))
        if clients.advisor is not None:
            collectors.append(AdvisorCollector(clients.advisor))
        return collectors

    def _stage_two_collectors(self, service_names: List[str], dates: List[date]) -> list:
        clients = self.clients
        collectors = []
        if clients.benchmark is not None and service_names:
            collectors.append(IndustryBenchmarkCollector(clients.benchmark, service_names))
            collectors.append(MultiCloudBenchmarkCollector(clients.benchmark, service_names))
        if clients.monitor is not None:
            collectors.extend(ChangeEventCollector(clients.monitor, spike_date) for spike_date in dates)
        return collectors

    async def _collect(self, collectors: list) -> Dict[str, CollectionResult]:
        if not collectors:
            return {}
        orchestrator = CollectionOrchestrator(
            collectors,
            max_concurrency=self.settings.pipeline.max_concurrency,
            timeout_seconds=self.settings.pipeline.timeout_seconds
        )
        return await orchestrator.run()

    @staticmethod
    def _data(results: Mapping[str, CollectionResult], collection_type: str, default: Any) -> Any:
        result = results.get(collection_type)
        if result is None or result.data is None:
            return default
        return result.data
