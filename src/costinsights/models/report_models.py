"""
Report models
Benchmarks, budget status, resource hygiene findings and the assembled cost report
"""

from enum import Enum
from typing import Dict, List, Optional, Any

from pydantic import BaseModel, Field, computed_field

from .cost_models import (
    DailyCostRecord,
    RootCauseEntry,
    SeasonalityPattern,
    ServiceCost,
    SpikeEvent,
)


class BenchmarkSeverity(str, Enum):
    """Benchmark variance severity tiers."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IndustryBenchmark(BaseModel):
    """Reference cost figures for one service."""

    service: str
    average_cost_per_unit: float = Field(..., alias="averageCostPerUnit")
    unit_type: str = Field("Hour", alias="unitType")
    percentile50: float
    percentile90: float

    model_config = {"populate_by_name": True}


class MultiCloudBenchmark(BaseModel):
    """Cross-provider cost estimate for one service. Illustrative, not billing-grade."""

    service: str
    azure_cost: float = Field(..., alias="azureCost")
    aws_cost: float = Field(..., alias="awsCost")
    gcp_cost: float = Field(..., alias="gcpCost")
    unit_type: str = Field("vCPU", alias="unitType")
    estimated: bool = True

    model_config = {"populate_by_name": True}

    @computed_field
    @property
    def aws_savings_percentage(self) -> float:
        if self.azure_cost == 0:
            return 0.0
        return (1 - self.aws_cost / self.azure_cost) * 100

    @computed_field
    @property
    def gcp_savings_percentage(self) -> float:
        if self.azure_cost == 0:
            return 0.0
        return (1 - self.gcp_cost / self.azure_cost) * 100


class BenchmarkComparison(BaseModel):
    """Observed service cost against its industry reference."""

    service_name: str
    client_cost: float
    industry_average: float
    variance_percentage: float
    potential_savings: float
    severity: BenchmarkSeverity


class BudgetAlertLevel(str, Enum):
    NONE = "none"
    LOW_REMAINING = "low_remaining"
    FORECAST_OVER = "forecast_over"


class BudgetStatus(BaseModel):
    """Budget record with derived utilization figures."""

    amount: float = 0.0
    current_spend: float = 0.0
    forecast_spend: float = 0.0

    @computed_field
    @property
    def utilization_percentage(self) -> float:
        if self.amount <= 0:
            return 0.0
        return self.current_spend / self.amount * 100

    @computed_field
    @property
    def remaining(self) -> float:
        return self.amount - self.current_spend

    @computed_field
    @property
    def is_over_budget(self) -> bool:
        return self.forecast_spend > self.amount


class BudgetAlert(BaseModel):
    level: BudgetAlertLevel = BudgetAlertLevel.NONE
    message: str = ""


class UnusedResources(BaseModel):
    public_ips: List[str] = Field(default_factory=list)
    network_security_groups: List[str] = Field(default_factory=list)
    load_balancers: List[str] = Field(default_factory=list)


class VirtualNetwork(BaseModel):
    name: str
    peerings: List[str] = Field(default_factory=list)
    gateways: List[str] = Field(default_factory=list)
    subnets: List[str] = Field(default_factory=list)


class TrafficSpike(BaseModel):
    vnet_name: str
    traffic_increase_percentage: float
    traffic_logs: List[Dict[str, Any]] = Field(default_factory=list)


class NetworkFindings(BaseModel):
    misconfigurations: List[str] = Field(default_factory=list)
    traffic_spikes: List[TrafficSpike] = Field(default_factory=list)


class AdvisorInsights(BaseModel):
    recommendations: List[str] = Field(default_factory=list)


class CostReport(BaseModel):
    """
    Aggregate report handed to narrative generation.
    Every field has an explicit empty default so consumers can read all of them.
    """

    total_cost: float = 0.0
    currency: str = "INR"
    period: str = ""
    top_services: List[ServiceCost] = Field(default_factory=list)
    service_breakdown: List[ServiceCost] = Field(default_factory=list)
    daily_costs: List[DailyCostRecord] = Field(default_factory=list)

    cost_spikes: List[str] = Field(default_factory=list)
    major_cost_spikes: List[str] = Field(default_factory=list)
    spike_events: List[SpikeEvent] = Field(default_factory=list)
    seasonality: List[SeasonalityPattern] = Field(default_factory=list)
    root_cause_analysis: List[RootCauseEntry] = Field(default_factory=list)
    historical_comparison: Dict[str, str] = Field(default_factory=dict)

    budget: BudgetStatus = Field(default_factory=BudgetStatus)
    budget_alert: BudgetAlert = Field(default_factory=BudgetAlert)

    benchmark_comparisons: List[BenchmarkComparison] = Field(default_factory=list)
    multi_cloud_benchmarks: List[MultiCloudBenchmark] = Field(default_factory=list)

    unused_resources: UnusedResources = Field(default_factory=UnusedResources)
    underutilized_vms: AdvisorInsights = Field(default_factory=AdvisorInsights)
    grafana: AdvisorInsights = Field(default_factory=AdvisorInsights)
    cognitive_services: AdvisorInsights = Field(default_factory=AdvisorInsights)
    virtual_networks: List[VirtualNetwork] = Field(default_factory=list)
    network_findings: NetworkFindings = Field(default_factory=NetworkFindings)

    collection_errors: List[str] = Field(default_factory=list)
    generated_at: Optional[str] = None
