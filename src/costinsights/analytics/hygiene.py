# src/costinsights/analytics/hygiene.py
"""
Resource hygiene - unused network resources, VNet misconfigurations,
traffic spikes and Advisor recommendation filters
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

import structlog

from costinsights.core.utils import parse_cost
from costinsights.models.report_models import (
    AdvisorInsights,
    NetworkFindings,
    TrafficSpike,
    UnusedResources,
    VirtualNetwork,
)

logger = structlog.get_logger(__name__)

GRAFANA_RESOURCE_TYPE = "Microsoft.Dashboard/grafana"
COGNITIVE_SERVICES_RESOURCE_TYPE = "Microsoft.CognitiveServices/accounts"
VIRTUAL_MACHINE_RESOURCE_TYPE = "Microsoft.Compute/virtualMachines"
TRAFFIC_LOG_SAMPLE_SIZE = 5


def _field(resource: Mapping[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    """Read a field from a flattened inventory record or an ARM-shaped one."""
    if snake in resource:
        return resource[snake]
    properties = resource.get("properties") or {}
    return properties.get(camel, default)


def _names(items: Optional[Iterable[Any]]) -> List[str]:
    names = []
    for item in items or []:
        names.append(item.get("name", "") if isinstance(item, Mapping) else str(item))
    return names


def find_unused_resources(public_ips: Iterable[Mapping[str, Any]] = (),
                          network_security_groups: Iterable[Mapping[str, Any]] = (),
                          load_balancers: Iterable[Mapping[str, Any]] = ()) -> UnusedResources:
    """Public IPs with no IP configuration, NSGs attached to nothing, load balancers with no pools or frontends."""
    unused_ips = [
        ip["name"] for ip in public_ips
        if not _field(ip, "ip_configuration", "ipConfiguration")
    ]
    unused_nsgs = [
        nsg["name"] for nsg in network_security_groups
        if not _field(nsg, "subnets", "subnets") and not _field(nsg, "network_interfaces", "networkInterfaces")
    ]
    unused_lbs = [
        lb["name"] for lb in load_balancers
        if not _field(lb, "backend_address_pools", "backendAddressPools")
        and not _field(lb, "frontend_ip_configurations", "frontendIPConfigurations")
    ]

    logger.info(
        "Unused resource scan completed",
        public_ips=len(unused_ips),
        network_security_groups=len(unused_nsgs),
        load_balancers=len(unused_lbs)
    )
    return UnusedResources(
        public_ips=unused_ips,
        network_security_groups=unused_nsgs,
        load_balancers=unused_lbs,
    )


def summarize_virtual_networks(virtual_networks: Iterable[Mapping[str, Any]]) -> List[VirtualNetwork]:
    summaries = []
    for vnet in virtual_networks:
        summaries.append(VirtualNetwork(
            name=vnet.get("name", ""),
            peerings=_names(_field(vnet, "peerings", "virtualNetworkPeerings")),
            gateways=_names(_field(vnet, "gateways", "virtualNetworkGateways")),
            subnets=_names(_field(vnet, "subnets", "subnets")),
        ))
    return summaries


def detect_misconfigurations(vnets: Iterable[VirtualNetwork]) -> List[str]:
    misconfigurations = []
    for vnet in vnets:
        if not vnet.peerings:
            misconfigurations.append(f"🚨 **{vnet.name}** has no peerings. Consider removing it if not needed.")
        if not vnet.gateways:
            misconfigurations.append(f"⚠️ **{vnet.name}** has no gateways. Ensure it's intentional.")
        if not vnet.subnets:
            misconfigurations.append(f"🔍 **{vnet.name}** has no subnets. Check if it's in use.")
    return misconfigurations


def detect_traffic_spikes(traffic_logs: Mapping[str, List[Dict[str, Any]]],
                          threshold_percentage: float = 30.0) -> List[TrafficSpike]:
    """Compare each watcher's latest traffic sample (logs newest first) with the one before it."""
    spikes = []
    for watcher_name, logs in traffic_logs.items():
        if len(logs) < 2:
            continue

        latest = parse_cost(logs[0].get("bytes"))
        previous = parse_cost(logs[1].get("bytes"))
        if previous <= 0:
            continue

        increase = (latest - previous) / previous * 100
        if increase > threshold_percentage:
            spikes.append(TrafficSpike(
                vnet_name=watcher_name,
                traffic_increase_percentage=increase,
                traffic_logs=list(logs[:TRAFFIC_LOG_SAMPLE_SIZE]),
            ))
    return spikes


def build_network_findings(vnets: Iterable[VirtualNetwork],
                           traffic_logs: Optional[Mapping[str, List[Dict[str, Any]]]] = None,
                           traffic_threshold: float = 30.0) -> NetworkFindings:
    return NetworkFindings(
        misconfigurations=detect_misconfigurations(vnets),
        traffic_spikes=detect_traffic_spikes(traffic_logs or {}, traffic_threshold),
    )


def _recommendation_text(recommendation: Mapping[str, Any], key: str) -> str:
    short = _field(recommendation, "short_description", "shortDescription") or {}
    return short.get(key) or ""


def underutilized_vm_recommendations(recommendations: Iterable[Mapping[str, Any]]) -> AdvisorInsights:
    results = []
    for rec in recommendations:
        if (
            _field(rec, "category", "category") == "Performance"
            and _field(rec, "impacted_field", "impactedField") == VIRTUAL_MACHINE_RESOURCE_TYPE
            and "Underutilized virtual machine" in _recommendation_text(rec, "problem")
        ):
            results.append(
                f"VM: {_field(rec, 'impacted_value', 'impactedValue')} - {_recommendation_text(rec, 'solution')}"
            )
    return AdvisorInsights(recommendations=results)


def service_recommendations(recommendations: Iterable[Mapping[str, Any]],
                            resource_type: str) -> AdvisorInsights:
    """Advisor recommendations whose impacted field mentions the given resource type."""
    results = []
    for rec in recommendations:
        impacted_field = _field(rec, "impacted_field", "impactedField") or ""
        if resource_type in impacted_field:
            results.append(
                f"Resource: {_field(rec, 'impacted_value', 'impactedValue')}, "
                f"Issue: {_recommendation_text(rec, 'problem')}, "
                f"Solution: {_recommendation_text(rec, 'solution')}"
            )
    return AdvisorInsights(recommendations=results)
