import pytest

from costinsights.analytics.hygiene import (
    COGNITIVE_SERVICES_RESOURCE_TYPE,
    GRAFANA_RESOURCE_TYPE,
    build_network_findings,
    detect_traffic_spikes,
    find_unused_resources,
    service_recommendations,
    summarize_virtual_networks,
    underutilized_vm_recommendations,
)


def test_unused_resources(network_inventory):
    unused = find_unused_resources(
        network_inventory["public_ips"],
        network_inventory["network_security_groups"],
        network_inventory["load_balancers"],
    )

    assert unused.public_ips == ["pip-orphan"]
    assert unused.network_security_groups == ["nsg-orphan"]
    assert unused.load_balancers == ["lb-orphan"]


def test_arm_shaped_resources_are_understood():
    unused = find_unused_resources(
        public_ips=[{"name": "pip-1", "properties": {"ipConfiguration": {"id": "cfg"}}}],
        network_security_groups=[{"name": "nsg-1", "properties": {"networkInterfaces": [{"id": "nic"}]}}],
        load_balancers=[{"name": "lb-1", "properties": {}}],
    )

    assert unused.public_ips == []
    assert unused.network_security_groups == []
    assert unused.load_balancers == ["lb-1"]


def test_vnet_misconfigurations(network_inventory):
    vnets = summarize_virtual_networks(network_inventory["virtual_networks"])
    findings = build_network_findings(vnets)

    assert [vnet.name for vnet in vnets] == ["vnet-hub", "vnet-lonely"]
    assert findings.misconfigurations == [
        "🚨 **vnet-lonely** has no peerings. Consider removing it if not needed.",
        "⚠️ **vnet-lonely** has no gateways. Ensure it's intentional.",
        "🔍 **vnet-lonely** has no subnets. Check if it's in use.",
    ]
    assert findings.traffic_spikes == []


def test_traffic_spike_above_threshold():
    logs = {
        "watcher-a": [{"bytes": 1400}, {"bytes": 1000}] + [{"bytes": 900}] * 6,
        "watcher-b": [{"bytes": 1100}, {"bytes": 1000}],
        "watcher-c": [{"bytes": 500}],
        "watcher-d": [{"bytes": 500}, {"bytes": 0}],
    }

    spikes = detect_traffic_spikes(logs, threshold_percentage=30)

    assert [spike.vnet_name for spike in spikes] == ["watcher-a"]
    assert spikes[0].traffic_increase_percentage == pytest.approx(40.0)
    assert len(spikes[0].traffic_logs) == 5


def test_underutilized_vms(advisor_recommendations):
    insights = underutilized_vm_recommendations(advisor_recommendations)

    assert insights.recommendations == ["VM: vm-idle-01 - Resize or shut down the VM"]


def test_service_scoped_recommendations(advisor_recommendations):
    grafana = service_recommendations(advisor_recommendations, GRAFANA_RESOURCE_TYPE)
    cognitive = service_recommendations(advisor_recommendations, COGNITIVE_SERVICES_RESOURCE_TYPE)

    assert grafana.recommendations == [
        "Resource: grafana-main, Issue: Unused dashboards, Solution: Downgrade the SKU"
    ]
    assert cognitive.recommendations == []
