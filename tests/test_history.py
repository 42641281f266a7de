from datetime import date

from costinsights.analytics.aggregation import DailyCostAggregator
from costinsights.analytics.history import HistoricalComparator, service_history


def _records(rows):
    return list(DailyCostAggregator().aggregate(rows).values())


def test_increase_over_moving_average_is_flagged():
    records = _records([
        [100.0, 20240301, "Virtual Machines"],
        [100.0, 20240302, "Virtual Machines"],
        [150.0, 20240303, "Virtual Machines"],
    ])

    notes = HistoricalComparator().compare(records)

    assert notes["Virtual Machines"].startswith("🚨 **Virtual Machines costs increased by 50.00%!**")


def test_small_change_is_stable():
    records = _records([
        [100.0, 20240301, "Storage"],
        [110.0, 20240302, "Storage"],
    ])

    notes = HistoricalComparator().compare(records)

    assert notes == {"Storage": "✅ **Storage costs are stable and within normal limits.**"}


def test_services_without_history_are_omitted():
    records = _records([
        [10.0, 20240301, "Storage"],
        [10.0, 20240302, "Storage"],
        [99.0, 20240302, "Bandwidth"],
        [0.0, 20240301, "Free Tier"],
        [5.0, 20240302, "Free Tier"],
    ])

    notes = HistoricalComparator().compare(records)

    assert set(notes) == {"Storage"}


def test_threshold_is_configurable():
    records = _records([[100.0, 20240301, "Storage"], [115.0, 20240302, "Storage"]])

    assert HistoricalComparator(increase_threshold=10).compare(records)["Storage"].startswith("🚨")


def test_service_history_sums_same_day_rows():
    records = _records([[1.0, 20240301, "Storage"], [2.0, 20240301, "Storage"]])

    assert service_history(records) == {"Storage": {date(2024, 3, 1): 3.0}}
