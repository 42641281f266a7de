import math
from datetime import date

import pytest

from costinsights.analytics.aggregation import DailyCostAggregator, service_totals
from costinsights.core.exceptions import DataValidationException
from costinsights.models.cost_models import DailyCostRecord, ServiceCost


def test_rows_grouped_per_day_in_date_order():
    rows = [
        [10.0, 20240302, "Storage"],
        [5.0, "2024-02-29", "Storage"],
        [7.5, 20240301, "Virtual Machines"],
        [2.5, 20240301, "Storage"],
    ]

    daily = DailyCostAggregator().aggregate(rows)

    assert list(daily) == [date(2024, 2, 29), date(2024, 3, 1), date(2024, 3, 2)]
    assert daily[date(2024, 3, 1)].total_cost == 10.0
    assert [s.service_name for s in daily[date(2024, 3, 1)].service_breakdown] == ["Virtual Machines", "Storage"]


def test_totals_always_match_breakdown(cost_rows):
    daily = DailyCostAggregator().aggregate(cost_rows)

    for record in daily.values():
        breakdown_sum = sum(service.cost for service in record.service_breakdown)
        assert math.isclose(record.total_cost, breakdown_sum, abs_tol=1e-9)


def test_string_costs_are_cleaned_and_garbage_is_zero():
    rows = [
        ["₹20.50", "20240301", "Virtual Machines"],
        ["1,000", "20240301", "Storage"],
        ["n/a", 20240301, "Bandwidth"],
    ]

    record = DailyCostAggregator().aggregate(rows)[date(2024, 3, 1)]
    costs = {service.service_name: service.cost for service in record.service_breakdown}

    assert costs == {"Virtual Machines": 20.5, "Storage": 1000.0, "Bandwidth": 0.0}
    assert record.total_cost == 1020.5


def test_exponent_notation_costs_keep_their_magnitude():
    rows = [
        ["1.5E+3", 20240301, "Virtual Machines"],
        ["2e-05", 20240301, "Storage"],
    ]

    record = DailyCostAggregator().aggregate(rows)[date(2024, 3, 1)]

    assert record.total_cost == pytest.approx(1500.00002)


def test_malformed_rows_and_bad_dates_are_skipped():
    rows = [
        [1.0],
        None,
        [3.0, "not-a-date", "Storage"],
        [4.0, 20240301, "Storage"],
    ]

    daily = DailyCostAggregator().aggregate(rows)

    assert list(daily) == [date(2024, 3, 1)]
    assert daily[date(2024, 3, 1)].total_cost == 4.0


def test_empty_input_gives_empty_mapping():
    assert DailyCostAggregator().aggregate([]) == {}


def test_negative_costs_are_kept():
    daily = DailyCostAggregator().aggregate([[-12.0, 20240301, "Refund"], [20.0, 20240301, "Storage"]])

    assert daily[date(2024, 3, 1)].total_cost == 8.0


def test_record_rejects_inconsistent_total():
    with pytest.raises(DataValidationException):
        DailyCostRecord(
            usage_date=date(2024, 3, 1),
            total_cost=5.0,
            service_breakdown=(ServiceCost(service_name="Storage", cost=1.0),),
        )


def test_active_services_exclude_zero_cost(daily_records):
    third_day = daily_records[-1]

    assert [s.service_name for s in third_day.active_services] == ["Virtual Machines", "Storage"]


def test_service_totals_sorted_descending(daily_records):
    totals = service_totals(daily_records)

    assert [(s.service_name, s.cost) for s in totals] == [
        ("Virtual Machines", 270.0),
        ("Storage", 130.0),
        ("Bandwidth", 0.0),
    ]
