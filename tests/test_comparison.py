"""Tests for the comparison engine."""

import pytest
from hypothesis import given, settings

from foundry.services.comparison import (
    COMPARISON_METRICS,
    MISSING,
    MetricDescriptor,
    Polarity,
    best_value,
    compare_devices,
    comparison_table,
    is_best,
    is_number,
)
from tests.factories import catalogs, make_device

METRICS = {m.key: m for m in COMPARISON_METRICS}


def best_ids(metric: MetricDescriptor, devices) -> list[str]:
    return [cell.device_id for cell in compare_devices(metric, devices) if cell.is_best]


class TestBestValue:

    def test_higher_is_better(self) -> None:
        devices = [make_device("a", battery_wh=67), make_device("b", battery_wh=80), make_device("c", battery_wh=55)]
        assert best_value(METRICS["battery_wh"], devices) == 80
        assert best_ids(METRICS["battery_wh"], devices) == ["b"]

    def test_lower_is_better(self) -> None:
        devices = [make_device("a", price=799), make_device("b", price=549), make_device("c", price=None)]
        assert best_value(METRICS["price"], devices) == 549
        assert best_ids(METRICS["price"], devices) == ["b"]

    def test_ties_are_all_best(self) -> None:
        devices = [make_device("a", cpu_cores=8), make_device("b", cpu_cores=8), make_device("c", cpu_cores=4)]
        assert best_ids(METRICS["cpu_cores"], devices) == ["a", "b"]

    def test_not_scored_metric_has_no_best(self) -> None:
        devices = [make_device("a", memory_options=(16, 24)), make_device("b", memory_options=(32,))]
        assert best_value(METRICS["memory_options"], devices) is None
        assert best_ids(METRICS["memory_options"], devices) == []

    def test_no_numeric_values(self) -> None:
        devices = [make_device("a", weight=None), make_device("b", weight=None)]
        assert best_value(METRICS["weight"], devices) is None
        assert best_ids(METRICS["weight"], devices) == []

    def test_empty_selection(self) -> None:
        for metric in COMPARISON_METRICS:
            assert best_value(metric, []) is None
            assert compare_devices(metric, []) == []

    def test_booleans_are_not_numbers(self) -> None:
        metric = MetricDescriptor("flag", "Flag", lambda d: True, Polarity.HIGHER_IS_BETTER)
        assert best_value(metric, [make_device("a")]) is None
        assert not is_number(True)
        assert is_number(3) and is_number(2.5)

    def test_is_best_with_missing_value(self) -> None:
        metric = METRICS["price"]
        assert not is_best(metric, make_device("a", price=None), 549)
        assert is_best(metric, make_device("b", price=549), 549)
        assert not is_best(metric, make_device("b", price=549), None)

    @pytest.mark.parametrize("metric", [m for m in COMPARISON_METRICS if m.scored], ids=lambda m: m.key)
    @given(devices=catalogs(max_size=5))
    @settings(deadline=2000)
    def test_best_cells_hold_extreme(self, metric: MetricDescriptor, devices) -> None:
        best = best_value(metric, devices)
        values = [metric.value_of(d) for d in devices if is_number(metric.value_of(d))]
        for cell in compare_devices(metric, devices):
            if cell.is_best:
                assert cell.value == best
                assert all(
                    (cell.value >= v) if metric.polarity is Polarity.HIGHER_IS_BETTER else (cell.value <= v)
                    for v in values
                )
        if values:
            assert any(cell.is_best for cell in compare_devices(metric, devices))


class TestFormatting:

    def test_display_values(self) -> None:
        device = make_device("a", price=799, battery_wh=80, weight=678, memory_options=(24, 32))
        table = {row.metric.key: row.cells[0].display for row in comparison_table([device])}
        assert table["price"] == "$799"
        assert table["battery_wh"] == "80 Wh"
        assert table["weight"] == "678 g"
        assert table["memory_options"] == "24GB / 32GB"
        assert table["cpu_cores"] == "8"

    def test_missing_values(self) -> None:
        device = make_device("a", price=None, battery_wh=None, weight=None)
        table = {row.metric.key: row.cells[0].display for row in comparison_table([device])}
        assert table["price"] == MISSING
        assert table["battery_wh"] == MISSING
        assert table["weight"] == MISSING
        assert table["memory_options"] == MISSING

    def test_table_has_one_row_per_metric(self) -> None:
        devices = [make_device("a"), make_device("b")]
        rows = comparison_table(devices)
        assert [r.metric.key for r in rows] == [m.key for m in COMPARISON_METRICS]
        assert all([c.device_id for c in r.cells] == ["a", "b"] for r in rows)
