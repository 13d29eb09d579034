"""Comparison engine: best-value highlighting across selected devices."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..models.device import DeviceBundle

MISSING = "—"


class Polarity(Enum):
    """Whether a metric's best value is the highest, the lowest, or neither."""
    HIGHER_IS_BETTER = "higher"
    LOWER_IS_BETTER = "lower"
    NOT_SCORED = "none"


def _default_format(value: Any) -> str:
    return MISSING if value is None else str(value)


@dataclass(frozen=True)
class MetricDescriptor:
    """A row of the compare table."""
    key: str
    label: str
    accessor: Callable[[DeviceBundle], Any]
    polarity: Polarity
    formatter: Callable[[Any], str] = _default_format

    @property
    def scored(self) -> bool:
        return self.polarity is not Polarity.NOT_SCORED

    def value_of(self, device: DeviceBundle) -> Any:
        return self.accessor(device)

    def format(self, value: Any) -> str:
        return self.formatter(value)


@dataclass(frozen=True)
class ComparisonCell:
    """One device's value for one metric."""
    device_id: str
    value: Any
    display: str
    is_best: bool


@dataclass(frozen=True)
class ComparisonRow:
    """One metric across all compared devices."""
    metric: MetricDescriptor
    cells: tuple[ComparisonCell, ...]


def is_number(value: Any) -> bool:
    """True for ints and floats, False for bools and everything else."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_with(template: str) -> Callable[[Any], str]:
    def fmt(value: Any) -> str:
        return MISSING if value is None else template.format(value)
    return fmt


def _format_capacities(value: Any) -> str:
    if not value:
        return MISSING
    return " / ".join(f"{n}GB" for n in value)


COMPARISON_METRICS: tuple[MetricDescriptor, ...] = (
    MetricDescriptor("price", "Price", lambda d: d.specs.price,
                     Polarity.LOWER_IS_BETTER, _format_with("${:g}")),
    MetricDescriptor("battery_wh", "Battery (Wh)", lambda d: d.specs.battery_wh,
                     Polarity.HIGHER_IS_BETTER, _format_with("{:g} Wh")),
    MetricDescriptor("weight", "Weight (g)", lambda d: d.specs.weight,
                     Polarity.LOWER_IS_BETTER, _format_with("{} g")),
    MetricDescriptor("cpu_cores", "CPU Cores", lambda d: d.specs.cpu_cores,
                     Polarity.HIGHER_IS_BETTER),
    MetricDescriptor("gpu_cores", "GPU Cores", lambda d: d.specs.gpu_cores,
                     Polarity.HIGHER_IS_BETTER),
    MetricDescriptor("memory_options", "Memory Capacities", lambda d: d.specs.memory_options,
                     Polarity.NOT_SCORED, _format_capacities),
)


def best_value(metric: MetricDescriptor, devices: Sequence[DeviceBundle]) -> float | None:
    """Best numeric value of a metric among devices.

    Args:
        metric: Metric to evaluate
        devices: Selected devices

    Returns:
        The max (higher is better) or min (lower is better) numeric value,
        or None when the metric is not scored or no device has a number
    """
    if not metric.scored:
        return None
    numbers = [v for v in (metric.value_of(d) for d in devices) if is_number(v)]
    if not numbers:
        return None
    if metric.polarity is Polarity.HIGHER_IS_BETTER:
        return max(numbers)
    return min(numbers)


def is_best(metric: MetricDescriptor, device: DeviceBundle, best: float | None) -> bool:
    """Whether a device holds the best value; ties are all best."""
    if best is None or not metric.scored:
        return False
    value = metric.value_of(device)
    return is_number(value) and value == best


def compare_devices(metric: MetricDescriptor, devices: Sequence[DeviceBundle]) -> list[ComparisonCell]:
    """Evaluate one metric across the selected devices."""
    best = best_value(metric, devices)
    cells = []
    for device in devices:
        value = metric.value_of(device)
        cells.append(ComparisonCell(
            device_id=device.id,
            value=value,
            display=metric.format(value),
            is_best=is_best(metric, device, best),
        ))
    return cells


def comparison_table(
    devices: Sequence[DeviceBundle],
    metrics: Sequence[MetricDescriptor] = COMPARISON_METRICS,
) -> list[ComparisonRow]:
    """Build every compare-table row for the selected devices."""
    return [ComparisonRow(metric=m, cells=tuple(compare_devices(m, devices))) for m in metrics]
