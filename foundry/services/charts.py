"""Chart series for the devices, processors and iGPU pages.

Bar rows compare items at one wattage; line rows follow each item across
the wattage axis. Values come from the aggregation engine, so missing data
shows up as 0 rather than a gap.
"""

from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from ..models.device import DeviceBundle, MetricKind
from .aggregation import all_wattages, averaged_fps, fps_lookup

GroupFn = Callable[[Iterable[DeviceBundle], str], list[DeviceBundle]]


@dataclass(frozen=True)
class BarRow:
    """Average and 1% low FPS of one device or group at one wattage."""
    label: str
    avg: float
    p1: float


@dataclass(frozen=True)
class LineRow:
    """FPS of every plotted series at one wattage."""
    wattage: int
    values: dict[str, float]


def p1_series_name(name: str) -> str:
    return f"{name} (1% low)"


def avg_series_name(name: str) -> str:
    return f"{name} (avg)"


def series_labels(selected: Sequence[DeviceBundle]) -> dict[str, str]:
    """Series label per device id; a name shared by several devices gets its id appended."""
    counts = Counter(d.specs.name for d in selected)
    return {
        d.id: d.specs.name if counts[d.specs.name] == 1 else f"{d.specs.name} [{d.id}]"
        for d in selected
    }


def device_bar_rows(
    selected: Sequence[DeviceBundle],
    game_id: str | None,
    wattage: int | None,
) -> list[BarRow]:
    """One bar row per selected device."""
    labels = series_labels(selected)
    return [
        BarRow(
            label=labels[d.id],
            avg=fps_lookup(d, game_id, wattage, MetricKind.AVERAGE),
            p1=fps_lookup(d, game_id, wattage, MetricKind.ONE_PERCENT_LOW),
        )
        for d in selected
    ]


def device_line_rows(
    selected: Sequence[DeviceBundle],
    game_id: str | None,
    show_p1: bool = True,
) -> list[LineRow]:
    """Rows over the wattages measured on any of the selected devices."""
    labels = series_labels(selected)
    rows = []
    for watt in all_wattages(selected):
        values: dict[str, float] = {}
        for d in selected:
            values[labels[d.id]] = fps_lookup(d, game_id, watt, MetricKind.AVERAGE)
            if show_p1:
                values[p1_series_name(labels[d.id])] = fps_lookup(
                    d, game_id, watt, MetricKind.ONE_PERCENT_LOW
                )
        rows.append(LineRow(wattage=watt, values=values))
    return rows


def group_bar_rows(
    devices: Sequence[DeviceBundle],
    names: Iterable[str],
    grouper: GroupFn,
    game_id: str | None,
    wattage: int | None,
) -> list[BarRow]:
    """One bar row per processor or iGPU name, averaged over its devices.

    Args:
        devices: Whole catalog
        names: Selected group names
        grouper: ``devices_by_processor`` or ``devices_by_igpu``
        game_id: Game to chart
        wattage: Power limit to chart
    """
    rows = []
    for name in names:
        group = grouper(devices, name)
        rows.append(BarRow(
            label=name,
            avg=averaged_fps(group, game_id, wattage, MetricKind.AVERAGE),
            p1=averaged_fps(group, game_id, wattage, MetricKind.ONE_PERCENT_LOW),
        ))
    return rows


def group_line_rows(
    devices: Sequence[DeviceBundle],
    names: Iterable[str],
    grouper: GroupFn,
    game_id: str | None,
    show_p1: bool = True,
) -> list[LineRow]:
    """Averaged rows per group over the wattage axis of the whole catalog."""
    groups = [(name, grouper(devices, name)) for name in names]
    rows = []
    for watt in all_wattages(devices):
        values: dict[str, float] = {}
        for name, group in groups:
            values[avg_series_name(name)] = averaged_fps(group, game_id, watt, MetricKind.AVERAGE)
            if show_p1:
                values[p1_series_name(name)] = averaged_fps(
                    group, game_id, watt, MetricKind.ONE_PERCENT_LOW
                )
        rows.append(LineRow(wattage=watt, values=values))
    return rows
