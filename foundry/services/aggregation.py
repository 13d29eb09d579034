"""Aggregation engine: derived views over the device catalog.

Every chart and select widget in the UI is built from these functions.
They are pure and total: unknown devices, games or wattages produce ``0``
or an empty result, never an exception.
"""

from collections.abc import Callable, Hashable, Iterable, Sequence
from typing import Any, TypeVar

from ..models.device import IGPU, DeviceBundle, GameOption, MetricKind, Processor
from ..models.state import ALL_SOCS

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def unique_sorted(values: Iterable[Any]) -> list[Any]:
    """Deduplicate and sort values in ascending natural order.

    Args:
        values: Comparable values (wattages, SoC names, ...)

    Returns:
        Sorted list without duplicates
    """
    return sorted(set(values))


def _unique_by(items: Iterable[T], key: Callable[[T], K]) -> list[T]:
    """Keep the first item seen for each key, in input order."""
    seen: dict[K, T] = {}
    for item in items:
        seen.setdefault(key(item), item)
    return list(seen.values())


def all_games(devices: Iterable[DeviceBundle]) -> list[GameOption]:
    """Collect every game across devices, one entry per game id.

    When two devices label the same game id differently the first label
    seen in catalog order wins.
    """
    return _unique_by(
        (game for device in devices for game in device.games),
        key=lambda game: game.id,
    )


def all_wattages(devices: Iterable[DeviceBundle]) -> list[int]:
    """Unique sorted union of every device's wattage axis."""
    return unique_sorted(watt for device in devices for watt in device.wattages)


def _raw_fps(
    device: DeviceBundle | None,
    game_id: str | None,
    wattage: int | None,
    kind: MetricKind,
) -> float | None:
    """Return the measured value or None when there is no entry."""
    if device is None or game_id is None or wattage is None:
        return None
    value = device.perf_table(kind).get(game_id, {}).get(wattage)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def fps_lookup(
    device: DeviceBundle | None,
    game_id: str | None,
    wattage: int | None,
    kind: MetricKind = MetricKind.AVERAGE,
) -> float:
    """Look up an FPS value, returning 0 when there is no data.

    Args:
        device: Device to read from (None is tolerated)
        game_id: Game identifier
        wattage: Power limit in watts
        kind: Average or 1% low table

    Returns:
        The measured FPS, or 0 for an unknown device/game/wattage
    """
    value = _raw_fps(device, game_id, wattage, kind)
    return 0 if value is None else value


def perf_avg(device: DeviceBundle | None, game_id: str | None, wattage: int | None) -> float:
    """Average FPS for a device, game and wattage."""
    return fps_lookup(device, game_id, wattage, MetricKind.AVERAGE)


def perf_p1(device: DeviceBundle | None, game_id: str | None, wattage: int | None) -> float:
    """1% low FPS for a device, game and wattage."""
    return fps_lookup(device, game_id, wattage, MetricKind.ONE_PERCENT_LOW)


def devices_by_processor(devices: Iterable[DeviceBundle], name: str) -> list[DeviceBundle]:
    """Devices whose SoC name equals ``name`` exactly."""
    return [d for d in devices if d.specs.soc == name]


def devices_by_igpu(devices: Iterable[DeviceBundle], name: str) -> list[DeviceBundle]:
    """Devices whose integrated GPU name equals ``name`` exactly."""
    return [d for d in devices if d.specs.igpu == name]


def averaged_fps(
    group: Iterable[DeviceBundle],
    game_id: str | None,
    wattage: int | None,
    kind: MetricKind = MetricKind.AVERAGE,
) -> float:
    """Mean FPS across a group of devices.

    Devices without an entry for the game and wattage are left out of the
    mean instead of counting as zero.

    Returns:
        Arithmetic mean, or 0 for an empty or all-missing group
    """
    values = [
        value
        for value in (_raw_fps(device, game_id, wattage, kind) for device in group)
        if value is not None
    ]
    if not values:
        return 0
    return sum(values) / len(values)


def unique_processors(devices: Iterable[DeviceBundle]) -> list[Processor]:
    """Processor descriptors deduplicated by name, first seen wins."""
    return _unique_by((d.cpu for d in devices), key=lambda cpu: cpu.name)


def unique_igpus(devices: Iterable[DeviceBundle]) -> list[IGPU]:
    """Integrated GPU descriptors deduplicated by name, first seen wins."""
    return _unique_by((d.igpu for d in devices), key=lambda igpu: igpu.name)


def soc_options(devices: Iterable[DeviceBundle]) -> list[tuple[str, str]]:
    """Options for the SoC filter, led by the "all" sentinel.

    Returns:
        (value, label) pairs
    """
    socs = unique_sorted(d.specs.soc for d in devices)
    return [(ALL_SOCS, "All SoCs")] + [(soc, soc) for soc in socs]


def game_options(devices: Iterable[DeviceBundle]) -> list[tuple[str, str]]:
    """(game id, label) pairs for game select widgets."""
    return [(game.id, game.label) for game in all_games(devices)]


def wattage_options(devices: Iterable[DeviceBundle]) -> list[tuple[str, str]]:
    """(value, label) pairs for wattage select widgets, e.g. ("15", "15W")."""
    return [(str(watt), f"{watt}W") for watt in all_wattages(devices)]


def default_wattage(wattages: Sequence[int], fallback: int = 10) -> int:
    """Pick the initial wattage for a chart.

    The second axis entry is preferred since the lowest limit is rarely the
    interesting one.
    """
    if len(wattages) > 1:
        return wattages[1]
    if wattages:
        return wattages[0]
    return fallback
