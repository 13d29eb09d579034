"""Filter/sort engine for the devices, processors and reviews pages."""

from collections.abc import Callable, Iterable
from dataclasses import astuple
from typing import Any

import structlog

from ..models.catalog import ReviewEntry
from ..models.device import DeviceBundle, Processor
from ..models.state import ALL_SOCS, DeviceFilter, SortKey

log = structlog.stdlib.get_logger()


# Each key maps a device to a sort value; BATTERY is reversed at sort time.
SORT_KEYS: dict[SortKey, Callable[[DeviceBundle], Any]] = {
    SortKey.NAME: lambda d: d.specs.name.casefold(),
    SortKey.PRICE: lambda d: d.specs.price or 0,
    SortKey.BATTERY: lambda d: d.specs.battery_wh or 0,
    SortKey.WEIGHT: lambda d: d.specs.weight or 0,
}

DESCENDING_SORTS: frozenset[SortKey] = frozenset({SortKey.BATTERY})


def _normalize_query(query: str) -> str:
    return query.strip().lower()


def _searchable_fields(device: DeviceBundle) -> list[str]:
    specs = device.specs
    fields = [specs.name, specs.soc, specs.igpu, specs.screen.resolution, specs.screen.panel_type]
    return [str(f) for f in fields if f]


def matches_query(device: DeviceBundle, query: str) -> bool:
    """Case-insensitive substring match over name, SoC, iGPU and screen."""
    q = _normalize_query(query)
    if not q:
        return True
    return any(q in field.lower() for field in _searchable_fields(device))


def filter_devices(devices: Iterable[DeviceBundle], state: DeviceFilter) -> list[DeviceBundle]:
    """Apply the devices page filters and ordering.

    The query, SoC and battery predicates are ANDed. Sorting is stable, so
    devices with equal keys keep their input order. The input is not
    modified.

    Args:
        devices: Devices to filter
        state: Current filter state

    Returns:
        A new list of matching devices in the requested order
    """
    result = [
        d for d in devices
        if matches_query(d, state.query)
        and (state.soc == ALL_SOCS or d.specs.soc == state.soc)
        and (d.specs.battery_wh or 0) >= state.min_battery
    ]

    result.sort(
        key=SORT_KEYS[state.sort_key],
        reverse=state.sort_key in DESCENDING_SORTS,
    )

    log.debug(
        "Devices filtered",
        query=state.query,
        soc=state.soc,
        min_battery=state.min_battery,
        sort=state.sort_key.value,
        matched=len(result),
    )
    return result


def filter_processors(processors: Iterable[Processor], query: str) -> list[Processor]:
    """Processors with any field containing the query (case-insensitive)."""
    q = _normalize_query(query)
    if not q:
        return list(processors)
    return [
        p for p in processors
        if any(q in str(value).lower() for value in astuple(p))
    ]


def collect_reviews(devices: Iterable[DeviceBundle]) -> list[ReviewEntry]:
    """Flatten every device's reviews, in catalog order."""
    return [
        ReviewEntry(device_id=d.id, device_name=d.specs.name, review=review)
        for d in devices
        for review in d.reviews
    ]


def filter_reviews(
    entries: Iterable[ReviewEntry],
    query: str,
    device_id: str | None = None,
) -> list[ReviewEntry]:
    """Filter reviews by device and by a query on title (or summary).

    Args:
        entries: Reviews to filter
        query: Search text; empty matches everything
        device_id: Restrict to a single device when given

    Returns:
        Matching review entries in input order
    """
    result = list(entries)
    if device_id:
        result = [e for e in result if e.device_id == device_id]

    q = _normalize_query(query)
    if q:
        result = [e for e in result if q in (e.review.title or e.review.summary).lower()]
    return result
