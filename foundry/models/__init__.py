"""Data models for the Foundry Handhelds application."""

from .catalog import Catalog, ReviewEntry
from .config import AppConfig
from .device import (
    IGPU,
    DeviceBundle,
    DeviceSpecs,
    GameOption,
    MetricKind,
    PerfTable,
    Processor,
    Review,
    ScreenSpec,
)
from .state import ALL_SOCS, ChartMode, DeviceFilter, SelectionState, SortKey

__all__ = [
    "ALL_SOCS",
    "AppConfig",
    "Catalog",
    "ChartMode",
    "DeviceBundle",
    "DeviceFilter",
    "DeviceSpecs",
    "GameOption",
    "IGPU",
    "MetricKind",
    "PerfTable",
    "Processor",
    "Review",
    "ReviewEntry",
    "ScreenSpec",
    "SelectionState",
    "SortKey",
]
