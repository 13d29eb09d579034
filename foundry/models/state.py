"""Selection and filter state owned by the screens.

Screens hold these values and pass them into the engine functions; the
engines never keep or mutate them.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


ALL_SOCS = "all"


class SortKey(Enum):
    """Orderings available on the devices page."""
    NAME = "name"
    PRICE = "price"
    BATTERY = "battery"
    WEIGHT = "weight"

    @property
    def label(self) -> str:
        """Human readable label for select widgets."""
        return _SORT_LABELS[self]


_SORT_LABELS: dict[SortKey, str] = {
    SortKey.NAME: "Name (A→Z)",
    SortKey.PRICE: "Price (low→high)",
    SortKey.BATTERY: "Battery (high→low)",
    SortKey.WEIGHT: "Weight (low→high)",
}


class ChartMode(Enum):
    """How performance data is charted."""
    BAR = "bar"
    LINE = "line"


@dataclass(frozen=True)
class DeviceFilter:
    """Filter state of the devices page."""
    query: str = ""
    soc: str = ALL_SOCS
    min_battery: float = 0.0
    sort_key: SortKey = SortKey.NAME

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "query": self.query,
            "soc": self.soc,
            "min_battery": self.min_battery,
            "sort": self.sort_key.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeviceFilter":
        """Build a filter from a dictionary, falling back to defaults."""
        try:
            sort_key = SortKey(data.get("sort", SortKey.NAME.value))
        except ValueError:
            sort_key = SortKey.NAME

        min_battery_raw = data.get("min_battery", 0.0)
        min_battery = float(min_battery_raw) if isinstance(min_battery_raw, (int, float)) else 0.0

        return cls(
            query=str(data.get("query", "")),
            soc=str(data.get("soc", ALL_SOCS)),
            min_battery=min_battery,
            sort_key=sort_key,
        )


@dataclass(frozen=True)
class SelectionState:
    """Chart selection of a page: which items are plotted and how.

    ``selected`` holds device ids, processor names or iGPU names depending
    on the page. It preserves insertion order and never holds duplicates.
    """
    selected: tuple[str, ...] = ()
    game_id: str | None = None
    wattage: int | None = None
    show_p1: bool = True
    chart_mode: ChartMode = ChartMode.BAR

    def __post_init__(self) -> None:
        object.__setattr__(self, "selected", tuple(dict.fromkeys(self.selected)))

    def add(self, item: str) -> "SelectionState":
        """Return a state with ``item`` appended unless already selected."""
        if item in self.selected:
            return self
        return replace(self, selected=self.selected + (item,))

    def remove(self, item: str) -> "SelectionState":
        """Return a state without ``item``."""
        return replace(self, selected=tuple(s for s in self.selected if s != item))

    def toggle(self, item: str) -> "SelectionState":
        """Add ``item`` if absent, remove it otherwise."""
        if item in self.selected:
            return self.remove(item)
        return self.add(item)

    def with_game(self, game_id: str | None) -> "SelectionState":
        return replace(self, game_id=game_id)

    def with_wattage(self, wattage: int | None) -> "SelectionState":
        return replace(self, wattage=wattage)

    def with_show_p1(self, show_p1: bool) -> "SelectionState":
        return replace(self, show_p1=show_p1)

    def with_chart_mode(self, chart_mode: ChartMode) -> "SelectionState":
        return replace(self, chart_mode=chart_mode)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "selected": list(self.selected),
            "game": self.game_id,
            "wattage": self.wattage,
            "show_p1": self.show_p1,
            "chart_mode": self.chart_mode.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SelectionState":
        """Build a selection state from a dictionary."""
        selected_raw = data.get("selected", [])
        selected = tuple(str(s) for s in selected_raw) if isinstance(selected_raw, list) else ()

        wattage_raw = data.get("wattage")
        wattage = int(wattage_raw) if isinstance(wattage_raw, (int, float)) else None

        try:
            chart_mode = ChartMode(data.get("chart_mode", ChartMode.BAR.value))
        except ValueError:
            chart_mode = ChartMode.BAR

        game_raw = data.get("game")
        return cls(
            selected=selected,
            game_id=str(game_raw) if game_raw is not None else None,
            wattage=wattage,
            show_p1=bool(data.get("show_p1", True)),
            chart_mode=chart_mode,
        )
