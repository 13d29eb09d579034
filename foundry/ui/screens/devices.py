"""Devices screen: searchable device table with a performance chart."""

from dataclasses import replace
from typing import ClassVar

from typing_extensions import override

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import DataTable, Input, Select, Static

import structlog

from foundry.models import DeviceBundle, DeviceFilter, SortKey
from foundry.services.aggregation import soc_options
from foundry.services.charts import BarRow, LineRow, device_bar_rows, device_line_rows
from foundry.services.comparison import MISSING
from foundry.services.filtering import filter_devices

from .base import as_select_options
from .chart_base import ChartScreen

log = structlog.stdlib.get_logger()

SELECTED_MARK = "●"


def get_device_row(device: DeviceBundle, selected: bool = False) -> tuple[str, ...]:
    """Table cells for a device."""
    specs = device.specs
    screen = specs.screen
    return (
        SELECTED_MARK if selected else "",
        specs.name,
        specs.soc,
        specs.igpu,
        f"{screen.size:g}\" {screen.resolution} {screen.refresh}Hz {screen.panel_type}",
        f"{specs.battery_wh:g} Wh" if specs.battery_wh is not None else MISSING,
        f"{specs.weight} g" if specs.weight is not None else MISSING,
        f"${specs.price:g}" if specs.price is not None else MISSING,
        str(len(device.reviews)),
    )


class DevicesScreen(ChartScreen):
    """Device list with search, SoC filter, battery threshold and sorting.

    Enter on a row toggles the device in the chart; "v" opens its reviews.
    """

    SCREEN_TITLE: ClassVar[str] = "Devices"
    SCREEN_NAME: ClassVar[str] = "devices"

    CSS: ClassVar[str] = """
    #devices-container {
        padding: 1 2;
    }

    #battery-input {
        width: 16;
    }

    #devices-table {
        height: auto;
        max-height: 14;
    }

    #devices-stats {
        color: $text-muted;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        *ChartScreen.BINDINGS,
        Binding("f", "focus_search", "Search", show=True),
        Binding("v", "open_reviews", "Reviews", show=True),
    ]

    _filter: DeviceFilter
    _filtered: list[DeviceBundle]

    def __init__(self) -> None:
        super().__init__()
        self._filter = DeviceFilter()
        self._filtered = []

    @override
    def initial_selection(self) -> tuple[str, ...]:
        return tuple(d.id for d in self.catalog.devices[:2])

    @override
    def compose(self) -> ComposeResult:
        config = self.foundry_app.config
        try:
            sort_key = SortKey(config.default_sort)
        except ValueError:
            sort_key = SortKey.NAME
        self._filter = DeviceFilter(min_battery=config.default_min_battery, sort_key=sort_key)

        with Container(id="devices-container"):
            yield self.create_title_widget()
            with Horizontal(classes="toolbar"):
                yield Input(placeholder="Search devices…", id="search-input")
                yield Select(
                    as_select_options(soc_options(self.catalog.devices)),
                    value=self._filter.soc,
                    allow_blank=False,
                    id="soc-select",
                )
                yield Select(
                    [(key.label, key.value) for key in SortKey],
                    value=self._filter.sort_key.value,
                    allow_blank=False,
                    id="sort-select",
                )
                yield Input(
                    value=f"{self._filter.min_battery:g}",
                    placeholder="Min Wh",
                    type="number",
                    id="battery-input",
                )
            yield DataTable(id="devices-table")
            yield Static("", id="devices-stats")
            yield Static("Performance", classes="section-title")
            yield from self.compose_chart_controls()

    @override
    async def on_mount(self) -> None:
        table = self.query_one("#devices-table", DataTable)
        table.add_column("", key="mark")
        table.add_columns("Name", "SoC", "iGPU", "Screen", "Battery", "Weight", "Price", "Reviews")
        table.cursor_type = "row"
        self._apply_filters()
        self.refresh_chart()

    def _selected_devices(self) -> list[DeviceBundle]:
        """Selected devices in catalog order."""
        return [d for d in self.catalog.devices if d.id in self.selection.selected]

    @override
    def bar_rows(self) -> list[BarRow]:
        return device_bar_rows(self._selected_devices(), self.selection.game_id, self.selection.wattage)

    @override
    def line_rows(self) -> list[LineRow]:
        return device_line_rows(self._selected_devices(), self.selection.game_id, self.selection.show_p1)

    def _apply_filters(self) -> None:
        self._filtered = filter_devices(self.catalog.devices, self._filter)
        self._refresh_table()
        self.query_one("#devices-stats", Static).update(
            f"Showing {len(self._filtered)} of {len(self.catalog)} devices"
        )

    def _refresh_table(self) -> None:
        table = self.query_one("#devices-table", DataTable)
        if not table.columns:
            return
        table.clear()
        for device in self._filtered:
            cells = get_device_row(device, device.id in self.selection.selected)
            table.add_row(Text(cells[0], style="green"), *cells[1:], key=device.id)

    def _refresh_marks(self) -> None:
        """Update the selection column in place so the cursor stays put."""
        table = self.query_one("#devices-table", DataTable)
        if not table.columns:
            return
        for device in self._filtered:
            mark = SELECTED_MARK if device.id in self.selection.selected else ""
            table.update_cell(device.id, "mark", Text(mark, style="green"))

    @override
    def refresh_chart(self) -> None:
        super().refresh_chart()
        self._refresh_marks()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search-input":
            self._filter = replace(self._filter, query=event.value)
        elif event.input.id == "battery-input":
            try:
                min_battery = float(event.value) if event.value.strip() else 0.0
            except ValueError:
                return
            self._filter = replace(self._filter, min_battery=min_battery)
        else:
            return
        self._apply_filters()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK:
            return
        if event.select.id == "soc-select":
            self._filter = replace(self._filter, soc=str(event.value))
        elif event.select.id == "sort-select":
            self._filter = replace(self._filter, sort_key=SortKey(str(event.value)))
        else:
            return
        self._apply_filters()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key.value is not None:
            self.toggle_item(str(event.row_key.value))

    def _highlighted_device_id(self) -> str | None:
        table = self.query_one("#devices-table", DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return str(row_key.value) if row_key.value is not None else None

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    async def action_open_reviews(self) -> None:
        device_id = self._highlighted_device_id()
        if device_id is None:
            self.notify_warning("No device highlighted")
            return
        await self.foundry_app.open_reviews_for_device(device_id)
