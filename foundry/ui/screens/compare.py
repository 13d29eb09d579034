"""Compare screen: side-by-side specs with best values highlighted."""

from typing import ClassVar

from typing_extensions import override

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import Button, DataTable, Select, Static

import structlog

from foundry.models import DeviceBundle, SelectionState
from foundry.services.comparison import ComparisonRow, comparison_table

from .base import BaseScreen

log = structlog.stdlib.get_logger()

BEST_STYLE = "bold green"


def render_cell(display: str, is_best: bool) -> Text:
    return Text(display, style=BEST_STYLE if is_best else "")


class CompareScreen(BaseScreen):
    """Pick devices and compare their specifications metric by metric."""

    SCREEN_TITLE: ClassVar[str] = "Compare Devices"
    SCREEN_NAME: ClassVar[str] = "compare"

    CSS: ClassVar[str] = """
    #compare-container {
        padding: 1 2;
    }

    #compare-table {
        height: auto;
    }

    #compare-hint {
        color: $text-muted;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
        Binding("a", "add_device", "Add", show=True),
        Binding("r", "remove_device", "Remove", show=True),
    ]

    selection: SelectionState

    def __init__(self) -> None:
        super().__init__()
        self.selection = SelectionState()

    @override
    def compose(self) -> ComposeResult:
        devices = self.catalog.devices
        self.selection = SelectionState(selected=tuple(d.id for d in devices[:2]))

        with Container(id="compare-container"):
            yield self.create_title_widget()
            with Horizontal(classes="toolbar"):
                yield Select(
                    [(d.name, d.id) for d in devices],
                    id="device-picker",
                    prompt="Device",
                )
                yield Button("Add", id="add-button", variant="primary")
                yield Button("Remove", id="remove-button", variant="warning")
            yield DataTable(id="compare-table", cursor_type="none", zebra_stripes=True)
            yield Static("Best values are highlighted in green.", id="compare-hint")

    @override
    async def on_mount(self) -> None:
        self.refresh_table()

    def selected_devices(self) -> list[DeviceBundle]:
        """Selected devices in the order they were added."""
        return [
            device
            for device in (self.catalog.get(i) for i in self.selection.selected)
            if device is not None
        ]

    def refresh_table(self) -> None:
        devices = self.selected_devices()
        rows = comparison_table(devices)

        table = self.query_one("#compare-table", DataTable)
        table.clear(columns=True)
        table.add_column("Metric", key="metric")
        for device in devices:
            table.add_column(device.name, key=device.id)
        for row in rows:
            table.add_row(*self._row_cells(row), key=row.metric.key)

        log.debug("Comparison refreshed", devices=[d.id for d in devices])

    @staticmethod
    def _row_cells(row: ComparisonRow) -> list[Text]:
        return [Text(row.metric.label, style="bold")] + [
            render_cell(cell.display, cell.is_best) for cell in row.cells
        ]

    def _picked_id(self) -> str | None:
        value = self.query_one("#device-picker", Select).value
        if value is Select.BLANK:
            return None
        return str(value)

    def set_selection(self, selection: SelectionState) -> None:
        self.selection = selection
        self.refresh_table()

    def action_add_device(self) -> None:
        device_id = self._picked_id()
        if device_id is None:
            self.notify_warning("Pick a device first")
            return
        if device_id in self.selection.selected:
            self.notify_warning("Device is already being compared")
            return
        self.set_selection(self.selection.add(device_id))

    def action_remove_device(self) -> None:
        device_id = self._picked_id()
        if device_id is None or device_id not in self.selection.selected:
            self.notify_warning("Pick a compared device to remove")
            return
        self.set_selection(self.selection.remove(device_id))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "add-button":
            self.action_add_device()
        elif event.button.id == "remove-button":
            self.action_remove_device()
