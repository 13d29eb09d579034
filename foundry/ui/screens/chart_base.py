"""Shared chart controls for the devices, processors and iGPU screens."""

from typing import ClassVar

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Label, Select, Switch

import structlog

from foundry.models import ChartMode, SelectionState
from foundry.services.aggregation import (
    all_wattages,
    default_wattage,
    game_options,
    wattage_options,
)
from foundry.services.charts import BarRow, LineRow
from foundry.ui.widgets import PerformanceChart

from .base import BaseScreen, as_select_options

log = structlog.stdlib.get_logger()


class ChartScreen(BaseScreen):
    """Screen with a game/wattage picker and a performance chart.

    This class owns the SelectionState and redraws the chart whenever it
    changes. Subclasses must override bar_rows() and line_rows(), which
    raise NotImplementedError here, and usually initial_selection().
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
        Binding("c", "toggle_chart_mode", "Bar/Line", show=True),
        Binding("p", "toggle_p1", "1% lows", show=True),
    ]

    selection: SelectionState

    def __init__(self) -> None:
        super().__init__()
        self.selection = SelectionState()

    def initial_selection(self) -> tuple[str, ...]:
        """Items selected when the screen opens."""
        return ()

    def bar_rows(self) -> list[BarRow]:
        raise NotImplementedError

    def line_rows(self) -> list[LineRow]:
        raise NotImplementedError

    def _initial_state(self) -> SelectionState:
        devices = self.catalog.devices
        games = game_options(devices)
        return SelectionState(
            selected=self.initial_selection(),
            game_id=games[0][0] if games else None,
            wattage=default_wattage(all_wattages(devices)),
        )

    def compose_chart_controls(self) -> ComposeResult:
        """Yield the game/wattage selects, the 1% low switch and the chart."""
        devices = self.catalog.devices
        self.selection = self._initial_state()
        watt_options = wattage_options(devices)
        watt_value = str(self.selection.wattage)
        if watt_value not in (value for value, _ in watt_options):
            watt_value = Select.BLANK

        with Horizontal(classes="toolbar"):
            yield Select(
                as_select_options(game_options(devices)),
                value=self.selection.game_id if self.selection.game_id else Select.BLANK,
                id="game-select",
                prompt="Game",
            )
            yield Select(
                as_select_options(watt_options),
                value=watt_value,
                id="watt-select",
                prompt="Wattage",
            )
            yield Label("1% lows")
            yield Switch(value=self.selection.show_p1, id="p1-switch")
        yield PerformanceChart(id="chart")

    def refresh_chart(self) -> None:
        """Redraw the chart from the current selection."""
        chart = self.query_one("#chart", PerformanceChart)
        if self.selection.chart_mode is ChartMode.LINE:
            chart.show_lines(self.line_rows())
        else:
            chart.show_bars(self.bar_rows(), show_p1=self.selection.show_p1)

    def set_selection(self, selection: SelectionState) -> None:
        self.selection = selection
        log.debug("Selection changed", screen=self.SCREEN_NAME, selection=selection.to_dict())
        self.refresh_chart()

    def toggle_item(self, item: str) -> None:
        self.set_selection(self.selection.toggle(item))

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK:
            return
        if event.select.id == "game-select":
            self.set_selection(self.selection.with_game(str(event.value)))
        elif event.select.id == "watt-select":
            self.set_selection(self.selection.with_wattage(int(str(event.value))))

    def on_switch_changed(self, event: Switch.Changed) -> None:
        if event.switch.id == "p1-switch":
            self.set_selection(self.selection.with_show_p1(event.value))

    def action_toggle_chart_mode(self) -> None:
        mode = ChartMode.LINE if self.selection.chart_mode is ChartMode.BAR else ChartMode.BAR
        self.set_selection(self.selection.with_chart_mode(mode))

    def action_toggle_p1(self) -> None:
        self.query_one("#p1-switch", Switch).toggle()
