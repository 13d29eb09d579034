"""Processor and iGPU screens: descriptor tables with averaged performance."""

from typing import ClassVar

from typing_extensions import override

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import DataTable, Input, Static

import structlog

from foundry.models import IGPU, Processor
from foundry.services.aggregation import (
    devices_by_igpu,
    devices_by_processor,
    unique_igpus,
    unique_processors,
)
from foundry.services.charts import (
    BarRow,
    GroupFn,
    LineRow,
    group_bar_rows,
    group_line_rows,
)
from foundry.services.filtering import filter_processors

from .chart_base import ChartScreen
from .devices import SELECTED_MARK

log = structlog.stdlib.get_logger()


class GroupScreen(ChartScreen):
    """Table of group descriptors; selected groups are charted as averages.

    A group is every device sharing a processor (or iGPU) name. Subclasses
    must override grouper, group_names() and table_items(); the versions
    here raise NotImplementedError.
    """

    CSS: ClassVar[str] = """
    .group-container {
        padding: 1 2;
    }

    .group-table {
        height: auto;
        max-height: 12;
    }
    """

    COLUMNS: ClassVar[tuple[str, ...]] = ()

    _shown: list[str]

    def __init__(self) -> None:
        super().__init__()
        self._shown = []

    @property
    def grouper(self) -> GroupFn:
        raise NotImplementedError

    def group_names(self) -> list[str]:
        raise NotImplementedError

    def table_items(self) -> list[tuple[str, tuple[str, ...]]]:
        """(name, cells) for each row currently shown."""
        raise NotImplementedError

    @override
    def initial_selection(self) -> tuple[str, ...]:
        return tuple(self.group_names()[:2])

    def compose_search(self) -> ComposeResult:
        yield from ()

    @override
    def compose(self) -> ComposeResult:
        with Container(classes="group-container"):
            yield self.create_title_widget()
            yield from self.compose_search()
            yield DataTable(id="group-table", classes="group-table")
            yield Static("Performance (averaged over devices)", classes="section-title")
            yield from self.compose_chart_controls()

    @override
    async def on_mount(self) -> None:
        table = self.query_one("#group-table", DataTable)
        table.add_column("", key="mark")
        table.add_columns(*self.COLUMNS)
        table.cursor_type = "row"
        self.refresh_table()
        self.refresh_chart()

    def refresh_table(self) -> None:
        table = self.query_one("#group-table", DataTable)
        if not table.columns:
            return
        table.clear()
        self._shown = []
        for name, cells in self.table_items():
            table.add_row(Text(self._mark(name), style="green"), *cells, key=name)
            self._shown.append(name)

    def _mark(self, name: str) -> str:
        return SELECTED_MARK if name in self.selection.selected else ""

    @override
    def refresh_chart(self) -> None:
        super().refresh_chart()
        table = self.query_one("#group-table", DataTable)
        if not table.columns:
            return
        for name in self._shown:
            table.update_cell(name, "mark", Text(self._mark(name), style="green"))

    @override
    def bar_rows(self) -> list[BarRow]:
        return group_bar_rows(
            self.catalog.devices,
            self.selection.selected,
            self.grouper,
            self.selection.game_id,
            self.selection.wattage,
        )

    @override
    def line_rows(self) -> list[LineRow]:
        return group_line_rows(
            self.catalog.devices,
            self.selection.selected,
            self.grouper,
            self.selection.game_id,
            self.selection.show_p1,
        )

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key.value is not None:
            self.toggle_item(str(event.row_key.value))


def get_processor_row(cpu: Processor, device_count: int) -> tuple[str, ...]:
    return (
        cpu.name,
        cpu.arch,
        f"{cpu.cores}C / {cpu.threads}T",
        cpu.tdp,
        cpu.igpu_model,
        cpu.process,
        str(device_count),
    )


def get_igpu_row(igpu: IGPU, device_count: int) -> tuple[str, ...]:
    return (
        igpu.name,
        igpu.arch,
        str(igpu.cores),
        f"{igpu.max_freq} MHz",
        igpu.mem_type,
        igpu.notes or "",
        str(device_count),
    )


class ProcessorsScreen(GroupScreen):
    """Processors found in the catalog, searchable on any field."""

    SCREEN_TITLE: ClassVar[str] = "Processors"
    SCREEN_NAME: ClassVar[str] = "processors"

    COLUMNS: ClassVar[tuple[str, ...]] = (
        "Name", "Arch", "Cores", "TDP", "iGPU", "Process", "Devices",
    )

    _query: str

    def __init__(self) -> None:
        super().__init__()
        self._query = ""

    @property
    @override
    def grouper(self) -> GroupFn:
        return devices_by_processor

    @override
    def group_names(self) -> list[str]:
        return [cpu.name for cpu in unique_processors(self.catalog.devices)]

    @override
    def table_items(self) -> list[tuple[str, tuple[str, ...]]]:
        devices = self.catalog.devices
        processors = filter_processors(unique_processors(devices), self._query)
        return [
            (cpu.name, get_processor_row(cpu, len(devices_by_processor(devices, cpu.name))))
            for cpu in processors
        ]

    @override
    def compose_search(self) -> ComposeResult:
        yield Input(placeholder="Search processors…", id="processor-search")

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "processor-search":
            self._query = event.value
            self.refresh_table()


class IGPUsScreen(GroupScreen):
    """Integrated GPUs found in the catalog."""

    SCREEN_TITLE: ClassVar[str] = "Integrated GPUs"
    SCREEN_NAME: ClassVar[str] = "igpus"

    COLUMNS: ClassVar[tuple[str, ...]] = (
        "Name", "Arch", "Cores", "Max Freq", "Memory", "Notes", "Devices",
    )

    @property
    @override
    def grouper(self) -> GroupFn:
        return devices_by_igpu

    @override
    def group_names(self) -> list[str]:
        return [igpu.name for igpu in unique_igpus(self.catalog.devices)]

    @override
    def table_items(self) -> list[tuple[str, tuple[str, ...]]]:
        devices = self.catalog.devices
        return [
            (igpu.name, get_igpu_row(igpu, len(devices_by_igpu(devices, igpu.name))))
            for igpu in unique_igpus(devices)
        ]
