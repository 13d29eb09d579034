"""Text-mode performance chart for bar and line series."""

from collections.abc import Sequence
from typing import ClassVar

from rich.table import Table
from rich.text import Text
from textual.widgets import Static

import structlog

from foundry.services.charts import BarRow, LineRow

log = structlog.stdlib.get_logger()

NO_DATA = "No performance data for this selection."
AVG_STYLE = "bold cyan"
P1_STYLE = "magenta"


def _format_fps(value: float) -> str:
    return f"{value:.0f}" if float(value).is_integer() else f"{value:.1f}"


def render_bar_chart(rows: Sequence[BarRow], show_p1: bool = True, width: int = 40) -> Text:
    """Render bar rows as horizontal bars scaled to the largest value.

    Args:
        rows: Bar rows to draw
        show_p1: Also draw the 1% low bar under each average bar
        width: Length of the longest bar in cells

    Returns:
        Rich text, or a "no data" message when every value is 0
    """
    peak = max((max(r.avg, r.p1 if show_p1 else 0) for r in rows), default=0)
    if peak <= 0:
        return Text(NO_DATA, style="dim")

    label_width = max(len(r.label) for r in rows)
    text = Text()
    for row in rows:
        bars = [("avg", row.avg, AVG_STYLE)]
        if show_p1:
            bars.append(("1%", row.p1, P1_STYLE))
        for i, (kind, value, style) in enumerate(bars):
            label = row.label if i == 0 else ""
            length = round(value / peak * width)
            text.append(f"{label:<{label_width}} {kind:>3} ")
            text.append("█" * length, style=style)
            text.append(f" {_format_fps(value)}\n")
    return text


def render_line_table(rows: Sequence[LineRow]) -> Table | Text:
    """Render line rows as a table: one column per wattage, one row per series."""
    if not rows or not any(v for r in rows for v in r.values.values()):
        return Text(NO_DATA, style="dim")

    table = Table(show_edge=False, pad_edge=False)
    table.add_column("Series", style="bold")
    for row in rows:
        table.add_column(f"{row.wattage}W", justify="right")

    series = list(rows[0].values)
    for name in series:
        style = P1_STYLE if name.endswith("(1% low)") else None
        cells = [_format_fps(r.values.get(name, 0)) for r in rows]
        table.add_row(name, *cells, style=style)
    return table


class PerformanceChart(Static):
    """Shows FPS either as bars at one wattage or as a table across wattages."""

    DEFAULT_CSS: ClassVar[str] = """
    PerformanceChart {
        height: auto;
        padding: 1;
        border: solid $primary-darken-2;
    }
    """

    def show_bars(self, rows: Sequence[BarRow], show_p1: bool = True) -> None:
        self.update(render_bar_chart(rows, show_p1=show_p1))
        log.debug("Bar chart rendered", rows=len(rows), show_p1=show_p1)

    def show_lines(self, rows: Sequence[LineRow]) -> None:
        self.update(render_line_table(rows))
        log.debug("Line chart rendered", wattages=len(rows))
