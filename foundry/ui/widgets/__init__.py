"""Custom widgets for the TUI application."""

from .performance_chart import PerformanceChart, render_bar_chart, render_line_table

__all__ = [
    "PerformanceChart",
    "render_bar_chart",
    "render_line_table",
]
