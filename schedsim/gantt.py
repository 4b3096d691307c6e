from __future__ import annotations

from typing import Callable, Dict, List, Optional

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ExecutionInterval

PALETTE = [
    "#3b82f6",
    "#10b981",
    "#eab308",
    "#a855f7",
    "#ec4899",
    "#6366f1",
    "#ef4444",
    "#14b8a6",
    "#f97316",
    "#06b6d4",
]


def assign_colors(intervals: List[ExecutionInterval], palette: Optional[List[str]] = None) -> Dict[str, str]:
    """
    Map each distinct pid to a display color, in first-appearance order.
    """
    palette = palette or PALETTE
    pid_to_color: Dict[str, str] = {}
    for interval in intervals:
        if interval.pid not in pid_to_color:
            pid_to_color[interval.pid] = palette[len(pid_to_color) % len(palette)]
    return pid_to_color


def _column_scale(intervals: List[ExecutionInterval], width: Optional[int]) -> Callable[[int], int]:
    # Time -> character column. Without a width every time unit is one column.
    makespan = intervals[-1].end_time
    if width is None or makespan <= 0:
        return lambda t: t
    return lambda t: round(t * width / makespan)


def render_gantt(intervals: List[ExecutionInterval], width: Optional[int] = None) -> str:
    """
    Plain-text Gantt chart renderer.
    """
    if not intervals:
        return "(no execution)"

    intervals = sorted(intervals, key=lambda i: (i.start_time, i.end_time))
    column = _column_scale(intervals, width)

    line = "|"
    labels = ""
    time_marks = "0"
    last_time = 0

    for iv in intervals:
        if iv.start_time > last_time:
            idle_gap = column(iv.start_time) - column(last_time)
            line += "." * idle_gap
            labels += " " * idle_gap
            last_time = iv.start_time
            time_marks += f"{last_time:>3}"

        block = max(1, column(iv.end_time) - column(iv.start_time))
        line += "=" * block
        labels += iv.process.label[:block].ljust(block)
        last_time = iv.end_time
        time_marks += f"{last_time:>3}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def build_rich_gantt(intervals: List[ExecutionInterval], width: Optional[int] = None) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart with a legend, and a
    string with time marks.
    """
    if not intervals:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    intervals = sorted(intervals, key=lambda i: (i.start_time, i.end_time))
    colors = assign_colors(intervals)
    column = _column_scale(intervals, width)

    timeline = Text()
    labels = Text()
    time_marks = "0"
    last_time = 0

    for iv in intervals:
        if iv.start_time > last_time:
            idle_gap = column(iv.start_time) - column(last_time)
            timeline.append(" " * idle_gap)
            labels.append(" " * idle_gap)
            last_time = iv.start_time
            time_marks += f"{last_time:>3}"

        block = max(1, column(iv.end_time) - column(iv.start_time))
        timeline.append(" " * block, style=f"on {colors[iv.pid]}")
        labels.append(iv.process.label[:block].ljust(block), style="bold")

        last_time = iv.end_time
        time_marks += f"{last_time:>3}"

    legend = Text()
    seen: set[str] = set()
    for iv in intervals:
        if iv.pid in seen:
            continue
        seen.add(iv.pid)
        legend.append("  ", style=f"on {colors[iv.pid]}")
        legend.append(f" {iv.process.label}  ")

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)
    table.add_row(Text())
    table.add_row(legend)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
