from rich.console import Console
from rich.panel import Panel

from schedsim.algorithms import schedule_rr, schedule_fcfs
from schedsim.gantt import PALETTE, assign_colors, build_rich_gantt, render_gantt
from schedsim.models import Process


def test_colors_follow_first_appearance():
    res = schedule_rr([Process("P1", 0, 5), Process("P2", 1, 3)], quantum=2)
    colors = assign_colors(res.intervals)
    assert list(colors) == ["P1", "P2"]
    assert colors == {"P1": PALETTE[0], "P2": PALETTE[1]}


def test_colors_cycle_through_palette():
    procs = [Process(f"P{i}", i, 1) for i in range(len(PALETTE) + 1)]
    colors = assign_colors(schedule_fcfs(procs).intervals)
    assert colors[f"P{len(PALETTE)}"] == PALETTE[0]


def test_render_gantt_plain():
    res = schedule_fcfs([Process("A", 0, 2, name="alpha"), Process("B", 4, 3)])
    text = render_gantt(res.intervals)
    lines = text.splitlines()
    assert lines[0] == "Gantt Chart:"
    assert lines[1] == "|==..===|"
    assert lines[2].startswith("al  B")
    assert lines[3] == "0  2  4  7"


def test_render_gantt_scaled_width():
    res = schedule_fcfs([Process("A", 0, 10), Process("B", 10, 30)])
    line = render_gantt(res.intervals, width=20).splitlines()[1]
    assert line == "|" + "=" * 5 + "=" * 15 + "|"


def test_render_gantt_empty():
    assert render_gantt([]) == "(no execution)"


def test_rich_gantt_renders_legend():
    res = schedule_fcfs([Process("A", 0, 3, name="alpha"), Process("B", 0, 2)])
    panel, time_marks = build_rich_gantt(res.intervals)
    assert isinstance(panel, Panel)
    assert time_marks == "0  3  5"

    console = Console(record=True, width=80)
    console.print(panel)
    output = console.export_text()
    assert "Gantt Chart" in output
    assert "alpha" in output


def test_rich_gantt_empty():
    panel, time_marks = build_rich_gantt([])
    assert time_marks == ""
    assert panel.renderable == "No execution"
