from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import DEFAULT_QUANTUM, POLICIES, POLICY_TITLES, run_policy
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .metrics import summarize_results
from .models import Process, Schedule
from .workload_io import load_workload

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, RR, Priority, Preemptive Priority, SRTF).",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging level (default: WARNING).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Shorthand for --log-level DEBUG; logs every dispatch and preemption.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling policy on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Policy to use ({', '.join(POLICIES)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by every other policy).",
    )
    run_parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Scale the Gantt chart to this many characters (default: one per time unit).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple policies on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(POLICIES),
        help=f"Policies to compare (default: {' '.join(POLICIES)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def configure_logging(level: str, console: Console) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_processes(processes: List[Process], console: Console) -> None:
    table = Table(title="Workload", box=box.SIMPLE_HEAVY)
    for h in ["PID", "Name", "Arrive", "Burst", "Priority"]:
        table.add_column(h, justify="center" if h in {"PID", "Name", "Priority"} else "right")
    for p in processes:
        table.add_row(
            p.pid,
            p.label,
            str(p.arrival_time),
            str(p.burst_time),
            "" if p.priority is None else str(p.priority),
        )
    console.print(table)


def _print_result(schedule: Schedule, console: Console, width: int | None = None) -> None:
    console.print(f"[bold]Algorithm:[/bold] {POLICY_TITLES[schedule.policy]}")
    if schedule.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {schedule.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(schedule.intervals, width=width)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "Process",
        "Arrive",
        "Burst",
        "Start",
        "Complete",
        "Wait",
        "Turnaround",
        "Response",
        "Priority",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"Process", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for r in schedule.results:
        proc_table.add_row(
            r.process.label,
            str(r.arrival_time),
            str(r.burst_time),
            str(r.start_time),
            str(r.end_time),
            str(r.waiting_time),
            str(r.turnaround_time),
            str(r.response_time),
            "" if r.process.priority is None else str(r.process.priority),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_results(schedule.results)
    if schedule.system:
        sys = schedule.system
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg waiting", f"{summary.avg_waiting:.2f}")
        sys_table.add_row("Avg turnaround", f"{summary.avg_turnaround:.2f}")
        sys_table.add_row("Avg response", f"{summary.avg_response:.2f}")
        if summary.longest_wait_pid is not None:
            sys_table.add_row("Longest wait", f"{summary.max_waiting} ({summary.longest_wait_pid})")
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Idle time", str(sys.idle_time))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")

        console.print(sys_table)


def _run_compare(workload_path: Path, policies: List[str], quantum: int, console: Console) -> None:
    """
    Run each policy on a workload and print the summary table.
    """
    processes = load_workload(workload_path)

    summary_table = Table(title=f"Algorithm comparison: {workload_path}", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for alg in policies:
        schedule = run_policy(alg, processes, quantum=quantum)
        summary = summarize_results(schedule.results)
        summary_table.add_row(
            POLICY_TITLES[schedule.policy],
            "" if schedule.quantum is None else str(schedule.quantum),
            f"{summary.avg_waiting:.2f}",
            f"{summary.avg_turnaround:.2f}",
            f"{summary.avg_response:.2f}",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    configure_logging("DEBUG" if args.verbose else args.log_level, console)

    try:
        if args.command == "run":
            processes = load_workload(Path(args.workload))
            _print_processes(processes, console)
            schedule = run_policy(args.algorithm, processes, quantum=args.quantum)
            _print_result(schedule, console, width=args.width)
            return 0

        if args.command == "compare":
            _run_compare(Path(args.workload), args.algorithms, args.quantum, console)
            return 0
    except (SchedulerError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
