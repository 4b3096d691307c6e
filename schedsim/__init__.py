"""
Scheduling simulator package.

Simulates single-CPU scheduling policies (FCFS, SJF, Round Robin, Priority,
Preemptive Priority, SRTF) and reports a Gantt timeline plus per-process
timing metrics.
"""

from .algorithms import POLICIES, run_policy
from .errors import (
    InvalidProcessError,
    InvalidQuantumError,
    SchedulerError,
    SimulationError,
    UnsupportedPolicyError,
)
from .models import ExecutionInterval, Process, ResultSummary, Schedule, SchedulingResult

__all__ = [
    "POLICIES",
    "run_policy",
    "Process",
    "ExecutionInterval",
    "SchedulingResult",
    "Schedule",
    "ResultSummary",
    "SchedulerError",
    "InvalidProcessError",
    "InvalidQuantumError",
    "UnsupportedPolicyError",
    "SimulationError",
]
