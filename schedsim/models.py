from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: Optional[int] = None
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or self.pid


@dataclass(frozen=True)
class ExecutionInterval:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    process: Process
    start_time: int
    end_time: int

    @property
    def pid(self) -> str:
        return self.process.pid

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class SchedulingResult:
    """
    Timing outcome for one process, produced when it completes.

    ``start_time`` is the first dispatch of the process, ``end_time`` its
    completion.
    """

    process: Process
    start_time: int
    end_time: int
    waiting_time: int
    turnaround_time: int

    @property
    def pid(self) -> str:
        return self.process.pid

    @property
    def arrival_time(self) -> int:
        return self.process.arrival_time

    @property
    def burst_time(self) -> int:
        return self.process.burst_time

    @property
    def response_time(self) -> int:
        return self.start_time - self.process.arrival_time


@dataclass
class ResultSummary:
    """
    Per-run averages over the scheduling results.

    ``longest_wait_pid`` is the first process (in completion order) that
    waited ``max_waiting``; it is None for an empty run.
    """

    count: int
    avg_waiting: float
    avg_turnaround: float
    avg_response: float
    max_waiting: int
    longest_wait_pid: Optional[str] = None


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    idle_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class Schedule:
    policy: str
    quantum: Optional[int]
    intervals: List[ExecutionInterval] = field(default_factory=list)
    results: List[SchedulingResult] = field(default_factory=list)
    system: Optional[SystemMetrics] = None

    def result_for(self, pid: str) -> SchedulingResult:
        for result in self.results:
            if result.pid == pid:
                return result
        raise KeyError(pid)
