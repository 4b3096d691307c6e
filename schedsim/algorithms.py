from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional, Tuple

from .errors import InvalidQuantumError, SimulationError, UnsupportedPolicyError
from .metrics import compute_system_metrics
from .models import ExecutionInterval, Process, Schedule, SchedulingResult
from .validation import validate_processes

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2

# Key used to rank candidate processes: (process, remaining time) -> comparable.
SelectionKey = Callable[[Process, int], int]
# Preemption test: (arriving, running, running's remaining time at the arrival).
PreemptionTest = Callable[[Process, Process, int], bool]


def effective_priority(process: Process) -> int:
    """Priority used for scheduling; a missing priority counts as 0."""
    return process.priority if process.priority is not None else 0


def select_first_best(candidates: List[int], key: Callable[[int], int]) -> int:
    """
    Return the candidate index with the smallest key.

    Candidates are scanned in input order and replaced only on a strictly
    smaller key, so on a tie the process listed first in the input wins.
    """
    best = candidates[0]
    best_key = key(best)
    for idx in candidates[1:]:
        candidate_key = key(idx)
        if candidate_key < best_key:
            best, best_key = idx, candidate_key
    return best


def _available(processes: List[Process], remaining: List[int], time: int) -> List[int]:
    return [i for i, p in enumerate(processes) if p.arrival_time <= time and remaining[i] > 0]


def _arrival_order(processes: List[Process]) -> List[int]:
    # sorted() is stable: equal arrival times keep their input order.
    return sorted(range(len(processes)), key=lambda i: processes[i].arrival_time)


def _next_arrival(processes: List[Process], remaining: List[int], time: int) -> int:
    """
    Time the CPU should jump to when nothing is available at ``time``.
    """
    pending = [p.arrival_time for i, p in enumerate(processes) if remaining[i] > 0]
    if not pending:
        raise SimulationError(f"CPU idle at t={time} with no unfinished process left")

    nxt = min(pending)
    if nxt <= time:
        raise SimulationError(
            f"No process available at t={time} although an unfinished process arrived at t={nxt}"
        )

    logger.debug("t=%d: CPU idle until t=%d", time, nxt)
    return nxt


def _dispatch(intervals: List[ExecutionInterval], process: Process, start_time: int, end_time: int) -> None:
    if end_time <= start_time:
        raise SimulationError(
            f"Non-positive run length for {process.pid}: [{start_time}, {end_time})"
        )
    logger.debug("t=%d-%d: run %s", start_time, end_time, process.pid)
    intervals.append(ExecutionInterval(process=process, start_time=start_time, end_time=end_time))


def _complete(process: Process, first_start: int, end_time: int) -> SchedulingResult:
    turnaround_time = end_time - process.arrival_time
    waiting_time = turnaround_time - process.burst_time
    logger.debug(
        "t=%d: %s completed (waiting=%d, turnaround=%d)",
        end_time,
        process.pid,
        waiting_time,
        turnaround_time,
    )
    return SchedulingResult(
        process=process,
        start_time=first_start,
        end_time=end_time,
        waiting_time=waiting_time,
        turnaround_time=turnaround_time,
    )


def _build_schedule(
    policy: str,
    quantum: Optional[int],
    intervals: List[ExecutionInterval],
    results: List[SchedulingResult],
) -> Schedule:
    schedule = Schedule(policy=policy, quantum=quantum, intervals=intervals, results=results)
    compute_system_metrics(schedule)
    logger.info(
        "%s: scheduled %d processes in %d intervals (makespan %d)",
        policy,
        len(results),
        len(intervals),
        schedule.system.makespan,
    )
    return schedule


def _run_to_completion(
    processes: List[Process], key: SelectionKey
) -> Tuple[List[ExecutionInterval], List[SchedulingResult]]:
    """
    Shared loop for the non-preemptive "best available" policies.

    The selected process always runs its whole burst in one interval.
    """
    remaining = [p.burst_time for p in processes]
    intervals: List[ExecutionInterval] = []
    results: List[SchedulingResult] = []
    time = 0

    while len(results) < len(processes):
        ready = _available(processes, remaining, time)
        if not ready:
            time = _next_arrival(processes, remaining, time)
            continue

        idx = select_first_best(ready, lambda i: key(processes[i], remaining[i]))
        p = processes[idx]

        start_time = time
        end_time = start_time + p.burst_time
        _dispatch(intervals, p, start_time, end_time)

        remaining[idx] = 0
        results.append(_complete(p, start_time, end_time))
        time = end_time

    return intervals, results


def _run_preemptive(
    processes: List[Process], key: SelectionKey, preempts: PreemptionTest
) -> Tuple[List[ExecutionInterval], List[SchedulingResult]]:
    """
    Shared discrete-event loop for the preemptive policies.

    At each decision point the best available process is selected and given
    its full remaining time. Future arrivals are then scanned in arrival order
    (equal arrival times in input order); the first one that lands before
    that completion and passes ``preempts`` cuts the run short at its arrival
    instant. The next decision point re-evaluates everything from scratch.
    """
    n = len(processes)
    remaining = [p.burst_time for p in processes]
    first_start: List[Optional[int]] = [None] * n
    arrival_order = _arrival_order(processes)

    intervals: List[ExecutionInterval] = []
    results: List[SchedulingResult] = []
    time = 0

    while len(results) < n:
        ready = _available(processes, remaining, time)
        if not ready:
            time = _next_arrival(processes, remaining, time)
            continue

        idx = select_first_best(ready, lambda i: key(processes[i], remaining[i]))
        current = processes[idx]
        if first_start[idx] is None:
            first_start[idx] = time

        run_time = remaining[idx]
        for j in arrival_order:
            arriving = processes[j]
            if arriving.arrival_time <= time or remaining[j] == 0:
                continue
            time_to_arrival = arriving.arrival_time - time
            if time_to_arrival >= run_time:
                break
            if preempts(arriving, current, remaining[idx] - time_to_arrival):
                logger.debug(
                    "t=%d: %s preempts %s", arriving.arrival_time, arriving.pid, current.pid
                )
                run_time = time_to_arrival
                break

        _dispatch(intervals, current, time, time + run_time)
        time += run_time
        remaining[idx] -= run_time

        if remaining[idx] == 0:
            results.append(_complete(current, first_start[idx], time))

    return intervals, results


def schedule_fcfs(processes: Iterable[Process], quantum: Optional[int] = None) -> Schedule:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes run back-to-back in arrival order; equal arrival times keep
    their input order.
    """
    processes = validate_processes(processes)
    processes_sorted = sorted(processes, key=lambda p: p.arrival_time)

    time = 0
    intervals: List[ExecutionInterval] = []
    results: List[SchedulingResult] = []

    for p in processes_sorted:
        start_time = max(time, p.arrival_time)
        if start_time > time:
            logger.debug("t=%d: CPU idle until t=%d", time, start_time)
        end_time = start_time + p.burst_time

        _dispatch(intervals, p, start_time, end_time)
        results.append(_complete(p, start_time, end_time))
        time = end_time

    return _build_schedule("fcfs", None, intervals, results)


def schedule_sjf(processes: Iterable[Process], quantum: Optional[int] = None) -> Schedule:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time. A shorter process
    arriving mid-run never interrupts the running one.
    """
    processes = validate_processes(processes)
    intervals, results = _run_to_completion(processes, lambda p, _remaining: p.burst_time)
    return _build_schedule("sjf", None, intervals, results)


def schedule_rr(processes: Iterable[Process], quantum: Optional[int] = None) -> Schedule:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice runs join the ready queue, in input
    order, ahead of the process whose slice just ended.
    """
    if not isinstance(quantum, int) or isinstance(quantum, bool) or quantum <= 0:
        raise InvalidQuantumError(
            f"Round Robin requires a positive integer quantum (use --quantum), got {quantum!r}"
        )

    processes = validate_processes(processes)
    n = len(processes)
    remaining = [p.burst_time for p in processes]
    first_start: List[Optional[int]] = [None] * n
    arrived = [False] * n

    time = 0
    intervals: List[ExecutionInterval] = []
    results: List[SchedulingResult] = []

    # Ready queue of process indices
    ready: Deque[int] = deque()

    def enqueue_new_arrivals(current_time: int) -> None:
        # Input order, not arrival order, decides who queues first.
        for i in range(n):
            if not arrived[i] and processes[i].arrival_time <= current_time:
                arrived[i] = True
                ready.append(i)

    while len(results) < n:
        enqueue_new_arrivals(time)
        if not ready:
            time = _next_arrival(processes, remaining, time)
            continue

        idx = ready.popleft()
        p = processes[idx]
        if first_start[idx] is None:
            first_start[idx] = time

        run_time = min(quantum, remaining[idx])
        _dispatch(intervals, p, time, time + run_time)

        time += run_time
        remaining[idx] -= run_time

        # Arrivals during this slice queue up before the current process.
        enqueue_new_arrivals(time)

        if remaining[idx] > 0:
            ready.append(idx)
        else:
            results.append(_complete(p, first_start[idx], time))

    return _build_schedule("rr", quantum, intervals, results)


def schedule_priority(processes: Iterable[Process], quantum: Optional[int] = None) -> Schedule:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority; a missing priority
    counts as 0. Ties go to the process listed first in the input.
    """
    processes = validate_processes(processes)
    intervals, results = _run_to_completion(
        processes, lambda p, _remaining: effective_priority(p)
    )
    return _build_schedule("priority", None, intervals, results)


def schedule_preemptive_priority(processes: Iterable[Process], quantum: Optional[int] = None) -> Schedule:
    """
    Preemptive Priority scheduling.

    The running process is interrupted the moment a process with a strictly
    better (lower) priority arrives.
    """
    processes = validate_processes(processes)
    intervals, results = _run_preemptive(
        processes,
        key=lambda p, _remaining: effective_priority(p),
        preempts=lambda arriving, running, _left: effective_priority(arriving) < effective_priority(running),
    )
    return _build_schedule("preemptive-priority", None, intervals, results)


def schedule_srtf(processes: Iterable[Process], quantum: Optional[int] = None) -> Schedule:
    """
    Shortest Remaining Time First (preemptive SJF).

    An arriving process preempts when its burst is strictly shorter than what
    the running process would still need at the arrival instant.
    """
    processes = validate_processes(processes)
    intervals, results = _run_preemptive(
        processes,
        key=lambda _p, remaining: remaining,
        preempts=lambda arriving, _running, left: arriving.burst_time < left,
    )
    return _build_schedule("srtf", None, intervals, results)


POLICIES: Dict[str, Callable[..., Schedule]] = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "rr": schedule_rr,
    "priority": schedule_priority,
    "preemptive-priority": schedule_preemptive_priority,
    "srtf": schedule_srtf,
}

POLICY_ALIASES: Dict[str, str] = {
    "roundrobin": "rr",
    "ppriority": "preemptive-priority",
}

POLICY_TITLES: Dict[str, str] = {
    "fcfs": "FCFS",
    "sjf": "SJF (non-preemptive)",
    "rr": "Round Robin",
    "priority": "Priority (non-preemptive)",
    "preemptive-priority": "Priority (preemptive)",
    "srtf": "SRTF",
}


def resolve_policy(name: str) -> str:
    """
    Map a user-supplied policy selector to its canonical name.
    """
    key = name.strip().lower()
    key = POLICY_ALIASES.get(key, key)
    if key not in POLICIES:
        raise UnsupportedPolicyError(
            f"Unknown scheduling policy '{name}' (choose from: {', '.join(POLICIES)})"
        )
    return key


def run_policy(name: str, processes: Iterable[Process], quantum: Optional[int] = None) -> Schedule:
    """
    Dispatch to the requested policy. The quantum is only used by Round Robin.
    """
    func = POLICIES[resolve_policy(name)]
    return func(processes, quantum=quantum)
