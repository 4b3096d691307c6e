from __future__ import annotations

from typing import List

from .models import ResultSummary, Schedule, SchedulingResult, SystemMetrics


def compute_system_metrics(schedule: Schedule) -> SystemMetrics:
    """
    Compute makespan, throughput and CPU utilization given populated
    per-process results and timeline intervals.
    """
    if not schedule.intervals:
        system = SystemMetrics(cpu_busy_time=0, idle_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)
        schedule.system = system
        return system

    makespan = schedule.intervals[-1].end_time
    cpu_busy_time = sum(interval.duration for interval in schedule.intervals)

    throughput = len(schedule.results) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        idle_time=makespan - cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )
    schedule.system = system
    return system


def summarize_results(results: List[SchedulingResult]) -> ResultSummary:
    """
    Reduce per-process results to simple arithmetic means.

    Results may arrive in completion order; nothing here depends on order
    except which pid is reported for a tied longest wait.
    """
    if not results:
        return ResultSummary(count=0, avg_waiting=0.0, avg_turnaround=0.0, avg_response=0.0, max_waiting=0)

    n = len(results)
    longest = results[0]
    for r in results[1:]:
        if r.waiting_time > longest.waiting_time:
            longest = r

    return ResultSummary(
        count=n,
        avg_waiting=sum(r.waiting_time for r in results) / n,
        avg_turnaround=sum(r.turnaround_time for r in results) / n,
        avg_response=sum(r.response_time for r in results) / n,
        max_waiting=longest.waiting_time,
        longest_wait_pid=longest.pid,
    )
