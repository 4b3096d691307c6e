from __future__ import annotations

from typing import Iterable, List

from .errors import InvalidProcessError
from .models import Process


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_process(process: Process) -> Process:
    """
    Check a single process against the engine's input constraints.
    """
    if not isinstance(process, Process):
        raise InvalidProcessError(f"Not a process record: {process!r}")
    if not process.pid:
        raise InvalidProcessError(f"Process has an empty pid: {process!r}")
    if not _is_int(process.arrival_time) or process.arrival_time < 0:
        raise InvalidProcessError(
            f"Process {process.pid}: arrival_time must be an integer >= 0, got {process.arrival_time!r}"
        )
    if not _is_int(process.burst_time) or process.burst_time <= 0:
        raise InvalidProcessError(
            f"Process {process.pid}: burst_time must be an integer > 0, got {process.burst_time!r}"
        )
    if process.priority is not None and not _is_int(process.priority):
        raise InvalidProcessError(
            f"Process {process.pid}: priority must be an integer, got {process.priority!r}"
        )
    return process


def validate_processes(processes: Iterable[Process]) -> List[Process]:
    """
    Validate every process and reject duplicate pids.

    Returns the processes as a list, in input order.
    """
    checked: List[Process] = []
    seen: set[str] = set()
    for process in processes:
        validate_process(process)
        if process.pid in seen:
            raise InvalidProcessError(f"Duplicate pid: {process.pid}")
        seen.add(process.pid)
        checked.append(process)
    return checked
