from __future__ import annotations

import csv
import json
import logging
import re
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from .errors import InvalidProcessError
from .models import Process
from .validation import validate_processes

logger = logging.getLogger(__name__)

_AUTO_PID = re.compile(r"^P(\d+)$")


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        entries = _load_json(path)
    elif suffix == ".csv":
        entries = _load_csv(path)
    else:
        raise InvalidProcessError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    processes = processes_from_mappings(entries)
    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Mapping]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidProcessError(f"Invalid JSON workload {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise InvalidProcessError("JSON workload must be a list of process objects")

    return raw


def _load_csv(path: Path) -> List[Mapping]:
    with path.open("r", encoding="utf-8", newline="") as f:
        return list(csv.DictReader(f))


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _int_field(mapping: Mapping, key: str, default: Optional[int] = None) -> Optional[int]:
    value = mapping.get(key)
    if _blank(value):
        return default
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidProcessError(f"Field '{key}' must be an integer: {mapping!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidProcessError(f"Field '{key}' must be an integer: {mapping!r}") from exc


def next_auto_pid(taken: Iterable[str]) -> str:
    """
    Return the next free ``P<n>`` id, one past the highest ``P<n>`` in use.
    """
    highest = 0
    for pid in taken:
        match = _AUTO_PID.match(pid)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"P{highest + 1}"


def processes_from_mappings(entries: Iterable[Mapping]) -> List[Process]:
    """
    Build validated processes from raw records (parsed JSON objects or CSV rows).

    ``burst_time`` is required; ``arrival_time`` defaults to 0 and records
    without a pid are auto-named ``P1``, ``P2``, ...
    """
    parsed = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise InvalidProcessError(f"Invalid process entry: {entry!r}")

        burst_time = _int_field(entry, "burst_time")
        if burst_time is None:
            raise InvalidProcessError(f"Invalid process entry (missing burst_time): {entry!r}")

        pid = None if _blank(entry.get("pid")) else str(entry["pid"]).strip()
        name = None if _blank(entry.get("name")) else str(entry["name"]).strip()
        parsed.append(
            (
                pid,
                name,
                _int_field(entry, "arrival_time", default=0),
                burst_time,
                _int_field(entry, "priority"),
            )
        )

    taken = [pid for pid, *_ in parsed if pid is not None]
    processes: List[Process] = []
    for pid, name, arrival_time, burst_time, priority in parsed:
        if pid is None:
            pid = next_auto_pid(taken)
            taken.append(pid)
        processes.append(
            Process(
                pid=pid,
                arrival_time=arrival_time,
                burst_time=burst_time,
                priority=priority,
                name=name,
            )
        )

    return validate_processes(processes)
