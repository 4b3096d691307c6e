import json
from pathlib import Path

from schedsim.cli import build_parser, main


def _workload(tmp_path: Path) -> Path:
    p = tmp_path / "w.json"
    p.write_text(
        json.dumps(
            [
                {"pid": "P1", "arrival_time": 0, "burst_time": 5, "priority": 2},
                {"pid": "P2", "arrival_time": 1, "burst_time": 3, "priority": 1},
            ]
        )
    )
    return p


def test_parser_defaults():
    args = build_parser().parse_args(["compare", "-w", "w.json"])
    assert args.quantum == 2
    assert "srtf" in args.algorithms
    assert args.log_level == "WARNING"


def test_run_prints_tables(tmp_path: Path, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(_workload(tmp_path))]) == 0
    out = capsys.readouterr().out
    assert "Algorithm:" in out
    assert "FCFS" in out
    assert "Per-process metrics" in out
    assert "Avg waiting" in out
    assert "Longest wait" in out


def test_run_round_robin_shows_quantum(tmp_path: Path, capsys):
    assert main(["run", "-a", "rr", "-q", "2", "-w", str(_workload(tmp_path))]) == 0
    out = capsys.readouterr().out
    assert "Quantum:" in out


def test_compare_lists_each_policy(tmp_path: Path, capsys):
    assert main(["compare", "-w", str(_workload(tmp_path)), "-a", "fcfs", "srtf"]) == 0
    out = capsys.readouterr().out
    assert "FCFS" in out
    assert "SRTF" in out


def test_unknown_policy_exits_with_error(tmp_path: Path, capsys):
    assert main(["run", "-a", "lottery", "-w", str(_workload(tmp_path))]) == 1
    assert "Unknown scheduling policy" in capsys.readouterr().out


def test_rr_without_quantum_exits_with_error(tmp_path: Path, capsys):
    assert main(["run", "-a", "rr", "-w", str(_workload(tmp_path))]) == 1
    assert "quantum" in capsys.readouterr().out


def test_missing_workload_file(tmp_path: Path, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(tmp_path / "nope.json")]) == 1
    assert "Error" in capsys.readouterr().out
