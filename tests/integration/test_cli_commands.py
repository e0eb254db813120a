"""Integration tests for the status, watch and verify commands."""

from __future__ import annotations

import json
from argparse import Namespace
from pathlib import Path

import pytest

from seqdir.commands.status import run_status
from seqdir.commands.verify import run_verify
from seqdir.commands.watch import run_watch
from seqdir.core.completion import CompletionCode, CompletionStatus
from seqdir.core.machine import RunStateMachine
from seqdir.errors import IncompleteRun, UnsuccessfulRun, ValidationError
from seqdir.settings import Settings
from tests.helpers.clock import ManualClock
from tests.helpers.fs import COMPLETE_RUN_ID, write_completion


def _watch_args(root: Path, **overrides) -> Namespace:
    values = {
        "root": root,
        "interval": None,
        "max_polls": None,
        "once": False,
        "config": None,
        "json": True,
        "verbose": False,
    }
    values.update(overrides)
    return Namespace(**values)


def _data(lines: list[str]) -> list[dict]:
    return [json.loads(line)["data"] for line in lines]


def test_status_json_reports_settled_phase(seq_complete: Path) -> None:
    lines: list[str] = []

    code = run_status(Namespace(root=seq_complete, json=True), output_sink=lines.append)

    assert code == 0
    assert len(lines) == 1
    envelope = json.loads(lines[0])
    assert envelope["schema_version"] == "v1"
    assert envelope["command"] == "status"
    data = envelope["data"]
    assert data["phase"] == "Complete"
    assert data["available"] is True
    assert data["root"] == str(seq_complete)
    assert data["since"].endswith("Z")
    assert data["completion"]["run_id"] == COMPLETE_RUN_ID


def test_status_human_output(seq_sequencing: Path) -> None:
    lines: list[str] = []

    run_status(Namespace(root=seq_sequencing, json=False), output_sink=lines.append)

    assert lines[0] == f"status: root={seq_sequencing}"
    assert lines[1].startswith("status: phase=InProgress since=")
    assert lines[1].endswith(" available")


def test_status_of_missing_root_is_unavailable_not_an_error(tmp_path: Path) -> None:
    lines: list[str] = []

    code = run_status(Namespace(root=tmp_path / "gone", json=True), output_sink=lines.append)

    assert code == 0
    data = _data(lines)[0]
    assert data["phase"] == "NotStarted"
    assert data["available"] is False


def test_watch_emits_on_change_and_stops_when_terminal(seq_sequencing: Path) -> None:
    clock = ManualClock()
    machine = RunStateMachine(seq_sequencing, now_fn=clock)
    lines: list[str] = []
    sleeps: list[float] = []

    def instrument_finishes(seconds: float) -> None:
        sleeps.append(seconds)
        clock.advance(seconds)
        if len(sleeps) == 3:
            write_completion(
                seq_sequencing,
                CompletionStatus(CompletionCode.COMPLETED_AS_PLANNED, COMPLETE_RUN_ID),
            )

    code = run_watch(
        _watch_args(seq_sequencing, interval=2.0),
        settings=Settings(),
        machine=machine,
        sleep_fn=instrument_finishes,
        output_sink=lines.append,
    )

    assert code == 0
    assert sleeps == [2.0, 2.0, 2.0]
    assert [data["phase"] for data in _data(lines)] == ["InProgress", "Complete"]


def test_watch_uses_settings_interval(seq_sequencing: Path) -> None:
    sleeps: list[float] = []

    run_watch(
        _watch_args(seq_sequencing),
        settings=Settings(poll_interval_seconds=15.0, max_polls=3),
        machine=RunStateMachine(seq_sequencing),
        sleep_fn=sleeps.append,
        output_sink=lambda _line: None,
    )

    assert sleeps == [15.0, 15.0]


def test_watch_once_polls_without_sleeping(seq_sequencing: Path) -> None:
    lines: list[str] = []
    sleeps: list[float] = []

    run_watch(
        _watch_args(seq_sequencing, once=True),
        settings=Settings(),
        machine=RunStateMachine(seq_sequencing),
        sleep_fn=sleeps.append,
        output_sink=lines.append,
    )

    assert sleeps == []
    assert len(lines) == 1


def test_watch_reports_availability_changes(tmp_path: Path, seq_sequencing: Path) -> None:
    machine = RunStateMachine(seq_sequencing)
    lines: list[str] = []
    parked = tmp_path / "parked"

    def mount_drops(_seconds: float) -> None:
        if seq_sequencing.exists():
            seq_sequencing.rename(parked)
        else:
            parked.rename(seq_sequencing)

    run_watch(
        _watch_args(seq_sequencing, interval=1.0, max_polls=3),
        settings=Settings(),
        machine=machine,
        sleep_fn=mount_drops,
        output_sink=lines.append,
    )

    assert [data["available"] for data in _data(lines)] == [True, False, True]
    assert {data["phase"] for data in _data(lines)} == {"InProgress"}


def test_watch_stops_on_keyboard_interrupt(seq_sequencing: Path) -> None:
    def interrupt(_seconds: float) -> None:
        raise KeyboardInterrupt

    code = run_watch(
        _watch_args(seq_sequencing, interval=1.0),
        settings=Settings(),
        machine=RunStateMachine(seq_sequencing),
        sleep_fn=interrupt,
        output_sink=lambda _line: None,
    )

    assert code == 0


@pytest.mark.parametrize(
    "overrides",
    [{"interval": 0.0}, {"max_polls": -2}, {"max_polls": 0}, {"max_polls": 0, "once": True}],
)
def test_watch_rejects_bad_arguments(seq_sequencing: Path, overrides: dict) -> None:
    with pytest.raises(ValidationError):
        run_watch(
            _watch_args(seq_sequencing, **overrides),
            settings=Settings(),
            machine=RunStateMachine(seq_sequencing),
            sleep_fn=lambda _seconds: None,
            output_sink=lambda _line: None,
        )


def test_verify_complete_run(seq_complete: Path) -> None:
    lines: list[str] = []

    code = run_verify(Namespace(root=seq_complete, json=True), output_sink=lines.append)

    assert code == 0
    data = _data(lines)[0]
    assert data["status"] == "OK"
    assert data["completion"]["completion_status"] == "CompletedAsPlanned"


def test_verify_transferring_run(seq_transferring: Path) -> None:
    lines: list[str] = []

    code = run_verify(Namespace(root=seq_transferring, json=True), output_sink=lines.append)

    assert code == IncompleteRun.exit_code
    data = _data(lines)[0]
    assert data["status"] == "ERROR"
    assert data["error_type"] == "IncompleteRun"


def test_verify_failed_run_human_output(seq_failed: Path) -> None:
    lines: list[str] = []

    code = run_verify(Namespace(root=seq_failed, json=False), output_sink=lines.append)

    assert code == UnsuccessfulRun.exit_code
    assert lines[0].startswith("verify: error=unexpected run completion status")
