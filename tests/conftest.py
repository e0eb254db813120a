"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from seqdir.core.completion import CompletionCode, CompletionStatus
from seqdir.infrastructure.probe import Marker
from tests.helpers.clock import ManualClock
from tests.helpers.fs import (
    COMPLETE_RUN_ID,
    FAILED_RUN_ID,
    BasecallsSpec,
    build_run_dir,
    write_raw_completion,
)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def runs_dir(tmp_path: Path) -> Path:
    """Directory holding one run directory per fixture."""
    runs = tmp_path / "runs"
    runs.mkdir()
    return runs


@pytest.fixture
def seq_not_started(runs_dir: Path) -> Path:
    return build_run_dir(runs_dir, "seq_not_started", started=False)


@pytest.fixture
def seq_sequencing(runs_dir: Path) -> Path:
    return build_run_dir(
        runs_dir,
        "seq_sequencing",
        markers=[Marker.RTA_COMPLETE],
        basecalls=BasecallsSpec(lanes=("L001", "L002"), cycles=(1, 2, 3)),
    )


@pytest.fixture
def seq_transferring(runs_dir: Path) -> Path:
    return build_run_dir(
        runs_dir,
        "seq_transferring",
        markers=[Marker.RTA_COMPLETE, Marker.SEQUENCE_COMPLETE],
    )


@pytest.fixture
def seq_complete(runs_dir: Path) -> Path:
    return build_run_dir(
        runs_dir,
        "seq_complete",
        markers=[Marker.RTA_COMPLETE, Marker.SEQUENCE_COMPLETE, Marker.COPY_COMPLETE],
        completion=CompletionStatus(CompletionCode.COMPLETED_AS_PLANNED, COMPLETE_RUN_ID),
    )


@pytest.fixture
def seq_failed(runs_dir: Path) -> Path:
    return build_run_dir(
        runs_dir,
        "seq_failed",
        markers=[Marker.RTA_COMPLETE, Marker.COPY_COMPLETE],
        completion=CompletionStatus(
            CompletionCode.EXCEPTION_ENDED_EARLY,
            FAILED_RUN_ID,
            "Run ended early: fluidics error",
        ),
    )


@pytest.fixture
def seq_corrupt(runs_dir: Path) -> Path:
    root = build_run_dir(runs_dir, "seq_corrupt", markers=[Marker.COPY_COMPLETE])
    write_raw_completion(root, b"<RunCompletionStatus><CompletionStatus>Compl")
    return root
