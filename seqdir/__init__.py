"""Lifecycle monitoring for Illumina sequencing run directories."""

from __future__ import annotations

__version__ = "0.1.0"

from seqdir.core.completion import (
    CompletionCode,
    CompletionStatus,
    parse_completion_status,
    read_completion_status,
    render_completion_status,
)
from seqdir.core.machine import RunStateMachine
from seqdir.core.state import RunPhase, RunState
from seqdir.infrastructure.probe import DirectoryProbe, Marker, Substructure

__all__ = [
    "CompletionCode",
    "CompletionStatus",
    "DirectoryProbe",
    "Marker",
    "RunPhase",
    "RunState",
    "RunStateMachine",
    "Substructure",
    "__version__",
    "parse_completion_status",
    "read_completion_status",
    "render_completion_status",
]
