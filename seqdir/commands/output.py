"""Deterministic CLI output helpers."""

from __future__ import annotations

import json
from typing import Iterable, Optional

from seqdir.core.completion import CompletionStatus
from seqdir.core.state import RunState, format_timestamp

SCHEMA_VERSION = "v1"


def emit_output(
    *,
    command: str,
    payload: dict,
    json_output: bool,
    output_sink=print,
    human_lines: Iterable[str] = (),
) -> None:
    """Emit one JSON envelope, or the human-readable lines."""
    if json_output:
        envelope = {
            "schema_version": SCHEMA_VERSION,
            "command": command,
            "data": payload,
        }
        output_sink(
            json.dumps(
                envelope,
                sort_keys=True,
                separators=(",", ":"),
                ensure_ascii=True,
            )
        )
        return
    for line in human_lines:
        output_sink(line)


def state_lines(command: str, state: RunState) -> tuple[str, ...]:
    availability = "available" if state.available else "unavailable"
    lines = [
        f"{command}: root={state.root}",
        f"{command}: phase={state.phase.value} since={format_timestamp(state.since)} {availability}",
    ]
    if state.completion is not None:
        lines.extend(completion_lines(command, state.completion))
    return tuple(lines)


def completion_lines(command: str, status: Optional[CompletionStatus]) -> tuple[str, ...]:
    if status is None:
        return (f"{command}: completion_status=absent",)
    return (
        f"{command}: completion_status={status.code} run_id={status.run_id}",
        f"{command}: message={status.message or 'None'}",
    )
