"""Status command - one-shot snapshot of a run directory."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import Callable

from seqdir.commands.output import emit_output, state_lines
from seqdir.core.machine import RunStateMachine


def run_status(
    args: Namespace,
    *,
    machine_factory: Callable[[Path], RunStateMachine] = RunStateMachine,
    output_sink=print,
) -> int:
    """Report the furthest phase the directory currently supports.

    An unreachable root is reported as unavailable, not as an error.
    """
    root = Path(args.root)
    machine = machine_factory(root)
    state = machine.settle()
    emit_output(
        command="status",
        payload=state.to_dict(),
        json_output=getattr(args, "json", False),
        output_sink=output_sink,
        human_lines=state_lines("status", state),
    )
    return 0
