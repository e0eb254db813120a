"""Watch command - poll a run directory on a fixed cadence."""

from __future__ import annotations

import logging
import time
from argparse import Namespace
from pathlib import Path
from typing import Callable, Optional

from seqdir.commands.output import emit_output, state_lines
from seqdir.core.machine import RunStateMachine
from seqdir.core.state import RunState
from seqdir.errors import ValidationError
from seqdir.settings import Settings, load_settings

logger = logging.getLogger(__name__)


def run_watch(
    args: Namespace,
    *,
    settings: Optional[Settings] = None,
    machine: Optional[RunStateMachine] = None,
    sleep_fn: Callable[[float], None] = time.sleep,
    output_sink=print,
) -> int:
    """Run the watch command.

    Emits a snapshot whenever phase or availability changes. Stops once the
    run is terminal and its directory is reachable, after ``max_polls`` polls,
    or on Ctrl-C.

    Returns:
        Exit code (0 for success)
    """
    settings = settings or load_settings(getattr(args, "config", None))
    verbose = getattr(args, "verbose", False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.logging_level,
        format="%(levelname)s: %(message)s",
    )

    interval = getattr(args, "interval", None)
    if interval is None:
        interval = settings.poll_interval_seconds
    if interval <= 0:
        raise ValidationError(f"--interval must be positive, got {interval}")

    max_polls = getattr(args, "max_polls", None)
    if max_polls is None:
        max_polls = settings.max_polls
    if max_polls is not None and max_polls < 1:
        raise ValidationError(f"--max-polls must be positive, got {max_polls}")
    if getattr(args, "once", False):
        max_polls = 1

    json_output = getattr(args, "json", False)
    machine = machine or RunStateMachine(Path(args.root))
    logger.info("Watching %s every %.1fs", machine.root, interval)

    state = machine.state
    _emit(state, json_output, output_sink)
    polls = 1
    try:
        while not _finished(state) and (max_polls is None or polls < max_polls):
            sleep_fn(interval)
            previous, state = state, machine.poll()
            polls += 1
            if (state.phase, state.available) != (previous.phase, previous.available):
                _emit(state, json_output, output_sink)
    except KeyboardInterrupt:
        logger.info("Watch stopped by user")

    return 0


def _finished(state: RunState) -> bool:
    return state.is_terminal and state.available


def _emit(state: RunState, json_output: bool, output_sink) -> None:
    emit_output(
        command="watch",
        payload=state.to_dict(),
        json_output=json_output,
        output_sink=output_sink,
        human_lines=state_lines("watch", state),
    )
