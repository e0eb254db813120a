"""Verify command - check that a run directory completed successfully."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path

from seqdir.commands.output import completion_lines, emit_output
from seqdir.core.verify import verify_completed
from seqdir.errors import SeqDirError, exit_code_for_exception


def _error_payload(root: Path, exc: BaseException) -> dict:
    return {
        "root": str(root),
        "status": "ERROR",
        "error_type": exc.__class__.__name__,
        "error_message": str(exc),
    }


def run_verify(args: Namespace, *, output_sink=print) -> int:
    """Verify a completed run; the exit code identifies the failure."""
    root = Path(args.root)
    json_output = getattr(args, "json", False)
    try:
        status = verify_completed(root)
    except (SeqDirError, OSError) as exc:
        emit_output(
            command="verify",
            payload=_error_payload(root, exc),
            json_output=json_output,
            output_sink=output_sink,
            human_lines=(f"verify: error={exc}",),
        )
        return exit_code_for_exception(exc)

    emit_output(
        command="verify",
        payload={
            "root": str(root),
            "status": "OK",
            "completion": status.to_dict() if status else None,
        },
        json_output=json_output,
        output_sink=output_sink,
        human_lines=(f"verify: root={root} status=OK",) + completion_lines("verify", status),
    )
    return 0
