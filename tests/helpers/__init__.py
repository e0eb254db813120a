"""Test helper utilities."""

from .clock import ManualClock
from .fs import (
    BasecallsSpec,
    build_basecalls,
    build_run_dir,
    touch_marker,
    write_completion,
    write_illumina_completion,
    write_raw_completion,
)

__all__ = [
    "BasecallsSpec",
    "ManualClock",
    "build_basecalls",
    "build_run_dir",
    "touch_marker",
    "write_completion",
    "write_illumina_completion",
    "write_raw_completion",
]
