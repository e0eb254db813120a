"""Unit tests for the exit code mapping."""

from __future__ import annotations

import pytest

from seqdir.errors import (
    CompletionEncodingError,
    IncompleteRun,
    IOFailure,
    MalformedCompletionError,
    NotFound,
    RuntimeFailure,
    UnsuccessfulRun,
    ValidationError,
    exit_code_for_exception,
)


@pytest.mark.parametrize(
    "exc, code",
    [
        (ValidationError("bad"), 2),
        (RuntimeFailure("boom"), 1),
        (IOFailure("disk"), 3),
        (NotFound("gone"), 3),
        (IncompleteRun("copying"), 4),
        (UnsuccessfulRun("failed"), 5),
        (MalformedCompletionError("truncated"), 6),
        (CompletionEncodingError("latin-1"), 6),
        (FileNotFoundError("missing"), 3),
        (KeyError("x"), 1),
    ],
)
def test_exit_code_for_exception(exc: BaseException, code: int) -> None:
    assert exit_code_for_exception(exc) == code
