"""Error taxonomy and exit code mapping for CLI."""

from __future__ import annotations


class SeqDirError(Exception):
    """Base error for deterministic CLI exit codes."""

    exit_code: int = 1


class ValidationError(SeqDirError):
    """Invalid user input or command usage."""

    exit_code = 2


class RuntimeFailure(SeqDirError):
    """Unexpected runtime failure."""

    exit_code = 1


class IOFailure(SeqDirError):
    """Filesystem or I/O failure."""

    exit_code = 3


class NotFound(IOFailure):
    """A required path is missing or unreadable."""


class IncompleteRun(SeqDirError):
    """Run directory has not finished copying."""

    exit_code = 4


class UnsuccessfulRun(SeqDirError):
    """Run finished with a completion status other than CompletedAsPlanned."""

    exit_code = 5


class CompletionParseError(SeqDirError):
    """RunCompletionStatus.xml content could not be interpreted."""

    exit_code = 6


class MalformedCompletionError(CompletionParseError):
    """Not well-formed XML, or a required element is missing or empty."""


class CompletionEncodingError(CompletionParseError):
    """Content is not valid UTF-8 text."""


def exit_code_for_exception(exc: BaseException) -> int:
    """Resolve a deterministic exit code for an exception."""
    if isinstance(exc, SeqDirError):
        return exc.exit_code
    if isinstance(exc, OSError):
        return IOFailure.exit_code
    return RuntimeFailure.exit_code
