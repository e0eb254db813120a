"""Strict check that a run directory is completed and safe to consume."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from seqdir.core.completion import CompletionStatus, read_completion_status
from seqdir.errors import IncompleteRun, NotFound, UnsuccessfulRun
from seqdir.infrastructure.probe import DirectoryProbe, Marker


def verify_completed(root: Path, probe: Optional[DirectoryProbe] = None) -> Optional[CompletionStatus]:
    """Verify that ``root`` holds a completed run.

    A run is complete when CopyComplete.txt is present and, if the instrument
    wrote RunCompletionStatus.xml, its status is CompletedAsPlanned. Some
    platforms never write the completion file, so its absence is accepted.

    Returns:
        The parsed completion status, or None when there is no completion file.

    Raises:
        NotFound: root is not a readable directory
        IncompleteRun: CopyComplete.txt is missing
        CompletionParseError: the completion file does not parse
        UnsuccessfulRun: the completion status is not CompletedAsPlanned
    """
    probe = probe or DirectoryProbe(Path(root))
    if not probe.is_available():
        raise NotFound(f"cannot find {probe.root} or it is not readable")
    if not probe.has_marker(Marker.COPY_COMPLETE):
        raise IncompleteRun(f"cannot find {probe.root / Marker.COPY_COMPLETE.value}")

    path = probe.completion_file_path()
    if path is None:
        return None
    status = read_completion_status(path)
    if not status.is_success:
        raise UnsuccessfulRun(f"unexpected run completion status: {status}")
    return status
