"""Read-only filesystem queries against a run directory.

Run directories are written by the instrument while they are being read, and
often live on network mounts that drop out and come back. Every query here
answers with a plain value: any OSError reads as "unavailable", "absent" or
"empty", never as an exception.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterator
from enum import Enum
from pathlib import Path
from typing import Optional

from seqdir.core.completion import RUN_COMPLETION_STATUS_XML

logger = logging.getLogger(__name__)

SAMPLESHEET_CSV = "SampleSheet.csv"
RUN_INFO_XML = "RunInfo.xml"
RUN_PARAMS_XML = "RunParameters.xml"

BASECALLS = Path("Data", "Intensities", "BaseCalls")
LANES = ("L001", "L002", "L003", "L004")
FILTER_EXT = ".filter"
BCL_SUFFIXES = (".cbcl.gz", ".cbcl", ".bcl.gz", ".bcl")

_CYCLE_RE = re.compile(r"^C(\d+)(?:\.\d+)?$")


class Marker(str, Enum):
    """Sentinel files that mark phase boundaries, by file name."""

    STARTED = RUN_INFO_XML
    RTA_COMPLETE = "RTAComplete.txt"
    SEQUENCE_COMPLETE = "SequenceComplete.txt"
    COPY_COMPLETE = "CopyComplete.txt"


class Substructure(str, Enum):
    """Kinds of per-lane output that can be enumerated."""

    LANE = "lane"
    CYCLE = "cycle"
    BCL = "bcl"
    FILTER = "filter"


def cycle_number(name: str) -> Optional[int]:
    """Cycle number of a ``C<n>.<m>`` directory name, or None."""
    match = _CYCLE_RE.match(name)
    if match is None:
        return None
    return int(match.group(1))


def is_bcl(name: str) -> bool:
    return name.endswith(BCL_SUFFIXES)


class DirectoryProbe:
    """Stateless queries against a single run directory root."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"DirectoryProbe({str(self.root)!r})"

    def is_available(self) -> bool:
        """True if the root resolves and its entries can be listed."""
        try:
            with os.scandir(self.root) as entries:
                next(entries, None)
        except OSError as exc:
            logger.debug("Root %s unavailable: %s", self.root, exc)
            return False
        return True

    def has_marker(self, marker: Marker) -> bool:
        """True if the sentinel file for ``marker`` exists."""
        return self._exists(self.root / Marker(marker).value)

    def completion_file_path(self) -> Optional[Path]:
        """Path to RunCompletionStatus.xml if it is present.

        Not all instruments or software versions write this file.
        """
        return self.get_file(RUN_COMPLETION_STATUS_XML)

    def get_file(self, name: str | Path) -> Optional[Path]:
        """Path to a file relative to the root if it is present."""
        path = self.root / name
        try:
            if path.is_file():
                return path
        except OSError as exc:
            logger.debug("Cannot stat %s: %s", path, exc)
        return None

    def samplesheet(self) -> Optional[Path]:
        return self.get_file(SAMPLESHEET_CSV)

    def run_info(self) -> Optional[Path]:
        return self.get_file(RUN_INFO_XML)

    def run_params(self) -> Optional[Path]:
        return self.get_file(RUN_PARAMS_XML)

    def enumerate_substructure(self, kind: Substructure) -> Iterator[str]:
        """Lazily enumerate per-lane output identifiers.

        Identifiers are paths relative to the BaseCalls directory:
        ``L001``, ``L001/C1.1``, ``L001/C1.1/L001_1.cbcl``, ``L001/s_1.filter``.
        Enumeration is advisory: an error while listing ends the sequence.
        Order is not significant.
        """
        kind = Substructure(kind)
        try:
            yield from self._enumerate(kind)
        except OSError as exc:
            logger.debug("Stopped enumerating %s under %s: %s", kind.value, self.root, exc)

    def _enumerate(self, kind: Substructure) -> Iterator[str]:
        basecalls = self.root / BASECALLS
        for lane in LANES:
            lane_dir = basecalls / lane
            if not lane_dir.is_dir():
                continue
            if kind is Substructure.LANE:
                yield lane
                continue
            for entry in _scan(lane_dir):
                if kind is Substructure.FILTER:
                    if entry.is_file() and entry.name.endswith(FILTER_EXT):
                        yield f"{lane}/{entry.name}"
                    continue
                if not entry.is_dir() or cycle_number(entry.name) is None:
                    continue
                if kind is Substructure.CYCLE:
                    yield f"{lane}/{entry.name}"
                    continue
                for bcl in _scan(Path(entry.path)):
                    if bcl.is_file() and is_bcl(bcl.name):
                        yield f"{lane}/{entry.name}/{bcl.name}"

    def _exists(self, path: Path) -> bool:
        try:
            return path.exists()
        except OSError as exc:
            logger.debug("Cannot stat %s: %s", path, exc)
            return False


def _scan(directory: Path) -> Iterator[os.DirEntry]:
    with os.scandir(directory) as entries:
        yield from entries
