"""Run phase enumeration and the immutable run state snapshot."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from seqdir.core.completion import CompletionStatus


class RunPhase(str, Enum):
    """Lifecycle phases of a run directory.

    Phases are ordered by ``rank``; a machine only ever moves to a phase of
    equal or higher rank. Complete and Failed share the terminal rank.
    """

    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    COMPLETE = "Complete"
    FAILED = "Failed"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @property
    def is_terminal(self) -> bool:
        return self in (RunPhase.COMPLETE, RunPhase.FAILED)


_RANKS = {
    RunPhase.NOT_STARTED: 0,
    RunPhase.IN_PROGRESS: 10,
    RunPhase.COMPLETE: 100,
    RunPhase.FAILED: 100,
}


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC timestamp with microseconds and a ``Z`` designator.

    ``value`` must be timezone-aware; naive values would be read as local time.
    """
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class RunState:
    """Snapshot of a run directory at the most recent poll.

    ``since`` is the time of the poll at which ``phase`` last changed; it is
    not touched when only ``available`` changes. ``root`` is the path as the
    caller spelled it. ``completion`` carries the completion status that
    resolved a terminal phase.
    """

    phase: RunPhase
    available: bool
    root: str
    since: datetime
    completion: Optional[CompletionStatus] = None

    @property
    def is_terminal(self) -> bool:
        return self.phase.is_terminal

    def with_availability(self, available: bool) -> RunState:
        """Self-transition: same phase and since, fresh availability."""
        return replace(self, available=available)

    def advance(
        self,
        phase: RunPhase,
        now: datetime,
        completion: Optional[CompletionStatus] = None,
    ) -> RunState:
        """Transition to ``phase`` at ``now``."""
        if phase.rank < self.phase.rank or self.phase.is_terminal:
            raise ValueError(f"Illegal phase transition {self.phase.value} -> {phase.value}")
        return replace(self, phase=phase, since=now, completion=completion)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "phase": self.phase.value,
            "available": self.available,
            "root": self.root,
            "since": format_timestamp(self.since),
        }
        if self.completion is not None:
            payload["completion"] = self.completion.to_dict()
        return payload
