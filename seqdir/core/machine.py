"""Monitor the lifecycle of a run directory by polling.

The machine moves through these phases::

    NotStarted ──▶ InProgress ──▶ Complete
                        │
                        └───────▶ Failed

Every phase also transitions to itself, because availability is re-evaluated
on every call to ``poll`` even once the phase is terminal. The machine only
advances when polled; it never runs on its own.

- NotStarted advances once RunInfo.xml appears.
- InProgress advances once RunCompletionStatus.xml parses. CompletedAsPlanned
  means Complete; any other code, including ones this library does not know,
  means Failed. A file that does not parse yet is treated as still being
  written.
- Complete and Failed never change phase.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from seqdir.core.completion import CompletionCode, CompletionStatus, read_completion_status
from seqdir.core.state import RunPhase, RunState
from seqdir.errors import CompletionParseError
from seqdir.infrastructure.probe import DirectoryProbe, Marker

logger = logging.getLogger(__name__)

_PHASE_FOR_CODE = {
    CompletionCode.COMPLETED_AS_PLANNED: RunPhase.COMPLETE,
    CompletionCode.EXCEPTION_ENDED_EARLY: RunPhase.FAILED,
    CompletionCode.USER_ENDED_EARLY: RunPhase.FAILED,
    CompletionCode.UNRECOGNIZED: RunPhase.FAILED,
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RunStateMachine:
    """Tracks the phase of one run directory across polls.

    Each instance owns a single ``RunState`` that is replaced, never mutated,
    on every poll. Instances are independent; concurrent ``poll`` calls on the
    same instance need external locking.
    """

    def __init__(
        self,
        root: str | os.PathLike,
        *,
        probe: Optional[DirectoryProbe] = None,
        now_fn: Optional[Callable[[], datetime]] = None,
        initial_poll: bool = True,
    ) -> None:
        """Bind a machine to ``root``.

        Args:
            root: Run directory to monitor. It does not have to exist yet.
            probe: Probe to query; defaults to a DirectoryProbe on ``root``
            now_fn: Clock returning timezone-aware datetimes (default: UTC now)
            initial_poll: Poll once before returning so the state is current

        Raises:
            ValueError: ``now_fn`` returned a naive datetime
        """
        self._probe = probe or DirectoryProbe(Path(root))
        self._now_fn = now_fn or _utc_now
        now = self._now_fn()
        if now.tzinfo is None:
            raise ValueError("now_fn must return timezone-aware datetimes")
        self._state = RunState(
            phase=RunPhase.NOT_STARTED,
            available=self._probe.is_available(),
            root=os.fspath(root),
            since=now,
        )
        if initial_poll:
            self.poll()

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def root(self) -> Path:
        return self._probe.root

    @property
    def probe(self) -> DirectoryProbe:
        return self._probe

    @property
    def phase(self) -> RunPhase:
        return self._state.phase

    @property
    def available(self) -> bool:
        return self._state.available

    @property
    def since(self) -> datetime:
        return self._state.since

    def poll(self) -> RunState:
        """Re-examine the directory and return the new snapshot.

        Never raises for filesystem or parse conditions: those surface as
        ``available=False`` or as the phase staying where it is.
        """
        current = self._state
        available = self._probe.is_available()

        phase = current.phase
        if phase is RunPhase.COMPLETE or phase is RunPhase.FAILED:
            updated = current.with_availability(available)
        elif phase is RunPhase.NOT_STARTED:
            updated = self._from_not_started(current.with_availability(available))
        elif phase is RunPhase.IN_PROGRESS:
            updated = self._from_in_progress(current.with_availability(available))
        else:
            raise AssertionError(f"Unhandled phase: {phase!r}")

        if updated.phase is not current.phase:
            logger.info(
                "%s: %s -> %s", updated.root, current.phase.value, updated.phase.value
            )
        self._state = updated
        return updated

    def settle(self, max_polls: Optional[int] = None) -> RunState:
        """Poll until a poll leaves the phase unchanged.

        Lets a one-shot caller reach the furthest phase the directory currently
        supports. Bounded by ``max_polls`` (default: one per phase).
        """
        limit = max_polls if max_polls is not None else len(RunPhase)
        state = self._state
        for _ in range(limit):
            before = state.phase
            state = self.poll()
            if state.phase is before:
                break
        return state

    def _from_not_started(self, state: RunState) -> RunState:
        if self._probe.has_marker(Marker.STARTED):
            return state.advance(RunPhase.IN_PROGRESS, self._now_fn())
        return state

    def _from_in_progress(self, state: RunState) -> RunState:
        path = self._probe.completion_file_path()
        if path is None:
            return state
        status = self._read_completion(path)
        if status is None:
            return state
        return state.advance(_PHASE_FOR_CODE[status.completion_status], self._now_fn(), status)

    def _read_completion(self, path: Path) -> Optional[CompletionStatus]:
        try:
            status = read_completion_status(path)
        except CompletionParseError as exc:
            logger.warning("%s not yet readable, staying in progress: %s", path, exc)
            return None
        except OSError as exc:
            logger.debug("Cannot read %s: %s", path, exc)
            return None
        if status.completion_status is CompletionCode.UNRECOGNIZED:
            logger.warning(
                "%s: unrecognized completion status %r, treating run as failed",
                path,
                status.raw_code,
            )
        return status
