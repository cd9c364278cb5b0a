"""Countdown state machine for the running Pomodoro session."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING

from .cycling import SessionKind, SessionSequencer

if TYPE_CHECKING:
    from pomodoro_cli.config import DurationConfig


class TimerStatus(str, Enum):
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


@dataclass(frozen=True)
class SessionBoundary:
    """The end of one session and the start of the next."""

    ended: SessionKind
    started: SessionKind
    session_number: int


@dataclass(frozen=True)
class TimerSnapshot:
    """Read-only view of the engine used for rendering."""

    kind: SessionKind
    session_number: int
    remaining: timedelta
    duration: timedelta
    status: TimerStatus

    @property
    def paused(self) -> bool:
        return self.status is TimerStatus.PAUSED


class TimerEngine:
    """
    Owns the countdown of the current session.

    All operations are total: commands that do not apply to the current
    status are no-ops. The engine never performs I/O; ``tick`` reports a
    SessionBoundary and the caller decides what to do with it.
    """

    def __init__(
        self,
        durations: DurationConfig,
        sequencer: SessionSequencer | None = None,
    ):
        self.durations = durations
        self.sequencer = sequencer or SessionSequencer(
            long_break_every=durations.long_break_every
        )
        self.status = TimerStatus.RUNNING
        self.remaining = durations.for_session(self.sequencer.current_kind)

    @property
    def kind(self) -> SessionKind:
        return self.sequencer.current_kind

    @property
    def session_number(self) -> int:
        return self.sequencer.session_number

    @property
    def is_stopped(self) -> bool:
        return self.status is TimerStatus.STOPPED

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            kind=self.kind,
            session_number=self.session_number,
            remaining=self.remaining,
            duration=self.durations.for_session(self.kind),
            status=self.status,
        )

    def tick(self, elapsed: timedelta) -> SessionBoundary | None:
        """Advance the countdown by *elapsed*.

        Returns a SessionBoundary when the session ran out; the new session
        starts at its full duration (overshoot is not carried over).
        """
        if self.status is not TimerStatus.RUNNING:
            return None

        remaining = self.remaining - max(elapsed, timedelta(0))
        if remaining > timedelta(0):
            self.remaining = remaining
            return None

        ended = self.kind
        started, session_number = self.sequencer.next()
        self.remaining = self.durations.for_session(started)
        return SessionBoundary(
            ended=ended, started=started, session_number=session_number
        )

    def pause(self) -> bool:
        """Pause a running countdown. Returns True if the status changed."""
        if self.status is TimerStatus.RUNNING:
            self.status = TimerStatus.PAUSED
            return True
        return False

    def resume(self) -> bool:
        """Resume a paused countdown. Returns True if the status changed."""
        if self.status is TimerStatus.PAUSED:
            self.status = TimerStatus.RUNNING
            return True
        return False

    def toggle_pause(self) -> bool:
        if self.status is TimerStatus.RUNNING:
            return self.pause()
        return self.resume()

    def quit(self) -> None:
        self.status = TimerStatus.STOPPED
