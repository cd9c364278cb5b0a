"""Pomodoro session cycling: which kind of session comes next."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_LONG_BREAK_EVERY = 4


class SessionKind(str, Enum):
    """Kind of a timed interval."""

    WORK = "work"
    BREAK = "break"
    LONG_BREAK = "long_break"

    @property
    def is_break(self) -> bool:
        return self is not SessionKind.WORK


@dataclass
class SessionSequencer:
    """Deterministic, endless work/break/long-break cycle.

    Work and Break alternate; every ``long_break_every``-th Work session is
    followed by a LongBreak instead of a Break. ``session_number`` counts
    sessions of the current kind, starting at 1.
    """

    long_break_every: int = DEFAULT_LONG_BREAK_EVERY
    current_kind: SessionKind = field(default=SessionKind.WORK, init=False)
    completed_sessions: int = field(default=0, init=False)
    _counts: dict[SessionKind, int] = field(
        default_factory=lambda: {SessionKind.WORK: 1}, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.long_break_every < 1:
            raise ValueError("long_break_every must be at least 1")

    @property
    def session_number(self) -> int:
        """1-based ordinal of the current session among sessions of its kind."""
        return self._counts.get(self.current_kind, 0)

    def peek(self) -> SessionKind:
        """Return the kind that follows the current session without advancing."""
        if self.current_kind is SessionKind.WORK:
            if self.session_number % self.long_break_every == 0:
                return SessionKind.LONG_BREAK
            return SessionKind.BREAK
        return SessionKind.WORK

    def next(self) -> tuple[SessionKind, int]:
        """Finish the current session and enter the next one.

        Returns the new kind and its session number.
        """
        kind = self.peek()
        self.completed_sessions += 1
        self._counts[kind] = self._counts.get(kind, 0) + 1
        self.current_kind = kind
        return kind, self._counts[kind]
