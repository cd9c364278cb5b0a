"""Focus mode - Pomodoro timer system for Pomodoro CLI."""

from .cycling import SessionKind, SessionSequencer
from .engine import SessionBoundary, TimerEngine, TimerSnapshot, TimerStatus
from .events import (
    EventStream,
    EventType,
    KeyboardSource,
    SignalSource,
    TickSource,
    TimerEvent,
)
from .keyboard import KeyboardHandler
from .loop import PomodoroApplication
from .notifier import NotificationDispatcher
from .ui import DisplayFormatter, TimerDisplay

__all__ = [
    "SessionKind",
    "SessionSequencer",
    "SessionBoundary",
    "TimerEngine",
    "TimerSnapshot",
    "TimerStatus",
    "EventStream",
    "EventType",
    "TimerEvent",
    "TickSource",
    "SignalSource",
    "KeyboardSource",
    "KeyboardHandler",
    "NotificationDispatcher",
    "DisplayFormatter",
    "TimerDisplay",
    "PomodoroApplication",
]
