"""Full-screen countdown display."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.align import Align
from rich.console import Console, Group
from rich.live import Live
from rich.text import Text

from pomodoro_cli.utils.durations import format_clock

from .engine import TimerSnapshot
from .events import PAUSE_KEYS, QUIT_KEYS

if TYPE_CHECKING:
    from pomodoro_cli.config import DisplayConfig

PROGRESS_WIDTH = 30


class DisplayFormatter:
    """Renders a timer snapshot through the user's format strings."""

    def __init__(self, display: DisplayConfig):
        self.display = display

    def format_session(self, snapshot: TimerSnapshot) -> str:
        template = (
            self.display.paused_display
            if snapshot.paused
            else self.display.active_display
        )
        return template.format(
            timer=format_clock(snapshot.remaining),
            session_kind=self.display.label_for(snapshot.kind),
            session_number=snapshot.session_number,
        )


def key_hints(paused: bool = False) -> str:
    """Describe the pause and quit keys, skipping control characters."""
    pause = " or ".join(f"'{key}'" for key in PAUSE_KEYS if key.isprintable())
    quit_ = " or ".join(f"'{key}'" for key in QUIT_KEYS if key.isprintable())
    action = "resume" if paused else "pause"
    return f"Press {pause} to {action}  •  {quit_} to quit"


def progress_line(snapshot: TimerSnapshot, width: int = PROGRESS_WIDTH) -> Text:
    elapsed = snapshot.duration - snapshot.remaining
    percent = int(100 * elapsed / snapshot.duration) if snapshot.duration else 0
    percent = min(max(percent, 0), 100)
    filled = width * percent // 100
    return Text("▓" * filled + "░" * (width - filled) + f"  {percent}%", style="dim")


class TimerDisplay:
    """Manages the fullscreen timer display on the alternate screen."""

    def __init__(self, formatter: DisplayFormatter, console: Console | None = None):
        self.formatter = formatter
        self.console = console or Console()
        self._live: Live | None = None

    def render(self, snapshot: TimerSnapshot) -> Group:
        """Create the renderable for one frame."""
        if snapshot.paused:
            color = "yellow"
        elif snapshot.kind.is_break:
            color = "green"
        elif snapshot.remaining.total_seconds() < 60:
            color = "red"
        else:
            color = "cyan"

        body = Text(
            self.formatter.format_session(snapshot).rstrip("\n"),
            style=f"bold {color}",
            justify="center",
        )
        hints = Text(
            key_hints(paused=snapshot.paused),
            style="dim",
            justify="center",
        )
        return Group(
            Align.center(body),
            Text(""),
            Align.center(progress_line(snapshot)),
            Align.center(hints),
        )

    def start(self, snapshot: TimerSnapshot) -> None:
        if self._live is not None:
            return
        self._live = Live(
            self.render(snapshot),
            console=self.console,
            auto_refresh=False,
            screen=True,
        )
        self._live.start(refresh=True)

    def update(self, snapshot: TimerSnapshot) -> None:
        if self._live is None:
            self.start(snapshot)
            return
        self._live.update(self.render(snapshot), refresh=True)

    def stop(self) -> None:
        if self._live is None:
            return
        live, self._live = self._live, None
        live.stop()

    def __enter__(self) -> "TimerDisplay":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
