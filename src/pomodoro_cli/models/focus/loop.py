"""The Pomodoro run cycle: wait for an event, apply it, show the result."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from rich.console import Console

from pomodoro_cli.utils.logger import get_logger

from .engine import SessionBoundary, TimerEngine
from .events import (
    EventStream,
    EventType,
    KeyboardSource,
    SignalSource,
    TickSource,
    TimerEvent,
)
from .keyboard import KeyboardHandler
from .notifier import NotificationDispatcher
from .ui import DisplayFormatter, TimerDisplay

if TYPE_CHECKING:
    from pomodoro_cli.config import Settings


class PomodoroApplication:
    """
    Composes the event sources, timer engine, display and notifier.

    The application is the only consumer of the event stream and therefore
    the only place where timer state is mutated.
    """

    def __init__(
        self,
        settings: Settings,
        console: Console | None = None,
        keyboard: KeyboardHandler | None = None,
    ):
        self.settings = settings
        self.engine = TimerEngine(settings.durations)
        self.display = TimerDisplay(DisplayFormatter(settings.display), console)
        self.notifier = NotificationDispatcher(settings.notifications)
        self.keyboard = keyboard or KeyboardHandler()
        self._logger = get_logger("loop")

    def build_event_stream(self) -> EventStream:
        stream = EventStream()
        stream.add_source(TickSource(self.settings.durations.tick_interval))
        stream.add_source(SignalSource())
        stream.add_source(KeyboardSource(self.keyboard))
        return stream

    def handle(self, event: TimerEvent) -> SessionBoundary | None:
        """Apply one event to the engine and trigger its side effects."""
        if event.type is EventType.QUIT:
            self._logger.info("quit requested by %s", event.source)
            self.engine.quit()
            return None

        if event.type is EventType.TOGGLE_PAUSE:
            if self.engine.toggle_pause():
                self._logger.info(
                    "%s by %s", self.engine.status.value, event.source
                )
            return None

        boundary = self.engine.tick(event.elapsed)
        if boundary is not None:
            self._logger.info(
                "%s finished, starting %s #%d",
                boundary.ended.value,
                boundary.started.value,
                boundary.session_number,
            )
            self.notifier.dispatch(boundary.started)
        return boundary

    async def run(self, events: EventStream | None = None) -> None:
        """Run until a Quit event arrives.

        The terminal and the display are released on the way out, whatever
        the reason for leaving.
        """
        if events is None:
            events = self.build_event_stream()
        self._logger.info(
            "starting: %s", self.settings.model_dump_json(include={"durations"})
        )
        with self.keyboard, self.display:
            async with events:
                self.notifier.dispatch(self.engine.kind)
                self.display.update(self.engine.snapshot())
                async for event in events:
                    self.handle(event)
                    if self.engine.is_stopped:
                        break
                    self.display.update(self.engine.snapshot())
        self._logger.info("stopped")

    def start(self) -> None:
        asyncio.run(self.run())
