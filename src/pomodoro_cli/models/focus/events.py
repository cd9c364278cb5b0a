"""Event sources feeding the timer loop.

Ticks, process signals and key presses are produced independently and
funnelled into one EventStream. Producers only enqueue; the loop is the
single consumer and the only place where timer state changes.
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import signal
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Protocol

from pomodoro_cli.utils.logger import get_logger

from .keyboard import KeyboardHandler

DEFAULT_QUEUE_SIZE = 64

QUIT_SIGNALS = (signal.SIGINT, signal.SIGQUIT, signal.SIGTERM)
TOGGLE_SIGNALS = (signal.SIGUSR1,)

PAUSE_KEYS = ("p",)
QUIT_KEYS = ("q", "\x03")  # q, Ctrl-C


class EventType(str, Enum):
    TICK = "tick"
    TOGGLE_PAUSE = "toggle_pause"
    QUIT = "quit"


@dataclass(frozen=True)
class TimerEvent:
    type: EventType
    elapsed: timedelta = timedelta(0)
    source: str = ""

    @classmethod
    def tick(cls, elapsed: timedelta) -> "TimerEvent":
        return cls(EventType.TICK, elapsed=elapsed, source="clock")

    @classmethod
    def toggle_pause(cls, source: str) -> "TimerEvent":
        return cls(EventType.TOGGLE_PAUSE, source=source)

    @classmethod
    def quit(cls, source: str) -> "TimerEvent":
        return cls(EventType.QUIT, source=source)


class EventSource(Protocol):
    async def start(self, stream: "EventStream") -> None: ...

    async def stop(self) -> None: ...


class EventStream:
    """
    Bounded, prioritised merge of all event sources.

    Events come out in arrival order, except that a Quit overtakes every
    event still queued. When the queue is full a tick is folded into the
    next one (its elapsed time is carried over) and control events wait for
    room in a background task, so no producer ever blocks.
    """

    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE):
        self._queue: asyncio.PriorityQueue[tuple[int, int, TimerEvent]] = (
            asyncio.PriorityQueue(maxsize=maxsize)
        )
        self._sequence = itertools.count()
        self._sources: list[EventSource] = []
        self._started: list[EventSource] = []
        self._waiting: set[asyncio.Task] = set()
        self._carried = timedelta(0)
        self._logger = get_logger("events")

    def add_source(self, source: EventSource) -> None:
        self._sources.append(source)

    def put(self, event: TimerEvent) -> None:
        """Enqueue an event without blocking the caller."""
        if event.type is EventType.TICK and self._carried:
            event = TimerEvent.tick(event.elapsed + self._carried)
            self._carried = timedelta(0)

        priority = 0 if event.type is EventType.QUIT else 1
        item = (priority, next(self._sequence), event)
        try:
            self._queue.put_nowait(item)
        except asyncio.QueueFull:
            if event.type is EventType.TICK:
                self._carried += event.elapsed
                return
            self._logger.debug("event queue full, deferring %s", event.type.value)
            task = asyncio.get_running_loop().create_task(self._queue.put(item))
            self._waiting.add(task)
            task.add_done_callback(self._waiting.discard)

    async def get(self) -> TimerEvent:
        _, _, event = await self._queue.get()
        return event

    def __aiter__(self) -> "EventStream":
        return self

    async def __anext__(self) -> TimerEvent:
        return await self.get()

    async def start(self) -> None:
        for source in self._sources:
            self._started.append(source)
            await source.start(self)

    async def stop(self) -> None:
        """Stop every started source, newest first, and drop deferred events."""
        while self._started:
            source = self._started.pop()
            await source.stop()
        for task in list(self._waiting):
            task.cancel()
        self._waiting.clear()

    async def __aenter__(self) -> "EventStream":
        try:
            await self.start()
        except BaseException:
            await self.stop()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()


class TickSource:
    """Emits a tick every *interval*, each carrying the time actually elapsed."""

    def __init__(self, interval: timedelta):
        self.interval = interval
        self._task: asyncio.Task | None = None

    async def start(self, stream: EventStream) -> None:
        self._task = asyncio.get_running_loop().create_task(self._run(stream))

    async def _run(self, stream: EventStream) -> None:
        loop = asyncio.get_running_loop()
        period = self.interval.total_seconds()
        last = loop.time()
        deadline = last + period
        while True:
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            now = loop.time()
            stream.put(TimerEvent.tick(timedelta(seconds=now - last)))
            last = now
            deadline += period
            if deadline <= now:
                # fell behind; realign instead of bursting
                deadline = now + period

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


class SignalSource:
    """Translates process signals into Quit and TogglePause events.

    Handlers are installed on the running event loop, which queues every
    delivered signal, and the previous handlers are put back on stop.
    """

    def __init__(
        self,
        quit_signals: tuple[signal.Signals, ...] = QUIT_SIGNALS,
        toggle_signals: tuple[signal.Signals, ...] = TOGGLE_SIGNALS,
    ):
        self.quit_signals = quit_signals
        self.toggle_signals = toggle_signals
        self._previous: dict[signal.Signals, object] = {}
        self._loop: asyncio.AbstractEventLoop | None = None
        self._logger = get_logger("signals")

    async def start(self, stream: EventStream) -> None:
        self._loop = asyncio.get_running_loop()
        for sig in (*self.quit_signals, *self.toggle_signals):
            self._previous[sig] = signal.getsignal(sig)
            self._loop.add_signal_handler(sig, self._on_signal, sig, stream)

    def _on_signal(self, sig: signal.Signals, stream: EventStream) -> None:
        name = signal.Signals(sig).name
        self._logger.info("received %s", name)
        if sig in self.toggle_signals:
            stream.put(TimerEvent.toggle_pause(source=name))
        else:
            stream.put(TimerEvent.quit(source=name))

    async def stop(self) -> None:
        if self._loop is None:
            return
        for sig, previous in self._previous.items():
            self._loop.remove_signal_handler(sig)
            if previous is not None:
                signal.signal(sig, previous)
        self._previous.clear()
        self._loop = None


class KeyboardSource:
    """Maps key presses on an acquired terminal to timer events."""

    def __init__(
        self,
        keyboard: KeyboardHandler,
        pause_keys: tuple[str, ...] = PAUSE_KEYS,
        quit_keys: tuple[str, ...] = QUIT_KEYS,
    ):
        self.keyboard = keyboard
        self.pause_keys = pause_keys
        self.quit_keys = quit_keys
        self._fd: int | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    async def start(self, stream: EventStream) -> None:
        if not self.keyboard.active:
            return
        self._loop = asyncio.get_running_loop()
        self._fd = self.keyboard.fd
        self._loop.add_reader(self._fd, self._on_readable, stream)

    def _on_readable(self, stream: EventStream) -> None:
        for key in self.keyboard.read_keys():
            event = self.event_for_key(key)
            if event is not None:
                stream.put(event)
        if self.keyboard.eof:
            self._loop.remove_reader(self._fd)

    def event_for_key(self, key: str) -> TimerEvent | None:
        if key in self.quit_keys:
            return TimerEvent.quit(source="keyboard")
        if key in self.pause_keys:
            return TimerEvent.toggle_pause(source="keyboard")
        return None

    async def stop(self) -> None:
        if self._loop is None:
            return
        self._loop.remove_reader(self._fd)
        self._loop = None
        self._fd = None
