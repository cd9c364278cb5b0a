"""Tests for the event stream and its tick, signal and keyboard sources."""

from __future__ import annotations

import asyncio
import os
import signal
from datetime import timedelta

import pytest

from pomodoro_cli.models.focus.events import (
    EventStream,
    EventType,
    KeyboardSource,
    SignalSource,
    TickSource,
    TimerEvent,
)
from pomodoro_cli.models.focus.keyboard import KeyboardHandler

SECOND = timedelta(seconds=1)


class RecordingSource:
    """Event source that only records start/stop calls."""

    def __init__(self, name: str, calls: list, fail: bool = False):
        self.name = name
        self.calls = calls
        self.fail = fail

    async def start(self, stream):
        self.calls.append(("start", self.name))
        if self.fail:
            raise RuntimeError("boom")

    async def stop(self):
        self.calls.append(("stop", self.name))


# ---------------------------------------------------------------------------
# EventStream
# ---------------------------------------------------------------------------


class TestEventStream:
    @pytest.mark.asyncio
    async def test_events_come_out_in_arrival_order(self):
        stream = EventStream()
        stream.put(TimerEvent.tick(SECOND))
        stream.put(TimerEvent.toggle_pause("keyboard"))
        stream.put(TimerEvent.tick(2 * SECOND))

        events = [await stream.get() for _ in range(3)]

        assert [e.type for e in events] == [
            EventType.TICK,
            EventType.TOGGLE_PAUSE,
            EventType.TICK,
        ]
        assert events[2].elapsed == 2 * SECOND

    @pytest.mark.asyncio
    async def test_quit_overtakes_queued_ticks(self):
        stream = EventStream()
        stream.put(TimerEvent.tick(SECOND))
        stream.put(TimerEvent.tick(SECOND))
        stream.put(TimerEvent.quit("SIGTERM"))

        first = await stream.get()

        assert first.type is EventType.QUIT
        assert first.source == "SIGTERM"

    @pytest.mark.asyncio
    async def test_full_queue_carries_tick_time_forward(self):
        stream = EventStream(maxsize=1)
        stream.put(TimerEvent.tick(SECOND))
        stream.put(TimerEvent.tick(2 * SECOND))  # dropped, time carried

        assert (await stream.get()).elapsed == SECOND

        stream.put(TimerEvent.tick(SECOND))
        assert (await stream.get()).elapsed == 3 * SECOND

    @pytest.mark.asyncio
    async def test_full_queue_defers_control_events(self):
        stream = EventStream(maxsize=1)
        stream.put(TimerEvent.tick(SECOND))
        stream.put(TimerEvent.toggle_pause("keyboard"))

        assert (await stream.get()).type is EventType.TICK
        event = await asyncio.wait_for(stream.get(), timeout=1)
        assert event.type is EventType.TOGGLE_PAUSE

    @pytest.mark.asyncio
    async def test_async_iteration(self):
        stream = EventStream()
        stream.put(TimerEvent.toggle_pause("keyboard"))

        async for event in stream:
            assert event.type is EventType.TOGGLE_PAUSE
            break

    @pytest.mark.asyncio
    async def test_context_manager_starts_and_stops_sources(self):
        calls = []
        stream = EventStream()
        stream.add_source(RecordingSource("a", calls))
        stream.add_source(RecordingSource("b", calls))

        async with stream:
            assert calls == [("start", "a"), ("start", "b")]

        assert calls[2:] == [("stop", "b"), ("stop", "a")]

    @pytest.mark.asyncio
    async def test_failed_start_stops_sources_already_started(self):
        calls = []
        stream = EventStream()
        stream.add_source(RecordingSource("a", calls))
        stream.add_source(RecordingSource("b", calls, fail=True))
        stream.add_source(RecordingSource("c", calls))

        with pytest.raises(RuntimeError):
            async with stream:
                pass

        assert ("start", "c") not in calls
        assert calls[-2:] == [("stop", "b"), ("stop", "a")]


# ---------------------------------------------------------------------------
# TickSource
# ---------------------------------------------------------------------------


class TestTickSource:
    @pytest.mark.asyncio
    async def test_emits_ticks_with_measured_elapsed(self):
        stream = EventStream()
        source = TickSource(timedelta(milliseconds=10))
        stream.add_source(source)

        async with stream:
            ticks = [await asyncio.wait_for(stream.get(), 1) for _ in range(3)]

        assert all(t.type is EventType.TICK for t in ticks)
        assert all(t.elapsed > timedelta(0) for t in ticks)

    @pytest.mark.asyncio
    async def test_stop_cancels_the_task(self):
        stream = EventStream()
        source = TickSource(timedelta(milliseconds=10))

        await source.start(stream)
        task = source._task
        await source.stop()

        assert task.cancelled()
        assert source._task is None

    @pytest.mark.asyncio
    async def test_stop_without_start_is_noop(self):
        await TickSource(SECOND).stop()


# ---------------------------------------------------------------------------
# SignalSource
# ---------------------------------------------------------------------------


class TestSignalSource:
    @pytest.mark.asyncio
    async def test_toggle_signal_produces_toggle_event(self):
        stream = EventStream()
        stream.add_source(
            SignalSource(quit_signals=(signal.SIGUSR2,), toggle_signals=(signal.SIGUSR1,))
        )

        async with stream:
            os.kill(os.getpid(), signal.SIGUSR1)
            event = await asyncio.wait_for(stream.get(), 1)

        assert event.type is EventType.TOGGLE_PAUSE
        assert event.source == "SIGUSR1"

    @pytest.mark.asyncio
    async def test_quit_signal_produces_quit_event(self):
        stream = EventStream()
        stream.add_source(
            SignalSource(quit_signals=(signal.SIGUSR2,), toggle_signals=(signal.SIGUSR1,))
        )

        async with stream:
            os.kill(os.getpid(), signal.SIGUSR2)
            event = await asyncio.wait_for(stream.get(), 1)

        assert event.type is EventType.QUIT

    @pytest.mark.asyncio
    async def test_signals_are_not_lost_between_reads(self):
        stream = EventStream()
        stream.add_source(
            SignalSource(quit_signals=(signal.SIGUSR2,), toggle_signals=(signal.SIGUSR1,))
        )

        async with stream:
            os.kill(os.getpid(), signal.SIGUSR1)
            await asyncio.sleep(0.01)
            os.kill(os.getpid(), signal.SIGUSR1)
            events = [await asyncio.wait_for(stream.get(), 1) for _ in range(2)]

        assert [e.type for e in events] == [EventType.TOGGLE_PAUSE] * 2

    @pytest.mark.asyncio
    async def test_stop_restores_previous_handler(self):
        previous = signal.getsignal(signal.SIGUSR1)
        source = SignalSource(quit_signals=(), toggle_signals=(signal.SIGUSR1,))

        await source.start(EventStream())
        await source.stop()

        assert signal.getsignal(signal.SIGUSR1) == previous


# ---------------------------------------------------------------------------
# KeyboardSource
# ---------------------------------------------------------------------------


@pytest.fixture()
def pipe_keyboard():
    """A KeyboardHandler reading from a pipe instead of a terminal."""
    read_fd, write_fd = os.pipe()
    handler = KeyboardHandler()
    handler.fd = read_fd
    yield handler, write_fd
    handler.fd = None
    os.close(read_fd)
    os.close(write_fd)


class TestKeyboardSource:
    @pytest.mark.parametrize(
        "key,expected",
        [
            ("p", EventType.TOGGLE_PAUSE),
            ("q", EventType.QUIT),
            ("\x03", EventType.QUIT),
        ],
    )
    def test_key_mapping(self, key, expected):
        source = KeyboardSource(KeyboardHandler())
        assert source.event_for_key(key).type is expected

    @pytest.mark.parametrize("key", ["x", " ", "\x1b", "1"])
    def test_other_keys_are_ignored(self, key):
        source = KeyboardSource(KeyboardHandler())
        assert source.event_for_key(key) is None

    @pytest.mark.asyncio
    async def test_inactive_keyboard_registers_nothing(self, mocker):
        loop = asyncio.get_running_loop()
        add_reader = mocker.patch.object(loop, "add_reader")
        source = KeyboardSource(KeyboardHandler())

        await source.start(EventStream())
        await source.stop()

        add_reader.assert_not_called()

    @pytest.mark.asyncio
    async def test_key_presses_become_events(self, pipe_keyboard):
        handler, write_fd = pipe_keyboard
        stream = EventStream()
        stream.add_source(KeyboardSource(handler))

        async with stream:
            os.write(write_fd, b"xP")
            event = await asyncio.wait_for(stream.get(), 1)

        assert event.type is EventType.TOGGLE_PAUSE
        assert event.source == "keyboard"
