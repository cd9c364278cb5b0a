"""Exclusive key-by-key terminal input for timer controls."""

from __future__ import annotations

import os
import select
import sys
import termios
import tty
from typing import IO

from pomodoro_cli.errors import TerminalError
from pomodoro_cli.utils.logger import get_logger


class KeyboardHandler:
    """
    Puts stdin into cbreak mode for the lifetime of a ``with`` block.

    Input arrives key by key without echo. The previous terminal settings
    are restored on exit, also when the block raises. When stdin is not a
    terminal the handler stays inactive and ``fd`` is None.
    """

    def __init__(self, stream: IO[str] | None = None):
        self.stream = stream or sys.stdin
        self.fd: int | None = None
        self.old_settings = None
        self.eof = False
        self._logger = get_logger("keyboard")

    @property
    def active(self) -> bool:
        return self.fd is not None

    def start(self) -> bool:
        """Acquire the terminal. Returns False when stdin is not a TTY."""
        if self.active:
            return True
        if not self.stream.isatty():
            self._logger.info("stdin is not a terminal, keyboard controls disabled")
            return False

        fd = self.stream.fileno()
        try:
            self.old_settings = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except termios.error as e:
            raise TerminalError(f"Could not switch terminal to cbreak mode: {e}") from e
        self.fd = fd
        return True

    def read_keys(self) -> list[str]:
        """Drain every pending keypress, lowercased, without blocking."""
        if self.fd is None:
            return []
        if not select.select([self.fd], [], [], 0)[0]:
            return []

        data = os.read(self.fd, 64)
        if not data:
            self.eof = True
            return []
        return [key.lower() for key in data.decode("utf-8", errors="ignore")]

    def stop(self) -> None:
        """Restore terminal settings."""
        if self.fd is None:
            return
        fd, self.fd = self.fd, None
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, self.old_settings)
        except termios.error as e:
            raise TerminalError(f"Could not restore terminal settings: {e}") from e
        finally:
            self.old_settings = None

    def __enter__(self) -> "KeyboardHandler":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.stop()
        except TerminalError:
            if exc_type is None:
                raise
            self._logger.exception("terminal restore failed while handling %s", exc_type)
