"""Exceptions raised by Pomodoro CLI."""

from pomodoro_cli.utils.exit_codes import (
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_TERMINAL,
)


class PomodoroError(Exception):
    """Base exception for all Pomodoro CLI errors."""

    exit_code = ERROR_GENERAL

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(PomodoroError, ValueError):
    """Raised when a duration, format string or setting cannot be used."""

    exit_code = ERROR_INVALID_ARGS


class NotificationError(PomodoroError):
    """Raised when the desktop notification backend fails."""


class TerminalError(PomodoroError):
    """Raised when the terminal input mode cannot be acquired or released."""

    exit_code = ERROR_TERMINAL
