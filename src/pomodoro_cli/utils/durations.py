"""Parsing and formatting of human-friendly durations."""

from __future__ import annotations

import math
import re
from datetime import timedelta

from pomodoro_cli.errors import ConfigurationError

_DURATION_RE = re.compile(
    r"^(?:(?P<hours>\d+)h)?"
    r"(?:(?P<minutes>\d+)m(?!s))?"
    r"(?:(?P<seconds>\d+(?:\.\d+)?)s)?"
    r"(?:(?P<millis>\d+)ms)?$"
)


def parse_duration(value: str | int | float | timedelta) -> timedelta:
    """
    Parse a duration such as ``25m``, ``1h30m``, ``90s``, ``1.5s`` or ``500ms``.

    Bare numbers are minutes. Raises ConfigurationError on anything else.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return _minutes(value, value)

    text = value.strip().lower().replace(" ", "")
    if not text:
        raise ConfigurationError("Duration must not be empty")

    match = _DURATION_RE.match(text)
    if match and any(match.groups()):
        try:
            return timedelta(
                hours=int(match.group("hours") or 0),
                minutes=int(match.group("minutes") or 0),
                seconds=float(match.group("seconds") or 0),
                milliseconds=int(match.group("millis") or 0),
            )
        except OverflowError:
            raise ConfigurationError(f"Duration '{value}' is too long") from None

    try:
        minutes = float(text)
    except ValueError:
        raise ConfigurationError(
            f"Invalid duration '{value}' (expected e.g. 25m, 1h30m, 90s, 500ms)"
        ) from None
    return _minutes(minutes, value)


def _minutes(minutes: float, original: object) -> timedelta:
    try:
        return timedelta(minutes=minutes)
    except OverflowError:
        raise ConfigurationError(f"Duration '{original}' is too long") from None
    except ValueError:
        raise ConfigurationError(f"Invalid duration '{original}'") from None


def format_duration(duration: timedelta) -> str:
    """Format a duration in the compact ``XhYmZs`` form accepted by parse_duration."""
    total_ms = round(duration.total_seconds() * 1000)
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds:
        parts.append(f"{seconds}s")
    if millis:
        parts.append(f"{millis}ms")
    return "".join(parts) or "0s"


def format_clock(remaining: timedelta) -> str:
    """Format a countdown as ``HH:MM:SS``, rounding partial seconds up."""
    total = max(0, math.ceil(remaining.total_seconds() - 1e-9))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
