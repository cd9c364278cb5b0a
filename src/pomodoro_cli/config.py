"""Configuration management for Pomodoro CLI."""

import json
import string
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional

from platformdirs import user_config_dir
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)

from pomodoro_cli.errors import ConfigurationError
from pomodoro_cli.models.focus.cycling import DEFAULT_LONG_BREAK_EVERY, SessionKind
from pomodoro_cli.utils.durations import format_duration, parse_duration
from pomodoro_cli.utils.logger import get_logger

FORMAT_TOKENS = ("timer", "session_kind", "session_number")

_SAMPLE_TOKENS = {"timer": "00:25:00", "session_kind": "Work", "session_number": 1}

_DURATION_FIELDS = (
    "tick_interval",
    "work_duration",
    "break_duration",
    "long_break_duration",
)


def validate_format_string(template: str) -> str:
    """Check that *template* only uses the display tokens and renders cleanly."""
    try:
        fields = [
            field_name
            for _, field_name, _, _ in string.Formatter().parse(template)
            if field_name is not None
        ]
    except ValueError as e:
        raise ConfigurationError(f"Malformed format string {template!r}: {e}") from None

    for field_name in fields:
        if field_name not in FORMAT_TOKENS:
            allowed = ", ".join(f"{{{token}}}" for token in FORMAT_TOKENS)
            raise ConfigurationError(
                f"Unknown token {{{field_name}}} in {template!r} (allowed: {allowed})"
            )

    try:
        template.format(**_SAMPLE_TOKENS)
    except (ValueError, KeyError, IndexError, AttributeError) as e:
        raise ConfigurationError(f"Malformed format string {template!r}: {e}") from None
    return template


class DurationConfig(BaseModel):
    """Session durations and tick granularity."""

    model_config = ConfigDict(frozen=True)

    tick_interval: timedelta = Field(default=timedelta(seconds=1))
    work_duration: timedelta = Field(default=timedelta(minutes=25))
    break_duration: timedelta = Field(default=timedelta(minutes=5))
    long_break_duration: timedelta = Field(default=timedelta(minutes=10))
    long_break_every: int = Field(default=DEFAULT_LONG_BREAK_EVERY, ge=1)

    @field_validator(*_DURATION_FIELDS, mode="before")
    @classmethod
    def parse_durations(cls, value: Any) -> Any:
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return parse_duration(value)
        return value

    @field_validator(*_DURATION_FIELDS)
    @classmethod
    def check_positive(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("must be greater than zero")
        return value

    @model_validator(mode="after")
    def check_tick_interval(self) -> "DurationConfig":
        shortest = min(
            self.work_duration, self.break_duration, self.long_break_duration
        )
        if self.tick_interval > shortest:
            raise ValueError(
                f"tick interval ({format_duration(self.tick_interval)}) must not be "
                f"longer than the shortest session ({format_duration(shortest)})"
            )
        return self

    @field_serializer(*_DURATION_FIELDS, when_used="json")
    def serialize_duration(self, value: timedelta) -> str:
        return format_duration(value)

    def for_session(self, kind: SessionKind) -> timedelta:
        """Get the configured duration of a session kind."""
        if kind is SessionKind.WORK:
            return self.work_duration
        if kind is SessionKind.BREAK:
            return self.break_duration
        return self.long_break_duration


class NotificationTemplate(BaseModel):
    """Icon, title and body of one desktop notification."""

    model_config = ConfigDict(frozen=True)

    icon: str = Field(default="clock")
    title: str
    body: str


class NotificationConfig(BaseModel):
    """Desktop notifications sent when a session starts."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True)
    app_name: str = Field(default="Pomodoro")
    timeout: int = Field(default=10, ge=0)
    work: NotificationTemplate = Field(
        default=NotificationTemplate(
            title="Working time", body="Well, the moment has passed, back to work!"
        )
    )
    short_break: NotificationTemplate = Field(
        default=NotificationTemplate(title="Break time", body="Drink some water!")
    )
    long_break: NotificationTemplate = Field(
        default=NotificationTemplate(
            title="Long break time", body="Go for a walk or eat a snack!"
        )
    )

    def for_session(self, kind: SessionKind) -> NotificationTemplate:
        """Get the notification announcing a session of *kind*."""
        if kind is SessionKind.WORK:
            return self.work
        if kind is SessionKind.BREAK:
            return self.short_break
        return self.long_break


class DisplayConfig(BaseModel):
    """Format strings and labels used to render the countdown."""

    model_config = ConfigDict(frozen=True)

    active_display: str = Field(
        default="{session_kind}\nSession {session_number}\n{timer}\n"
    )
    paused_display: str = Field(
        default="{session_kind}\nSession {session_number}\n{timer}\n(Paused)\n"
    )
    work_label: str = Field(default="Work")
    break_label: str = Field(default="Break")
    long_break_label: str = Field(default="Long break")

    @field_validator("active_display", "paused_display")
    @classmethod
    def check_format(cls, value: str) -> str:
        return validate_format_string(value)

    def label_for(self, kind: SessionKind) -> str:
        if kind is SessionKind.WORK:
            return self.work_label
        if kind is SessionKind.BREAK:
            return self.break_label
        return self.long_break_label


class Settings(BaseModel):
    """Main configuration."""

    model_config = ConfigDict(frozen=True)

    durations: DurationConfig = Field(default_factory=DurationConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)


def _describe_validation_error(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        message = item["msg"].removeprefix("Value error, ")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def build_settings(
    data: dict[str, Any] | None = None, overrides: dict[str, Any] | None = None
) -> Settings:
    """Validate settings data, applying nested *overrides* on top.

    Raises ConfigurationError with a readable message on invalid input.
    """
    merged = _merge(data or {}, overrides or {})
    try:
        return Settings.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(_describe_validation_error(e)) from None


class ConfigManager:
    """Manages the persisted default settings."""

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = config_dir or Path(user_config_dir("pomodoro-cli"))
        self.config_file = self.config_dir / "settings.json"
        self._settings: Optional[Settings] = None
        self._logger = get_logger("config")

    @property
    def settings(self) -> Settings:
        """Get the current settings."""
        if self._settings is None:
            self._settings = self.load_settings()
        return self._settings

    def load_settings(self) -> Settings:
        """Load settings from file, falling back to defaults when unreadable."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r") as f:
                    data = json.load(f)
                return build_settings(data)
            except (OSError, json.JSONDecodeError, ConfigurationError) as e:
                self._logger.warning(
                    "ignoring unreadable settings file %s: %s", self.config_file, e
                )
                return Settings()
        return Settings()

    def save_settings(self, settings: Optional[Settings] = None) -> None:
        """Save settings to file."""
        if settings is None:
            settings = self.settings

        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(settings.model_dump(mode="json"), f, indent=2)

    def get(self, key: str) -> Any:
        """Get a setting by dot-separated key, or None if there is no such key."""
        return ConfigManager._lookup(self.settings, key)

    def set(self, key: str, value: Any) -> None:
        """Set a setting by dot-separated key and persist it."""
        keys = key.split(".")
        data = self.settings.model_dump(mode="json")

        current = data
        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                raise ConfigurationError(f"Unknown setting '{key}'")
            current = current[k]
        if keys[-1] not in current:
            raise ConfigurationError(f"Unknown setting '{key}'")
        current[keys[-1]] = value

        self._settings = build_settings(data)
        self.save_settings()

    def reset(self, key: Optional[str] = None) -> None:
        """Reset one setting, or all of them, to the defaults."""
        if key is None:
            self._settings = Settings()
            self.save_settings()
            return

        default_value = ConfigManager._lookup(Settings(), key)
        if default_value is None:
            raise ConfigurationError(f"Unknown setting '{key}'")
        self.set(key, default_value)

    @staticmethod
    def _lookup(settings: Settings, key: str) -> Any:
        value: Any = settings.model_dump(mode="json")
        for k in key.split("."):
            if not isinstance(value, dict) or k not in value:
                return None
            value = value[k]
        return value


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get or create the global config manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
