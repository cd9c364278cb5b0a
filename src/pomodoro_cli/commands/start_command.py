"""Start command - run the Pomodoro timer in the terminal."""

from typing import Any, Optional

import typer

from pomodoro_cli.config import Settings, build_settings, get_config_manager
from pomodoro_cli.errors import PomodoroError
from pomodoro_cli.models.focus import PomodoroApplication
from pomodoro_cli.utils.exit_codes import get_exit_code_name
from pomodoro_cli.utils.logger import get_logger
from pomodoro_cli.utils.ui.formatters import format_error

app = typer.Typer()

_DURATION_HELP = "e.g. 25m, 1h30m, 90s, 500ms; bare numbers are minutes"


def _unescape(template: str) -> str:
    return template.replace("\\n", "\n").replace("\\t", "\t")


def _set(target: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    if value is None:
        return
    for key in path[:-1]:
        target = target.setdefault(key, {})
    target[path[-1]] = value


def resolve_settings(overrides: dict[str, Any]) -> Settings:
    """Layer command-line overrides on top of the saved default settings."""
    base = get_config_manager().settings.model_dump()
    return build_settings(base, overrides)


@app.command()
def start(
    tick_interval: Optional[str] = typer.Option(
        None, "--tick-interval", "-t", metavar="DURATION",
        help=f"How often the countdown refreshes ({_DURATION_HELP})",
    ),
    work_duration: Optional[str] = typer.Option(
        None, "--work-duration", "-w", metavar="DURATION",
        help="Length of a work session",
    ),
    break_duration: Optional[str] = typer.Option(
        None, "--break-duration", "-b", metavar="DURATION",
        help="Length of a short break",
    ),
    long_break_duration: Optional[str] = typer.Option(
        None, "--long-break-duration", "-l", metavar="DURATION",
        help="Length of a long break",
    ),
    long_break_every: Optional[int] = typer.Option(
        None, "--long-break-every", metavar="N",
        help="Take a long break after every N work sessions",
    ),
    notify: Optional[bool] = typer.Option(
        None, "--notify/--no-notify", help="Show desktop notifications"
    ),
    work_notification_icon: Optional[str] = typer.Option(
        None, "--work-notification-icon", metavar="ICON"
    ),
    work_notification_title: Optional[str] = typer.Option(
        None, "--work-notification-title", metavar="TEXT"
    ),
    work_notification_body: Optional[str] = typer.Option(
        None, "--work-notification-body", metavar="TEXT"
    ),
    break_notification_icon: Optional[str] = typer.Option(
        None, "--break-notification-icon", metavar="ICON"
    ),
    break_notification_title: Optional[str] = typer.Option(
        None, "--break-notification-title", metavar="TEXT"
    ),
    break_notification_body: Optional[str] = typer.Option(
        None, "--break-notification-body", metavar="TEXT"
    ),
    long_break_notification_icon: Optional[str] = typer.Option(
        None, "--long-break-notification-icon", metavar="ICON"
    ),
    long_break_notification_title: Optional[str] = typer.Option(
        None, "--long-break-notification-title", metavar="TEXT"
    ),
    long_break_notification_body: Optional[str] = typer.Option(
        None, "--long-break-notification-body", metavar="TEXT"
    ),
    active_display: Optional[str] = typer.Option(
        None, "--active-display", metavar="TEXT",
        help="Display while running; tokens {timer}, {session_kind}, {session_number}",
    ),
    paused_display: Optional[str] = typer.Option(
        None, "--paused-display", metavar="TEXT",
        help="Display while paused; same tokens as --active-display",
    ),
    work_label: Optional[str] = typer.Option(None, "--work-label", metavar="TEXT"),
    break_label: Optional[str] = typer.Option(None, "--break-label", metavar="TEXT"),
    long_break_label: Optional[str] = typer.Option(
        None, "--long-break-label", metavar="TEXT"
    ),
) -> None:
    """
    Start the Pomodoro timer.

    Press 'p' to pause or resume and 'q' to quit. SIGUSR1 toggles pause,
    SIGINT, SIGQUIT and SIGTERM quit.
    """
    overrides: dict[str, Any] = {}
    _set(overrides, ("durations", "tick_interval"), tick_interval)
    _set(overrides, ("durations", "work_duration"), work_duration)
    _set(overrides, ("durations", "break_duration"), break_duration)
    _set(overrides, ("durations", "long_break_duration"), long_break_duration)
    _set(overrides, ("durations", "long_break_every"), long_break_every)

    _set(overrides, ("notifications", "enabled"), notify)
    _set(overrides, ("notifications", "work", "icon"), work_notification_icon)
    _set(overrides, ("notifications", "work", "title"), work_notification_title)
    _set(overrides, ("notifications", "work", "body"), work_notification_body)
    _set(overrides, ("notifications", "short_break", "icon"), break_notification_icon)
    _set(overrides, ("notifications", "short_break", "title"), break_notification_title)
    _set(overrides, ("notifications", "short_break", "body"), break_notification_body)
    _set(overrides, ("notifications", "long_break", "icon"), long_break_notification_icon)
    _set(
        overrides, ("notifications", "long_break", "title"), long_break_notification_title
    )
    _set(overrides, ("notifications", "long_break", "body"), long_break_notification_body)

    if active_display is not None:
        _set(overrides, ("display", "active_display"), _unescape(active_display))
    if paused_display is not None:
        _set(overrides, ("display", "paused_display"), _unescape(paused_display))
    _set(overrides, ("display", "work_label"), work_label)
    _set(overrides, ("display", "break_label"), break_label)
    _set(overrides, ("display", "long_break_label"), long_break_label)

    logger = get_logger("start")
    try:
        settings = resolve_settings(overrides)
        PomodoroApplication(settings).start()
    except PomodoroError as e:
        logger.error("timer aborted (%s): %s", get_exit_code_name(e.exit_code), e)
        format_error(str(e))
        raise typer.Exit(e.exit_code) from None
