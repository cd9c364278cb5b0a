"""Configuration management commands."""

from typing import Optional

import typer

from pomodoro_cli.config import get_config_manager
from pomodoro_cli.errors import PomodoroError
from pomodoro_cli.utils.ui.console import get_console
from pomodoro_cli.utils.ui.formatters import format_error, format_output, format_success

app = typer.Typer(help="Manage the default timer settings")
console = get_console()


@app.command("view")
def view_config(
    output: str = typer.Option(
        "table", "--output", "-o", help="Output format (table, json, yaml)"
    ),
) -> None:
    """View the current default settings."""
    settings = get_config_manager().settings
    format_output(settings.model_dump(mode="json"), output)


@app.command("get")
def get_config(
    key: str = typer.Argument(
        ..., help="Setting key (e.g., durations.work_duration)"
    ),
) -> None:
    """Get a setting value."""
    value = get_config_manager().get(key)
    if value is None:
        format_error(f"Setting '{key}' not found")
        raise typer.Exit(1)
    console.print(value, markup=False)


@app.command("set")
def set_config(
    key: str = typer.Argument(
        ..., help="Setting key (e.g., durations.work_duration)"
    ),
    value: str = typer.Argument(..., help="Setting value (e.g., 50m)"),
) -> None:
    """Set a setting value."""
    manager = get_config_manager()
    # Convert the value to the type of the setting it replaces
    current = manager.get(key)
    parsed_value: str | int | bool = value
    if isinstance(current, bool):
        if value.lower() in ("true", "false"):
            parsed_value = value.lower() == "true"
    elif isinstance(current, int) and value.isdigit():
        parsed_value = int(value)

    try:
        manager.set(key, parsed_value)
    except PomodoroError as e:
        format_error(f"Failed to set '{key}': {e}")
        raise typer.Exit(e.exit_code) from None
    format_success(f"Setting '{key}' set to '{manager.get(key)}'")


@app.command("reset")
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Setting key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset settings to defaults."""
    if not yes:
        msg = "all settings" if not key else f"'{key}'"
        confirm = typer.confirm(f"Are you sure you want to reset {msg}?")
        if not confirm:
            format_error("Cancelled")
            raise typer.Exit(0)

    try:
        get_config_manager().reset(key)
    except PomodoroError as e:
        format_error(f"Failed to reset '{key}': {e}")
        raise typer.Exit(e.exit_code) from None

    if key:
        format_success(f"Setting '{key}' reset to default")
    else:
        format_success("Settings reset to defaults")
