"""Command 'version' of pomodoro-cli"""

import typer

from pomodoro_cli import __version__
from pomodoro_cli.utils.ui.console import get_console

app = typer.Typer()
console = get_console(highlight=False)


@app.command()
def version() -> None:
    """Show version information"""
    console.print(__version__)
