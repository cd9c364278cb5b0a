"""Main entry point for Pomodoro CLI."""

import typer

from pomodoro_cli.commands import config, start_command, version_command
from pomodoro_cli.utils.typer_helpers import SuggestingGroup

app = typer.Typer(
    name="pomodoro",
    cls=SuggestingGroup,
    help="A terminal Pomodoro timer with desktop notifications",
    no_args_is_help=True,
)

app.command("start")(start_command.start)
app.command("version")(version_command.version)
app.add_typer(config.app, name="config", help="Manage the default timer settings")


# Main entry point
def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
