"""Typer helper utilities."""

from difflib import get_close_matches

import typer
from typer.core import TyperGroup

from pomodoro_cli.utils.ui.console import get_console


class SuggestingGroup(TyperGroup):
    """Command group that answers a mistyped command with the closest names."""

    max_suggestions = 3
    similarity_cutoff = 0.6

    def suggest(self, attempted: str) -> list[str]:
        return get_close_matches(
            attempted,
            list(self.commands),
            n=self.max_suggestions,
            cutoff=self.similarity_cutoff,
        )

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except Exception as e:
            suggestions = self.suggest(args[0]) if args else []
            if not suggestions:
                raise

            console = get_console()
            console.print(
                f'[red]Error:[/red] unknown command "{args[0]}" for "{ctx.info_name}"'
            )
            console.print()
            console.print(
                "[yellow]Did you mean this?[/yellow]"
                if len(suggestions) == 1
                else "[yellow]Did you mean one of these?[/yellow]"
            )
            for suggestion in suggestions:
                console.print(f"        {suggestion}")
            raise typer.Exit(1) from e
