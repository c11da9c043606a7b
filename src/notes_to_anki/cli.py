"""Command-line interface for notes-to-anki."""

from __future__ import annotations

import typer

from .cli_commands import anki_commands, config_commands, sync_commands

app = typer.Typer(
    name="notes-to-anki",
    help="Sync Markdown notes with frontmatter and callouts into Anki.",
    no_args_is_help=True,
)

app.add_typer(
    config_commands.config_app,
    name="config",
    help="Show or change the stored settings",
)

anki_commands.register(app)
sync_commands.register(app)


def cli() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
