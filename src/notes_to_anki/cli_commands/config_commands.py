"""Settings CLI commands."""

from __future__ import annotations

from typing import Annotated, Any, get_origin

import typer
from rich.markup import escape
from rich.table import Table

from notes_to_anki.config import SettingsStore, SyncConfig
from notes_to_anki.exceptions import NotesToAnkiError
from notes_to_anki.utils.logging import configure_logging

from .shared import ConfigPathOption, LogLevelOption, console, exit_with_error

config_app = typer.Typer(
    help="Show or change the stored settings",
    no_args_is_help=True,
)


def _format_value(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(item) for item in value) or "-"
    if value is None:
        return "-"
    return str(value)


def parse_setting(key: str, values: list[str]) -> Any:
    """Turn command-line words into a value for ``key``.

    List settings take every word; other settings take exactly one.
    """
    field = SyncConfig.model_fields.get(key)
    if field is not None and get_origin(field.annotation) is list:
        return values
    if len(values) != 1:
        raise typer.BadParameter(f"{key} takes a single value", param_hint="VALUES")
    return values[0]


@config_app.command(name="show")
def show(config_path: ConfigPathOption = None) -> None:
    """Print the effective settings."""
    store = SettingsStore(config_path)
    try:
        config = store.get()
    except NotesToAnkiError as e:
        exit_with_error(e)

    table = Table(title=f"Settings ({store.path})", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name in SyncConfig.model_fields:
        table.add_row(name, escape(_format_value(getattr(config, name))))
    console.print(table)


@config_app.command(name="set")
def set_setting(
    key: Annotated[str, typer.Argument(help="Setting name, e.g. deck_name")],
    values: Annotated[
        list[str], typer.Argument(help="New value; list settings take several")
    ],
    config_path: ConfigPathOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Validate and save one setting."""
    configure_logging(log_level or "INFO")
    store = SettingsStore(config_path)
    try:
        config = store.update(**{key: parse_setting(key, values)})
    except NotesToAnkiError as e:
        exit_with_error(e)

    console.print(
        f"[green]Saved[/green] {escape(key)} = "
        f"{escape(_format_value(getattr(config, key)))} to {escape(str(store.path))}"
    )
