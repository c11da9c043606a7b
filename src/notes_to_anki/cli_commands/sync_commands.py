"""Sync CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from notes_to_anki.exceptions import ConfigurationError

from .shared import (
    ConfigPathOption,
    LogLevelOption,
    VerboseOption,
    exit_with_error,
    get_config_and_logger,
)
from .sync_handler import run_sync_note, run_sync_tags


def register(app: typer.Typer) -> None:
    """Register sync commands on the given Typer app."""

    @app.command(name="sync-note")
    def sync_note(
        note_path: Annotated[
            Path,
            typer.Argument(
                help="Markdown note to sync", exists=True, dir_okay=False
            ),
        ],
        assign_guid: Annotated[
            bool,
            typer.Option(
                "--assign-guid",
                help="Generate and save an identity for a note that has none",
            ),
        ] = False,
        config_path: ConfigPathOption = None,
        log_level: LogLevelOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Create or update the Anki note for a single file."""
        try:
            config, logger = get_config_and_logger(config_path, log_level, verbose)
        except ConfigurationError as e:
            exit_with_error(e)
        run_sync_note(
            config=config, logger=logger, note_path=note_path, assign_guid=assign_guid
        )

    @app.command(name="sync-tags")
    def sync_tags(
        vault: Annotated[
            Path | None,
            typer.Option(
                "--vault",
                help="Vault directory (overrides vault_path)",
                exists=True,
                file_okay=False,
            ),
        ] = None,
        config_path: ConfigPathOption = None,
        log_level: LogLevelOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Sync every vault note selected by the include/exclude tags."""
        try:
            config, logger = get_config_and_logger(config_path, log_level, verbose)
        except ConfigurationError as e:
            exit_with_error(e)
        if vault is not None:
            config = config.model_copy(update={"vault_path": vault})
        run_sync_tags(config=config, logger=logger)
