"""AnkiConnect setup CLI commands."""

from __future__ import annotations

import typer

from notes_to_anki.exceptions import ConfigurationError

from .anki_handler import run_check, run_ensure_deck, run_ensure_model
from .shared import (
    ConfigPathOption,
    LogLevelOption,
    VerboseOption,
    exit_with_error,
    get_config_and_logger,
)


def register(app: typer.Typer) -> None:
    """Register AnkiConnect setup commands on the given Typer app."""

    @app.command()
    def check(
        config_path: ConfigPathOption = None,
        log_level: LogLevelOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Check that AnkiConnect is reachable."""
        try:
            config, logger = get_config_and_logger(config_path, log_level, verbose)
        except ConfigurationError as e:
            exit_with_error(e)
        run_check(config=config, logger=logger)

    @app.command(name="ensure-deck")
    def ensure_deck(
        config_path: ConfigPathOption = None,
        log_level: LogLevelOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Create the configured deck if it does not exist."""
        try:
            config, logger = get_config_and_logger(config_path, log_level, verbose)
        except ConfigurationError as e:
            exit_with_error(e)
        run_ensure_deck(config=config, logger=logger)

    @app.command(name="ensure-model")
    def ensure_model(
        config_path: ConfigPathOption = None,
        log_level: LogLevelOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Create the configured note type or bring its fields up to date."""
        try:
            config, logger = get_config_and_logger(config_path, log_level, verbose)
        except ConfigurationError as e:
            exit_with_error(e)
        run_ensure_model(config=config, logger=logger)
