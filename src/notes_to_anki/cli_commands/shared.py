"""Shared utilities for CLI commands."""

from __future__ import annotations

import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from notes_to_anki.config import SyncConfig, load_config, set_config
from notes_to_anki.exceptions import NotesToAnkiError
from notes_to_anki.utils.logging import configure_logging, get_logger

# Shared console for all commands
console = Console()


def get_config_and_logger(
    config_path: Path | None = None,
    log_level: str | None = None,
    verbose: bool = False,
) -> tuple[SyncConfig, Any]:
    """Load configuration and configure logging for a command.

    Args:
        config_path: Optional path to config file
        log_level: Console log level; the configured level when None
        verbose: Show all log messages on terminal

    Returns:
        Tuple of (SyncConfig, Logger)
    """
    config = load_config(config_path)
    set_config(config)

    configure_logging(
        log_level or config.log_level,
        log_dir=config.log_dir,
        verbose=verbose,
    )
    return config, get_logger("cli")


def exit_with_error(error: NotesToAnkiError, logger: Any | None = None) -> NoReturn:
    """Print a library error with its suggestion and exit with code 1."""
    if logger is not None:
        logger.debug("command_failed", **error.to_dict())
    label = f"[{error.error_code}] " if error.error_code else ""
    console.print(f"[bold red]ERROR:[/bold red] {escape(label + error.message)}")
    if error.suggestion:
        console.print(f"  [dim]TIP: {escape(error.suggestion)}[/dim]")
    raise typer.Exit(code=1)


class InterruptFlag:
    """Records SIGINT so a long-running loop can stop between items."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def is_set(self) -> bool:
        return self._event.is_set()

    @contextmanager
    def installed(self) -> Iterator[InterruptFlag]:
        """Route SIGINT to this flag while the context is active."""
        if threading.current_thread() is not threading.main_thread():
            yield self
            return

        def _handler(signum: int, frame: Any) -> None:
            console.print(
                "\n[yellow]Interrupt received, stopping after the current note[/yellow]"
            )
            self._event.set()

        previous = signal.signal(signal.SIGINT, _handler)
        try:
            yield self
        finally:
            signal.signal(signal.SIGINT, previous)


ConfigPathOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to notes-to-anki.yaml"),
]
LogLevelOption = Annotated[
    str | None,
    typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show all log messages on the terminal"),
]
