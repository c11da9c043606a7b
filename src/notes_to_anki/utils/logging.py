"""Logging configuration using structlog for structured logging."""

import logging
import sys
from collections.abc import MutableMapping
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer
from structlog.stdlib import LoggerFactory, add_log_level, add_logger_name

_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Events shown on the terminal without --verbose (plus all WARNING and above)
USER_FACING_EVENTS: set[str] = {
    "anki_connect_connected",
    "deck_created",
    "model_created",
    "model_updated",
    "note_synced",
    "bulk_sync_completed",
    "bulk_sync_cancelled",
    "identity_written",
}


def _get_level_no(level_name: str) -> int:
    """Get numeric log level from name."""
    return _LOG_LEVELS.get(level_name.upper(), logging.INFO)


class UserFacingConsoleFilter(logging.Filter):
    """Logging filter that only passes user-facing events to console.

    Allows:
    - Events in USER_FACING_EVENTS
    - All WARNING, ERROR and CRITICAL level messages
    - All messages when verbose mode is enabled
    """

    def __init__(self, verbose: bool = False) -> None:
        super().__init__()
        self.verbose = verbose

    def filter(self, record: logging.LogRecord) -> bool:
        if self.verbose or record.levelno >= logging.WARNING:
            return True

        msg = record.msg
        if isinstance(msg, dict):
            return msg.get("event") in USER_FACING_EVENTS
        return record.getMessage() in USER_FACING_EVENTS


class UserFriendlyConsoleRenderer:
    """Renders user-facing logs in a clean, readable format for terminal output.

    Falls back to the standard console renderer for other messages.
    """

    def __init__(self) -> None:
        self._fallback = ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    def __call__(
        self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> str:
        """Render log event as user-friendly string."""
        event = event_dict.get("event", "")
        level = str(event_dict.get("level", "info")).upper()

        if event == "note_synced":
            action = event_dict.get("action", "synced")
            return f"{str(action).capitalize()} Anki note for {event_dict.get('file', '')}"

        elif event == "bulk_sync_completed":
            return str(event_dict.get("summary", "Sync complete."))

        elif event == "bulk_sync_cancelled":
            return "Sync cancelled"

        elif event == "anki_connect_connected":
            return (
                "AnkiConnect connected successfully "
                f"(version {event_dict.get('anki_connect_version')})."
            )

        elif event == "deck_created":
            return f"Created Anki deck: \"{event_dict.get('deck')}\""

        elif event in ("model_created", "model_updated"):
            verb = "Created" if event == "model_created" else "Updated"
            return f"{verb} Anki note type: \"{event_dict.get('model')}\""

        elif event == "identity_written":
            return (
                f"Saved {event_dict.get('key')} {event_dict.get('value')} "
                f"to frontmatter of \"{event_dict.get('file')}\""
            )

        elif level == "ERROR":
            error = event_dict.get("error", event)
            return f"ERROR: {error}"

        elif level == "WARNING":
            details = event_dict.get("_formatted", "")
            return f"WARNING: {event}{details}"

        return str(self._fallback(logger, method_name, event_dict))


# Global state for handlers
_configured = False
_handlers: list[logging.Handler] = []


def _add_formatted_extra_processor(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Add a '_formatted' string of the extra fields, key fields first."""
    priority_fields = ["file", "deck", "model", "note_id"]
    important_parts = []
    other_parts = []

    for key, value in event_dict.items():
        if key in ("logger", "level", "event", "timestamp", "exception", "_formatted"):
            continue

        if key in priority_fields:
            if value:
                important_parts.append(f"{key}={value}")
        elif value is not None and value != "":
            other_parts.append(f"{key}={value}")

    all_parts = important_parts + other_parts
    event_dict["_formatted"] = " | " + " ".join(all_parts) if all_parts else ""
    return event_dict


def _pre_chain() -> list[structlog.typing.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_formatted_extra_processor,
    ]


def configure_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    verbose: bool = False,
) -> None:
    """Configure structlog logging.

    Args:
        log_level: Minimum console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the rotating JSON log file; no file when None
        verbose: If True, show all log messages on terminal
    """
    global _configured

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in _handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    structlog.configure(
        processors=[
            *_pre_chain(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_get_level_no(log_level))
    console_handler.addFilter(UserFacingConsoleFilter(verbose=verbose))

    if verbose:
        renderer: Any = ConsoleRenderer(
            colors=True, exception_formatter=structlog.dev.plain_traceback
        )
    else:
        renderer = UserFriendlyConsoleRenderer()

    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer, foreign_pre_chain=_pre_chain()
        )
    )
    root_logger.addHandler(console_handler)
    _handlers.append(console_handler)

    if log_dir is not None:
        log_dir.mkdir(exist_ok=True, parents=True)
        file_handler = RotatingFileHandler(
            filename=str(log_dir / "notes-to-anki.log"),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=JSONRenderer(), foreign_pre_chain=_pre_chain()
            )
        )
        root_logger.addHandler(file_handler)
        _handlers.append(file_handler)

    _configured = True

    structlog.get_logger("notes_to_anki.utils.logging").debug(
        "logging_configured",
        console_level=log_level,
        log_dir=str(log_dir) if log_dir else None,
        verbose=verbose,
    )


def get_logger(name: str) -> Any:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structlog logger bound to the given name
    """
    if not _configured:
        configure_logging()

    return structlog.get_logger(name)
