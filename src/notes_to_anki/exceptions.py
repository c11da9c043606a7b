"""Centralized exception hierarchy for notes-to-anki.

All custom exceptions inherit from NotesToAnkiError, making it easy to catch
every sync-related error with a single except clause.

Exception Hierarchy:
    NotesToAnkiError (base)
     ConfigurationError - Invalid or missing configuration
     IdentityError - Note lacks a value under the identity property
     ParserError - Note file unreadable or frontmatter malformed
     AnkiError - Anki-related errors
        AnkiConnectError - Transport failure or AnkiConnect error payload
           SchemaConflictError - Deck name collides with a note type name

Usage Examples:
    # Bulk sync treats a missing identity as a silent skip
    try:
        await orchestrator.sync_one(note)
    except IdentityError:
        skipped += 1
    except NotesToAnkiError as e:
        logger.error("note_sync_failed", **e.to_dict())
"""

from typing import Any

from notes_to_anki.error_codes import ErrorCode


class NotesToAnkiError(Exception):
    """Base exception for all sync-related errors.

    Attributes:
        message: Human-readable error message
        suggestion: Optional suggestion for resolving the error
        error_code: Structured error code for machine-readable handling
        context: Additional context for debugging (e.g., file paths, model names)
    """

    default_error_code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            suggestion: Optional suggestion for resolving the error
            error_code: Structured error code (e.g., "ANK-API-001")
            context: Additional context for debugging
        """
        if error_code is None and self.default_error_code is not None:
            error_code = self.default_error_code.value
        self.message = message
        self.suggestion = suggestion
        self.error_code = error_code
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with error code and suggestion if available."""
        parts = []
        if self.error_code:
            parts.append(f"[{self.error_code}] {self.message}")
        else:
            parts.append(self.message)
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging.

        Returns:
            Dictionary with error details
        """
        return {
            "message": self.message,
            "error_code": self.error_code,
            "suggestion": self.suggestion,
            "context": self.context,
            "type": type(self).__name__,
        }


class ConfigurationError(NotesToAnkiError):
    """Configuration loading or validation errors.

    Raised when:
    - Config file is malformed
    - Deck, note type or identity property name is blank
    - Property or callout lists contain blank entries
    - Identity, property and callout names collide

    Always raised before any AnkiConnect request is made.
    """

    default_error_code = ErrorCode.CFG_INVALID


class IdentityError(NotesToAnkiError):
    """Note has no value under the configured identity property.

    Fatal for a single-note sync; bulk sync skips such notes without
    counting them as failures.
    """

    default_error_code = ErrorCode.NOTE_MISSING_IDENTITY


class ParserError(NotesToAnkiError):
    """Note file errors.

    Raised when:
    - Note file cannot be read
    - YAML frontmatter is malformed
    """

    default_error_code = ErrorCode.NOTE_UNREADABLE


class AnkiError(NotesToAnkiError):
    """Base class for Anki-related errors."""


class AnkiConnectError(AnkiError):
    """AnkiConnect communication errors.

    Raised when:
    - Cannot connect to AnkiConnect (Anki not running, addon missing)
    - The request times out
    - AnkiConnect answers with a non-success status or malformed body
    - AnkiConnect API returns an error payload

    Never retried automatically.
    """

    default_error_code = ErrorCode.ANK_API_ERROR


RemoteCallError = AnkiConnectError


class SchemaConflictError(AnkiConnectError):
    """Deck name collides with an existing note type name.

    Surfaced separately so the user renames the deck instead of retrying.
    """

    default_error_code = ErrorCode.ANK_NAME_CONFLICT
