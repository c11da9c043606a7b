"""Structured error codes for machine-readable error handling.

Error codes follow the format: {DOMAIN}-{CATEGORY}-{NUMBER}

Error Domains:
    ANK - Anki errors (connection, API, deck/model reconciliation)
    NOTE - Note errors (identity, parsing)
    CFG - Configuration errors

Usage:
    from notes_to_anki.error_codes import ErrorCode

    logger.error(
        "note_sync_failed",
        error_code=ErrorCode.ANK_API_ERROR.value,
        file=str(note.path),
    )
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Structured error codes for machine-readable handling.

    All error codes inherit from str for JSON serialization compatibility.
    """

    # =========================================================================
    # Anki Errors (ANK-xxx-xxx)
    # =========================================================================
    ANK_CONNECTION_FAILED = "ANK-CONN-001"
    """Could not reach AnkiConnect (Anki closed, addon missing, timeout)."""

    ANK_HTTP_STATUS = "ANK-HTTP-001"
    """AnkiConnect answered with a non-success HTTP status."""

    ANK_BAD_RESPONSE = "ANK-RESP-001"
    """AnkiConnect answered with a body that is not a valid envelope."""

    ANK_API_ERROR = "ANK-API-001"
    """AnkiConnect reported an error payload for the action."""

    ANK_NAME_CONFLICT = "ANK-CONFLICT-001"
    """Deck name collides with an existing note type name."""

    # =========================================================================
    # Note Errors (NOTE-xxx-xxx)
    # =========================================================================
    NOTE_MISSING_IDENTITY = "NOTE-ID-001"
    """Note has no value under the identity property."""

    NOTE_UNREADABLE = "NOTE-READ-001"
    """Note file could not be read or its frontmatter could not be parsed."""

    # =========================================================================
    # Configuration Errors (CFG-xxx-xxx)
    # =========================================================================
    CFG_INVALID = "CFG-INVALID-001"
    """Configuration values failed validation."""

    CFG_MISSING_KEY = "CFG-KEY-001"
    """A required configuration value is blank or missing."""

    CFG_FIELD_COLLISION = "CFG-FIELD-001"
    """Identity, property and callout names are not disjoint."""

    CFG_FILE_INVALID = "CFG-FILE-001"
    """Configuration file could not be read or parsed."""


def get_error_domain(code: ErrorCode) -> str:
    """Extract the domain from an error code.

    Args:
        code: The error code

    Returns:
        The domain prefix (e.g., "ANK", "NOTE", "CFG")
    """
    return code.value.split("-")[0]


def get_error_severity(code: ErrorCode) -> str:
    """Get the severity level for an error code.

    Args:
        code: The error code

    Returns:
        Severity level: "critical", "error", "warning"
    """
    critical_codes = {
        ErrorCode.CFG_INVALID,
        ErrorCode.CFG_MISSING_KEY,
        ErrorCode.CFG_FIELD_COLLISION,
        ErrorCode.CFG_FILE_INVALID,
    }
    warning_codes = {
        ErrorCode.NOTE_MISSING_IDENTITY,
    }

    if code in critical_codes:
        return "critical"
    if code in warning_codes:
        return "warning"
    return "error"
