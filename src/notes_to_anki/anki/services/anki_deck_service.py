"""Service for Anki deck operations."""

from typing import cast

from notes_to_anki.domain.interfaces.anki_http_client import IAnkiHttpClient
from notes_to_anki.error_codes import ErrorCode
from notes_to_anki.exceptions import (
    AnkiConnectError,
    ConfigurationError,
    SchemaConflictError,
)
from notes_to_anki.models import EnsureOutcome
from notes_to_anki.utils.logging import get_logger

logger = get_logger(__name__)

# Fragment of the error Anki reports when a deck and a note type share a name
_NAME_CONFLICT_MARKER = "conflicts with existing model"


class AnkiDeckService:
    """Service for Anki deck operations."""

    def __init__(self, http_client: IAnkiHttpClient):
        """
        Initialize deck service.

        Args:
            http_client: HTTP client for AnkiConnect communication
        """
        self._http_client = http_client

    async def get_deck_names(self) -> list[str]:
        """Get list of available deck names."""
        return cast("list[str]", await self._http_client.invoke("deckNames"))

    async def create_deck(self, deck_name: str) -> int | None:
        """Create a deck and return its id.

        Raises:
            SchemaConflictError: The name is already used by a note type
        """
        try:
            return cast(
                "int | None",
                await self._http_client.invoke("createDeck", {"deck": deck_name}),
            )
        except AnkiConnectError as e:
            if _NAME_CONFLICT_MARKER in str(e.context.get("anki_error", e.message)):
                msg = f'Deck name "{deck_name}" conflicts with an existing Anki note type name'
                raise SchemaConflictError(
                    msg,
                    suggestion="Choose a different deck name.",
                    context={"deck": deck_name},
                ) from e
            raise

    async def ensure_deck(self, deck_name: str, allow_create: bool) -> EnsureOutcome:
        """Make sure the deck exists.

        Returns:
            UNCHANGED if it exists, CREATED if it was created, SKIPPED if it
            is missing and creation is not allowed
        """
        if not deck_name or not deck_name.strip():
            msg = "Deck name must not be blank"
            raise ConfigurationError(
                msg,
                suggestion="Set deck_name in the configuration.",
                error_code=ErrorCode.CFG_MISSING_KEY.value,
            )

        if deck_name in await self.get_deck_names():
            logger.debug("deck_found", deck=deck_name)
            return EnsureOutcome.UNCHANGED

        if not allow_create:
            logger.warning(
                "deck_not_found",
                deck=deck_name,
                suggestion=(
                    "Create the deck manually, change the deck name, "
                    "or enable create_deck_if_not_found."
                ),
            )
            return EnsureOutcome.SKIPPED

        deck_id = await self.create_deck(deck_name)
        if deck_id is None:
            # AnkiConnect can answer null even when the deck was created
            logger.warning("deck_create_returned_null", deck=deck_name)
        logger.info("deck_created", deck=deck_name, deck_id=deck_id)
        return EnsureOutcome.CREATED
