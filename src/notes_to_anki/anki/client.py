"""AnkiConnect client facade.

Composes the HTTP transport with the deck, model and note services so the
sync orchestrator and the CLI depend on a single object.
"""

from types import TracebackType
from typing import Literal

from notes_to_anki.anki.services.anki_deck_service import AnkiDeckService
from notes_to_anki.anki.services.anki_http_client import AnkiHttpClient
from notes_to_anki.anki.services.anki_model_service import AnkiModelService
from notes_to_anki.anki.services.anki_note_service import AnkiNoteService
from notes_to_anki.config_settings import SyncConfig
from notes_to_anki.domain.interfaces.anki_http_client import IAnkiHttpClient
from notes_to_anki.models import EnsureOutcome, FieldMapping
from notes_to_anki.utils.logging import get_logger

logger = get_logger(__name__)


class AnkiClient:
    """Client for AnkiConnect, delegating to per-concern services."""

    def __init__(self, http_client: IAnkiHttpClient):
        """
        Initialize client.

        Args:
            http_client: Transport used for every AnkiConnect call
        """
        self._http_client = http_client
        self._deck_service = AnkiDeckService(http_client)
        self._model_service = AnkiModelService(http_client)
        self._note_service = AnkiNoteService(http_client)

    @classmethod
    def from_config(cls, config: SyncConfig) -> "AnkiClient":
        """Create a client talking HTTP to the configured AnkiConnect URL."""
        return cls(
            AnkiHttpClient(
                config.anki_connect_url, timeout=config.anki_connect_timeout
            )
        )

    async def get_version(self) -> int:
        """Return the AnkiConnect API version (a cheap liveness check)."""
        version = int(await self._http_client.invoke("version"))
        logger.info("anki_connect_connected", anki_connect_version=version)
        return version

    # Decks

    async def get_deck_names(self) -> list[str]:
        return await self._deck_service.get_deck_names()

    async def ensure_deck(self, deck_name: str, allow_create: bool) -> EnsureOutcome:
        return await self._deck_service.ensure_deck(deck_name, allow_create)

    # Models

    async def get_model_names(self) -> list[str]:
        return await self._model_service.get_model_names()

    async def get_model_field_names(self, model_name: str) -> list[str]:
        return await self._model_service.get_model_field_names(model_name)

    async def ensure_model(
        self, model_name: str, desired_fields: list[str], allow_create: bool
    ) -> EnsureOutcome:
        return await self._model_service.ensure_model(
            model_name, desired_fields, allow_create
        )

    # Notes

    async def find_notes(self, query: str) -> list[int]:
        return await self._note_service.find_notes(query)

    async def add_note(
        self,
        deck_name: str,
        model_name: str,
        fields: FieldMapping,
        tags: list[str] | None = None,
    ) -> int:
        return await self._note_service.add_note(deck_name, model_name, fields, tags)

    async def update_note_fields(self, note_id: int, fields: FieldMapping) -> None:
        await self._note_service.update_note_fields(note_id, fields)

    async def aclose(self) -> None:
        await self._http_client.aclose()

    async def __aenter__(self) -> "AnkiClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> Literal[False]:
        await self.aclose()
        return False
