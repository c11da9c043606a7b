"""Service for Anki note operations."""

from typing import cast

from notes_to_anki.domain.interfaces.anki_http_client import IAnkiHttpClient
from notes_to_anki.models import FieldMapping
from notes_to_anki.utils.logging import get_logger

logger = get_logger(__name__)


def build_identity_query(deck_name: str, field_name: str, value: str) -> str:
    """Build the search query that finds a note by its identity field.

    Quote characters in the value are not escaped.
    """
    return f'deck:"{deck_name}" "{field_name}:{value}"'


class AnkiNoteService:
    """Service for finding, adding and updating Anki notes."""

    def __init__(self, http_client: IAnkiHttpClient):
        self._http_client = http_client

    async def find_notes(self, query: str) -> list[int]:
        """Find note ids matching an Anki search query."""
        return cast(
            "list[int]", await self._http_client.invoke("findNotes", {"query": query})
        )

    async def add_note(
        self,
        deck_name: str,
        model_name: str,
        fields: FieldMapping,
        tags: list[str] | None = None,
    ) -> int:
        """Add a new note and return its id."""
        note = {
            "deckName": deck_name,
            "modelName": model_name,
            "fields": fields,
            "tags": tags or [],
        }
        note_id = cast("int", await self._http_client.invoke("addNote", {"note": note}))
        logger.debug("anki_note_added", note_id=note_id, deck=deck_name, model=model_name)
        return note_id

    async def update_note_fields(self, note_id: int, fields: FieldMapping) -> None:
        """Overwrite the given fields of a note; other fields are left as they are."""
        await self._http_client.invoke(
            "updateNoteFields", {"note": {"id": note_id, "fields": fields}}
        )
        logger.debug("anki_note_updated", note_id=note_id, fields=list(fields))
