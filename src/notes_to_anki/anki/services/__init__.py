"""Anki services: one per AnkiConnect concern."""

from .anki_deck_service import AnkiDeckService
from .anki_http_client import AnkiHttpClient
from .anki_model_service import (
    AnkiModelService,
    FieldOperation,
    FieldOperationKind,
    plan_field_convergence,
)
from .anki_note_service import AnkiNoteService, build_identity_query

__all__ = [
    "AnkiDeckService",
    "AnkiHttpClient",
    "AnkiModelService",
    "AnkiNoteService",
    "FieldOperation",
    "FieldOperationKind",
    "build_identity_query",
    "plan_field_convergence",
]
