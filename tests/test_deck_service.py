"""Tests for deck reconciliation."""

import pytest

from notes_to_anki.anki.services.anki_deck_service import AnkiDeckService
from notes_to_anki.error_codes import ErrorCode
from notes_to_anki.exceptions import (
    AnkiConnectError,
    ConfigurationError,
    SchemaConflictError,
)
from notes_to_anki.models import EnsureOutcome
from tests.fixtures import FakeAnkiConnect


@pytest.mark.asyncio
async def test_existing_deck_unchanged() -> None:
    fake = FakeAnkiConnect(decks=["Default", "Obsidian articles"])

    outcome = await AnkiDeckService(fake).ensure_deck("Obsidian articles", True)

    assert outcome is EnsureOutcome.UNCHANGED
    assert fake.actions == ["deckNames"]


@pytest.mark.asyncio
async def test_missing_deck_created() -> None:
    fake = FakeAnkiConnect()

    outcome = await AnkiDeckService(fake).ensure_deck("Obsidian articles", True)

    assert outcome is EnsureOutcome.CREATED
    assert "Obsidian articles" in fake.decks
    assert fake.calls[-1] == ("createDeck", {"deck": "Obsidian articles"})


@pytest.mark.asyncio
async def test_missing_deck_skipped_without_create() -> None:
    fake = FakeAnkiConnect()

    outcome = await AnkiDeckService(fake).ensure_deck("Obsidian articles", False)

    assert outcome is EnsureOutcome.SKIPPED
    assert fake.count("createDeck") == 0


@pytest.mark.asyncio
async def test_ensure_deck_is_idempotent() -> None:
    fake = FakeAnkiConnect()
    service = AnkiDeckService(fake)

    assert await service.ensure_deck("Papers", True) is EnsureOutcome.CREATED
    assert await service.ensure_deck("Papers", True) is EnsureOutcome.UNCHANGED


@pytest.mark.asyncio
async def test_name_conflict_with_model_is_distinct_error() -> None:
    fake = FakeAnkiConnect(models={"Papers": ["id"]})

    with pytest.raises(SchemaConflictError) as exc_info:
        await AnkiDeckService(fake).ensure_deck("Papers", True)

    assert exc_info.value.error_code == ErrorCode.ANK_NAME_CONFLICT.value
    assert exc_info.value.context == {"deck": "Papers"}


@pytest.mark.asyncio
async def test_other_create_errors_propagate_unchanged() -> None:
    fake = FakeAnkiConnect()
    fake.fail("createDeck", "collection is not available")

    with pytest.raises(AnkiConnectError) as exc_info:
        await AnkiDeckService(fake).ensure_deck("Papers", True)

    assert not isinstance(exc_info.value, SchemaConflictError)
    assert "collection is not available" in exc_info.value.message


@pytest.mark.asyncio
async def test_blank_deck_name_rejected_before_any_call() -> None:
    fake = FakeAnkiConnect()

    with pytest.raises(ConfigurationError):
        await AnkiDeckService(fake).ensure_deck("   ", True)
    assert fake.calls == []
