"""Tests for note type reconciliation."""

from itertools import permutations

import pytest

from notes_to_anki.anki.services.anki_model_service import (
    AnkiModelService,
    FieldOperation,
    FieldOperationKind,
    plan_field_convergence,
)
from notes_to_anki.exceptions import AnkiConnectError, ConfigurationError
from notes_to_anki.models import EnsureOutcome
from tests.fixtures import FakeAnkiConnect

MODEL = "obsidian-articles"
FIELDS = ["citation key", "title", "authors", "summary"]


def _apply(current: list[str], operations: list[FieldOperation]) -> list[str]:
    fields = list(current)
    for op in operations:
        if op.kind is FieldOperationKind.REMOVE:
            fields.remove(op.field)
        elif op.kind is FieldOperationKind.ADD:
            fields.insert(op.index, op.field)
        else:
            fields.remove(op.field)
            fields.insert(op.index, op.field)
    return fields


class TestPlanFieldConvergence:
    """Test the pure edit planner."""

    def test_no_operations_when_equal(self) -> None:
        assert plan_field_convergence(FIELDS, FIELDS) == []

    def test_removals_run_from_the_end(self) -> None:
        operations = plan_field_convergence(["a", "x", "b", "y"], ["a", "b"])
        assert operations == [
            FieldOperation(FieldOperationKind.REMOVE, "y"),
            FieldOperation(FieldOperationKind.REMOVE, "x"),
        ]

    def test_add_at_target_index(self) -> None:
        operations = plan_field_convergence(["a", "c"], ["a", "b", "c"])
        assert operations == [FieldOperation(FieldOperationKind.ADD, "b", 1)]

    def test_misplaced_field_is_repositioned(self) -> None:
        operations = plan_field_convergence(["b", "a"], ["a", "b"])
        assert operations == [FieldOperation(FieldOperationKind.REPOSITION, "a", 0)]

    def test_mixed_edit(self) -> None:
        current = ["old", "summary", "title", "citation key"]
        operations = plan_field_convergence(current, FIELDS)
        assert operations[0] == FieldOperation(FieldOperationKind.REMOVE, "old")
        assert _apply(current, operations) == FIELDS

    @pytest.mark.parametrize("current", list(permutations(["a", "b", "c", "d"])))
    def test_every_permutation_converges(self, current) -> None:
        desired = ["a", "b", "c", "d"]
        assert _apply(list(current), plan_field_convergence(list(current), desired)) == desired


class TestEnsureModel:
    """Test ensure_model against the in-memory AnkiConnect."""

    @pytest.mark.asyncio
    async def test_creates_missing_model(self) -> None:
        fake = FakeAnkiConnect()
        service = AnkiModelService(fake)

        outcome = await service.ensure_model(MODEL, FIELDS, allow_create=True)

        assert outcome is EnsureOutcome.CREATED
        assert fake.models[MODEL] == FIELDS
        _, params = fake.calls[-1]
        assert params["inOrderFields"] == FIELDS
        assert params["isCloze"] is False
        assert params["cardTemplates"][0]["Front"] == "{{citation key}}"

    @pytest.mark.asyncio
    async def test_missing_model_skipped_without_create(self) -> None:
        fake = FakeAnkiConnect()
        service = AnkiModelService(fake)

        outcome = await service.ensure_model(MODEL, FIELDS, allow_create=False)

        assert outcome is EnsureOutcome.SKIPPED
        assert MODEL not in fake.models
        assert fake.actions == ["modelNames"]

    @pytest.mark.asyncio
    async def test_unchanged_model_issues_no_edits(self) -> None:
        fake = FakeAnkiConnect(models={MODEL: FIELDS})
        service = AnkiModelService(fake)

        outcome = await service.ensure_model(MODEL, FIELDS, allow_create=True)

        assert outcome is EnsureOutcome.UNCHANGED
        assert fake.actions == ["modelNames", "modelFieldNames"]

    @pytest.mark.asyncio
    async def test_updates_then_unchanged(self) -> None:
        fake = FakeAnkiConnect(models={MODEL: ["summary", "stale", "citation key"]})
        service = AnkiModelService(fake)

        first = await service.ensure_model(MODEL, FIELDS, allow_create=True)
        second = await service.ensure_model(MODEL, FIELDS, allow_create=True)

        assert first is EnsureOutcome.UPDATED
        assert second is EnsureOutcome.UNCHANGED
        assert fake.models[MODEL] == FIELDS

    @pytest.mark.asyncio
    async def test_created_then_unchanged(self) -> None:
        fake = FakeAnkiConnect()
        service = AnkiModelService(fake)

        assert await service.ensure_model(MODEL, FIELDS, True) is EnsureOutcome.CREATED
        assert await service.ensure_model(MODEL, FIELDS, True) is EnsureOutcome.UNCHANGED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("current", list(permutations(FIELDS)))
    async def test_remote_order_matches_desired(self, current) -> None:
        fake = FakeAnkiConnect(models={MODEL: list(current)})
        service = AnkiModelService(fake)

        await service.ensure_model(MODEL, FIELDS, allow_create=True)

        assert fake.models[MODEL] == FIELDS
        assert "modelFieldAdd" not in fake.actions
        assert "modelFieldRemove" not in fake.actions

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name,fields",
        [
            ("", FIELDS),
            ("  ", FIELDS),
            (MODEL, []),
            (MODEL, ["a", ""]),
            (MODEL, ["a", "a"]),
            (MODEL, ["Title", "title"]),
        ],
    )
    async def test_invalid_request_makes_no_calls(self, name, fields) -> None:
        fake = FakeAnkiConnect()
        service = AnkiModelService(fake)

        with pytest.raises(ConfigurationError):
            await service.ensure_model(name, fields, allow_create=True)
        assert fake.calls == []

    @pytest.mark.asyncio
    async def test_failure_midway_can_be_resumed(self) -> None:
        fake = FakeAnkiConnect(models={MODEL: ["x", "title", "citation key"]})
        fake.fail("modelFieldAdd", "collection is locked")
        service = AnkiModelService(fake)

        with pytest.raises(AnkiConnectError):
            await service.ensure_model(MODEL, FIELDS, allow_create=True)
        assert fake.models[MODEL] == ["citation key", "title"]

        fake.clear_failures()
        outcome = await service.ensure_model(MODEL, FIELDS, allow_create=True)

        assert outcome is EnsureOutcome.UPDATED
        assert fake.models[MODEL] == FIELDS
