"""Service for Anki model (note type) operations.

The interesting part is ``ensure_model``: it converges the remote field list
of a note type to the desired one with remove/add/reposition edits, keeping
the note type (and so its card templates and existing notes) in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import cast

from notes_to_anki.domain.interfaces.anki_http_client import IAnkiHttpClient
from notes_to_anki.error_codes import ErrorCode
from notes_to_anki.exceptions import ConfigurationError
from notes_to_anki.models import EnsureOutcome
from notes_to_anki.utils.logging import get_logger

logger = get_logger(__name__)


class FieldOperationKind(str, Enum):
    REMOVE = "remove"
    ADD = "add"
    REPOSITION = "reposition"


@dataclass(frozen=True)
class FieldOperation:
    """One structural edit of a note type's field list."""

    kind: FieldOperationKind
    field: str
    index: int | None = None


def plan_field_convergence(
    current: list[str], desired: list[str]
) -> list[FieldOperation]:
    """Compute the edits that turn ``current`` into ``desired``.

    Removals come first, walking the current list from the end so earlier
    indices stay valid. Then each desired field is placed at its target
    index, in order, either by adding it or by moving it. A local mirror of
    the remote list is updated after every edit so later indices match what
    Anki will hold at that point.
    """
    desired_set = set(desired)
    mirror = list(current)
    operations: list[FieldOperation] = []

    for position in range(len(mirror) - 1, -1, -1):
        name = mirror[position]
        if name not in desired_set:
            operations.append(FieldOperation(FieldOperationKind.REMOVE, name))
            del mirror[position]

    for target, name in enumerate(desired):
        if name not in mirror:
            operations.append(FieldOperation(FieldOperationKind.ADD, name, target))
            mirror.insert(target, name)
            continue

        position = mirror.index(name)
        if position != target:
            operations.append(
                FieldOperation(FieldOperationKind.REPOSITION, name, target)
            )
            mirror.pop(position)
            mirror.insert(target, name)

    return operations


def validate_model_request(model_name: str, desired_fields: list[str]) -> None:
    """Reject requests that cannot describe a note type."""
    if not model_name or not model_name.strip():
        msg = "Note type name must not be blank"
        raise ConfigurationError(
            msg,
            suggestion="Set note_type_name in the configuration.",
            error_code=ErrorCode.CFG_MISSING_KEY.value,
        )
    if not desired_fields:
        msg = f"Note type '{model_name}' needs at least one field"
        raise ConfigurationError(
            msg,
            suggestion="Configure guid_property, property_names or callouts.",
            error_code=ErrorCode.CFG_MISSING_KEY.value,
        )
    if any(not name or not name.strip() for name in desired_fields):
        msg = f"Note type '{model_name}' field list contains a blank name"
        raise ConfigurationError(msg, context={"fields": desired_fields})
    if len({name.casefold() for name in desired_fields}) != len(desired_fields):
        msg = f"Note type '{model_name}' field list contains duplicates"
        raise ConfigurationError(
            msg,
            error_code=ErrorCode.CFG_FIELD_COLLISION.value,
            context={"fields": desired_fields},
        )


class AnkiModelService:
    """Service for Anki model (note type) operations.

    Field lists are never cached: reconciliation always starts from what
    Anki reports at the start of the call.
    """

    def __init__(self, http_client: IAnkiHttpClient):
        """
        Initialize model service.

        Args:
            http_client: HTTP client for AnkiConnect communication
        """
        self._http_client = http_client

    async def get_model_names(self) -> list[str]:
        """Get list of available note model names."""
        return cast("list[str]", await self._http_client.invoke("modelNames"))

    async def get_model_field_names(self, model_name: str) -> list[str]:
        """Get the ordered field names of a model."""
        return cast(
            "list[str]",
            await self._http_client.invoke(
                "modelFieldNames", {"modelName": model_name}
            ),
        )

    async def create_model(self, model_name: str, fields: list[str]) -> None:
        """Create a note type with one card showing the first field on the front."""
        await self._http_client.invoke(
            "createModel",
            {
                "modelName": model_name,
                "inOrderFields": fields,
                "isCloze": False,
                "cardTemplates": [
                    {
                        "Name": "Card 1",
                        "Front": f"{{{{{fields[0]}}}}}",
                        "Back": "",
                    }
                ],
            },
        )

    async def apply_field_operation(
        self, model_name: str, operation: FieldOperation
    ) -> None:
        """Send one field edit to AnkiConnect."""
        if operation.kind is FieldOperationKind.REMOVE:
            await self._http_client.invoke(
                "modelFieldRemove",
                {"modelName": model_name, "fieldName": operation.field},
            )
        elif operation.kind is FieldOperationKind.ADD:
            await self._http_client.invoke(
                "modelFieldAdd",
                {
                    "modelName": model_name,
                    "fieldName": operation.field,
                    "index": operation.index,
                },
            )
        else:
            await self._http_client.invoke(
                "modelFieldReposition",
                {
                    "modelName": model_name,
                    "fieldName": operation.field,
                    "index": operation.index,
                },
            )
        logger.debug(
            f"model_field_{operation.kind.value}",
            model=model_name,
            field=operation.field,
            index=operation.index,
        )

    async def ensure_model(
        self, model_name: str, desired_fields: list[str], allow_create: bool
    ) -> EnsureOutcome:
        """Make the note type exist with exactly ``desired_fields``, in order.

        Args:
            model_name: Note type name
            desired_fields: Ordered field list, identity field first
            allow_create: Whether a missing note type may be created

        Returns:
            CREATED, UPDATED, UNCHANGED, or SKIPPED when the note type is
            missing and creation is not allowed

        Raises:
            ConfigurationError: Invalid name or field list (no request is made)
            AnkiConnectError: A request failed; the note type may be partially
                converged and a re-run will finish the job
        """
        validate_model_request(model_name, desired_fields)

        if model_name not in await self.get_model_names():
            if not allow_create:
                logger.warning(
                    "model_not_found",
                    model=model_name,
                    suggestion=(
                        "Create the note type manually, change the note type name, "
                        "or enable create_note_type_if_not_found."
                    ),
                )
                return EnsureOutcome.SKIPPED

            await self.create_model(model_name, desired_fields)
            logger.info("model_created", model=model_name, fields=desired_fields)
            return EnsureOutcome.CREATED

        current = await self.get_model_field_names(model_name)
        if current == desired_fields:
            logger.debug("model_unchanged", model=model_name)
            return EnsureOutcome.UNCHANGED

        operations = plan_field_convergence(current, desired_fields)
        for operation in operations:
            await self.apply_field_operation(model_name, operation)

        logger.info(
            "model_updated",
            model=model_name,
            previous_fields=current,
            fields=desired_fields,
            operations=len(operations),
        )
        return EnsureOutcome.UPDATED
