"""Projection of a note onto the ordered Anki field mapping."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from notes_to_anki.config_settings import SyncConfig
from notes_to_anki.exceptions import IdentityError
from notes_to_anki.models import FieldMapping, ProjectedFields
from notes_to_anki.obsidian.callouts import CalloutRenderer, extract_callout
from notes_to_anki.obsidian.vault import VaultNote
from notes_to_anki.utils.logging import get_logger

logger = get_logger(__name__)


def format_property_value(value: Any) -> str:
    """Render a frontmatter value as an Anki field string.

    Sequences are joined with ", "; missing values become "".
    """
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(format_property_value(item) for item in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def resolve_identity(note: VaultNote, config: SyncConfig) -> str:
    """Return the note's identity value.

    Raises:
        IdentityError: If the note has no value under ``config.guid_property``,
            or the value is a list or mapping
    """
    value = note.identity(config.guid_property)
    if value is None:
        msg = f'"{config.guid_property}" not found in frontmatter of {note.name}'
        raise IdentityError(
            msg,
            suggestion=f'Add a "{config.guid_property}" property to the note.',
            context={"file": str(note.path), "property": config.guid_property},
        )
    if isinstance(value, (list, tuple, dict)):
        msg = (
            f'"{config.guid_property}" in {note.name} must be a single value, '
            f"got a {type(value).__name__}"
        )
        raise IdentityError(
            msg,
            suggestion=f'Give "{config.guid_property}" one scalar value.',
            context={"file": str(note.path), "property": config.guid_property},
        )
    return str(value)


def project_fields(
    note: VaultNote,
    config: SyncConfig,
    renderer: CalloutRenderer | None = None,
) -> ProjectedFields:
    """Build the ordered field mapping for a note.

    Order is identity field, configured properties, configured callouts.
    Callouts missing from the note project to "" and are reported in
    ``missing_callouts``.

    Raises:
        IdentityError: If the note has no identity value
    """
    fields: FieldMapping = {config.guid_property: resolve_identity(note, config)}

    for name in config.property_names:
        fields[name] = format_property_value(note.frontmatter.get(name))

    missing: list[str] = []
    for label in config.callouts:
        content = extract_callout(note.content, label, renderer)
        if content is None:
            missing.append(label)
            logger.warning("callout_not_found", file=str(note.path), callout=label)
            content = ""
        fields[label] = content

    return ProjectedFields(fields=fields, missing_callouts=missing)
