"""Loading Obsidian notes from a vault on disk."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import frontmatter as frontmatter_lib
import yaml

from notes_to_anki.exceptions import ParserError
from notes_to_anki.utils.logging import get_logger

logger = get_logger(__name__)

_FENCED_CODE_RE = re.compile(r"^(```|~~~).*?^\1[^\n]*$", re.MULTILINE | re.DOTALL)
_INLINE_CODE_RE = re.compile(r"`[^`\n]*`")
_INLINE_TAG_RE = re.compile(r"(?:(?<=\s)|^)#([\w/-]+)", re.MULTILINE)
_TAG_SPLIT_RE = re.compile(r"[,\s]+")


def _strip_marker(tag: str) -> str:
    return tag.strip().lstrip("#")


def extract_inline_tags(body: str) -> list[str]:
    """Find ``#tag`` occurrences in note body text, marker stripped.

    Code blocks and inline code are ignored, as are purely numeric tags
    (``#123`` is not a tag in Obsidian).
    """
    text = _FENCED_CODE_RE.sub("", body)
    text = _INLINE_CODE_RE.sub("", text)
    tags: list[str] = []
    for match in _INLINE_TAG_RE.finditer(text):
        tag = match.group(1).rstrip("/")
        if tag and not tag.isdigit() and tag not in tags:
            tags.append(tag)
    return tags


def normalize_frontmatter_tags(value: Any) -> list[str]:
    """Turn the ``tags`` frontmatter value into a list of tag strings."""
    if value is None:
        return []
    if isinstance(value, str):
        items: list[Any] = _TAG_SPLIT_RE.split(value)
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        items = [value]
    return [
        _strip_marker(str(item))
        for item in items
        if item is not None and _strip_marker(str(item))
    ]


@dataclass(frozen=True)
class VaultNote:
    """A note as read from disk: raw text, parsed frontmatter and inline tags."""

    path: Path
    content: str
    frontmatter: dict[str, Any] = field(default_factory=dict)
    inline_tags: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def frontmatter_tags(self) -> list[str]:
        """Tags from frontmatter in their original form, without '#'."""
        return normalize_frontmatter_tags(self.frontmatter.get("tags"))

    @property
    def resolved_tags(self) -> list[str]:
        """Lowercase union of inline and frontmatter tags, first occurrence order."""
        resolved: list[str] = []
        for tag in [*self.inline_tags, *self.frontmatter_tags]:
            lowered = tag.lower()
            if lowered not in resolved:
                resolved.append(lowered)
        return resolved

    def identity(self, key: str) -> Any | None:
        """Raw value of the identity property, or None when absent or blank."""
        value = self.frontmatter.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return value


def parse_note(content: str, path: Path) -> VaultNote:
    """Parse note text into a VaultNote.

    Raises:
        ParserError: If the YAML frontmatter is malformed
    """
    try:
        post = frontmatter_lib.loads(content)
    except yaml.YAMLError as e:
        msg = f"Malformed frontmatter in {path}"
        raise ParserError(
            msg,
            suggestion="Check YAML syntax (indentation, colons, quotes).",
            context={"file": str(path), "error": str(e)},
        ) from e

    metadata = dict(post.metadata)
    return VaultNote(
        path=path,
        content=content,
        frontmatter=metadata,
        inline_tags=extract_inline_tags(post.content),
    )


def load_note(path: Path) -> VaultNote:
    """Read and parse a note file.

    Raises:
        ParserError: If the file cannot be read or its frontmatter is malformed
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read note {path}: {e}"
        raise ParserError(msg, context={"file": str(path)}) from e
    return parse_note(content, path)


def discover_notes(vault_path: Path) -> list[Path]:
    """List Markdown files in the vault, skipping hidden directories.

    Args:
        vault_path: Root vault path

    Returns:
        Sorted list of note paths
    """
    if not vault_path.is_dir():
        logger.warning("vault_not_found", path=str(vault_path))
        return []

    notes = sorted(
        path
        for path in vault_path.rglob("*.md")
        if path.is_file()
        and not any(
            part.startswith(".") for part in path.relative_to(vault_path).parts
        )
    )
    logger.debug("discovered_notes", count=len(notes), path=str(vault_path))
    return notes


def load_vault(vault_path: Path) -> list[VaultNote]:
    """Load every readable note of the vault.

    Notes that cannot be read or parsed are logged and left out.
    """
    notes: list[VaultNote] = []
    for path in discover_notes(vault_path):
        try:
            notes.append(load_note(path))
        except ParserError as e:
            logger.warning("note_load_failed", file=str(path), error=e.message)
    return notes
