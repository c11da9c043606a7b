"""Write updates to Obsidian note frontmatter while preserving structure."""

import re
from io import StringIO
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

from notes_to_anki.exceptions import ParserError
from notes_to_anki.utils.logging import get_logger

logger = get_logger(__name__)

_FRONTMATTER_RE = re.compile(
    r"^---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|$)", re.DOTALL
)


def update_frontmatter(file_path: Path, updates: dict[str, Any]) -> None:
    """
    Update specific fields in a note's YAML frontmatter while preserving structure.

    Uses ruamel.yaml to keep formatting, comments and key order. A note
    without frontmatter gets a new block holding only ``updates``.

    Args:
        file_path: Path to the markdown file
        updates: Dict of field names to new values

    Raises:
        ParserError: If the file cannot be read, parsed or written
    """
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read note {file_path}: {e}"
        raise ParserError(msg, context={"file": str(file_path)}) from e

    match = _FRONTMATTER_RE.match(content)
    if match:
        frontmatter_text = match.group(1) or ""
        body = content[match.end() :]
    else:
        frontmatter_text = ""
        body = content

    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 4096
    yaml.indent(mapping=2, sequence=4, offset=2)

    try:
        data = yaml.load(StringIO(frontmatter_text)) if frontmatter_text.strip() else None
    except YAMLError as e:
        msg = f"Malformed frontmatter in {file_path}"
        raise ParserError(
            msg,
            suggestion="Fix the YAML frontmatter before writing to it.",
            context={"file": str(file_path), "error": str(e)},
        ) from e

    if data is None:
        data = CommentedMap()

    for key, value in updates.items():
        data[key] = value

    output = StringIO()
    yaml.dump(data, output)
    new_content = f"---\n{output.getvalue()}---\n{body}"

    try:
        file_path.write_text(new_content, encoding="utf-8")
    except OSError as e:
        msg = f"Cannot write note {file_path}: {e}"
        raise ParserError(msg, context={"file": str(file_path)}) from e

    logger.debug("frontmatter_updated", file=str(file_path), fields=list(updates))


def write_identity(file_path: Path, key: str, value: str) -> None:
    """Store the identity token under ``key`` in the note's frontmatter."""
    update_frontmatter(file_path, {key: value})
    logger.info("identity_written", file=str(file_path), key=key, value=value)
