"""Obsidian note access: loading, callouts and frontmatter writes."""

from .callouts import HtmlRenderer, PlainTextRenderer, extract_callout, get_renderer
from .frontmatter_writer import update_frontmatter, write_identity
from .vault import VaultNote, discover_notes, load_note, load_vault, parse_note

__all__ = [
    "HtmlRenderer",
    "PlainTextRenderer",
    "VaultNote",
    "discover_notes",
    "extract_callout",
    "get_renderer",
    "load_note",
    "load_vault",
    "parse_note",
    "update_frontmatter",
    "write_identity",
]
