"""Sync Obsidian notes (frontmatter and callouts) into Anki through AnkiConnect."""

__version__ = "0.1.0"
