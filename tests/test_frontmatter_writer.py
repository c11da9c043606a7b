"""Tests for writing identity tokens back into notes."""

import pytest

from notes_to_anki.exceptions import ParserError
from notes_to_anki.obsidian.frontmatter_writer import update_frontmatter, write_identity
from notes_to_anki.obsidian.vault import load_note


def test_write_identity_preserves_other_keys_and_body(tmp_path) -> None:
    path = tmp_path / "note.md"
    path.write_text(
        "---\n"
        "title: Paper X  # keep me\n"
        "authors:\n"
        "  - A\n"
        "  - B\n"
        "---\n"
        "\n"
        "Body line\n",
        encoding="utf-8",
    )

    write_identity(path, "citation key", "tok123")

    content = path.read_text(encoding="utf-8")
    assert content.startswith("---\ntitle: Paper X")
    assert "# keep me" in content
    assert content.endswith("---\n\nBody line\n")
    note = load_note(path)
    assert note.frontmatter["citation key"] == "tok123"
    assert note.frontmatter["authors"] == ["A", "B"]
    assert list(note.frontmatter) == ["title", "authors", "citation key"]


def test_write_identity_creates_frontmatter(tmp_path) -> None:
    path = tmp_path / "plain.md"
    path.write_text("Just a body\n", encoding="utf-8")

    write_identity(path, "citation key", "tok")

    assert path.read_text(encoding="utf-8") == "---\ncitation key: tok\n---\nJust a body\n"


def test_update_overwrites_existing_value(tmp_path) -> None:
    path = tmp_path / "note.md"
    path.write_text("---\nid: old\nother: 1\n---\nbody\n", encoding="utf-8")

    update_frontmatter(path, {"id": "new"})

    assert load_note(path).frontmatter == {"id": "new", "other": 1}


def test_body_with_horizontal_rule_untouched(tmp_path) -> None:
    path = tmp_path / "note.md"
    path.write_text("---\nid: a\n---\nabove\n---\nbelow\n", encoding="utf-8")

    update_frontmatter(path, {"id": "b"})

    assert path.read_text(encoding="utf-8") == "---\nid: b\n---\nabove\n---\nbelow\n"


def test_malformed_frontmatter_raises(tmp_path) -> None:
    path = tmp_path / "bad.md"
    original = "---\nid: [unclosed\n---\nbody\n"
    path.write_text(original, encoding="utf-8")

    with pytest.raises(ParserError):
        update_frontmatter(path, {"id": "x"})
    assert path.read_text(encoding="utf-8") == original


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(ParserError):
        write_identity(tmp_path / "missing.md", "id", "x")
