"""Tests for loading notes from the vault."""

from pathlib import Path

import pytest

from notes_to_anki.exceptions import ParserError
from notes_to_anki.obsidian.vault import (
    discover_notes,
    extract_inline_tags,
    load_note,
    load_vault,
    normalize_frontmatter_tags,
    parse_note,
)


class TestInlineTags:
    """Test #tag detection in note bodies."""

    def test_finds_tags(self) -> None:
        body = "Intro #alpha and #Beta/child.\n#gamma-1 at line start"
        assert extract_inline_tags(body) == ["alpha", "Beta/child", "gamma-1"]

    def test_headings_are_not_tags(self) -> None:
        assert extract_inline_tags("# Heading\n## Sub\n") == []

    def test_numeric_tags_are_ignored(self) -> None:
        assert extract_inline_tags("issue #123 and #2024a") == ["2024a"]

    def test_code_is_ignored(self) -> None:
        body = "text `#inline` here\n```\n#fenced\n```\n#real"
        assert extract_inline_tags(body) == ["real"]

    def test_anchor_inside_word_is_not_tag(self) -> None:
        assert extract_inline_tags("see page#section") == []

    def test_duplicates_removed(self) -> None:
        assert extract_inline_tags("#a #b #a") == ["a", "b"]


class TestFrontmatterTags:
    """Test normalization of the tags property."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, []),
            ("papers", ["papers"]),
            ("#papers, ml", ["papers", "ml"]),
            ("a b", ["a", "b"]),
            (["#One", "two", None, ""], ["One", "two"]),
            (42, ["42"]),
        ],
    )
    def test_normalize(self, value, expected) -> None:
        assert normalize_frontmatter_tags(value) == expected


class TestVaultNote:
    """Test VaultNote parsing and derived properties."""

    def test_parse_note(self) -> None:
        note = parse_note(
            "---\ntitle: T\ntags: [Papers]\n---\nBody #Reading #papers\n",
            Path("n.md"),
        )
        assert note.frontmatter == {"title": "T", "tags": ["Papers"]}
        assert note.inline_tags == ["Reading", "papers"]
        assert note.frontmatter_tags == ["Papers"]
        assert note.resolved_tags == ["reading", "papers"]
        assert note.name == "n.md"

    def test_note_without_frontmatter(self) -> None:
        note = parse_note("just text\n", Path("plain.md"))
        assert note.frontmatter == {}
        assert note.resolved_tags == []

    def test_identity(self) -> None:
        note = parse_note(
            "---\ncitation key: abc\nempty: '  '\nnumber: 7\n---\n", Path("n.md")
        )
        assert note.identity("citation key") == "abc"
        assert note.identity("number") == 7
        assert note.identity("empty") is None
        assert note.identity("missing") is None

    def test_malformed_frontmatter(self) -> None:
        with pytest.raises(ParserError) as exc_info:
            parse_note("---\ntitle: [unclosed\n---\nbody\n", Path("bad.md"))
        assert exc_info.value.context["file"] == "bad.md"

    def test_load_missing_file(self, tmp_path) -> None:
        with pytest.raises(ParserError):
            load_note(tmp_path / "missing.md")


class TestDiscovery:
    """Test note discovery in a vault directory."""

    def test_discover_skips_hidden_directories(self, vault_dir) -> None:
        (vault_dir / "b.md").write_text("b")
        (vault_dir / "sub").mkdir()
        (vault_dir / "sub" / "a.md").write_text("a")
        (vault_dir / ".obsidian").mkdir()
        (vault_dir / ".obsidian" / "config.md").write_text("x")
        (vault_dir / "image.png").write_bytes(b"")

        found = discover_notes(vault_dir)

        assert found == sorted([vault_dir / "b.md", vault_dir / "sub" / "a.md"])

    def test_missing_vault(self, tmp_path) -> None:
        assert discover_notes(tmp_path / "nope") == []

    def test_load_vault_skips_broken_notes(self, vault_dir) -> None:
        (vault_dir / "good.md").write_text("---\ntitle: ok\n---\n")
        (vault_dir / "bad.md").write_text("---\ntitle: [unclosed\n---\n")

        notes = load_vault(vault_dir)

        assert [note.name for note in notes] == ["good.md"]
