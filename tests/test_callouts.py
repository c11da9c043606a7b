"""Tests for callout extraction and rendering."""

import pytest

from notes_to_anki.exceptions import ConfigurationError
from notes_to_anki.obsidian.callouts import (
    HtmlRenderer,
    PlainTextRenderer,
    extract_callout,
    get_renderer,
)


@pytest.mark.parametrize(
    "label,text",
    [
        ("L", "> [!L]\n> line1\n> line2\n"),
        ("summary", "> [!summary]\n> line1\n> line2\n"),
        ("Key Points", "intro\n\n> [!Key Points] title\n> line1\n> line2\n\nafter\n"),
        ("a.b*c", "> [!a.b*c]\n> line1\n> line2"),
    ],
)
def test_extracts_quoted_lines(label: str, text: str) -> None:
    assert extract_callout(text, label) == "line1\nline2"


def test_returns_none_without_matching_opener() -> None:
    text = "> [!note]\n> something\n\n> [!warning]\n> else\n"
    assert extract_callout(text, "summary") is None


def test_label_is_not_a_regex() -> None:
    text = "> [!abc]\n> body\n"
    assert extract_callout(text, "a.c") is None


def test_matching_is_case_insensitive() -> None:
    text = "> [!SUMMARY] Title\n> body\n"
    assert extract_callout(text, "summary") == "body"


def test_opener_without_body_yields_empty_string() -> None:
    text = "> [!summary]\nplain paragraph\n"
    assert extract_callout(text, "summary") == ""


def test_opener_requires_line_break() -> None:
    assert extract_callout("> [!summary]", "summary") is None


def test_only_first_occurrence_is_used() -> None:
    text = "> [!summary]\n> first\n\n> [!summary]\n> second\n"
    assert extract_callout(text, "summary") == "first"


def test_stops_at_first_unquoted_line() -> None:
    text = "> [!summary]\n> kept\nnot kept\n> not kept either\n"
    assert extract_callout(text, "summary") == "kept"


def test_strips_one_marker_and_one_space() -> None:
    text = "> [!summary]\n>   indented\n>no space\n> > nested\n"
    assert extract_callout(text, "summary") == "indented\nno space\n> nested"


def test_handles_windows_line_endings() -> None:
    text = "> [!summary]\r\n> line1\r\n> line2\r\n"
    assert extract_callout(text, "summary") == "line1\nline2"


@pytest.mark.parametrize("separator", ["\x0b", "\x0c", "\x1c", "\x1d", "\x1e", "\x85"])
def test_unicode_line_separators_stay_in_body(separator: str) -> None:
    text = f"> [!summary]\n> first{separator}part\n> second\n"
    assert extract_callout(text, "summary") == f"first{separator}part\nsecond"


def test_trims_surrounding_blank_lines() -> None:
    text = "> [!summary]\n>\n> body\n>\n"
    assert extract_callout(text, "summary") == "body"


def test_renderer_is_applied_to_result() -> None:
    text = "> [!summary]\n> body\n"
    assert extract_callout(text, "summary", renderer=str.upper) == "BODY"


def test_renderer_not_applied_when_absent() -> None:
    calls = []

    def renderer(content: str) -> str:
        calls.append(content)
        return content

    assert extract_callout("no callouts", "summary", renderer=renderer) is None
    assert calls == []


def test_plain_text_renderer_keeps_text() -> None:
    assert PlainTextRenderer()("**bold**\nnext") == "**bold**\nnext"


def test_html_renderer_renders_markdown() -> None:
    html = HtmlRenderer()("**bold** and *em*\n\n- item")
    assert "<strong>bold</strong>" in html
    assert "<em>em</em>" in html
    assert "<li>item</li>" in html


def test_html_renderer_sanitizes_output() -> None:
    html = HtmlRenderer()("hello <script>alert(1)</script>")
    assert "<script>" not in html
    assert "hello" in html


def test_html_renderer_empty_body() -> None:
    assert HtmlRenderer()("") == ""


def test_get_renderer() -> None:
    assert isinstance(get_renderer("text"), PlainTextRenderer)
    assert isinstance(get_renderer("html"), HtmlRenderer)
    with pytest.raises(ConfigurationError):
        get_renderer("pdf")
