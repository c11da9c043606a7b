"""Callout extraction from Obsidian note text.

A callout is a block quote whose first line names it::

    > [!summary] Optional title
    > First line of the body
    > Second line

``extract_callout`` slices the body out of the raw text. What happens to the
body afterwards (kept as plain text or rendered to HTML) is a separate,
swappable renderer.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from functools import lru_cache

import mistune
import nh3

from notes_to_anki.exceptions import ConfigurationError

CalloutRenderer = Callable[[str], str]

# Only \n and \r\n end a line; form feeds and other separators stay in the body
_LINE_BREAK = re.compile(r"\r?\n")

# Allowed HTML tags for Anki fields (used by nh3 sanitizer)
ALLOWED_TAGS = {
    "p",
    "br",
    "strong",
    "b",
    "em",
    "i",
    "del",
    "code",
    "pre",
    "ul",
    "ol",
    "li",
    "table",
    "thead",
    "tbody",
    "tr",
    "th",
    "td",
    "blockquote",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "a",
    "img",
    "hr",
}

# "rel" is excluded from "a" because nh3.clean() sets it via link_rel
ALLOWED_ATTRIBUTES = {
    "a": {"href", "title"},
    "img": {"src", "alt", "title"},
    "td": {"align"},
    "th": {"align"},
}


@lru_cache(maxsize=64)
def _opener_pattern(label: str) -> re.Pattern[str]:
    return re.compile(
        rf"^>[ \t]*\[!{re.escape(label)}\][^\r\n]*\r?\n",
        re.IGNORECASE | re.MULTILINE,
    )


def _strip_quote_marker(line: str) -> str:
    line = line[1:]
    if line.startswith(" "):
        line = line[1:]
    return line


def extract_callout(
    text: str, label: str, renderer: CalloutRenderer | None = None
) -> str | None:
    """Return the body of the first ``[!label]`` callout in ``text``.

    Args:
        text: Raw note text
        label: Callout label, matched case-insensitively
        renderer: Optional post-processing of the extracted body

    Returns:
        The de-quoted body joined with newlines and stripped, ``""`` for a
        callout without body lines, or ``None`` when no such callout exists
    """
    match = _opener_pattern(label).search(text)
    if match is None:
        return None

    body: list[str] = []
    for line in _LINE_BREAK.split(text[match.end() :]):
        if not line.startswith(">"):
            break
        body.append(_strip_quote_marker(line))

    content = "\n".join(body).strip()
    if renderer is not None:
        content = renderer(content)
    return content


class PlainTextRenderer:
    """Keep the callout body as plain text."""

    def __call__(self, content: str) -> str:
        return content


class HtmlRenderer:
    """Render the callout body from Markdown to sanitized HTML."""

    def __init__(self) -> None:
        self._markdown = mistune.create_markdown(
            plugins=["strikethrough", "table"],
        )

    def __call__(self, content: str) -> str:
        if not content:
            return ""
        html = str(self._markdown(content))
        return nh3.clean(
            html, tags=ALLOWED_TAGS, attributes=ALLOWED_ATTRIBUTES
        ).strip()


_RENDERERS: dict[str, Callable[[], CalloutRenderer]] = {
    "text": PlainTextRenderer,
    "html": HtmlRenderer,
}


def get_renderer(name: str) -> CalloutRenderer:
    """Look up a callout renderer by its configuration name."""
    try:
        return _RENDERERS[name]()
    except KeyError:
        msg = f"Unknown callout format: {name}"
        raise ConfigurationError(
            msg, suggestion=f"Use one of: {', '.join(sorted(_RENDERERS))}"
        ) from None
