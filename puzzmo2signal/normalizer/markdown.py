"""Markdown to plain text conversion for outbound chat messages."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token

logger = logging.getLogger(__name__)

_md = MarkdownIt("commonmark").enable(["strikethrough", "table"])

_LINE_BREAKS = ("softbreak", "hardbreak")
_HTML_TAG = re.compile(r"<[^>]*>")


class NormalizationError(Exception):
    """Raised when Markdown cannot be converted to plain text."""


def to_plain_text(markdown: str) -> str:
    """Strip Markdown syntax, keeping only the human-readable text.

    Emphasis markers are dropped, links become their label and images
    their alt text. HTML tags are removed and their text kept. Block
    elements are separated by newlines.
    """
    try:
        tokens = _md.parse(markdown)
    except Exception as exc:
        raise NormalizationError(f"failed to parse markdown: {exc}") from exc

    blocks: list[str] = []
    for token in tokens:
        if token.type == "inline":
            blocks.append(_inline_text(token.children or []))
        elif token.type in ("fence", "code_block"):
            blocks.append(token.content.rstrip("\n"))
        elif token.type == "html_block":
            blocks.append(_html_text(token.content))
    return "\n".join(block for block in blocks if block).strip()


def _html_text(html: str) -> str:
    lines = (line.strip() for line in _HTML_TAG.sub("", html).splitlines())
    return "\n".join(line for line in lines if line)


def _inline_text(children: Sequence[Token]) -> str:
    parts: list[str] = []
    for child in children:
        if child.type in ("text", "code_inline"):
            parts.append(child.content)
        elif child.type in _LINE_BREAKS:
            parts.append("\n")
        elif child.type == "image":
            parts.append(_inline_text(child.children or []))
    return "".join(parts)
