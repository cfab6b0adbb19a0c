"""Plain-text flattening for inline markdown.

Inline emphasis, code spans, and links are reduced to their text with a fixed
sequence of substitutions; nested list and blockquote content is flattened
into single strings. Heading marker and rule helpers live here as well.
"""

from __future__ import annotations

import re

from .tokens import Blockquote, Code, Heading, ListItem, ListToken, Paragraph, Token

HEADING_RULE_MAX_WIDTH = 80

_STRIP_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\*\*(.+?)\*\*"), r"\1"),
    (re.compile(r"\*(.+?)\*"), r"\1"),
    (re.compile(r"__(.+?)__"), r"\1"),
    (re.compile(r"_(.+?)_"), r"\1"),
    (re.compile(r"`(.+?)`"), r"\1"),
    (re.compile(r"\[(.+?)\]\(.+?\)"), r"\1"),
)


def strip_markup(text: str) -> str:
    """Remove bold, italic, inline-code, and link markup, keeping the text."""
    for pattern, replacement in _STRIP_RULES:
        text = pattern.sub(replacement, text)
    return text


def _token_text(token: Token) -> str:
    if isinstance(token, (Paragraph, Heading, Code)):
        return token.text
    if isinstance(token, ListToken):
        return " ".join(list_item_raw_text(item) for item in token.items)
    if isinstance(token, Blockquote):
        return " ".join(_token_text(child) for child in token.children)
    return ""


def list_item_raw_text(item: ListItem) -> str:
    """Join the text of an item's nested blocks with spaces, dropping structure."""
    if not item.children:
        return item.text
    parts = (_token_text(child).strip() for child in item.children)
    return " ".join(part for part in parts if part)


def list_item_text(item: ListItem) -> str:
    return strip_markup(list_item_raw_text(item).strip())


def blockquote_text(children: tuple[Token, ...]) -> str:
    """Join paragraph children with spaces; other child kinds are skipped."""
    text = "".join(child.text + " " for child in children if isinstance(child, Paragraph))
    return strip_markup(text.strip())


def heading_marker(depth: int) -> str:
    return "#" * depth


def heading_rule_char(depth: int) -> str:
    """Heavy rule for depth-1 headings, light rule otherwise."""
    return "━" if depth == 1 else "─"


def heading_rule_width(length: int, max_width: int = HEADING_RULE_MAX_WIDTH) -> int:
    return max(0, min(length, max_width))


def list_bullet(ordered: bool, index: int) -> str:
    return f"{index + 1}. " if ordered else "• "
