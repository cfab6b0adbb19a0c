"""Block-level markdown tokens and the tokenizer adapter.

Tokens form a closed set of frozen dataclasses plus an explicit
``UnknownToken`` arm for anything the dispatcher does not render.
``tokenize`` walks the markdown-it syntax tree and converts each top-level
block node into one of these variants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import ClassVar, Union

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode


@dataclass(frozen=True)
class Heading:
    kind: ClassVar[str] = "heading"
    depth: int
    text: str


@dataclass(frozen=True)
class Paragraph:
    kind: ClassVar[str] = "paragraph"
    text: str


@dataclass(frozen=True)
class Code:
    kind: ClassVar[str] = "code"
    lang: str | None
    text: str


@dataclass(frozen=True)
class ListItem:
    """One list entry; ``children`` holds its nested block tokens."""

    text: str = ""
    children: tuple[Token, ...] = ()


@dataclass(frozen=True)
class ListToken:
    kind: ClassVar[str] = "list"
    ordered: bool
    items: tuple[ListItem, ...] = ()


@dataclass(frozen=True)
class Blockquote:
    kind: ClassVar[str] = "blockquote"
    children: tuple[Token, ...] = ()


@dataclass(frozen=True)
class Hr:
    kind: ClassVar[str] = "hr"


@dataclass(frozen=True)
class Table:
    kind: ClassVar[str] = "table"
    header: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class UnknownToken:
    """Any block the tokenizer produced that has no renderer."""

    kind: str
    raw: str = ""


Token = Union[Heading, Paragraph, Code, ListToken, Blockquote, Hr, Table, UnknownToken]


@lru_cache(maxsize=1)
def _parser() -> MarkdownIt:
    return MarkdownIt("commonmark").enable("table")


def _inline_content(node: SyntaxTreeNode) -> str:
    """Return raw inline source of a heading/paragraph/cell node."""
    for child in node.children:
        if child.type == "inline":
            return child.content
    return ""


def _table_cells(row: SyntaxTreeNode) -> tuple[str, ...]:
    return tuple(_inline_content(cell) for cell in row.children if cell.type in {"th", "td"})


def _convert_table(node: SyntaxTreeNode) -> Table:
    header: tuple[str, ...] = ()
    rows: list[tuple[str, ...]] = []
    for section in node.children:
        if section.type == "thead":
            for row in section.children:
                header = _table_cells(row)
        elif section.type == "tbody":
            rows.extend(_table_cells(row) for row in section.children)
    return Table(header=header, rows=tuple(rows))


def _convert_list(node: SyntaxTreeNode) -> ListToken:
    items = tuple(
        ListItem(children=_convert_blocks(child.children))
        for child in node.children
        if child.type == "list_item"
    )
    return ListToken(ordered=node.type == "ordered_list", items=items)


def _convert_block(node: SyntaxTreeNode) -> Token:
    kind = node.type
    if kind == "heading":
        return Heading(depth=int(node.tag[1:]), text=_inline_content(node))
    if kind == "paragraph":
        return Paragraph(text=_inline_content(node))
    if kind == "fence":
        info = node.info.strip().split(maxsplit=1)
        return Code(lang=info[0] if info else None, text=node.content.rstrip("\n"))
    if kind == "code_block":
        return Code(lang=None, text=node.content.rstrip("\n"))
    if kind in {"bullet_list", "ordered_list"}:
        return _convert_list(node)
    if kind == "blockquote":
        return Blockquote(children=_convert_blocks(node.children))
    if kind == "hr":
        return Hr()
    if kind == "table":
        return _convert_table(node)
    return UnknownToken(kind=kind, raw=node.content)


def _convert_blocks(nodes: list[SyntaxTreeNode]) -> tuple[Token, ...]:
    return tuple(_convert_block(node) for node in nodes)


def tokenize(text: str) -> list[Token]:
    """Parse markdown ``text`` into top-level block tokens."""
    parser = _parser()
    root = SyntaxTreeNode(parser.parse(text))
    return list(_convert_blocks(root.children))


__all__ = [
    "Blockquote",
    "Code",
    "Heading",
    "Hr",
    "ListItem",
    "ListToken",
    "Paragraph",
    "Table",
    "Token",
    "UnknownToken",
    "tokenize",
]
