"""Layout blocks, render trees, and the display root.

Blocks are the terminal-agnostic output of token dispatch: styled text
lines, horizontal rules, highlighted code bodies, and bordered boxes that
group them. A ``RenderTree`` is the full set attached to a ``DisplayRoot``;
the root accepts at most one tree at a time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

MAIN_CONTAINER_ID = "main-container"


@dataclass
class TextBlock:
    """One styled logical line; ``marker`` is raw markdown shown only unconcealed."""

    text: str
    fg: str | None = None
    bg: str | None = None
    bold: bool = False
    italic: bool = False
    marker: str = ""
    disposed: bool = field(default=False, compare=False, repr=False)

    def dispose(self) -> None:
        self.disposed = True


@dataclass
class RuleBlock:
    char: str
    width: int
    fg: str | None = None
    disposed: bool = field(default=False, compare=False, repr=False)

    @property
    def text(self) -> str:
        return self.char * self.width

    def dispose(self) -> None:
        self.disposed = True


@dataclass
class CodeBlock:
    """Code body highlighted at paint time with ``syntax_style``."""

    text: str
    language: str
    syntax_style: str
    fence_info: str = ""
    disposed: bool = field(default=False, compare=False, repr=False)

    def dispose(self) -> None:
        self.disposed = True


@dataclass
class BoxBlock:
    """Vertical container with an optional border ("single" or "rounded")."""

    children: list[Block] = field(default_factory=list)
    border: str | None = None
    border_color: str | None = None
    bg: str | None = None
    indent: int = 0
    block_id: str = ""
    disposed: bool = field(default=False, compare=False, repr=False)

    def add(self, child: Block) -> None:
        if self.disposed:
            raise RuntimeError("cannot add children to a disposed box")
        self.children.append(child)

    def dispose(self) -> None:
        """Dispose every descendant and drop references to them."""
        for child in self.children:
            child.dispose()
        self.children = []
        self.disposed = True


Block = Union[TextBlock, RuleBlock, CodeBlock, BoxBlock]


@dataclass
class RenderTree:
    """Blocks derived from one (content, theme) pair plus their header."""

    blocks: list[Block]
    header: Block | None = None
    background_color: str | None = None
    is_error: bool = False
    disposed: bool = field(default=False, compare=False, repr=False)

    def top_level(self) -> list[Block]:
        if self.header is None:
            return list(self.blocks)
        return [self.header, *self.blocks]

    def dispose(self) -> None:
        for block in self.top_level():
            block.dispose()
        self.blocks = []
        self.header = None
        self.disposed = True


class DisplayRoot:
    """Attachment point for the single visible ``RenderTree``."""

    def __init__(self) -> None:
        self._tree: RenderTree | None = None
        self.attach_count = 0

    @property
    def tree(self) -> RenderTree | None:
        return self._tree

    def attach(self, tree: RenderTree) -> None:
        if self._tree is not None:
            raise RuntimeError("a render tree is already attached; detach it first")
        if tree.disposed:
            raise RuntimeError("cannot attach a disposed render tree")
        self._tree = tree
        self.attach_count += 1

    def detach(self) -> RenderTree | None:
        tree = self._tree
        self._tree = None
        return tree
