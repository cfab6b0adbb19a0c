"""Render-tree lifecycle for the preview.

Every refresh tears down the attached tree before building its replacement,
so at most one tree is ever attached to the display root. Load failures get
a fixed error panel through the same detach/attach discipline.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .blocks import MAIN_CONTAINER_ID, Block, BoxBlock, DisplayRoot, RenderTree, TextBlock
from .dispatch import TokenRenderDispatcher
from .themes import ThemeProfile
from .tokens import Token, tokenize

ERROR_PANEL_BG = "#1a1a1a"

logger = logging.getLogger(__name__)


def build_header_block(title: str, theme: ThemeProfile) -> Block:
    return BoxBlock(
        children=[TextBlock(text=f"{title} — Markdown Preview", fg=theme.palette.accent, bold=True)],
        border="rounded",
        border_color=theme.palette.border,
    )


def build_error_tree(message: str, theme: ThemeProfile) -> RenderTree:
    error_color = theme.palette.error
    panel = BoxBlock(
        children=[
            TextBlock(text="ERROR", fg=error_color, bold=True),
            TextBlock(text=message, fg=error_color),
        ],
        border="rounded",
        border_color=error_color,
        bg=ERROR_PANEL_BG,
        block_id=MAIN_CONTAINER_ID,
    )
    return RenderTree(blocks=[panel], background_color=theme.background_color, is_error=True)


class RefreshController:
    """Own the attached ``RenderTree`` and rebuild it on demand."""

    def __init__(
        self,
        root: DisplayRoot,
        *,
        request_repaint: Callable[[], None] | None = None,
        tokenizer: Callable[[str], list[Token]] = tokenize,
        dispatcher: TokenRenderDispatcher | None = None,
    ) -> None:
        self.root = root
        self.request_repaint = request_repaint
        self.tokenizer = tokenizer
        self.dispatcher = dispatcher or TokenRenderDispatcher()
        self.refresh_count = 0

    @property
    def current_tree(self) -> RenderTree | None:
        return self.root.tree

    def clear(self) -> None:
        """Detach and dispose the attached tree, if any."""
        previous = self.root.detach()
        if previous is not None:
            previous.dispose()

    def refresh(self, content: str, theme: ThemeProfile, title: str = "") -> RenderTree:
        """Replace the attached tree with one built from ``content``."""
        self.clear()
        blocks = self.dispatcher.dispatch(self.tokenizer(content), theme)
        header = build_header_block(title, theme) if title else None
        tree = RenderTree(blocks=blocks, header=header, background_color=theme.background_color)
        self._attach(tree)
        self.refresh_count += 1
        logger.debug("refreshed render tree: %d blocks, theme %s", len(blocks), theme.name)
        return tree

    def show_error(self, message: str, theme: ThemeProfile) -> RenderTree:
        """Replace the attached tree with the error panel for ``message``."""
        self.clear()
        tree = build_error_tree(message, theme)
        self._attach(tree)
        logger.info("showing error panel: %s", message)
        return tree

    def _attach(self, tree: RenderTree) -> None:
        self.root.attach(tree)
        if self.request_repaint is not None:
            self.request_repaint()
