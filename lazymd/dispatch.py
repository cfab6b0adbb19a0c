"""Token-to-block dispatch.

Maps each block token to exactly one top-level layout block styled from the
active theme. Unknown token kinds map to nothing. Dispatch holds no state, so
identical ``(tokens, theme)`` input always yields equal block lists.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .blocks import Block, BoxBlock, CodeBlock, RuleBlock, TextBlock
from .highlight import normalize_language
from .markup import (
    blockquote_text,
    heading_marker,
    heading_rule_char,
    heading_rule_width,
    list_bullet,
    list_item_text,
    strip_markup,
)
from .themes import ThemeProfile
from .tokens import Blockquote, Code, Heading, Hr, ListToken, Paragraph, Table, Token

HR_WIDTH = 80
LIST_INDENT = 2


class TokenRenderDispatcher:
    """Stateless renderer from block tokens to layout blocks."""

    def __init__(self) -> None:
        self._handlers: dict[type, Callable[[Token, ThemeProfile], Block]] = {
            Heading: self.render_heading,
            Paragraph: self.render_paragraph,
            Code: self.render_code,
            ListToken: self.render_list,
            Blockquote: self.render_blockquote,
            Hr: self.render_hr,
            Table: self.render_table,
        }

    def dispatch(self, tokens: Iterable[Token], theme: ThemeProfile) -> list[Block]:
        blocks: list[Block] = []
        for token in tokens:
            handler = self._handlers.get(type(token))
            if handler is None:
                continue
            blocks.append(handler(token, theme))
        return blocks

    def render_heading(self, token: Heading, theme: ThemeProfile) -> Block:
        color = theme.heading_color(token.depth)
        marker = heading_marker(token.depth)
        text = TextBlock(text=token.text, fg=color, bold=True, marker=marker)
        if token.depth not in {1, 2}:
            return text
        # Marker counts with its trailing space, as painted unconcealed.
        rule = RuleBlock(
            char=heading_rule_char(token.depth),
            width=heading_rule_width(len(token.text) + len(marker) + 1),
            fg=color,
        )
        return BoxBlock(children=[text, rule])

    def render_paragraph(self, token: Paragraph, theme: ThemeProfile) -> Block:
        return TextBlock(text=strip_markup(token.text), fg=theme.palette.foreground)

    def render_code(self, token: Code, theme: ThemeProfile) -> Block:
        palette = theme.palette
        box = BoxBlock(border="rounded", border_color=palette.border)
        if token.lang:
            box.add(
                TextBlock(
                    text=token.lang.upper(),
                    fg=palette.code_label,
                    bg=palette.background_alt,
                    bold=True,
                )
            )
        box.add(
            CodeBlock(
                text=token.text,
                language=normalize_language(token.lang or "text"),
                syntax_style=theme.syntax_style,
                fence_info=token.lang or "",
            )
        )
        return box

    def render_list(self, token: ListToken, theme: ThemeProfile) -> Block:
        return BoxBlock(
            children=[
                TextBlock(
                    text=f"{list_bullet(token.ordered, index)}{list_item_text(item)}",
                    fg=theme.palette.foreground,
                )
                for index, item in enumerate(token.items)
            ],
            indent=LIST_INDENT,
        )

    def render_blockquote(self, token: Blockquote, theme: ThemeProfile) -> Block:
        palette = theme.palette
        lines = blockquote_text(token.children).split("\n")
        return BoxBlock(
            children=[TextBlock(text=f"│ {line}", fg=palette.quote, italic=True) for line in lines],
            border="single",
            border_color=palette.border,
            bg=palette.background_alt,
        )

    def render_hr(self, token: Hr, theme: ThemeProfile) -> Block:
        return RuleBlock(char="─", width=HR_WIDTH, fg=theme.palette.border)

    def render_table(self, token: Table, theme: ThemeProfile) -> Block:
        palette = theme.palette
        summary = f"TABLE: {len(token.header)} columns × {len(token.rows)} rows"
        return BoxBlock(
            children=[TextBlock(text=summary, fg=palette.table, bold=True)],
            border="rounded",
            border_color=palette.border,
            bg=palette.background_alt,
        )


_DEFAULT_DISPATCHER = TokenRenderDispatcher()


def dispatch(tokens: Iterable[Token], theme: ThemeProfile) -> list[Block]:
    """Dispatch ``tokens`` with the shared stateless dispatcher."""
    return _DEFAULT_DISPATCHER.dispatch(tokens, theme)
