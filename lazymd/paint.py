"""Paint layout blocks into ANSI screen lines.

Text wraps to the available width, code is clipped, and boxes draw their
border and padding around their children. Conceal mode decides whether raw
markdown punctuation (heading markers, code fences) is shown.
"""

from __future__ import annotations

from collections.abc import Iterable

from .ansi import BOLD, DIM, ITALIC, RESET, clip_ansi_line, hex_to_sgr, pad_ansi_line, wrap_ansi_line
from .blocks import Block, BoxBlock, CodeBlock, RenderTree, RuleBlock, TextBlock
from .highlight import highlight_code, sanitize_terminal_text

_BORDER_GLYPHS: dict[str, tuple[str, str, str, str, str, str]] = {
    # top-left, top-right, bottom-left, bottom-right, horizontal, vertical
    "single": ("┌", "┐", "└", "┘", "─", "│"),
    "rounded": ("╭", "╮", "╰", "╯", "─", "│"),
}
BOX_PADDING = 1


def with_background(line: str, bg_sgr: str, width: int) -> str:
    """Pad ``line`` to ``width`` and keep ``bg_sgr`` active across inner resets."""
    if not bg_sgr:
        return pad_ansi_line(line, width)
    padded = pad_ansi_line(line.replace(RESET, RESET + bg_sgr), width)
    return f"{bg_sgr}{padded}{RESET}"


def _text_style(block: TextBlock) -> str:
    style = hex_to_sgr(block.fg) + hex_to_sgr(block.bg, background=True)
    if block.bold:
        style += BOLD
    if block.italic:
        style += ITALIC
    return style


def paint_text(block: TextBlock, width: int, conceal: bool = True) -> list[str]:
    text = sanitize_terminal_text(block.text)
    if block.marker and not conceal:
        text = f"{block.marker} {text}"
    style = _text_style(block)
    out: list[str] = []
    for logical in text.split("\n"):
        for chunk in wrap_ansi_line(logical, width):
            out.append(f"{style}{chunk}{RESET}" if style else chunk)
    return out


def paint_rule(block: RuleBlock, width: int) -> list[str]:
    rule = block.char * max(0, min(block.width, width))
    style = hex_to_sgr(block.fg)
    return [f"{style}{rule}{RESET}" if style else rule]


def paint_code(block: CodeBlock, width: int, conceal: bool = True) -> list[str]:
    body = [clip_ansi_line(line, width) + RESET for line in highlight_code(block.text, block.language, block.syntax_style)]
    if conceal:
        return body
    fence_open = clip_ansi_line(f"```{block.fence_info}", width)
    return [f"{DIM}{fence_open}{RESET}", *body, f"{DIM}```{RESET}"]


def paint_box(block: BoxBlock, width: int, conceal: bool = True) -> list[str]:
    glyphs = _BORDER_GLYPHS.get(block.border or "")
    if glyphs is None or width < 2 + 2 * BOX_PADDING + 1:
        inner_width = max(1, width - block.indent)
        prefix = " " * min(block.indent, max(0, width - 1))
        return [prefix + line for line in paint_blocks(block.children, inner_width, conceal=conceal, spacing=0)]

    top_left, top_right, bottom_left, bottom_right, horizontal, vertical = glyphs
    border = hex_to_sgr(block.border_color)
    border_reset = RESET if border else ""
    bg_sgr = hex_to_sgr(block.bg, background=True)
    inner_width = width - 2 - 2 * BOX_PADDING
    padding = " " * BOX_PADDING

    out = [f"{border}{top_left}{horizontal * (width - 2)}{top_right}{border_reset}"]
    for line in paint_blocks(block.children, inner_width, conceal=conceal, spacing=0):
        if block.indent:
            line = " " * block.indent + line
        body = with_background(f"{padding}{line}", bg_sgr, inner_width + BOX_PADDING)
        out.append(f"{border}{vertical}{border_reset}{body}{padding}{border}{vertical}{border_reset}")
    out.append(f"{border}{bottom_left}{horizontal * (width - 2)}{bottom_right}{border_reset}")
    return out


def paint_block(block: Block, width: int, conceal: bool = True) -> list[str]:
    width = max(1, width)
    if isinstance(block, TextBlock):
        return paint_text(block, width, conceal)
    if isinstance(block, RuleBlock):
        return paint_rule(block, width)
    if isinstance(block, CodeBlock):
        return paint_code(block, width, conceal)
    if isinstance(block, BoxBlock):
        return paint_box(block, width, conceal)
    return []


def paint_blocks(
    blocks: Iterable[Block],
    width: int,
    *,
    conceal: bool = True,
    spacing: int = 1,
) -> list[str]:
    """Paint blocks top to bottom with ``spacing`` blank lines between them."""
    out: list[str] = []
    for index, block in enumerate(blocks):
        if index and spacing:
            out.extend([""] * spacing)
        out.extend(paint_block(block, width, conceal))
    return out


def paint_tree(tree: RenderTree | None, width: int, *, conceal: bool = True) -> list[str]:
    if tree is None:
        return []
    return paint_blocks(tree.top_level(), width, conceal=conceal)
