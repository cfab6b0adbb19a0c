"""Full-frame composition for the preview terminal.

Builds one ANSI frame from painted body lines, the status row, and the
optional help overlay, then writes it to stdout in a single call.
Frame building is side-effect free so tests can inspect the output.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from .ansi import DIM, RESET, REVERSE, clip_ansi_line, hex_to_sgr
from .paint import with_background

HELP_TITLE = "lazymd help"
HELP_KEY_SGR = "\033[38;5;229m"
HELP_HEADING_SGR = "\033[1;38;5;81m"
HELP_BORDER_SGR = "\033[38;5;45m"

HELP_LINES: tuple[str, ...] = (
    "",
    f"{HELP_HEADING_SGR}General{RESET}",
    f"  {HELP_KEY_SGR}?{RESET} toggle help   {HELP_KEY_SGR}Esc{RESET} quit",
    f"  {HELP_KEY_SGR}T{RESET} cycle theme   {HELP_KEY_SGR}C{RESET} toggle conceal (stops streaming)",
    f"  {HELP_KEY_SGR}R{RESET} reload file from disk",
    "",
    f"{HELP_HEADING_SGR}Streaming{RESET}",
    f"  {HELP_KEY_SGR}S{RESET} start/restart   {HELP_KEY_SGR}X{RESET} stop   {HELP_KEY_SGR}E{RESET} endless on/off",
    f"  {HELP_KEY_SGR}[{RESET}/{HELP_KEY_SGR}]{RESET} slower/faster",
    "",
    f"{HELP_HEADING_SGR}Scrolling{RESET}",
    f"  {HELP_KEY_SGR}Up/Down{RESET} or {HELP_KEY_SGR}k/j{RESET} line   {HELP_KEY_SGR}PgUp/PgDn/Space{RESET} page",
    f"  {HELP_KEY_SGR}g/G{RESET} top/bottom",
    "",
    f"\033[2;38;5;250mPress ? to close; other keys are ignored until then{RESET}",
)


@dataclass
class FrameContext:
    body_lines: list[str]
    start: int
    width: int
    height: int
    status_left: str
    status_right: str = "? Help"
    show_help: bool = False
    background_color: str | None = None
    status_color: str | None = None


def visible_body_rows(height: int) -> int:
    """Rows available for document content (one row is the status line)."""
    return max(1, height - 1)


def max_scroll_start(total_lines: int, height: int) -> int:
    return max(0, total_lines - visible_body_rows(height))


def build_status_line(left_text: str, width: int, right_text: str = "│ ? Help") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def _help_modal_rows(width: int, height: int) -> list[str]:
    """Return full-screen rows holding a centered rounded help modal."""
    modal_w = min(72, max(20, width - 4))
    modal_h = min(len(HELP_LINES) + 2, max(3, height))
    x = max(0, (width - modal_w) // 2)
    y = max(0, (height - modal_h) // 2)
    inner_w = max(1, modal_w - 2)
    inner_h = max(1, modal_h - 2)
    indent = " " * x

    rows = [f"{DIM}{' ' * max(0, width - 1)}{RESET}" for _ in range(height)]
    title = f" {HELP_TITLE} "[:inner_w]
    title_left = max(0, (inner_w - len(title)) // 2)
    top = "─" * title_left + title + "─" * max(0, inner_w - title_left - len(title))
    if y < height:
        rows[y] = f"{indent}{HELP_BORDER_SGR}╭{top}╮{RESET}"
    for i in range(inner_h):
        row = y + 1 + i
        if row >= height:
            break
        text = HELP_LINES[i] if i < len(HELP_LINES) else ""
        body = with_background(clip_ansi_line(f" {text}", inner_w), "", inner_w)
        rows[row] = f"{indent}{HELP_BORDER_SGR}│{RESET}{body}{HELP_BORDER_SGR}│{RESET}"
    bottom = y + modal_h - 1
    if bottom < height:
        rows[bottom] = f"{indent}{HELP_BORDER_SGR}╰{'─' * inner_w}╯{RESET}"
    return rows


def build_frame(context: FrameContext) -> str:
    """Compose one full ANSI frame for ``context``."""
    width = max(1, context.width)
    height = max(2, context.height)
    body_rows = visible_body_rows(height)
    bg_sgr = hex_to_sgr(context.background_color, background=True)

    out: list[str] = ["\033[H"]
    if context.show_help:
        rows = _help_modal_rows(width, body_rows)
    else:
        start = max(0, min(context.start, max_scroll_start(len(context.body_lines), height)))
        visible = context.body_lines[start : start + body_rows]
        rows = [with_background(line, bg_sgr, width) for line in visible]
        rows.extend(with_background("", bg_sgr, width) for _ in range(body_rows - len(visible)))
    for row in rows:
        out.append(row)
        out.append("\033[K\r\n")

    status = build_status_line(context.status_left, width, f"│ {context.status_right}")
    out.append(REVERSE + hex_to_sgr(context.status_color))
    out.append(status)
    out.append(RESET)
    out.append("\033[K")
    return "".join(out)


def render_frame(context: FrameContext) -> None:
    """Write the composed frame to stdout."""
    frame = build_frame(context)
    os.write(sys.stdout.fileno(), frame.encode("utf-8", errors="replace"))
