"""ANSI-aware text measurement and line shaping utilities.

Provides clipping, padding, and wrapping that preserve escape sequences.
Also converts theme hex colors into 24-bit SGR fragments.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
RESET = "\033[0m"
BOLD = "\033[1m"
ITALIC = "\033[3m"
DIM = "\033[2m"
REVERSE = "\033[7m"


def char_display_width(ch: str, col: int = 0) -> int:
    """Columns ``ch`` occupies when drawn at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _segments(text: str) -> Iterator[tuple[str, bool]]:
    """Yield ``(piece, is_escape)``; escape sequences come out whole."""
    pos = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        for ch in text[pos : match.start()]:
            yield ch, False
        yield match.group(0), True
        pos = match.end()
    for ch in text[pos:]:
        yield ch, False


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return the number of terminal columns ``text`` occupies."""
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Keep at most ``max_cols`` columns of ``text``.

    Escapes are copied through at no cost; tabs become spaces so the result
    lines up with terminal cells.
    """
    if max_cols <= 0:
        return ""
    out: list[str] = []
    col = 0
    for piece, is_escape in _segments(text):
        if is_escape:
            out.append(piece)
            continue
        cells = char_display_width(piece, col)
        if col + cells > max_cols:
            break
        out.append(" " * cells if piece == "\t" else piece)
        col += cells
    return "".join(out)


def pad_ansi_line(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` columns and right-pad it with spaces."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))


def wrap_ansi_line(text: str, width: int) -> list[str]:
    """Split ``text`` into rows no wider than ``width`` columns.

    An escape stays in the row where it appears. A character that would
    overflow starts a new row, and a tab is re-expanded there.
    """
    if width <= 0 or not text:
        return [""]
    rows: list[str] = []
    row: list[str] = []
    col = 0
    for piece, is_escape in _segments(text):
        if is_escape:
            row.append(piece)
            continue
        cells = char_display_width(piece, col)
        if col and col + cells > width:
            rows.append("".join(row))
            row = []
            col = 0
            cells = char_display_width(piece, col)
        row.append(" " * cells if piece == "\t" else piece)
        col += cells
    rows.append("".join(row))
    return rows


def hex_to_sgr(color: str | None, *, background: bool = False) -> str:
    """Convert ``#rrggbb`` into a truecolor SGR sequence.

    Returns an empty string for ``None`` or malformed values so callers can
    concatenate unconditionally.
    """
    if not color:
        return ""
    value = color.lstrip("#")
    if len(value) != 6:
        return ""
    try:
        red = int(value[0:2], 16)
        green = int(value[2:4], 16)
        blue = int(value[4:6], 16)
    except ValueError:
        return ""
    layer = 48 if background else 38
    return f"\033[{layer};2;{red};{green};{blue}m"
