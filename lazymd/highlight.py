"""Code-block syntax highlighting and terminal text sanitization.

Fenced code is highlighted with Pygments using the active theme's style.
Language aliases are normalized first; unknown languages fall back to plain
text. Control bytes are escaped so previews cannot drive the terminal.
"""

from __future__ import annotations

import re

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalTrueColorFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

FALLBACK_STYLE = "monokai"

LANGUAGE_ALIASES: dict[str, str] = {
    "js": "javascript",
    "ts": "typescript",
    "jsx": "javascript",
    "tsx": "typescript",
    "py": "python",
    "rb": "ruby",
    "sh": "bash",
    "shell": "bash",
    "yml": "yaml",
    "md": "markdown",
}

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_FORMATTERS: dict[str, TerminalTrueColorFormatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def normalize_language(lang: str) -> str:
    """Map a fence language alias to its canonical lower-case name."""
    lowered = lang.strip().lower()
    return LANGUAGE_ALIASES.get(lowered, lowered)


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _normalize_style(style: str) -> str:
    """Validate/canonicalize requested style name with cache-backed checks."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return FALLBACK_STYLE

    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return FALLBACK_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> TerminalTrueColorFormatter:
    """Return cached Pygments truecolor formatter for style name."""
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    formatter = TerminalTrueColorFormatter(style=style)
    _FORMATTERS[style] = formatter
    return formatter


def _lexer_for_language(language: str) -> Lexer:
    try:
        return get_lexer_by_name(language, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return TextLexer(stripnl=False, ensurenl=False)


def highlight_code(source: str, language: str, style: str = FALLBACK_STYLE) -> list[str]:
    """Highlight ``source`` and return one ANSI-styled string per source line."""
    source = sanitize_terminal_text(source)
    if not source:
        return [""]
    formatter = _formatter_for_style(_normalize_style(style))
    rendered = pygments_highlight(source, _lexer_for_language(language), formatter)
    return rendered.rstrip("\n").split("\n")
