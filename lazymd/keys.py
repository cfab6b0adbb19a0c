"""Keyboard command handling for the preview."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .state import AppState

QUIT_KEYS = frozenset({"ESC", "CTRL_C"})
SCROLL_KEYS = frozenset({"UP", "k", "DOWN", "j", "PAGE_UP", "PAGE_DOWN", " ", "g", "G", "HOME", "END"})


@dataclass(frozen=True)
class KeyContext:
    """State and bound operations required for key handling."""

    state: AppState
    toggle_help: Callable[[], None]
    cycle_theme: Callable[[], None]
    toggle_conceal: Callable[[], None]
    reload: Callable[[], None]
    start_streaming: Callable[[], None]
    stop_streaming: Callable[[], None]
    toggle_endless: Callable[[], None]
    slower: Callable[[], None]
    faster: Callable[[], None]
    visible_content_rows: Callable[[], int]
    release_sticky_bottom: Callable[[], None]


def _scroll(key: str, context: KeyContext) -> None:
    state = context.state
    rows = max(1, context.visible_content_rows())
    max_start = max(0, len(state.lines) - rows)
    if key in {"UP", "k"}:
        target = state.start - 1
    elif key in {"DOWN", "j"}:
        target = state.start + 1
    elif key == "PAGE_UP":
        target = state.start - rows
    elif key in {"PAGE_DOWN", " "}:
        target = state.start + rows
    elif key in {"g", "HOME"}:
        target = 0
    else:
        target = max_start
    target = max(0, min(target, max_start))
    context.release_sticky_bottom()
    if target != state.start:
        state.start = target
        state.dirty = True


_COMMANDS: dict[str, Callable[[KeyContext], Callable[[], None]]] = {
    "t": lambda ctx: ctx.cycle_theme,
    "c": lambda ctx: ctx.toggle_conceal,
    "r": lambda ctx: ctx.reload,
    "s": lambda ctx: ctx.start_streaming,
    "e": lambda ctx: ctx.toggle_endless,
    "x": lambda ctx: ctx.stop_streaming,
    "[": lambda ctx: ctx.slower,
    "]": lambda ctx: ctx.faster,
}


def handle_key(key: str, context: KeyContext) -> bool:
    """Handle one key and return ``True`` when the app should quit.

    While the help overlay is shown only ``?`` acts, so it has to be
    closed before quitting. Letter commands accept either case; scroll keys
    are case-sensitive so ``g`` and ``G`` stay distinct.
    """
    if key == "?":
        context.toggle_help()
        return False
    if context.state.show_help:
        return False
    if key in QUIT_KEYS:
        return True
    if key in SCROLL_KEYS:
        _scroll(key, context)
        return False
    command = _COMMANDS.get(key.lower())
    if command is not None:
        command(context)()
    return False
