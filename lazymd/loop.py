"""Main interactive event loop for the preview.

Drains due scheduler tasks, tracks terminal size, paints when dirty, and
dispatches keys. Feature logic lives in the application callbacks.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass

from .input import read_key
from .scheduler import Scheduler
from .screen import FrameContext, render_frame
from .terminal import TerminalController


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    idle_timeout_ms: int = 120


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    scheduler: Scheduler
    sync_terminal_size: Callable[[int, int], None]
    is_dirty: Callable[[], bool]
    frame_context: Callable[[], FrameContext]
    mark_painted: Callable[[], None]
    handle_key: Callable[[str], bool]


def input_timeout_ms(scheduler: Scheduler, idle_timeout_ms: int) -> int:
    """Bound the key wait so the next scheduled task is not delayed."""
    delay = scheduler.next_delay()
    if delay is None:
        return idle_timeout_ms
    return max(0, min(idle_timeout_ms, int(delay * 1000)))


def run_main_loop(
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the interactive loop until a quit key is handled."""
    ops = callbacks
    with terminal.raw_mode():
        while True:
            ops.scheduler.run_due()
            term = shutil.get_terminal_size((80, 24))
            ops.sync_terminal_size(term.columns, term.lines)

            if ops.is_dirty():
                render_frame(ops.frame_context())
                ops.mark_painted()

            try:
                key = read_key(stdin_fd, timeout_ms=input_timeout_ms(ops.scheduler, timing.idle_timeout_ms))
            except KeyboardInterrupt:
                key = "CTRL_C"
            if key == "":
                continue
            if ops.handle_key(key):
                break
