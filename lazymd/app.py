"""Application controller for the markdown preview.

Owns the document, theme context, file monitor, streaming engine and the
refresh controller, and wires keyboard commands to them. The instance is
the single owner of all mutable state; nothing lives at module level.
"""

from __future__ import annotations

import logging
import random
import sys
from collections.abc import Callable
from pathlib import Path

from .blocks import DisplayRoot
from .document import Document, DocumentLoadError, load_document
from .file_monitor import DEFAULT_POLL_INTERVAL_MS, FileChangeMonitor
from .keys import KeyContext, handle_key
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .paint import paint_blocks, paint_tree
from .refresh import RefreshController, build_header_block
from .scheduler import ScheduledTask, Scheduler
from .screen import FrameContext, max_scroll_start, visible_body_rows
from .state import AppState
from .streaming import StreamDisplay, StreamingPlaybackEngine
from .terminal import TerminalController
from .themes import ThemeContext

STATUS_MESSAGE_SECONDS = 2.0

logger = logging.getLogger(__name__)


class MarkdownPreviewApp:
    """Interactive preview session for a single markdown file."""

    def __init__(
        self,
        path: Path,
        *,
        theme_index: int = 0,
        speed_index: int = 0,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        monitor: FileChangeMonitor | None = None,
        save_theme: Callable[[str], None] | None = None,
        save_speed: Callable[[int], None] | None = None,
    ) -> None:
        self.scheduler = scheduler or Scheduler()
        self.state = AppState(document=Document(Path(path)), theme=ThemeContext(theme_index))
        self.root = DisplayRoot()
        self.refresher = RefreshController(self.root, request_repaint=self.request_repaint)
        self.stream_display = StreamDisplay()
        self.streamer = StreamingPlaybackEngine(
            self.scheduler,
            self.stream_display,
            on_status=self.set_streaming_status,
            on_change=self.request_repaint,
            rng=rng,
            speed_index=speed_index,
        )
        self.monitor = monitor or FileChangeMonitor(self.scheduler)
        self.poll_interval_ms = poll_interval_ms
        self.save_theme = save_theme
        self.save_speed = save_speed
        self._status_task: ScheduledTask | None = None
        self._lines_stale = True
        self.key_context = KeyContext(
            state=self.state,
            toggle_help=self.toggle_help,
            cycle_theme=self.cycle_theme,
            toggle_conceal=self.toggle_conceal,
            reload=self.reload,
            start_streaming=self.start_streaming,
            stop_streaming=self.stop_streaming,
            toggle_endless=self.toggle_endless,
            slower=self.slower,
            faster=self.faster,
            visible_content_rows=self.visible_content_rows,
            release_sticky_bottom=self.release_sticky_bottom,
        )

    @property
    def document(self) -> Document:
        return self.state.document

    @property
    def title(self) -> str:
        return self.document.path.name

    # Lifecycle

    def start(self) -> None:
        """Load the document and begin watching it for changes."""
        self.load_content()
        self.monitor.start(self.document.path, self.poll_interval_ms, self.on_file_update)
        logger.info("preview started for %s (theme %s)", self.document.path, self.state.theme.current.name)

    def shutdown(self) -> None:
        self.monitor.stop()
        self.streamer.destroy()
        self._cancel_status_task()
        self.refresher.clear()
        self.scheduler.cancel_all()
        logger.info("preview shut down")

    # Content

    def load_content(self) -> bool:
        """Read the document from disk and refresh; failures show the error panel."""
        try:
            load_document(self.document)
        except DocumentLoadError as exc:
            self.state.load_error = exc.message
            logger.warning("load failed: %s", exc.message)
            self.refresh_content()
            return False
        self.state.load_error = None
        self.streamer.set_source(self.document.raw_text)
        self.refresh_content()
        return True

    def refresh_content(self) -> None:
        theme = self.state.theme.current
        if self.state.load_error is not None:
            self.refresher.show_error(self.state.load_error, theme)
        else:
            self.refresher.refresh(self.document.raw_text, theme, self.title)

    def on_file_update(self, content: str) -> None:
        """Monitor callback: new content on disk."""
        self.document.update(content, self.monitor.baseline_mtime_ns)
        self.state.load_error = None
        self.streamer.set_source(content)
        if self.streamer.active:
            # Playback owns the display; the new text only feeds the stream.
            return
        if self.stream_display.streaming:
            self.streamer.stop()
        self.refresh_content()

    def request_repaint(self) -> None:
        self._lines_stale = True
        self.state.dirty = True

    def rebuild_lines(self) -> None:
        """Paint the current view into ``state.lines`` at the current width."""
        state = self.state
        width = max(1, state.width)
        if self.stream_display.streaming:
            theme = state.theme.current
            blocks = self.refresher.dispatcher.dispatch(
                self.refresher.tokenizer(self.stream_display.content), theme
            )
            state.lines = paint_blocks([build_header_block(self.title, theme), *blocks], width, conceal=state.conceal)
        else:
            state.lines = paint_tree(self.refresher.current_tree, width, conceal=state.conceal)
        max_start = max_scroll_start(len(state.lines), state.height)
        if self.stream_display.streaming and self.stream_display.sticky_bottom:
            state.start = max_start
        else:
            state.start = max(0, min(state.start, max_start))
        self._lines_stale = False

    # Commands

    def toggle_help(self) -> None:
        self.state.show_help = not self.state.show_help
        self.state.dirty = True

    def cycle_theme(self) -> None:
        theme = self.state.theme.cycle()
        if self.save_theme is not None:
            self.save_theme(theme.name)
        self.set_status_message(f"Theme: {theme.label}")
        self.refresh_content()

    def toggle_conceal(self) -> None:
        self.streamer.stop()
        self.state.conceal = not self.state.conceal
        self.set_status_message(f"Conceal: {'ON' if self.state.conceal else 'OFF'}")
        self.refresh_content()

    def reload(self) -> None:
        if self.load_content():
            self.set_status_message("Reloaded")

    def start_streaming(self) -> None:
        self.streamer.set_source(self.document.raw_text)
        self.streamer.start()

    def stop_streaming(self) -> None:
        self.streamer.stop()
        self.refresh_content()

    def toggle_endless(self) -> None:
        self.streamer.toggle_endless()

    def faster(self) -> None:
        self.streamer.increase_speed()
        self._persist_speed()

    def slower(self) -> None:
        self.streamer.decrease_speed()
        self._persist_speed()

    def release_sticky_bottom(self) -> None:
        self.stream_display.sticky_bottom = False

    def _persist_speed(self) -> None:
        if self.save_speed is not None:
            self.save_speed(self.streamer.state.speed_index)

    # Status line

    def set_status_message(self, message: str, seconds: float = STATUS_MESSAGE_SECONDS) -> None:
        """Show ``message`` in the status line until ``seconds`` elapse."""
        self._cancel_status_task()
        self.state.status_message = message
        self.state.dirty = True
        self._status_task = self.scheduler.call_later(seconds, self._clear_status_message)

    def set_streaming_status(self, line: str) -> None:
        self.state.streaming_status = line
        self.state.dirty = True

    def _clear_status_message(self) -> None:
        self._status_task = None
        self.state.status_message = ""
        self.state.dirty = True

    def _cancel_status_task(self) -> None:
        if self._status_task is not None:
            self._status_task.cancel()
            self._status_task = None

    def status_left(self) -> str:
        parts = [self.title, self.state.theme.current.label]
        if self.state.streaming_status:
            parts.append(self.state.streaming_status)
        if self.state.status_message:
            parts.append(self.state.status_message)
        return " │ ".join(parts)

    # Screen

    def visible_content_rows(self) -> int:
        return visible_body_rows(self.state.height)

    def sync_terminal_size(self, columns: int, lines: int) -> None:
        """Record the terminal size; a change after startup re-renders the view."""
        size = (max(1, columns), max(2, lines))
        previous = self.state.last_size
        if size == previous:
            return
        self.state.last_size = size
        self.state.width, self.state.height = size
        if previous is not None:
            logger.debug("terminal resized from %sx%s to %sx%s", *previous, *size)
            self.refresh_content()
        else:
            self.request_repaint()

    def frame_context(self) -> FrameContext:
        if self._lines_stale:
            self.rebuild_lines()
        theme = self.state.theme.current
        return FrameContext(
            body_lines=self.state.lines,
            start=self.state.start,
            width=self.state.width,
            height=self.state.height,
            status_left=self.status_left(),
            show_help=self.state.show_help,
            background_color=theme.background_color,
            status_color=theme.palette.status,
        )

    def mark_painted(self) -> None:
        self.state.dirty = False

    def handle_key(self, key: str) -> bool:
        return handle_key(key, self.key_context)

    def loop_callbacks(self) -> RuntimeLoopCallbacks:
        return RuntimeLoopCallbacks(
            scheduler=self.scheduler,
            sync_terminal_size=self.sync_terminal_size,
            is_dirty=lambda: self.state.dirty,
            frame_context=self.frame_context,
            mark_painted=self.mark_painted,
            handle_key=self.handle_key,
        )


def run_preview(
    path: Path,
    *,
    theme_index: int = 0,
    speed_index: int = 0,
    save_theme: Callable[[str], None] | None = None,
    save_speed: Callable[[int], None] | None = None,
) -> int:
    """Run the interactive preview until the user quits; returns the exit code.

    Raises ``termios.error`` / ``OSError`` when stdin is not a terminal.
    """
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    app = MarkdownPreviewApp(
        path,
        theme_index=theme_index,
        speed_index=speed_index,
        save_theme=save_theme,
        save_speed=save_speed,
    )
    app.start()
    try:
        run_main_loop(terminal, stdin_fd, RuntimeLoopTiming(), app.loop_callbacks())
    finally:
        app.shutdown()
    return 0
