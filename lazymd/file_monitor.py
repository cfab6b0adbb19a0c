"""Poll-based change detection for a single file.

Compares ``st_mtime_ns`` against a stored baseline on a fixed interval and
hands the full new content to a callback on each strict increase. Transient
stat/read failures are swallowed unless an error callback is registered.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from .document import UNKNOWN_MTIME_NS, read_text
from .scheduler import ScheduledTask, Scheduler

DEFAULT_POLL_INTERVAL_MS = 500

logger = logging.getLogger(__name__)


class FileChangeMonitor:
    """Watch one path by polling its modification time."""

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        stat_mtime_ns: Callable[[Path], int] | None = None,
        read: Callable[[Path], str] = read_text,
    ) -> None:
        self.scheduler = scheduler
        self._stat_mtime_ns = stat_mtime_ns or (lambda path: os.stat(path).st_mtime_ns)
        self._read = read
        self.path: Path | None = None
        self.interval_ms = DEFAULT_POLL_INTERVAL_MS
        self.baseline_mtime_ns = UNKNOWN_MTIME_NS
        self._on_update: Callable[[str], None] | None = None
        self._on_error: Callable[[Exception], None] | None = None
        self._task: ScheduledTask | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(
        self,
        path: Path,
        interval_ms: int,
        on_update: Callable[[str], None],
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        """Capture the current mtime as baseline and begin polling.

        Calling ``start`` on a running monitor has no effect.
        """
        if self._running:
            return
        self.path = Path(path)
        self.interval_ms = max(1, int(interval_ms))
        self._on_update = on_update
        self._on_error = on_error
        self.baseline_mtime_ns = UNKNOWN_MTIME_NS
        try:
            self.baseline_mtime_ns = self._stat_mtime_ns(self.path)
        except OSError as exc:
            self._report_error(exc)
        self._running = True
        self._schedule_next()
        logger.debug("watching %s every %d ms", self.path, self.interval_ms)

    def stop(self) -> None:
        """Cancel polling; no callback fires after this returns."""
        self._cancel_pending()
        if self._running:
            logger.debug("stopped watching %s", self.path)
        self._running = False

    def set_path(self, path: Path) -> None:
        """Watch a different path; the next successful read counts as a change."""
        self.path = Path(path)
        self.baseline_mtime_ns = UNKNOWN_MTIME_NS

    def poll(self) -> bool:
        """Run one change check and return whether ``on_update`` was invoked."""
        if self.path is None:
            return False
        try:
            mtime_ns = self._stat_mtime_ns(self.path)
            if mtime_ns <= self.baseline_mtime_ns:
                return False
            content = self._read(self.path)
        except OSError as exc:
            self._report_error(exc)
            return False
        self.baseline_mtime_ns = mtime_ns
        logger.debug("change detected in %s (mtime_ns=%d)", self.path, mtime_ns)
        if self._on_update is not None:
            self._on_update(content)
        return True

    def _tick(self) -> None:
        self._task = None
        if not self._running:
            return
        self.poll()
        if self._running:
            self._schedule_next()

    def _schedule_next(self) -> None:
        self._cancel_pending()
        self._task = self.scheduler.call_later(self.interval_ms / 1000.0, self._tick)

    def _cancel_pending(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _report_error(self, exc: Exception) -> None:
        if self._on_error is not None:
            self._on_error(exc)
            return
        logger.debug("ignoring watch error for %s: %s", self.path, exc)
