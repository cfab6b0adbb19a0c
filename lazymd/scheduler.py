"""Cooperative single-threaded timer queue.

Poll ticks, playback ticks, and status expiry are all expressed as
``ScheduledTask`` handles drained by the main loop between key reads.
A task handle can be cancelled exactly once and never fires afterwards.
"""

from __future__ import annotations

import heapq
import itertools
import time
from collections.abc import Callable


class ScheduledTask:
    """Handle for one pending callback owned by a ``Scheduler``."""

    __slots__ = ("due", "seq", "_callback", "_cancelled", "_fired")

    def __init__(self, due: float, seq: int, callback: Callable[[], None]) -> None:
        self.due = due
        self.seq = seq
        self._callback = callback
        self._cancelled = False
        self._fired = False

    @property
    def pending(self) -> bool:
        return not self._cancelled and not self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    def cancel(self) -> bool:
        """Cancel the task; ``True`` only for the first cancel of a pending task."""
        if not self.pending:
            return False
        self._cancelled = True
        self._callback = None
        return True

    def _run(self) -> None:
        callback = self._callback
        self._fired = True
        self._callback = None
        if callback is not None:
            callback()

    def __lt__(self, other: ScheduledTask) -> bool:
        return (self.due, self.seq) < (other.due, other.seq)


class Scheduler:
    """Min-heap of scheduled tasks keyed by due time, then scheduling order."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._heap: list[ScheduledTask] = []
        self._counter = itertools.count()

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask:
        """Schedule ``callback`` to run ``delay_seconds`` from now (clamped at 0)."""
        due = self.clock() + max(0.0, float(delay_seconds))
        task = ScheduledTask(due, next(self._counter), callback)
        heapq.heappush(self._heap, task)
        return task

    def _discard_cancelled(self) -> None:
        while self._heap and not self._heap[0].pending:
            heapq.heappop(self._heap)

    def pending_count(self) -> int:
        return sum(1 for task in self._heap if task.pending)

    def next_delay(self) -> float | None:
        """Seconds until the earliest pending task, ``None`` when idle."""
        self._discard_cancelled()
        if not self._heap:
            return None
        return max(0.0, self._heap[0].due - self.clock())

    def run_due(self) -> int:
        """Run every task due by now and return how many callbacks ran.

        Tasks scheduled by callbacks during this pass wait for the next pass,
        so a zero-delay reschedule cannot starve the caller.
        """
        now = self.clock()
        cutoff_seq = next(self._counter)
        ran = 0
        while True:
            self._discard_cancelled()
            if not self._heap:
                break
            head = self._heap[0]
            if head.due > now or head.seq > cutoff_seq:
                break
            heapq.heappop(self._heap)
            head._run()
            ran += 1
        return ran

    def cancel_all(self) -> None:
        for task in self._heap:
            task.cancel()
        self._heap.clear()
