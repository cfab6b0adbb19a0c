"""Simulated streaming playback.

Progressively reveals a source text into a ``StreamDisplay`` in random-sized
chunks at random intervals, mimicking a document that is being generated
live. Playback runs on the shared scheduler and bypasses the normal refresh
path while active.

Phases: ``idle`` -> ``active`` -> ``complete``; ``stop()`` returns to idle
from anywhere and ``start()`` always restarts from the beginning.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass

from .scheduler import ScheduledTask, Scheduler

logger = logging.getLogger(__name__)

MIN_CHUNK_CHARS = 1
MAX_CHUNK_CHARS = 50

PHASE_IDLE = "idle"
PHASE_ACTIVE = "active"
PHASE_COMPLETE = "complete"

_PHASE_LABELS = {
    PHASE_IDLE: "STOPPED",
    PHASE_ACTIVE: "IN PROGRESS",
    PHASE_COMPLETE: "COMPLETE",
}


@dataclass(frozen=True)
class SpeedPreset:
    """Inclusive millisecond range for the delay between two reveal ticks."""

    name: str
    min_ms: int
    max_ms: int


STREAM_SPEEDS: tuple[SpeedPreset, ...] = (
    SpeedPreset("Slowest", 200, 500),
    SpeedPreset("Slower", 150, 350),
    SpeedPreset("Slow", 100, 250),
    SpeedPreset("Medium", 70, 150),
    SpeedPreset("Fast", 40, 100),
    SpeedPreset("Faster", 20, 60),
    SpeedPreset("Fastest", 10, 50),
)


@dataclass
class StreamDisplay:
    """Display buffer the engine writes into while streaming."""

    content: str = ""
    streaming: bool = False
    sticky_bottom: bool = False


@dataclass
class StreamingState:
    source_text: str = ""
    cursor_position: int = 0
    speed_index: int = 0
    endless: bool = False
    active: bool = False


def clamp_speed_index(index: int) -> int:
    return max(0, min(len(STREAM_SPEEDS) - 1, index))


def revealed_text(source: str, cursor_position: int, chunk_size: int) -> str:
    """Return the buffer shown after revealing ``chunk_size`` more characters.

    Completed passes over ``source`` are repeated in full; the current pass is
    revealed up to ``chunk_size`` characters past the cursor, never beyond
    the end of ``source``.
    """
    length = len(source)
    if length == 0:
        return ""
    position_in_iteration = cursor_position % length
    next_position = min(position_in_iteration + chunk_size, length)
    full_iterations = cursor_position // length
    return source * full_iterations + source[:next_position]


class StreamingPlaybackEngine:
    """Drive a progressive reveal of ``state.source_text`` into a display."""

    def __init__(
        self,
        scheduler: Scheduler,
        display: StreamDisplay | None,
        source_text: str = "",
        *,
        on_status: Callable[[str], None] | None = None,
        on_change: Callable[[], None] | None = None,
        rng: random.Random | None = None,
        speed_index: int = 0,
    ) -> None:
        self.scheduler = scheduler
        self.display = display
        self.state = StreamingState(source_text=source_text, speed_index=clamp_speed_index(speed_index))
        self.phase = PHASE_IDLE
        self.on_status = on_status
        self.on_change = on_change
        self.rng = rng or random.Random()
        self.tick_count = 0
        self._task: ScheduledTask | None = None

    @property
    def active(self) -> bool:
        return self.state.active

    @property
    def endless(self) -> bool:
        return self.state.endless

    @property
    def speed(self) -> SpeedPreset:
        return STREAM_SPEEDS[self.state.speed_index]

    def status_line(self) -> str:
        mode = "ENDLESS" if self.state.endless else "NORMAL"
        return f"Streaming: {_PHASE_LABELS[self.phase]} ({self.speed.name}, {mode})"

    def start(self) -> None:
        """Restart playback from the first character."""
        self._cancel_timer()
        self.state.cursor_position = 0
        self.tick_count = 0
        if self.display is None:
            self.state.active = False
            self.phase = PHASE_IDLE
            return
        self.state.active = True
        self.phase = PHASE_ACTIVE
        self.display.content = ""
        self.display.streaming = True
        self.display.sticky_bottom = True
        self._emit_status()
        self._notify_change()
        self._task = self.scheduler.call_later(0.0, self._tick)
        logger.debug("streaming started (%d chars, %s)", len(self.state.source_text), self.speed.name)

    def stop(self) -> None:
        """Cancel playback and reset the cursor; safe to call at any time."""
        self._cancel_timer()
        previous_phase = self.phase
        self.state.active = False
        self.state.cursor_position = 0
        self.phase = PHASE_IDLE
        if self.display is not None:
            self.display.streaming = False
            self.display.sticky_bottom = False
        if previous_phase != PHASE_IDLE:
            self._emit_status()
            self._notify_change()
            logger.debug("streaming stopped from phase %s", previous_phase)

    def toggle_endless(self) -> None:
        """Flip endless mode; the next continuation test picks it up."""
        self.state.endless = not self.state.endless
        self._emit_status()

    def increase_speed(self) -> None:
        self._set_speed_index(self.state.speed_index + 1)

    def decrease_speed(self) -> None:
        self._set_speed_index(self.state.speed_index - 1)

    def set_source(self, text: str) -> None:
        """Swap the source text without interrupting or rewinding playback."""
        self.state.source_text = text

    def destroy(self) -> None:
        self.stop()
        self.display = None
        self.on_status = None
        self.on_change = None

    def _set_speed_index(self, index: int) -> None:
        clamped = clamp_speed_index(index)
        if clamped == self.state.speed_index:
            return
        self.state.speed_index = clamped
        self._emit_status()

    def _tick(self) -> None:
        self._task = None
        if not self.state.active:
            return
        display = self.display
        if display is None:
            self.state.active = False
            self.phase = PHASE_IDLE
            return

        source = self.state.source_text
        length = len(source)
        if length == 0:
            display.content = ""
            self._complete()
            return

        chunk_size = self.rng.randint(MIN_CHUNK_CHARS, MAX_CHUNK_CHARS)
        display.content = revealed_text(source, self.state.cursor_position, chunk_size)
        self.state.cursor_position += chunk_size
        self.tick_count += 1
        self._notify_change()

        if self.state.endless or self.state.cursor_position < length:
            speed = self.speed
            delay_ms = self.rng.randint(speed.min_ms, speed.max_ms)
            self._task = self.scheduler.call_later(delay_ms / 1000.0, self._tick)
            return
        self._complete()

    def _complete(self) -> None:
        self.state.active = False
        self.phase = PHASE_COMPLETE
        self._emit_status()
        self._notify_change()
        logger.debug("streaming complete after %d ticks", self.tick_count)

    def _cancel_timer(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _emit_status(self) -> None:
        if self.on_status is not None:
            self.on_status(self.status_line())

    def _notify_change(self) -> None:
        if self.on_change is not None:
            self.on_change()
