from __future__ import annotations

import random
import unittest

from fakes import ScriptedRandom, drain, make_scheduler

from lazymd.streaming import (
    STREAM_SPEEDS,
    StreamDisplay,
    StreamingPlaybackEngine,
    clamp_speed_index,
    revealed_text,
)


def _engine(source: str, rng=None, speed_index: int = 0):
    scheduler, clock = make_scheduler()
    display = StreamDisplay()
    statuses: list[str] = []
    engine = StreamingPlaybackEngine(
        scheduler,
        display,
        source,
        on_status=statuses.append,
        rng=rng or random.Random(7),
        speed_index=speed_index,
    )
    return engine, display, scheduler, clock, statuses


class StreamingCompletionTests(unittest.TestCase):
    def test_normal_mode_reveals_whole_source_and_completes_once(self) -> None:
        source = "# Heading\n\n" + "lorem ipsum dolor " * 20
        engine, display, scheduler, clock, statuses = _engine(source)

        engine.start()
        drain(scheduler, clock)

        self.assertEqual(display.content, source)
        self.assertFalse(engine.active)
        self.assertGreaterEqual(engine.state.cursor_position, len(source))
        completes = [line for line in statuses if "COMPLETE" in line]
        self.assertEqual(completes, ["Streaming: COMPLETE (Slowest, NORMAL)"])

    def test_display_grows_monotonically_as_prefixes(self) -> None:
        source = "abcdefghij" * 12
        engine, display, scheduler, clock, _statuses = _engine(source, rng=random.Random(3))
        seen: list[str] = []
        engine.on_change = lambda: seen.append(display.content)

        engine.start()
        drain(scheduler, clock)

        for earlier, later in zip(seen, seen[1:]):
            self.assertTrue(later.startswith(earlier))
        for content in seen:
            self.assertTrue(source.startswith(content))

    def test_empty_source_completes_immediately_with_empty_display(self) -> None:
        engine, display, scheduler, clock, statuses = _engine("")
        engine.start()
        drain(scheduler, clock)

        self.assertEqual(display.content, "")
        self.assertFalse(engine.active)
        self.assertEqual(statuses[-1], "Streaming: COMPLETE (Slowest, NORMAL)")

    def test_start_sets_display_flags_and_status(self) -> None:
        engine, display, scheduler, _clock, statuses = _engine("text")
        display.content = "stale"
        engine.start()

        self.assertTrue(engine.active)
        self.assertEqual(display.content, "")
        self.assertTrue(display.streaming)
        self.assertTrue(display.sticky_bottom)
        self.assertEqual(statuses, ["Streaming: IN PROGRESS (Slowest, NORMAL)"])
        self.assertEqual(scheduler.pending_count(), 1)


class StreamingEndlessTests(unittest.TestCase):
    def test_endless_buffer_repeats_completed_passes(self) -> None:
        source = "0123456789"
        rng = ScriptedRandom([5])
        engine, display, scheduler, clock, _statuses = _engine(source, rng=rng)
        engine.toggle_endless()
        engine.start()

        for _ in range(7):
            clock.advance(scheduler.next_delay() or 0.0)
            scheduler.run_due()

        # Seven ticks of five characters: cursor 35 is mid-way through pass four.
        self.assertEqual(engine.state.cursor_position, 35)
        self.assertEqual(display.content, source * 3 + source[:5])
        self.assertTrue(engine.active)

    def test_endless_flag_change_is_picked_up_by_next_tick(self) -> None:
        source = "abc"
        engine, _display, scheduler, clock, statuses = _engine(source, rng=ScriptedRandom([2]))
        engine.toggle_endless()
        engine.start()
        for _ in range(4):
            clock.advance(scheduler.next_delay() or 0.0)
            scheduler.run_due()
        self.assertTrue(engine.active)

        engine.toggle_endless()
        drain(scheduler, clock)
        self.assertFalse(engine.active)
        self.assertEqual(statuses[-1], "Streaming: COMPLETE (Slowest, NORMAL)")


class StreamingStopTests(unittest.TestCase):
    def test_start_then_immediate_stop_on_slowest_never_ticks(self) -> None:
        engine, display, scheduler, clock, statuses = _engine("some text to stream", speed_index=0)
        engine.start()
        engine.stop()
        clock.advance(10)
        scheduler.run_due()

        self.assertEqual(engine.tick_count, 0)
        self.assertEqual(engine.state.cursor_position, 0)
        self.assertFalse(display.streaming)
        self.assertFalse(display.sticky_bottom)
        self.assertEqual(statuses[-1], "Streaming: STOPPED (Slowest, NORMAL)")

    def test_stop_is_idempotent_and_only_reports_phase_changes(self) -> None:
        engine, _display, _scheduler, _clock, statuses = _engine("x")
        engine.stop()
        self.assertEqual(statuses, [])
        engine.start()
        engine.stop()
        engine.stop()
        self.assertEqual(statuses.count("Streaming: STOPPED (Slowest, NORMAL)"), 1)

    def test_restart_rewinds_cursor(self) -> None:
        engine, display, scheduler, clock, _statuses = _engine("y" * 200, rng=ScriptedRandom([10]))
        engine.start()
        for _ in range(3):
            clock.advance(scheduler.next_delay() or 0.0)
            scheduler.run_due()
        self.assertEqual(engine.state.cursor_position, 30)

        engine.start()
        self.assertEqual(engine.state.cursor_position, 0)
        self.assertEqual(display.content, "")
        self.assertEqual(scheduler.pending_count(), 1)

    def test_set_source_mid_run_keeps_cursor(self) -> None:
        engine, display, scheduler, clock, _statuses = _engine("a" * 100, rng=ScriptedRandom([10]))
        engine.start()
        clock.advance(scheduler.next_delay() or 0.0)
        scheduler.run_due()

        engine.set_source("b" * 100)
        self.assertEqual(engine.state.cursor_position, 10)
        self.assertTrue(engine.active)
        clock.advance(scheduler.next_delay() or 0.0)
        scheduler.run_due()
        self.assertEqual(display.content, "b" * 20)

    def test_destroy_detaches_display(self) -> None:
        engine, _display, scheduler, _clock, _statuses = _engine("text")
        engine.start()
        engine.destroy()
        engine.start()

        self.assertFalse(engine.active)
        self.assertEqual(scheduler.pending_count(), 0)


class StreamingSpeedTests(unittest.TestCase):
    def test_presets_match_expected_ranges(self) -> None:
        self.assertEqual(
            [(speed.name, speed.min_ms, speed.max_ms) for speed in STREAM_SPEEDS],
            [
                ("Slowest", 200, 500),
                ("Slower", 150, 350),
                ("Slow", 100, 250),
                ("Medium", 70, 150),
                ("Fast", 40, 100),
                ("Faster", 20, 60),
                ("Fastest", 10, 50),
            ],
        )

    def test_speed_changes_clamp_and_report_only_on_change(self) -> None:
        engine, _display, _scheduler, _clock, statuses = _engine("x")
        engine.decrease_speed()
        self.assertEqual(statuses, [])

        for _ in range(10):
            engine.increase_speed()
        self.assertEqual(engine.speed.name, "Fastest")
        self.assertEqual(len(statuses), 6)
        self.assertEqual(statuses[-1], "Streaming: STOPPED (Fastest, NORMAL)")

    def test_tick_delay_uses_current_preset_range(self) -> None:
        rng = ScriptedRandom([1])
        engine, _display, scheduler, clock, _statuses = _engine("abcdef", rng=rng, speed_index=3)
        engine.start()
        scheduler.run_due()

        self.assertIn((70, 150), rng.calls)
        self.assertAlmostEqual(scheduler.next_delay(), 0.070)

    def test_toggle_endless_reports_mode(self) -> None:
        engine, _display, _scheduler, _clock, statuses = _engine("x")
        engine.toggle_endless()
        self.assertEqual(statuses[-1], "Streaming: STOPPED (Slowest, ENDLESS)")

    def test_clamp_speed_index(self) -> None:
        self.assertEqual(clamp_speed_index(-3), 0)
        self.assertEqual(clamp_speed_index(99), len(STREAM_SPEEDS) - 1)


class RevealedTextTests(unittest.TestCase):
    def test_reveal_never_passes_source_end_within_a_pass(self) -> None:
        self.assertEqual(revealed_text("abcdef", 4, 10), "abcdef")
        self.assertEqual(revealed_text("abcdef", 6, 2), "abcdefab")

    def test_empty_source(self) -> None:
        self.assertEqual(revealed_text("", 3, 5), "")


if __name__ == "__main__":
    unittest.main()
