from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from fakes import FakeClock, make_scheduler

from lazymd.document import UNKNOWN_MTIME_NS
from lazymd.file_monitor import DEFAULT_POLL_INTERVAL_MS, FileChangeMonitor
from lazymd.scheduler import Scheduler


class _FakeFile:
    def __init__(self, mtime_ns: int = 100, text: str = "one") -> None:
        self.mtime_ns = mtime_ns
        self.text = text
        self.stat_error: OSError | None = None
        self.read_error: OSError | None = None
        self.reads = 0

    def stat(self, _path: Path) -> int:
        if self.stat_error is not None:
            raise self.stat_error
        return self.mtime_ns

    def read(self, _path: Path) -> str:
        if self.read_error is not None:
            raise self.read_error
        self.reads += 1
        return self.text


def _monitor(fake: _FakeFile) -> tuple[FileChangeMonitor, Scheduler, FakeClock]:
    scheduler, clock = make_scheduler()
    monitor = FileChangeMonitor(scheduler, stat_mtime_ns=fake.stat, read=fake.read)
    return monitor, scheduler, clock


class FileChangeMonitorTests(unittest.TestCase):
    def test_start_captures_baseline_without_callback(self) -> None:
        fake = _FakeFile(mtime_ns=500)
        monitor, scheduler, clock = _monitor(fake)
        updates: list[str] = []

        monitor.start(Path("doc.md"), 500, updates.append)
        clock.advance(0.5)
        scheduler.run_due()

        self.assertEqual(monitor.baseline_mtime_ns, 500)
        self.assertEqual(updates, [])
        self.assertEqual(fake.reads, 0)

    def test_fires_once_per_strict_mtime_increase(self) -> None:
        fake = _FakeFile(mtime_ns=100, text="v1")
        monitor, scheduler, clock = _monitor(fake)
        updates: list[str] = []
        monitor.start(Path("doc.md"), 500, updates.append)

        fake.mtime_ns, fake.text = 200, "v2"
        for _ in range(3):
            clock.advance(0.5)
            scheduler.run_due()
        fake.mtime_ns, fake.text = 300, "v3"
        clock.advance(0.5)
        scheduler.run_due()

        self.assertEqual(updates, ["v2", "v3"])
        self.assertEqual(monitor.baseline_mtime_ns, 300)

    def test_unchanged_or_older_mtime_never_fires(self) -> None:
        fake = _FakeFile(mtime_ns=100)
        monitor, _scheduler, _clock = _monitor(fake)
        updates: list[str] = []
        monitor.start(Path("doc.md"), 500, updates.append)

        self.assertFalse(monitor.poll())
        fake.mtime_ns = 50
        self.assertFalse(monitor.poll())
        self.assertEqual(updates, [])

    def test_errors_are_swallowed_without_error_callback(self) -> None:
        fake = _FakeFile(mtime_ns=100)
        monitor, _scheduler, _clock = _monitor(fake)
        updates: list[str] = []
        monitor.start(Path("doc.md"), 500, updates.append)

        fake.mtime_ns = 200
        fake.read_error = PermissionError("denied")
        self.assertFalse(monitor.poll())
        self.assertEqual(monitor.baseline_mtime_ns, 100)

        fake.read_error = None
        self.assertTrue(monitor.poll())
        self.assertEqual(updates, ["one"])

    def test_errors_are_reported_to_error_callback(self) -> None:
        fake = _FakeFile(mtime_ns=100)
        monitor, _scheduler, _clock = _monitor(fake)
        errors: list[Exception] = []
        monitor.start(Path("doc.md"), 500, lambda _text: None, errors.append)

        fake.stat_error = FileNotFoundError("gone")
        monitor.poll()

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], FileNotFoundError)

    def test_stat_failure_at_start_leaves_sentinel_baseline(self) -> None:
        fake = _FakeFile()
        fake.stat_error = FileNotFoundError("missing")
        monitor, _scheduler, _clock = _monitor(fake)
        errors: list[Exception] = []
        updates: list[str] = []

        monitor.start(Path("doc.md"), 500, updates.append, errors.append)
        self.assertEqual(monitor.baseline_mtime_ns, UNKNOWN_MTIME_NS)
        self.assertEqual(len(errors), 1)

        fake.stat_error = None
        self.assertTrue(monitor.poll())
        self.assertEqual(updates, ["one"])

    def test_stop_prevents_further_callbacks_and_is_idempotent(self) -> None:
        fake = _FakeFile(mtime_ns=100)
        monitor, scheduler, clock = _monitor(fake)
        updates: list[str] = []
        monitor.start(Path("doc.md"), 500, updates.append)

        monitor.stop()
        monitor.stop()
        fake.mtime_ns = 200
        clock.advance(5)
        scheduler.run_due()

        self.assertFalse(monitor.running)
        self.assertEqual(updates, [])
        self.assertEqual(scheduler.pending_count(), 0)

    def test_start_while_running_keeps_single_poll_task(self) -> None:
        fake = _FakeFile()
        monitor, scheduler, _clock = _monitor(fake)
        monitor.start(Path("doc.md"), 500, lambda _text: None)
        monitor.start(Path("other.md"), 100, lambda _text: None)

        self.assertEqual(scheduler.pending_count(), 1)
        self.assertEqual(monitor.path, Path("doc.md"))
        self.assertEqual(monitor.interval_ms, 500)

    def test_set_path_resets_baseline(self) -> None:
        fake = _FakeFile(mtime_ns=100)
        monitor, _scheduler, _clock = _monitor(fake)
        updates: list[str] = []
        monitor.start(Path("a.md"), 500, updates.append)

        monitor.set_path(Path("b.md"))
        self.assertEqual(monitor.baseline_mtime_ns, UNKNOWN_MTIME_NS)
        self.assertTrue(monitor.poll())
        self.assertEqual(updates, ["one"])

    def test_default_interval_is_half_a_second(self) -> None:
        self.assertEqual(DEFAULT_POLL_INTERVAL_MS, 500)

    def test_detects_real_file_modification(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "doc.md"
            path.write_text("# one\n", encoding="utf-8")
            scheduler, _clock = make_scheduler()
            monitor = FileChangeMonitor(scheduler)
            updates: list[str] = []
            monitor.start(path, 500, updates.append)

            path.write_text("# two\n", encoding="utf-8")
            stat = path.stat()
            os.utime(path, ns=(stat.st_atime_ns, monitor.baseline_mtime_ns + 1_000_000_000))

            self.assertTrue(monitor.poll())
            self.assertEqual(updates, ["# two\n"])
            monitor.stop()


if __name__ == "__main__":
    unittest.main()
