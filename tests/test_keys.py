from __future__ import annotations

import unittest
from pathlib import Path

from lazymd.document import Document
from lazymd.keys import KeyContext, handle_key
from lazymd.state import AppState


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)
        return lambda: self.calls.append(name)


def _context(lines: int = 100, rows: int = 10) -> tuple[KeyContext, AppState, _Recorder]:
    state = AppState(document=Document(Path("doc.md")), lines=[f"l{i}" for i in range(lines)])
    recorder = _Recorder()
    context = KeyContext(
        state=state,
        toggle_help=recorder.toggle_help,
        cycle_theme=recorder.cycle_theme,
        toggle_conceal=recorder.toggle_conceal,
        reload=recorder.reload,
        start_streaming=recorder.start_streaming,
        stop_streaming=recorder.stop_streaming,
        toggle_endless=recorder.toggle_endless,
        slower=recorder.slower,
        faster=recorder.faster,
        visible_content_rows=lambda: rows,
        release_sticky_bottom=recorder.release_sticky_bottom,
    )
    return context, state, recorder


class CommandKeyTests(unittest.TestCase):
    def test_escape_and_ctrl_c_quit(self) -> None:
        context, _state, _recorder = _context()
        self.assertTrue(handle_key("ESC", context))
        self.assertTrue(handle_key("CTRL_C", context))

    def test_commands_accept_either_case(self) -> None:
        expected = {
            "t": "cycle_theme",
            "c": "toggle_conceal",
            "r": "reload",
            "s": "start_streaming",
            "e": "toggle_endless",
            "x": "stop_streaming",
        }
        for key, action in expected.items():
            for variant in (key, key.upper()):
                context, _state, recorder = _context()
                self.assertFalse(handle_key(variant, context))
                self.assertEqual(recorder.calls, [action], variant)

    def test_bracket_keys_change_speed(self) -> None:
        context, _state, recorder = _context()
        handle_key("[", context)
        handle_key("]", context)
        self.assertEqual(recorder.calls, ["slower", "faster"])

    def test_unbound_keys_do_nothing(self) -> None:
        context, state, recorder = _context()
        self.assertFalse(handle_key("z", context))
        self.assertEqual(recorder.calls, [])
        self.assertEqual(state.start, 0)

    def test_help_gates_everything_but_question_mark(self) -> None:
        context, state, recorder = _context()
        state.show_help = True
        for key in ("t", "S", "j", "]", "ESC", "CTRL_C"):
            self.assertFalse(handle_key(key, context), key)
        self.assertEqual(recorder.calls, [])
        self.assertEqual(state.start, 0)
        handle_key("?", context)
        self.assertEqual(recorder.calls, ["toggle_help"])

        state.show_help = False
        self.assertTrue(handle_key("ESC", context))

    def test_unknown_key_token_does_not_quit(self) -> None:
        context, _state, recorder = _context()
        self.assertFalse(handle_key("UNKNOWN", context))
        self.assertEqual(recorder.calls, [])


class ScrollKeyTests(unittest.TestCase):
    def test_line_and_page_scrolling_is_clamped(self) -> None:
        context, state, recorder = _context(lines=100, rows=10)
        handle_key("DOWN", context)
        handle_key("j", context)
        self.assertEqual(state.start, 2)
        handle_key("PAGE_DOWN", context)
        self.assertEqual(state.start, 12)
        handle_key("G", context)
        self.assertEqual(state.start, 90)
        handle_key(" ", context)
        self.assertEqual(state.start, 90)
        handle_key("PAGE_UP", context)
        self.assertEqual(state.start, 80)
        handle_key("g", context)
        self.assertEqual(state.start, 0)
        handle_key("k", context)
        self.assertEqual(state.start, 0)
        self.assertIn("release_sticky_bottom", recorder.calls)

    def test_scrolling_marks_state_dirty_only_on_move(self) -> None:
        context, state, _recorder = _context(lines=5, rows=10)
        state.dirty = False
        handle_key("DOWN", context)
        self.assertEqual(state.start, 0)
        self.assertFalse(state.dirty)


if __name__ == "__main__":
    unittest.main()
