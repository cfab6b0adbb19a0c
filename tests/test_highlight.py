from __future__ import annotations

import unittest

from lazymd import highlight
from lazymd.ansi import strip_ansi


class LanguageAliasTests(unittest.TestCase):
    def test_aliases_map_to_canonical_names(self) -> None:
        expected = {
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
        for alias, canonical in expected.items():
            self.assertEqual(highlight.normalize_language(alias), canonical)

    def test_unknown_aliases_pass_through_lowercased(self) -> None:
        self.assertEqual(highlight.normalize_language("Rust"), "rust")
        self.assertEqual(highlight.normalize_language("PY"), "python")


class HighlightCodeTests(unittest.TestCase):
    def test_highlight_emits_color_and_preserves_text(self) -> None:
        lines = highlight.highlight_code("def f():\n    return 1", "python", "monokai")
        self.assertEqual([strip_ansi(line) for line in lines], ["def f():", "    return 1"])
        self.assertTrue(any("\033[" in line for line in lines))

    def test_unknown_language_and_style_fall_back(self) -> None:
        lines = highlight.highlight_code("plain", "no-such-language", "no-such-style")
        self.assertEqual([strip_ansi(line) for line in lines], ["plain"])
        self.assertIn("no-such-style", highlight._INVALID_STYLES)

    def test_theme_styles_are_available(self) -> None:
        for style in ("github-dark", "monokai", "nord"):
            self.assertEqual(highlight._normalize_style(style), style)

    def test_empty_source_is_one_blank_line(self) -> None:
        self.assertEqual(highlight.highlight_code("", "python"), [""])

    def test_control_bytes_are_escaped(self) -> None:
        self.assertEqual(highlight.sanitize_terminal_text("a\x1b[2Jb"), "a\\x1b[2Jb")


if __name__ == "__main__":
    unittest.main()
