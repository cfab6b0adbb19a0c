"""Command-line front door for lazymd.

Parses the file and theme arguments, configures logging, resolves the
persisted preferences, and launches the interactive preview.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import config
from .app import run_preview
from .logging_config import parse_level, setup_logging
from .streaming import clamp_speed_index
from .themes import THEMES, available_theme_names, find_theme_index

logger = logging.getLogger(__name__)

USAGE_EXAMPLES = """\
Examples:
  lazymd README.md
  lazymd path/to/document.md nord

Press ? in the app for the full keybindings list."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazymd",
        description="Preview a markdown file in the terminal, re-rendering it when it changes on disk.",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("path", nargs="?", default=None, help="Markdown file to preview.")
    parser.add_argument(
        "theme",
        nargs="?",
        default=None,
        help=f"UI theme ({', '.join(available_theme_names())}). Defaults to the last used theme.",
    )
    parser.add_argument("--log-file", default=None, help="Write diagnostic logs to this file.")
    parser.add_argument("--log-level", default="INFO", help="Log level for --log-file (default: INFO).")
    return parser


def resolve_theme_index(requested: str | None) -> int:
    """Pick the theme index for ``requested``, warning on stderr when it is unknown.

    Without a request, the persisted theme is used when it is still valid.
    """
    if requested is not None:
        index = find_theme_index(requested)
        if index is None:
            print(
                f"Warning: unknown theme {requested!r}; using {THEMES[0].label}. "
                f"Available: {', '.join(available_theme_names())}",
                file=sys.stderr,
            )
            return 0
        return index
    stored = find_theme_index(config.load_theme_name())
    return stored if stored is not None else 0


def resolve_speed_index() -> int:
    stored = config.load_stream_speed()
    return clamp_speed_index(stored) if stored is not None else 0


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and run the preview; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.path is None:
        parser.print_usage(sys.stderr)
        print(f"\n{USAGE_EXAMPLES}", file=sys.stderr)
        return 1

    try:
        level = parse_level(args.log_level)
    except ValueError as exc:
        parser.print_usage(sys.stderr)
        print(f"lazymd: error: {exc}", file=sys.stderr)
        return 1
    setup_logging(level, args.log_file)

    theme_index = resolve_theme_index(args.theme)
    speed_index = resolve_speed_index()
    path = Path(args.path)

    try:
        return run_preview(
            path,
            theme_index=theme_index,
            speed_index=speed_index,
            save_theme=config.save_theme_name,
            save_speed=config.save_stream_speed,
        )
    except KeyboardInterrupt:
        return 0
    except Exception as exc:
        logger.exception("failed to start application")
        print(f"Failed to start application: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
