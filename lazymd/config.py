"""Persistent JSON config helpers.

Stores the last selected theme and streaming speed. All access is defensive:
malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "lazymd"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

logger = logging.getLogger(__name__)


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON; write errors are logged and ignored."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not save config to %s: %s", CONFIG_PATH, exc)


def load_theme_name() -> str | None:
    value = load_config().get("theme")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def save_theme_name(name: str) -> None:
    config = load_config()
    config["theme"] = name
    save_config(config)


def load_stream_speed() -> int | None:
    """Return the stored speed preset index, or ``None`` when absent or invalid."""
    value = load_config().get("stream_speed")
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def save_stream_speed(index: int) -> None:
    config = load_config()
    config["stream_speed"] = int(index)
    save_config(config)
