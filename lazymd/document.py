"""Document model and disk loading.

Reads markdown with a tolerant encoding fallback and classifies failures as
"not found" or "read failure" so the UI can show an error panel instead of
exiting.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

UNKNOWN_MTIME_NS = -1


class DocumentLoadError(Exception):
    """Base class for failures that route to the error panel."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message


class DocumentNotFoundError(DocumentLoadError):
    pass


class DocumentReadError(DocumentLoadError):
    pass


@dataclass
class Document:
    path: Path
    raw_text: str = ""
    last_known_mtime_ns: int = UNKNOWN_MTIME_NS

    def update(self, raw_text: str, mtime_ns: int) -> None:
        """Store freshly read content; the known mtime never moves backwards."""
        self.raw_text = raw_text
        if mtime_ns > self.last_known_mtime_ns:
            self.last_known_mtime_ns = mtime_ns


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def load_document(document: Document) -> Document:
    """Read ``document.path`` from disk into ``document``.

    Raises ``DocumentNotFoundError`` when the path is absent and
    ``DocumentReadError`` for any other I/O failure.
    """
    path = document.path
    if not path.exists():
        raise DocumentNotFoundError(path, f"File not found: {path}")
    try:
        mtime_ns = path.stat().st_mtime_ns
        text = read_text(path)
    except FileNotFoundError as exc:
        raise DocumentNotFoundError(path, f"File not found: {path}") from exc
    except OSError as exc:
        raise DocumentReadError(path, f"Error: {exc}") from exc
    document.update(text, mtime_ns)
    return document
