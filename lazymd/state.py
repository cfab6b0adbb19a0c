from __future__ import annotations

from dataclasses import dataclass, field

from .document import Document
from .themes import ThemeContext


@dataclass
class AppState:
    document: Document
    theme: ThemeContext = field(default_factory=ThemeContext)
    conceal: bool = True
    show_help: bool = False
    start: int = 0
    lines: list[str] = field(default_factory=list)
    width: int = 80
    height: int = 24
    dirty: bool = True
    status_message: str = ""
    streaming_status: str = ""
    load_error: str | None = None
    last_size: tuple[int, int] | None = None
