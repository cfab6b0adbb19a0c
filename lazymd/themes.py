"""Theme profiles and the cyclic theme context.

A theme pairs a semantic color palette (hex strings) with the Pygments style
used for fenced code. Profiles live in a fixed ordered tuple and are selected
by index, so cycling through ``len(THEMES)`` steps returns to the start.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_HEADING_COLOR = "#ffffff"


@dataclass(frozen=True)
class ThemePalette:
    """Semantic colors consumed by the token dispatcher and painter."""

    foreground: str
    background_alt: str
    border: str
    accent: str
    error: str
    heading_colors: tuple[str, ...]
    code_label: str
    quote: str
    table: str
    status: str


@dataclass(frozen=True)
class ThemeProfile:
    name: str
    label: str
    background_color: str
    palette: ThemePalette
    syntax_style: str

    def heading_color(self, depth: int) -> str:
        """Return the heading color for ``depth``, clamped to the default color."""
        colors = self.palette.heading_colors
        if 1 <= depth <= len(colors):
            return colors[depth - 1]
        return DEFAULT_HEADING_COLOR


GITHUB_DARK_THEME = ThemeProfile(
    name="github-dark",
    label="GitHub Dark",
    background_color="#0d1117",
    palette=ThemePalette(
        foreground="#e6edf3",
        background_alt="#161b22",
        border="#30363d",
        accent="#58a6ff",
        error="#f85149",
        heading_colors=("#ff6b6b", "#4ecdc4", "#45b7d1", "#d2a8ff", "#f3a683", "#a8dadc"),
        code_label="#ffa657",
        quote="#8b949e",
        table="#79c0ff",
        status="#58a6ff",
    ),
    syntax_style="github-dark",
)

MONOKAI_THEME = ThemeProfile(
    name="monokai",
    label="Monokai",
    background_color="#272822",
    palette=ThemePalette(
        foreground="#f8f8f2",
        background_alt="#3e3d32",
        border="#75715e",
        accent="#66d9ef",
        error="#f92672",
        heading_colors=("#f92672", "#a6e22e", "#66d9ef", "#fd971f", "#ae81ff", "#e6db74"),
        code_label="#fd971f",
        quote="#75715e",
        table="#a6e22e",
        status="#e6db74",
    ),
    syntax_style="monokai",
)

NORD_THEME = ThemeProfile(
    name="nord",
    label="Nord",
    background_color="#2e3440",
    palette=ThemePalette(
        foreground="#d8dee9",
        background_alt="#3b4252",
        border="#4c566a",
        accent="#88c0d0",
        error="#bf616a",
        heading_colors=("#88c0d0", "#81a1c1", "#5e81ac", "#b48ead", "#a3be8c", "#ebcb8b"),
        code_label="#d08770",
        quote="#616e88",
        table="#8fbcbb",
        status="#88c0d0",
    ),
    syntax_style="nord",
)

THEMES: tuple[ThemeProfile, ...] = (GITHUB_DARK_THEME, MONOKAI_THEME, NORD_THEME)


def available_theme_names() -> tuple[str, ...]:
    """Return theme names in cycle order."""
    return tuple(theme.name for theme in THEMES)


def find_theme_index(name: str | None) -> int | None:
    """Match ``name`` case-insensitively against theme names and labels."""
    if not name:
        return None
    candidate = str(name).strip().casefold()
    if not candidate:
        return None
    for index, theme in enumerate(THEMES):
        if candidate in {theme.name.casefold(), theme.label.casefold()}:
            return index
    return None


class ThemeContext:
    """Currently selected theme, cycled by index over ``THEMES``."""

    def __init__(self, index: int = 0, themes: tuple[ThemeProfile, ...] = THEMES) -> None:
        if not themes:
            raise ValueError("at least one theme profile is required")
        self.themes = themes
        self.index = index % len(themes)

    @property
    def current(self) -> ThemeProfile:
        return self.themes[self.index]

    def cycle(self) -> ThemeProfile:
        """Advance to the next theme, wrapping to the first after the last."""
        self.index = (self.index + 1) % len(self.themes)
        return self.current

    def select(self, index: int) -> ThemeProfile:
        self.index = index % len(self.themes)
        return self.current


__all__ = [
    "DEFAULT_HEADING_COLOR",
    "GITHUB_DARK_THEME",
    "MONOKAI_THEME",
    "NORD_THEME",
    "THEMES",
    "ThemeContext",
    "ThemePalette",
    "ThemeProfile",
    "available_theme_names",
    "find_theme_index",
]
