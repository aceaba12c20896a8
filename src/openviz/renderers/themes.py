"""Pluggable theming for all renderers.

Themes define the named color set every renderer draws with. A
``Theme`` is passed explicitly into each render call; renderers never
hardcode colors.

Usage::

    from openviz.renderers.themes import get_theme, list_themes

    theme = get_theme("light")
    plan = render_chart(spec, 320, theme)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Mapping

RGB = tuple[int, int, int]


# ---------------------------------------------------------------------------
# Color helpers
# ---------------------------------------------------------------------------

def hex_to_rgb(value: str) -> RGB:
    """Parse ``#rrggbb`` (or ``#rgb``) into an RGB tuple."""
    h = value.strip().lstrip("#")
    if len(h) == 3:
        h = "".join(c * 2 for c in h)
    if len(h) < 6:
        raise ValueError(f"Not a hex color: {value!r}")
    return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))


def rgb_to_hex(rgb: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def interpolate_rgb(t: float, low: RGB, high: RGB) -> RGB:
    """Linear blend from *low* (``t=0``) to *high* (``t=1``)."""
    return (
        round(low[0] + (high[0] - low[0]) * t),
        round(low[1] + (high[1] - low[1]) * t),
        round(low[2] + (high[2] - low[2]) * t),
    )


# ---------------------------------------------------------------------------
# Theme dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ThemeColors:
    """All color slots used across renderers. Values are RGB tuples."""

    # Surfaces
    background: RGB = (10, 10, 15)
    surface: RGB = (20, 20, 31)
    border: RGB = (30, 30, 46)

    # Text
    text_primary: RGB = (250, 250, 250)
    text_secondary: RGB = (115, 115, 115)

    # Brand
    accent: RGB = (99, 102, 241)

    # Status
    warning: RGB = (251, 191, 36)
    success: RGB = (94, 234, 212)
    error: RGB = (248, 113, 113)

    # Semantic series colors
    series_cool: RGB = (167, 139, 250)
    series_warm: RGB = (251, 113, 133)


COLOR_SLOTS: tuple[str, ...] = tuple(f.name for f in dataclasses.fields(ThemeColors))

# Default series color cycle
SERIES_SLOTS: tuple[str, ...] = ("accent", "success", "warning", "series_warm", "series_cool")


@dataclass(frozen=True)
class Theme:
    """Complete theme definition."""

    name: str = "dark"
    display_name: str = "Dark"
    description: str = "Dark surfaces with indigo accents."
    colors: ThemeColors = field(default_factory=ThemeColors)

    def hex(self, slot: str) -> str:
        """Hex string for the named color slot."""
        return rgb_to_hex(getattr(self.colors, slot))

    def series_color(self, index: int, override: str | None = None) -> str:
        """Color for the *index*-th series unless the series sets its own."""
        if override:
            return override
        return self.hex(SERIES_SLOTS[index % len(SERIES_SLOTS)])

    def with_overrides(self, overrides: Mapping[str, str] | None) -> Theme:
        """Return a copy with some slots replaced by hex colors.

        Keys may be snake_case slot names or their camelCase spelling
        (``textPrimary``); unknown keys and unparsable colors are ignored.
        """
        if not overrides:
            return self
        changes: dict[str, RGB] = {}
        for key, value in overrides.items():
            slot = _slot_name(key)
            if slot not in COLOR_SLOTS:
                continue
            try:
                changes[slot] = hex_to_rgb(value)
            except (ValueError, AttributeError):
                continue
        if not changes:
            return self
        return dataclasses.replace(
            self, colors=dataclasses.replace(self.colors, **changes)
        )


def _slot_name(key: str) -> str:
    return "".join("_" + c.lower() if c.isupper() else c for c in key)


# ---------------------------------------------------------------------------
# Built-in themes
# ---------------------------------------------------------------------------

DARK_THEME = Theme()

LIGHT_THEME = Theme(
    name="light",
    display_name="Light",
    description="White surfaces with the same indigo accent.",
    colors=ThemeColors(
        background=(255, 255, 255),
        surface=(244, 244, 248),
        border=(228, 228, 235),
        text_primary=(23, 23, 23),
        text_secondary=(110, 110, 120),
        accent=(79, 70, 229),
        warning=(217, 119, 6),
        success=(13, 148, 136),
        error=(220, 38, 38),
        series_cool=(124, 58, 237),
        series_warm=(225, 29, 72),
    ),
)

CONTRAST_THEME = Theme(
    name="contrast",
    display_name="High Contrast",
    description="Pure black background with saturated accents.",
    colors=ThemeColors(
        background=(0, 0, 0),
        surface=(18, 18, 18),
        border=(90, 90, 90),
        text_primary=(255, 255, 255),
        text_secondary=(200, 200, 200),
        accent=(0, 200, 255),
        warning=(255, 214, 0),
        success=(0, 230, 118),
        error=(255, 82, 82),
        series_cool=(179, 136, 255),
        series_warm=(255, 64, 129),
    ),
)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_THEME_REGISTRY: dict[str, Theme] = {
    t.name: t
    for t in [
        DARK_THEME,
        LIGHT_THEME,
        CONTRAST_THEME,
    ]
}


def get_theme(name: str) -> Theme:
    """Get a theme by name. Raises ``KeyError`` if not found."""
    key = name.lower().strip()
    if key not in _THEME_REGISTRY:
        available = ", ".join(sorted(_THEME_REGISTRY.keys()))
        raise KeyError(f"Unknown theme '{name}'. Available: {available}")
    return _THEME_REGISTRY[key]


def list_themes() -> list[Theme]:
    """Return all registered themes."""
    return list(_THEME_REGISTRY.values())


def register_theme(theme: Theme) -> None:
    """Register a custom theme at runtime."""
    _THEME_REGISTRY[theme.name.lower().strip()] = theme


# Convenience: default theme
DEFAULT_THEME = DARK_THEME
