"""Composition shell shared by all chart kinds.

Wraps a draw plan with its title, zoom selector and insight caption,
and provides the loading skeleton and the inline error placeholder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.geometry import DrawPlan
from ..core.models import ZOOM_ORDER, ChartBase, ZoomLevel
from .themes import Theme

ZOOM_LABELS: dict[ZoomLevel, str] = {
    ZoomLevel.DAY: "D",
    ZoomLevel.WEEK: "W",
    ZoomLevel.MONTH: "M",
    ZoomLevel.QUARTER: "Q",
    ZoomLevel.YEAR: "Y",
}

# (height px, width as a fraction of the card) for title, chart, caption
SKELETON_BARS: tuple[tuple[float, float], ...] = ((12, 0.5), (140, 1.0), (10, 0.7))

# Card fill / outline alpha suffixes applied to the accent color
_FILL_ALPHA = "0d"
_BORDER_ALPHA = "1a"


@dataclass(frozen=True)
class ZoomOption:
    level: ZoomLevel
    label: str
    active: bool


@dataclass(frozen=True)
class ChartCard:
    """A chart ready for display: plan plus its surrounding chrome."""

    kind: str  # "chart", "loading" or "placeholder"
    title: str = ""
    chart_id: str = ""
    insight: Optional[str] = None
    insight_color: str = ""
    text_color: str = ""
    background: str = ""
    border: str = ""
    zoom_options: tuple[ZoomOption, ...] = ()
    interactive: bool = False
    pending: bool = False
    plan: Optional[DrawPlan] = None
    message: str = ""
    skeleton: tuple[tuple[float, float], ...] = ()

    @property
    def active_zoom(self) -> ZoomLevel | None:
        for option in self.zoom_options:
            if option.active:
                return option.level
        return None


def zoom_selector(active: ZoomLevel | None) -> tuple[ZoomOption, ...]:
    """All five zoom levels with the current one flagged."""
    if active is None:
        return ()
    return tuple(ZoomOption(level=z, label=ZOOM_LABELS[z], active=z == active) for z in ZOOM_ORDER)


def compose_card(
    spec: ChartBase,
    plan: DrawPlan,
    theme: Theme,
    *,
    zoom: ZoomLevel | None = None,
    interactive: bool = False,
    pending: bool = False,
) -> ChartCard:
    """Wrap *plan* with the title, zoom selector and caption of *spec*."""
    accent = theme.hex("accent")
    return ChartCard(
        kind="chart",
        title=spec.title,
        chart_id=spec.id,
        insight=spec.insight or None,
        insight_color=theme.hex("series_cool"),
        text_color=theme.hex("text_primary"),
        background=accent + _FILL_ALPHA,
        border=accent + _BORDER_ALPHA,
        zoom_options=zoom_selector(zoom if zoom is not None else spec.zoom),
        interactive=interactive,
        pending=pending,
        plan=plan,
    )


def loading_card(theme: Theme, title: str = "") -> ChartCard:
    """Skeleton shown while a chart's data is still on its way."""
    accent = theme.hex("accent")
    return ChartCard(
        kind="loading",
        title=title,
        background=accent + _FILL_ALPHA,
        border=theme.hex("border"),
        skeleton=SKELETON_BARS,
    )


def placeholder_card(message: str, theme: Theme) -> ChartCard:
    """Inline, non-fatal stand-in for a chart that could not be built."""
    return ChartCard(
        kind="placeholder",
        text_color=theme.hex("text_secondary"),
        background=theme.hex("surface"),
        message=message,
    )
