"""Immutable draw-plan value objects.

Renderers build a fresh ``DrawPlan`` on every call from the
specification, pixel width and theme. The plan is the only contract
between a renderer and the hit-test engine, and it is never mutated
after construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PlotPoint:
    """A rendered sample of a line or scatter series."""
    x: float
    y: float
    value: float
    label: str
    color: str
    series_index: int = 0
    index: int = 0
    marker: bool = True


@dataclass(frozen=True)
class BarRect:
    """A filled rectangle: a bar, a histogram bin or a heatmap cell."""
    x: float
    y: float
    width: float
    height: float
    value: float
    label: str
    color: str
    series_index: int = 0
    index: int = 0

    def contains(self, px: float, py: float) -> bool:
        return (
            self.x <= px <= self.x + self.width
            and self.y <= py <= self.y + self.height
        )


@dataclass(frozen=True)
class PathShape:
    """An SVG-style path (``M``/``L``/``Z`` commands)."""
    d: str
    stroke: Optional[str] = None
    fill: Optional[str] = None
    gradient: bool = False
    dashed: bool = False


@dataclass(frozen=True)
class GuideLine:
    """A straight rule: grid line, annotation, mean marker, trend line."""
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    dashed: bool = False
    label: str = ""


@dataclass(frozen=True)
class TextLabel:
    x: float
    y: float
    text: str
    color: str
    anchor: str = "start"


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: str


@dataclass(frozen=True)
class ComparisonRow:
    label: str
    value_a: float
    value_b: float
    text_a: str
    text_b: str
    diff: float
    pct: float
    better: bool
    delta_text: str
    color: str


@dataclass(frozen=True)
class DrawPlan:
    """Everything needed to draw one chart and hit-test against it."""
    chart_type: str
    width: float
    height: float
    points: tuple[PlotPoint, ...] = ()
    rects: tuple[BarRect, ...] = ()
    paths: tuple[PathShape, ...] = ()
    guides: tuple[GuideLine, ...] = ()
    texts: tuple[TextLabel, ...] = ()
    rows: tuple[ComparisonRow, ...] = ()
    labels: tuple[Optional[str], ...] = ()
    legend: tuple[LegendEntry, ...] = ()
    ticks: tuple[float, ...] = ()
