"""Abstract base class for chart renderers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from ..config import DEFAULT_SETTINGS, RenderSettings
from ..core.geometry import DrawPlan, GuideLine, TextLabel
from ..core.models import ChartBase, ChartType
from ..core.scales import Scale, format_axis_value, map_range
from .themes import Theme


@dataclass(frozen=True)
class Padding:
    top: float
    right: float
    bottom: float
    left: float


class BaseRenderer(ABC):
    """Every chart renderer inherits from this class.

    A renderer is stateless: ``render`` turns a specification, a pixel
    width and a theme into a new ``DrawPlan`` on every call.
    """

    chart_type: ClassVar[ChartType]  # set by subclasses
    padding: ClassVar[Padding] = Padding(top=12, right=12, bottom=24, left=36)
    height: ClassVar[float | None] = None  # falls back to settings.chart_height

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings = settings or DEFAULT_SETTINGS

    def render(self, spec: ChartBase, width: float, theme: Theme) -> DrawPlan:
        """Build the draw plan for *spec* at *width* pixels."""
        if spec.chart_type is not self.chart_type:
            raise TypeError(
                f"{type(self).__name__} cannot render a {spec.chart_type.value} chart"
            )
        return self._build(spec, float(width), theme)

    @abstractmethod
    def _build(self, spec: ChartBase, width: float, theme: Theme) -> DrawPlan:
        ...

    # -- Helpers ---------------------------------------------------------

    @property
    def chart_height(self) -> float:
        """Total plan height in pixels."""
        return float(self.height or self.settings.chart_height)

    @property
    def inner_height(self) -> float:
        return max(self.chart_height - self.padding.top - self.padding.bottom, 0.0)

    def inner_width(self, width: float) -> float:
        return max(width - self.padding.left - self.padding.right, 0.0)

    def _value_y(self, value: float, scale: Scale) -> float:
        """Pixel y of *value* on an inverted (top = max) axis."""
        return self.padding.top + map_range(value, scale.max, scale.min, 0, self.inner_height)

    def _y_grid(
        self, scale: Scale, width: float, theme: Theme
    ) -> tuple[list[GuideLine], list[TextLabel]]:
        """Horizontal grid lines and y-axis tick labels."""
        guides: list[GuideLine] = []
        texts: list[TextLabel] = []
        for tick in scale.ticks:
            y = self._value_y(tick, scale)
            guides.append(GuideLine(
                x1=self.padding.left, y1=y,
                x2=width - self.padding.right, y2=y,
                color=theme.hex("border"),
            ))
            texts.append(TextLabel(
                x=self.padding.left - 4, y=y + 3,
                text=format_axis_value(tick),
                color=theme.hex("text_secondary"),
                anchor="end",
            ))
        return guides, texts
