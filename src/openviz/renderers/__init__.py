"""Chart renderers and the type dispatcher."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..config import RenderSettings
from ..core.geometry import DrawPlan
from ..core.models import ChartBase, ChartType, ZoomLevel, parse_specification
from ..errors import SpecificationError
from .bar import BarRenderer
from .base import BaseRenderer
from .comparison import ComparisonRenderer
from .container import ChartCard, compose_card, placeholder_card
from .distribution import DistributionRenderer
from .heatmap import HeatmapRenderer
from .line import LineRenderer
from .scatter import ScatterRenderer
from .themes import Theme

logger = logging.getLogger(__name__)

# Map chart type → renderer class
RENDERERS: dict[ChartType, type[BaseRenderer]] = {
    ChartType.LINE: LineRenderer,
    ChartType.BAR: BarRenderer,
    ChartType.SCATTER: ScatterRenderer,
    ChartType.HEATMAP: HeatmapRenderer,
    ChartType.DISTRIBUTION: DistributionRenderer,
    ChartType.COMPARISON: ComparisonRenderer,
}


def get_renderer(chart_type: ChartType, settings: RenderSettings | None = None) -> BaseRenderer:
    return RENDERERS[chart_type](settings)


def render_plan(
    spec: ChartBase,
    width: float,
    theme: Theme,
    settings: RenderSettings | None = None,
) -> DrawPlan:
    """Render *spec* with its own theme overrides applied."""
    renderer = get_renderer(spec.chart_type, settings)
    return renderer.render(spec, width, theme.with_overrides(spec.theme))


def render_chart(
    source: str | Mapping[str, Any] | ChartBase,
    width: float,
    theme: Theme,
    *,
    zoom: ZoomLevel | None = None,
    interactive: bool = False,
    settings: RenderSettings | None = None,
) -> ChartCard:
    """Parse, dispatch and render one chart specification.

    Parse failures (malformed JSON, unknown ``type``) and data the
    scales cannot lay out come back as a placeholder card instead of an
    exception.
    """
    try:
        spec = parse_specification(source)
    except SpecificationError as exc:
        return placeholder_card(exc.message, theme)

    effective = theme.with_overrides(spec.theme)
    try:
        plan = render_plan(spec, width, theme, settings)
    except (ValueError, ArithmeticError) as exc:
        logger.warning("Could not lay out %s chart %r: %s", spec.chart_type.value, spec.id, exc)
        return placeholder_card("Could not render visualization", effective)
    return compose_card(spec, plan, effective, zoom=zoom, interactive=interactive)


__all__ = [
    "RENDERERS",
    "BaseRenderer",
    "ChartCard",
    "get_renderer",
    "render_chart",
    "render_plan",
]
