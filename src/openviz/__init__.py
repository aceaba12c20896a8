"""openviz — declarative chart specifications to interactive draw plans."""

from .config import DEFAULT_SETTINGS, RenderSettings
from .core.extractor import BlockExtractor, ChartSegment, ProseSegment, extract_segments
from .core.models import ChartType, ZoomLevel, parse_specification
from .errors import OpenVizError, SpecificationError
from .pipeline import Pipeline
from .renderers import render_chart, render_plan
from .renderers.themes import DEFAULT_THEME, Theme, get_theme, list_themes
from .view import ChartView

__version__ = "0.1.0"

__all__ = [
    "BlockExtractor",
    "ChartSegment",
    "ChartType",
    "ChartView",
    "DEFAULT_SETTINGS",
    "DEFAULT_THEME",
    "OpenVizError",
    "Pipeline",
    "ProseSegment",
    "RenderSettings",
    "SpecificationError",
    "Theme",
    "ZoomLevel",
    "extract_segments",
    "get_theme",
    "list_themes",
    "parse_specification",
    "render_chart",
    "render_plan",
]
