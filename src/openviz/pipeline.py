"""Orchestration pipeline: conversational text → segments → chart cards."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import DEFAULT_SETTINGS, RenderSettings
from .core.extractor import BlockExtractor, ChartSegment, Segment
from .renderers import render_chart
from .renderers.container import ChartCard, placeholder_card
from .renderers.themes import Theme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedSegment:
    """A segment of the source text plus, for chart blocks, its card."""

    segment: Segment
    card: Optional[ChartCard] = None

    @property
    def is_chart(self) -> bool:
        return self.card is not None


class Pipeline:
    """End-to-end conversational text → rendered charts.

    Usage::

        pipeline = Pipeline(get_theme("dark"), width=320)
        for part in pipeline.render_text(message):
            ...
    """

    def __init__(
        self,
        theme: Theme,
        width: float,
        settings: RenderSettings | None = None,
    ) -> None:
        self.theme = theme
        self.width = width
        self.settings = settings or DEFAULT_SETTINGS
        self.extractor = BlockExtractor(self.settings.fence_tag)

    def extract(self, text: str) -> list[Segment]:
        return self.extractor.extract(text)

    def render_segment(self, segment: ChartSegment) -> ChartCard:
        """Render one chart block; never raises."""
        try:
            return render_chart(
                segment.spec_text, self.width, self.theme, settings=self.settings
            )
        except Exception:
            logger.exception("Chart rendering failed")
            return placeholder_card("Could not render visualization", self.theme)

    def render_text(self, text: str) -> list[RenderedSegment]:
        """Split *text* and render every chart block it contains.

        A broken chart turns into a placeholder; the prose around it is
        always returned.
        """
        rendered: list[RenderedSegment] = []
        for segment in self.extract(text):
            if isinstance(segment, ChartSegment):
                rendered.append(RenderedSegment(segment, self.render_segment(segment)))
            else:
                rendered.append(RenderedSegment(segment))
        charts = sum(1 for r in rendered if r.is_chart)
        logger.debug("Rendered %d segment(s), %d chart(s)", len(rendered), charts)
        return rendered
