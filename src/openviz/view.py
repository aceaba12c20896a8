"""A single interactive chart instance.

``ChartView`` ties one specification to its own zoom controller, tooltip
controller and last valid draw plan. Nothing is shared between views.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Union

from .config import DEFAULT_SETTINGS, RenderSettings
from .core.geometry import DrawPlan
from .core.models import ChartBase, ZoomLevel, parse_specification
from .errors import SpecificationError
from .interaction.tooltip import Scheduler, TooltipController, TooltipState
from .interaction.zoom import Reaggregator, ZoomController
from .renderers import render_plan
from .renderers.container import ChartCard, compose_card, placeholder_card
from .renderers.themes import Theme

logger = logging.getLogger(__name__)

SpecSource = Union[str, Mapping[str, Any], ChartBase]


class ChartView:
    """Owns the state of one rendered chart.

    Usage::

        view = ChartView(spec_json, 320, get_theme("dark"), on_zoom_change=fetch)
        view.press(120, 60)            # tooltip, or None on a miss
        await view.select_zoom("month")
        view.close()
    """

    def __init__(
        self,
        source: SpecSource,
        width: float,
        theme: Theme,
        *,
        on_zoom_change: Reaggregator | None = None,
        settings: RenderSettings | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.width = width
        self.theme = theme
        self.settings = settings or DEFAULT_SETTINGS
        self.zoom = ZoomController(on_zoom_change=on_zoom_change)
        self.tooltips = TooltipController(self.settings, scheduler)
        self._interactive = on_zoom_change is not None
        self._spec: ChartBase | None = None
        self._plan: DrawPlan | None = None
        self._error: str | None = None
        self.update(source)

    # -- Accessors ----------------------------------------------------------

    @property
    def spec(self) -> ChartBase | None:
        return self._spec

    @property
    def plan(self) -> DrawPlan | None:
        """Geometry of the current render, or ``None`` when it could not be laid out."""
        return self._plan

    @property
    def tooltip(self) -> TooltipState | None:
        return self.tooltips.state

    @property
    def card(self) -> ChartCard:
        if self._spec is None or self._plan is None:
            return placeholder_card(self._error or "Could not render visualization", self.theme)
        return compose_card(
            self._spec,
            self._plan,
            self.theme.with_overrides(self._spec.theme),
            zoom=self.zoom.zoom,
            interactive=self._interactive,
            pending=self.zoom.pending is not None,
        )

    # -- Updates ------------------------------------------------------------

    def update(self, source: SpecSource) -> None:
        """Replace the specification and re-render.

        A specification with a different ``id`` resets the zoom state.
        An unparsable one, or one whose data cannot be laid out, shows
        the placeholder.
        """
        try:
            spec = parse_specification(source)
        except SpecificationError as exc:
            self._spec = None
            self._plan = None
            self._error = exc.message
            self.zoom.reset(None)
            self.tooltips.clear()
            return

        self.zoom.sync(spec)
        self._spec = spec
        self._error = None
        self.tooltips.clear()
        self._render()

    def resize(self, width: float) -> None:
        self.width = width
        self.tooltips.clear()
        self._render()

    def set_theme(self, theme: Theme) -> None:
        self.theme = theme
        self._render()

    # -- Interaction --------------------------------------------------------

    def press(self, x: float, y: float) -> TooltipState | None:
        """Resolve a tap against the current geometry."""
        if self._plan is None:
            return None
        return self.tooltips.press(self._plan, x, y)

    async def select_zoom(self, level: ZoomLevel | str) -> bool:
        """Select a zoom level; returns ``True`` if new data was applied.

        The current plan stays on display while the request is out, and
        also when the callback raises.
        """
        spec = await self.zoom.select(level)
        return self._apply(spec)

    async def zoom_in(self) -> bool:
        return self._apply(await self.zoom.zoom_in())

    async def zoom_out(self) -> bool:
        return self._apply(await self.zoom.zoom_out())

    async def pinch(self, scale: float) -> bool:
        return self._apply(await self.zoom.handle_pinch(scale))

    def close(self) -> None:
        """Tear down: cancel the tooltip timer and orphan pending requests."""
        self.tooltips.close()
        self.zoom.reset(None)

    # -- Internal -----------------------------------------------------------

    def _apply(self, spec: ChartBase | None) -> bool:
        if spec is None:
            return False
        self.update(spec)
        return True

    def _render(self) -> None:
        if self._spec is None:
            return
        try:
            self._plan = render_plan(self._spec, self.width, self.theme, self.settings)
        except (ValueError, ArithmeticError) as exc:
            logger.warning(
                "Could not lay out %s chart %r: %s", self._spec.chart_type.value, self._spec.id, exc
            )
            self._plan = None
            self._error = "Could not render visualization"
            return
        logger.debug(
            "Rendered %s chart %r at %spx", self._spec.chart_type.value, self._spec.id, self.width
        )
