"""Zoom-level state machine for timeframe-bearing charts.

States are the five ``ZoomLevel`` values. A transition happens only on
an explicit selection (button, zoom in/out, pinch). On a transition the
controller asks an external re-aggregation callback for a new
specification; aggregation is never computed locally.

Every reset (a specification with a new ``id``, or closing the chart)
starts a new epoch. A result that arrives for an older epoch, or for a
zoom level that has since been replaced, is stale and is discarded.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Union

from ..core.models import ChartBase, ZoomLevel, parse_specification

logger = logging.getLogger(__name__)

Reaggregator = Callable[[str, ZoomLevel], Union[Awaitable[Any], Any]]

PINCH_IN_THRESHOLD = 1.3
PINCH_OUT_THRESHOLD = 0.7


class ZoomController:
    """Holds the active zoom level of one chart instance."""

    def __init__(
        self,
        spec: ChartBase | None = None,
        on_zoom_change: Reaggregator | None = None,
    ) -> None:
        self._on_zoom_change = on_zoom_change
        self._chart_id: str | None = None
        self._zoom: ZoomLevel | None = None
        self._displayed: ZoomLevel | None = None
        self._pending: ZoomLevel | None = None
        self._epoch = 0
        if spec is not None:
            self.reset(spec)

    # -- State --------------------------------------------------------------

    @property
    def zoom(self) -> ZoomLevel | None:
        return self._zoom

    @property
    def pending(self) -> ZoomLevel | None:
        """Zoom level whose re-aggregated data is still outstanding."""
        return self._pending

    @property
    def displayed(self) -> ZoomLevel | None:
        """Zoom level of the data currently on display."""
        return self._displayed

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def chart_id(self) -> str | None:
        return self._chart_id

    def reset(self, spec: ChartBase | None) -> None:
        """Start over for *spec*; outstanding requests become stale."""
        self._epoch += 1
        self._pending = None
        self._chart_id = spec.id if spec is not None else None
        self._zoom = spec.zoom if spec is not None else None
        self._displayed = self._zoom

    def sync(self, spec: ChartBase) -> bool:
        """Adopt *spec*; returns ``True`` when it reset the controller."""
        if spec.id != self._chart_id:
            self.reset(spec)
            return True
        if spec.zoom is not None:
            self._zoom = spec.zoom
            self._displayed = spec.zoom
        self._pending = None
        return False

    # -- Transitions --------------------------------------------------------

    async def select(self, level: ZoomLevel | str) -> ChartBase | None:
        """Switch to *level* and fetch re-aggregated data for it.

        Returns the new specification, or ``None`` when there is nothing
        to apply (no change, no callback, or a stale result). Exceptions
        from the callback propagate after the previous level is restored.
        """
        level = ZoomLevel(level)
        if self._zoom is None:
            logger.debug("Ignoring zoom %s: chart %r has no timeframe", level.value, self._chart_id)
            return None
        if level == self._zoom:
            return None

        self._zoom = level
        if self._on_zoom_change is None:
            self._displayed = level
            return None

        epoch = self._epoch
        chart_id = self._chart_id or ""
        self._pending = level
        try:
            result = self._on_zoom_change(chart_id, level)
            if inspect.isawaitable(result):
                result = await result
            if epoch != self._epoch or self._zoom != level:
                logger.debug("Discarding stale %s result for chart %r", level.value, chart_id)
                return None
            spec = parse_specification(result) if result is not None else None
        except Exception:
            # Fall back to the level whose data is still on display
            if epoch == self._epoch and self._zoom == level:
                self._pending = None
                self._zoom = self._displayed
            raise

        self._pending = None
        if spec is None:
            return None
        if spec.id != chart_id:
            logger.debug("Discarding result for chart %r: expected %r", spec.id, chart_id)
            return None
        return spec

    async def zoom_in(self) -> ChartBase | None:
        """One level finer (towards ``day``)."""
        if self._zoom is None:
            return None
        return await self.select(self._zoom.finer())

    async def zoom_out(self) -> ChartBase | None:
        """One level coarser (towards ``year``)."""
        if self._zoom is None:
            return None
        return await self.select(self._zoom.coarser())

    async def handle_pinch(self, scale: float) -> ChartBase | None:
        """Map a finished pinch gesture onto a zoom step."""
        if scale > PINCH_IN_THRESHOLD:
            return await self.zoom_in()
        if scale < PINCH_OUT_THRESHOLD:
            return await self.zoom_out()
        return None
