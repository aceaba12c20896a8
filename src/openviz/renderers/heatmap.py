"""Grid heatmap for weekly / hourly patterns."""

from __future__ import annotations

import logging

from ..core.geometry import BarRect, DrawPlan, TextLabel
from ..core.models import ChartType, HeatmapSpec
from .base import BaseRenderer, Padding
from .themes import RGB, Theme, hex_to_rgb, interpolate_rgb, rgb_to_hex

logger = logging.getLogger(__name__)

CELL_SIZE = 18.0
CELL_GAP = 2.0
_MIN_CELL = 4.0


class HeatmapRenderer(BaseRenderer):
    chart_type = ChartType.HEATMAP
    # left holds the row labels, top the column labels
    padding = Padding(top=14, right=0, bottom=0, left=32)

    def _build(self, spec: HeatmapSpec, width: float, theme: Theme) -> DrawPlan:  # type: ignore[override]
        low, high = self._color_range(spec, theme)
        muted = theme.hex("text_secondary")
        rows = len(spec.values)
        cols = max((len(r) for r in spec.values), default=0)

        cell = CELL_SIZE
        if cols:
            fit = self.inner_width(width) / cols - CELL_GAP
            cell = max(min(CELL_SIZE, fit), _MIN_CELL)
        pitch = cell + CELL_GAP

        flat = [v for row in spec.values for v in row]
        lo = min(flat, default=0.0)
        hi = max(flat, default=0.0)
        span = hi - lo

        rects: list[BarRect] = []
        for ri, row in enumerate(spec.values):
            y_label = spec.y_labels[ri] if ri < len(spec.y_labels) else ""
            for ci, value in enumerate(row):
                x_label = spec.x_labels[ci] if ci < len(spec.x_labels) else ""
                t = (value - lo) / span if span else 0.0
                rects.append(BarRect(
                    x=self.padding.left + ci * pitch,
                    y=self.padding.top + ri * pitch,
                    width=cell,
                    height=cell,
                    value=value,
                    label=" ".join(part for part in (y_label, x_label) if part),
                    color=rgb_to_hex(interpolate_rgb(t, low, high)),
                    series_index=ri,
                    index=ci,
                ))

        texts: list[TextLabel] = []
        for ci, label in enumerate(spec.x_labels):
            texts.append(TextLabel(
                x=self.padding.left + ci * pitch + cell / 2,
                y=self.padding.top - 4,
                text=label,
                color=muted,
                anchor="middle",
            ))
        for ri, label in enumerate(spec.y_labels):
            texts.append(TextLabel(
                x=self.padding.left - 4,
                y=self.padding.top + ri * pitch + cell / 2 + 3,
                text=label,
                color=muted,
                anchor="end",
            ))

        return DrawPlan(
            chart_type=self.chart_type.value,
            width=width,
            height=self.padding.top + rows * pitch,
            rects=tuple(rects),
            texts=tuple(texts),
            labels=tuple(spec.x_labels),
        )

    @staticmethod
    def _color_range(spec: HeatmapSpec, theme: Theme) -> tuple[RGB, RGB]:
        low = theme.colors.surface
        high = theme.colors.accent
        if spec.color_scale is not None:
            try:
                low = hex_to_rgb(spec.color_scale.low)
                high = hex_to_rgb(spec.color_scale.high)
            except ValueError:
                logger.debug("Ignoring unparsable heatmap color scale %r", spec.color_scale)
                low, high = theme.colors.surface, theme.colors.accent
        return low, high
