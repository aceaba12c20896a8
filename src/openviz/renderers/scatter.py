"""Scatter plot with an optional least-squares trend line."""

from __future__ import annotations

from ..core.geometry import DrawPlan, GuideLine, PlotPoint, TextLabel
from ..core.models import ChartType, ScatterSpec
from ..core.scales import format_axis_value, map_range, nice_scale
from .base import BaseRenderer, Padding
from .themes import Theme

_TICKS = 4


def _least_squares(xs: list[float], ys: list[float]) -> tuple[float, float] | None:
    """Return ``(slope, intercept)``, or ``None`` when x has no spread."""
    n = len(xs)
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_x2 = sum(x * x for x in xs)
    denom = n * sum_x2 - sum_x * sum_x
    if denom == 0:
        return None
    slope = (n * sum_xy - sum_x * sum_y) / denom
    return slope, (sum_y - slope * sum_x) / n


class ScatterRenderer(BaseRenderer):
    chart_type = ChartType.SCATTER
    padding = Padding(top=12, right=12, bottom=24, left=36)

    def _build(self, spec: ScatterSpec, width: float, theme: Theme) -> DrawPlan:  # type: ignore[override]
        chart_w = self.inner_width(width)
        accent = theme.hex("accent")
        muted = theme.hex("text_secondary")

        if not spec.points:
            y_scale = nice_scale(0, 1, _TICKS)
            guides, texts = self._y_grid(y_scale, width, theme)
            return DrawPlan(
                chart_type=self.chart_type.value,
                width=width,
                height=self.chart_height,
                guides=tuple(guides),
                texts=tuple(texts),
                ticks=y_scale.ticks,
            )

        xs = [p.x for p in spec.points]
        ys = [p.y for p in spec.points]
        x_scale = nice_scale(min(xs), max(xs), _TICKS)
        y_scale = nice_scale(min(ys), max(ys), _TICKS)

        def px(x: float) -> float:
            return self.padding.left + map_range(x, x_scale.min, x_scale.max, 0, chart_w)

        points = tuple(
            PlotPoint(
                x=px(p.x),
                y=self._value_y(p.y, y_scale),
                value=p.y,
                label=p.label if p.label is not None else f"{spec.x_label}: {p.x:.1f}",
                color=accent,
                index=i,
            )
            for i, p in enumerate(spec.points)
        )

        guides, texts = self._y_grid(y_scale, width, theme)

        if spec.trend_line and len(spec.points) >= 2:
            fit = _least_squares(xs, ys)
            if fit is not None:
                slope, intercept = fit
                guides.append(GuideLine(
                    x1=px(x_scale.min),
                    y1=self._value_y(slope * x_scale.min + intercept, y_scale),
                    x2=px(x_scale.max),
                    y2=self._value_y(slope * x_scale.max + intercept, y_scale),
                    color=accent,
                    dashed=True,
                    label="trend",
                ))

        bottom = self.chart_height - 4
        texts.append(TextLabel(x=self.padding.left, y=bottom, text=spec.x_label, color=muted))
        texts.append(TextLabel(
            x=width - self.padding.right, y=bottom, text=spec.y_label, color=muted, anchor="end",
        ))

        return DrawPlan(
            chart_type=self.chart_type.value,
            width=width,
            height=self.chart_height,
            points=points,
            guides=tuple(guides),
            texts=tuple(texts),
            labels=tuple(format_axis_value(t) for t in x_scale.ticks),
            ticks=y_scale.ticks,
        )
