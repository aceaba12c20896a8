"""Grouped bar chart: one cluster per category, one bar per series."""

from __future__ import annotations

from ..core.geometry import BarRect, DrawPlan, LegendEntry
from ..core.models import BarSpec, ChartType
from ..core.scales import nice_scale, sparse_labels
from .base import BaseRenderer, Padding
from .themes import Theme

# Share of a category slot taken up by its bar cluster
_CLUSTER_FILL = 0.7


class BarRenderer(BaseRenderer):
    chart_type = ChartType.BAR
    padding = Padding(top=12, right=12, bottom=4, left=36)

    def _build(self, spec: BarSpec, width: float, theme: Theme) -> DrawPlan:  # type: ignore[override]
        all_values = [v for s in spec.series for v in s.values]
        if not all_values:
            scale = nice_scale(0, 1)
            guides, texts = self._y_grid(scale, width, theme)
            return DrawPlan(
                chart_type=self.chart_type.value,
                width=width,
                height=self.chart_height,
                guides=tuple(guides),
                texts=tuple(texts),
                ticks=scale.ticks,
            )

        # Bars grow from zero, so zero is always inside the scale
        scale = nice_scale(min(0.0, min(all_values)), max(0.0, max(all_values)))
        chart_w = self.inner_width(width)
        num_slots = max(len(s.data) for s in spec.series)
        num_series = len(spec.series)
        slot_w = chart_w / num_slots
        bar_w = min(slot_w * _CLUSTER_FILL / num_series, self.settings.bar_width_cap)
        gap = self.settings.bar_gap
        baseline = self._value_y(0, scale)
        labels = spec.labels if spec.labels is not None else [str(i) for i in range(num_slots)]

        rects: list[BarRect] = []
        for si, series in enumerate(spec.series):
            color = theme.series_color(si, series.color)
            offset = (si - (num_series - 1) / 2) * (bar_w + gap)
            for i, v in enumerate(series.data):
                if v is None:
                    continue
                group_x = self.padding.left + i * slot_w + slot_w / 2
                # Floor to 1px so near-zero bars stay visible and tappable
                h = max(abs(baseline - self._value_y(v, scale)), 1.0)
                y = baseline - h if v >= 0 else baseline
                rects.append(BarRect(
                    x=group_x + offset - bar_w / 2,
                    y=y,
                    width=bar_w,
                    height=h,
                    value=v,
                    label=labels[i] if i < len(labels) else "",
                    color=color,
                    series_index=si,
                    index=i,
                ))

        guides, texts = self._y_grid(scale, width, theme)

        legend: tuple[LegendEntry, ...] = ()
        if num_series > 1:
            legend = tuple(
                LegendEntry(label=s.label, color=theme.series_color(i, s.color))
                for i, s in enumerate(spec.series)
            )

        return DrawPlan(
            chart_type=self.chart_type.value,
            width=width,
            height=self.chart_height,
            rects=tuple(rects),
            guides=tuple(guides),
            texts=tuple(texts),
            labels=tuple(sparse_labels(labels, self.settings.bar_label_count)),
            legend=legend,
            ticks=scale.ticks,
        )
