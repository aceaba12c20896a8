"""Histogram of raw values with an optional dashed mean marker."""

from __future__ import annotations

from ..core.geometry import BarRect, DrawPlan, GuideLine, TextLabel
from ..core.models import ChartType, DistributionSpec
from ..core.scales import histogram, map_range
from .base import BaseRenderer, Padding
from .themes import Theme


class DistributionRenderer(BaseRenderer):
    chart_type = ChartType.DISTRIBUTION
    padding = Padding(top=8, right=12, bottom=20, left=12)
    height = 140

    def _build(self, spec: DistributionSpec, width: float, theme: Theme) -> DrawPlan:  # type: ignore[override]
        hist = histogram(spec.values, spec.bins or self.settings.default_bins)
        if not hist.bins:
            return DrawPlan(chart_type=self.chart_type.value, width=width, height=self.chart_height)

        chart_w = self.inner_width(width)
        chart_h = self.inner_height
        top = self.padding.top
        slot = chart_w / len(hist.bins)
        accent = theme.hex("accent")
        muted = theme.hex("text_secondary")
        warning = theme.hex("warning")

        rects = []
        for i, b in enumerate(hist.bins):
            h = max(map_range(b.count, 0, hist.max, 0, chart_h), 1.0)
            rects.append(BarRect(
                x=self.padding.left + i * slot + 1,
                y=top + chart_h - h,
                width=max(slot - 2, 0.0),
                height=h,
                value=b.count,
                label=f"{b.x0:.1f}–{b.x1:.1f}",
                color=accent,
                index=i,
            ))

        guides: list[GuideLine] = []
        label_y = self.chart_height - 4
        texts = [TextLabel(x=self.padding.left, y=label_y, text=f"{hist.start:.1f}", color=muted)]
        labels = [f"{hist.start:.1f}"]

        if spec.mean is not None:
            mean_x = self.padding.left + map_range(spec.mean, hist.start, hist.end, 0, chart_w)
            guides.append(GuideLine(
                x1=mean_x, y1=top, x2=mean_x, y2=top + chart_h,
                color=warning, dashed=True, label="mean",
            ))
            mean_text = f"avg {spec.mean:.1f}"
            texts.append(TextLabel(x=mean_x, y=label_y, text=mean_text, color=warning, anchor="middle"))
            labels.append(mean_text)

        texts.append(TextLabel(
            x=width - self.padding.right, y=label_y, text=f"{hist.end:.1f}", color=muted, anchor="end",
        ))
        labels.append(f"{hist.end:.1f}")

        return DrawPlan(
            chart_type=self.chart_type.value,
            width=width,
            height=self.chart_height,
            rects=tuple(rects),
            guides=tuple(guides),
            texts=tuple(texts),
            labels=tuple(labels),
        )
