"""Multi-series line chart with gradient fill, annotations and markers.

Missing samples (``None``) never shift index alignment: sample *i* is
always drawn at the x position of slot *i*. How a gap is drawn depends
on ``RenderSettings.null_policy``:

- ``break`` ends the current sub-path; the next sample starts a new one.
- ``hold`` carries the previous sample's height across the gap.

Either way a missing sample gets no marker and is not a hit target.
"""

from __future__ import annotations

import logging

from ..core.geometry import DrawPlan, GuideLine, LegendEntry, PathShape, PlotPoint, TextLabel
from ..core.models import AnnotationKind, ChartType, LineSpec
from ..core.scales import Scale, map_range, nice_scale, sparse_labels
from .base import BaseRenderer, Padding
from .themes import Theme

logger = logging.getLogger(__name__)

_ANNOTATION_SLOTS = {
    AnnotationKind.EVENT: "warning",
    AnnotationKind.ANOMALY: "error",
    AnnotationKind.THRESHOLD: "text_secondary",
}


def _line_path(run: list[tuple[float, float]]) -> str:
    return " ".join(
        f"{'M' if i == 0 else 'L'} {x} {y}" for i, (x, y) in enumerate(run)
    )


def _area_path(run: list[tuple[float, float]], bottom: float) -> str:
    """The line path closed down to the chart's bottom edge."""
    first_x = run[0][0]
    last_x = run[-1][0]
    return f"{_line_path(run)} L {last_x} {bottom} L {first_x} {bottom} Z"


class LineRenderer(BaseRenderer):
    chart_type = ChartType.LINE
    padding = Padding(top=16, right=12, bottom=24, left=36)

    def _build(self, spec: LineSpec, width: float, theme: Theme) -> DrawPlan:  # type: ignore[override]
        chart_w = self.inner_width(width)
        chart_h = self.inner_height
        bottom = self.padding.top + chart_h

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

        scale = nice_scale(min(all_values), max(all_values))
        max_len = max(len(s.data) for s in spec.series)
        axis_labels = spec.labels if spec.labels is not None else [str(i) for i in range(max_len)]

        def slot_x(i: int) -> float:
            return self.padding.left + map_range(i, 0, max_len - 1, 0, chart_w)

        points: list[PlotPoint] = []
        paths: list[PathShape] = []
        for si, series in enumerate(spec.series):
            color = theme.series_color(si, series.color)
            show_markers = len(series.data) <= self.settings.marker_threshold
            runs = self._runs(series.data, scale, slot_x)

            for i, v in enumerate(series.data):
                if v is None:
                    continue
                if spec.labels is not None and i < len(spec.labels):
                    label = spec.labels[i]
                else:
                    label = series.label
                points.append(PlotPoint(
                    x=slot_x(i),
                    y=self._value_y(v, scale),
                    value=v,
                    label=label,
                    color=color,
                    series_index=si,
                    index=i,
                    marker=show_markers,
                ))

            runs = [r for r in runs if r]
            if runs:
                paths.append(PathShape(
                    d=" ".join(_area_path(r, bottom) for r in runs),
                    fill=color,
                    gradient=True,
                ))
                paths.append(PathShape(
                    d=" ".join(_line_path(r) for r in runs),
                    stroke=color,
                ))

        guides, texts = self._y_grid(scale, width, theme)
        self._annotations(spec, slot_x, theme, guides, texts)

        legend: tuple[LegendEntry, ...] = ()
        if len(spec.series) > 1:
            legend = tuple(
                LegendEntry(label=s.label, color=theme.series_color(i, s.color))
                for i, s in enumerate(spec.series)
            )

        return DrawPlan(
            chart_type=self.chart_type.value,
            width=width,
            height=self.chart_height,
            points=tuple(points),
            paths=tuple(paths),
            guides=tuple(guides),
            texts=tuple(texts),
            labels=tuple(sparse_labels(axis_labels, self.settings.line_label_count)),
            legend=legend,
            ticks=scale.ticks,
        )

    # -- Internal -----------------------------------------------------------

    def _runs(self, data, scale: Scale, slot_x) -> list[list[tuple[float, float]]]:
        """Split a series into contiguous drawable vertex runs."""
        hold = self.settings.null_policy == "hold"
        runs: list[list[tuple[float, float]]] = [[]]
        last_y: float | None = None
        for i, v in enumerate(data):
            if v is None:
                if hold and last_y is not None:
                    runs[-1].append((slot_x(i), last_y))
                elif runs[-1]:
                    runs.append([])
                continue
            last_y = self._value_y(v, scale)
            runs[-1].append((slot_x(i), last_y))
        return runs

    def _annotations(
        self,
        spec: LineSpec,
        slot_x,
        theme: Theme,
        guides: list[GuideLine],
        texts: list[TextLabel],
    ) -> None:
        labels = spec.labels or []
        top = self.padding.top
        bottom = top + self.inner_height
        for ann in spec.annotations:
            if ann.date not in labels:
                logger.debug("Dropping annotation %r: no axis label %r", ann.label, ann.date)
                continue
            x = slot_x(labels.index(ann.date))
            color = theme.hex(_ANNOTATION_SLOTS.get(ann.type, "warning"))
            guides.append(GuideLine(
                x1=x, y1=top, x2=x, y2=bottom,
                color=color, dashed=True, label=ann.label,
            ))
            texts.append(TextLabel(x=x + 4, y=top - 2, text=ann.label, color=color))
