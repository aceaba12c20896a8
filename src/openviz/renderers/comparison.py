"""Side-by-side metric comparison (before/after, A vs B)."""

from __future__ import annotations

from ..core.geometry import ComparisonRow, DrawPlan
from ..core.models import ChartType, ComparisonMetric, ComparisonSpec
from .base import BaseRenderer, Padding
from .themes import Theme

HEADER_HEIGHT = 20.0
ROW_HEIGHT = 24.0


def _format_value(value: float, unit: str | None) -> str:
    return f"{value:.1f} {unit}" if unit else f"{value:.1f}"


def compare_metric(metric: ComparisonMetric) -> tuple[float, float, bool]:
    """Return ``(diff, pct, better)`` for one metric pair.

    ``pct`` is 0 when ``value_a`` is 0. ``better`` follows
    ``higher_is_better`` rather than the raw sign of the change.
    """
    diff = metric.value_b - metric.value_a
    pct = diff / metric.value_a * 100 if metric.value_a != 0 else 0.0
    better = diff > 0 if metric.higher_is_better else diff < 0
    return diff, pct, better


class ComparisonRenderer(BaseRenderer):
    chart_type = ChartType.COMPARISON
    padding = Padding(top=0, right=0, bottom=0, left=0)

    def _build(self, spec: ComparisonSpec, width: float, theme: Theme) -> DrawPlan:  # type: ignore[override]
        rows = []
        for m in spec.metrics:
            diff, pct, better = compare_metric(m)
            if diff == 0:
                color = theme.hex("text_secondary")
            else:
                color = theme.hex("success" if better else "error")
            sign = "+" if diff > 0 else ""
            rows.append(ComparisonRow(
                label=m.label,
                value_a=m.value_a,
                value_b=m.value_b,
                text_a=_format_value(m.value_a, m.unit),
                text_b=_format_value(m.value_b, m.unit),
                diff=diff,
                pct=pct,
                better=better,
                delta_text=f"{sign}{pct:.0f}%",
                color=color,
            ))

        return DrawPlan(
            chart_type=self.chart_type.value,
            width=width,
            height=HEADER_HEIGHT + ROW_HEIGHT * len(rows),
            rows=tuple(rows),
            labels=(spec.label_a, spec.label_b, "Change"),
        )
