"""Tests for the scatter, heatmap, distribution and comparison renderers,
the type dispatcher and the card container."""

from __future__ import annotations

import json

import pytest

from openviz.core.models import ChartType, ZoomLevel, parse_specification
from openviz.renderers import RENDERERS, get_renderer, render_chart, render_plan
from openviz.renderers.comparison import compare_metric
from openviz.renderers.container import (
    SKELETON_BARS,
    compose_card,
    loading_card,
    placeholder_card,
    zoom_selector,
)
from openviz.renderers.themes import DARK_THEME, LIGHT_THEME


def _render(payload, width=320, theme=DARK_THEME):
    spec = parse_specification({"title": "t", **payload})
    return render_plan(spec, width, theme)


# ---------------------------------------------------------------------------
# Scatter
# ---------------------------------------------------------------------------

class TestScatter:
    @pytest.fixture
    def linear(self):
        return {
            "type": "scatter",
            "xLabel": "Sleep",
            "yLabel": "HRV",
            "points": [{"x": x, "y": 2 * x} for x in (1, 2, 3, 4)],
            "trendLine": True,
        }

    def test_points_span_the_plot(self, linear):
        plan = _render(linear)
        assert plan.points[0].x == pytest.approx(36)
        assert plan.points[-1].x == pytest.approx(308)
        assert plan.points[0].y == pytest.approx(136)
        assert plan.points[-1].y == pytest.approx(12)

    def test_trend_line_endpoints(self, linear):
        plan = _render(linear)
        trend = [g for g in plan.guides if g.label == "trend"]
        assert len(trend) == 1
        line = trend[0]
        assert line.dashed is True
        assert (line.x1, line.y1) == pytest.approx((36, 136))
        assert (line.x2, line.y2) == pytest.approx((308, 12))

    def test_no_trend_without_flag(self, linear):
        linear["trendLine"] = False
        plan = _render(linear)
        assert not [g for g in plan.guides if g.label == "trend"]

    def test_no_trend_when_x_is_constant(self):
        plan = _render({
            "type": "scatter",
            "points": [{"x": 3, "y": 1}, {"x": 3, "y": 5}],
            "trendLine": True,
        })
        assert not [g for g in plan.guides if g.label == "trend"]
        assert len(plan.points) == 2

    def test_point_labels(self):
        plan = _render({
            "type": "scatter",
            "xLabel": "Sleep",
            "points": [{"x": 7.25, "y": 40}, {"x": 8, "y": 45, "label": "Sat"}],
        })
        assert plan.points[0].label == "Sleep: 7.2"
        assert plan.points[1].label == "Sat"

    def test_axis_titles(self, linear):
        plan = _render(linear)
        texts = {t.text for t in plan.texts}
        assert {"Sleep", "HRV"} <= texts

    def test_empty(self):
        plan = _render({"type": "scatter", "points": []})
        assert plan.points == ()


# ---------------------------------------------------------------------------
# Heatmap
# ---------------------------------------------------------------------------

class TestHeatmap:
    @pytest.fixture
    def grid(self):
        return {
            "type": "heatmap",
            "xLabels": ["0h", "1h", "2h"],
            "yLabels": ["Mon"],
            "values": [[0, 5, 10]],
            "colorScale": {"low": "#000000", "high": "#ffffff"},
        }

    def test_colors_interpolate(self, grid):
        plan = _render(grid)
        assert [r.color for r in plan.rects] == ["#000000", "#808080", "#ffffff"]

    def test_cell_layout(self, grid):
        plan = _render(grid)
        assert [r.x for r in plan.rects] == [32, 52, 72]
        assert {r.width for r in plan.rects} == {18}
        assert plan.height == 14 + 20

    def test_cell_labels(self, grid):
        plan = _render(grid)
        assert plan.rects[1].label == "Mon 1h"
        assert plan.rects[1].value == 5

    def test_cells_shrink_to_fit(self):
        plan = _render({
            "type": "heatmap",
            "values": [list(range(24))],
        }, width=200)
        cell = plan.rects[0].width
        assert cell < 18
        assert plan.rects[-1].x + cell <= 200

    def test_flat_values_use_low_color(self, grid):
        grid["values"] = [[3, 3, 3]]
        plan = _render(grid)
        assert {r.color for r in plan.rects} == {"#000000"}

    def test_theme_colors_by_default(self, grid):
        del grid["colorScale"]
        plan = _render(grid)
        assert plan.rects[0].color == DARK_THEME.hex("surface")
        assert plan.rects[-1].color == DARK_THEME.hex("accent")

    def test_bad_color_scale_falls_back(self, grid):
        grid["colorScale"] = {"low": "nope", "high": "#fff"}
        plan = _render(grid)
        assert plan.rects[0].color == DARK_THEME.hex("surface")


# ---------------------------------------------------------------------------
# Distribution
# ---------------------------------------------------------------------------

class TestDistribution:
    @pytest.fixture
    def sleep(self):
        return {
            "type": "distribution",
            "label": "Sleep",
            "values": [1, 2, 2, 3, 3, 3, 4, 4, 5],
            "bins": 5,
            "mean": 3,
        }

    def test_bins(self, sleep):
        plan = _render(sleep)
        assert plan.height == 140
        assert [r.value for r in plan.rects] == [1, 2, 3, 2, 1]
        tallest = plan.rects[2]
        assert tallest.y == pytest.approx(8)
        assert tallest.height == pytest.approx(112)

    def test_bin_labels(self, sleep):
        plan = _render(sleep)
        assert plan.rects[0].label == "1.0–1.8"

    def test_mean_marker(self, sleep):
        plan = _render(sleep)
        (mean,) = [g for g in plan.guides if g.label == "mean"]
        assert mean.x1 == pytest.approx(160)
        assert mean.dashed is True
        assert mean.color == DARK_THEME.hex("warning")
        assert plan.labels == ("1.0", "avg 3.0", "5.0")

    def test_no_mean(self, sleep):
        del sleep["mean"]
        plan = _render(sleep)
        assert plan.guides == ()
        assert plan.labels == ("1.0", "5.0")

    def test_default_bin_count(self, sleep):
        del sleep["bins"]
        assert len(_render(sleep).rects) == 10

    def test_empty_values(self):
        plan = _render({"type": "distribution", "values": []})
        assert plan.rects == ()


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

class TestComparison:
    @pytest.fixture
    def weeks(self):
        return {
            "type": "comparison",
            "labelA": "Last week",
            "labelB": "This week",
            "metrics": [
                {"label": "Sleep", "valueA": 8, "valueB": 10, "unit": "h"},
                {"label": "RHR", "valueA": 60, "valueB": 58, "higherIsBetter": False},
                {"label": "Steps", "valueA": 5000, "valueB": 5000},
            ],
        }

    def test_rows(self, weeks):
        plan = _render(weeks)
        sleep, rhr, steps = plan.rows
        assert sleep.delta_text == "+25%"
        assert sleep.text_a == "8.0 h"
        assert sleep.better is True
        assert sleep.color == DARK_THEME.hex("success")
        assert rhr.diff == -2
        assert rhr.better is True
        assert rhr.delta_text == "-3%"
        assert steps.color == DARK_THEME.hex("text_secondary")

    def test_worse_is_error_colored(self, weeks):
        weeks["metrics"] = [{"label": "HRV", "valueA": 50, "valueB": 40}]
        (row,) = _render(weeks).rows
        assert row.better is False
        assert row.color == DARK_THEME.hex("error")
        assert row.delta_text == "-20%"

    def test_header_and_height(self, weeks):
        plan = _render(weeks)
        assert plan.labels == ("Last week", "This week", "Change")
        assert plan.height == 20 + 24 * 3

    def test_zero_baseline(self):
        spec = parse_specification({
            "type": "comparison",
            "title": "t",
            "metrics": [{"label": "x", "valueA": 0, "valueB": 3}],
        })
        diff, pct, better = compare_metric(spec.metrics[0])
        assert (diff, pct, better) == (3, 0, True)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class TestDispatch:
    def test_every_type_has_a_renderer(self):
        assert set(RENDERERS) == set(ChartType)
        for chart_type in ChartType:
            assert get_renderer(chart_type).chart_type is chart_type

    def test_render_chart_from_json(self):
        card = render_chart(json.dumps({"type": "bar", "title": "Steps", "series": [{"data": [1]}]}), 320, DARK_THEME)
        assert card.kind == "chart"
        assert card.title == "Steps"
        assert card.plan.chart_type == "bar"

    def test_malformed_json_placeholder(self):
        card = render_chart("{oops", 320, DARK_THEME)
        assert card.kind == "placeholder"
        assert card.message == "Could not render visualization"
        assert card.plan is None

    def test_unknown_type_placeholder(self):
        card = render_chart({"type": "pie", "title": "t"}, 320, DARK_THEME)
        assert card.kind == "placeholder"
        assert card.message == "Unknown chart type: pie"

    @pytest.mark.parametrize(
        "payload",
        [
            '{"type":"line","title":"t","series":[{"data":[-1e308, 1e308]}]}',
            '{"type":"bar","title":"t","series":[{"data":[-1e308, 1e308]}]}',
            '{"type":"scatter","title":"t","points":[{"x":-1e308,"y":0},{"x":1e308,"y":1}]}',
            '{"type":"distribution","title":"t","values":[-1e308, 1e308]}',
            '{"type":"line","title":"t","series":[{"data":[1, Infinity]}]}',
        ],
    )
    def test_extreme_values_placeholder(self, payload):
        card = render_chart(payload, 320, DARK_THEME)
        assert card.kind == "placeholder"
        assert card.plan is None
        assert card.message in ("Could not render visualization", "Invalid line specification")

    def test_layout_failure_is_logged(self, caplog):
        with caplog.at_level("WARNING", logger="openviz.renderers"):
            card = render_chart(
                {"type": "bar", "title": "t", "series": [{"data": [-1e308, 1e308]}]}, 320, DARK_THEME
            )
        assert card.message == "Could not render visualization"
        assert "Could not lay out bar chart" in caplog.text

    def test_spec_theme_override(self):
        card = render_chart(
            {"type": "bar", "title": "t", "series": [{"data": [1]}], "theme": {"accent": "#ff0000"}},
            320,
            DARK_THEME,
        )
        assert card.plan.rects[0].color == "#ff0000"
        assert card.background == "#ff00000d"

    def test_theme_changes_colors_only(self):
        payload = {"type": "bar", "series": [{"data": [1, 2]}]}
        dark = _render(payload, theme=DARK_THEME)
        light = _render(payload, theme=LIGHT_THEME)
        assert [(r.x, r.y) for r in dark.rects] == [(r.x, r.y) for r in light.rects]
        assert dark.rects[0].color != light.rects[0].color


# ---------------------------------------------------------------------------
# Container
# ---------------------------------------------------------------------------

class TestContainer:
    @pytest.fixture
    def timed(self):
        return parse_specification({
            "type": "line",
            "id": "hrv",
            "title": "HRV",
            "insight": "Up 12% this week",
            "series": [{"data": [1, 2]}],
            "timeframe": {"zoom": "week"},
        })

    def test_compose(self, timed):
        plan = render_plan(timed, 320, DARK_THEME)
        card = compose_card(timed, plan, DARK_THEME)
        assert card.title == "HRV"
        assert card.chart_id == "hrv"
        assert card.insight == "Up 12% this week"
        assert card.insight_color == DARK_THEME.hex("series_cool")
        assert [o.label for o in card.zoom_options] == ["D", "W", "M", "Q", "Y"]
        assert card.active_zoom == ZoomLevel.WEEK

    def test_explicit_zoom_wins(self, timed):
        plan = render_plan(timed, 320, DARK_THEME)
        card = compose_card(timed, plan, DARK_THEME, zoom=ZoomLevel.YEAR, pending=True)
        assert card.active_zoom == ZoomLevel.YEAR
        assert card.pending is True

    def test_no_selector_without_timeframe(self):
        spec = parse_specification({"type": "scatter", "title": "t"})
        card = compose_card(spec, render_plan(spec, 320, DARK_THEME), DARK_THEME)
        assert card.zoom_options == ()
        assert card.insight is None

    def test_zoom_selector_none(self):
        assert zoom_selector(None) == ()

    def test_loading(self):
        card = loading_card(DARK_THEME, "HRV")
        assert card.kind == "loading"
        assert card.skeleton == SKELETON_BARS
        assert card.plan is None

    def test_placeholder(self):
        card = placeholder_card("Could not render visualization", LIGHT_THEME)
        assert card.kind == "placeholder"
        assert card.text_color == LIGHT_THEME.hex("text_secondary")


class TestSleepComparison:
    def test_better_sleep(self):
        plan = _render({
            "type": "comparison",
            "metrics": [{"label": "Sleep", "valueA": 6.0, "valueB": 7.5, "higherIsBetter": True}],
        })
        (row,) = plan.rows
        assert row.pct == pytest.approx(25)
        assert row.delta_text == "+25%"
        assert row.color == DARK_THEME.hex("success")
