"""Tests for the scale & binning library."""

from __future__ import annotations

import math

import pytest

from openviz.core.scales import (
    Scale,
    format_axis_value,
    histogram,
    map_range,
    nice_scale,
    sparse_labels,
)


def _is_nice(step: float) -> bool:
    magnitude = 10 ** math.floor(math.log10(step))
    residual = step / magnitude
    return any(math.isclose(residual, base, rel_tol=1e-9) for base in (1, 2, 5, 10))


# ---------------------------------------------------------------------------
# nice_scale
# ---------------------------------------------------------------------------

class TestNiceScale:
    def test_degenerate_range_is_padded(self):
        assert nice_scale(5, 5) == Scale(min=4, max=6, ticks=(4, 5, 6))

    def test_two_unit_steps(self):
        sc = nice_scale(40, 50)
        assert sc.min == 40
        assert sc.max == 50
        assert sc.ticks == (40, 42, 44, 46, 48, 50)

    def test_expands_outward(self):
        sc = nice_scale(3, 97)
        assert sc.min == 0
        assert sc.max == 100
        assert sc.ticks == (0, 20, 40, 60, 80, 100)

    def test_negative_range(self):
        sc = nice_scale(-7, 3)
        assert sc.ticks == (-8, -6, -4, -2, 0, 2, 4)

    def test_fractional_ticks_have_no_float_drift(self):
        sc = nice_scale(0.1, 0.9)
        assert sc.ticks == (0, 0.2, 0.4, 0.6, 0.8, 1.0)

    def test_custom_tick_count(self):
        sc = nice_scale(1, 3, 4)
        assert sc.step == pytest.approx(0.5)
        assert sc.ticks[0] == 1
        assert sc.ticks[-1] == 3

    @pytest.mark.parametrize(
        "lo,hi",
        [
            (0, 1),
            (40, 52),
            (-3.3, 7.9),
            (0.0012, 0.0175),
            (120, 9870),
            (1e6, 3.5e6),
            (-1000, -10),
            (99.5, 100.25),
            (1e-12, 2e-12),
        ],
    )
    def test_properties(self, lo, hi):
        sc = nice_scale(lo, hi)
        assert sc.min <= lo
        assert sc.max >= hi
        assert all(sc.min <= t <= sc.max for t in sc.ticks)
        diffs = [b - a for a, b in zip(sc.ticks, sc.ticks[1:])]
        assert all(d > 0 for d in diffs)
        assert all(d == pytest.approx(diffs[0], rel=1e-6) for d in diffs)
        assert _is_nice(diffs[0])

    def test_rejects_tiny_tick_count(self):
        with pytest.raises(ValueError):
            nice_scale(0, 10, 1)

    def test_tiny_range_keeps_its_ticks(self):
        sc = nice_scale(1e-12, 2e-12)
        assert sc.min <= 1e-12
        assert sc.max >= 2e-12
        assert sc.min < sc.max
        assert len(sc.ticks) >= 3
        assert len(set(sc.ticks)) == len(sc.ticks)

    @pytest.mark.parametrize(
        "lo,hi",
        [(-1e308, 1e308), (0, math.inf), (-math.inf, 0), (0, math.nan)],
    )
    def test_rejects_unscalable_range(self, lo, hi):
        with pytest.raises(ValueError):
            nice_scale(lo, hi)

    def test_huge_finite_range(self):
        sc = nice_scale(0, 1e308)
        assert sc.min == 0
        assert sc.max >= 1e308
        assert math.isfinite(sc.max)


# ---------------------------------------------------------------------------
# map_range
# ---------------------------------------------------------------------------

class TestMapRange:
    def test_midpoint(self):
        assert map_range(5, 0, 10, 0, 100) == 50

    def test_inverted_output(self):
        assert map_range(10, 0, 10, 100, 0) == 0
        assert map_range(0, 0, 10, 100, 0) == 100

    @pytest.mark.parametrize("value", [-3, 0, 5, 42])
    def test_degenerate_input_maps_to_midpoint(self, value):
        assert map_range(value, 5, 5, 0, 100) == 50

    def test_extrapolates(self):
        assert map_range(20, 0, 10, 0, 100) == 200


# ---------------------------------------------------------------------------
# sparse_labels
# ---------------------------------------------------------------------------

class TestSparseLabels:
    def test_short_list_untouched(self):
        assert sparse_labels(["a", "b", "c"], 4) == ["a", "b", "c"]

    def test_ten_labels_four_slots(self):
        labels = list("abcdefghij")
        out = sparse_labels(labels, 4)
        assert len(out) == 10
        assert out == ["a", None, None, "d", None, None, "g", None, None, "j"]

    def test_last_label_always_kept(self):
        out = sparse_labels([str(i) for i in range(8)], 3)
        assert out[0] == "0"
        assert out[-1] == "7"
        assert out[3] == "3"
        assert out[6] == "6"

    def test_rejects_zero_count(self):
        with pytest.raises(ValueError):
            sparse_labels(["a"], 0)


# ---------------------------------------------------------------------------
# histogram
# ---------------------------------------------------------------------------

class TestHistogram:
    def test_empty(self):
        hist = histogram([])
        assert hist.bins == ()
        assert hist.max == 0

    def test_zero_variance(self):
        hist = histogram([1, 1, 1, 1], 4)
        assert len(hist.bins) == 4
        assert all(b.x1 - b.x0 == 1 for b in hist.bins)
        assert [b.count for b in hist.bins] == [4, 0, 0, 0]
        assert hist.max == 4

    def test_max_value_lands_in_last_bin(self):
        hist = histogram([0, 10], 5)
        assert [b.count for b in hist.bins] == [1, 0, 0, 0, 1]

    def test_peak_near_center(self):
        hist = histogram([1, 2, 2, 3, 3, 3, 4, 4, 5], 5)
        counts = [b.count for b in hist.bins]
        assert counts == [1, 2, 3, 2, 1]
        tallest = hist.bins[counts.index(max(counts))]
        assert tallest.center == pytest.approx(3.0)
        assert hist.start == 1
        assert hist.end == pytest.approx(5)

    def test_counts_sum_to_input_length(self):
        values = [0.3, 7.1, 2.2, 9.9, 5.5, 5.5, 1.0]
        hist = histogram(values, 3)
        assert sum(b.count for b in hist.bins) == len(values)

    def test_rejects_overflowing_range(self):
        with pytest.raises(ValueError):
            histogram([-1e308, 1e308])


# ---------------------------------------------------------------------------
# format_axis_value
# ---------------------------------------------------------------------------

class TestFormatAxisValue:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, "0"),
            (42.0, "42"),
            (-7, "-7"),
            (3.14159, "3.1"),
            (1000, "1.0k"),
            (1500, "1.5k"),
            (-2500, "-2.5k"),
        ],
    )
    def test_format(self, value, expected):
        assert format_axis_value(value) == expected
