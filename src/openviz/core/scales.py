"""Axis scaling, tick generation and binning utilities.

Every function here is pure and deterministic; renderers call them on
each pass and never cache the results.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Sequence

# Ticks are rounded to this many decimal places below the step to remove float drift
_TICK_PRECISION = 10


@dataclass(frozen=True)
class Scale:
    """An axis range with evenly spaced ticks."""

    min: float
    max: float
    ticks: tuple[float, ...]

    @property
    def step(self) -> float:
        if len(self.ticks) < 2:
            return 0.0
        return self.ticks[1] - self.ticks[0]


@dataclass(frozen=True)
class Bin:
    """One histogram bucket covering ``[x0, x1)`` (the last is closed)."""

    x0: float
    x1: float
    count: int

    @property
    def center(self) -> float:
        return (self.x0 + self.x1) / 2


@dataclass(frozen=True)
class Histogram:
    bins: tuple[Bin, ...]
    max: int

    @property
    def start(self) -> float:
        return self.bins[0].x0 if self.bins else 0.0

    @property
    def end(self) -> float:
        return self.bins[-1].x1 if self.bins else 0.0


def _nice_step(rough_step: float) -> float:
    """Snap *rough_step* to 1, 2, 5 or 10 times a power of ten."""
    magnitude = 10 ** math.floor(math.log10(rough_step))
    residual = rough_step / magnitude
    if residual <= 1.5:
        return magnitude
    if residual <= 3:
        return 2 * magnitude
    if residual <= 7:
        return 5 * magnitude
    return 10 * magnitude


def nice_scale(min_value: float, max_value: float, tick_count: int = 5) -> Scale:
    """Expand ``[min_value, max_value]`` to round tick boundaries.

    A zero-width range is padded by one unit on each side. Raises
    ``ValueError`` when the bounds, or the range between them, are not
    finite floats.
    """
    if tick_count < 2:
        raise ValueError("tick_count must be at least 2")
    if not (math.isfinite(min_value) and math.isfinite(max_value)):
        raise ValueError(f"Cannot scale non-finite range [{min_value}, {max_value}]")
    if min_value > max_value:
        min_value, max_value = max_value, min_value

    rough_step = (max_value - min_value) / (tick_count - 1)
    if not math.isfinite(rough_step):
        raise ValueError(f"Range [{min_value}, {max_value}] is too wide to scale")
    # Subnormal steps have no power of ten to snap to
    if rough_step < sys.float_info.min:
        return Scale(
            min=min_value - 1,
            max=max_value + 1,
            ticks=(min_value - 1, min_value, max_value + 1),
        )

    step = _nice_step(rough_step)
    # Round relative to the step so tiny ranges keep their ticks
    digits = _TICK_PRECISION - math.floor(math.log10(step))
    nice_min = round(math.floor(min_value / step) * step, digits)
    nice_max = round(math.ceil(max_value / step) * step, digits)
    if not math.isfinite(nice_max - nice_min):
        raise ValueError(f"Range [{min_value}, {max_value}] is too wide to scale")

    # Half-step tolerance absorbs accumulated float error at the top end
    count = int(math.floor((nice_max - nice_min) / step + 0.5)) + 1
    ticks = [round(nice_min + i * step, digits) for i in range(count)]
    ticks[-1] = nice_max
    return Scale(min=nice_min, max=nice_max, ticks=tuple(ticks))


def map_range(
    value: float,
    in_min: float,
    in_max: float,
    out_min: float,
    out_max: float,
) -> float:
    """Affine map of *value* from one interval onto another.

    A degenerate input interval maps everything to the output midpoint.
    """
    if in_max == in_min:
        return (out_min + out_max) / 2
    return out_min + (value - in_min) / (in_max - in_min) * (out_max - out_min)


def sparse_labels(labels: Sequence[str], max_count: int) -> list[str | None]:
    """Null out labels so that at most about *max_count* remain visible.

    The output is always the same length as the input so positions stay
    aligned with data indices. The first and last labels are always kept.
    """
    if max_count < 1:
        raise ValueError("max_count must be at least 1")
    if len(labels) <= max_count:
        return list(labels)
    step = math.ceil(len(labels) / max_count)
    last = len(labels) - 1
    return [
        label if i % step == 0 or i == last else None
        for i, label in enumerate(labels)
    ]


def histogram(values: Sequence[float], bin_count: int = 10) -> Histogram:
    """Bucket *values* into *bin_count* equal-width bins over their range."""
    if bin_count < 1:
        raise ValueError("bin_count must be at least 1")
    if not values:
        return Histogram(bins=(), max=0)

    lo = min(values)
    hi = max(values)
    width = (hi - lo) / bin_count or 1
    if not math.isfinite(width):
        raise ValueError(f"Cannot bin non-finite range [{lo}, {hi}]")

    counts = [0] * bin_count
    for v in values:
        idx = min(int(math.floor((v - lo) / width)), bin_count - 1)
        counts[idx] += 1

    bins = tuple(
        Bin(x0=lo + i * width, x1=lo + (i + 1) * width, count=c)
        for i, c in enumerate(counts)
    )
    return Histogram(bins=bins, max=max(counts))


def format_axis_value(value: float) -> str:
    """Compact axis label: ``1.5k``, ``42``, ``3.1``."""
    if abs(value) >= 1000:
        return f"{value / 1000:.1f}k"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"
