"""Hit-testing and tooltip lifetime for a rendered chart.

Bars, histogram bins and heatmap cells are hit by exact rectangle
containment. Line and scatter points are hit by nearest Euclidean pixel
distance across every series, accepted only inside the hit radius.

A tooltip dismisses itself after a delay. The delayed dismissal is a
cancelable action: a new hit, a miss, or closing the chart cancels it so
a stale timer can never clear a newer tooltip.
"""

from __future__ import annotations

import asyncio
import math
import threading
from dataclasses import dataclass
from typing import Callable, Protocol, Union

from ..config import DEFAULT_SETTINGS, RenderSettings
from ..core.geometry import BarRect, DrawPlan, PlotPoint

Hit = Union[PlotPoint, BarRect]


class Cancelable(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], Cancelable]


def thread_scheduler(delay: float, callback: Callable[[], None]) -> Cancelable:
    """Run *callback* after *delay* seconds on a daemon timer thread."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def loop_scheduler(loop: asyncio.AbstractEventLoop) -> Scheduler:
    """Scheduler backed by ``loop.call_later`` for asyncio hosts."""
    def schedule(delay: float, callback: Callable[[], None]) -> Cancelable:
        return loop.call_later(delay, callback)
    return schedule


@dataclass(frozen=True)
class TooltipState:
    """A transient annotation. ``x``/``y`` place the tooltip box;
    ``anchor_x``/``anchor_y`` are the element it points at."""
    x: float
    y: float
    value: float
    label: str
    color: str
    anchor_x: float
    anchor_y: float


# ---------------------------------------------------------------------------
# Hit-testing
# ---------------------------------------------------------------------------

def nearest_point(
    points: tuple[PlotPoint, ...], px: float, py: float
) -> tuple[PlotPoint | None, float]:
    """Closest point to ``(px, py)``; ties go to the earliest point."""
    nearest: PlotPoint | None = None
    best = math.inf
    for point in points:
        dist = math.hypot(point.x - px, point.y - py)
        if dist < best:
            best = dist
            nearest = point
    return nearest, best


def hit_test(
    plan: DrawPlan, px: float, py: float, radius: float = DEFAULT_SETTINGS.hit_radius
) -> Hit | None:
    """Resolve a pointer coordinate against a draw plan."""
    if plan.rects:
        for rect in plan.rects:
            if rect.contains(px, py):
                return rect
        return None

    nearest, dist = nearest_point(plan.points, px, py)
    if nearest is not None and dist < radius:
        return nearest
    return None


def tooltip_for(
    plan: DrawPlan, hit: Hit, settings: RenderSettings = DEFAULT_SETTINGS
) -> TooltipState:
    """Build the tooltip for *hit*, clamped inside the chart's width."""
    if isinstance(hit, BarRect):
        anchor_x, anchor_y = hit.x + hit.width / 2, hit.y
    else:
        anchor_x, anchor_y = hit.x, hit.y

    box_w = settings.tooltip_width
    right_limit = max(plan.width - box_w - 4, 4)
    return TooltipState(
        x=max(4, min(anchor_x - box_w / 2, right_limit)),
        y=max(0, anchor_y - settings.tooltip_offset_y),
        value=hit.value,
        label=hit.label,
        color=hit.color,
        anchor_x=anchor_x,
        anchor_y=anchor_y,
    )


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class TooltipController:
    """Owns the tooltip of one chart instance."""

    def __init__(
        self,
        settings: RenderSettings | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.settings = settings or DEFAULT_SETTINGS
        self._schedule = scheduler or thread_scheduler
        self._lock = threading.Lock()
        self._state: TooltipState | None = None
        self._timer: Cancelable | None = None

    @property
    def state(self) -> TooltipState | None:
        return self._state

    def press(self, plan: DrawPlan, px: float, py: float) -> TooltipState | None:
        """Show the tooltip for the element under the pointer, or clear it."""
        hit = hit_test(plan, px, py, self.settings.hit_radius)
        with self._lock:
            self._cancel_timer()
            if hit is None:
                self._state = None
                return None
            state = tooltip_for(plan, hit, self.settings)
            self._state = state
            self._timer = self._schedule(
                self.settings.tooltip_ttl, lambda: self._expire(state)
            )
            return state

    def clear(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._state = None

    def close(self) -> None:
        """Release the pending dismissal when the chart goes away."""
        self.clear()

    # -- Internal -----------------------------------------------------------

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _expire(self, state: TooltipState) -> None:
        with self._lock:
            # Only the tooltip this timer was scheduled for may be cleared
            if self._state is state:
                self._state = None
                self._timer = None
