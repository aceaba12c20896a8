"""Render settings shared by every renderer and chart view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

NullPolicy = Literal["break", "hold"]


@dataclass(frozen=True)
class RenderSettings:
    """Tunables for rendering, hit-testing and block extraction."""

    chart_height: int = 160

    # Interaction
    hit_radius: float = 40.0
    tooltip_ttl: float = 2.0
    tooltip_width: float = 80.0
    tooltip_offset_y: float = 36.0

    # Line charts
    marker_threshold: int = 14
    line_label_count: int = 6
    null_policy: NullPolicy = "break"

    # Bar charts
    bar_width_cap: float = 24.0
    bar_gap: float = 2.0
    bar_label_count: int = 8

    # Distribution
    default_bins: int = 10

    # Conversational embedding
    fence_tag: str = "delta-viz"

    def __post_init__(self) -> None:
        if self.null_policy not in ("break", "hold"):
            raise ValueError(f"Unknown null policy '{self.null_policy}'")


DEFAULT_SETTINGS = RenderSettings()
