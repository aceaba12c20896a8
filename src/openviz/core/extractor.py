"""Split conversational text into prose and chart-specification segments.

Chart specifications are embedded as fenced blocks tagged with the
reserved fence tag::

    Here is your week:

    ```delta-viz
    {"type": "line", "title": "HRV", ...}
    ```

Segments preserve source order, and joining every segment's ``raw``
text reproduces the input exactly.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Union

from pydantic import BaseModel

from ..config import DEFAULT_SETTINGS


# ---------------------------------------------------------------------------
# Segment models
# ---------------------------------------------------------------------------

class SegmentType(str, Enum):
    PROSE = "prose"
    CHART = "chart"


class ProseSegment(BaseModel):
    """Free text between (or around) chart blocks."""
    type: SegmentType = SegmentType.PROSE
    text: str

    @property
    def raw(self) -> str:
        return self.text


class ChartSegment(BaseModel):
    """A fenced chart block.

    ``spec_text`` is the trimmed inner text; ``source`` is the full
    block including both delimiters.
    """
    type: SegmentType = SegmentType.CHART
    spec_text: str
    source: str

    @property
    def raw(self) -> str:
        return self.source


Segment = Union[ProseSegment, ChartSegment]


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------

def _block_pattern(fence_tag: str) -> re.Pattern[str]:
    return re.compile(r"```" + re.escape(fence_tag) + r"\s*\n([\s\S]*?)```")


class BlockExtractor:
    """Locate fenced chart blocks in free-form text."""

    def __init__(self, fence_tag: str = DEFAULT_SETTINGS.fence_tag) -> None:
        self.fence_tag = fence_tag
        self._pattern = _block_pattern(fence_tag)

    def extract(self, text: str) -> list[Segment]:
        """Return the alternating prose / chart segments of *text*."""
        segments: list[Segment] = []
        cursor = 0

        for match in self._pattern.finditer(text):
            if match.start() > cursor:
                segments.append(ProseSegment(text=text[cursor:match.start()]))
            segments.append(
                ChartSegment(spec_text=match.group(1).strip(), source=match.group(0))
            )
            cursor = match.end()

        if cursor < len(text):
            segments.append(ProseSegment(text=text[cursor:]))

        return segments

    @staticmethod
    def reconstruct(segments: list[Segment]) -> str:
        """Join segments back into the original text."""
        return "".join(s.raw for s in segments)


def extract_segments(text: str, fence_tag: str = DEFAULT_SETTINGS.fence_tag) -> list[Segment]:
    """Convenience wrapper around ``BlockExtractor.extract``."""
    return BlockExtractor(fence_tag).extract(text)
