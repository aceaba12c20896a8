"""Pydantic models for declarative chart specifications.

A chart specification is a JSON object tagged by ``type``. The models
here form the intermediate representation between the block extractor
(or a fetch result) and the renderers. Every renderer consumes exactly
one specification variant.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from ..errors import SpecificationError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ChartType(str, Enum):
    """Supported chart kinds."""
    LINE = "line"
    BAR = "bar"
    SCATTER = "scatter"
    HEATMAP = "heatmap"
    DISTRIBUTION = "distribution"
    COMPARISON = "comparison"


class ZoomLevel(str, Enum):
    """Aggregation granularity, ordered finest to coarsest."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @property
    def rank(self) -> int:
        return ZOOM_ORDER.index(self)

    def finer(self) -> ZoomLevel:
        """The next finer level, or ``self`` at the finest end."""
        return ZOOM_ORDER[max(self.rank - 1, 0)]

    def coarser(self) -> ZoomLevel:
        """The next coarser level, or ``self`` at the coarsest end."""
        return ZOOM_ORDER[min(self.rank + 1, len(ZOOM_ORDER) - 1)]


ZOOM_ORDER: list[ZoomLevel] = [
    ZoomLevel.DAY,
    ZoomLevel.WEEK,
    ZoomLevel.MONTH,
    ZoomLevel.QUARTER,
    ZoomLevel.YEAR,
]


class AnnotationKind(str, Enum):
    EVENT = "event"
    THRESHOLD = "threshold"
    ANOMALY = "anomaly"


# ---------------------------------------------------------------------------
# Shared building blocks
# ---------------------------------------------------------------------------

class SpecModel(BaseModel):
    """Base for all specification models: camelCase JSON, immutable, finite numbers."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )


class Series(SpecModel):
    """An ordered run of samples; ``None`` marks a missing sample."""
    label: str = ""
    data: list[Optional[float]] = Field(default_factory=list)
    color: Optional[str] = None

    @property
    def values(self) -> list[float]:
        return [v for v in self.data if v is not None]


class Timeframe(SpecModel):
    start: str = ""
    end: str = ""
    zoom: ZoomLevel = ZoomLevel.WEEK


class Annotation(SpecModel):
    """A vertical marker placed at the axis label equal to ``date``."""
    date: str
    label: str = ""
    type: AnnotationKind = AnnotationKind.EVENT


class DataPoint(SpecModel):
    x: float
    y: float
    label: Optional[str] = None


class ColorScale(SpecModel):
    low: str
    high: str


class ComparisonMetric(SpecModel):
    label: str
    value_a: float
    value_b: float
    unit: Optional[str] = None
    higher_is_better: bool = True


# ---------------------------------------------------------------------------
# Chart variants
# ---------------------------------------------------------------------------

class ChartBase(SpecModel):
    """Fields common to every chart kind."""
    id: str = ""
    title: str
    insight: Optional[str] = None
    theme: Optional[dict[str, str]] = None  # partial color override

    @property
    def chart_type(self) -> ChartType:
        return ChartType(self.type)  # type: ignore[attr-defined]

    @property
    def zoom(self) -> ZoomLevel | None:
        """Current zoom for timeframe-bearing charts, else ``None``."""
        timeframe = getattr(self, "timeframe", None)
        return timeframe.zoom if timeframe is not None else None


class LineSpec(ChartBase):
    type: Literal["line"] = "line"
    series: list[Series] = Field(default_factory=list)
    labels: Optional[list[str]] = None
    timeframe: Optional[Timeframe] = None
    annotations: list[Annotation] = Field(default_factory=list)


class BarSpec(ChartBase):
    type: Literal["bar"] = "bar"
    series: list[Series] = Field(default_factory=list)
    labels: Optional[list[str]] = None
    timeframe: Optional[Timeframe] = None


class ScatterSpec(ChartBase):
    type: Literal["scatter"] = "scatter"
    x_label: str = ""
    y_label: str = ""
    points: list[DataPoint] = Field(default_factory=list)
    trend_line: bool = False


class HeatmapSpec(ChartBase):
    type: Literal["heatmap"] = "heatmap"
    x_labels: list[str] = Field(default_factory=list)
    y_labels: list[str] = Field(default_factory=list)
    values: list[list[float]] = Field(default_factory=list)
    color_scale: Optional[ColorScale] = None


class DistributionSpec(ChartBase):
    type: Literal["distribution"] = "distribution"
    label: str = ""
    values: list[float] = Field(default_factory=list)
    bins: Optional[int] = Field(default=None, ge=1)
    mean: Optional[float] = None


class ComparisonSpec(ChartBase):
    type: Literal["comparison"] = "comparison"
    label_a: str = "A"
    label_b: str = "B"
    metrics: list[ComparisonMetric] = Field(default_factory=list)


ChartSpecification = Annotated[
    Union[LineSpec, BarSpec, ScatterSpec, HeatmapSpec, DistributionSpec, ComparisonSpec],
    Field(discriminator="type"),
]

_SPEC_ADAPTER: TypeAdapter[Any] = TypeAdapter(ChartSpecification)

_KNOWN_TYPES = {t.value for t in ChartType}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_specification(source: str | bytes | Mapping[str, Any] | ChartBase) -> ChartBase:
    """Parse JSON text or a mapping into a chart specification.

    Raises ``SpecificationError`` for malformed JSON, a missing or
    unknown ``type``, or fields that fail validation.
    """
    if isinstance(source, ChartBase):
        return source

    raw: str | None = None
    if isinstance(source, (str, bytes)):
        raw = source.decode("utf-8", errors="replace") if isinstance(source, bytes) else source
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Malformed chart specification: %s", exc)
            raise SpecificationError("Could not render visualization", raw=raw) from exc
    else:
        payload = dict(source)

    if not isinstance(payload, dict):
        raise SpecificationError("Could not render visualization", raw=raw)

    chart_type = payload.get("type")
    if not isinstance(chart_type, str) or chart_type not in _KNOWN_TYPES:
        logger.warning("Unknown chart type: %r", chart_type)
        raise SpecificationError(f"Unknown chart type: {chart_type}", raw=raw)

    try:
        return _SPEC_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        logger.warning("Invalid %s specification: %s", chart_type, exc)
        raise SpecificationError(
            f"Invalid {chart_type} specification", raw=raw
        ) from exc
