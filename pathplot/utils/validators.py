"""YAML schema validation for plot job files.

Job schema (``plot_job.v1``): paper rectangle, sampling resolution, driver
options and layers of tagged curves.  Loading fails fast with the offending
key and file path; a job that loads is guaranteed to convert into valid
curve primitives.

Units:
    - Geometry: document units (inches for the AxiDraw), paper frame, +Y up
    - Angles: radians, counter-clockwise from +X

Example job::

    schema_version: plot_job.v1
    name: flowers
    paper: {min_x: 0, max_x: 11, min_y: 0, max_y: 8.5}
    resolution: 0.01
    options: {pen_down_speed: 30, reorder: true}
    layers:
      - name: outline
        curves:
          - {type: line, start: [0, 0], end: [1, 1]}
          - {type: circle, center: [5, 4], radius: 1.5}

Usage:
    from pathplot.utils import validators

    job = validators.load_plot_job("job.yaml")
    frame, layers = job.to_frame(), job.to_layers()
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pathplot.geometry.mapping import PaperFrame
from pathplot.geometry.primitives import (
    FULL_TURN,
    Arc,
    Circle,
    CompositeCurve,
    Ellipse,
    FreeformCurve,
    Layer,
    Line,
    Polyline,
)

SCHEMA_VERSION = "plot_job.v1"

PointSpec = Tuple[float, float]


# ============================================================================
# CURVE SPECS (tagged by ``type``)
# ============================================================================

class _CurveSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")


class LineSpec(_CurveSpec):
    """Straight segment."""
    type: Literal["line"]
    start: PointSpec
    end: PointSpec

    def to_curve(self) -> Line:
        return Line(self.start, self.end)


class CircleSpec(_CurveSpec):
    """Full circle."""
    type: Literal["circle"]
    center: PointSpec
    radius: float = Field(..., gt=0.0, description="Radius (document units)")

    def to_curve(self) -> Circle:
        return Circle(self.center, self.radius)


class PolylineSpec(_CurveSpec):
    """Vertex list; at least two points are needed to draw anything."""
    type: Literal["polyline"]
    points: List[PointSpec]
    closed: bool = False

    def to_curve(self) -> Polyline:
        return Polyline(tuple(self.points), closed=self.closed)


class ArcSpec(_CurveSpec):
    """Circular arc, counter-clockwise from start_angle to end_angle."""
    type: Literal["arc"]
    center: PointSpec
    radius: float = Field(..., gt=0.0)
    start_angle: float
    end_angle: float

    def to_curve(self) -> Arc:
        return Arc(self.center, self.radius, self.start_angle, self.end_angle)


class EllipseSpec(_CurveSpec):
    """Ellipse or elliptical arc (full turn by default)."""
    type: Literal["ellipse"]
    center: PointSpec
    radius_x: float = Field(..., gt=0.0)
    radius_y: float = Field(..., gt=0.0)
    rotation: float = 0.0
    start_angle: float = 0.0
    end_angle: float = FULL_TURN

    def to_curve(self) -> Ellipse:
        return Ellipse(
            self.center, self.radius_x, self.radius_y,
            rotation=self.rotation,
            start_angle=self.start_angle,
            end_angle=self.end_angle,
        )


class FreeformSpec(_CurveSpec):
    """Clamped non-rational B-spline of degree 1-3."""
    type: Literal["freeform"]
    control_points: List[PointSpec]
    degree: int = Field(3, ge=1, le=3)
    knots: Optional[List[float]] = None
    closed: bool = False

    def to_curve(self) -> FreeformCurve:
        knots = None if self.knots is None else tuple(self.knots)
        return FreeformCurve(
            tuple(self.control_points), degree=self.degree, knots=knots, closed=self.closed,
        )


SegmentSpec = Annotated[
    Union[LineSpec, PolylineSpec, ArcSpec, EllipseSpec, FreeformSpec],
    Field(discriminator="type"),
]


class CompositeSpec(_CurveSpec):
    """Chain of segments; ``closed: null`` detects closure from endpoints."""
    type: Literal["composite"]
    segments: List[SegmentSpec] = Field(..., min_length=1)
    closed: Optional[bool] = None

    def to_curve(self) -> CompositeCurve:
        return CompositeCurve(
            tuple(seg.to_curve() for seg in self.segments), closed=self.closed,
        )


CurveSpec = Annotated[
    Union[LineSpec, CircleSpec, PolylineSpec, ArcSpec, EllipseSpec, CompositeSpec, FreeformSpec],
    Field(discriminator="type"),
]


# ============================================================================
# JOB SCHEMA V1
# ============================================================================

class PaperSpec(BaseModel):
    """Paper rectangle in document units."""
    model_config = ConfigDict(extra="forbid")

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @model_validator(mode='after')
    def validate_extent(self) -> 'PaperSpec':
        values = (self.min_x, self.max_x, self.min_y, self.max_y)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"Paper bounds must be finite, got {values}")
        if self.max_x <= self.min_x or self.max_y <= self.min_y:
            raise ValueError(
                f"Paper must have positive width and height, got "
                f"x=[{self.min_x}, {self.max_x}] y=[{self.min_y}, {self.max_y}]"
            )
        return self

    def to_frame(self) -> PaperFrame:
        return PaperFrame(self.min_x, self.max_x, self.min_y, self.max_y)


class LayerSpec(BaseModel):
    """Named group of curves."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    curves: List[CurveSpec] = Field(default_factory=list)

    def to_layer(self) -> Layer:
        return Layer(self.name, tuple(spec.to_curve() for spec in self.curves))


class PlotJobV1(BaseModel):
    """Complete plot job (plot_job.v1 schema)."""
    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., description="Schema identifier")
    name: Optional[str] = Field(None, description="Document base name (no extension)")
    paper: PaperSpec
    resolution: Optional[float] = Field(None, description="Segment length (document units)")
    layer: Optional[Union[int, str]] = Field(None, description="Layer index or name to plot alone")
    options: Dict[str, Any] = Field(default_factory=dict, description="Raw driver options")
    layers: List[LayerSpec] = Field(..., min_length=1)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != SCHEMA_VERSION:
            raise ValueError(f"Expected schema_version {SCHEMA_VERSION!r}, got {v!r}")
        return v

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and (not v.strip() or any(c in v for c in '/\\')):
            raise ValueError(f"Job name must be a non-empty file stem, got {v!r}")
        return v

    @model_validator(mode='after')
    def validate_curves(self) -> 'PlotJobV1':
        # Primitive constructors enforce knot, angle and segment rules
        self.to_layers()
        return self

    def to_frame(self) -> PaperFrame:
        return self.paper.to_frame()

    def to_layers(self) -> List[Layer]:
        return [spec.to_layer() for spec in self.layers]

    def curve_count(self) -> int:
        return sum(len(spec.curves) for spec in self.layers)


def load_plot_job(path: Union[str, Path]) -> PlotJobV1:
    """Load and validate a plot job from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to a plot_job.v1 file

    Returns
    -------
    PlotJobV1
        Validated job

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Plot job not found: {path}")

    try:
        data = fs.load_yaml(path)
    except yaml.YAMLError as e:
        raise ValueError(f"Plot job is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Plot job validation failed at {path}: root must be a mapping")
    try:
        return PlotJobV1(**data)
    except Exception as e:
        raise ValueError(f"Plot job validation failed at {path}: {e}") from e
