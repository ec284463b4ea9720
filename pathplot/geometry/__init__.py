"""
Geometry module.

Curve primitives in the paper frame, the paper-to-SVG coordinate mapping,
and the numeric sampling / Bézier decomposition used by the emitter.
"""

from pathplot.geometry.mapping import (
    POINTS_PER_UNIT,
    OutputCanvas,
    PaperFrame,
    map_point,
    scale_length,
    unmap_point,
)
from pathplot.geometry.primitives import (
    Arc,
    Circle,
    CompositeCurve,
    Curve,
    CurvePrimitive,
    Ellipse,
    FreeformCurve,
    Layer,
    Line,
    Polyline,
    is_closed,
)

__all__ = [
    "POINTS_PER_UNIT",
    "Arc",
    "Circle",
    "CompositeCurve",
    "Curve",
    "CurvePrimitive",
    "Ellipse",
    "FreeformCurve",
    "Layer",
    "Line",
    "OutputCanvas",
    "PaperFrame",
    "Polyline",
    "is_closed",
    "map_point",
    "scale_length",
    "unmap_point",
]
