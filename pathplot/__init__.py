"""pathplot: geometry-to-SVG serializer for pen plotters.

Turns planar curves on a paper rectangle into an SVG 1.1 document in
printer points, plus the ``axicli`` command that would plot it.  Nothing
in the package launches the driver or talks to a device.

Architecture layers (strict one-way dependency):
    cli → pipeline → {svg, command} → {geometry, configs} → {utils, errors}

Key invariants:
    - Geometry in document units (inches), paper frame +Y up
    - SVG coordinates in points (72 per unit), origin top-left, +Y down
    - Output order equals input order; inputs are never mutated
    - YAML-only configs and job files
"""

__version__ = "0.1.0"

from pathplot.errors import (
    DegenerateGeometry,
    EmptySelection,
    InvalidFrame,
    PathPlotError,
    PlotWarning,
    WarningCode,
)
from pathplot.pipeline import PlotResult, plan_plot, render_document

__all__ = [
    "DegenerateGeometry",
    "EmptySelection",
    "InvalidFrame",
    "PathPlotError",
    "PlotResult",
    "PlotWarning",
    "WarningCode",
    "plan_plot",
    "render_document",
]
