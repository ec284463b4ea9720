"""Coordinate mapping from the paper frame to SVG point space.

Frames:
    Paper frame: physical rectangle in document units (inches), +Y up.
    SVG frame: origin top-left, +Y down, 72 points per document unit.

The transform is applied once, at emission time.  Mapped coordinates are
rounded to 5 decimals, far below the plotter's addressable step, so the
emitted path text carries no float noise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from pathplot.errors import InvalidFrame

POINTS_PER_UNIT = 72.0
"""Fixed unit-to-point scale factor (PostScript points per inch)."""

COORD_DECIMALS = 5


@dataclass(frozen=True, slots=True)
class PaperFrame:
    """Physical paper rectangle, axis-aligned in its own frame.

    Parameters
    ----------
    min_x, max_x, min_y, max_y : float
        Extents in document units.  Both spans must be strictly positive.

    Raises
    ------
    InvalidFrame
        If any bound is non-finite or a span is zero or negative.
    """

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def __post_init__(self) -> None:
        bounds = (self.min_x, self.max_x, self.min_y, self.max_y)
        if not all(math.isfinite(b) for b in bounds):
            raise InvalidFrame(f"Paper frame bounds must be finite, got {bounds}")
        if not self.max_x > self.min_x:
            raise InvalidFrame(
                f"Paper frame max_x ({self.max_x}) must be > min_x ({self.min_x})"
            )
        if not self.max_y > self.min_y:
            raise InvalidFrame(
                f"Paper frame max_y ({self.max_y}) must be > min_y ({self.min_y})"
            )

    @classmethod
    def from_corners(
        cls, a: tuple[float, float], b: tuple[float, float],
    ) -> PaperFrame:
        """Build a frame from any two opposite corners."""
        return cls(
            min_x=min(a[0], b[0]),
            max_x=max(a[0], b[0]),
            min_y=min(a[1], b[1]),
            max_y=max(a[1], b[1]),
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True, slots=True)
class OutputCanvas:
    """SVG canvas size in points, derived from a ``PaperFrame``."""

    width_units: float
    height_units: float

    @classmethod
    def for_frame(cls, frame: PaperFrame) -> OutputCanvas:
        return cls(
            width_units=frame.width * POINTS_PER_UNIT,
            height_units=frame.height * POINTS_PER_UNIT,
        )


def map_point(
    x: float, y: float, frame: PaperFrame, canvas: OutputCanvas,
) -> tuple[float, float]:
    """Map a paper-frame point to SVG coordinates.

    Parameters
    ----------
    x, y : float
        Point in document units (+Y up).
    frame : PaperFrame
        Source rectangle.
    canvas : OutputCanvas
        Target canvas in points.

    Returns
    -------
    tuple[float, float]
        ``(svg_x, svg_y)`` in points (+Y down), rounded to 5 decimals.
    """
    svg_x = (x - frame.min_x) * canvas.width_units / frame.width
    # Y-flip: paper bottom-left -> SVG top-left
    svg_y = canvas.height_units - (y - frame.min_y) * canvas.height_units / frame.height
    return round(svg_x, COORD_DECIMALS), round(svg_y, COORD_DECIMALS)


def unmap_point(
    svg_x: float, svg_y: float, frame: PaperFrame, canvas: OutputCanvas,
) -> tuple[float, float]:
    """Inverse of :func:`map_point` (without rounding)."""
    x = frame.min_x + svg_x * frame.width / canvas.width_units
    y = frame.min_y + (canvas.height_units - svg_y) * frame.height / canvas.height_units
    return x, y


def scale_length(length: float) -> float:
    """Convert a length in document units to points.

    Lengths are scaled, not remapped: the frame offset does not apply and
    any difference between the horizontal and vertical scale is ignored.
    """
    return round(length * POINTS_PER_UNIT, COORD_DECIMALS)
