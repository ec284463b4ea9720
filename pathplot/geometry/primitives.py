"""Curve primitives -- the vocabulary between host geometry and SVG output.

Every curve kind is an immutable, slotted dataclass.  Coordinates are in
**document units** (inches for the AxiDraw) in the paper's own frame
(+Y up).  The emitter matches on these types exhaustively; there is no
string-based type identification.

Grouping
--------
A *Layer* is a named, ordered list of curves.  A plot either emits every
layer in order or a single selected layer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence, Union

Point = tuple[float, float]
"""A 2-D point in document units."""

FULL_TURN = 2.0 * math.pi


def _as_point(p: Sequence[float]) -> Point:
    if len(p) != 2:
        raise ValueError(f"Point must have 2 coordinates, got {len(p)}")
    x, y = float(p[0]), float(p[1])
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"Point coordinates must be finite, got ({x}, {y})")
    return (x, y)


def _as_points(points: Sequence[Sequence[float]]) -> tuple[Point, ...]:
    return tuple(_as_point(p) for p in points)


def points_close(a: Point, b: Point, tolerance: float) -> bool:
    """Return ``True`` when *a* and *b* are within *tolerance* of each other."""
    return math.hypot(a[0] - b[0], a[1] - b[1]) <= tolerance


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CurvePrimitive:
    """Base class for all curve kinds."""

    pass


# ---------------------------------------------------------------------------
# Closed-form curves
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Line(CurvePrimitive):
    """Straight segment.

    Parameters
    ----------
    start, end : Point
        Endpoints in document units.
    """

    start: Point
    end: Point

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", _as_point(self.start))
        object.__setattr__(self, "end", _as_point(self.end))


@dataclass(frozen=True, slots=True)
class Circle(CurvePrimitive):
    """Full circle.

    Parameters
    ----------
    center : Point
        Centre in document units.
    radius : float
        Radius in document units, must be > 0.
    """

    center: Point
    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_point(self.center))
        if not self.radius > 0:
            raise ValueError(f"Circle radius must be > 0, got {self.radius}")


@dataclass(frozen=True, slots=True)
class Polyline(CurvePrimitive):
    """Ordered vertex sequence.

    Parameters
    ----------
    points : tuple[Point, ...]
        Vertices in drawing order.  Point count is checked at emission
        time, not here, so an empty polyline reaches the emitter and is
        reported as degenerate geometry.
    closed : bool
        Append a close-path marker.
    """

    points: tuple[Point, ...]
    closed: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", _as_points(self.points))


# ---------------------------------------------------------------------------
# Conic arcs (sampled unless exact encoding is requested)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Arc(CurvePrimitive):
    """Circular arc swept counter-clockwise from *start_angle* to *end_angle*.

    Parameters
    ----------
    center : Point
        Centre in document units.
    radius : float
        Radius in document units, must be > 0.
    start_angle, end_angle : float
        Angles in radians measured from +X.  ``end_angle`` must be greater
        than ``start_angle``; a sweep of a full turn or more is a closed
        circle.
    """

    center: Point
    radius: float
    start_angle: float
    end_angle: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_point(self.center))
        if not self.radius > 0:
            raise ValueError(f"Arc radius must be > 0, got {self.radius}")
        if not self.end_angle > self.start_angle:
            raise ValueError(
                f"Arc end_angle ({self.end_angle}) must be greater than "
                f"start_angle ({self.start_angle})"
            )

    @property
    def radius_x(self) -> float:
        return self.radius

    @property
    def radius_y(self) -> float:
        return self.radius

    @property
    def rotation(self) -> float:
        return 0.0

    @property
    def sweep(self) -> float:
        return min(self.end_angle - self.start_angle, FULL_TURN)

    @property
    def closed(self) -> bool:
        return self.end_angle - self.start_angle >= FULL_TURN - 1e-12


@dataclass(frozen=True, slots=True)
class Ellipse(CurvePrimitive):
    """Full ellipse or elliptical arc.

    Parameters
    ----------
    center : Point
        Centre in document units.
    radius_x, radius_y : float
        Semi-axes before rotation, both > 0.
    rotation : float
        Rotation of the ``radius_x`` axis from +X, in radians.
    start_angle, end_angle : float
        Parametric angles (radians), swept counter-clockwise.  The
        default covers the full ellipse.
    """

    center: Point
    radius_x: float
    radius_y: float
    rotation: float = 0.0
    start_angle: float = 0.0
    end_angle: float = FULL_TURN

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_point(self.center))
        if not (self.radius_x > 0 and self.radius_y > 0):
            raise ValueError(
                f"Ellipse radii must be > 0, got ({self.radius_x}, {self.radius_y})"
            )
        if not self.end_angle > self.start_angle:
            raise ValueError(
                f"Ellipse end_angle ({self.end_angle}) must be greater than "
                f"start_angle ({self.start_angle})"
            )

    @property
    def sweep(self) -> float:
        return min(self.end_angle - self.start_angle, FULL_TURN)

    @property
    def closed(self) -> bool:
        return self.end_angle - self.start_angle >= FULL_TURN - 1e-12


# ---------------------------------------------------------------------------
# Free-form and composite curves
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FreeformCurve(CurvePrimitive):
    """Clamped, non-rational B-spline.

    Parameters
    ----------
    control_points : tuple[Point, ...]
        Control polygon, at least ``degree + 1`` points.
    degree : int
        Polynomial degree, 1 to 3.
    knots : tuple[float, ...] | None
        Full knot vector of length ``len(control_points) + degree + 1``,
        non-decreasing, with ``degree + 1`` equal knots at both ends and no
        interior knot repeated more than ``degree`` times.
        ``None`` builds a clamped uniform vector.
    closed : bool
        Append a close-path marker.  The control polygon itself must
        already end where it starts.
    """

    control_points: tuple[Point, ...]
    degree: int = 3
    knots: tuple[float, ...] | None = None
    closed: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "control_points", _as_points(self.control_points))
        if self.degree not in (1, 2, 3):
            raise ValueError(f"FreeformCurve degree must be 1, 2 or 3, got {self.degree}")
        n = len(self.control_points)
        if n < self.degree + 1:
            raise ValueError(
                f"Degree {self.degree} curve needs >= {self.degree + 1} "
                f"control points, got {n}"
            )
        if self.knots is None:
            object.__setattr__(self, "knots", clamped_uniform_knots(n, self.degree))
            return

        knots = tuple(float(k) for k in self.knots)
        p = self.degree
        if len(knots) != n + p + 1:
            raise ValueError(
                f"Knot vector must have {n + p + 1} entries, got {len(knots)}"
            )
        if any(b < a for a, b in zip(knots, knots[1:])):
            raise ValueError("Knot vector must be non-decreasing")
        if len(set(knots[: p + 1])) != 1 or len(set(knots[-(p + 1):])) != 1:
            raise ValueError("Knot vector must be clamped at both ends")
        if knots[0] == knots[-1]:
            raise ValueError("Knot vector spans a zero-length domain")
        for u in sorted(set(knots)):
            limit = p + 1 if u in (knots[0], knots[-1]) else p
            if knots.count(u) > limit:
                raise ValueError(
                    f"Knot {u:g} repeats {knots.count(u)} times; at most {limit} "
                    f"allowed for a degree {p} curve"
                )
        object.__setattr__(self, "knots", knots)

    @property
    def span_count(self) -> int:
        """Number of non-empty knot spans (Bézier segments)."""
        return len(set(self.knots)) - 1


@dataclass(frozen=True, slots=True)
class CompositeCurve(CurvePrimitive):
    """Ordered chain of heterogeneous segments.

    Parameters
    ----------
    segments : tuple[CurvePrimitive, ...]
        Sub-curves in drawing order.  Circles and nested composites are
        not allowed as segments.
    closed : bool | None
        Explicit closure, or ``None`` to treat the chain as closed when the
        last segment ends where the first one starts.
    """

    segments: tuple[CurvePrimitive, ...]
    closed: bool | None = None

    def __post_init__(self) -> None:
        segments = tuple(self.segments)
        for seg in segments:
            if isinstance(seg, (Circle, CompositeCurve)):
                raise ValueError(
                    f"{type(seg).__name__} cannot be a CompositeCurve segment"
                )
            if not isinstance(seg, CurvePrimitive):
                raise TypeError(f"Not a curve primitive: {seg!r}")
        object.__setattr__(self, "segments", segments)


Curve = Union[Line, Circle, Polyline, Arc, Ellipse, CompositeCurve, FreeformCurve]
"""Every curve kind the emitter understands."""


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Layer:
    """Named, ordered group of curves.

    Parameters
    ----------
    name : str
        Layer label (used for selection by name).
    curves : tuple[Curve, ...]
        Curves in plotting order.
    """

    name: str
    curves: tuple[CurvePrimitive, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "curves", tuple(self.curves))

    def __len__(self) -> int:
        return len(self.curves)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def clamped_uniform_knots(n_points: int, degree: int) -> tuple[float, ...]:
    """Build a clamped uniform knot vector on ``[0, 1]``.

    Parameters
    ----------
    n_points : int
        Number of control points.
    degree : int
        Spline degree.

    Returns
    -------
    tuple[float, ...]
        ``n_points + degree + 1`` knots.
    """
    interior = n_points - degree - 1
    inner = tuple((i + 1) / (interior + 1) for i in range(interior))
    return (0.0,) * (degree + 1) + inner + (1.0,) * (degree + 1)


def curve_endpoints(curve: CurvePrimitive) -> tuple[Point, Point] | None:
    """Return the start and end point of an open-ended curve kind.

    Returns ``None`` for circles and for curves with no points.
    """
    if isinstance(curve, Line):
        return curve.start, curve.end
    if isinstance(curve, Polyline):
        if not curve.points:
            return None
        if curve.closed:
            return curve.points[0], curve.points[0]
        return curve.points[0], curve.points[-1]
    if isinstance(curve, (Arc, Ellipse)):
        from pathplot.geometry.sampling import conic_point

        return (
            conic_point(curve, curve.start_angle),
            conic_point(curve, curve.start_angle + curve.sweep),
        )
    if isinstance(curve, FreeformCurve):
        return curve.control_points[0], curve.control_points[-1]
    if isinstance(curve, CompositeCurve):
        if not curve.segments:
            return None
        first = curve_endpoints(curve.segments[0])
        last = curve_endpoints(curve.segments[-1])
        if first is None or last is None:
            return None
        return first[0], last[1]
    return None


def is_closed(curve: CurvePrimitive, tolerance: float = 1e-9) -> bool:
    """Return whether *curve* forms a closed loop."""
    if isinstance(curve, Circle):
        return True
    if isinstance(curve, (Polyline, FreeformCurve, Arc, Ellipse)):
        return bool(curve.closed)
    if isinstance(curve, CompositeCurve):
        if curve.closed is not None:
            return curve.closed
        ends = curve_endpoints(curve)
        return ends is not None and points_close(ends[0], ends[1], tolerance)
    return False
