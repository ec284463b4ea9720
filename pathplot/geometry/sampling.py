"""Numeric geometry for curve flattening and Bézier decomposition.

Provides:
    - Conic (arc / ellipse) evaluation and uniform-parameter sampling
    - Cubic Bézier evaluation
    - B-spline -> cubic Bézier span decomposition (knot insertion + degree
      elevation)
    - Arc-length resampling of dense polylines
    - Consecutive-duplicate removal

Used by:
    - Emitter: arcs/ellipses as polylines, composite flattening, free-form
      curves as cubic paths

All coordinates in document units (paper frame, +Y up).  Arrays are
float64 numpy arrays of shape (N, 2).
"""

from __future__ import annotations

import math
from typing import Callable, Sequence, Union

import numpy as np

from pathplot.geometry.primitives import (
    FULL_TURN,
    Arc,
    Ellipse,
    FreeformCurve,
    Point,
)

Conic = Union[Arc, Ellipse]

DENSE_CONIC_SAMPLES = 1024
"""Samples per full turn used to measure conic length."""

DENSE_SPAN_SAMPLES = 64
"""Samples per Bézier span used to measure free-form length."""


# ---------------------------------------------------------------------------
# Conics
# ---------------------------------------------------------------------------


def conic_points(curve: Conic, t: np.ndarray) -> np.ndarray:
    """Evaluate an arc or ellipse at parametric angles *t*.

    Parameters
    ----------
    curve : Arc | Ellipse
        Conic to evaluate.
    t : np.ndarray
        Angles in radians, shape (N,).

    Returns
    -------
    np.ndarray
        Points, shape (N, 2).
    """
    t = np.atleast_1d(np.asarray(t, dtype=np.float64))
    cx, cy = curve.center
    rx, ry, rot = curve.radius_x, curve.radius_y, curve.rotation
    cos_r, sin_r = math.cos(rot), math.sin(rot)
    ex = rx * np.cos(t)
    ey = ry * np.sin(t)
    x = cx + ex * cos_r - ey * sin_r
    y = cy + ex * sin_r + ey * cos_r
    return np.stack([x, y], axis=-1)


def conic_point(curve: Conic, t: float) -> Point:
    """Evaluate a conic at a single parametric angle."""
    p = conic_points(curve, np.array([t]))[0]
    return float(p[0]), float(p[1])


def conic_length(curve: Conic) -> float:
    """Length of an arc or ellipse.

    Circular arcs use ``radius * sweep``; ellipses are measured on a dense
    polyline (no closed form exists).
    """
    if isinstance(curve, Arc):
        return curve.radius * curve.sweep
    count = max(32, int(math.ceil(DENSE_CONIC_SAMPLES * curve.sweep / FULL_TURN)))
    t = np.linspace(curve.start_angle, curve.start_angle + curve.sweep, count + 1)
    return polyline_length(conic_points(curve, t))


def sample_conic(curve: Conic, resolution: float) -> list[Point]:
    """Sample a conic uniformly in its angle parameter.

    The segment count is ``max(1, floor(length / resolution))`` and the
    result holds ``count + 1`` points including both ends.  For a full turn
    the last point repeats the first.
    """
    count = segment_count(conic_length(curve), resolution)
    t = np.linspace(curve.start_angle, curve.start_angle + curve.sweep, count + 1)
    return _to_points(conic_points(curve, t))


# ---------------------------------------------------------------------------
# Polylines
# ---------------------------------------------------------------------------


def segment_count(length: float, resolution: float) -> int:
    """Number of segments for a curve of *length* at target *resolution*."""
    if resolution <= 0:
        raise ValueError(f"resolution must be > 0, got {resolution}")
    return max(1, int(math.floor(length / resolution)))


def polyline_length(points: np.ndarray) -> float:
    """Total length of a polyline, 0.0 for fewer than two points."""
    points = np.asarray(points, dtype=np.float64)
    if points.shape[0] < 2:
        return 0.0
    return float(np.linalg.norm(np.diff(points, axis=0), axis=1).sum())


def resample_by_arclength(dense: np.ndarray, resolution: float) -> list[Point]:
    """Resample a dense polyline into equal arc-length segments.

    Parameters
    ----------
    dense : np.ndarray
        Finely sampled curve, shape (N, 2), N >= 2.
    resolution : float
        Target segment length.

    Returns
    -------
    list[Point]
        ``max(1, floor(L / resolution)) + 1`` points, first and last
        identical to the input ends.
    """
    dense = np.asarray(dense, dtype=np.float64)
    seg = np.linalg.norm(np.diff(dense, axis=0), axis=1)
    cumulative = np.concatenate([[0.0], np.cumsum(seg)])
    total = float(cumulative[-1])
    count = segment_count(total, resolution)
    if total < 1e-12:
        return _to_points(dense[[0, -1]])
    s = np.linspace(0.0, total, count + 1)
    x = np.interp(s, cumulative, dense[:, 0])
    y = np.interp(s, cumulative, dense[:, 1])
    return _to_points(np.stack([x, y], axis=-1))


def sample_conic_by_arclength(curve: Conic, resolution: float) -> list[Point]:
    """Arc-length sampling for conics inside composite curves."""
    return _sample_dense(
        lambda n: conic_points(
            curve, np.linspace(curve.start_angle, curve.start_angle + curve.sweep, n + 1)
        ),
        max(32, int(math.ceil(DENSE_CONIC_SAMPLES * curve.sweep / FULL_TURN))),
        resolution,
    )


def sample_freeform_by_arclength(curve: FreeformCurve, resolution: float) -> list[Point]:
    """Arc-length sampling for free-form curves inside composite curves."""
    spans = cubic_bezier_spans(curve)
    return _sample_dense(
        lambda n: _dense_bezier(spans, max(2, n // len(spans))),
        DENSE_SPAN_SAMPLES * len(spans),
        resolution,
    )


def _sample_dense(
    evaluate: Callable[[int], np.ndarray], base_count: int, resolution: float,
) -> list[Point]:
    dense = evaluate(base_count)
    wanted = 4 * segment_count(polyline_length(dense), resolution)
    if wanted > base_count:
        dense = evaluate(wanted)
    return resample_by_arclength(dense, resolution)


def dedupe_consecutive(points: Sequence[Point], tolerance: float) -> list[Point]:
    """Drop points closer than *tolerance* to the previously kept point.

    The first point is always kept.  Idempotent: running it on its own
    output changes nothing.
    """
    if not points:
        return []
    kept = [points[0]]
    for p in points[1:]:
        last = kept[-1]
        if math.hypot(p[0] - last[0], p[1] - last[1]) > tolerance:
            kept.append(p)
    return kept


# ---------------------------------------------------------------------------
# Bézier
# ---------------------------------------------------------------------------


def bezier_cubic_eval(span: np.ndarray, t: np.ndarray) -> np.ndarray:
    """Evaluate a cubic Bézier span at parameters *t*.

    Parameters
    ----------
    span : np.ndarray
        Control points, shape (4, 2).
    t : np.ndarray
        Parameter values in [0, 1], shape (N,).

    Returns
    -------
    np.ndarray
        Points on the curve, shape (N, 2).

    Notes
    -----
    B(t) = (1-t)³·p1 + 3(1-t)²t·p2 + 3(1-t)t²·p3 + t³·p4
    """
    t = np.atleast_1d(np.asarray(t, dtype=np.float64))[:, None]
    u = 1.0 - t
    return (
        u ** 3 * span[0]
        + 3.0 * u ** 2 * t * span[1]
        + 3.0 * u * t ** 2 * span[2]
        + t ** 3 * span[3]
    )


def _dense_bezier(spans: list[np.ndarray], per_span: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, per_span + 1)
    parts = [bezier_cubic_eval(spans[0], t)]
    for span in spans[1:]:
        parts.append(bezier_cubic_eval(span, t)[1:])
    return np.concatenate(parts, axis=0)


def insert_knot(
    control: np.ndarray, knots: list[float], degree: int, u: float,
) -> tuple[np.ndarray, list[float]]:
    """Insert knot *u* once (Boehm's algorithm).

    Parameters
    ----------
    control : np.ndarray
        Control points, shape (n, 2).
    knots : list[float]
        Knot vector, length ``n + degree + 1``.
    degree : int
        Spline degree.
    u : float
        Knot value strictly inside the domain.

    Returns
    -------
    tuple[np.ndarray, list[float]]
        New control points (n + 1, 2) and knot vector.
    """
    p = degree
    n = control.shape[0]
    # k: last index with knots[k] <= u
    k = int(np.searchsorted(np.asarray(knots), u, side="right")) - 1
    new = np.empty((n + 1, 2), dtype=np.float64)
    new[: k - p + 1] = control[: k - p + 1]
    for i in range(k - p + 1, k + 1):
        a = (u - knots[i]) / (knots[i + p] - knots[i])
        new[i] = (1.0 - a) * control[i - 1] + a * control[i]
    new[k + 1:] = control[k:]
    return new, knots[: k + 1] + [u] + knots[k + 1:]


def bspline_to_bezier(curve: FreeformCurve) -> list[np.ndarray]:
    """Split a clamped B-spline into Bézier spans of its own degree.

    Every interior knot is raised to multiplicity ``degree``; the control
    polygon then splits into spans of ``degree + 1`` points sharing
    endpoints.
    """
    p = curve.degree
    control = np.asarray(curve.control_points, dtype=np.float64)
    knots = list(curve.knots)
    interior = sorted(set(knots[p + 1: len(knots) - p - 1]))
    for u in interior:
        if u <= knots[0] or u >= knots[-1]:
            continue
        mult = knots.count(u)
        for _ in range(p - mult):
            control, knots = insert_knot(control, knots, p, u)

    spans = (control.shape[0] - 1) // p
    return [control[j * p: j * p + p + 1].copy() for j in range(spans)]


def elevate_to_cubic(span: np.ndarray) -> np.ndarray:
    """Exact degree elevation of a linear or quadratic span to cubic."""
    degree = span.shape[0] - 1
    if degree == 3:
        return span
    if degree == 2:
        q0, q1, q2 = span
        return np.stack([q0, q0 / 3.0 + 2.0 * q1 / 3.0, 2.0 * q1 / 3.0 + q2 / 3.0, q2])
    if degree == 1:
        p0, p1 = span
        d = p1 - p0
        return np.stack([p0, p0 + d / 3.0, p0 + 2.0 * d / 3.0, p1])
    raise ValueError(f"Cannot elevate degree {degree} span to cubic")


def cubic_bezier_spans(curve: FreeformCurve) -> list[np.ndarray]:
    """Decompose a free-form curve into cubic Bézier spans, shape (4, 2) each."""
    return [elevate_to_cubic(span) for span in bspline_to_bezier(curve)]


def bezier_control_chain(
    spans: Sequence[np.ndarray], tolerance: float,
) -> list[Point]:
    """Concatenate span control points, dropping coincident span boundaries.

    Only the first control point of each span after the first is
    considered for removal, so interior control points that happen to
    coincide (cusps) keep the 1 + 3k grouping intact.
    """
    chain: list[Point] = []
    for span in spans:
        pts = _to_points(span)
        if chain and math.hypot(
            pts[0][0] - chain[-1][0], pts[0][1] - chain[-1][1]
        ) <= tolerance:
            pts = pts[1:]
        chain.extend(pts)
    return chain


def _to_points(arr: np.ndarray) -> list[Point]:
    return [(float(x), float(y)) for x, y in arr]
