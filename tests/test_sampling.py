"""Tests for curve sampling and Bézier decomposition.

Validates that:
    - Segment counts follow max(1, floor(length / resolution))
    - Conic samples include both ends and lie on the curve
    - Duplicate removal is idempotent and keeps the first point
    - B-spline decomposition reproduces the original curve
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from pathplot.geometry.primitives import Arc, Ellipse, FreeformCurve
from pathplot.geometry.sampling import (
    bezier_control_chain,
    bezier_cubic_eval,
    bspline_to_bezier,
    conic_length,
    cubic_bezier_spans,
    dedupe_consecutive,
    elevate_to_cubic,
    insert_knot,
    polyline_length,
    resample_by_arclength,
    sample_conic,
    sample_conic_by_arclength,
    segment_count,
)


def _de_boor(curve: FreeformCurve, u: float) -> np.ndarray:
    """Reference B-spline evaluation (Cox-de Boor recursion)."""
    p = curve.degree
    knots = curve.knots
    ctrl = np.asarray(curve.control_points, dtype=np.float64)

    def basis(i: int, k: int, t: float) -> float:
        if k == 0:
            if knots[i] <= t < knots[i + 1]:
                return 1.0
            # Closed right end of the domain
            if t == knots[-1] and knots[i] < t == knots[i + 1]:
                return 1.0
            return 0.0
        left = 0.0
        if knots[i + k] != knots[i]:
            left = (t - knots[i]) / (knots[i + k] - knots[i]) * basis(i, k - 1, t)
        right = 0.0
        if knots[i + k + 1] != knots[i + 1]:
            right = (knots[i + k + 1] - t) / (knots[i + k + 1] - knots[i + 1]) * basis(i + 1, k - 1, t)
        return left + right

    weights = np.array([basis(i, p, u) for i in range(len(ctrl))])
    return weights @ ctrl


# ---------------------------------------------------------------------------
# Segment counts and conics
# ---------------------------------------------------------------------------


class TestSegmentCount:
    @pytest.mark.parametrize(
        "length, resolution, expected",
        [(1.0, 0.1, 10), (1.05, 0.1, 10), (0.01, 0.1, 1), (0.0, 0.1, 1)],
    )
    def test_floor_with_minimum_one(self, length, resolution, expected) -> None:
        assert segment_count(length, resolution) == expected

    def test_non_positive_resolution(self) -> None:
        with pytest.raises(ValueError):
            segment_count(1.0, 0.0)


class TestConicSampling:
    def test_quarter_arc_count_and_ends(self) -> None:
        arc = Arc((1.0, 1.0), 1.0, 0.0, math.pi / 2)
        pts = sample_conic(arc, 0.1)
        # length pi/2 -> floor(15.7) = 15 segments
        assert len(pts) == 16
        assert pts[0] == pytest.approx((2.0, 1.0))
        assert pts[-1] == pytest.approx((1.0, 2.0), abs=1e-12)

    def test_samples_on_circle(self) -> None:
        arc = Arc((0.0, 0.0), 3.0, 0.2, 2.5)
        for x, y in sample_conic(arc, 0.05):
            assert math.hypot(x, y) == pytest.approx(3.0)

    def test_full_turn_repeats_first_point(self) -> None:
        arc = Arc((0.0, 0.0), 1.0, 0.0, 2.0 * math.pi)
        pts = sample_conic(arc, 0.5)
        assert pts[0] == pytest.approx(pts[-1], abs=1e-12)

    def test_ellipse_length_close_to_ramanujan(self) -> None:
        a, b = 3.0, 1.0
        h = ((a - b) / (a + b)) ** 2
        expected = math.pi * (a + b) * (1 + 3 * h / (10 + math.sqrt(4 - 3 * h)))
        assert conic_length(Ellipse((0, 0), a, b)) == pytest.approx(expected, rel=1e-4)

    def test_rotated_ellipse_start_point(self) -> None:
        e = Ellipse((0.0, 0.0), 2.0, 1.0, rotation=math.pi / 2)
        pts = sample_conic(e, 0.5)
        assert pts[0] == pytest.approx((0.0, 2.0), abs=1e-12)

    def test_arclength_sampling_even_spacing(self) -> None:
        e = Ellipse((0, 0), 4.0, 1.0, start_angle=0.0, end_angle=math.pi)
        pts = np.asarray(sample_conic_by_arclength(e, 0.1))
        steps = np.linalg.norm(np.diff(pts, axis=0), axis=1)
        assert steps.max() - steps.min() < 0.005


# ---------------------------------------------------------------------------
# Polylines
# ---------------------------------------------------------------------------


class TestPolylineHelpers:
    def test_polyline_length(self) -> None:
        assert polyline_length(np.array([[0, 0], [3, 4], [3, 0]])) == pytest.approx(9.0)

    def test_resample_keeps_ends(self) -> None:
        dense = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0]])
        pts = resample_by_arclength(dense, 0.5)
        assert len(pts) == 5
        assert pts[0] == (0.0, 0.0)
        assert pts[-1] == (1.0, 1.0)
        assert pts[2] == pytest.approx((1.0, 0.0))

    def test_dedupe_keeps_first_point(self) -> None:
        pts = [(0.0, 0.0), (0.0, 0.0005), (1.0, 0.0), (1.0, 0.0)]
        assert dedupe_consecutive(pts, 0.001) == [(0.0, 0.0), (1.0, 0.0)]

    def test_dedupe_idempotent(self) -> None:
        rng = np.random.default_rng(7)
        pts = [tuple(p) for p in np.cumsum(rng.normal(0, 0.001, (200, 2)), axis=0)]
        once = dedupe_consecutive(pts, 0.001)
        assert dedupe_consecutive(once, 0.001) == once

    def test_dedupe_empty(self) -> None:
        assert dedupe_consecutive([], 0.1) == []


# ---------------------------------------------------------------------------
# Bézier decomposition
# ---------------------------------------------------------------------------


class TestBezier:
    def test_cubic_eval_endpoints(self) -> None:
        span = np.array([[0, 0], [1, 2], [3, 2], [4, 0]], dtype=float)
        out = bezier_cubic_eval(span, np.array([0.0, 1.0]))
        assert out[0] == pytest.approx([0, 0])
        assert out[1] == pytest.approx([4, 0])

    def test_insert_knot_preserves_shape(self) -> None:
        curve = FreeformCurve(((0, 0), (1, 2), (3, 2), (4, 0), (5, 1)), degree=3)
        ctrl = np.asarray(curve.control_points, dtype=float)
        new_ctrl, new_knots = insert_knot(ctrl, list(curve.knots), 3, 0.25)
        refined = FreeformCurve(tuple(map(tuple, new_ctrl)), degree=3, knots=tuple(new_knots))
        for u in (0.0, 0.1, 0.25, 0.6, 0.9):
            assert _de_boor(refined, u) == pytest.approx(_de_boor(curve, u))

    def test_span_count_matches_knot_spans(self) -> None:
        curve = FreeformCurve(((0, 0), (1, 2), (2, -1), (3, 2), (4, 0), (5, 1)), degree=3)
        spans = bspline_to_bezier(curve)
        assert len(spans) == curve.span_count == 3
        for a, b in zip(spans, spans[1:]):
            assert a[-1] == pytest.approx(b[0])

    def test_spans_reproduce_curve(self) -> None:
        curve = FreeformCurve(((0, 0), (1, 2), (2, -1), (3, 2), (4, 0)), degree=3)
        spans = cubic_bezier_spans(curve)
        # Span j covers knots [j/2, (j+1)/2] for the uniform 2-span vector
        for j, span in enumerate(spans):
            for local in (0.0, 0.3, 0.7, 1.0):
                u = (j + local) / 2.0
                on_span = bezier_cubic_eval(span, np.array([local]))[0]
                assert on_span == pytest.approx(_de_boor(curve, u))

    def test_quadratic_elevation_exact(self) -> None:
        quad = np.array([[0, 0], [1, 2], [2, 0]], dtype=float)
        cubic = elevate_to_cubic(quad)
        t = np.linspace(0, 1, 7)
        expected = (
            ((1 - t) ** 2)[:, None] * quad[0]
            + (2 * (1 - t) * t)[:, None] * quad[1]
            + (t ** 2)[:, None] * quad[2]
        )
        assert bezier_cubic_eval(cubic, t) == pytest.approx(expected)

    def test_control_chain_drops_shared_boundaries(self) -> None:
        curve = FreeformCurve(((0, 0), (1, 2), (2, -1), (3, 2), (4, 0), (5, 1)), degree=3)
        chain = bezier_control_chain(cubic_bezier_spans(curve), 1e-9)
        assert len(chain) == 1 + 3 * 3

    def test_linear_freeform_elevates(self) -> None:
        curve = FreeformCurve(((0, 0), (1, 0), (1, 1)), degree=1)
        spans = cubic_bezier_spans(curve)
        assert len(spans) == 2
        assert spans[0][1] == pytest.approx([1 / 3, 0])
