"""SVG emitter -- curve primitives to path fragments.

All coordinate transforms (frame offset, Y-axis flip, point scaling) are
applied **here**.  Each curve becomes exactly one SVG element, in the
most compact exact encoding available:

    Line          -> ``<path d="M.. L..">``
    Circle        -> ``<circle cx cy r>``
    Polyline      -> ``<path d="M.. L.. L.. [Z]">``
    Arc / Ellipse -> sampled polyline (or ``A`` command with exact_arcs)
    Composite     -> flattened, deduplicated polyline
    Freeform      -> cubic Bézier path ``M.. C.. .. .. C..``

Every element carries the fixed plotter style (black hairline, no fill).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from pathplot.errors import DegenerateGeometry
from pathplot.geometry.mapping import (
    COORD_DECIMALS,
    OutputCanvas,
    PaperFrame,
    map_point,
    scale_length,
)
from pathplot.geometry.primitives import (
    Arc,
    Circle,
    CompositeCurve,
    CurvePrimitive,
    Ellipse,
    FreeformCurve,
    Line,
    Point,
    Polyline,
    is_closed,
)
from pathplot.geometry.sampling import (
    bezier_control_chain,
    conic_point,
    cubic_bezier_spans,
    dedupe_consecutive,
    sample_conic,
    sample_conic_by_arclength,
    sample_freeform_by_arclength,
)

logger = logging.getLogger(__name__)

STYLE_SUFFIX = 'stroke="#000000" stroke-width="0.25" fill="none"'
"""Presentation applied to every fragment."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def fmt(value: float) -> str:
    """Format a coordinate: 5 decimals max, no trailing zeros, no ``-0``."""
    text = f"{value:.{COORD_DECIMALS}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text


def _pair(p: tuple[float, float]) -> str:
    return f"{fmt(p[0])},{fmt(p[1])}"


@dataclass(frozen=True, slots=True)
class PathFragment:
    """One emitted SVG element.

    Parameters
    ----------
    element : str
        SVG tag name, ``"path"`` or ``"circle"``.
    attributes : tuple[tuple[str, str], ...]
        Geometry attributes in output order (``d`` for paths,
        ``cx``/``cy``/``r`` for circles).
    closed : bool
        Whether the shape is a closed outline.
    """

    element: str
    attributes: tuple[tuple[str, str], ...]
    closed: bool

    @property
    def data(self) -> str:
        """Path data string (empty for non-path elements)."""
        return dict(self.attributes).get("d", "")

    def to_svg(self) -> str:
        attrs = " ".join(f'{name}="{value}"' for name, value in self.attributes)
        return f"<{self.element} {attrs} {STYLE_SUFFIX} />"


# ---------------------------------------------------------------------------
# Emitter
# ---------------------------------------------------------------------------


class SvgEmitter:
    """Convert curve primitives to SVG path fragments.

    Parameters
    ----------
    frame : PaperFrame
        Paper rectangle (source frame).
    canvas : OutputCanvas
        Target canvas in points.
    resolution : float
        Target segment length (document units) for sampled curves.
    tolerance : float
        Distance below which consecutive points count as duplicates.
    exact_arcs : bool
        Encode arcs and ellipses with SVG ``A`` commands instead of
        sampling them.

    Notes
    -----
    The emitter holds no per-curve state; ``emit`` may be called for
    curves in any order.
    """

    def __init__(
        self,
        frame: PaperFrame,
        canvas: OutputCanvas,
        resolution: float,
        tolerance: float,
        *,
        exact_arcs: bool = False,
    ) -> None:
        if resolution <= 0:
            raise ValueError(f"resolution must be > 0, got {resolution}")
        if tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {tolerance}")
        self._frame = frame
        self._canvas = canvas
        self._resolution = resolution
        self._tolerance = tolerance
        self._exact_arcs = exact_arcs

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def emit(self, curve: CurvePrimitive) -> PathFragment:
        """Emit one curve.

        Raises
        ------
        DegenerateGeometry
            If the curve has fewer than two usable points.
        TypeError
            If *curve* is not a known curve kind.
        """
        if isinstance(curve, Line):
            return self._emit_line(curve)
        if isinstance(curve, Circle):
            return self._emit_circle(curve)
        if isinstance(curve, Polyline):
            return self._emit_polyline(curve)
        if isinstance(curve, (Arc, Ellipse)):
            return self._emit_conic(curve)
        if isinstance(curve, CompositeCurve):
            return self._emit_composite(curve)
        if isinstance(curve, FreeformCurve):
            return self._emit_freeform(curve)
        raise TypeError(f"Unsupported curve type: {type(curve).__name__}")

    # ------------------------------------------------------------------
    # Individual encoders
    # ------------------------------------------------------------------

    def _map(self, p: Point) -> tuple[float, float]:
        return map_point(p[0], p[1], self._frame, self._canvas)

    def _emit_line(self, line: Line) -> PathFragment:
        a = self._map(line.start)
        b = self._map(line.end)
        return PathFragment("path", (("d", f"M{_pair(a)} L{_pair(b)}"),), False)

    def _emit_circle(self, circle: Circle) -> PathFragment:
        cx, cy = self._map(circle.center)
        r = scale_length(circle.radius)
        return PathFragment(
            "circle",
            (("cx", fmt(cx)), ("cy", fmt(cy)), ("r", fmt(r))),
            True,
        )

    def _emit_polyline(self, poly: Polyline) -> PathFragment:
        return self._polyline_fragment(list(poly.points), poly.closed, "Polyline")

    def _emit_conic(self, curve: Arc | Ellipse) -> PathFragment:
        if self._exact_arcs:
            return self._emit_exact_conic(curve)
        points = sample_conic(curve, self._resolution)
        return self._polyline_fragment(points, curve.closed, type(curve).__name__)

    def _emit_composite(self, curve: CompositeCurve) -> PathFragment:
        points: list[Point] = []
        for seg in curve.segments:
            points.extend(self._flatten_segment(seg))
        unique = dedupe_consecutive(points, self._tolerance)
        logger.debug(
            "Composite of %d segments flattened to %d points (%d after dedupe)",
            len(curve.segments), len(points), len(unique),
        )
        closed = is_closed(curve, self._tolerance)
        return self._polyline_fragment(unique, closed, "CompositeCurve")

    def _emit_freeform(self, curve: FreeformCurve) -> PathFragment:
        spans = cubic_bezier_spans(curve)
        chain = bezier_control_chain(spans, self._tolerance)
        if len(chain) < 4 or (len(chain) - 1) % 3 != 0:
            raise DegenerateGeometry(
                f"FreeformCurve produced {len(chain)} control points; "
                f"expected 1 + 3k with k >= 1"
            )
        tokens: list[str] = []
        for i, p in enumerate(chain):
            text = _pair(self._map(p))
            if i == 0:
                tokens.append(f"M{text}")
            elif (i + 2) % 3 == 0:
                tokens.append(f"C{text}")
            else:
                tokens.append(text)
        if curve.closed:
            tokens.append("Z")
        return PathFragment("path", (("d", " ".join(tokens)),), curve.closed)

    def _emit_exact_conic(self, curve: Arc | Ellipse) -> PathFragment:
        """Encode a conic with SVG elliptical-arc commands.

        A counter-clockwise sweep in the paper frame stays counter-clockwise
        on screen, which is the SVG negative-angle direction (sweep-flag 0).
        A full turn is split into two half arcs.
        """
        rx = fmt(scale_length(curve.radius_x))
        ry = fmt(scale_length(curve.radius_y))
        rot = fmt(-math.degrees(curve.rotation))
        t0 = curve.start_angle
        sweep = curve.sweep

        if curve.closed:
            stops = [t0 + math.pi, t0 + 2.0 * math.pi]
            large = 0
        else:
            stops = [t0 + sweep]
            large = 1 if sweep > math.pi else 0

        tokens = [f"M{_pair(self._map(conic_point(curve, t0)))}"]
        for t in stops:
            end = _pair(self._map(conic_point(curve, t)))
            tokens.append(f"A{rx},{ry} {rot} {large} 0 {end}")
        if curve.closed:
            tokens.append("Z")
        return PathFragment("path", (("d", " ".join(tokens)),), curve.closed)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _flatten_segment(self, seg: CurvePrimitive) -> list[Point]:
        if isinstance(seg, Line):
            return [seg.start, seg.end]
        if isinstance(seg, Polyline):
            points = list(seg.points)
            if seg.closed and points:
                points.append(points[0])
            return points
        if isinstance(seg, FreeformCurve) and seg.degree == 1:
            return list(seg.control_points)
        if isinstance(seg, (Arc, Ellipse)):
            return sample_conic_by_arclength(seg, self._resolution)
        if isinstance(seg, FreeformCurve):
            return sample_freeform_by_arclength(seg, self._resolution)
        raise TypeError(f"Unsupported composite segment: {type(seg).__name__}")

    def _polyline_fragment(
        self, points: list[Point], closed: bool, kind: str,
    ) -> PathFragment:
        if len(points) < 2:
            raise DegenerateGeometry(
                f"{kind} has {len(points)} usable point(s); at least 2 required"
            )
        tokens = [f"M{_pair(self._map(points[0]))}"]
        tokens.extend(f"L{_pair(self._map(p))}" for p in points[1:])
        if closed:
            tokens.append("Z")
        return PathFragment("path", (("d", " ".join(tokens)),), closed)


def emit_curve(
    curve: CurvePrimitive,
    frame: PaperFrame,
    canvas: OutputCanvas,
    resolution: float,
    tolerance: float,
    *,
    exact_arcs: bool = False,
) -> PathFragment:
    """Emit a single curve without keeping an emitter around."""
    emitter = SvgEmitter(frame, canvas, resolution, tolerance, exact_arcs=exact_arcs)
    return emitter.emit(curve)
