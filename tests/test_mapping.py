"""Tests for the paper-frame to SVG coordinate mapping.

Validates that:
    - Corners of the paper land on the corners of the canvas (Y flipped)
    - map_point / unmap_point round-trip within the rounding tolerance
    - Degenerate frames are rejected at construction
"""

from __future__ import annotations

import math

import pytest

from pathplot.errors import InvalidFrame
from pathplot.geometry.mapping import (
    POINTS_PER_UNIT,
    OutputCanvas,
    PaperFrame,
    map_point,
    scale_length,
    unmap_point,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def letter() -> PaperFrame:
    """US letter, landscape, offset from the origin."""
    return PaperFrame(min_x=2.0, max_x=13.0, min_y=-1.0, max_y=7.5)


@pytest.fixture()
def canvas(letter: PaperFrame) -> OutputCanvas:
    return OutputCanvas.for_frame(letter)


# ---------------------------------------------------------------------------
# Frame construction
# ---------------------------------------------------------------------------


class TestPaperFrame:
    def test_width_height(self, letter: PaperFrame) -> None:
        assert letter.width == pytest.approx(11.0)
        assert letter.height == pytest.approx(8.5)

    def test_from_corners_any_order(self) -> None:
        a = PaperFrame.from_corners((4.0, 3.0), (0.0, 0.0))
        b = PaperFrame.from_corners((0.0, 3.0), (4.0, 0.0))
        assert a == b == PaperFrame(0.0, 4.0, 0.0, 3.0)

    @pytest.mark.parametrize(
        "bounds",
        [
            (0.0, 0.0, 0.0, 1.0),
            (0.0, 1.0, 2.0, 2.0),
            (1.0, 0.0, 0.0, 1.0),
            (0.0, math.inf, 0.0, 1.0),
            (0.0, 1.0, math.nan, 1.0),
        ],
    )
    def test_degenerate_frame_rejected(self, bounds) -> None:
        with pytest.raises(InvalidFrame):
            PaperFrame(*bounds)

    def test_canvas_is_frame_times_72(self, letter: PaperFrame) -> None:
        canvas = OutputCanvas.for_frame(letter)
        assert canvas.width_units == pytest.approx(11.0 * POINTS_PER_UNIT)
        assert canvas.height_units == pytest.approx(8.5 * POINTS_PER_UNIT)

    def test_canvas_keeps_fractional_size(self) -> None:
        canvas = OutputCanvas.for_frame(PaperFrame(0.0, 8.5, 0.0, 11.0))
        assert canvas.width_units == pytest.approx(612.0)
        assert canvas.height_units == pytest.approx(792.0)


# ---------------------------------------------------------------------------
# Point mapping
# ---------------------------------------------------------------------------


class TestMapPoint:
    def test_bottom_left_maps_to_canvas_bottom(
        self, letter: PaperFrame, canvas: OutputCanvas,
    ) -> None:
        assert map_point(letter.min_x, letter.min_y, letter, canvas) == (
            0.0, pytest.approx(canvas.height_units),
        )

    def test_top_right_maps_to_canvas_top(
        self, letter: PaperFrame, canvas: OutputCanvas,
    ) -> None:
        x, y = map_point(letter.max_x, letter.max_y, letter, canvas)
        assert x == pytest.approx(canvas.width_units)
        assert y == pytest.approx(0.0)

    def test_y_axis_flipped(self, letter: PaperFrame, canvas: OutputCanvas) -> None:
        _, low = map_point(5.0, 0.0, letter, canvas)
        _, high = map_point(5.0, 5.0, letter, canvas)
        assert high < low

    def test_unit_square_scenario(self) -> None:
        frame = PaperFrame(0.0, 2.0, 0.0, 2.0)
        canvas = OutputCanvas.for_frame(frame)
        assert map_point(0.0, 0.0, frame, canvas) == (0.0, 144.0)
        assert map_point(1.0, 1.0, frame, canvas) == (72.0, 72.0)

    def test_rounded_to_five_decimals(self) -> None:
        frame = PaperFrame(0.0, 3.0, 0.0, 3.0)
        canvas = OutputCanvas.for_frame(frame)
        x, _ = map_point(1.0 / 3.0, 0.0, frame, canvas)
        assert x == round(x, 5)

    @pytest.mark.parametrize(
        "point",
        [(2.0, -1.0), (7.123456, 3.3), (12.999, 7.49), (4.5, 0.0001)],
    )
    def test_round_trip(
        self, letter: PaperFrame, canvas: OutputCanvas, point,
    ) -> None:
        svg = map_point(point[0], point[1], letter, canvas)
        back = unmap_point(svg[0], svg[1], letter, canvas)
        assert back[0] == pytest.approx(point[0], abs=1e-4)
        assert back[1] == pytest.approx(point[1], abs=1e-4)

    def test_scale_length_ignores_offset(self) -> None:
        assert scale_length(0.5) == 36.0
        assert scale_length(1.0 / 3.0) == round(24.0, 5)
