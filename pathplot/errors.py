"""Exceptions and structured warnings shared across the pipeline.

Fatal conditions are exceptions.  Recoverable adjustments (clamped options,
substituted resolution, skipped curves) are returned to the caller as
``PlotWarning`` records and also logged at WARNING level by the module that
made the adjustment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PathPlotError(Exception):
    """Base class for all pathplot errors."""

    pass


class InvalidFrame(PathPlotError):
    """Raised when the paper rectangle is missing or degenerate."""

    pass


class EmptySelection(PathPlotError):
    """Raised when there is nothing to plot (no curves, bad or empty layer)."""

    pass


class DegenerateGeometry(PathPlotError):
    """Raised when a curve reduces to fewer than two usable points."""

    pass


# ---------------------------------------------------------------------------
# Warnings
# ---------------------------------------------------------------------------


class WarningCode(str, Enum):
    """Kinds of non-fatal adjustments reported to the caller."""

    OPTION_OUT_OF_RANGE = "option_out_of_range"
    RESOLUTION_TOO_FINE = "resolution_too_fine"
    DEGENERATE_GEOMETRY = "degenerate_geometry"


@dataclass(frozen=True, slots=True)
class PlotWarning:
    """A recovered problem.

    Parameters
    ----------
    code : WarningCode
        What kind of adjustment was made.
    message : str
        Human-readable description.
    field : str | None
        Name of the option or the curve locator the warning refers to.
    requested : Any
        Value the caller supplied.
    applied : Any
        Value actually used (``None`` when the item was skipped).
    """

    code: WarningCode
    message: str
    field: str | None = None
    requested: Any = None
    applied: Any = None

    def __str__(self) -> str:
        return self.message
