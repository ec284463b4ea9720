"""AxiDraw ``axicli`` command rendering.

Builds the driver command line from resolved plot options.  The command is
a **value returned to the caller**; nothing here spawns a process.

Flag order is fixed::

    axicli "<svg>" --config "<cfg>" -s<down> -S<up> -a<accel> -r<lower> -R<raise> [-G3] [-C] -T

    -s / -S   pen-down / pen-up speed (1-110)
    -a        acceleration (1-100)
    -r / -R   pen lowering / raising rate (1-100)
    -G3       reorder all paths for efficiency, ignoring groups
    -C        constant speed when pen is down
    -T        report elapsed time
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

from pathplot.configs.loader import OPTION_NAMES, OptionsConfig
from pathplot.errors import PlotWarning, WarningCode

logger = logging.getLogger(__name__)

OPTION_LABELS = {
    "pen_down_speed": "Pen down speed",
    "pen_up_speed": "Pen up speed",
    "acceleration": "Acceleration",
    "pen_lower_rate": "Pen lowering rate",
    "pen_raise_rate": "Pen raising rate",
}

OPTION_FLAGS = {
    "pen_down_speed": "-s",
    "pen_up_speed": "-S",
    "acceleration": "-a",
    "pen_lower_rate": "-r",
    "pen_raise_rate": "-R",
}

REORDER_FLAG = "-G3"
CONSTANT_SPEED_FLAG = "-C"
REPORT_TIME_FLAG = "-T"


class PlotOptions(BaseModel):
    """Resolved driver options (read-only once built).

    Build with :func:`resolve_plot_options`, which clamps raw input to the
    configured bounds; direct construction only checks the driver limits
    (1-110 for speeds, 1-100 for acceleration and rates).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    pen_down_speed: int = Field(25, ge=1, le=110, description="Pen-down speed (%)")
    pen_up_speed: int = Field(75, ge=1, le=110, description="Pen-up speed (%)")
    acceleration: int = Field(75, ge=1, le=100, description="Acceleration factor")
    pen_lower_rate: int = Field(50, ge=1, le=100, description="Pen lowering rate (%)")
    pen_raise_rate: int = Field(75, ge=1, le=100, description="Pen raising rate (%)")
    constant_speed: bool = Field(False, description="Constant pen-down speed")
    reorder: bool = Field(False, description="Reorder paths for efficiency")


def _as_number(name: str, value: Any) -> int | float:
    """Coerce an option value to an int, or to +-inf for unbounded input.

    Infinite and oversized values are left for the caller to clamp.
    """
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc
    if math.isnan(number):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if math.isinf(number):
        return number
    return int(round(number))


def resolve_plot_options(
    raw: Mapping[str, Any] | None,
    bounds: OptionsConfig,
) -> tuple[PlotOptions, list[PlotWarning]]:
    """Clamp raw option values and build ``PlotOptions``.

    Parameters
    ----------
    raw : Mapping[str, Any] | None
        Caller-supplied values; missing keys fall back to the configured
        defaults.
    bounds : OptionsConfig
        Per-option ranges and defaults.

    Returns
    -------
    tuple[PlotOptions, list[PlotWarning]]
        Options plus one ``OPTION_OUT_OF_RANGE`` warning per clamped value.

    Raises
    ------
    ValueError
        If a value is not numeric or an unknown option is supplied.
    """
    raw = dict(raw or {})
    warnings: list[PlotWarning] = []
    values: dict[str, Any] = {}

    for name in OPTION_NAMES:
        b = bounds.bound(name)
        requested = raw.pop(name, None)
        value = b.default if requested is None else _as_number(name, requested)
        clamped = b.clamp(value)
        if clamped != value:
            side = "less than" if value < b.minimum else "more than"
            limit = b.minimum if value < b.minimum else b.maximum
            msg = (
                f"{OPTION_LABELS[name]} cannot be {side} {limit}, "
                f"so it was set to {clamped}."
            )
            logger.warning(msg)
            warnings.append(PlotWarning(
                code=WarningCode.OPTION_OUT_OF_RANGE,
                message=msg,
                field=name,
                requested=requested,
                applied=clamped,
            ))
        values[name] = clamped

    constant_speed = raw.pop("constant_speed", None)
    reorder = raw.pop("reorder", None)
    values["constant_speed"] = bounds.constant_speed if constant_speed is None else constant_speed
    values["reorder"] = bounds.reorder if reorder is None else reorder
    # Leftover keys are rejected by the model (extra="forbid")
    values.update(raw)

    return PlotOptions(**values), warnings


def render_argv(
    document_path: str | Path,
    config_path: str | Path,
    options: PlotOptions,
    cli: str = "axicli",
) -> list[str]:
    """Driver invocation as an argument list (no shell quoting)."""
    argv = [cli, str(document_path), "--config", str(config_path)]
    for name in OPTION_NAMES:
        argv.append(f"{OPTION_FLAGS[name]}{getattr(options, name)}")
    if options.reorder:
        argv.append(REORDER_FLAG)
    if options.constant_speed:
        argv.append(CONSTANT_SPEED_FLAG)
    argv.append(REPORT_TIME_FLAG)
    return argv


def render_command(
    document_path: str | Path,
    config_path: str | Path,
    options: PlotOptions,
    cli: str = "axicli",
) -> str:
    """Driver invocation as a single command-line string.

    Paths are double-quoted; everything else is emitted verbatim in the
    fixed flag order.
    """
    argv = render_argv(document_path, config_path, options, cli)
    flags = " ".join(argv[4:])
    return f'{cli} "{argv[1]}" --config "{argv[3]}" {flags}'
