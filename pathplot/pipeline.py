"""End-to-end plot planning: curves + paper -> SVG text (+ driver command).

Stages, in order:
    1. Validate the frame and the curve selection (fatal on failure)
    2. Resolve sampling resolution and plot options (recoverable, warns)
    3. Emit one fragment per curve (degenerate curves skipped or fatal)
    4. Assemble the document
    5. Optionally render the ``axicli`` command for a given document path

Nothing here writes files or launches processes; the returned
``PlotResult`` is handed to a collaborator (see ``pathplot.cli``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence, Union

from pathplot.command.axicli import PlotOptions, render_command, resolve_plot_options
from pathplot.configs.loader import PlotterConfig
from pathplot.errors import (
    DegenerateGeometry,
    EmptySelection,
    InvalidFrame,
    PlotWarning,
    WarningCode,
)
from pathplot.geometry.mapping import OutputCanvas, PaperFrame
from pathplot.geometry.primitives import CurvePrimitive, Layer
from pathplot.svg.document import build_document
from pathplot.svg.emitter import PathFragment, SvgEmitter

logger = logging.getLogger(__name__)

CurveInput = Union[Sequence[Layer], Sequence[CurvePrimitive]]
LayerSelector = Union[int, str, None]


@dataclass(frozen=True)
class RenderOutput:
    """Result of rendering curves into an SVG document."""

    document: str
    fragments: tuple[PathFragment, ...]
    warnings: tuple[PlotWarning, ...]
    skipped: int


@dataclass(frozen=True)
class PlotResult:
    """Everything a host needs to hand off a plot.

    Parameters
    ----------
    document : str
        SVG text.
    command : str | None
        ``axicli`` command line, when a document path and driver config
        were supplied.
    options : PlotOptions
        Resolved (clamped) driver options.
    resolution : float
        Sampling resolution actually used.
    warnings : tuple[PlotWarning, ...]
        Every non-fatal adjustment, in the order it was made.
    skipped : int
        Number of curves dropped as degenerate.
    """

    document: str
    command: str | None
    options: PlotOptions
    resolution: float
    warnings: tuple[PlotWarning, ...]
    skipped: int


# ---------------------------------------------------------------------------
# Validation stages
# ---------------------------------------------------------------------------


def normalize_layers(curves: CurveInput) -> list[Layer]:
    """Accept a flat curve list or a list of layers; return layers.

    A flat list becomes a single layer named ``"default"``.
    """
    items = list(curves)
    if all(isinstance(item, Layer) for item in items):
        return items
    if all(isinstance(item, CurvePrimitive) for item in items):
        return [Layer(name="default", curves=tuple(items))]
    raise TypeError("curves must be all Layer objects or all curve primitives")


def select_curves(layers: Sequence[Layer], layer: LayerSelector = None) -> list[CurvePrimitive]:
    """Pick the curves to plot.

    Parameters
    ----------
    layers : Sequence[Layer]
        All layers in plotting order.
    layer : int | str | None
        Layer index or name; ``None`` plots every layer in order.

    Raises
    ------
    EmptySelection
        No curves at all, unknown layer, or empty selected layer.
    """
    if layer is None:
        selected = [curve for lyr in layers for curve in lyr.curves]
        if not selected:
            raise EmptySelection("You must supply at least one curve to plot.")
        return selected

    if isinstance(layer, bool):
        raise TypeError("layer must be an int index or a str name")
    if isinstance(layer, int):
        if layer < 0 or layer >= len(layers):
            raise EmptySelection(
                f"There is no layer with index {layer} "
                f"({len(layers)} layer(s) available)."
            )
        chosen = layers[layer]
    else:
        matches = [lyr for lyr in layers if lyr.name == layer]
        if not matches:
            raise EmptySelection(
                f"There is no layer named '{layer}'. "
                f"Available: {[lyr.name for lyr in layers]}"
            )
        chosen = matches[0]

    if not chosen.curves:
        raise EmptySelection(f"There are no curves on layer '{chosen.name}'.")
    return list(chosen.curves)


def resolve_resolution(
    requested: float | None,
    min_step: float,
    fallback: float,
) -> tuple[float, PlotWarning | None]:
    """Apply the device-step floor to the sampling resolution.

    A resolution at or below *min_step* (or missing / non-positive) is
    replaced by *fallback* and reported.
    """
    if requested is not None and requested > min_step:
        return float(requested), None
    msg = (
        f"Polyline resolution {requested} is not above the plotter step "
        f"({min_step:.6g}), so it was set to {fallback}."
    )
    logger.warning(msg)
    return fallback, PlotWarning(
        code=WarningCode.RESOLUTION_TOO_FINE,
        message=msg,
        field="resolution",
        requested=requested,
        applied=fallback,
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_document(
    frame: PaperFrame | None,
    curves: CurveInput,
    resolution: float,
    tolerance: float,
    *,
    layer: LayerSelector = None,
    exact_arcs: bool = False,
    strict: bool = False,
) -> RenderOutput:
    """Emit and assemble the SVG document.

    Parameters
    ----------
    frame : PaperFrame | None
        Paper rectangle.
    curves : Sequence[Layer] | Sequence[CurvePrimitive]
        Curves to plot.
    resolution : float
        Already-resolved sampling resolution.
    tolerance : float
        Duplicate-point tolerance.
    layer : int | str | None
        Optional single-layer selector.
    exact_arcs : bool
        Use SVG arc commands for arcs and ellipses.
    strict : bool
        Abort on the first degenerate curve instead of skipping it.

    Raises
    ------
    InvalidFrame
        If *frame* is missing.
    EmptySelection
        If nothing is selected for plotting.
    DegenerateGeometry
        Only with ``strict=True``.
    """
    if frame is None:
        raise InvalidFrame(
            "You must supply a rectangular border (size of the paper to plot on)."
        )
    selected = select_curves(normalize_layers(curves), layer)
    canvas = OutputCanvas.for_frame(frame)
    emitter = SvgEmitter(frame, canvas, resolution, tolerance, exact_arcs=exact_arcs)

    fragments: list[PathFragment] = []
    warnings: list[PlotWarning] = []
    for index, curve in enumerate(selected):
        try:
            fragments.append(emitter.emit(curve))
        except DegenerateGeometry as exc:
            if strict:
                raise DegenerateGeometry(f"Curve #{index}: {exc}") from exc
            msg = f"Skipped curve #{index} ({type(curve).__name__}): {exc}"
            logger.warning(msg)
            warnings.append(PlotWarning(
                code=WarningCode.DEGENERATE_GEOMETRY,
                message=msg,
                field=f"curve[{index}]",
                requested=type(curve).__name__,
                applied=None,
            ))

    document = build_document(fragments, canvas)
    logger.info(
        "Rendered %d of %d curve(s) on %.4g x %.4g canvas",
        len(fragments), len(selected), canvas.width_units, canvas.height_units,
    )
    return RenderOutput(
        document=document,
        fragments=tuple(fragments),
        warnings=tuple(warnings),
        skipped=len(selected) - len(fragments),
    )


def plan_plot(
    frame: PaperFrame | None,
    curves: CurveInput,
    config: PlotterConfig,
    *,
    resolution: float | None = None,
    layer: LayerSelector = None,
    options: Mapping[str, Any] | None = None,
    document_path: str | Path | None = None,
    driver_config_path: str | Path | None = None,
    exact_arcs: bool = False,
    strict: bool = False,
) -> PlotResult:
    """Validate inputs, render the document and (optionally) the command.

    Parameters
    ----------
    frame : PaperFrame | None
        Paper rectangle.
    curves : Sequence[Layer] | Sequence[CurvePrimitive]
        Curves to plot.
    config : PlotterConfig
        Device bounds and sampling defaults.
    resolution : float | None
        Target segment length; ``None`` uses the configured default.
    layer : int | str | None
        Optional single-layer selector.
    options : Mapping[str, Any] | None
        Raw driver options; clamped to the configured bounds.
    document_path, driver_config_path : str | Path | None
        Where the caller will store the SVG and the ``axicli`` config
        file.  The command is rendered only when both are given.
    exact_arcs, strict : bool
        Passed to :func:`render_document`.

    Returns
    -------
    PlotResult
        Document, optional command, resolved options and warnings.
    """
    if frame is None:
        raise InvalidFrame(
            "You must supply a rectangular border (size of the paper to plot on)."
        )
    # Fail fast on selection before any option or geometry work
    select_curves(normalize_layers(curves), layer)

    warnings: list[PlotWarning] = []
    requested = config.sampling.default_resolution if resolution is None else resolution
    used_resolution, res_warning = resolve_resolution(
        requested, config.device.min_step, config.sampling.fallback_resolution,
    )
    if res_warning is not None:
        warnings.append(res_warning)

    plot_options, option_warnings = resolve_plot_options(options, config.options)
    warnings.extend(option_warnings)

    rendered = render_document(
        frame,
        curves,
        used_resolution,
        config.sampling.dedupe_tolerance,
        layer=layer,
        exact_arcs=exact_arcs,
        strict=strict,
    )
    warnings.extend(rendered.warnings)

    command = None
    if document_path is not None and driver_config_path is not None:
        command = render_command(
            document_path, driver_config_path, plot_options, cli=config.device.cli,
        )

    return PlotResult(
        document=rendered.document,
        command=command,
        options=plot_options,
        resolution=used_resolution,
        warnings=tuple(warnings),
        skipped=rendered.skipped,
    )
