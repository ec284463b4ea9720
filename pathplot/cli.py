"""Command-line entry point.

Renders a plot job to an SVG file and prints the matching ``axicli``
command.  The command is printed, never launched.

Usage:
    pathplot render job.yaml
    pathplot render job.yaml --out-dir plots --name flowers --layer outline
    pathplot render job.yaml --plotter-config axidraw_conf.py --exact-arcs
    python -m pathplot render job.yaml --json-logs

Exit codes:
    0  success
    1  invalid job, config or geometry
    2  usage error (argparse)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, Union

from pathplot.configs.loader import ConfigError, load_config
from pathplot.errors import PathPlotError
from pathplot.pipeline import plan_plot
from pathplot.utils import fs
from pathplot.utils.logging_config import pop_context, push_context, setup_logging
from pathplot.utils.validators import load_plot_job

logger = logging.getLogger(__name__)


def _layer_arg(value: str) -> Union[int, str]:
    """Interpret ``--layer`` as an index when it is all digits."""
    return int(value) if value.isdigit() else value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathplot",
        description="Serialize plot jobs to SVG for pen plotters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a job file to SVG")
    render.add_argument("job", type=str, help="Plot job file (YAML, plot_job.v1)")
    render.add_argument(
        "--config",
        "-c",
        type=str,
        help="Plotter configuration file (default: bundled plotter.yaml)",
    )
    render.add_argument(
        "--out-dir",
        "-o",
        type=str,
        help="Output directory (default: output.directory from config)",
    )
    render.add_argument(
        "--name",
        "-n",
        type=str,
        help="Document base name (default: job name, else a timestamp)",
    )
    render.add_argument(
        "--layer",
        "-l",
        type=_layer_arg,
        help="Plot only this layer (index or name)",
    )
    render.add_argument(
        "--plotter-config",
        type=str,
        help="axicli configuration file; enables command output",
    )
    render.add_argument(
        "--exact-arcs",
        action="store_true",
        help="Encode arcs and ellipses as SVG arc commands instead of polylines",
    )
    render.add_argument(
        "--strict",
        action="store_true",
        help="Abort on degenerate curves instead of skipping them",
    )
    render.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines on stderr",
    )
    render.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: logging.level from config)",
    )
    return parser


def _render(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    setup_logging(
        args.log_level or config.logging.level,
        json=args.json_logs or config.logging.json,
        context={"app": "pathplot"},
    )

    job = load_plot_job(args.job)
    name = args.name or job.name or fs.default_document_name(
        config.output.timestamp_format, suffix=""
    )
    out_dir = Path(args.out_dir or config.output.directory)
    document_path = (out_dir / f"{name}.svg").resolve()
    layer = args.layer if args.layer is not None else job.layer

    push_context(job=name)
    try:
        logger.info(
            "Loaded job with %d layer(s), %d curve(s)",
            len(job.layers), job.curve_count(),
        )
        result = plan_plot(
            job.to_frame(),
            job.to_layers(),
            config,
            resolution=job.resolution,
            layer=layer,
            options=job.options,
            document_path=document_path,
            driver_config_path=(
                Path(args.plotter_config).resolve() if args.plotter_config else None
            ),
            exact_arcs=args.exact_arcs,
            strict=args.strict,
        )
        fs.atomic_write_text(document_path, result.document)
        logger.info(
            "Wrote %s (%d warning(s), %d skipped)",
            document_path, len(result.warnings), result.skipped,
        )
    finally:
        pop_context(["job"])

    print(document_path)
    if result.command is not None:
        print(result.command)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "render":
            return _render(args)
    except (PathPlotError, ConfigError, ValueError, FileNotFoundError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    parser.error(f"unknown command {args.command!r}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
