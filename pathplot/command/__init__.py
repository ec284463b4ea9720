"""Driver command rendering (``axicli``)."""

from pathplot.command.axicli import (
    PlotOptions,
    render_argv,
    render_command,
    resolve_plot_options,
)

__all__ = ["PlotOptions", "render_argv", "render_command", "resolve_plot_options"]
