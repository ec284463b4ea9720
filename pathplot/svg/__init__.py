"""
SVG output module.

Converts curve primitives to path fragments and assembles the plotter
document around them.
"""

from pathplot.svg.document import build_document
from pathplot.svg.emitter import PathFragment, SvgEmitter, emit_curve

__all__ = ["PathFragment", "SvgEmitter", "build_document", "emit_curve"]
