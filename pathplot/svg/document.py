"""SVG document assembly.

Wraps emitted fragments in the fixed XML/DOCTYPE header and a container
sized from the output canvas.  Pure string assembly; writing the result to
disk is the caller's job (see ``pathplot.utils.fs.atomic_write_text``).
"""

from __future__ import annotations

from io import StringIO
from typing import Iterable

from pathplot.geometry.mapping import OutputCanvas
from pathplot.svg.emitter import PathFragment, fmt

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8" standalone="no"?>'
DOCTYPE = (
    '<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN" '
    '"http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd">'
)
SVG_NS = "http://www.w3.org/2000/svg"


def svg_open_tag(canvas: OutputCanvas) -> str:
    """Container element sized in points, with a matching viewBox."""
    w = fmt(canvas.width_units)
    h = fmt(canvas.height_units)
    return (
        f'<svg version="1.1" width="{w}pt" height="{h}pt" '
        f'viewBox="0 0 {w} {h}" overflow="visible" xmlns="{SVG_NS}">'
    )


def build_document(fragments: Iterable[PathFragment], canvas: OutputCanvas) -> str:
    """Assemble a complete SVG document.

    Parameters
    ----------
    fragments : Iterable[PathFragment]
        Emitted shapes, written in the given order, one per line.
    canvas : OutputCanvas
        Canvas size in points.

    Returns
    -------
    str
        Document text terminated by a newline.
    """
    buf = StringIO()
    buf.write(XML_DECLARATION + "\n")
    buf.write(DOCTYPE + "\n")
    buf.write(svg_open_tag(canvas) + "\n")
    for fragment in fragments:
        buf.write(fragment.to_svg() + "\n")
    buf.write("</svg>\n")
    return buf.getvalue()
