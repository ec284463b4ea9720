"""Tests for SVG document assembly."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from pathplot.geometry.mapping import OutputCanvas, PaperFrame
from pathplot.geometry.primitives import Circle, Line, Polyline
from pathplot.svg.document import DOCTYPE, SVG_NS, XML_DECLARATION, build_document, svg_open_tag
from pathplot.svg.emitter import SvgEmitter


@pytest.fixture()
def canvas() -> OutputCanvas:
    return OutputCanvas.for_frame(PaperFrame(0.0, 11.0, 0.0, 8.5))


class TestHeader:
    def test_open_tag_sized_in_points(self, canvas: OutputCanvas) -> None:
        assert svg_open_tag(canvas) == (
            '<svg version="1.1" width="792pt" height="612pt" '
            'viewBox="0 0 792 612" overflow="visible" '
            'xmlns="http://www.w3.org/2000/svg">'
        )

    def test_empty_document_lines(self, canvas: OutputCanvas) -> None:
        lines = build_document([], canvas).splitlines()
        assert lines == [
            '<?xml version="1.0" encoding="utf-8" standalone="no"?>',
            '<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN" '
            '"http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd">',
            svg_open_tag(canvas),
            "</svg>",
        ]
        assert lines[0] == XML_DECLARATION
        assert lines[1] == DOCTYPE

    def test_document_ends_with_newline(self, canvas: OutputCanvas) -> None:
        assert build_document([], canvas).endswith("</svg>\n")


class TestBody:
    def test_fragments_in_input_order(self) -> None:
        frame = PaperFrame(0.0, 2.0, 0.0, 2.0)
        canvas = OutputCanvas.for_frame(frame)
        emitter = SvgEmitter(frame, canvas, 0.1, 0.001)
        curves = [
            Circle((1, 1), 0.25),
            Line((0, 0), (1, 1)),
            Polyline(((0, 0), (2, 0), (2, 2)), closed=True),
        ]
        doc = build_document([emitter.emit(c) for c in curves], canvas)
        body = doc.splitlines()[3:-1]
        assert len(body) == 3
        assert body[0].startswith("<circle ")
        assert 'd="M0,144 L72,72"' in body[1]
        assert body[2].startswith('<path d="M0,144 L144,144 L144,0 Z"')

    def test_document_is_well_formed_xml(self) -> None:
        frame = PaperFrame(0.0, 2.0, 0.0, 2.0)
        canvas = OutputCanvas.for_frame(frame)
        emitter = SvgEmitter(frame, canvas, 0.1, 0.001)
        doc = build_document([emitter.emit(Line((0, 0), (1, 1)))], canvas)
        # Parse from the <svg> element on, skipping the prolog
        root = ET.fromstring(doc.split("\n", 2)[2])
        assert root.tag == f"{{{SVG_NS}}}svg"
        paths = root.findall(f"{{{SVG_NS}}}path")
        assert len(paths) == 1
        assert paths[0].get("stroke-width") == "0.25"
        assert paths[0].get("fill") == "none"
