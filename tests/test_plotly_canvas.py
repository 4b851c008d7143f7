from __future__ import annotations

import math

import pytest

from precalc_graph import Color, Path, PlotlyCanvas
from precalc_graph.plotly_canvas import svg_path

RED = Color(1.0, 0.0, 0.0)


def test_svg_path_for_polyline() -> None:
    path = Path().move_to(0, 600).add_line(300, 300).add_line(600, 0)
    assert svg_path(path) == "M0,600 L300,300 L600,0"


def test_full_circle_becomes_four_beziers() -> None:
    text = svg_path(Path().add_arc(10, 20, 1.0))
    assert text.startswith("M11,20 ")
    assert text.count("C") == 4
    assert text.endswith(" 11,20")


def test_quarter_arc_is_one_bezier() -> None:
    text = svg_path(Path().add_arc(0, 0, 2.0, 0.0, math.pi / 2))
    assert text.count("C") == 1


def test_add_line_requires_current_point() -> None:
    with pytest.raises(ValueError, match="move_to"):
        Path().add_line(1, 1)


def test_layout_maps_surface_coordinates() -> None:
    canvas = PlotlyCanvas(600)
    layout = canvas.figure.layout
    assert (layout.width, layout.height) == (600, 600)
    assert tuple(layout.xaxis.range) == (0.0, 600.0)
    assert tuple(layout.yaxis.range) == (600.0, 0.0)
    assert layout.xaxis.visible is False


def test_shapes_appear_only_on_commit() -> None:
    canvas = PlotlyCanvas(600)
    canvas.fill_rect(0, 0, 600, 600, color=Color(0.95, 0.95, 1.0))
    canvas.stroke_path(Path().move_to(0, 0).add_line(10, 10), line_width=2.0, color=RED)
    canvas.stroke_path(Path(), line_width=1.0, color=RED)
    assert len(canvas.figure.layout.shapes) == 0

    canvas.commit()
    rect, stroke = canvas.figure.layout.shapes
    assert rect.type == "rect"
    assert rect.fillcolor == "rgba(242, 242, 255, 1)"
    assert stroke.type == "path"
    assert stroke.path == "M0,0 L10,10"
    assert stroke.line.width == 2.0
    assert stroke.line.color == "rgba(255, 0, 0, 1)"


def test_discard_drops_staged_shapes() -> None:
    canvas = PlotlyCanvas(600)
    canvas.fill_rect(0, 0, 600, 600, color=RED)
    canvas.commit()

    canvas.stroke_path(Path().move_to(0, 0).add_line(1, 1), line_width=1.0, color=RED)
    canvas.discard()
    canvas.commit()
    assert len(canvas.figure.layout.shapes) == 0
