"""Plotly host canvas.

Translates the drawing primitives into Plotly layout shapes on a
``plotly.graph_objects.Figure`` whose axes are pinned to surface coordinates
(origin top-left, y downward, one surface unit per pixel).

Important gotchas
-----------------
- Plotly path shapes do not support SVG arc commands, so arcs are emitted as
  cubic Bezier approximations (at most a quarter turn per Bezier).
- Shapes are staged and assigned to ``figure.layout.shapes`` in one step on
  :meth:`PlotlyCanvas.commit`.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

import plotly.graph_objects as go

from .canvas import Arc, LineTo, MoveTo, Path
from .color import Color


def _fmt(value: float) -> str:
    return f"{value:.6g}"


def _arc_commands(arc: Arc) -> List[str]:
    cx, cy, r = arc.center.x, arc.center.y, arc.radius
    sweep = arc.end_angle - arc.start_angle
    pieces = max(1, int(math.ceil(abs(sweep) / (math.pi / 2.0) - 1e-12)))
    delta = sweep / pieces
    k = 4.0 / 3.0 * math.tan(delta / 4.0)

    a0 = arc.start_angle
    commands = [f"M{_fmt(cx + r * math.cos(a0))},{_fmt(cy + r * math.sin(a0))}"]
    for _ in range(pieces):
        a1 = a0 + delta
        p0 = (cx + r * math.cos(a0), cy + r * math.sin(a0))
        p3 = (cx + r * math.cos(a1), cy + r * math.sin(a1))
        p1 = (p0[0] - k * r * math.sin(a0), p0[1] + k * r * math.cos(a0))
        p2 = (p3[0] + k * r * math.sin(a1), p3[1] - k * r * math.cos(a1))
        commands.append(
            f"C{_fmt(p1[0])},{_fmt(p1[1])} {_fmt(p2[0])},{_fmt(p2[1])} {_fmt(p3[0])},{_fmt(p3[1])}"
        )
        a0 = a1
    return commands


def svg_path(path: Path) -> str:
    """Render a :class:`Path` as the SVG subset Plotly path shapes accept."""
    commands: List[str] = []
    for element in path.elements:
        if isinstance(element, MoveTo):
            commands.append(f"M{_fmt(element.point.x)},{_fmt(element.point.y)}")
        elif isinstance(element, LineTo):
            commands.append(f"L{_fmt(element.point.x)},{_fmt(element.point.y)}")
        else:
            commands.extend(_arc_commands(element))
    return " ".join(commands)


class PlotlyCanvas:
    """Canvas backed by a Plotly figure.

    Parameters
    ----------
    width : float
        Surface width in pixels.
    height : float, optional
        Surface height; defaults to ``width``.
    figure : plotly.graph_objects.Figure, optional
        Figure to draw into. A new one is created when omitted.
    """

    def __init__(self, width: float, height: Optional[float] = None, *, figure: Optional[go.Figure] = None) -> None:
        self._width = float(width)
        self._height = float(width if height is None else height)
        self.figure = figure if figure is not None else go.Figure()
        self._staged: List[Dict[str, Any]] = []

        self.figure.update_layout(
            width=int(round(self._width)),
            height=int(round(self._height)),
            margin=dict(l=0, r=0, t=0, b=0),
            showlegend=False,
            plot_bgcolor="rgba(0, 0, 0, 0)",
            paper_bgcolor="rgba(0, 0, 0, 0)",
        )
        self.figure.update_xaxes(range=[0.0, self._width], visible=False, fixedrange=True)
        # Reversed range puts y=0 at the top, like the drawing surface.
        self.figure.update_yaxes(range=[self._height, 0.0], visible=False, fixedrange=True)

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def fill_rect(self, x: float, y: float, width: float, height: float, *, color: Color) -> None:
        self._staged.append(
            dict(
                type="rect",
                xref="x",
                yref="y",
                x0=x,
                y0=y,
                x1=x + width,
                y1=y + height,
                fillcolor=color.to_plotly(),
                line=dict(width=0),
            )
        )

    def stroke_path(self, path: Path, *, line_width: float, color: Color) -> None:
        if path.is_empty():
            return
        self._staged.append(
            dict(
                type="path",
                xref="x",
                yref="y",
                path=svg_path(path),
                line=dict(color=color.to_plotly(), width=line_width),
            )
        )

    def commit(self) -> None:
        self.figure.layout.shapes = tuple(self._staged)
        self._staged = []

    def discard(self) -> None:
        self._staged = []


__all__ = ["PlotlyCanvas", "svg_path"]
