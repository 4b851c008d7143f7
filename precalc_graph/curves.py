"""Segments and point markers for one sampled curve."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .canvas import Canvas, Path
from .color import Color
from .sampling import SampledCurve
from .transform import CoordinateTransform


@dataclass(frozen=True)
class CurveStyle:
    line_width: float = 1.0
    marker_radius: float = 1.0
    marker_width: float = 2.0


class CurveRenderer:
    """Draws a :class:`SampledCurve` in one color.

    Segments go into one stroked path and markers into a second one, so a
    curve costs exactly two ``stroke_path`` calls (one with a single point,
    none when empty).
    """

    def __init__(self, style: CurveStyle | None = None) -> None:
        self.style = style or CurveStyle()

    def draw(self, canvas: Canvas, curve: SampledCurve, transform: CoordinateTransform, color: Color) -> None:
        if len(curve) == 0:
            return
        sx, sy = transform.to_surface_arrays(curve.x, curve.y)

        segments = Path()
        for i in np.flatnonzero(curve.connected):
            segments.move_to(sx[i - 1], sy[i - 1])
            segments.add_line(sx[i], sy[i])
        if not segments.is_empty():
            canvas.stroke_path(segments, line_width=self.style.line_width, color=color)

        markers = Path()
        for x, y in zip(sx, sy):
            markers.add_arc(x, y, self.style.marker_radius)
        canvas.stroke_path(markers, line_width=self.style.marker_width, color=color)


__all__ = ["CurveRenderer", "CurveStyle"]
