"""Background and Cartesian grid."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .canvas import Canvas, path_from_points
from .color import Color
from .geometry import Point
from .transform import CoordinateTransform

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

# Above this many lines in one direction only the axis line is drawn.
MAX_GRID_LINES = 10_000


@dataclass(frozen=True)
class GridStyle:
    """Colors and widths used by :class:`GridRenderer`.

    ``axis_width`` applies to the one line per direction nearest the surface
    center; every other line uses ``line_width``.
    """

    background: Color = Color(0.95, 0.95, 1.0)
    line_color: Color = Color(0.8, 0.9, 1.0)
    line_width: float = 1.0
    axis_width: float = 2.0


def grid_positions(extent: float, spacing: float) -> np.ndarray:
    """Positions ``0, spacing, 2*spacing, ...`` strictly below ``extent``."""
    count = int(np.ceil(extent / spacing))
    positions = np.arange(count, dtype=float) * spacing
    return positions[positions < extent]


def _axis_candidates(extent: float, spacing: float) -> np.ndarray:
    """The two grid positions around the center, without building the full grid."""
    k = np.floor(extent / 2.0 / spacing)
    candidates = np.array([k, k + 1.0]) * spacing
    return candidates[candidates < extent]


def axis_index(positions: np.ndarray, center: float) -> int:
    """Index of the position nearest ``center``; ties go to the lower index."""
    return int(np.argmin(np.abs(positions - center)))


class GridRenderer:
    """Fills the background, then strokes horizontal and vertical grid lines."""

    def __init__(self, style: GridStyle | None = None) -> None:
        self.style = style or GridStyle()

    def draw(self, canvas: Canvas, transform: CoordinateTransform) -> None:
        style = self.style
        canvas.fill_rect(0.0, 0.0, transform.width, transform.height, color=style.background)
        self._draw_lines(canvas, transform, horizontal=True)
        self._draw_lines(canvas, transform, horizontal=False)

    def _draw_lines(self, canvas: Canvas, transform: CoordinateTransform, *, horizontal: bool) -> None:
        style = self.style
        extent = transform.height if horizontal else transform.width
        span = transform.width if horizontal else transform.height

        count = int(np.ceil(extent / transform.scale))
        if count > MAX_GRID_LINES:
            logger.warning(
                "grid: %d %s lines at scale=%g exceeds %d; drawing the axis only",
                count,
                "horizontal" if horizontal else "vertical",
                transform.scale,
                MAX_GRID_LINES,
            )
            positions = _axis_candidates(extent, transform.scale)
        else:
            positions = grid_positions(extent, transform.scale)
        axis = axis_index(positions, extent / 2.0)
        indices = [axis] if count > MAX_GRID_LINES else range(len(positions))

        for i in indices:
            pos = float(positions[i])
            if horizontal:
                path = path_from_points([Point(0.0, pos), Point(span, pos)])
            else:
                path = path_from_points([Point(pos, 0.0), Point(pos, span)])
            width = style.axis_width if i == axis else style.line_width
            canvas.stroke_path(path, line_width=width, color=style.line_color)


__all__ = ["GridRenderer", "GridStyle", "MAX_GRID_LINES", "axis_index", "grid_positions"]
