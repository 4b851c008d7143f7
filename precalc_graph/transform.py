"""Logical-to-surface coordinate mapping.

The surface origin is its top-left corner with y growing downward; the
logical origin sits at the surface center and y grows upward. One uniform
scale factor converts logical units to surface units on both axes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import InvalidRangeError
from .geometry import Point


def scale_for(surface_width: float, x1: float, x2: float) -> float:
    """Return ``surface_width / (max(x1, x2) - min(x1, x2))``.

    The bounds may be given in either order.

    Raises
    ------
    InvalidRangeError
        If the width is not positive or the span is zero or not finite.
    """
    surface_width = float(surface_width)
    if not (math.isfinite(surface_width) and surface_width > 0):
        raise InvalidRangeError(f"surface width must be positive, got {surface_width}")
    span = max(x1, x2) - min(x1, x2)
    if not (math.isfinite(span) and span > 0):
        raise InvalidRangeError(f"x-range [{x1}, {x2}] has no usable span")
    return surface_width / span


def to_surface(p: Point, surface_width: float, surface_height: float, scale: float) -> Point:
    """Map a logical point onto the surface."""
    return Point(surface_width / 2.0 + p.x * scale, surface_height / 2.0 - p.y * scale)


def to_logical(p: Point, surface_width: float, surface_height: float, scale: float) -> Point:
    """Inverse of :func:`to_surface`."""
    return Point((p.x - surface_width / 2.0) / scale, (surface_height / 2.0 - p.y) / scale)


@dataclass(frozen=True)
class CoordinateTransform:
    """The transform used for one repaint.

    Both renderers receive the same instance, so a repaint never mixes scale
    values.
    """

    width: float
    height: float
    scale: float

    def __post_init__(self) -> None:
        for name in ("width", "height", "scale"):
            value = float(getattr(self, name))
            if not (math.isfinite(value) and value > 0):
                raise InvalidRangeError(f"{name} must be a positive finite number, got {value}")
            object.__setattr__(self, name, value)

    @classmethod
    def for_range(cls, width: float, height: float, x1: float, x2: float) -> "CoordinateTransform":
        return cls(width, height, scale_for(width, x1, x2))

    @property
    def origin(self) -> Point:
        """Surface position of the logical origin."""
        return Point(self.width / 2.0, self.height / 2.0)

    def to_surface(self, p: Point) -> Point:
        return to_surface(p, self.width, self.height, self.scale)

    def to_logical(self, p: Point) -> Point:
        return to_logical(p, self.width, self.height, self.scale)

    def to_surface_arrays(self, x: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized :meth:`to_surface` over matching coordinate arrays."""
        sx = self.width / 2.0 + np.asarray(x, dtype=float) * self.scale
        sy = self.height / 2.0 - np.asarray(y, dtype=float) * self.scale
        return sx, sy


__all__ = ["CoordinateTransform", "scale_for", "to_logical", "to_surface"]
