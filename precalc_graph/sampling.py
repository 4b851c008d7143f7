"""Sampling of plottable functions over a closed x-interval.

Purpose
-------
Turns one :class:`PlottableFunction` into a :class:`SampledCurve`: the ordered
points the curve renderer connects and marks.

Concepts and structure
----------------------
- The x walk is index based (``x1 + i*step``) so drift does not accumulate, and
  inclusive at both ends: the last sample is the largest grid value ``<= x2``.
- Grid positions outside the function's domain are skipped without evaluating
  the function there. Non-finite results are skipped the same way.
- A segment ending at a sample is legal only when the grid sample just before
  it (``x - step``) was kept as well. This is what keeps a domain-restricted
  curve from drawing a dangling segment into the restricted region.

Important gotchas
-----------------
- The returned arrays are read-only.
- Exceptions raised by ``evaluate`` propagate unchanged.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, Iterator, Tuple

import numpy as np

from .errors import InvalidRangeError
from .functions import PlottableFunction
from .geometry import Point

# Relative slack, in units of ``step``, when deciding whether x2 itself is on the grid.
_GRID_TOLERANCE = 1e-9


class SamplingMode(str, enum.Enum):
    """When a registered function is sampled.

    ``EAGER`` samples at registration and reuses the stored curve until the
    range changes or the caller invalidates it. ``PER_REPAINT`` samples on
    every repaint.
    """

    EAGER = "eager"
    PER_REPAINT = "per_repaint"

    @classmethod
    def coerce(cls, value: Any) -> "SamplingMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower().replace("-", "_"))
        except ValueError as e:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown sampling mode {value!r}; expected one of: {choices}") from e


@dataclass(frozen=True, eq=False)
class SampledCurve:
    """Ordered samples of one function.

    Parameters
    ----------
    x, y : numpy.ndarray
        Logical coordinates of the kept samples.
    connected : numpy.ndarray of bool
        ``connected[i]`` is true when the segment from sample ``i-1`` to sample
        ``i`` may be drawn. ``connected[0]`` is always false.
    """

    x: np.ndarray
    y: np.ndarray
    connected: np.ndarray

    def __post_init__(self) -> None:
        for name in ("x", "y", "connected"):
            arr = np.array(getattr(self, name), copy=True)
            arr.flags.writeable = False
            object.__setattr__(self, name, arr)
        if not (len(self.x) == len(self.y) == len(self.connected)):
            raise ValueError("x, y and connected must have the same length")

    @classmethod
    def empty(cls) -> "SampledCurve":
        return cls(np.empty(0), np.empty(0), np.empty(0, dtype=bool))

    def __len__(self) -> int:
        return len(self.x)

    @property
    def points(self) -> Tuple[Point, ...]:
        return tuple(Point(float(x), float(y)) for x, y in zip(self.x, self.y))

    def segments(self) -> Iterator[Tuple[Point, Point]]:
        """Yield the drawable ``(start, end)`` pairs in order."""
        for i in np.flatnonzero(self.connected):
            yield (
                Point(float(self.x[i - 1]), float(self.y[i - 1])),
                Point(float(self.x[i]), float(self.y[i])),
            )

    def __repr__(self) -> str:
        return f"SampledCurve(n={len(self)}, segments={int(np.count_nonzero(self.connected))})"


def sample_grid(x1: float, x2: float, step: float) -> np.ndarray:
    """Return the x positions ``x1, x1+step, ...`` up to and including ``x2``.

    Raises
    ------
    InvalidRangeError
        If ``step`` is not a positive finite number, a bound is not finite,
        ``x1 > x2``, or the interval holds more steps than a float can count.
    """
    x1, x2, step = float(x1), float(x2), float(step)
    if not (math.isfinite(step) and step > 0):
        raise InvalidRangeError(f"step must be a positive finite number, got {step}")
    if not (math.isfinite(x1) and math.isfinite(x2)):
        raise InvalidRangeError(f"Sampling bounds must be finite, got [{x1}, {x2}]")
    if x1 > x2:
        raise InvalidRangeError(f"Sampling interval is inverted: x1={x1} > x2={x2}")

    steps = (x2 - x1) / step
    if not math.isfinite(steps):
        raise InvalidRangeError(f"Sampling interval [{x1}, {x2}] with step {step} has no finite sample count")
    count = int(math.floor(steps + _GRID_TOLERANCE)) + 1
    xs = x1 + np.arange(count, dtype=float) * step
    if xs[-1] > x2:
        xs[-1] = x2
    return xs


def _evaluate(fn: PlottableFunction, xs: np.ndarray) -> np.ndarray:
    if len(xs) == 0:
        return np.empty(0)
    if fn.vectorized:
        ys = np.asarray(fn.evaluate(xs), dtype=float)
        return np.broadcast_to(ys, xs.shape).astype(float)
    return np.fromiter((fn.evaluate(float(x)) for x in xs), dtype=float, count=len(xs))


def sample(fn: PlottableFunction, x1: float, x2: float, step: float) -> SampledCurve:
    """Sample ``fn`` on ``[x1, x2]`` every ``step``.

    Examples
    --------
    >>> from precalc_graph.functions import plottable
    >>> sample(plottable(lambda x: x), -1, 1, 1).points
    (Point(x=-1.0, y=-1.0), Point(x=0.0, y=0.0), Point(x=1.0, y=1.0))
    """
    grid = sample_grid(x1, x2, step)

    if fn.domain is None:
        kept = np.ones(len(grid), dtype=bool)
    else:
        kept = fn.domain.contains(grid)

    ys = np.full(len(grid), np.nan)
    ys[kept] = _evaluate(fn, grid[kept])
    kept &= np.isfinite(ys)

    # Lookback: the previous grid sample must have been kept too.
    previous_kept = np.zeros(len(grid), dtype=bool)
    previous_kept[1:] = kept[:-1]
    connected = kept & previous_kept

    return SampledCurve(x=grid[kept], y=ys[kept], connected=connected[kept])


__all__ = ["SampledCurve", "SamplingMode", "sample", "sample_grid"]
