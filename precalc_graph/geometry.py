"""Logical-space value types: points and closed intervals.

``Point`` is used both for logical (mathematical) coordinates and for surface
coordinates; which space a point lives in is decided by the code that produced
it, never stored on the point itself.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, NamedTuple, Sequence, Union

import numpy as np

from .errors import InvalidRangeError
from .InputConvert import InputConvert

NumberLike = Union[int, float]
NumberLikeOrStr = Union[int, float, str]


class Point(NamedTuple):
    """An ``(x, y)`` pair."""

    x: float
    y: float


@dataclass(frozen=True)
class Interval:
    """Closed interval ``[lower, upper]`` on the real line.

    Parameters
    ----------
    lower : float
        Smallest contained value.
    upper : float
        Largest contained value. Must satisfy ``lower <= upper``.

    Raises
    ------
    InvalidRangeError
        If ``lower > upper`` or either bound is ``nan``.

    Examples
    --------
    >>> Interval(0, 1).contains(0.5)
    True
    >>> Interval(0, 1).contains(np.array([-1.0, 0.0, 2.0])).tolist()
    [False, True, False]
    """

    lower: float
    upper: float

    def __post_init__(self) -> None:
        lower = float(self.lower)
        upper = float(self.upper)
        if math.isnan(lower) or math.isnan(upper):
            raise InvalidRangeError(f"Interval bounds must be numbers, got [{lower}, {upper}]")
        if lower > upper:
            raise InvalidRangeError(f"Interval lower bound {lower} exceeds upper bound {upper}")
        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)

    @classmethod
    def coerce(cls, value: Union["Interval", Sequence[NumberLikeOrStr]]) -> "Interval":
        """Return ``value`` as an :class:`Interval`.

        Accepts an existing interval or a two-item sequence of number-likes
        (strings go through :func:`InputConvert`, so ``("0", "pi")`` works).
        """
        if isinstance(value, Interval):
            return value
        try:
            raw_lower, raw_upper = value
        except (TypeError, ValueError) as e:
            raise InvalidRangeError(f"Expected a (lower, upper) pair, got {value!r}") from e
        return cls(
            InputConvert(raw_lower, float, finite=False),
            InputConvert(raw_upper, float, finite=False),
        )

    @property
    def span(self) -> float:
        return self.upper - self.lower

    def contains(self, x: Any) -> Any:
        """Closed-interval membership; vectorized over NumPy arrays."""
        if isinstance(x, np.ndarray):
            return (x >= self.lower) & (x <= self.upper)
        return self.lower <= x <= self.upper

    def __iter__(self):
        yield self.lower
        yield self.upper


__all__ = ["Interval", "NumberLike", "NumberLikeOrStr", "Point"]
