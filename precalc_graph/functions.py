"""Plottable function values.

Purpose
-------
A plottable function is a pure evaluator plus the metadata the surface needs
to draw it: an optional restricted domain, a stroke color and a label. It is a
plain frozen value rather than a class hierarchy, so combining functions is a
matter of wrapping callables.

Important gotchas
-----------------
- ``evaluate`` must be side-effect free and return the same value for the same
  ``x``. Eager surfaces cache samples; a function whose captured state changes
  after registration needs :meth:`PlotSurface.invalidate` (or a per-repaint
  surface).
- ``vectorized=True`` promises that ``evaluate`` accepts a 1-D NumPy array and
  returns an array of the same length (or a scalar, which is broadcast).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np
import sympy as sp
from sympy.core.expr import Expr
from sympy.core.symbol import Symbol

from .color import Color
from .errors import InvalidRangeError
from .geometry import Interval, NumberLikeOrStr

DomainLike = Union[Interval, Sequence[NumberLikeOrStr]]
ColorLike = Union[Color, str, Sequence[float]]

DEFAULT_COLOR = Color(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class PlottableFunction:
    """One function as registered on a :class:`PlotSurface`.

    Parameters
    ----------
    evaluate : callable
        ``x -> y``. Called with a Python float, or with a NumPy array when
        ``vectorized`` is true.
    domain : Interval or (lower, upper) or None
        Restricts sampling to ``[lower, upper]``. ``None`` means unrestricted.
    color : Color or color-like
        Stroke color for segments and markers.
    label : str
        Human-readable name, used in logs and reprs.
    vectorized : bool
        Whether ``evaluate`` accepts arrays.
    """

    evaluate: Callable[[Any], Any]
    domain: Optional[Interval] = None
    color: Color = DEFAULT_COLOR
    label: str = ""
    vectorized: bool = False

    def __post_init__(self) -> None:
        if not callable(self.evaluate):
            raise TypeError(f"evaluate must be callable, got {type(self.evaluate).__name__}")
        if self.domain is not None:
            object.__setattr__(self, "domain", Interval.coerce(self.domain))
        object.__setattr__(self, "color", Color.coerce(self.color))

    def __call__(self, x: Any) -> Any:
        return self.evaluate(x)

    def with_domain(self, domain: Optional[DomainLike]) -> "PlottableFunction":
        """Return a copy restricted to ``domain`` (``None`` lifts the restriction)."""
        return dataclasses.replace(self, domain=None if domain is None else Interval.coerce(domain))

    def with_color(self, color: ColorLike) -> "PlottableFunction":
        return dataclasses.replace(self, color=Color.coerce(color))

    def with_label(self, label: str) -> "PlottableFunction":
        return dataclasses.replace(self, label=str(label))

    # -- combinators

    def __add__(self, other: Union["PlottableFunction", float, int]) -> "PlottableFunction":
        if isinstance(other, PlottableFunction):
            f, g = self.evaluate, other.evaluate
            return dataclasses.replace(
                self,
                evaluate=lambda x: f(x) + g(x),
                domain=_intersect(self.domain, other.domain),
                label=f"({self.label} + {other.label})",
                vectorized=self.vectorized and other.vectorized,
            )
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.shifted(dy=float(other))
        return NotImplemented

    __radd__ = __add__

    def scaled(self, factor: float) -> "PlottableFunction":
        """Return ``x -> factor * f(x)``."""
        f = self.evaluate
        k = float(factor)
        return dataclasses.replace(self, evaluate=lambda x: k * f(x), label=f"{k:g}*{self.label}")

    def shifted(self, dx: float = 0.0, dy: float = 0.0) -> "PlottableFunction":
        """Return ``x -> f(x - dx) + dy``; the domain moves with ``dx``."""
        f = self.evaluate
        dx, dy = float(dx), float(dy)
        domain = self.domain
        if domain is not None and dx:
            domain = Interval(domain.lower + dx, domain.upper + dx)
        return dataclasses.replace(self, evaluate=lambda x: f(x - dx) + dy, domain=domain)


def _intersect(a: Optional[Interval], b: Optional[Interval]) -> Optional[Interval]:
    if a is None:
        return b
    if b is None:
        return a
    lower, upper = max(a.lower, b.lower), min(a.upper, b.upper)
    if lower > upper:
        raise InvalidRangeError(f"Domains [{a.lower}, {a.upper}] and [{b.lower}, {b.upper}] do not overlap")
    return Interval(lower, upper)


def plottable(
    evaluate: Union[Callable[[Any], Any], PlottableFunction],
    *,
    domain: Optional[DomainLike] = None,
    color: Optional[ColorLike] = None,
    label: Optional[str] = None,
    vectorized: Optional[bool] = None,
) -> PlottableFunction:
    """Wrap a callable as a :class:`PlottableFunction`.

    When ``evaluate`` is already a plottable function, only the explicitly
    passed fields are replaced.

    Examples
    --------
    >>> half = plottable(lambda x: x / 2, domain=(0, 4), color="red")
    >>> half(3.0)
    1.5
    """
    if isinstance(evaluate, PlottableFunction):
        changes: dict[str, Any] = {}
        if domain is not None:
            changes["domain"] = Interval.coerce(domain)
        if color is not None:
            changes["color"] = Color.coerce(color)
        if label is not None:
            changes["label"] = str(label)
        if vectorized is not None:
            changes["vectorized"] = bool(vectorized)
        return dataclasses.replace(evaluate, **changes) if changes else evaluate

    return PlottableFunction(
        evaluate=evaluate,
        domain=None if domain is None else Interval.coerce(domain),
        color=DEFAULT_COLOR if color is None else Color.coerce(color),
        label=label if label is not None else getattr(evaluate, "__name__", ""),
        vectorized=bool(vectorized),
    )


def from_expression(
    expr: Expr,
    var: Symbol,
    *,
    domain: Optional[DomainLike] = None,
    color: Optional[ColorLike] = None,
    label: Optional[str] = None,
) -> PlottableFunction:
    """Compile a SymPy expression in one variable into a vectorized function.

    The expression must already be a SymPy object; free symbols other than
    ``var`` are rejected because there is nothing to bind them to.

    Examples
    --------
    >>> x = sp.symbols("x")
    >>> f = from_expression(sp.sin(x) ** 2, x)
    >>> float(f(0.0))
    0.0
    """
    expr = sp.sympify(expr)
    extra = expr.free_symbols - {var}
    if extra:
        names = ", ".join(sorted(str(s) for s in extra))
        raise ValueError(f"Expression {expr} has unbound symbols: {names}")
    compiled = sp.lambdify(var, expr, modules="numpy")

    def evaluate(x: Any) -> Any:
        return np.asarray(compiled(x), dtype=float)

    return PlottableFunction(
        evaluate=evaluate,
        domain=None if domain is None else Interval.coerce(domain),
        color=DEFAULT_COLOR if color is None else Color.coerce(color),
        label=str(expr) if label is None else label,
        vectorized=True,
    )


__all__ = [
    "ColorLike",
    "DEFAULT_COLOR",
    "DomainLike",
    "PlottableFunction",
    "from_expression",
    "plottable",
]
