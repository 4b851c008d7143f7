"""Ready-made precalculus functions.

Every factory returns an immutable, vectorized :class:`PlottableFunction`.
Parameters are fixed at construction; build a new function (and re-register
it) to change them.

Formulas
--------
- ``exponential(n)``: ``y = x**n``. Negative bases with non-integer ``n``
  produce ``nan``, which the sampler skips.
- ``line(m, b)``: ``y = m*x + b``.
- ``sine(period, amplitude, phase_shift, vertical_shift)``:
  ``y = amplitude * sin(period*x - phase_shift/period) + vertical_shift``.
- ``cosine(...)``: same with ``cos``.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np

from .color import NAMED_COLORS
from .functions import ColorLike, DomainLike, PlottableFunction


def _vectorized(
    evaluate: Callable[[Any], Any],
    *,
    label: str,
    color: ColorLike,
    domain: Optional[DomainLike],
) -> PlottableFunction:
    return PlottableFunction(evaluate=evaluate, domain=domain, color=color, label=label, vectorized=True)


def exponential(
    exponent: float,
    *,
    color: ColorLike = NAMED_COLORS["red"],
    domain: Optional[DomainLike] = None,
) -> PlottableFunction:
    n = float(exponent)

    def evaluate(x: Any) -> Any:
        with np.errstate(invalid="ignore", divide="ignore"):
            return np.power(np.asarray(x, dtype=float), n)

    return _vectorized(evaluate, label=f"x^{n:g}", color=color, domain=domain)


def line(
    slope: float = 1.0,
    offset: float = 2.0,
    *,
    color: ColorLike = NAMED_COLORS["green"],
    domain: Optional[DomainLike] = None,
) -> PlottableFunction:
    m, b = float(slope), float(offset)

    def evaluate(x: Any) -> Any:
        return m * np.asarray(x, dtype=float) + b

    return _vectorized(evaluate, label=f"{m:g}*x + {b:g}", color=color, domain=domain)


def _periodic(
    kernel: Callable[[Any], Any],
    name: str,
    period: float,
    amplitude: float,
    phase_shift: float,
    vertical_shift: float,
    color: ColorLike,
    domain: Optional[DomainLike],
) -> PlottableFunction:
    p, a, ps, vs = float(period), float(amplitude), float(phase_shift), float(vertical_shift)
    if p == 0.0:
        raise ValueError(f"{name}() period must be non-zero")

    def evaluate(x: Any) -> Any:
        return a * kernel(p * np.asarray(x, dtype=float) - ps / p) + vs

    return _vectorized(evaluate, label=f"{a:g}*{name}({p:g}x - {ps:g}/{p:g}) + {vs:g}", color=color, domain=domain)


def sine(
    period: float = 1.0,
    amplitude: float = 1.0,
    phase_shift: float = 0.0,
    vertical_shift: float = 0.0,
    *,
    color: ColorLike = NAMED_COLORS["black"],
    domain: Optional[DomainLike] = None,
) -> PlottableFunction:
    return _periodic(np.sin, "sin", period, amplitude, phase_shift, vertical_shift, color, domain)


def cosine(
    period: float = 1.0,
    amplitude: float = 1.0,
    phase_shift: float = 0.0,
    vertical_shift: float = 0.0,
    *,
    color: ColorLike = NAMED_COLORS["black"],
    domain: Optional[DomainLike] = None,
) -> PlottableFunction:
    return _periodic(np.cos, "cos", period, amplitude, phase_shift, vertical_shift, color, domain)


__all__ = ["cosine", "exponential", "line", "sine"]
