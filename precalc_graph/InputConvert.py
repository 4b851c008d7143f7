# === SECTION: InputConvert [id: InputConvert]===
from __future__ import annotations

import math
from typing import Any, Type, TypeVar

import sympy as sp

T = TypeVar("T", int, float)


def InputConvert(obj: Any, dest_type: Type[T] = float, *, finite: bool = True) -> T:
    """
    Convert a number-like configuration value to a real ``float`` or ``int``.

    Accepted inputs:
    - ints and floats (``bool`` is rejected, it is almost always a mistake);
    - NumPy scalars and anything else exposing ``__float__``;
    - strings: first a plain ``float(s)``, then a SymPy expression such as
      ``"2*pi"`` or ``"sqrt(2)/2"`` evaluated numerically.

    Rules:
    - The value must be real. A complex result with a non-zero imaginary part
      is rejected.
    - ``dest_type=int`` requires an exact integer (``3.0`` -> ``3``, ``3.5``
      is an error).
    - With ``finite=True`` (the default) ``nan`` and ``±inf`` are rejected.

    Raises
    ------
    NotImplementedError
        If dest_type is not ``float`` or ``int``.
    ValueError
        If conversion fails or violates the rules above.
    """
    if dest_type not in (float, int):
        raise NotImplementedError(
            f"Unsupported destination type: {dest_type!r}. Only float and int are supported."
        )
    if isinstance(obj, bool):
        raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}: booleans are not numbers here.")

    value = _to_real(obj)

    if finite and not math.isfinite(value):
        raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}: value is not finite.")

    if dest_type is float:
        return value  # type: ignore[return-value]

    if not value.is_integer():
        raise ValueError(f"Could not convert {obj!r} to int: value is not an exact integer.")
    return int(value)  # type: ignore[return-value]


def _to_real(obj: Any) -> float:
    if isinstance(obj, complex):
        return _real_part(obj, obj)

    if isinstance(obj, str):
        s = obj.strip()
        if s == "":
            raise ValueError("Cannot convert empty string to a number.")
        try:
            return float(s)
        except ValueError:
            pass
        try:
            value = complex(sp.sympify(s).evalf())
        except (sp.SympifyError, TypeError, ValueError) as e:
            raise ValueError(
                f"Could not convert {obj!r} to a real number (neither directly nor via SymPy)."
            ) from e
        return _real_part(value, obj)

    try:
        return float(obj)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Could not convert {obj!r} to a real number.") from e


def _real_part(value: complex, original: Any) -> float:
    if value.imag != 0:
        raise ValueError(f"Could not convert non-real {original!r}: imaginary part is non-zero.")
    return float(value.real)

# === END OF SECTION: InputConvert [id: InputConvert]===
