"""RGBA colors for grid and curve strokes.

Colors are stored as floats in ``[0, 1]`` (the convention of most 2D drawing
APIs) and converted to Plotly's ``rgba(...)`` strings on the way out.
"""

from __future__ import annotations

import itertools
import re
from dataclasses import dataclass
from typing import Any, Iterator

from plotly.colors import hex_to_rgb, qualitative

_RGB_FUNC_RE = re.compile(
    r"^rgba?\(\s*([0-9.]+)\s*,\s*([0-9.]+)\s*,\s*([0-9.]+)\s*(?:,\s*([0-9.]+)\s*)?\)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Color:
    """Immutable RGBA color with components in ``[0, 1]``."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue", "alpha"):
            value = float(getattr(self, name))
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Color component {name}={value} must be between 0.0 and 1.0")
            object.__setattr__(self, name, value)

    @classmethod
    def coerce(cls, value: Any) -> "Color":
        """Build a color from the accepted user-facing spellings.

        Accepts a :class:`Color`, a 3- or 4-tuple of floats in ``[0, 1]``,
        ``"#rrggbb"``/``"#rrggbbaa"``, ``"rgb(r, g, b)"``/``"rgba(r, g, b, a)"``
        with 0-255 channels and a 0-1 alpha, or one of :data:`NAMED_COLORS`.
        """
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            return cls._parse(value)
        try:
            components = tuple(float(c) for c in value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Could not interpret {value!r} as a color.") from e
        if len(components) not in (3, 4):
            raise ValueError(f"Color tuples need 3 or 4 components, got {len(components)}.")
        return cls(*components)

    @classmethod
    def _parse(cls, text: str) -> "Color":
        s = text.strip()
        named = NAMED_COLORS.get(s.lower())
        if named is not None:
            return named
        if s.startswith("#"):
            digits = s[1:]
            if len(digits) == 6:
                r, g, b = hex_to_rgb(s)
                return cls(r / 255.0, g / 255.0, b / 255.0)
            if len(digits) == 8:
                r, g, b = hex_to_rgb("#" + digits[:6])
                return cls(r / 255.0, g / 255.0, b / 255.0, int(digits[6:], 16) / 255.0)
            raise ValueError(f"Hex colors need 6 or 8 digits, got {text!r}.")
        match = _RGB_FUNC_RE.match(s)
        if match is None:
            raise ValueError(f"Could not interpret {text!r} as a color.")
        r, g, b, a = match.groups()
        return cls(float(r) / 255.0, float(g) / 255.0, float(b) / 255.0, 1.0 if a is None else float(a))

    def to_plotly(self) -> str:
        """Return the ``rgba(r, g, b, a)`` string Plotly accepts."""
        r, g, b = (int(round(c * 255)) for c in (self.red, self.green, self.blue))
        return f"rgba({r}, {g}, {b}, {self.alpha:g})"


NAMED_COLORS: dict[str, Color] = {
    "black": Color(0.0, 0.0, 0.0),
    "white": Color(1.0, 1.0, 1.0),
    "red": Color(1.0, 0.0, 0.0),
    "green": Color(0.0, 1.0, 0.0),
    "blue": Color(0.0, 0.0, 1.0),
    "gray": Color(0.5, 0.5, 0.5),
}


def default_palette() -> Iterator[Color]:
    """Endless cycle over Plotly's default qualitative palette."""
    return itertools.cycle([Color.coerce(c) for c in qualitative.Plotly])


__all__ = ["Color", "NAMED_COLORS", "default_palette"]
