"""Exception types raised by the plotting core."""

from __future__ import annotations


class InvalidRangeError(ValueError):
    """Raised for a malformed interval, step, scale, or surface size.

    Subclasses :class:`ValueError` so callers that already guard numeric input
    with ``except ValueError`` keep working.
    """


class RenderUnavailable(RuntimeError):
    """Raised when the host canvas cannot complete a repaint.

    The repaint that raised is abandoned as a whole: the host is asked to
    discard whatever it staged, and the surface keeps its previous frame.
    """


__all__ = ["InvalidRangeError", "RenderUnavailable"]
