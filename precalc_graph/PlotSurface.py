"""
PlotSurface: a square Cartesian graph that plots registered functions.

Purpose
-------
Owns the plot configuration and the ordered list of registered functions, and
composes one repaint: background and grid first, then every curve in
registration order (later curves draw over earlier ones).

Concepts and structure
----------------------
- ``PlotConfig`` is immutable. Changing the range replaces it wholesale, and
  the scale factor is derived from it, so one repaint always sees one scale.
- Sampling policy (``sampling=``):
  - ``"eager"``: curves are sampled at registration and cached until
    :meth:`PlotSurface.set_range` or :meth:`PlotSurface.invalidate`.
  - ``"per_repaint"``: curves are sampled fresh on every repaint; use it when
    functions read mutable state.
- Repaint policy (``repaint=``):
  - ``"auto"``: every mutation repaints immediately.
  - ``"manual"``: mutations only mark the surface dirty; the host calls
    :meth:`PlotSurface.request_repaint`, and any number of mutations collapse
    into one repaint.

Important gotchas
-----------------
- A repaint is drawn into a fresh :class:`DisplayList` and only then replayed
  onto the host canvas. If the host fails, it is asked to discard the staged
  output, :class:`RenderUnavailable` is raised, and the surface keeps its
  previous frame, caches and dirty flag.

Logging
-------
This module uses the standard Python ``logging`` framework (no prints). By
default it installs a ``NullHandler``, so you will see nothing unless you
configure logging::

    import logging
    logging.getLogger("precalc_graph.PlotSurface").setLevel(logging.DEBUG)

Examples
--------
>>> from precalc_graph import PlotSurface, sine, line
>>> surface = PlotSurface(-15, 15, 0.5)
>>> surface.register(sine())  # doctest: +SKIP
>>> surface.register(line(slope=1.0, offset=4.0))  # doctest: +SKIP
>>> surface.to_plotly().show()  # doctest: +SKIP
"""

from __future__ import annotations

import enum
import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union

import plotly.graph_objects as go
from IPython.display import display

from .canvas import Canvas, DisplayList
from .color import Color, default_palette
from .curves import CurveRenderer, CurveStyle
from .errors import InvalidRangeError, RenderUnavailable
from .functions import DomainLike, PlottableFunction, plottable
from .geometry import Interval, NumberLikeOrStr
from .grid import GridRenderer, GridStyle
from .InputConvert import InputConvert
from .plotly_canvas import PlotlyCanvas
from .sampling import SampledCurve, SamplingMode, sample
from .transform import CoordinateTransform

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

DEFAULT_X_RANGE: Tuple[float, float] = (-15.0, 15.0)
DEFAULT_STEP = 1.0
DEFAULT_SURFACE_SIZE = 600.0

SizeLike = Union[NumberLikeOrStr, Tuple[NumberLikeOrStr, NumberLikeOrStr]]


class RepaintMode(str, enum.Enum):
    AUTO = "auto"
    MANUAL = "manual"

    @classmethod
    def coerce(cls, value: Any) -> "RepaintMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ValueError(f"Unknown repaint mode {value!r}; expected 'auto' or 'manual'") from e


@dataclass(frozen=True)
class PlotConfig:
    """Immutable plot range and surface size.

    Parameters
    ----------
    x_min, x_max : float
        Logical x-range; ``x_min < x_max``.
    step : float
        Sampling step; ``step > 0``.
    surface_size : float
        Side length of the square surface in surface units.

    Raises
    ------
    InvalidRangeError
        On any violated constraint, including non-finite values.
    """

    x_min: float
    x_max: float
    step: float
    surface_size: float = DEFAULT_SURFACE_SIZE

    def __post_init__(self) -> None:
        for name in ("x_min", "x_max", "step", "surface_size"):
            value = float(getattr(self, name))
            if not math.isfinite(value):
                raise InvalidRangeError(f"{name} must be finite, got {value}")
            object.__setattr__(self, name, value)
        if not self.x_min < self.x_max:
            raise InvalidRangeError(f"x_min must be < x_max, got [{self.x_min}, {self.x_max}]")
        if not math.isfinite(self.x_max - self.x_min):
            raise InvalidRangeError(f"x-range [{self.x_min}, {self.x_max}] is too wide to represent")
        if not self.step > 0:
            raise InvalidRangeError(f"step must be > 0, got {self.step}")
        if not self.surface_size > 0:
            raise InvalidRangeError(f"surface_size must be > 0, got {self.surface_size}")
        scale = self.surface_size / (self.x_max - self.x_min)
        if not (math.isfinite(scale) and scale > 0):
            raise InvalidRangeError(
                f"x-range [{self.x_min}, {self.x_max}] gives no usable scale on a {self.surface_size:g} surface"
            )

    @classmethod
    def build(
        cls,
        x_min: NumberLikeOrStr,
        x_max: NumberLikeOrStr,
        step: NumberLikeOrStr,
        surface_size: SizeLike = DEFAULT_SURFACE_SIZE,
    ) -> "PlotConfig":
        """Create a config from number-likes (``"-2*pi"`` etc.).

        ``surface_size`` may be a ``(width, height)`` pair, which must be square.
        """
        try:
            bounds = [InputConvert(v, float) for v in (x_min, x_max, step)]
        except ValueError as e:
            raise InvalidRangeError(str(e)) from e
        return cls(*bounds, surface_size=_square_size(surface_size))

    @property
    def span(self) -> float:
        return self.x_max - self.x_min

    @property
    def scale(self) -> float:
        """Surface units per logical unit."""
        return self.surface_size / self.span

    def transform(self) -> CoordinateTransform:
        return CoordinateTransform(self.surface_size, self.surface_size, self.scale)


def _square_size(value: SizeLike) -> float:
    if not isinstance(value, (tuple, list)):
        value = (value, value)
    if len(value) != 2:
        raise InvalidRangeError(f"surface_size must be a number or (width, height), got {value!r}")
    try:
        width, height = (InputConvert(v, float) for v in value)
    except ValueError as e:
        raise InvalidRangeError(str(e)) from e
    if width != height:
        raise InvalidRangeError(f"The drawing surface must be square, got {width:g}x{height:g}")
    return width


@dataclass
class _Registration:
    function: PlottableFunction
    curve: Optional[SampledCurve] = None


class PlotSurface:
    """A square graph of functions over a symmetric-style x-range.

    Parameters
    ----------
    x_min, x_max : number-like
        Logical x bounds; ``x_min < x_max``.
    step : number-like
        Sampling step.
    surface_size : number-like or (width, height)
        Side of the square surface. Non-square pairs are rejected.
    sampling : {"eager", "per_repaint"}
        When registered functions are sampled.
    repaint : {"auto", "manual"}
        Whether mutations repaint immediately or only mark the surface dirty.
    canvas : Canvas, optional
        Host canvas receiving finished frames.
    grid_style, curve_style : optional
        Rendering styles.

    Examples
    --------
    >>> surface = PlotSurface(-1, 1, 0.5, repaint="manual")
    >>> _ = surface.register(lambda x: 0.0)
    >>> surface.dirty
    True
    >>> [tuple(p) for p in surface.curves[0].points]
    [(-1.0, 0.0), (-0.5, 0.0), (0.0, 0.0), (0.5, 0.0), (1.0, 0.0)]
    """

    def __init__(
        self,
        x_min: NumberLikeOrStr = DEFAULT_X_RANGE[0],
        x_max: NumberLikeOrStr = DEFAULT_X_RANGE[1],
        step: NumberLikeOrStr = DEFAULT_STEP,
        *,
        surface_size: SizeLike = DEFAULT_SURFACE_SIZE,
        sampling: Union[str, SamplingMode] = SamplingMode.EAGER,
        repaint: Union[str, RepaintMode] = RepaintMode.AUTO,
        canvas: Optional[Canvas] = None,
        grid_style: Optional[GridStyle] = None,
        curve_style: Optional[CurveStyle] = None,
    ) -> None:
        self._config = PlotConfig.build(x_min, x_max, step, surface_size)
        self._sampling = SamplingMode.coerce(sampling)
        self._repaint_mode = RepaintMode.coerce(repaint)
        self._canvas = canvas
        self._grid = GridRenderer(grid_style)
        self._curve_renderer = CurveRenderer(curve_style)
        self._entries: List[_Registration] = []
        self._palette: Iterator[Color] = default_palette()
        self._frame: Optional[DisplayList] = None
        self._dirty = True
        self.repaint_count = 0
        self._render_info_last_log_t = 0.0
        self._render_debug_last_log_t = 0.0

    # -- read-only state

    @property
    def config(self) -> PlotConfig:
        return self._config

    @property
    def scale(self) -> float:
        return self._config.scale

    @property
    def sampling_mode(self) -> SamplingMode:
        return self._sampling

    @property
    def repaint_mode(self) -> RepaintMode:
        return self._repaint_mode

    @property
    def functions(self) -> Tuple[PlottableFunction, ...]:
        """Registered functions in registration (draw) order."""
        return tuple(entry.function for entry in self._entries)

    @property
    def curves(self) -> Tuple[SampledCurve, ...]:
        """Curves for the registered functions under the current config.

        Eager surfaces return the cached curves; per-repaint surfaces sample
        on access.
        """
        return tuple(self._curve_for(entry, self._config) for entry in self._entries)

    @property
    def frame(self) -> Optional[DisplayList]:
        """The last successfully rendered frame."""
        return self._frame

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def canvas(self) -> Optional[Canvas]:
        return self._canvas

    def attach(self, canvas: Optional[Canvas]) -> None:
        """Set (or with ``None`` remove) the host canvas."""
        self._canvas = canvas
        self._changed(reason="attach")

    # -- mutation

    def register(
        self,
        function: Union[PlottableFunction, Callable[[Any], Any]],
        domain: Optional[DomainLike] = None,
    ) -> PlottableFunction:
        """Append a function to the plot.

        Parameters
        ----------
        function : PlottableFunction or callable
            Bare callables are wrapped and get the next color of Plotly's
            default palette.
        domain : (lower, upper) or Interval, optional
            Overrides the function's own domain.

        Returns
        -------
        PlottableFunction
            The function as stored by the surface. Pass this object, not the
            argument, to :meth:`invalidate` when ``domain`` was given.
        """
        if isinstance(function, PlottableFunction):
            fn = function
        elif callable(function):
            fn = plottable(function, color=next(self._palette))
        else:
            raise TypeError(f"register() expects a PlottableFunction or callable, got {type(function).__name__}")
        if domain is not None:
            fn = fn.with_domain(Interval.coerce(domain))

        entry = _Registration(fn)
        if self._sampling is SamplingMode.EAGER:
            entry.curve = self._sample(fn, self._config)
        self._entries.append(entry)
        self._changed(reason="register")
        return fn

    def clear(self) -> None:
        """Remove every registered function."""
        self._entries = []
        self._changed(reason="clear")

    def set_range(
        self,
        x_min: NumberLikeOrStr,
        x_max: NumberLikeOrStr,
        step: Optional[NumberLikeOrStr] = None,
    ) -> None:
        """Replace the x-range (and optionally the step).

        Eager curves are recomputed before the new config is installed, so a
        failure leaves the old range and curves untouched.
        """
        new_config = PlotConfig.build(
            x_min,
            x_max,
            self._config.step if step is None else step,
            self._config.surface_size,
        )
        curves = self._eager_curves(new_config)
        self._config = new_config
        for entry, curve in zip(self._entries, curves):
            entry.curve = curve
        self._changed(reason="set_range")

    def invalidate(self, function: Optional[PlottableFunction] = None) -> None:
        """Drop cached samples for ``function`` (or all functions) and recompute.

        Call this after mutating state captured by a function on an eager
        surface. On a per-repaint surface it only marks the surface dirty.

        ``function`` is matched by identity against the objects returned by
        :meth:`register`. A ``domain=`` override stores a copy, so the
        function passed to ``register`` is then not registered itself.

        Raises
        ------
        KeyError
            If ``function`` is not one of the registered objects.
        """
        targets = [e for e in self._entries if function is None or e.function is function]
        if function is not None and not targets:
            raise KeyError(f"Function {function.label or function!r} is not registered")
        if self._sampling is SamplingMode.EAGER:
            fresh = [self._sample(e.function, self._config) for e in targets]
            for entry, curve in zip(targets, fresh):
                entry.curve = curve
        self._changed(reason="invalidate")

    # -- repaint

    def request_repaint(self) -> DisplayList:
        """Repaint if anything changed since the last frame; return the frame."""
        if self._dirty or self._frame is None:
            return self.repaint()
        return self._frame

    def repaint(self, canvas: Optional[Canvas] = None) -> DisplayList:
        """Render one complete frame and present it.

        Parameters
        ----------
        canvas : Canvas, optional
            Target for this repaint; defaults to the attached canvas. Without
            any canvas the frame is only kept in :attr:`frame`.

        Raises
        ------
        RenderUnavailable
            If the host canvas cannot take the frame.
        """
        target = canvas if canvas is not None else self._canvas
        config = self._config
        transform = config.transform()

        frame = DisplayList(transform.width, transform.height)
        self._grid.draw(frame, transform)
        for entry in self._entries:
            curve = self._curve_for(entry, config)
            self._curve_renderer.draw(frame, curve, transform, entry.function.color)

        if target is not None:
            self._present(frame, target)

        self._frame = frame
        self._dirty = False
        self.repaint_count += 1
        self._log_render(config)
        return frame

    def _present(self, frame: DisplayList, target: Canvas) -> None:
        try:
            size = (float(target.width), float(target.height))
        except (AttributeError, TypeError, ValueError) as e:
            raise RenderUnavailable(f"Canvas {target!r} does not report a usable size") from e
        if size != (frame.width, frame.height):
            raise RenderUnavailable(
                f"Canvas is {size[0]:g}x{size[1]:g} but the surface is {frame.width:g}x{frame.height:g}"
            )
        try:
            frame.replay(target)
            target.commit()
        except Exception as e:
            logger.error("repaint aborted: canvas %r failed: %s", target, e)
            discard = getattr(target, "discard", None)
            if callable(discard):
                discard()
            raise RenderUnavailable(f"Canvas {type(target).__name__} could not draw the frame: {e}") from e

    # -- plotly / notebook

    def to_plotly(self) -> go.Figure:
        """Return a Plotly figure of the current state."""
        canvas = PlotlyCanvas(self._config.surface_size)
        frame = self._frame if self._frame is not None and not self._dirty else self.repaint()
        frame.replay(canvas)
        canvas.commit()
        return canvas.figure

    def _ipython_display_(self, **kwargs: Any) -> None:
        """Display the surface as a Plotly figure in IPython/Jupyter."""
        display(self.to_plotly())

    # -- internals

    def _sample(self, fn: PlottableFunction, config: PlotConfig) -> SampledCurve:
        return sample(fn, config.x_min, config.x_max, config.step)

    def _curve_for(self, entry: _Registration, config: PlotConfig) -> SampledCurve:
        if self._sampling is SamplingMode.EAGER and entry.curve is not None:
            return entry.curve
        return self._sample(entry.function, config)

    def _eager_curves(self, config: PlotConfig) -> List[Optional[SampledCurve]]:
        if self._sampling is not SamplingMode.EAGER:
            return [None] * len(self._entries)
        return [self._sample(entry.function, config) for entry in self._entries]

    def _changed(self, *, reason: str) -> None:
        self._dirty = True
        logger.debug("surface changed (reason=%s, functions=%d)", reason, len(self._entries))
        if self._repaint_mode is RepaintMode.AUTO:
            self.repaint()

    def _log_render(self, config: PlotConfig) -> None:
        """Log repaint information with rate-limiting."""
        now = time.monotonic()
        if logger.isEnabledFor(logging.INFO) and (now - self._render_info_last_log_t) > 1.0:
            self._render_info_last_log_t = now
            logger.info(f"repaint #{self.repaint_count} functions={len(self._entries)}")

        if logger.isEnabledFor(logging.DEBUG) and (now - self._render_debug_last_log_t) > 0.5:
            self._render_debug_last_log_t = now
            logger.debug(
                f"range x=[{config.x_min:g}, {config.x_max:g}] step={config.step:g} "
                f"scale={config.scale:g} sampling={self._sampling.value}"
            )

    def __repr__(self) -> str:
        c = self._config
        return (
            f"PlotSurface(x=[{c.x_min:g}, {c.x_max:g}], step={c.step:g}, "
            f"functions={len(self._entries)}, sampling={self._sampling.value!r})"
        )


__all__ = [
    "DEFAULT_STEP",
    "DEFAULT_SURFACE_SIZE",
    "DEFAULT_X_RANGE",
    "PlotConfig",
    "PlotSurface",
    "RepaintMode",
]
