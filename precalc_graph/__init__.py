"""Top-level public API for the ``precalc_graph`` package.

Plots precalculus functions on a square Cartesian grid. The package re-exports
the whole surface so users can import from a single namespace, for example:

>>> from precalc_graph import PlotSurface, sine, line  # doctest: +SKIP

It exposes both the high-level :class:`PlotSurface` and the building blocks it
composes (sampler, coordinate transform, grid and curve renderers, canvases)
for hosts that want to drive rendering themselves.
"""

from .canvas import Canvas, DisplayList, Path, RecordingCanvas
from .color import Color
from .curves import CurveRenderer, CurveStyle
from .errors import InvalidRangeError, RenderUnavailable
from .functions import PlottableFunction, from_expression, plottable
from .geometry import Interval, Point
from .grid import GridRenderer, GridStyle
from .InputConvert import InputConvert
from .plotly_canvas import PlotlyCanvas
from .PlotSurface import PlotConfig, PlotSurface, RepaintMode
from .sampling import SampledCurve, SamplingMode, sample, sample_grid
from .standard_functions import cosine, exponential, line, sine
from .transform import CoordinateTransform, scale_for, to_logical, to_surface

__all__ = [
    "Canvas",
    "Color",
    "CoordinateTransform",
    "CurveRenderer",
    "CurveStyle",
    "DisplayList",
    "GridRenderer",
    "GridStyle",
    "InputConvert",
    "Interval",
    "InvalidRangeError",
    "Path",
    "PlotConfig",
    "PlotSurface",
    "PlotlyCanvas",
    "PlottableFunction",
    "Point",
    "RecordingCanvas",
    "RenderUnavailable",
    "RepaintMode",
    "SampledCurve",
    "SamplingMode",
    "cosine",
    "exponential",
    "from_expression",
    "line",
    "plottable",
    "sample",
    "sample_grid",
    "scale_for",
    "sine",
    "to_logical",
    "to_surface",
]
