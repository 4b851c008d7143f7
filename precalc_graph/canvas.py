"""The drawing capability the renderers call into.

Purpose
-------
Renderers never talk to a GUI toolkit directly. They build :class:`Path`
objects and hand them to something implementing :class:`Canvas`: fill a
rectangle, stroke a path with a line width and color.

Concepts and structure
----------------------
- :class:`Path` is a list of ``move_to`` / ``add_line`` / ``add_arc`` elements
  in surface coordinates.
- :class:`DisplayList` records primitives in order. A repaint draws into a
  fresh display list first and only then replays it onto the host, so a
  failed repaint never reaches the host half-done.
- :class:`RecordingCanvas` is an in-memory host: primitives are staged and
  only become the visible ``frame`` on :meth:`~RecordingCanvas.commit`.

Important gotchas
-----------------
- Hosts must not show staged output before ``commit()``; ``discard()`` drops
  it. That pair is what makes a repaint atomic from the consumer's side.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

from .color import Color
from .geometry import Point

FULL_TURN = 2.0 * math.pi


@dataclass(frozen=True)
class MoveTo:
    point: Point


@dataclass(frozen=True)
class LineTo:
    point: Point


@dataclass(frozen=True)
class Arc:
    center: Point
    radius: float
    start_angle: float = 0.0
    end_angle: float = FULL_TURN


PathElement = Union[MoveTo, LineTo, Arc]


class Path:
    """Mutable path builder in surface coordinates."""

    def __init__(self) -> None:
        self._elements: List[PathElement] = []
        self._current: Optional[Point] = None

    def move_to(self, x: float, y: float) -> "Path":
        self._current = Point(float(x), float(y))
        self._elements.append(MoveTo(self._current))
        return self

    def add_line(self, x: float, y: float) -> "Path":
        """Add a straight segment from the current point to ``(x, y)``."""
        if self._current is None:
            raise ValueError("add_line() needs a current point; call move_to() first")
        self._current = Point(float(x), float(y))
        self._elements.append(LineTo(self._current))
        return self

    def add_arc(
        self,
        cx: float,
        cy: float,
        radius: float,
        start_angle: float = 0.0,
        end_angle: float = FULL_TURN,
    ) -> "Path":
        """Add a circular arc; the defaults draw a full circle."""
        if radius < 0:
            raise ValueError(f"arc radius must be >= 0, got {radius}")
        center = Point(float(cx), float(cy))
        self._elements.append(Arc(center, float(radius), float(start_angle), float(end_angle)))
        self._current = Point(
            center.x + radius * math.cos(end_angle),
            center.y + radius * math.sin(end_angle),
        )
        return self

    @property
    def elements(self) -> Tuple[PathElement, ...]:
        return tuple(self._elements)

    def is_empty(self) -> bool:
        return not self._elements

    def lines(self) -> List[Tuple[Point, Point]]:
        """Return every straight segment as a ``(start, end)`` pair."""
        out: List[Tuple[Point, Point]] = []
        current: Optional[Point] = None
        for element in self._elements:
            if isinstance(element, LineTo) and current is not None:
                out.append((current, element.point))
            if isinstance(element, (MoveTo, LineTo)):
                current = element.point
        return out

    def arcs(self) -> List[Arc]:
        return [e for e in self._elements if isinstance(e, Arc)]

    def __repr__(self) -> str:
        return f"Path(elements={len(self._elements)})"


@runtime_checkable
class Canvas(Protocol):
    """Contract for drawing hosts."""

    @property
    def width(self) -> float: ...

    @property
    def height(self) -> float: ...

    def fill_rect(self, x: float, y: float, width: float, height: float, *, color: Color) -> None: ...

    def stroke_path(self, path: Path, *, line_width: float, color: Color) -> None: ...

    def commit(self) -> None: ...

    def discard(self) -> None: ...


@dataclass(frozen=True)
class FillRect:
    x: float
    y: float
    width: float
    height: float
    color: Color

    def covers(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height


@dataclass(frozen=True)
class StrokePath:
    path: Path
    line_width: float
    color: Color

    def covers(self, px: float, py: float) -> bool:
        half = self.line_width / 2.0
        for start, end in self.path.lines():
            if _distance_to_segment(px, py, start, end) <= half:
                return True
        for arc in self.path.arcs():
            # Full-circle markers only; partial arcs are treated as full rings.
            d = math.hypot(px - arc.center.x, py - arc.center.y)
            if abs(d - arc.radius) <= half:
                return True
        return False


DrawOp = Union[FillRect, StrokePath]


def _distance_to_segment(px: float, py: float, a: Point, b: Point) -> float:
    dx, dy = b.x - a.x, b.y - a.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return math.hypot(px - a.x, py - a.y)
    t = max(0.0, min(1.0, ((px - a.x) * dx + (py - a.y) * dy) / length_sq))
    return math.hypot(px - (a.x + t * dx), py - (a.y + t * dy))


class DisplayList:
    """Ordered record of primitives for one frame; itself a :class:`Canvas`."""

    def __init__(self, width: float, height: float) -> None:
        self._width = float(width)
        self._height = float(height)
        self._ops: List[DrawOp] = []

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def fill_rect(self, x: float, y: float, width: float, height: float, *, color: Color) -> None:
        self._ops.append(FillRect(float(x), float(y), float(width), float(height), color))

    def stroke_path(self, path: Path, *, line_width: float, color: Color) -> None:
        if path.is_empty():
            return
        self._ops.append(StrokePath(path, float(line_width), color))

    def commit(self) -> None:
        pass

    def discard(self) -> None:
        self._ops.clear()

    @property
    def ops(self) -> Tuple[DrawOp, ...]:
        return tuple(self._ops)

    def strokes(self) -> List[StrokePath]:
        return [op for op in self._ops if isinstance(op, StrokePath)]

    def __len__(self) -> int:
        return len(self._ops)

    def __iter__(self) -> Iterator[DrawOp]:
        return iter(tuple(self._ops))

    def replay(self, canvas: Canvas) -> None:
        """Issue every recorded primitive, in order, onto ``canvas``."""
        for op in self._ops:
            if isinstance(op, FillRect):
                canvas.fill_rect(op.x, op.y, op.width, op.height, color=op.color)
            else:
                canvas.stroke_path(op.path, line_width=op.line_width, color=op.color)

    def color_at(self, x: float, y: float) -> Optional[Color]:
        """Return the color of the topmost primitive covering ``(x, y)``."""
        for op in reversed(self._ops):
            if op.covers(x, y):
                return op.color
        return None

    def __repr__(self) -> str:
        return f"DisplayList({self._width:g}x{self._height:g}, ops={len(self._ops)})"


class RecordingCanvas:
    """In-memory host canvas.

    Staged primitives become :attr:`frame` on :meth:`commit`; until then the
    previously committed frame stays visible.
    """

    def __init__(self, width: float, height: Optional[float] = None) -> None:
        self._width = float(width)
        self._height = float(width if height is None else height)
        self._staged = DisplayList(self._width, self._height)
        self._frame: Optional[DisplayList] = None
        self.commits = 0

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def frame(self) -> Optional[DisplayList]:
        """The last committed frame, or ``None`` before the first commit."""
        return self._frame

    def fill_rect(self, x: float, y: float, width: float, height: float, *, color: Color) -> None:
        self._staged.fill_rect(x, y, width, height, color=color)

    def stroke_path(self, path: Path, *, line_width: float, color: Color) -> None:
        self._staged.stroke_path(path, line_width=line_width, color=color)

    def commit(self) -> None:
        self._frame = self._staged
        self._staged = DisplayList(self._width, self._height)
        self.commits += 1

    def discard(self) -> None:
        self._staged = DisplayList(self._width, self._height)


def path_from_points(points: Sequence[Point]) -> Path:
    """Open polyline through ``points``."""
    path = Path()
    for i, p in enumerate(points):
        if i == 0:
            path.move_to(p.x, p.y)
        else:
            path.add_line(p.x, p.y)
    return path


__all__ = [
    "Arc",
    "Canvas",
    "DisplayList",
    "DrawOp",
    "FillRect",
    "LineTo",
    "MoveTo",
    "Path",
    "RecordingCanvas",
    "StrokePath",
    "path_from_points",
]
