from __future__ import annotations

import numpy as np
import pytest

from precalc_graph import (
    CoordinateTransform,
    InvalidRangeError,
    Point,
    scale_for,
    to_logical,
    to_surface,
)


def test_origin_maps_to_surface_center() -> None:
    assert to_surface(Point(0.0, 0.0), 600.0, 600.0, 20.0) == (300.0, 300.0)


def test_positive_y_moves_up_the_surface() -> None:
    assert to_surface(Point(1.0, 1.0), 600.0, 600.0, 20.0) == (320.0, 280.0)
    assert to_surface(Point(-15.0, -15.0), 600.0, 600.0, 20.0) == (0.0, 600.0)


def test_scale_uses_span_regardless_of_bound_order() -> None:
    assert scale_for(600.0, -15.0, 15.0) == 20.0
    assert scale_for(600.0, 15.0, -15.0) == 20.0


def test_doubling_span_halves_scale() -> None:
    narrow = scale_for(600.0, -5.0, 5.0)
    wide = scale_for(600.0, -10.0, 10.0)
    assert wide == pytest.approx(narrow / 2.0)


@pytest.mark.parametrize("width, x1, x2", [(600.0, 1.0, 1.0), (0.0, -1.0, 1.0), (-10.0, -1.0, 1.0)])
def test_scale_rejects_degenerate_input(width: float, x1: float, x2: float) -> None:
    with pytest.raises(InvalidRangeError):
        scale_for(width, x1, x2)


def test_round_trip_recovers_logical_point() -> None:
    p = Point(-3.25, 7.125)
    back = to_logical(to_surface(p, 600.0, 600.0, 37.5), 600.0, 600.0, 37.5)
    assert back.x == pytest.approx(p.x, rel=1e-9)
    assert back.y == pytest.approx(p.y, rel=1e-9)


def test_transform_object_matches_free_functions() -> None:
    t = CoordinateTransform.for_range(600.0, 600.0, -1.0, 1.0)
    assert t.scale == 300.0
    assert t.origin == (300.0, 300.0)
    assert t.to_surface(Point(0.5, -0.5)) == to_surface(Point(0.5, -0.5), 600.0, 600.0, 300.0)
    assert t.to_logical(Point(450.0, 450.0)) == (0.5, -0.5)


def test_transform_arrays_vectorize_to_surface() -> None:
    t = CoordinateTransform(600.0, 600.0, 20.0)
    sx, sy = t.to_surface_arrays(np.array([-1.0, 0.0, 2.0]), np.array([1.0, 0.0, -2.0]))
    assert sx.tolist() == [280.0, 300.0, 340.0]
    assert sy.tolist() == [280.0, 300.0, 340.0]


@pytest.mark.parametrize("scale", [0.0, -1.0, float("nan")])
def test_transform_requires_positive_scale(scale: float) -> None:
    with pytest.raises(InvalidRangeError, match="scale"):
        CoordinateTransform(600.0, 600.0, scale)
