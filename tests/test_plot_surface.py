from __future__ import annotations

import logging
import math
import sys
from unittest.mock import patch

import plotly.graph_objects as go
import pytest

from precalc_graph import (
    Color,
    Interval,
    InvalidRangeError,
    PlotSurface,
    RecordingCanvas,
    RenderUnavailable,
    RepaintMode,
    SamplingMode,
    plottable,
)
from precalc_graph.color import NAMED_COLORS


class _FailingCanvas(RecordingCanvas):
    """Recording canvas that can be told to fail mid-frame."""

    def __init__(self, width: float) -> None:
        super().__init__(width)
        self.fail = False
        self.discards = 0

    def stroke_path(self, path, *, line_width, color) -> None:
        if self.fail:
            raise RuntimeError("device lost")
        super().stroke_path(path, line_width=line_width, color=color)

    def discard(self) -> None:
        self.discards += 1
        super().discard()


class _SizedOnly:
    width = 600.0
    height = 600.0


def _xy(curve) -> list[tuple[float, float]]:
    return [(p.x, p.y) for p in curve.points]


# -- construction


@pytest.mark.parametrize(
    "x_min, x_max, step",
    [(1.0, 1.0, 0.5), (2.0, -2.0, 0.5), (-1.0, 1.0, 0.0), (-1.0, 1.0, -1.0), ("abc", 1.0, 0.5), (-1.0, "inf", 0.5)],
)
def test_construction_rejects_bad_ranges(x_min, x_max, step) -> None:
    with pytest.raises(InvalidRangeError):
        PlotSurface(x_min, x_max, step)


def test_construction_rejects_non_square_surface() -> None:
    with pytest.raises(InvalidRangeError, match="square"):
        PlotSurface(-1, 1, 0.5, surface_size=(600, 400))


@pytest.mark.parametrize("step", [1.0, 1e300])
def test_construction_rejects_range_too_wide_to_represent(step: float) -> None:
    """Finite bounds whose span overflows must fail at construction, not at repaint."""
    with pytest.raises(InvalidRangeError, match="too wide"):
        PlotSurface(-1e308, 1e308, step, repaint="manual")


def test_set_range_rejects_overflowing_span() -> None:
    surface = PlotSurface(-1, 1, 1)
    before = surface.config
    with pytest.raises(InvalidRangeError):
        surface.set_range(-1e308, 1e308)
    assert surface.config is before


def test_construction_accepts_symbolic_bounds() -> None:
    surface = PlotSurface("-pi", "pi", "pi/4")
    assert surface.config.x_min == pytest.approx(-math.pi)
    assert surface.config.step == pytest.approx(math.pi / 4)


def test_defaults_follow_classic_graph_view() -> None:
    surface = PlotSurface()
    assert (surface.config.x_min, surface.config.x_max, surface.config.step) == (-15.0, 15.0, 1.0)
    assert surface.config.surface_size == 600.0
    assert surface.scale == 20.0
    assert surface.sampling_mode is SamplingMode.EAGER
    assert surface.repaint_mode is RepaintMode.AUTO


def test_unknown_repaint_mode_is_rejected() -> None:
    with pytest.raises(ValueError, match="repaint mode"):
        PlotSurface(-1, 1, 0.5, repaint="sometimes")


# -- end-to-end scenarios


def test_zero_function_scenario() -> None:
    surface = PlotSurface(-1, 1, 0.5)
    surface.register(lambda x: 0.0)
    assert _xy(surface.curves[0]) == [(-1.0, 0.0), (-0.5, 0.0), (0.0, 0.0), (0.5, 0.0), (1.0, 0.0)]


def test_identity_scenario() -> None:
    surface = PlotSurface(-1, 1, 1)
    surface.register(lambda x: x)
    assert _xy(surface.curves[0]) == [(-1.0, -1.0), (0.0, 0.0), (1.0, 1.0)]


def test_domain_override_scenario() -> None:
    surface = PlotSurface(-1, 1, 0.5)
    original = plottable(lambda x: x + 1.0)
    stored = surface.register(original, domain=(0, 1))

    assert stored.domain == Interval(0.0, 1.0)
    assert original.domain is None
    assert all(p.x >= 0.0 for p in surface.curves[0].points)
    assert len(surface.curves[0]) == 3


def test_later_registration_occludes_earlier_at_shared_point() -> None:
    a = plottable(lambda x: x, color="red")
    b = plottable(lambda x: -x, color="blue")

    surface = PlotSurface(-1, 1, 1)
    surface.register(a)
    surface.register(b)
    assert surface.frame.color_at(300.0, 300.0) == NAMED_COLORS["blue"]

    surface.clear()
    surface.register(b)
    surface.register(a)
    assert surface.frame.color_at(300.0, 300.0) == NAMED_COLORS["red"]


# -- registration and repaint policy


def test_bare_callables_get_palette_colors() -> None:
    surface = PlotSurface(-1, 1, 0.5)
    first = surface.register(lambda x: x)
    second = surface.register(lambda x: -x)
    assert first.color == Color.coerce("#636EFA")
    assert second.color != first.color


def test_register_rejects_non_callables() -> None:
    with pytest.raises(TypeError, match="register"):
        PlotSurface(-1, 1, 0.5).register(42)


def test_auto_mode_repaints_on_every_mutation() -> None:
    canvas = RecordingCanvas(600)
    surface = PlotSurface(-1, 1, 0.5, canvas=canvas)

    surface.register(lambda x: x)
    surface.register(lambda x: 2 * x)
    assert surface.repaint_count == 2
    assert canvas.commits == 2
    assert not surface.dirty
    assert len(canvas.frame) == len(surface.frame)

    surface.clear()
    assert surface.functions == ()
    assert surface.repaint_count == 3


def test_manual_mode_coalesces_mutations_into_one_repaint() -> None:
    canvas = RecordingCanvas(600)
    surface = PlotSurface(-1, 1, 0.5, repaint="manual", canvas=canvas)

    surface.register(lambda x: x)
    surface.register(lambda x: x * x)
    surface.clear()
    surface.register(lambda x: 1.0)
    assert surface.repaint_count == 0
    assert canvas.frame is None
    assert surface.dirty

    frame = surface.request_repaint()
    assert surface.repaint_count == 1
    assert canvas.frame is not None
    assert not surface.dirty

    assert surface.request_repaint() is frame
    assert surface.repaint_count == 1


def test_frame_draws_grid_before_curves() -> None:
    surface = PlotSurface(-1, 1, 1)
    surface.register(plottable(lambda x: x, color="red"))
    ops = surface.frame.ops
    # background + 2 horizontal + 2 vertical grid lines, then segments and markers
    assert len(ops) == 7
    assert ops[-1].color == ops[-2].color == NAMED_COLORS["red"]


def test_eager_mode_keeps_cached_curve_until_invalidated() -> None:
    params = {"k": 1.0}
    fn = plottable(lambda x: params["k"] * x)
    surface = PlotSurface(-1, 1, 1, sampling="eager")
    stored = surface.register(fn)

    params["k"] = 3.0
    surface.repaint()
    assert surface.curves[0].y.tolist() == [-1.0, 0.0, 1.0]

    surface.invalidate(stored)
    assert surface.curves[0].y.tolist() == [-3.0, 0.0, 3.0]


def test_per_repaint_mode_follows_mutated_state() -> None:
    params = {"k": 1.0}
    surface = PlotSurface(-1, 1, 1, sampling="per_repaint")
    surface.register(plottable(lambda x: params["k"] * x, color="red"))

    params["k"] = 0.0
    frame = surface.repaint()
    segments = frame.strokes()[-2]
    assert {p.y for line in segments.path.lines() for p in line} == {300.0}


def test_invalidate_unknown_function_raises() -> None:
    surface = PlotSurface(-1, 1, 1)
    with pytest.raises(KeyError, match="not registered"):
        surface.invalidate(plottable(lambda x: x, label="ghost"))


def test_invalidate_matches_the_registered_copy_after_domain_override() -> None:
    params = {"k": 1.0}
    original = plottable(lambda x: params["k"] * x, label="kx")
    surface = PlotSurface(-1, 1, 1)
    stored = surface.register(original, domain=(-1, 1))

    params["k"] = 2.0
    with pytest.raises(KeyError, match="not registered"):
        surface.invalidate(original)

    surface.invalidate(stored)
    assert surface.curves[0].y.tolist() == [-2.0, 0.0, 2.0]


def test_set_range_replaces_config_and_resamples() -> None:
    surface = PlotSurface(-1, 1, 1)
    surface.register(lambda x: x)
    before = surface.config

    surface.set_range(-2, 2)
    assert surface.config is not before
    assert surface.scale == 150.0
    assert surface.curves[0].x.tolist() == [-2.0, -1.0, 0.0, 1.0, 2.0]


def test_failed_set_range_leaves_state_untouched() -> None:
    surface = PlotSurface(1, 2, 0.5)
    surface.register(lambda x: 1.0 / x)
    before = surface.config
    curve = surface.curves[0]

    with pytest.raises(InvalidRangeError):
        surface.set_range(3, -3)
    with pytest.raises(ZeroDivisionError):
        surface.set_range(-1, 1)

    assert surface.config is before
    assert surface.curves[0] is curve


# -- failures


def test_canvas_failure_raises_render_unavailable_and_keeps_previous_frame() -> None:
    canvas = _FailingCanvas(600)
    surface = PlotSurface(-1, 1, 0.5, repaint="manual", canvas=canvas)
    surface.register(lambda x: x)
    good = surface.request_repaint()
    committed = canvas.frame

    surface.register(lambda x: -x)
    canvas.fail = True
    with pytest.raises(RenderUnavailable, match="device lost") as excinfo:
        surface.request_repaint()

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert canvas.discards == 1
    assert canvas.frame is committed
    assert surface.frame is good
    assert surface.dirty

    canvas.fail = False
    assert surface.request_repaint() is not good
    assert canvas.frame is not committed


def test_canvas_without_primitives_is_unavailable() -> None:
    surface = PlotSurface(-1, 1, 0.5, repaint="manual")
    with pytest.raises(RenderUnavailable):
        surface.repaint(_SizedOnly())
    assert surface.frame is None


def test_canvas_of_wrong_size_is_unavailable() -> None:
    surface = PlotSurface(-1, 1, 0.5, repaint="manual")
    with pytest.raises(RenderUnavailable, match="400x400"):
        surface.repaint(RecordingCanvas(400))


# -- plotly / logging


def test_to_plotly_contains_one_shape_per_primitive() -> None:
    surface = PlotSurface(-1, 1, 1)
    surface.register(lambda x: x)
    figure = surface.to_plotly()
    assert isinstance(figure, go.Figure)
    assert len(figure.layout.shapes) == len(surface.frame)


def test_repaint_is_logged(caplog) -> None:
    surface = PlotSurface(-1, 1, 1, repaint="manual")
    with caplog.at_level(logging.INFO, logger="precalc_graph.PlotSurface"):
        surface.register(lambda x: x)
        surface.request_repaint()
    assert "repaint #1 functions=1" in caplog.text


def test_repr_summarizes_state() -> None:
    surface = PlotSurface(-1, 1, 0.5, sampling="per_repaint")
    assert repr(surface) == "PlotSurface(x=[-1, 1], step=0.5, functions=0, sampling='per_repaint')"


def test_attach_presents_current_state_on_new_canvas() -> None:
    """Attaching a canvas in auto mode pushes a frame to it right away."""
    surface = PlotSurface(-1, 1, 0.5)
    surface.register(lambda x: x)
    canvas = RecordingCanvas(600)

    surface.attach(canvas)
    assert surface.canvas is canvas
    assert canvas.commits == 1
    assert len(canvas.frame) == len(surface.frame)


def test_construction_is_display_side_effect_free() -> None:
    module = sys.modules[PlotSurface.__module__]
    with patch.object(module, "display") as mocked_display:
        surface = PlotSurface(-1, 1, 0.5)

    assert surface.frame is None
    mocked_display.assert_not_called()


def test_ipython_display_shows_a_plotly_figure() -> None:
    """IPython display hook hands one Plotly figure to ``display``."""
    surface = PlotSurface(-1, 1, 0.5, repaint="manual")
    surface.register(lambda x: x)
    module = sys.modules[PlotSurface.__module__]

    with patch.object(module, "display") as mocked_display:
        surface._ipython_display_()

    mocked_display.assert_called_once()
    assert isinstance(mocked_display.call_args.args[0], go.Figure)
    assert surface.repaint_count == 1
