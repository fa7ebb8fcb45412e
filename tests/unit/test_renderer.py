"""Tests for the staged graph renderer.

Covers:
- Scale and axis placement
- Page setup, axes, bounds and grid stages
- Curve segmentation across undefined and off-screen samples
- Whole-page rendering
"""

from __future__ import annotations

import pytest

from psgraph.core.config import RenderConfig, SamplingConfig
from psgraph.core.errors import LimitsError
from psgraph.core.expression_lang import parse_expr
from psgraph.core.limits import Limits, parse_limits
from psgraph.render.canvas import Canvas, DrawOp, OpKind
from psgraph.render.renderer import (
    RenderContext,
    _grid_steps,
    draw_axes,
    draw_bounds,
    draw_grid,
    plot_function,
    prepare_page,
    render,
    sample_xs,
)


def count(canvas: Canvas, kind: OpKind) -> int:
    return sum(1 for op in canvas.ops if op.kind == kind)


def curve(source: str, limits: str, config: RenderConfig | None = None) -> tuple[int, Canvas]:
    canvas = Canvas()
    ctx = RenderContext.create(parse_limits(limits), config)
    segments = plot_function(ctx, canvas, parse_expr(source))
    return segments, canvas


class TestRenderContext:
    def test_default_scale(self, window: Limits) -> None:
        ctx = RenderContext.create(window)
        assert ctx.scale_x == pytest.approx((595 - 100) / 20)
        assert ctx.scale_y == pytest.approx((842 - 100) / 20)

    def test_axes_at_origin(self, window: Limits) -> None:
        ctx = RenderContext.create(window)
        assert ctx.axis_x == 0.0
        assert ctx.axis_y == 0.0

    def test_axes_clamped_to_nearest_bound(self) -> None:
        ctx = RenderContext.create(parse_limits("1:5:2:6"))
        assert ctx.axis_x == pytest.approx(1 * ctx.scale_x)
        assert ctx.axis_y == pytest.approx(2 * ctx.scale_y)

    def test_axes_clamped_below_zero(self) -> None:
        ctx = RenderContext.create(parse_limits("-5:-1:-6:-2"))
        assert ctx.axis_x == pytest.approx(-1 * ctx.scale_x)
        assert ctx.axis_y == pytest.approx(-2 * ctx.scale_y)

    def test_zero_width_window(self) -> None:
        with pytest.raises(LimitsError):
            RenderContext.create(parse_limits("0:0:-1:1"))

    def test_zero_height_window(self) -> None:
        with pytest.raises(LimitsError):
            RenderContext.create(parse_limits("-1:1:3:3"))

    def test_window_wider_than_float_range(self) -> None:
        # Both bounds are finite, the width is not
        limits = parse_limits("-1e308:1e308:-1:1")
        with pytest.raises(LimitsError, match="too large"):
            RenderContext.create(limits)

    def test_window_taller_than_float_range(self) -> None:
        with pytest.raises(LimitsError, match="too large"):
            render(parse_limits("-1:1:-1.5e308:1.5e308"), parse_expr("x"))

    def test_window_too_narrow_to_scale(self) -> None:
        with pytest.raises(LimitsError, match="too small"):
            RenderContext.create(parse_limits("0:1e-320:0:1"))

    def test_uses_config_page(self, window: Limits) -> None:
        config = RenderConfig()
        config.page.width = 300
        config.page.margin = 0
        ctx = RenderContext.create(window, config)
        assert ctx.scale_x == pytest.approx(15.0)

    def test_to_device(self, window: Limits) -> None:
        ctx = RenderContext.create(window)
        assert ctx.to_device(2, -1) == pytest.approx((2 * ctx.scale_x, -ctx.scale_y))


class TestPageStages:
    def test_prepare_page(self, window: Limits, canvas: Canvas) -> None:
        prepare_page(RenderContext.create(window), canvas)
        assert canvas.ops == [
            DrawOp(OpKind.BEGIN_PAGE, (595.0, 842.0)),
            DrawOp(OpKind.SET_FONT, ("Courier", 12.0)),
            DrawOp(OpKind.TRANSLATE, (297.5, 421.0)),
        ]

    def test_prepare_page_centres_offset_window(self, canvas: Canvas) -> None:
        ctx = RenderContext.create(parse_limits("0:10:0:10"))
        prepare_page(ctx, canvas)
        dx, dy = canvas.ops[2].args
        assert dx == pytest.approx(297.5 - 5 * ctx.scale_x)
        assert dy == pytest.approx(421.0 - 5 * ctx.scale_y)

    def test_draw_axes(self, window: Limits, canvas: Canvas) -> None:
        ctx = RenderContext.create(window)
        draw_axes(ctx, canvas)
        assert canvas.ops[0] == DrawOp(OpKind.SET_COLOR, (1.0, 0.0, 0.0))
        assert count(canvas, OpKind.STROKE) == 4
        labels = [op.args[2] for op in canvas.ops if op.kind == OpKind.SHOW_TEXT]
        assert labels == ["x", "y"]
        # Horizontal axis overhangs the window on both sides
        assert canvas.ops[1] == DrawOp(OpKind.MOVE_TO, (-10 * ctx.scale_x - 25, 0.0))
        assert canvas.ops[2] == DrawOp(OpKind.LINE_TO, (10 * ctx.scale_x + 25, 0.0))

    def test_draw_bounds(self, window: Limits, canvas: Canvas) -> None:
        draw_bounds(RenderContext.create(window), canvas)
        assert canvas.ops[0] == DrawOp(OpKind.SET_COLOR, (0.0, 0.0, 0.5))
        assert canvas.ops[1] == DrawOp(OpKind.SET_DASH, (5.0, 15.0))
        assert count(canvas, OpKind.MOVE_TO) == 4
        assert count(canvas, OpKind.LINE_TO) == 4
        assert count(canvas, OpKind.STROKE) == 1
        assert canvas.ops[-1] == DrawOp(OpKind.SET_DASH, ())


class TestGrid:
    def test_grid_steps_around_origin(self) -> None:
        assert _grid_steps(-2, 2) == [0, 1, 2, -1, -2]

    def test_grid_steps_fractional_bounds(self) -> None:
        assert _grid_steps(-1.5, 2.5) == [0, 1, 2, -1]

    def test_grid_steps_positive_window(self) -> None:
        assert _grid_steps(2.5, 5) == [3, 4, 5]

    def test_grid_steps_negative_window(self) -> None:
        assert _grid_steps(-5, -2.5) == [-3, -4, -5]

    def test_grid_steps_narrow_window(self) -> None:
        assert _grid_steps(0.2, 0.8) == []

    def test_draw_grid_labels(self, canvas: Canvas) -> None:
        draw_grid(RenderContext.create(parse_limits("-2:2:-1:10")), canvas)
        labels = [op.args[2] for op in canvas.ops if op.kind == OpKind.SHOW_TEXT]
        assert labels == ["1", "2", "-1", "-2", *[str(i) for i in range(1, 11)], "-1"]

    def test_draw_grid_skips_axis_and_bounds(self, canvas: Canvas) -> None:
        draw_grid(RenderContext.create(parse_limits("-2:2:-1:10")), canvas)
        grid_lines = sum(
            1
            for op in canvas.ops
            if op.kind == OpKind.SET_COLOR and op.args == (0.8, 0.8, 0.8)
        )
        # x: 1 and -1; y: 1..9
        assert grid_lines == 2 + 9
        # One tick per step on each axis
        ticks = sum(
            1 for op in canvas.ops if op.kind == OpKind.SET_COLOR and op.args == (0.0, 0.0, 0.0)
        )
        assert ticks == 5 + 12


class TestSampling:
    def test_includes_both_ends(self) -> None:
        xs = list(sample_xs(parse_limits("-1:1:0:1"), 0.5))
        assert xs == [-1.0, -0.5, 0.0, 0.5, 1.0]

    def test_default_sample_count(self, window: Limits) -> None:
        xs = list(sample_xs(window, 0.01))
        assert len(xs) == 2001
        assert xs[0] == -10.0
        assert xs[-1] == pytest.approx(10.0)

    def test_step_larger_than_window(self) -> None:
        assert list(sample_xs(parse_limits("0:1:0:1"), 5.0)) == [0.0]


class TestPlotFunction:
    def test_parabola_is_one_segment(self) -> None:
        segments, canvas = curve("x^2", "-2:2:-1:10")
        assert segments == 1
        assert count(canvas, OpKind.MOVE_TO) == 1
        assert count(canvas, OpKind.LINE_TO) == 400
        assert count(canvas, OpKind.STROKE) == 1

    def test_reciprocal_splits_at_pole(self) -> None:
        segments, canvas = curve("1/x", "-5:5:-5:5")
        assert segments == 2
        assert count(canvas, OpKind.MOVE_TO) == 2
        assert count(canvas, OpKind.STROKE) == 2

    def test_tan_splits_at_every_pole(self, window: Limits) -> None:
        segments, _ = curve("tan(x)", str(window))
        assert segments == 7

    def test_undefined_region_is_skipped(self) -> None:
        segments, canvas = curve("asin(x)", "-2:2:-2:2")
        assert segments == 1
        assert count(canvas, OpKind.STROKE) == 1

    def test_log_left_of_origin(self, window: Limits) -> None:
        segments, _ = curve("ln(x)", str(window))
        assert segments == 1

    def test_curve_entirely_off_screen(self, window: Limits) -> None:
        segments, canvas = curve("20", str(window))
        assert segments == 0
        assert canvas.ops == [DrawOp(OpKind.SET_COLOR, (0.0, 0.0, 0.0))]

    def test_points_are_scaled(self) -> None:
        config = RenderConfig(sampling=SamplingConfig(step=1.0))
        _, canvas = curve("x", "0:2:0:2", config)
        ctx = RenderContext.create(parse_limits("0:2:0:2"))
        assert canvas.ops[1] == DrawOp(OpKind.MOVE_TO, (0.0, 0.0))
        assert canvas.ops[2] == DrawOp(OpKind.LINE_TO, ctx.to_device(1.0, 1.0))
        assert canvas.ops[3] == DrawOp(OpKind.LINE_TO, ctx.to_device(2.0, 2.0))
        assert canvas.ops[4] == DrawOp(OpKind.STROKE)

    def test_curve_color(self) -> None:
        config = RenderConfig()
        config.colors.curve = (0.0, 0.4, 0.0)
        _, canvas = curve("x", "-1:1:-1:1", config)
        assert canvas.ops[0] == DrawOp(OpKind.SET_COLOR, (0.0, 0.4, 0.0))


class TestRender:
    def test_page_structure(self, window: Limits) -> None:
        ops = render(window, parse_expr("sin(x)"))
        assert ops[0].kind == OpKind.BEGIN_PAGE
        assert ops[-1].kind == OpKind.SHOW_PAGE
        assert sum(1 for op in ops if op.kind == OpKind.SHOW_PAGE) == 1

    def test_every_path_is_stroked(self, window: Limits) -> None:
        ops = render(window, parse_expr("1/x"))
        open_path = False
        for op in ops:
            if op.kind == OpKind.MOVE_TO:
                open_path = True
            elif op.kind == OpKind.STROKE:
                open_path = False
        assert not open_path

    def test_zero_width_window(self) -> None:
        with pytest.raises(LimitsError):
            render(parse_limits("1:1:0:1"), parse_expr("x"))

    def test_deterministic(self, window: Limits) -> None:
        expr = parse_expr("x^3 - 2*x")
        assert render(window, expr) == render(window, expr)
