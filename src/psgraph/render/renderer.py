"""
Graph renderer.

Turns a window (Limits) and an expression AST into drawing instructions.
Stages run strictly in order, each reading the same RenderContext:

1. scale and axis placement (RenderContext.create)
2. page, font and origin setup
3. axes with arrowheads and labels
4. dashed boundary lines at the window edges
5. support grid, ticks and integer labels
6. the function curve, split into disjoint path segments
7. final flush and end of page
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass

from psgraph.core.config import RenderConfig
from psgraph.core.errors import LimitsError
from psgraph.core.expression_lang.evaluator import evaluate
from psgraph.core.ir.expressions import Expr
from psgraph.core.limits import Limits

from .canvas import Canvas, DrawOp

logger = logging.getLogger(__name__)

# Absorbs float error in (x_max - x_min) / step so x_max itself is sampled
_SAMPLE_TOLERANCE = 1e-9


def _axis_position(low: float, high: float) -> float:
    """Logical coordinate of an axis: 0 if visible, else the bound nearest 0."""
    if low > 0:
        return low
    if high < 0:
        return high
    return 0.0


@dataclass(frozen=True)
class RenderContext:
    """Scale factors and axis positions shared by every drawing stage."""

    limits: Limits
    config: RenderConfig
    scale_x: float
    scale_y: float
    axis_x: float  # device x of the vertical axis
    axis_y: float  # device y of the horizontal axis

    @classmethod
    def create(cls, limits: Limits, config: RenderConfig | None = None) -> RenderContext:
        """Compute the logical-to-device transform for ``limits``.

        Raises:
            LimitsError: If the window has zero width or height, or its size
                or scale is not representable as a finite float.
        """
        config = config or RenderConfig()
        if limits.width == 0 or limits.height == 0:
            raise LimitsError(f"Cannot scale a window with zero width or height ({limits})")
        # -1e308:1e308 has finite bounds but an infinite width
        if not (math.isfinite(limits.width) and math.isfinite(limits.height)):
            raise LimitsError(f"Window is too large to scale ({limits})")

        page = config.page
        scale_x = (page.width - page.margin) / limits.width
        scale_y = (page.height - page.margin) / limits.height
        if not (math.isfinite(scale_x) and math.isfinite(scale_y)):
            raise LimitsError(f"Window is too small to scale ({limits})")
        return cls(
            limits=limits,
            config=config,
            scale_x=scale_x,
            scale_y=scale_y,
            axis_x=_axis_position(limits.x_min, limits.x_max) * scale_x,
            axis_y=_axis_position(limits.y_min, limits.y_max) * scale_y,
        )

    @property
    def center_x(self) -> float:
        return (self.limits.x_min + self.limits.x_max) / 2 * self.scale_x

    @property
    def center_y(self) -> float:
        return (self.limits.y_min + self.limits.y_max) / 2 * self.scale_y

    def to_device(self, x: float, y: float) -> tuple[float, float]:
        return x * self.scale_x, y * self.scale_y


# =============================================================================
# Stages
# =============================================================================


def prepare_page(ctx: RenderContext, canvas: Canvas) -> None:
    """Page size, font and a translation that centres the window on the page."""
    page = ctx.config.page
    canvas.begin_page(page.width, page.height)
    canvas.set_font(page.font_name, page.font_size)
    canvas.translate(page.width / 2 - ctx.center_x, page.height / 2 - ctx.center_y)


def draw_axes(ctx: RenderContext, canvas: Canvas) -> None:
    """Both axes, slightly longer than the window, with arrows and labels."""
    limits = ctx.limits
    overhang = ctx.config.axes.overhang
    tick = ctx.config.axes.tick_size
    font_size = ctx.config.page.font_size

    canvas.set_color(ctx.config.colors.axes)

    # Horizontal axis
    x_start = limits.x_min * ctx.scale_x - overhang
    x_end = limits.x_max * ctx.scale_x + overhang
    canvas.line(x_start, ctx.axis_y, x_end, ctx.axis_y)
    canvas.polyline(
        (x_end - tick, ctx.axis_y + tick),
        (x_end, ctx.axis_y),
        (x_end - tick, ctx.axis_y - tick),
    )
    canvas.text(x_end - tick, ctx.axis_y - font_size, "x")

    # Vertical axis
    y_start = limits.y_min * ctx.scale_y - overhang
    y_end = limits.y_max * ctx.scale_y + overhang
    canvas.line(ctx.axis_x, y_start, ctx.axis_x, y_end)
    canvas.polyline(
        (ctx.axis_x - tick, y_end - tick),
        (ctx.axis_x, y_end),
        (ctx.axis_x + tick, y_end - tick),
    )
    canvas.text(ctx.axis_x + tick, y_end - tick, "y")


def draw_bounds(ctx: RenderContext, canvas: Canvas) -> None:
    """Dashed lines through x_min, x_max, y_min and y_max.

    The lines run two page sizes either side of the window centre, so they
    cross the whole visible page.
    """
    limits = ctx.limits
    page = ctx.config.page
    axes = ctx.config.axes
    reach_y = page.height * 2
    reach_x = page.width * 2

    canvas.set_color(ctx.config.colors.bounds)
    canvas.set_dash(axes.dash_on, axes.dash_off)

    for x in (limits.x_max, limits.x_min):
        canvas.move_to(x * ctx.scale_x, ctx.center_y - reach_y)
        canvas.line_to(x * ctx.scale_x, ctx.center_y + reach_y)
    for y in (limits.y_max, limits.y_min):
        canvas.move_to(ctx.center_x - reach_x, y * ctx.scale_y)
        canvas.line_to(ctx.center_x + reach_x, y * ctx.scale_y)

    canvas.stroke()
    canvas.set_solid()


def _grid_steps(low: float, high: float) -> list[int]:
    """Integer steps inside [low, high]: 0 upwards, then -1 downwards."""
    upward = range(max(0, math.ceil(low)), math.floor(high) + 1)
    downward = range(min(-1, math.floor(high)), math.ceil(low) - 1, -1)
    return [*upward, *downward]


def draw_grid(ctx: RenderContext, canvas: Canvas) -> None:
    """Light grid lines, ticks across the axes and integer labels."""
    limits = ctx.limits
    page = ctx.config.page
    tick = ctx.config.axes.tick_size
    font_size = page.font_size
    colors = ctx.config.colors

    for i in _grid_steps(limits.x_min, limits.x_max):
        x = i * ctx.scale_x
        # Step 0 is the axis; the outermost steps sit on the boundary lines
        if i != 0 and i != limits.x_min and i != limits.x_max:
            canvas.set_color(colors.grid)
            canvas.line(x, ctx.axis_y - page.height * 2, x, ctx.axis_y + page.height * 2)

        canvas.set_color(colors.ticks)
        canvas.line(x, ctx.axis_y + tick, x, ctx.axis_y - tick)

        if i != 0:
            label_x = x - font_size / 4 if i > 0 else x - font_size + font_size / 10
            canvas.text(label_x, ctx.axis_y - font_size - tick, str(i))

    for i in _grid_steps(limits.y_min, limits.y_max):
        y = i * ctx.scale_y
        if i != 0 and i != limits.y_min and i != limits.y_max:
            canvas.set_color(colors.grid)
            canvas.line(ctx.axis_x - page.width * 2, y, ctx.axis_x + page.width * 2, y)

        canvas.set_color(colors.ticks)
        canvas.line(ctx.axis_x - tick, y, ctx.axis_x + tick, y)

        if i != 0:
            canvas.text(ctx.axis_x + tick + 1, y - font_size / 4, str(i))


def sample_xs(limits: Limits, step: float) -> Iterator[float]:
    """x_min, x_min + step, ... up to and including x_max when on the grid."""
    count = math.floor(limits.width / step + _SAMPLE_TOLERANCE)
    for i in range(count + 1):
        yield limits.x_min + i * step


@dataclass
class _CurveState:
    path_open: bool = False
    out_of_range: bool = False
    segments: int = 0


def plot_function(ctx: RenderContext, canvas: Canvas, expr: Expr) -> int:
    """
    Draw the curve of ``expr`` as one path segment per visible run.

    Each sample is classified as undefined (NaN), off-screen (outside
    [y_min, y_max], including ±inf) or plotted. A path is closed on the first
    undefined or off-screen sample and a new one started at the next plotted
    sample, so asymptotes and excursions are not bridged by stray lines.

    Returns:
        Number of path segments drawn.
    """
    limits = ctx.limits
    state = _CurveState()

    canvas.set_color(ctx.config.colors.curve)

    for x in sample_xs(limits, ctx.config.sampling.step):
        y = evaluate(expr, x)

        if math.isnan(y):
            if state.path_open:
                canvas.stroke()
                state.path_open = False
            state.out_of_range = True
            continue

        if y < limits.y_min or y > limits.y_max:
            if not state.out_of_range and state.path_open:
                canvas.stroke()
                state.path_open = False
            state.out_of_range = True
            continue

        state.out_of_range = False
        if state.path_open:
            canvas.line_to(*ctx.to_device(x, y))
        else:
            canvas.move_to(*ctx.to_device(x, y))
            state.path_open = True
            state.segments += 1

    if state.path_open:
        canvas.stroke()

    logger.debug("Plotted %s as %d path segment(s)", expr, state.segments)
    return state.segments


def finish_page(canvas: Canvas) -> None:
    canvas.show_page()


def render(limits: Limits, expr: Expr, config: RenderConfig | None = None) -> list[DrawOp]:
    """Render ``expr`` inside ``limits`` and return the drawing instructions.

    Raises:
        LimitsError: If the window cannot be scaled onto the page.
    """
    ctx = RenderContext.create(limits, config)
    canvas = Canvas()

    prepare_page(ctx, canvas)
    draw_axes(ctx, canvas)
    draw_bounds(ctx, canvas)
    draw_grid(ctx, canvas)
    plot_function(ctx, canvas, expr)
    finish_page(canvas)

    logger.debug("Rendered %d drawing instructions for window %s", len(canvas.ops), limits)
    return canvas.ops
