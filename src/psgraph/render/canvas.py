"""
Vector drawing instructions and the Canvas that records them.

The renderer never writes output directly: it appends DrawOp instructions
to a Canvas, and a serializer (see postscript.py) turns them into a file.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class OpKind(StrEnum):
    """Kinds of drawing instruction."""

    BEGIN_PAGE = "begin_page"  # args: width, height
    SET_FONT = "set_font"  # args: name, size
    TRANSLATE = "translate"  # args: dx, dy
    SET_COLOR = "set_color"  # args: r, g, b
    SET_DASH = "set_dash"  # args: on, off (empty = solid)
    MOVE_TO = "move_to"  # args: x, y
    LINE_TO = "line_to"  # args: x, y
    STROKE = "stroke"
    SHOW_TEXT = "show_text"  # args: x, y, text
    SHOW_PAGE = "show_page"


@dataclass(frozen=True, slots=True)
class DrawOp:
    """A single drawing instruction."""

    kind: OpKind
    args: tuple[float | str, ...] = ()


class Canvas:
    """Records drawing instructions in order."""

    def __init__(self) -> None:
        self.ops: list[DrawOp] = []

    def _emit(self, kind: OpKind, *args: float | str) -> None:
        self.ops.append(DrawOp(kind, args))

    def begin_page(self, width: float, height: float) -> None:
        self._emit(OpKind.BEGIN_PAGE, width, height)

    def set_font(self, name: str, size: float) -> None:
        self._emit(OpKind.SET_FONT, name, size)

    def translate(self, dx: float, dy: float) -> None:
        self._emit(OpKind.TRANSLATE, dx, dy)

    def set_color(self, rgb: tuple[float, float, float]) -> None:
        self._emit(OpKind.SET_COLOR, *rgb)

    def set_dash(self, on: float, off: float) -> None:
        self._emit(OpKind.SET_DASH, on, off)

    def set_solid(self) -> None:
        self._emit(OpKind.SET_DASH)

    def move_to(self, x: float, y: float) -> None:
        self._emit(OpKind.MOVE_TO, x, y)

    def line_to(self, x: float, y: float) -> None:
        self._emit(OpKind.LINE_TO, x, y)

    def stroke(self) -> None:
        self._emit(OpKind.STROKE)

    def line(self, x0: float, y0: float, x1: float, y1: float) -> None:
        """Stroke a single straight segment."""
        self.move_to(x0, y0)
        self.line_to(x1, y1)
        self.stroke()

    def polyline(self, *points: tuple[float, float]) -> None:
        """Stroke an open path through ``points``."""
        first, *rest = points
        self.move_to(*first)
        for point in rest:
            self.line_to(*point)
        self.stroke()

    def text(self, x: float, y: float, text: str) -> None:
        self._emit(OpKind.SHOW_TEXT, x, y, text)

    def show_page(self) -> None:
        self._emit(OpKind.SHOW_PAGE)
