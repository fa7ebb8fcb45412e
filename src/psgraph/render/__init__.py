"""Graph rendering: drawing instructions, the staged renderer and PostScript output."""

from .canvas import Canvas, DrawOp, OpKind
from .postscript import to_postscript, write_postscript
from .renderer import RenderContext, plot_function, render

__all__ = [
    "Canvas",
    "DrawOp",
    "OpKind",
    "RenderContext",
    "plot_function",
    "render",
    "to_postscript",
    "write_postscript",
]
