"""
PostScript serializer for drawing instructions.

Writes one page of PostScript: a header, page device size and font setup,
then one line of operators per DrawOp.
"""

from __future__ import annotations

import io
from collections.abc import Iterable
from typing import TextIO

from .canvas import DrawOp, OpKind


def _num(value: float | str) -> str:
    return f"{float(value):f}"


def escape_text(text: str) -> str:
    """Escape a string for use inside a PostScript ``(...)`` literal."""
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def format_op(op: DrawOp) -> str:
    """Render one instruction as PostScript source (may span lines)."""
    args = op.args
    if op.kind == OpKind.BEGIN_PAGE:
        return (
            "%!PS\n"
            "%%PageSetup\n"
            f"<< /PageSize [{_num(args[0])} {_num(args[1])}] >> setpagedevice"
        )
    if op.kind == OpKind.SET_FONT:
        return f"/{args[0]} findfont {_num(args[1])} scalefont setfont"
    if op.kind == OpKind.TRANSLATE:
        return f"{_num(args[0])} {_num(args[1])} translate"
    if op.kind == OpKind.SET_COLOR:
        return " ".join(f"{float(c):g}" for c in args) + " setrgbcolor"
    if op.kind == OpKind.SET_DASH:
        if not args:
            return "[] 0 setdash"
        return f"[{float(args[0]):g} {float(args[1]):g}] 0 setdash"
    if op.kind == OpKind.MOVE_TO:
        return f"{_num(args[0])} {_num(args[1])} moveto"
    if op.kind == OpKind.LINE_TO:
        return f"{_num(args[0])} {_num(args[1])} lineto"
    if op.kind == OpKind.STROKE:
        return "stroke"
    if op.kind == OpKind.SHOW_TEXT:
        return f"{_num(args[0])} {_num(args[1])} moveto\n({escape_text(str(args[2]))}) show"
    if op.kind == OpKind.SHOW_PAGE:
        return "showpage"
    raise ValueError(f"Unknown drawing instruction: {op.kind}")


def write_postscript(ops: Iterable[DrawOp], stream: TextIO) -> None:
    """Write the instructions to ``stream`` as PostScript."""
    for op in ops:
        stream.write(format_op(op))
        stream.write("\n")


def to_postscript(ops: Iterable[DrawOp]) -> str:
    """Return the instructions as a PostScript document string."""
    buffer = io.StringIO()
    write_postscript(ops, buffer)
    return buffer.getvalue()
