"""
psgraph Intermediate Representation (IR) types.

All types are re-exported from this package.
"""

from .expressions import (
    VARIABLE_NAME,
    BinaryExpr,
    BinaryOp,
    Call,
    Expr,
    MathFunction,
    Number,
    UnaryMinus,
    Variable,
    iter_nodes,
    to_text,
    uses_variable,
)

__all__ = [
    "VARIABLE_NAME",
    "BinaryExpr",
    "BinaryOp",
    "Call",
    "Expr",
    "MathFunction",
    "Number",
    "UnaryMinus",
    "Variable",
    "iter_nodes",
    "to_text",
    "uses_variable",
]
