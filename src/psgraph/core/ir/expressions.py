"""
Expression types for the psgraph AST.

A single-variable arithmetic expression over the real numbers:
- Literals: 3, 2.5, 1e-3
- The independent variable: x
- Unary minus: -x
- Binary operators: +, -, *, /, ^
- Calls to a closed set of one-argument functions: sin(x), ln(x + 1)

Nodes are immutable and own their children; the tree is built once by the
parser and only read afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

VARIABLE_NAME = "x"


# ---------------------------------------------------------------------------
# Operators and functions
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary arithmetic operators."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"


class MathFunction(StrEnum):
    """The closed set of functions an expression may call."""

    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    ABS = "abs"
    LN = "ln"
    LOG = "log"
    ASIN = "asin"
    ACOS = "acos"
    ATAN = "atan"
    SINH = "sinh"
    COSH = "cosh"
    TANH = "tanh"
    EXP = "exp"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Number(BaseModel):
    """A numeric literal."""

    value: float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return to_text(self)


class Variable(BaseModel):
    """The independent variable."""

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return to_text(self)


class Call(BaseModel):
    """
    Function application: func(arg).

    Examples:
        - Call(func=MathFunction.SIN, arg=Variable()) → sin(x)
        - Call(func=MathFunction.LN, arg=Number(value=2)) → ln(2)
    """

    func: MathFunction
    arg: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return to_text(self)


class UnaryMinus(BaseModel):
    """Negation of a single operand."""

    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return to_text(self)


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return to_text(self)


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Number | Variable | Call | UnaryMinus | BinaryExpr

# Rebuild models for recursive forward references
Call.model_rebuild()
UnaryMinus.model_rebuild()
BinaryExpr.model_rebuild()


def _format_number(value: float) -> str:
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def to_text(expr: Expr) -> str:
    """
    Render a tree back to expression text, binary operations parenthesised.

    Walks with an explicit stack so left spines of any length (x+x+...+x)
    render without recursion.
    """
    parts: list[str] = []
    stack: list[Expr | str] = [expr]

    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Number):
            parts.append(_format_number(item.value))
        elif isinstance(item, Variable):
            parts.append(VARIABLE_NAME)
        elif isinstance(item, Call):
            stack.extend([")", item.arg, f"{item.func.value}("])
        elif isinstance(item, UnaryMinus):
            stack.extend([item.operand, "-"])
        else:
            stack.extend([")", item.right, f" {item.op.value} ", item.left, "("])

    return "".join(parts)


def iter_nodes(expr: Expr) -> Iterator[Expr]:
    """Yield every node of the tree, parents before children."""
    stack: list[Expr] = [expr]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, Call):
            stack.append(node.arg)
        elif isinstance(node, UnaryMinus):
            stack.append(node.operand)
        elif isinstance(node, BinaryExpr):
            stack.extend([node.right, node.left])


def uses_variable(expr: Expr) -> bool:
    """True if the independent variable occurs anywhere in the tree."""
    return any(isinstance(node, Variable) for node in iter_nodes(expr))
