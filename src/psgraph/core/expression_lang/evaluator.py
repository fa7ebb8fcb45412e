"""
Expression evaluator for the psgraph expression language.

Evaluates an AST at a given value of the independent variable. Pure
evaluation: no I/O, no state. Domain violations never raise; they come back
as NaN, and poles/overflows as signed infinities, the way IEEE-754 C math
reports them. The renderer relies on this to cut the curve instead of
aborting the plot.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable

from psgraph.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Call,
    Expr,
    MathFunction,
    Number,
    UnaryMinus,
    Variable,
)

_FUNCTIONS: dict[MathFunction, Callable[[float], float]] = {
    MathFunction.SIN: math.sin,
    MathFunction.COS: math.cos,
    MathFunction.TAN: math.tan,
    MathFunction.ABS: math.fabs,
    MathFunction.LN: math.log,
    MathFunction.LOG: math.log10,
    MathFunction.ASIN: math.asin,
    MathFunction.ACOS: math.acos,
    MathFunction.ATAN: math.atan,
    MathFunction.SINH: math.sinh,
    MathFunction.COSH: math.cosh,
    MathFunction.TANH: math.tanh,
    MathFunction.EXP: math.exp,
}


def evaluate(expr: Expr, x: float) -> float:
    """Evaluate an expression at ``x``.

    Args:
        expr: Parsed expression AST.
        x: Value of the independent variable.

    Returns:
        The computed value; NaN where the expression is undefined at ``x``.
    """
    # Post-order walk with an explicit stack: a long sum such as x+x+...+x
    # is a left spine deeper than the interpreter's recursion limit.
    values: list[float] = []
    stack: list[tuple[Expr, bool]] = [(expr, False)]

    while stack:
        node, children_done = stack.pop()

        if isinstance(node, Number):
            values.append(node.value)

        elif isinstance(node, Variable):
            values.append(x)

        elif isinstance(node, Call):
            if children_done:
                values.append(_apply(node.func, values.pop()))
            else:
                stack.append((node, True))
                stack.append((node.arg, False))

        elif isinstance(node, UnaryMinus):
            if children_done:
                values.append(-values.pop())
            else:
                stack.append((node, True))
                stack.append((node.operand, False))

        elif isinstance(node, BinaryExpr):
            if children_done:
                right = values.pop()
                left = values.pop()
                values.append(_combine(node.op, left, right))
            else:
                stack.append((node, True))
                stack.append((node.right, False))
                stack.append((node.left, False))

        else:
            raise TypeError(f"Unknown expression type: {type(node).__name__}")

    return values[0]


def sample(expr: Expr, xs: Iterable[float]) -> list[tuple[float, float]]:
    """Evaluate ``expr`` at each x, returning (x, y) pairs."""
    return [(x, evaluate(expr, x)) for x in xs]


def _apply(func: MathFunction, arg: float) -> float:
    """Apply a built-in function with C-style NaN/inf results."""
    try:
        return _FUNCTIONS[func](arg)
    except ValueError:
        # Outside the function's real domain: ln(0), asin(2), sin(inf)
        return math.nan
    except OverflowError:
        if func == MathFunction.SINH:
            return math.copysign(math.inf, arg)
        return math.inf


def _combine(op: BinaryOp, left: float, right: float) -> float:
    """Evaluate a binary operator on two floats."""
    if op == BinaryOp.ADD:
        return left + right
    if op == BinaryOp.SUB:
        return left - right
    if op == BinaryOp.MUL:
        return left * right
    if op == BinaryOp.DIV:
        return _divide(left, right)
    if op == BinaryOp.POW:
        return _power(left, right)
    raise TypeError(f"Unknown binary op: {op}")


def _divide(left: float, right: float) -> float:
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def _is_odd_integer(value: float) -> bool:
    return value.is_integer() and value % 2 == 1


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0 and exponent < 0:
            # Pole: pow(±0, negative)
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        # Negative base with a non-integer exponent has no real value
        return math.nan
