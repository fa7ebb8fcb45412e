"""Tests for the expression evaluator.

Domain violations come back as NaN, poles and overflow as signed
infinities; evaluation never raises for numeric reasons.
"""

from __future__ import annotations

import math

import pytest

from psgraph.core.expression_lang import evaluate, parse_expr, sample
from psgraph.core.ir import Number


def ev(source: str, x: float = 0.0) -> float:
    return evaluate(parse_expr(source), x)


class TestArithmetic:
    def test_constant(self) -> None:
        assert ev("2 + 3") == 5.0

    def test_variable(self) -> None:
        assert ev("x", 7.5) == 7.5

    def test_polynomial(self) -> None:
        assert ev("x^2 - 2*x + 1", 3.0) == pytest.approx(4.0)

    def test_unary_minus_then_power(self) -> None:
        # '-' binds to the factor before '^' is applied
        assert ev("-x^2", 3.0) == pytest.approx(9.0)

    def test_left_associative_power(self) -> None:
        assert ev("2^3^2") == pytest.approx(64.0)

    def test_shared_multiplicative_level(self) -> None:
        assert ev("2*3^2") == pytest.approx(36.0)

    def test_decimal_literals(self) -> None:
        assert ev("0.1 + 0.2") == pytest.approx(0.3)

    def test_number_node(self) -> None:
        assert evaluate(Number(value=4.0), 100.0) == 4.0


class TestFunctions:
    def test_sin_plus_cos(self) -> None:
        assert ev("sin(0) + cos(0)") == 1.0

    @pytest.mark.parametrize(
        ("source", "x", "expected"),
        [
            ("sin(x)", math.pi / 2, 1.0),
            ("cos(x)", math.pi, -1.0),
            ("tan(x)", math.pi / 4, 1.0),
            ("abs(x)", -3.0, 3.0),
            ("ln(x)", math.e, 1.0),
            ("log(x)", 1000.0, 3.0),
            ("asin(x)", 1.0, math.pi / 2),
            ("acos(x)", 1.0, 0.0),
            ("atan(x)", 1.0, math.pi / 4),
            ("sinh(x)", 0.0, 0.0),
            ("cosh(x)", 0.0, 1.0),
            ("tanh(x)", 0.0, 0.0),
            ("exp(x)", 1.0, math.e),
        ],
    )
    def test_function_values(self, source: str, x: float, expected: float) -> None:
        assert ev(source, x) == pytest.approx(expected)


class TestSpecialValues:
    def test_log_of_zero_is_nan(self) -> None:
        assert math.isnan(ev("ln(x)", 0.0))

    def test_log_of_negative_is_nan(self) -> None:
        assert math.isnan(ev("ln(x)", -1.0))
        assert math.isnan(ev("log(x)", -1.0))

    def test_asin_outside_domain_is_nan(self) -> None:
        assert math.isnan(ev("asin(x)", 2.0))
        assert math.isnan(ev("acos(x)", -1.5))

    def test_division_by_zero(self) -> None:
        assert ev("1/x", 0.0) == math.inf
        assert ev("-1/x", 0.0) == -math.inf

    def test_division_by_negative_zero(self) -> None:
        assert ev("1/-0") == -math.inf

    def test_zero_over_zero_is_nan(self) -> None:
        assert math.isnan(ev("0/x", 0.0))

    def test_negative_base_fractional_power_is_nan(self) -> None:
        assert math.isnan(ev("(-1)^0.5"))

    def test_negative_base_integer_power(self) -> None:
        assert ev("(-2)^3") == pytest.approx(-8.0)

    def test_zero_to_negative_power(self) -> None:
        assert ev("0^-1") == math.inf
        assert ev("0^-2") == math.inf

    def test_power_overflow(self) -> None:
        assert ev("10^400") == math.inf
        assert ev("(-10)^401") == -math.inf

    def test_exp_overflow(self) -> None:
        assert ev("exp(x)", 1000.0) == math.inf

    def test_sinh_overflow_keeps_sign(self) -> None:
        assert ev("sinh(x)", 1000.0) == math.inf
        assert ev("sinh(x)", -1000.0) == -math.inf

    def test_nan_propagates(self) -> None:
        assert math.isnan(ev("ln(x) + 1", -1.0))

    def test_trig_of_infinity_is_nan(self) -> None:
        assert math.isnan(ev("sin(1/x)", 0.0))


class TestEvaluatorMisc:
    def test_sample(self) -> None:
        points = sample(parse_expr("2*x"), [0.0, 1.0, 2.5])
        assert points == [(0.0, 0.0), (1.0, 2.0), (2.5, 5.0)]

    def test_evaluation_is_repeatable(self) -> None:
        expr = parse_expr("sin(x)^2 + cos(x)^2")
        assert evaluate(expr, 0.7) == evaluate(expr, 0.7)
        assert evaluate(expr, 0.7) == pytest.approx(1.0)

    def test_long_sum(self) -> None:
        assert ev("+".join(["x"] * 1500), 1.0) == 1500.0

    def test_long_alternating_chain_keeps_operand_order(self) -> None:
        # ((1000 - 1) - 1) ... evaluated left to right
        assert ev("1000" + "-1" * 999) == 1.0
        assert ev("64" + "/2" * 6) == 1.0

    def test_deeply_nested_calls(self) -> None:
        assert ev("abs(" * 100 + "x" + ")" * 100, -2.0) == 2.0

    def test_unknown_node_type(self) -> None:
        with pytest.raises(TypeError):
            evaluate("x", 1.0)  # type: ignore[arg-type]
