"""Tests for the symbolic algebra solvers and capability."""

import pytest

from vedai_engine.exceptions import InvalidInputError
from vedai_engine.math_engine.capabilities.symbolic import (
    calculate_derivative,
    evaluate_expression,
    factor_polynomial,
    simplify_expression,
    solve_algebraic_equation,
)


class TestSolveAlgebraicEquation:
    """Linear scan, quadratic formula and the failure shapes."""

    def test_linear(self):
        result = solve_algebraic_equation("2*x + 3 = 7")

        assert result.success is True
        assert result.method == "linear"
        assert result.get("solutions") == [pytest.approx(2.0, abs=0.01)]
        assert result.verified is True

    def test_linear_implicit_multiplication(self):
        result = solve_algebraic_equation("3x - 6 = 0")
        assert result.get("solutions") == [pytest.approx(2.0, abs=0.01)]

    def test_linear_negative_root(self):
        result = solve_algebraic_equation("x + 7.5 = 0")
        assert result.get("solutions") == [pytest.approx(-7.5, abs=0.01)]

    def test_linear_out_of_range(self):
        result = solve_algebraic_equation("x = 500")

        assert result.success is False
        assert result.error == "No solution found in range"

    def test_linear_other_variable(self):
        result = solve_algebraic_equation("2*y = 8", variable="y")
        assert result.get("solutions") == [pytest.approx(4.0, abs=0.01)]
        assert result.get("variable") == "y"

    def test_quadratic_uses_parsed_coefficients(self):
        result = solve_algebraic_equation("x^2 - 5*x + 6 = 0")

        assert result.method == "quadratic_formula"
        assert sorted(result.get("solutions")) == [2.0, 3.0]
        assert result.verified is True

    def test_quadratic_other_coefficients(self):
        result = solve_algebraic_equation("2*x**2 = 8")

        assert sorted(result.get("solutions")) == [-2.0, 2.0]
        assert result.get("coefficients") == {"a": 2.0, "b": 0.0, "c": -8.0}

    def test_quadratic_complex_roots(self):
        result = solve_algebraic_equation("x^2 + 2*x + 5 = 0")

        assert result.success is True
        assert result.get("solutions") == "complex"
        assert result.get("real") == -1.0
        assert result.get("imaginary") == 2.0
        assert result.result == "-1.0 ± 2.0i"

    def test_cubic_is_unsupported(self):
        result = solve_algebraic_equation("x^3 = 8")

        assert result.success is False
        assert result.error == "Complex equations require symbolic solver"
        assert result.get("expression") == "x**3 - 8"

    def test_missing_equals(self):
        result = solve_algebraic_equation("2*x + 3")
        assert result.success is False
        assert result.error == "Invalid equation format"

    def test_multiple_equals(self):
        result = solve_algebraic_equation("x = 2 = 3")
        assert result.success is False
        assert result.error == "Invalid equation format"

    def test_unparseable_side(self):
        result = solve_algebraic_equation("2*x + = 7")
        assert result.success is False
        assert "Invalid mathematical expression" in result.error


class TestExpressions:

    def test_simplify(self):
        result = simplify_expression("(x**2 - 1)/(x - 1)")

        assert result.result == "x + 1"
        assert result.verified is True

    def test_simplify_invalid(self):
        result = simplify_expression("2 +* 3")
        assert result.success is False

    def test_derivative(self):
        result = calculate_derivative("x^3 + 2x")

        assert result.result == "3*x**2 + 2"
        assert result.get("variable") == "x"

    def test_derivative_of_function(self):
        assert calculate_derivative("sin(x)").result == "cos(x)"

    def test_derivative_of_ln(self):
        assert calculate_derivative("ln(x)").result == "1/x"

    def test_evaluate(self):
        result = evaluate_expression("x^2 + y", {"x": 3, "y": 1})
        assert result.result == pytest.approx(10.0)

    def test_evaluate_unbound(self):
        result = evaluate_expression("x + z", {"x": 1})

        assert result.success is False
        assert "z" in result.error

    def test_evaluate_non_real(self):
        result = evaluate_expression("sqrt(-1)")
        assert result.success is False
        assert result.error == "Expression does not evaluate to a real number"

    def test_factor(self):
        result = factor_polynomial("x^2 - 5x + 6")

        assert result.result == "(x - 3)*(x - 2)"
        assert result.verified is True

    def test_evaluate_pi(self):
        assert evaluate_expression("sin(pi/2)").result == pytest.approx(1.0)


class TestExpressionValidation:
    """Only arithmetic, known functions and symbols are accepted."""

    @pytest.mark.parametrize("expression", [
        "__import__('os').system('true')",
        "x.n(100)",
        "(1, 2)",
        "x < 2",
        "x if 1 else 2",
        "lambda: 1",
    ])
    def test_unsupported_syntax_is_rejected(self, expression):
        result = simplify_expression(expression)

        assert result.success is False
        assert "Unsupported character" in result.error or "Unknown name" in result.error

    def test_unknown_multi_letter_name(self):
        result = evaluate_expression("foo + 1")

        assert result.success is False
        assert result.error == "Unknown name 'foo' in expression"

    def test_bound_multi_letter_name(self):
        result = evaluate_expression("rate * 2", {"rate": 3})
        assert result.result == pytest.approx(6.0)

    def test_single_letters_are_plain_symbols(self):
        # S, N and I would otherwise resolve to sympy objects
        result = evaluate_expression("S + N + I", {"S": 1, "N": 2, "I": 3})
        assert result.result == pytest.approx(6.0)

    def test_expression_too_long(self):
        result = simplify_expression("1+" * 250 + "1")

        assert result.success is False
        assert result.error == "Expression longer than 500 characters"
        assert result.get("original").startswith("1+1+")

    def test_comparison_is_not_differentiated(self):
        result = calculate_derivative("x < 2")
        assert result.success is False

    def test_tuple_equation_side(self):
        result = solve_algebraic_equation("(1, 2) = 3")

        assert result.success is False
        assert "Unsupported character ','" in result.error

    def test_comparison_equation_side(self):
        result = solve_algebraic_equation("x < 2 = 1")
        assert result.success is False

    def test_quadratic_with_symbolic_coefficient(self):
        result = solve_algebraic_equation("x^2 + I = 0")

        assert result.success is False
        assert result.error == "Quadratic coefficients must be real numbers"

    def test_quadratic_with_imaginary_coefficient(self):
        result = solve_algebraic_equation("x^2 + sqrt(-1) = 0")

        assert result.success is False
        assert result.error == "Quadratic coefficients must be real numbers"

    def test_power_tower_is_rejected(self):
        result = simplify_expression("9^9^9^9")

        assert result.success is False
        assert result.error == "Exponent too large (limit 100)"

    def test_large_symbolic_exponent_is_rejected(self):
        result = calculate_derivative("x^1000")

        assert result.success is False
        assert "Exponent too large" in result.error

    def test_power_with_too_many_digits(self):
        assert evaluate_expression("10^100 / 10^99").result == pytest.approx(10.0)

        result = evaluate_expression("(10^99)^99")
        assert result.success is False
        assert "Power too large" in result.error

    def test_small_powers_still_evaluate(self):
        assert evaluate_expression("2^10").result == pytest.approx(1024.0)
        assert simplify_expression("2^(1/2) * 2^(1/2)").result == "2"


class TestSymbolicCapability:

    def test_solve_equation(self, symbolic):
        result = symbolic.handle("solve_equation", {"equation": "x - 4 = 0"})
        assert result.get("solutions") == [pytest.approx(4.0, abs=0.01)]

    def test_derivative_with_variable(self, symbolic):
        result = symbolic.handle("derivative", {"expression": "t^2", "variable": "t"})
        assert result.result == "2*t"

    def test_unknown_operation(self, symbolic):
        with pytest.raises(InvalidInputError):
            symbolic.handle("integrate", {"expression": "x"})

    def test_missing_argument(self, symbolic):
        with pytest.raises(InvalidInputError, match="expression"):
            symbolic.handle("simplify", {})

    def test_invalid_variable_name_is_reported(self, symbolic):
        result = symbolic.handle("derivative", {"expression": "x", "variable": "1x"})
        assert result.success is False
        assert "Invalid variable name" in result.error
