"""Tests for the numerical methods and capability."""

import math
import random

import pytest

from vedai_engine.exceptions import InvalidInputError
from vedai_engine.math_engine.capabilities.numerical import (
    bisection_method,
    eulers_method,
    monte_carlo,
    newton_raphson,
    numerical_derivative,
    simpsons_rule,
    trapezoidal_rule,
)


def square_minus_two(x):
    return x * x - 2


def double(x):
    return 2 * x


def square(x):
    return x * x


class TestNewtonRaphson:

    def test_converges_to_sqrt_two(self):
        result = newton_raphson(square_minus_two, double, 1.0)

        assert result.success is True
        assert result.result == pytest.approx(1.41421356, abs=1e-6)
        assert result.get("iterations") < 10
        assert result.verified is True

    def test_zero_derivative(self):
        result = newton_raphson(square_minus_two, double, 0.0)

        assert result.success is False
        assert result.error == "Derivative too small"
        assert result.get("iterations") == 0
        assert result.steps == ["Starting Newton-Raphson with x₀ = 0.0"]

    def test_iteration_budget(self):
        result = newton_raphson(square_minus_two, double, 1000.0, max_iter=2)

        assert result.success is False
        assert result.error == "Max iterations reached"
        assert result.get("iterations") == 2
        assert len(result.steps) == 3


class TestBisection:

    def test_converges(self):
        result = bisection_method(square_minus_two, 0, 2)

        assert result.success is True
        assert result.result == pytest.approx(1.4142, abs=1e-4)
        assert result.verified is True

    def test_same_sign_endpoints(self):
        result = bisection_method(square_minus_two, 2, 3)

        assert result.success is False
        assert result.error == "Function must have opposite signs at endpoints"
        assert result.get("iterations") == 0
        assert result.steps == []

    def test_iteration_budget(self):
        result = bisection_method(square_minus_two, 0, 2, tol=1e-15, max_iter=3)

        assert result.success is False
        assert result.error == "Max iterations reached"
        assert result.get("last_value") == pytest.approx(1.4, abs=0.2)


class TestQuadrature:

    def test_simpson_beats_trapezoid_on_polynomial(self):
        simpson = simpsons_rule(square, 0, 1, n=100)
        trapezoid = trapezoidal_rule(square, 0, 1, n=100)

        exact = 1 / 3
        assert abs(simpson.result - exact) <= abs(trapezoid.result - exact)
        assert simpson.result == pytest.approx(exact, abs=1e-12)
        assert trapezoid.result == pytest.approx(exact, abs=1e-4)

    def test_simpson_odd_intervals_rounded_up(self):
        result = simpsons_rule(square, 0, 1, n=5)
        assert result.get("intervals") == 6

    def test_simpson_sin(self):
        result = simpsons_rule(math.sin, 0, math.pi)
        assert result.result == pytest.approx(2.0, abs=1e-6)

    def test_trapezoid_linear_is_exact(self):
        result = trapezoidal_rule(double, 0, 3, n=4)
        assert result.result == pytest.approx(9.0)


class TestEuler:

    def test_exponential_growth(self):
        result = eulers_method(lambda x, y: y, 0.0, 1.0, 1.0, h=0.1)

        assert result.get("step_count") == 10
        assert result.result == pytest.approx(1.1 ** 10)
        assert len(result.get("points")) == 11
        assert result.get("points")[-1]["x"] == pytest.approx(1.0)

    def test_trace_is_limited(self):
        result = eulers_method(lambda x, y: 1.0, 0.0, 0.0, 5.0, h=0.1)

        assert result.get("step_count") == 50
        assert len(result.steps) == 11
        assert result.result == pytest.approx(5.0)

    def test_non_positive_step(self):
        result = eulers_method(lambda x, y: y, 0.0, 1.0, 1.0, h=0)
        assert result.success is False
        assert result.error == "Step size must be positive"


class TestOtherMethods:

    def test_numerical_derivative(self):
        result = numerical_derivative(square, 3.0)
        assert result.result == pytest.approx(6.0, abs=1e-4)

    def test_monte_carlo(self):
        rng = random.Random(7)
        result = monte_carlo(lambda: rng.random() < 0.25, trials=20000)

        assert result.result == pytest.approx(0.25, abs=0.02)
        interval = result.get("confidence_interval")
        assert interval["lower"] <= result.result <= interval["upper"]

    def test_monte_carlo_needs_trials(self):
        result = monte_carlo(lambda: True, trials=0)
        assert result.success is False


class TestNumericalCapability:

    def test_handle_bisection(self, numerical):
        result = numerical.handle("bisection", {"f": square_minus_two, "a": 0, "b": 2})
        assert result.result == pytest.approx(math.sqrt(2), abs=1e-5)

    def test_handle_missing_argument(self, numerical):
        with pytest.raises(InvalidInputError) as exc_info:
            numerical.handle("newton_raphson", {"f": square_minus_two, "x0": 1.0})
        assert exc_info.value.details == {"missing": ["f_prime"]}

    def test_handle_unexpected_argument(self, numerical):
        with pytest.raises(InvalidInputError, match="Invalid arguments"):
            numerical.handle("simpsons_rule", {"f": square, "a": 0, "b": 1, "steps": 10})

    def test_handle_non_callable(self, numerical):
        with pytest.raises(InvalidInputError, match="must be callable"):
            numerical.handle("trapezoidal_rule", {"f": 3, "a": 0, "b": 1})

    def test_handle_unknown_operation(self, numerical):
        with pytest.raises(InvalidInputError, match="Unknown operation"):
            numerical.handle("runge_kutta", {})
