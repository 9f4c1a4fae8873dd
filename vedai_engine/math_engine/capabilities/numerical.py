"""Numerical Methods Capability.

Iterative root finding, quadrature, ODE stepping, numerical
differentiation and Monte Carlo estimation over caller-supplied
functions. Every routine is a pure function of its arguments; iteration
counts bound the worst-case running time.
"""

from __future__ import annotations

import inspect
import math
from typing import Any, Callable, Dict, List

import numpy as np

from vedai_engine.exceptions import InvalidInputError
from vedai_engine.logger import session_logger as logger
from vedai_engine.logger.decorators import log_execution_time
from vedai_engine.math_engine.base import MathCapability, SolverResult, require_arguments

RealFunction = Callable[[float], float]
OdeFunction = Callable[[float, float], float]

DERIVATIVE_EPSILON = 1e-10
EULER_TRACE_LIMIT = 10
CONFIDENCE_Z = 1.96

METHOD_NAMES: Dict[str, str] = {
    "newton_raphson": "Newton-Raphson",
    "bisection": "Bisection",
    "simpsons_rule": "Simpson's Rule",
    "trapezoidal_rule": "Trapezoidal Rule",
    "eulers_method": "Euler's Method",
    "numerical_derivative": "Central Difference",
    "monte_carlo": "Monte Carlo",
}


def _sample(f: RealFunction, xs: np.ndarray) -> np.ndarray:
    """Evaluate a scalar function at every grid point."""
    return np.fromiter((f(float(x)) for x in xs), dtype=np.float64, count=xs.size)


def _root_verified(f: RealFunction, root: float, tol: float) -> bool:
    return bool(abs(f(root)) < math.sqrt(tol))


def newton_raphson(
    f: RealFunction,
    f_prime: RealFunction,
    x0: float,
    tol: float = 1e-6,
    max_iter: int = 100,
) -> SolverResult:
    """Find a root of ``f`` by Newton-Raphson iteration from ``x0``.

    Fails when the derivative vanishes (|f'(x)| < 1e-10) or the iteration
    budget runs out; the trace so far is kept in both cases.
    """
    steps = [f"Starting Newton-Raphson with x₀ = {x0}"]
    x = x0

    for i in range(max_iter):
        fx = f(x)
        fpx = f_prime(x)

        if abs(fpx) < DERIVATIVE_EPSILON:
            return SolverResult.failure(
                "newton_raphson",
                "Derivative too small",
                steps=steps,
                iterations=i,
                last_value=x,
            )

        x_new = x - fx / fpx
        steps.append(f"Iteration {i + 1}: x = {x:.6f}, f(x) = {fx:.6f}, x_new = {x_new:.6f}")

        if abs(x_new - x) < tol:
            return SolverResult(
                method="newton_raphson",
                result=x_new,
                steps=steps,
                verified=_root_verified(f, x_new, tol),
                details={"root": x_new, "iterations": i + 1},
            )

        x = x_new

    return SolverResult.failure(
        "newton_raphson",
        "Max iterations reached",
        steps=steps,
        iterations=max_iter,
        last_value=x,
    )


def bisection_method(
    f: RealFunction,
    a: float,
    b: float,
    tol: float = 1e-6,
    max_iter: int = 100,
) -> SolverResult:
    """Find a root of ``f`` bracketed by [a, b].

    Requires f(a) and f(b) to have opposite signs; otherwise fails before
    any iteration.
    """
    if f(a) * f(b) >= 0:
        return SolverResult.failure(
            "bisection",
            "Function must have opposite signs at endpoints",
            iterations=0,
        )

    steps = [f"Starting Bisection Method with [{a}, {b}]"]
    left, right = a, b

    for i in range(max_iter):
        mid = (left + right) / 2
        f_mid = f(mid)

        steps.append(
            f"Iteration {i + 1}: [{left:.6f}, {right:.6f}], mid = {mid:.6f}, f(mid) = {f_mid:.6f}"
        )

        if abs(f_mid) < tol:
            return SolverResult(
                method="bisection",
                result=mid,
                steps=steps,
                verified=_root_verified(f, mid, tol),
                details={"root": mid, "iterations": i + 1},
            )

        if f(left) * f_mid < 0:
            right = mid
        else:
            left = mid

        if abs(right - left) < tol:
            root = (left + right) / 2
            return SolverResult(
                method="bisection",
                result=root,
                steps=steps,
                verified=_root_verified(f, root, tol),
                details={"root": root, "iterations": i + 1},
            )

    return SolverResult.failure(
        "bisection",
        "Max iterations reached",
        steps=steps,
        iterations=max_iter,
        last_value=(left + right) / 2,
    )


def simpsons_rule(f: RealFunction, a: float, b: float, n: int = 100) -> SolverResult:
    """Composite Simpson's rule; an odd ``n`` is bumped to the next even number."""
    n = max(int(n), 2)
    if n % 2 != 0:
        n += 1

    h = (b - a) / n
    xs = a + h * np.arange(n + 1)

    weights = np.ones(n + 1)
    weights[1:-1:2] = 4.0
    weights[2:-1:2] = 2.0

    result = float(h / 3 * np.dot(weights, _sample(f, xs)))

    return SolverResult(
        method="simpsons_rule",
        result=result,
        steps=[
            f"Using Simpson's Rule with {n} intervals",
            f"h = ({b} - {a}) / {n} = {h}",
            f"∫f(x)dx ≈ {result:.6f}",
        ],
        details={"intervals": n, "interval": f"[{a}, {b}]", "step_size": h},
    )


def trapezoidal_rule(f: RealFunction, a: float, b: float, n: int = 100) -> SolverResult:
    """Composite trapezoidal rule with endpoints weighted one half."""
    n = max(int(n), 1)

    h = (b - a) / n
    xs = a + h * np.arange(n + 1)

    weights = np.ones(n + 1)
    weights[0] = weights[-1] = 0.5

    result = float(h * np.dot(weights, _sample(f, xs)))

    return SolverResult(
        method="trapezoidal_rule",
        result=result,
        steps=[
            f"Using Trapezoidal Rule with {n} intervals",
            f"h = ({b} - {a}) / {n} = {h}",
            f"∫f(x)dx ≈ {result:.6f}",
        ],
        details={"intervals": n, "interval": f"[{a}, {b}]", "step_size": h},
    )


def eulers_method(
    f: OdeFunction,
    x0: float,
    y0: float,
    x_end: float,
    h: float = 0.1,
) -> SolverResult:
    """Integrate dy/dx = f(x, y) from (x0, y0) to ``x_end`` with forward Euler.

    Grid points are computed as x0 + k*h so accumulated rounding never adds
    a step past ``x_end``. Only the first ten steps are traced.
    """
    if h <= 0:
        return SolverResult.failure("eulers_method", "Step size must be positive", step_size=h)

    steps = [f"Starting Euler's Method: dy/dx = f(x,y), y({x0}) = {y0}"]
    points: List[Dict[str, float]] = [{"x": x0, "y": y0}]

    x, y = x0, y0
    k = 0
    while x < x_end and not math.isclose(x, x_end, rel_tol=1e-9, abs_tol=1e-12):
        y = y + h * f(x, y)
        k += 1
        x = x0 + k * h

        points.append({"x": round(x, 6), "y": round(y, 6)})
        if k <= EULER_TRACE_LIMIT:
            steps.append(f"x = {x:.4f}, y = {y:.6f}")

    return SolverResult(
        method="eulers_method",
        result=y,
        steps=steps,
        details={
            "final_value": y,
            "points": points,
            "step_size": h,
            "step_count": k,
        },
    )


def numerical_derivative(f: RealFunction, x: float, h: float = 1e-5) -> SolverResult:
    """Central-difference estimate of f'(x)."""
    derivative = (f(x + h) - f(x - h)) / (2 * h)

    return SolverResult(
        method="central_difference",
        result=derivative,
        steps=[
            f"f'({x}) ≈ [f({x + h}) - f({x - h})] / (2h)",
            f"f'({x}) ≈ {derivative:.6f}",
        ],
        details={"derivative": derivative, "point": x, "step_size": h},
    )


def monte_carlo(experiment: Callable[[], bool], trials: int = 10000) -> SolverResult:
    """Estimate the success probability of a Bernoulli ``experiment``.

    Reports the empirical probability with a 95% normal-approximation
    half-width.
    """
    if trials < 1:
        return SolverResult.failure("monte_carlo", "Trials must be a positive integer", trials=trials)

    successes = sum(1 for _ in range(trials) if experiment())
    probability = successes / trials
    margin = CONFIDENCE_Z * math.sqrt(probability * (1 - probability) / trials)

    return SolverResult(
        method="monte_carlo",
        result=probability,
        steps=[
            f"Ran {trials} trials with {successes} successes",
            f"P ≈ {successes} / {trials} = {probability:.6f}",
            f"95% confidence: ± {margin:.6f}",
        ],
        details={
            "probability": probability,
            "successes": successes,
            "trials": trials,
            "confidence_interval": {
                "margin": margin,
                "level": 0.95,
                "lower": max(0.0, probability - margin),
                "upper": min(1.0, probability + margin),
            },
        },
    )


_OPERATIONS: Dict[str, Callable[..., SolverResult]] = {
    "newton_raphson": newton_raphson,
    "bisection": bisection_method,
    "simpsons_rule": simpsons_rule,
    "trapezoidal_rule": trapezoidal_rule,
    "eulers_method": eulers_method,
    "numerical_derivative": numerical_derivative,
    "monte_carlo": monte_carlo,
}

_CALLABLE_ARGUMENTS = frozenset({"f", "f_prime", "experiment"})


class NumericalCapability(MathCapability):
    """Iterative numerical methods over caller-supplied functions."""

    @property
    def name(self) -> str:
        return "numerical"

    @property
    def description(self) -> str:
        return "Root finding, quadrature, ODE stepping, differentiation and Monte Carlo"

    def __init__(self):
        """Initialize the numerical capability."""
        logger.info("NumericalCapability initialized")

    @log_execution_time
    def handle(self, operation: str, arguments: Dict[str, Any]) -> SolverResult:
        """Route an operation to the matching numerical method."""
        func = _OPERATIONS.get(operation)
        if func is None:
            raise InvalidInputError(
                f"Unknown operation: '{operation}'. Supported: {sorted(_OPERATIONS)}"
            )

        signature = inspect.signature(func)
        required = [
            name for name, param in signature.parameters.items()
            if param.default is inspect.Parameter.empty
        ]
        require_arguments(arguments, *required)

        try:
            signature.bind(**arguments)
        except TypeError as e:
            raise InvalidInputError(f"Invalid arguments for '{operation}': {e}") from e

        for name in _CALLABLE_ARGUMENTS.intersection(arguments):
            if not callable(arguments[name]):
                raise InvalidInputError(f"Argument '{name}' must be callable")

        return func(**arguments)

    def list_operations(self) -> Dict[str, List[str]]:
        """List all supported operations by category."""
        return {
            "root_finding": ["newton_raphson", "bisection"],
            "integration": ["simpsons_rule", "trapezoidal_rule"],
            "differential_equations": ["eulers_method"],
            "differentiation": ["numerical_derivative"],
            "probability": ["monte_carlo"],
        }
