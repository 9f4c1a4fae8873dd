"""Symbolic Algebra Capability.

Equation solving, simplification, differentiation, evaluation and
factoring on top of SymPy. Linear equations are solved by a fixed-grid
scan rather than in closed form; quadratics use the quadratic formula on
the coefficients of the parsed equation.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set

import numpy as np
import sympy as sp
from sympy.parsing.sympy_parser import (
    parse_expr,
    standard_transformations,
    implicit_multiplication_application,
    convert_xor,
)

from vedai_engine.exceptions import InvalidInputError, MathError
from vedai_engine.logger import session_logger as logger
from vedai_engine.logger.decorators import log_execution_time
from vedai_engine.math_engine.base import MathCapability, SolverResult, require_arguments

# Implicit multiplication ("2x") and ^ as power
TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
)

_FUNCTION_ALIASES = {"ln": sp.log}
FUNCTION_NAMES = frozenset({"sin", "cos", "tan", "exp", "log", "ln", "sqrt"})
CONSTANT_NAMES = frozenset({"pi"})

MAX_EXPRESSION_LENGTH = 500
MAX_EXPONENT = 100
MAX_POWER_DIGITS = 1000

LINEAR_SCAN_MIN = -100.0
LINEAR_SCAN_MAX = 100.0
LINEAR_SCAN_STEP = 0.1
LINEAR_TOLERANCE = 0.01

# Numbers, operators, parentheses and names; a lone "." is not a token
_TOKEN_RE = re.compile(r"\s+|[0-9]+(?:\.[0-9]*)?|\.[0-9]+|\*\*|[+\-*/^()]|[A-Za-z][A-Za-z0-9]*")
_NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9]*")


def _symbol_names(text: str, variables: FrozenSet[str]) -> Set[str]:
    """Check ``text`` against the expression grammar and return the symbol names it uses.

    Allowed names are the function names, ``pi``, the bound
    ``variables`` and single letters.
    """
    if len(text) > MAX_EXPRESSION_LENGTH:
        raise InvalidInputError(
            f"Expression longer than {MAX_EXPRESSION_LENGTH} characters",
            details={"length": len(text)},
        )

    names: Set[str] = set()
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise InvalidInputError(
                f"Unsupported character {text[pos]!r} in expression",
                details={"position": pos},
            )
        token = match.group(0)
        if token[0].isalpha() and token not in FUNCTION_NAMES | CONSTANT_NAMES:
            if token not in variables and len(token) != 1:
                raise InvalidInputError(f"Unknown name '{token}' in expression")
            names.add(token)
        pos = match.end()
    return names


def _magnitude(value: sp.Expr) -> float:
    try:
        return abs(complex(sp.N(value)))
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Expression has no finite value: {value}") from e


def _check_powers(expr: sp.Expr) -> None:
    """Reject numeric exponents above MAX_EXPONENT and powers too large to evaluate.

    Runs on the unevaluated tree innermost first, so each exponent is
    evaluated only after its own powers have been bounded.
    """
    for node in sp.postorder_traversal(expr):
        if not isinstance(node, sp.Pow) or node.exp.free_symbols:
            continue
        exponent = _magnitude(node.exp)
        if exponent > MAX_EXPONENT:
            raise InvalidInputError(
                f"Exponent too large (limit {MAX_EXPONENT})",
                details={"power": str(node)[:100]},
            )
        if not node.base.free_symbols:
            base = _magnitude(node.base)
            if base > 1 and exponent * math.log10(base) > MAX_POWER_DIGITS:
                raise InvalidInputError(
                    f"Power too large to evaluate (over {MAX_POWER_DIGITS} digits)",
                    details={"power": str(node)[:100]},
                )


def _parse(text: str, variables: Iterable[str] = ()) -> sp.Expr:
    """Parse a math expression, binding ``variables`` as plain symbols.

    The text is checked token by token first, so only arithmetic, the
    known function names and symbol names ever reach the parser.
    """
    bound = frozenset(str(name) for name in variables)
    for name in bound:
        if not _NAME_RE.fullmatch(name):
            raise InvalidInputError(f"Invalid variable name: '{name}'")

    if not text or not text.strip():
        raise InvalidInputError("Empty expression")

    local_dict: Dict[str, Any] = dict(_FUNCTION_ALIASES)
    for name in _symbol_names(text, bound) | bound:
        local_dict[name] = sp.Symbol(name)

    try:
        unevaluated = parse_expr(text, local_dict=local_dict, transformations=TRANSFORMATIONS, evaluate=False)
    except Exception as e:
        raise InvalidInputError(f"Invalid mathematical expression: '{text}' ({e})") from e

    if not isinstance(unevaluated, sp.Expr):
        raise InvalidInputError(f"Not an algebraic expression: '{text}'")
    _check_powers(unevaluated)

    try:
        parsed = parse_expr(text, local_dict=local_dict, transformations=TRANSFORMATIONS, evaluate=True)
    except Exception as e:
        raise InvalidInputError(f"Invalid mathematical expression: '{text}' ({e})") from e

    if not isinstance(parsed, sp.Expr):
        raise InvalidInputError(f"Not an algebraic expression: '{text}'")
    return parsed


def _has_exponent(expr: sp.Expr, var: sp.Symbol) -> bool:
    """True if ``var`` appears raised to a power above one, or in an exponent."""
    for power in expr.atoms(sp.Pow):
        if power.exp.has(var):
            return True
        if power.base.has(var) and power.exp.is_number and power.exp.is_real and bool(power.exp > 1):
            return True
    return False


def _solve_linear(expr: sp.Expr, var: sp.Symbol) -> SolverResult:
    """Scan [-100, 100] at 0.1 resolution for the first |f(x)| < 0.01."""
    variable = str(var)
    others = sorted(str(s) for s in expr.free_symbols - {var})
    if others:
        return SolverResult.failure(
            "linear",
            f"Equation has unknowns other than {variable}: {', '.join(others)}",
            expression=str(expr),
        )

    count = int(round((LINEAR_SCAN_MAX - LINEAR_SCAN_MIN) / LINEAR_SCAN_STEP)) + 1
    candidates = np.linspace(LINEAR_SCAN_MIN, LINEAR_SCAN_MAX, count)
    f = sp.lambdify(var, expr, modules="numpy")

    with np.errstate(all="ignore"):
        values = np.broadcast_to(np.asarray(f(candidates)), candidates.shape)
        residuals = np.abs(values)
    hits = np.flatnonzero(np.isfinite(residuals) & (residuals < LINEAR_TOLERANCE))

    steps = [
        f"Rearrange equation to standard form: {expr} = 0",
        f"Scan {variable} from {LINEAR_SCAN_MIN:g} to {LINEAR_SCAN_MAX:g} in steps of {LINEAR_SCAN_STEP:g}",
    ]

    if hits.size == 0:
        return SolverResult.failure(
            "linear",
            "No solution found in range",
            steps=steps,
            expression=str(expr),
        )

    solution = round(float(candidates[hits[0]]), 2) + 0.0
    steps.append(f"Solution: {variable} = {solution}")

    with np.errstate(all="ignore"):
        residual = float(np.abs(np.asarray(f(solution))))

    return SolverResult(
        method="linear",
        result=[solution],
        steps=steps,
        verified=bool(residual < LINEAR_TOLERANCE),
        details={
            "solutions": [solution],
            "expression": str(expr),
            "variable": variable,
        },
    )


def _is_root(a: float, b: float, c: float, root: complex) -> bool:
    scale = max(1.0, abs(a), abs(b), abs(c))
    return abs(a * root * root + b * root + c) <= 1e-9 * scale * max(1.0, abs(root)) ** 2


def _solve_quadratic(expr: sp.Expr, var: sp.Symbol) -> SolverResult:
    """Apply the quadratic formula to a x² + b x + c = 0."""
    coefficients = sp.Poly(expr, var).all_coeffs()
    if not all(coef.is_number and coef.is_real for coef in coefficients):
        return SolverResult.failure(
            "quadratic_formula",
            "Quadratic coefficients must be real numbers",
            expression=str(expr),
        )
    a, b, c = (float(coef) for coef in coefficients)

    discriminant = b * b - 4 * a * c
    steps = [
        f"Identify a={a:g}, b={b:g}, c={c:g}",
        f"Calculate discriminant: b²-4ac = {discriminant:g}",
    ]

    if discriminant < 0:
        real = -b / (2 * a)
        imaginary = math.sqrt(-discriminant) / (2 * a)
        steps.append("Complex solutions (discriminant < 0)")
        steps.append(f"{var} = {round(real, 3)} ± {round(abs(imaginary), 3)}i")
        return SolverResult(
            method="quadratic_formula",
            result=f"{round(real, 3)} ± {round(abs(imaginary), 3)}i",
            steps=steps,
            verified=_is_root(a, b, c, complex(real, imaginary)),
            details={
                "solutions": "complex",
                "real": round(real, 3),
                "imaginary": round(abs(imaginary), 3),
                "coefficients": {"a": a, "b": b, "c": c},
                "discriminant": discriminant,
            },
        )

    root = math.sqrt(discriminant)
    x1 = (-b + root) / (2 * a)
    x2 = (-b - root) / (2 * a)
    solutions = [round(x1, 3) + 0.0, round(x2, 3) + 0.0]

    steps.extend([
        "Apply quadratic formula: x = (-b ± √Δ) / 2a",
        f"x₁ = {solutions[0]}",
        f"x₂ = {solutions[1]}",
    ])
    return SolverResult(
        method="quadratic_formula",
        result=solutions,
        steps=steps,
        verified=_is_root(a, b, c, x1) and _is_root(a, b, c, x2),
        details={
            "solutions": solutions,
            "variable": str(var),
            "coefficients": {"a": a, "b": b, "c": c},
            "discriminant": discriminant,
        },
    )


def solve_algebraic_equation(equation: str, variable: str = "x") -> SolverResult:
    """Solve ``left = right`` for ``variable``.

    Equations without a power of the unknown go to the linear grid scan,
    degree-two polynomials to the quadratic formula; anything else is
    reported as unsupported with the rearranged expression attached.
    """
    parts = [part.strip() for part in (equation or "").split("=")]
    if len(parts) != 2:
        return SolverResult.failure("symbolic_equation", "Invalid equation format", equation=equation)

    try:
        left = _parse(parts[0], (variable,))
        right = _parse(parts[1], (variable,))
    except MathError as e:
        return SolverResult.failure("symbolic_equation", str(e), equation=equation)

    var = sp.Symbol(variable)
    # Expanded so a simplified product such as (x - 2)*(x - 3) still shows its powers
    expr = sp.expand(sp.simplify(left - right))

    logger.debug("Equation rearranged", equation=equation, expression=str(expr))

    if not _has_exponent(expr, var):
        return _solve_linear(expr, var)

    if expr.is_polynomial(var) and sp.degree(expr, var) == 2:
        return _solve_quadratic(expr, var)

    return SolverResult.failure(
        "symbolic_equation",
        "Complex equations require symbolic solver",
        expression=str(expr),
    )


def simplify_expression(expression: str) -> SolverResult:
    """Simplify an expression and confirm the result is equivalent."""
    try:
        parsed = _parse(expression)
    except MathError as e:
        return SolverResult.failure("simplification", str(e), original=expression)

    simplified = sp.simplify(parsed)
    return SolverResult(
        method="simplification",
        result=str(simplified),
        steps=[
            f"Original: {expression}",
            f"Simplified: {simplified}",
        ],
        verified=sp.simplify(parsed - simplified) == 0,
        details={"original": expression, "simplified": str(simplified)},
    )


def calculate_derivative(expression: str, variable: str = "x") -> SolverResult:
    """Differentiate ``expression`` with respect to ``variable``."""
    try:
        parsed = _parse(expression, (variable,))
    except MathError as e:
        return SolverResult.failure("differentiation", str(e), original=expression, variable=variable)

    derivative = sp.diff(parsed, sp.Symbol(variable))
    return SolverResult(
        method="differentiation",
        result=str(derivative),
        steps=[
            f"f({variable}) = {expression}",
            f"f'({variable}) = {derivative}",
        ],
        details={
            "original": expression,
            "derivative": str(derivative),
            "variable": variable,
        },
    )


def evaluate_expression(expression: str, bindings: Optional[Mapping[str, Any]] = None) -> SolverResult:
    """Evaluate ``expression`` numerically with ``bindings`` substituted."""
    bindings = dict(bindings or {})
    try:
        parsed = _parse(expression, list(bindings))
    except MathError as e:
        return SolverResult.failure("evaluation", str(e), expression=expression, variables=bindings)

    substituted = parsed.subs({sp.Symbol(name): value for name, value in bindings.items()})
    value = sp.N(substituted)

    if value.free_symbols:
        unbound = sorted(str(s) for s in value.free_symbols)
        return SolverResult.failure(
            "evaluation",
            f"Unbound variables: {', '.join(unbound)}",
            expression=expression,
            variables=bindings,
        )
    if value.is_real is not True:
        return SolverResult.failure(
            "evaluation",
            "Expression does not evaluate to a real number",
            expression=expression,
            variables=bindings,
            value=str(value),
        )

    result = float(value)
    return SolverResult(
        method="evaluation",
        result=result,
        steps=[
            f"Expression: {expression}",
            f"With {bindings}: {result}",
        ],
        details={"expression": expression, "variables": bindings},
    )


def factor_polynomial(expression: str) -> SolverResult:
    """Factor a polynomial over the rationals."""
    try:
        parsed = _parse(expression)
    except MathError as e:
        return SolverResult.failure("factorization", str(e), original=expression)

    factored = sp.factor(parsed)
    return SolverResult(
        method="factorization",
        result=str(factored),
        steps=[
            f"Original: {expression}",
            f"Factored: {factored}",
        ],
        verified=sp.expand(factored - parsed) == 0,
        details={"original": expression, "factored": str(factored)},
    )


class SymbolicCapability(MathCapability):
    """Symbolic algebra and calculus on parsed expressions."""

    @property
    def name(self) -> str:
        return "symbolic"

    @property
    def description(self) -> str:
        return "Equation solving, simplification, differentiation, evaluation and factoring"

    def __init__(self):
        """Initialize the symbolic capability."""
        logger.info("SymbolicCapability initialized")

    @log_execution_time
    def handle(self, operation: str, arguments: Dict[str, Any]) -> SolverResult:
        """Route an operation to the matching symbolic routine."""
        if operation == "solve_equation":
            (equation,) = require_arguments(arguments, "equation")
            return solve_algebraic_equation(equation, arguments.get("variable", "x"))
        elif operation == "simplify":
            (expression,) = require_arguments(arguments, "expression")
            return simplify_expression(expression)
        elif operation == "derivative":
            (expression,) = require_arguments(arguments, "expression")
            return calculate_derivative(expression, arguments.get("variable", "x"))
        elif operation == "evaluate":
            (expression,) = require_arguments(arguments, "expression")
            return evaluate_expression(expression, arguments.get("bindings"))
        elif operation == "factor":
            (expression,) = require_arguments(arguments, "expression")
            return factor_polynomial(expression)
        else:
            raise InvalidInputError(f"Unknown operation: '{operation}'")

    def list_operations(self) -> Dict[str, List[str]]:
        """List all supported operations by category."""
        return {
            "equations": ["solve_equation"],
            "expressions": ["simplify", "derivative", "evaluate", "factor"],
        }
