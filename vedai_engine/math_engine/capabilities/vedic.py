"""Vedic Mathematics Capability.

Mental-math sutras for squaring, cubing, multiplication and division.
Each algorithm is chosen from numeric properties of its operands and
checks its own answer against plain arithmetic before returning.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Dict, List, Optional, Tuple, Union

from vedai_engine.exceptions import InvalidInputError
from vedai_engine.logger import session_logger as logger
from vedai_engine.logger.decorators import log_execution_time
from vedai_engine.math_engine.base import MathCapability, SolverResult, require_arguments
from vedai_engine.math_engine.classifier import VedicOperation

Number = Union[int, float]

NIKHILAM_BASES = (10, 100, 1000)
NIKHILAM_THRESHOLD = 0.2

# Keyword arguments each operation takes through the capability interface
OPERATION_ARGUMENTS: Dict[VedicOperation, Tuple[str, ...]] = {
    VedicOperation.SQUARE: ("n",),
    VedicOperation.CUBE: ("n",),
    VedicOperation.MULTIPLY: ("a", "b"),
    VedicOperation.DIVIDE: ("dividend", "divisor"),
}


def _whole(n: Number) -> Optional[int]:
    """Return ``n`` as an int when it is a non-negative whole number, else None."""
    if isinstance(n, bool) or not isinstance(n, numbers.Real):
        return None
    if isinstance(n, numbers.Integral):
        return int(n) if n >= 0 else None
    value = float(n)
    if math.isfinite(value) and value >= 0 and value.is_integer():
        return int(value)
    return None


def _two_digits(n: Number) -> Optional[Tuple[int, int]]:
    """Split a two-digit whole number into (tens, units)."""
    whole = _whole(n)
    if whole is None or not 10 <= whole <= 99:
        return None
    return divmod(whole, 10)


def _nikhilam_square(n: int, base: int, original: Number) -> SolverResult:
    deviation = n - base
    left_part = n + deviation
    right_part = deviation * deviation
    result = left_part * base + right_part

    steps = [
        f"Using Nikhilam Sutra (base {base})",
        f"Number: {n}, Base: {base}, Deviation: {deviation}",
        f"Left part: {n} + ({deviation}) = {left_part}",
        f"Right part: ({deviation})² = {right_part}",
        f"Result: {left_part} × {base} + {right_part} = {result}",
    ]
    return SolverResult(
        method="nikhilam_sutra",
        result=result,
        steps=steps,
        verified=result == original * original,
        details={
            "base": base,
            "deviation": deviation,
            "left_part": left_part,
            "right_part": right_part,
            "original_number": original,
        },
    )


def _ekadhikena_square(n: int, original: Number) -> SolverResult:
    prefix = n // 10
    left_part = prefix * (prefix + 1)
    right_part = 25
    result = left_part * 100 + right_part

    steps = [
        "Using Ekadhikena Purvena Sutra (numbers ending in 5)",
        f"Number: {n} = {prefix}5",
        f"Left part: {prefix} × ({prefix} + 1) = {prefix} × {prefix + 1} = {left_part}",
        "Right part: 25 (always for numbers ending in 5)",
        f"Result: {left_part}25 = {result}",
    ]
    return SolverResult(
        method="ekadhikena_purvena",
        result=result,
        steps=steps,
        verified=result == original * original,
        details={
            "prefix": prefix,
            "left_part": left_part,
            "right_part": right_part,
            "original_number": original,
        },
    )


def _duplex_square(tens: int, units: int, original: Number) -> SolverResult:
    d1 = tens * tens
    d2 = 2 * tens * units
    d3 = units * units
    result = d1 * 100 + d2 * 10 + d3

    steps = [
        "Using Duplex Method (2-digit numbers)",
        f"Number: {tens * 10 + units} = {tens}{units}",
        f"Step 1: {tens}² = {d1}",
        f"Step 2: 2 × {tens} × {units} = {d2}",
        f"Step 3: {units}² = {d3}",
        f"Result: {d1} × 100 + {d2} × 10 + {d3} = {result}",
    ]
    return SolverResult(
        method="duplex",
        result=result,
        steps=steps,
        verified=result == original * original,
        details={"duplexes": [d1, d2, d3], "original_number": original},
    )


def vedic_square(n: Number) -> SolverResult:
    """Square ``n`` with the first applicable sutra.

    Priority: Nikhilam (near 10/100/1000), Ekadhikena Purvena (ends in 5),
    Duplex (two digits), then plain multiplication. The sutras apply to
    non-negative whole numbers only.
    """
    whole = _whole(n)
    if whole is not None:
        for base in NIKHILAM_BASES:
            if abs(whole - base) < NIKHILAM_THRESHOLD * base:
                return _nikhilam_square(whole, base, n)

        if whole % 10 == 5:
            return _ekadhikena_square(whole, n)

        digits = _two_digits(whole)
        if digits is not None:
            return _duplex_square(digits[0], digits[1], n)

    result = n * n
    return SolverResult(
        method="standard",
        result=result,
        steps=[f"{n} × {n} = {result}"],
        verified=result == n * n,
        details={"original_number": n},
    )


def vedic_multiply(a: Number, b: Number) -> SolverResult:
    """Multiply with Urdhva Tiryagbhyam when both operands have two digits."""
    a_digits = _two_digits(a)
    b_digits = _two_digits(b)

    if a_digits is not None and b_digits is not None:
        a1, a0 = a_digits
        b1, b0 = b_digits

        right = a0 * b0
        cross = a0 * b1 + a1 * b0
        left = a1 * b1
        result = left * 100 + cross * 10 + right

        steps = [
            "Using Urdhva Tiryagbhyam (Vertically and Crosswise)",
            f"Numbers: {a} = {a1}{a0}, {b} = {b1}{b0}",
            f"Step 1 (Right): {a0} × {b0} = {right}",
            f"Step 2 (Cross): ({a0} × {b1}) + ({a1} × {b0}) = {cross}",
            f"Step 3 (Left): {a1} × {b1} = {left}",
            f"Result: {left} × 100 + {cross} × 10 + {right} = {result}",
        ]
        return SolverResult(
            method="urdhva_tiryagbhyam",
            result=result,
            steps=steps,
            verified=result == a * b,
            details={"right": right, "cross": cross, "left": left},
        )

    result = a * b
    return SolverResult(
        method="standard",
        result=result,
        steps=[f"{a} × {b} = {result}"],
        verified=result == a * b,
    )


def vedic_cube(n: Number) -> SolverResult:
    """Cube ``n``, expanding (10a+5)³ term by term for whole numbers ending in 5."""
    whole = _whole(n)

    if whole is not None and whole % 10 == 5:
        a = whole // 10
        term1 = 1000 * a ** 3
        term2 = 1500 * a ** 2
        term3 = 750 * a
        term4 = 125
        result = term1 + term2 + term3 + term4

        steps = [
            "Using Vedic method for cubes ending in 5",
            f"Number: {whole} = {a}5, so (10a + 5)³ = 1000a³ + 1500a² + 750a + 125",
            f"1000a³ = 1000 × {a}³ = {term1}",
            f"1500a² = 1500 × {a}² = {term2}",
            f"750a = 750 × {a} = {term3}",
            "Constant = 125",
            f"Result: {term1} + {term2} + {term3} + {term4} = {result}",
        ]
        return SolverResult(
            method="vedic_cube_5",
            result=result,
            steps=steps,
            verified=result == n * n * n,
            details={"prefix": a, "terms": [term1, term2, term3, term4]},
        )

    result = n * n * n
    return SolverResult(
        method="standard",
        result=result,
        steps=[f"{n}³ = {n} × {n} × {n} = {result}"],
        verified=result == n * n * n,
    )


def vedic_divide(dividend: Number, divisor: Number) -> SolverResult:
    """Floor-divide, reporting quotient and remainder.

    The Dhvajanka (flag) technique is not carried out digit by digit; the
    quotient comes from ordinary division.
    """
    if divisor == 0:
        return SolverResult.failure(
            "dhvajanka",
            "Division by zero",
            dividend=dividend,
            divisor=divisor,
        )

    quotient = dividend // divisor
    remainder = dividend % divisor

    return SolverResult(
        method="dhvajanka",
        result=quotient,
        steps=[
            f"{dividend} ÷ {divisor}",
            f"Quotient: {quotient}",
            f"Remainder: {remainder}",
        ],
        verified=divisor * quotient + remainder == dividend,
        details={"quotient": quotient, "remainder": remainder},
    )


_SOLVERS = {
    VedicOperation.SQUARE: vedic_square,
    VedicOperation.CUBE: vedic_cube,
    VedicOperation.MULTIPLY: vedic_multiply,
    VedicOperation.DIVIDE: vedic_divide,
}


def solve_vedic_problem(problem_type: Union[VedicOperation, str], *operands: Number) -> SolverResult:
    """Dispatch a Vedic problem by type.

    An unrecognized type is reported as an unsuccessful result rather than raised.
    """
    try:
        operation = VedicOperation(problem_type)
    except ValueError:
        return SolverResult.failure(
            "unknown",
            "Unknown Vedic problem type",
            problem_type=str(problem_type),
        )

    expected = len(OPERATION_ARGUMENTS[operation])
    if len(operands) != expected:
        raise InvalidInputError(
            f"Vedic '{operation.value}' takes {expected} operand(s), got {len(operands)}",
            details={"operation": operation.value, "operands": list(operands)},
        )

    return _SOLVERS[operation](*operands)


def _check_operand(name: str, value: Any) -> Number:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidInputError(f"Operand '{name}' must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise InvalidInputError(f"Operand '{name}' must be finite, got {value}")
    return value


class VedicCapability(MathCapability):
    """Vedic sutra arithmetic with self-verification."""

    @property
    def name(self) -> str:
        return "vedic"

    @property
    def description(self) -> str:
        return "Vedic mental-math sutras for squares, cubes, products and quotients"

    def __init__(self):
        """Initialize the Vedic capability."""
        logger.info("VedicCapability initialized")

    @log_execution_time
    def handle(self, operation: str, arguments: Dict[str, Any]) -> SolverResult:
        """Route an operation to the matching sutra."""
        try:
            op = VedicOperation(operation)
        except ValueError:
            raise InvalidInputError(
                f"Unknown operation: '{operation}'. "
                f"Supported: {sorted(o.value for o in VedicOperation)}"
            ) from None

        names = OPERATION_ARGUMENTS[op]
        operands = [
            _check_operand(name, value)
            for name, value in zip(names, require_arguments(arguments, *names))
        ]

        result = solve_vedic_problem(op, *operands)
        if result.success and not result.verified:
            logger.warning(
                "Vedic result failed verification",
                operation=op.value,
                operands=operands,
                method=result.method,
            )
        return result

    def list_operations(self) -> Dict[str, List[str]]:
        """List all supported operations by category."""
        return {
            "arithmetic": [op.value for op in VedicOperation],
            "sutras": [
                "nikhilam_sutra",
                "ekadhikena_purvena",
                "duplex",
                "urdhva_tiryagbhyam",
                "vedic_cube_5",
                "dhvajanka",
            ],
        }
