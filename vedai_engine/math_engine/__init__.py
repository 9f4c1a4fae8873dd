"""Math Engine - Question classification and solving.

Classifies natural-language math questions by domain and routes them to
Vedic, symbolic or numerical solvers. Callers use ``solve_math_problem``;
the individual solvers are importable for direct use.
"""

from vedai_engine.math_engine.base import MathCapability, SolverResult
from vedai_engine.math_engine.classifier import (
    Classification,
    Domain,
    VedicOperation,
    VedicPattern,
    classify_math_concept,
)
from vedai_engine.math_engine.engine import (
    EngineResult,
    MathEngine,
    SolveOptions,
    get_engine,
    solve_math_problem,
)
from vedai_engine.math_engine.summary import format_solution_summary

__all__ = [
    "MathCapability",
    "SolverResult",
    "Classification",
    "Domain",
    "VedicOperation",
    "VedicPattern",
    "classify_math_concept",
    "EngineResult",
    "MathEngine",
    "SolveOptions",
    "get_engine",
    "solve_math_problem",
    "format_solution_summary",
]
