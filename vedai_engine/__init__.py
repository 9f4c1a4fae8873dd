"""VedAI engine: classify math questions and solve them with Vedic, symbolic or numerical methods."""

from vedai_engine.math_engine import (
    EngineResult,
    SolverResult,
    classify_math_concept,
    format_solution_summary,
    get_engine,
    solve_math_problem,
)

__version__ = "1.0.0"

__all__ = [
    "EngineResult",
    "SolverResult",
    "classify_math_concept",
    "format_solution_summary",
    "get_engine",
    "solve_math_problem",
]
