"""Markdown summary of a solver result for display layers."""

from __future__ import annotations

from typing import List, Optional

from vedai_engine.math_engine.base import SolverResult


def format_solution_summary(solution: Optional[SolverResult]) -> Optional[str]:
    """Render method, numbered steps, answer and verification as markdown.

    Returns None when there is no solution to render.
    """
    if solution is None:
        return None

    parts: List[str] = []

    if solution.method:
        parts.append(f"**Method Used:** {solution.method.replace('_', ' ').upper()}")

    if solution.steps:
        parts.append("\n**Step-by-Step Solution:**")
        parts.extend(f"{i}. {step}" for i, step in enumerate(solution.steps, start=1))

    if not solution.success:
        parts.append(f"\n**Error:** {solution.error}")
        return "\n".join(parts)

    solutions = solution.get("solutions")
    if isinstance(solutions, list):
        variable = solution.get("variable", "x")
        parts.append(f"\n**Solutions:** {variable} = {', '.join(str(s) for s in solutions)}")
    elif solution.result is not None:
        parts.append(f"\n**Answer:** {solution.result}")

    if solution.verified:
        parts.append("\n✓ Solution verified: Correct")
    elif solution.result is not None:
        parts.append("\n✗ Solution not verified: Check required")

    return "\n".join(parts)
