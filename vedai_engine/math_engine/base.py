"""Base classes for math engine capabilities.

Every solver returns a SolverResult. Capability classes wrap a solver
module's pure functions behind a uniform name-based dispatch so the engine
can register and enumerate them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from vedai_engine.exceptions import InvalidInputError


@dataclass
class SolverResult:
    """Result of a single solver invocation.

    ``steps`` is the algorithm's trace in execution order. Solver-specific
    fields (root, iterations, intervals, points, ...) live in ``details``
    and are flattened into the top level by ``to_dict``.
    """

    method: str
    result: Any = None
    steps: List[str] = field(default_factory=list)
    verified: bool = False
    success: bool = True
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(
        cls,
        method: str,
        error: str,
        steps: Optional[List[str]] = None,
        **details: Any,
    ) -> SolverResult:
        """Build an unsuccessful result, keeping any partial trace."""
        return cls(
            method=method,
            steps=list(steps or []),
            success=False,
            error=error,
            details=details,
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Read a solver-specific field."""
        return self.details.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: Dict[str, Any] = {
            "method": self.method,
            "result": self.result,
            "steps": list(self.steps),
            "verified": self.verified,
            "success": self.success,
        }
        if self.error is not None:
            data["error"] = self.error
        for key, value in self.details.items():
            data.setdefault(key, value)
        return data


class MathCapability(ABC):
    """Base class for all math engine capabilities.

    Each capability module (vedic, symbolic, numerical) should:
    1. Inherit from this class
    2. Implement list_operations() to declare what it can do
    3. Implement handle() to dispatch an operation to its solver function
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this capability (e.g., 'vedic', 'numerical')."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of this capability."""
        pass

    @abstractmethod
    def handle(self, operation: str, arguments: Dict[str, Any]) -> SolverResult:
        """Handle an operation invocation.

        Args:
            operation: Name of the operation being called
            arguments: Keyword arguments for the solver function

        Returns:
            SolverResult from the solver

        Raises:
            InvalidInputError: If the operation is unknown or arguments are invalid
        """
        pass

    def list_operations(self) -> Dict[str, List[str]]:
        """List operations supported by this capability.

        Override this method to provide categorized operation lists.

        Returns:
            Dictionary mapping category names to lists of operation names
        """
        return {}


def require_arguments(arguments: Dict[str, Any], *names: str) -> List[Any]:
    """Return the named arguments in order, raising if any is missing."""
    missing = [n for n in names if arguments.get(n) is None]
    if missing:
        raise InvalidInputError(
            f"Missing required argument(s): {', '.join(missing)}",
            details={"missing": missing},
        )
    return [arguments[n] for n in names]
