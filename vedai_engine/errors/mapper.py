"""Error response mapping for engine callers.

Converts structured EngineError exceptions into standardized error responses
with machine-readable error codes and recovery strategies.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional

from pydantic import ValidationError as PydanticValidationError

from vedai_engine.exceptions import EngineError


@dataclass
class ErrorResponse:
    """Structured error response for engine consumers."""

    error_code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    recovery_strategy: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "error",
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "recovery_strategy": self.recovery_strategy,
        }


# Recovery strategy templates for common error types
RECOVERY_STRATEGIES: Dict[str, str] = {
    "VALIDATION_ERROR": "Review the error message and adjust the request parameters accordingly.",
    "OPTIONS_VALIDATION_ERROR": "Check the solve options. 'variable' must be a single identifier such as 'x'.",
    "CONFIGURATION_ERROR": "Check the VEDAI_ENGINE_* environment variables and restart the process.",
    "INVALID_INPUT": "Check the input parameters. Ensure operands are finite numbers and required arguments are present.",
    "COMPUTATION_ERROR": "The computation failed. This might be due to numerical instability, overflow, or a non-numeric result.",
    "UNSUPPORTED_PROBLEM": "The problem shape is beyond the deterministic solvers. Escalate to a text-generation solver.",
    "MATH_ERROR": "A general math error occurred. Check input values for domain errors (e.g., division by zero).",
}


def get_recovery_strategy(error_code: str) -> str:
    """Get recovery strategy for an error code.

    Args:
        error_code: The error code

    Returns:
        Recovery strategy string
    """
    return RECOVERY_STRATEGIES.get(
        error_code, "Review the error message, adjust the request, and try again."
    )


def map_exception_to_response(error: Exception) -> ErrorResponse:
    """Convert an exception to a structured ErrorResponse.

    Args:
        error: The exception to convert

    Returns:
        ErrorResponse with structured error information
    """
    if isinstance(error, EngineError):
        return ErrorResponse(
            error_code=error.code,
            message=error.message,
            details=error.details if error.details else None,
            recovery_strategy=get_recovery_strategy(error.code),
        )

    if isinstance(error, PydanticValidationError):
        errors = error.errors(include_url=False)
        return ErrorResponse(
            error_code="OPTIONS_VALIDATION_ERROR",
            message=f"Validation failed: {len(errors)} error(s)",
            details={"errors": [
                {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]}
                for e in errors
            ]},
            recovery_strategy=get_recovery_strategy("OPTIONS_VALIDATION_ERROR"),
        )

    # Generic exceptions - wrap with minimal structure
    return ErrorResponse(
        error_code="INTERNAL_ERROR",
        message=str(error),
        details={"exception_type": type(error).__name__},
        recovery_strategy="An unexpected error occurred. Please report this issue if it persists.",
    )
