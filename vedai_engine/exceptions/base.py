"""Exception classes for the VedAI engine.

Every exception carries a machine-readable code, a message and optional
details so callers can map it into a structured error response.
"""

from typing import Any, Dict, Optional


class EngineError(Exception):
    """Base for all engine errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(EngineError):
    """Raised when a request fails validation before reaching a solver."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="VALIDATION_ERROR", message=message, details=details)


class ConfigurationError(EngineError):
    """Raised when environment configuration is invalid."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="CONFIGURATION_ERROR", message=message, details=details)


class MathError(EngineError):
    """Base for all math engine errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="MATH_ERROR", message=message, details=details)


class InvalidInputError(MathError):
    """Raised when input parameters are invalid (wrong type, arity, or value)."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        EngineError.__init__(self, code="INVALID_INPUT", message=message, details=details)


class ComputationError(MathError):
    """Raised when a computation fails (overflow, non-numeric result, etc.)."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        EngineError.__init__(self, code="COMPUTATION_ERROR", message=message, details=details)


class UnsupportedProblemError(MathError):
    """Raised when a problem shape is beyond what the solvers handle."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        EngineError.__init__(self, code="UNSUPPORTED_PROBLEM", message=message, details=details)
