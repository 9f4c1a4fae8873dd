"""Custom exceptions for the VedAI engine.

All exceptions include a code, a message and details designed for
structured error responses, so a caller can decide whether to escalate.
"""

from vedai_engine.exceptions.base import (
    EngineError,
    ValidationError,
    ConfigurationError,
    MathError,
    InvalidInputError,
    ComputationError,
    UnsupportedProblemError,
)

__all__ = [
    "EngineError",
    "ValidationError",
    "ConfigurationError",
    "MathError",
    "InvalidInputError",
    "ComputationError",
    "UnsupportedProblemError",
]
