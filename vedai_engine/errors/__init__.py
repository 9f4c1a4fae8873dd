"""Error handling utilities for vedai-engine."""

from vedai_engine.errors.mapper import (
    ErrorResponse,
    map_exception_to_response,
    get_recovery_strategy,
)

__all__ = [
    "ErrorResponse",
    "map_exception_to_response",
    "get_recovery_strategy",
]
