"""Logger module for vedai-engine

This module provides a structured logging interface that allows callers to
drop in their own logger implementations.

Usage:
    from vedai_engine.logger import session_logger

    session_logger.info("Question classified", domain="calculus")

    # Or implement your own
    class MyCustomLogger(Logger):
        def info(self, message: str, **kwargs):
            # Your custom implementation
            pass
"""

from vedai_engine.config import get_settings
from vedai_engine.logger.base import Logger
from vedai_engine.logger.structured_logger import StructuredLogger

_settings = get_settings()

# Shared logger instance
session_logger: Logger = StructuredLogger(
    level=_settings.log_level,
    log_file=_settings.log_file,
    json_format=_settings.log_json,
)

__all__ = [
    "Logger",
    "StructuredLogger",
    "session_logger",
]
