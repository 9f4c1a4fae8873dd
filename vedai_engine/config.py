"""Application configuration

Settings are read from environment variables carrying the VEDAI_ENGINE
prefix and cached for the lifetime of the process.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from vedai_engine.exceptions import ConfigurationError

# Project-specific prefix
_ENV_PREFIX = "VEDAI_ENGINE"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    """Engine settings resolved from the environment."""

    log_level: int = logging.INFO
    log_file: Optional[str] = None
    log_json: bool = False
    default_variable: str = "x"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from an environment mapping (defaults to os.environ)."""
        env = os.environ if environ is None else environ

        level_name = env.get(f"{_ENV_PREFIX}_LOG_LEVEL", "INFO").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ConfigurationError(
                f"Unknown log level: '{level_name}'",
                details={"variable": f"{_ENV_PREFIX}_LOG_LEVEL"},
            )

        json_raw = env.get(f"{_ENV_PREFIX}_LOG_JSON", "false").strip().lower()
        if json_raw in _TRUE_VALUES:
            log_json = True
        elif json_raw in _FALSE_VALUES:
            log_json = False
        else:
            raise ConfigurationError(
                f"Invalid boolean value: '{json_raw}'",
                details={"variable": f"{_ENV_PREFIX}_LOG_JSON"},
            )

        variable = env.get(f"{_ENV_PREFIX}_DEFAULT_VARIABLE", "x").strip()
        if not variable.isidentifier():
            raise ConfigurationError(
                f"Default variable must be an identifier, got '{variable}'",
                details={"variable": f"{_ENV_PREFIX}_DEFAULT_VARIABLE"},
            )

        return cls(
            log_level=level,
            log_file=env.get(f"{_ENV_PREFIX}_LOG_FILE") or None,
            log_json=log_json,
            default_variable=variable,
        )


_settings: Optional[Settings] = None


def get_settings(reload: bool = False) -> Settings:
    """Get settings with VEDAI_ENGINE prefix"""
    global _settings
    if _settings is None or reload:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
]
