"""Pytest configuration and fixtures

Provides shared fixtures for all tests: a fresh engine, the individual
capabilities, and isolation of the cached settings.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from vedai_engine.config import reset_settings  # noqa: E402 - needs sys.path set up first
from vedai_engine.math_engine.capabilities import (  # noqa: E402 - needs sys.path set up first
    NumericalCapability,
    SymbolicCapability,
    VedicCapability,
)
from vedai_engine.math_engine.engine import MathEngine  # noqa: E402 - needs sys.path set up first


@pytest.fixture(scope="function", autouse=True)
def isolated_settings():
    """Start and finish every test with no cached Settings."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def engine():
    """A freshly constructed MathEngine."""
    return MathEngine()


@pytest.fixture
def vedic():
    return VedicCapability()


@pytest.fixture
def symbolic():
    return SymbolicCapability()


@pytest.fixture
def numerical():
    return NumericalCapability()
