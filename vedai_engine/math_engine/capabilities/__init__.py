"""Math Engine Capabilities Package.

This package contains the solver modules: Vedic sutras, symbolic algebra
and numerical methods. Each exposes pure solver functions plus a
capability class the engine registers.
"""

from vedai_engine.math_engine.capabilities.vedic import VedicCapability
from vedai_engine.math_engine.capabilities.symbolic import SymbolicCapability
from vedai_engine.math_engine.capabilities.numerical import NumericalCapability

__all__ = ["VedicCapability", "SymbolicCapability", "NumericalCapability"]
