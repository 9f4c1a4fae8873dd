"""Math Engine - Facade and router for all mathematical capabilities.

``solve_math_problem`` is the single entry point: it classifies a question,
picks a solver with a fixed priority policy and wraps the outcome in an
EngineResult. It never raises; failures are reported on the result.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vedai_engine.config import get_settings
from vedai_engine.errors import map_exception_to_response
from vedai_engine.exceptions import InvalidInputError
from vedai_engine.logger import session_logger as logger
from vedai_engine.math_engine.base import MathCapability, SolverResult
from vedai_engine.math_engine.capabilities import (
    NumericalCapability,
    SymbolicCapability,
    VedicCapability,
)
from vedai_engine.math_engine.capabilities.numerical import METHOD_NAMES
from vedai_engine.math_engine.capabilities.vedic import OPERATION_ARGUMENTS
from vedai_engine.math_engine.classifier import Classification, Domain, classify_math_concept

SYMBOLIC_DOMAINS = frozenset({Domain.ALGEBRA, Domain.CALCULUS})
NUMERICAL_DOMAINS = frozenset({Domain.CALCULUS, Domain.PROBABILITY})

METHOD_VEDIC = "vedic_math"
METHOD_SYMBOLIC_ALGEBRA = "symbolic_algebra"
METHOD_SYMBOLIC_CALCULUS = "symbolic_calculus"
METHOD_SYMBOLIC_SIMPLIFICATION = "symbolic_simplification"
METHOD_NUMERICAL = "numerical_analysis"
METHOD_SPECIALIZED = "specialized"

_SOLVE_RE = re.compile(r"\bsolve\b", re.IGNORECASE)
_FOR_VARIABLE_SUFFIX_RE = re.compile(r"\s+for\s+[a-z]\s*$", re.IGNORECASE)
_DERIVATIVE_RE = re.compile(r"derivative|differentiate", re.IGNORECASE)
_SIMPLIFY_RE = re.compile(r"simplify", re.IGNORECASE)
_NUMERICAL_RE = re.compile(r"approximate|integrate|numerical", re.IGNORECASE)

_LEADING_WORDS_RE = re.compile(r"^\s*(?:[a-z]{2,}\b[:,]?\s+)+", re.IGNORECASE)
_VARIABLE_LABEL_RE = re.compile(r"^\s*[a-z]\s*[:,]\s*", re.IGNORECASE)

# Common function names, then digits, operators and grouping
_FUNCTION_TOKENS = "sin|cos|tan|exp|log|ln|sqrt"
_SYMBOL_TOKENS = r"[\d+\-*/^(). ]"


def _expression_token(variable: str) -> str:
    return rf"(?:{_FUNCTION_TOKENS}|{re.escape(variable)}|{_SYMBOL_TOKENS})"


class SolveOptions(BaseModel):
    """Per-call options accepted by the router."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    variable: str = Field(default_factory=lambda: get_settings().default_variable)
    language: str = "en"

    @field_validator("variable")
    @classmethod
    def _single_identifier(cls, value: str) -> str:
        value = value.strip()
        if not value.isidentifier():
            raise ValueError("variable must be a single identifier")
        return value


@dataclass(frozen=True)
class EngineResult:
    """Uniform envelope returned for every question."""

    question: str
    classification: Classification
    solution: Optional[SolverResult]
    method: Optional[str]
    confidence: float
    processing_time_ms: float
    error: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def requires_ai(self) -> bool:
        """True when the question should go to a text-generation solver."""
        return bool(self.solution is not None and self.solution.get("requires_ai"))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "question": self.question,
            "classification": self.classification.to_dict(),
            "solution": self.solution.to_dict() if self.solution is not None else None,
            "method": self.method,
            "confidence": self.confidence,
            "processing_time_ms": self.processing_time_ms,
        }
        if self.error is not None:
            data["error"] = self.error
            data["error_code"] = self.error_code
        return data


def extract_expression(question: str, variable: str = "x") -> str:
    """Pull a math expression in ``variable`` out of a natural-language question.

    Tries the run after the last "of " or ": ", then the first run of three
    or more expression tokens anywhere; falls back to the whole question.
    """
    token = _expression_token(variable)

    lead_ins = [
        m.group(1).strip()
        for m in re.finditer(rf"(?:of |: )({token}+)", question, re.IGNORECASE)
    ]
    lead_ins = [text for text in lead_ins if text]
    if lead_ins:
        return lead_ins[-1]

    for match in re.finditer(rf"{token}{{3,}}", question, re.IGNORECASE):
        text = match.group(0).strip()
        if text:
            return text

    return question


def equation_text(question: str) -> str:
    """Text of the equation in a "solve ..." question.

    Drops the words before the equation, a leading "x:" label and a trailing
    "for x".
    """
    parts = _SOLVE_RE.split(question, maxsplit=1)
    text = parts[1] if len(parts) > 1 and parts[1].strip() else question
    text = _LEADING_WORDS_RE.sub("", text)
    text = _VARIABLE_LABEL_RE.sub("", text)
    text = _FOR_VARIABLE_SUFFIX_RE.sub("", text.strip().rstrip("?.!"))
    return text.strip()


class MathEngine:
    """Unified interface to all math engine capabilities.

    Holds the registered capabilities and routes questions to them. The
    engine keeps no per-call state, so one instance can serve concurrent
    callers.
    """

    def __init__(self):
        """Initialize the math engine with all capabilities."""
        self._capabilities: Dict[str, MathCapability] = {}

        self._register_capability(VedicCapability())
        self._register_capability(SymbolicCapability())
        self._register_capability(NumericalCapability())

        logger.info(
            "MathEngine initialized",
            capabilities=list(self._capabilities.keys()),
        )

    def _register_capability(self, capability: MathCapability) -> None:
        """Register a capability."""
        if capability.name in self._capabilities:
            raise ValueError(f"Capability '{capability.name}' already registered")
        self._capabilities[capability.name] = capability

    def get_capability(self, name: str) -> Optional[MathCapability]:
        """Get a capability by name."""
        return self._capabilities.get(name)

    def _require(self, name: str) -> MathCapability:
        cap = self._capabilities.get(name)
        if cap is None:
            raise InvalidInputError(
                f"Unknown capability: '{name}'",
                details={"available": sorted(self._capabilities)},
            )
        return cap

    @property
    def vedic(self) -> VedicCapability:
        return self._require("vedic")  # type: ignore[return-value]

    @property
    def symbolic(self) -> SymbolicCapability:
        return self._require("symbolic")  # type: ignore[return-value]

    @property
    def numerical(self) -> NumericalCapability:
        return self._require("numerical")  # type: ignore[return-value]

    def compute(self, capability: str, operation: str, arguments: Dict[str, Any]) -> SolverResult:
        """Invoke one operation of a named capability directly."""
        return self._require(capability).handle(operation, arguments)

    def list_operations(self) -> Dict[str, List[str]]:
        """List all operations from all capabilities."""
        all_ops: Dict[str, List[str]] = {}

        for cap in self._capabilities.values():
            for category, ops in cap.list_operations().items():
                all_ops[f"{cap.name}.{category}"] = ops

        return all_ops

    def list_capabilities(self) -> Dict[str, str]:
        """List all registered capabilities."""
        return {
            name: cap.description
            for name, cap in self._capabilities.items()
        }

    def classify(self, question: str) -> Classification:
        return classify_math_concept(question)

    def solve(self, question: str, options: Optional[Mapping[str, Any]] = None) -> EngineResult:
        """Classify ``question``, route it to a solver and wrap the outcome.

        Never raises. A non-string question is read as its ``str()`` and
        None as the empty string. Any exception after classification is
        mapped to ``error``/``error_code`` with ``solution`` left as None.
        """
        start = time.perf_counter()
        text = "" if question is None else str(question)
        classification = classify_math_concept(text)

        logger.info(
            "Question classified",
            primary_domain=classification.primary_domain.value,
            all_domains=[d.value for d in classification.all_domains],
            confidence=classification.confidence,
            vedic_pattern=classification.vedic_pattern.type.value if classification.vedic_pattern else None,
        )

        try:
            opts = SolveOptions.model_validate(dict(options or {}))
            method, solution = self._route(text, classification, opts)
        except Exception as e:
            response = map_exception_to_response(e)
            logger.error(
                "Math engine failed",
                error=response.message,
                error_code=response.error_code,
                error_type=type(e).__name__,
            )
            return EngineResult(
                question=text,
                classification=classification,
                solution=None,
                method=None,
                confidence=classification.confidence,
                processing_time_ms=_elapsed_ms(start),
                error=response.message,
                error_code=response.error_code,
            )

        if solution is not None and not solution.success:
            logger.info("Solver reported failure", method=method, error=solution.error)
        elif method == METHOD_VEDIC and solution is not None and not solution.verified:
            logger.warning("Vedic solution not verified", sutra=solution.method)

        return EngineResult(
            question=text,
            classification=classification,
            solution=solution,
            method=method,
            confidence=classification.confidence,
            processing_time_ms=_elapsed_ms(start),
        )

    def _route(
        self,
        question: str,
        classification: Classification,
        options: SolveOptions,
    ) -> Tuple[Optional[str], Optional[SolverResult]]:
        """Apply the routing priority; first matching rule wins."""
        pattern = classification.vedic_pattern
        if pattern is not None:
            logger.debug("Using Vedic solver", pattern=pattern.type.value)
            arguments = dict(zip(OPERATION_ARGUMENTS[pattern.type], pattern.operands))
            return METHOD_VEDIC, self.vedic.handle(pattern.type.value, arguments)

        domain = classification.primary_domain

        if domain in SYMBOLIC_DOMAINS:
            logger.debug("Using symbolic solver", domain=domain.value)
            if "=" in question and "==" not in question:
                return METHOD_SYMBOLIC_ALGEBRA, self.symbolic.handle(
                    "solve_equation",
                    {"equation": equation_text(question), "variable": options.variable},
                )
            if _DERIVATIVE_RE.search(question):
                return METHOD_SYMBOLIC_CALCULUS, self.symbolic.handle(
                    "derivative",
                    {"expression": extract_expression(question, options.variable), "variable": options.variable},
                )
            if _SIMPLIFY_RE.search(question):
                return METHOD_SYMBOLIC_SIMPLIFICATION, self.symbolic.handle(
                    "simplify",
                    {"expression": extract_expression(question, options.variable)},
                )
            return None, None

        if domain in NUMERICAL_DOMAINS and _NUMERICAL_RE.search(question):
            logger.debug("Numerical methods available", domain=domain.value)
            return METHOD_NUMERICAL, SolverResult(
                method=METHOD_NUMERICAL,
                details={
                    "note": "Numerical methods available for integration, root finding, ODEs",
                    "available_methods": list(METHOD_NAMES.values()),
                },
            )

        logger.debug("Domain-specific solver required", domain=domain.value)
        return METHOD_SPECIALIZED, SolverResult(
            method=METHOD_SPECIALIZED,
            details={
                "domain": domain.value,
                "note": "Specialized solver for this domain",
                "requires_ai": True,
            },
        )


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


# Module-level singleton for convenience
_engine: Optional[MathEngine] = None


def get_engine() -> MathEngine:
    """Get or create the singleton MathEngine instance."""
    global _engine
    if _engine is None:
        _engine = MathEngine()
    return _engine


async def solve_math_problem(
    question: str, options: Optional[Mapping[str, Any]] = None
) -> EngineResult:
    """Solve a natural-language math question.

    Declared async to match callers' interfaces; the work itself is
    synchronous and has no suspension points.
    """
    return get_engine().solve(question, options)
