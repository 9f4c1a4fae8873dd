"""Concept classifier.

Maps a raw question to a mathematical domain by counting how many of each
domain's pattern rules match, and detects the arithmetic fast paths
(square, cube, multiply) the Vedic solver can answer directly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Pattern, Tuple, Union

Number = Union[int, float]


class Domain(str, Enum):
    """Mathematical domains a question can be classified into."""

    ALGEBRA = "algebra"
    GEOMETRY = "geometry"
    CALCULUS = "calculus"
    TRIGONOMETRY = "trigonometry"
    NUMBER_THEORY = "number_theory"
    PROBABILITY = "probability"
    STATISTICS = "statistics"
    LINEAR_ALGEBRA = "linear_algebra"
    DISCRETE_MATH = "discrete_math"
    VEDIC_MATH = "vedic_math"
    OLYMPIAD = "olympiad"


class VedicOperation(str, Enum):
    """Problem types the Vedic solver dispatches on."""

    SQUARE = "square"
    CUBE = "cube"
    MULTIPLY = "multiply"
    DIVIDE = "divide"


DEFAULT_DOMAIN = Domain.ALGEBRA
DEFAULT_CONFIDENCE = 0.3
CONFIDENCE_PER_MATCH = 0.3
MAX_CONFIDENCE = 0.95


def _rules(*patterns: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


# Evaluated in declaration order; ties in match count keep this order.
CONCEPT_PATTERNS: Tuple[Tuple[Domain, Tuple[Pattern[str], ...]], ...] = (
    (Domain.ALGEBRA, _rules(
        r"solve.*equation",
        r"quadratic",
        r"polynomial",
        r"factor",
        r"simplif",
        r"expand",
        r"linear.*system",
        r"inequality",
    )),
    (Domain.CALCULUS, _rules(
        r"derivative",
        r"integral",
        r"limit",
        r"differential",
        r"dy/dx",
        r"∫",
        r"∂",
        r"gradient",
        r"maxima|minima",
    )),
    (Domain.GEOMETRY, _rules(
        r"triangle",
        r"circle",
        r"area",
        r"perimeter",
        r"volume",
        r"angle",
        r"pythagor",
        r"coordinate",
        r"distance.*point",
    )),
    (Domain.TRIGONOMETRY, _rules(
        r"(?<![a-z])(?:sin|cos|tan)",
        r"trigonometric",
        r"radian|degree",
        r"(?<![a-z])(?:sec|csc|cot)(?![a-z])",
        r"inverse.*trig",
    )),
    (Domain.NUMBER_THEORY, _rules(
        r"prime",
        r"factor.*\d+",
        r"gcd|lcm",
        r"divisib",
        r"modulo|mod\s",
        r"congruence",
        r"euler",
    )),
    (Domain.PROBABILITY, _rules(
        r"probability",
        r"chance",
        r"likelihood",
        r"random",
        r"dice|coin",
        r"permutation",
        r"combination",
    )),
    (Domain.STATISTICS, _rules(
        r"mean|average",
        r"median",
        r"\bmode\b",
        r"standard deviation",
        r"variance",
        r"correlation",
        r"regression",
        r"distribution",
    )),
    (Domain.LINEAR_ALGEBRA, _rules(
        r"matrix|matrices",
        r"determinant",
        r"eigenvalue",
        r"vector",
        r"dot.*product",
        r"cross.*product",
        r"\brank\b",
        r"transpose",
    )),
    (Domain.DISCRETE_MATH, _rules(
        r"graph.*theory",
        r"\btree",
        r"path.*graph",
        r"combinatorics",
        r"recurrence",
        r"sequence",
        r"series",
        r"fibonacci",
    )),
    (Domain.VEDIC_MATH, _rules(
        r"vedic",
        r"mental.*math",
        r"fast.*multiply",
        r"square.*\d+[\s?.!]*$",
        r"cube.*\d+[\s?.!]*$",
        r"ekadhikena",
        r"nikhilam",
        r"urdhva.*tiryak",
    )),
    (Domain.OLYMPIAD, _rules(
        r"olympiad",
        r"prove",
        r"show.*that",
        r"find.*all",
        r"\b(?:imo|aime|usamo)\b",
    )),
)

_NUMBER_RE = re.compile(r"-?\d+\.?\d*")
_INTEGER_RE = re.compile(r"-?\d+")
_SQUARE_RE = re.compile(r"\bsquare\s+of\b", re.IGNORECASE)
_CUBE_RE = re.compile(r"\bcube\s+of\b", re.IGNORECASE)
_MULTIPLY_RE = re.compile(r"multiply|product", re.IGNORECASE)
_PROOF_RE = re.compile(r"prove|show.*that|demonstrate", re.IGNORECASE)


@dataclass(frozen=True)
class VedicPattern:
    """An arithmetic fast path detected in a question."""

    type: VedicOperation
    operands: Tuple[Number, ...]

    @property
    def operand(self) -> Number:
        return self.operands[0]

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "operands": list(self.operands)}


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying a question."""

    primary_domain: Domain
    all_domains: Tuple[Domain, ...]
    confidence: float
    vedic_pattern: Optional[VedicPattern]
    numbers: Tuple[Number, ...]
    is_computation: bool
    is_proof: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primary_domain": self.primary_domain.value,
            "all_domains": [d.value for d in self.all_domains],
            "confidence": self.confidence,
            "vedic_pattern": self.vedic_pattern.to_dict() if self.vedic_pattern else None,
            "numbers": list(self.numbers),
            "is_computation": self.is_computation,
            "is_proof": self.is_proof,
        }


def extract_numbers(text: str) -> Tuple[Number, ...]:
    """Return every numeric literal in ``text``, left to right.

    Integer literals come back as ``int``; anything with a decimal point as ``float``.
    """
    numbers = []
    for token in _NUMBER_RE.findall(text):
        if _INTEGER_RE.fullmatch(token):
            numbers.append(int(token))
        else:
            numbers.append(float(token))
    return tuple(numbers)


def detect_vedic_pattern(
    text: str, numbers: Optional[Tuple[Number, ...]] = None
) -> Optional[VedicPattern]:
    """Detect a square/cube/multiply fast path with the right operand count."""
    if numbers is None:
        numbers = extract_numbers(text)

    if _SQUARE_RE.search(text) and len(numbers) == 1:
        return VedicPattern(VedicOperation.SQUARE, numbers)
    if _CUBE_RE.search(text) and len(numbers) == 1:
        return VedicPattern(VedicOperation.CUBE, numbers)
    if _MULTIPLY_RE.search(text) and len(numbers) == 2:
        return VedicPattern(VedicOperation.MULTIPLY, numbers)
    return None


def score_domains(text: str) -> Tuple[Tuple[Domain, int], ...]:
    """Count matching rules per domain, ranked by count (stable on ties)."""
    scores = []
    for domain, patterns in CONCEPT_PATTERNS:
        count = sum(1 for pattern in patterns if pattern.search(text))
        if count > 0:
            scores.append((domain, count))
    return tuple(sorted(scores, key=lambda item: item[1], reverse=True))


def classify_math_concept(question: str) -> Classification:
    """Classify a question into a domain with a confidence score.

    Never raises: a question that matches nothing is reported as algebra
    with the minimum confidence.
    """
    text = "" if question is None else str(question)
    normalized = text.lower().strip()

    ranked = score_domains(normalized)
    if ranked:
        primary, top_count = ranked[0]
        confidence = round(min(top_count * CONFIDENCE_PER_MATCH, MAX_CONFIDENCE), 2)
    else:
        primary, confidence = DEFAULT_DOMAIN, DEFAULT_CONFIDENCE

    numbers = extract_numbers(text)

    return Classification(
        primary_domain=primary,
        all_domains=tuple(domain for domain, _ in ranked),
        confidence=confidence,
        vedic_pattern=detect_vedic_pattern(text, numbers),
        numbers=numbers,
        is_computation=len(numbers) > 0,
        is_proof=bool(_PROOF_RE.search(normalized)),
    )
