"""Keyword-scored classification of document text as an EOB."""

import re
from typing import NamedTuple

from .schemas import DetectionResult

# Raw score that maps to 100% confidence.
MAX_SCORE = 20
CONFIDENCE_THRESHOLD = 50
MAX_REASON_TERMS = 5

MONEY_PATTERN = re.compile(r"\$\s*\d+[\d,]*\.?\d{0,2}")
MONEY_BONUS = 2
DATE_PATTERN = re.compile(r"\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}")
DATE_BONUS = 1


class IndicatorTerm(NamedTuple):
    """A phrase that suggests an EOB, with the score it contributes."""

    pattern: str
    weight: int
    tier: str


STRONG_INDICATORS = [
    "explanation of benefits",
    "eob",
    "patient responsibility",
    "claim number",
    "billed amount",
    "allowed amount",
    "plan paid",
    "member id",
    "subscriber id",
    "deductible",
    "coinsurance",
    "copay",
    "out-of-pocket",
]

MEDICAL_BILLING_TERMS = [
    "cpt",
    "hcpcs",
    "icd-10",
    "icd-9",
    "diagnosis code",
    "procedure code",
    "service date",
    "date of service",
    "provider name",
    "provider npi",
    "health plan",
    "insurance carrier",
    "medical claim",
]

FINANCIAL_TERMS = [
    "total charges",
    "total billed",
    "amount you owe",
    "patient owes",
    "amount paid",
    "payment amount",
    "adjustment",
    "discount",
    "not covered",
    "denied",
]

INDICATOR_TERMS: list[IndicatorTerm] = (
    [IndicatorTerm(term, 3, "strong") for term in STRONG_INDICATORS]
    + [IndicatorTerm(term, 2, "medical_billing") for term in MEDICAL_BILLING_TERMS]
    + [IndicatorTerm(term, 1, "financial") for term in FINANCIAL_TERMS]
)


def detect_eob(
    text: str, terms: list[IndicatorTerm] | None = None
) -> DetectionResult:
    """Score text against the indicator table and decide whether it is an EOB.

    Every term found (case-insensitive substring) adds its weight once. A
    dollar amount adds 2 and a date adds 1. The score is scaled so that
    MAX_SCORE is 100% and anything at or above 50% counts as an EOB.
    """
    lower_text = text.lower()
    score = 0
    matched: list[str] = []

    for term in terms if terms is not None else INDICATOR_TERMS:
        if term.pattern in lower_text:
            score += term.weight
            matched.append(term.pattern)

    if MONEY_PATTERN.search(text):
        score += MONEY_BONUS
    if DATE_PATTERN.search(text):
        score += DATE_BONUS

    confidence = round(min(100.0, score / MAX_SCORE * 100))
    is_eob = confidence >= CONFIDENCE_THRESHOLD

    if is_eob:
        shown = ", ".join(matched[:MAX_REASON_TERMS])
        more = "..." if len(matched) > MAX_REASON_TERMS else ""
        reason = f"Document contains {len(matched)} EOB-related terms: {shown}{more}"
    else:
        reason = (
            "Document does not contain sufficient EOB indicators "
            f"(confidence: {confidence}%)"
        )

    return DetectionResult(is_eob=is_eob, confidence=confidence, reason=reason)


class EOBDetector:
    """Detector bound to a specific indicator table."""

    def __init__(self, terms: list[IndicatorTerm] | None = None):
        self.terms = list(terms) if terms is not None else list(INDICATOR_TERMS)

    def detect(self, text: str) -> DetectionResult:
        return detect_eob(text, self.terms)
