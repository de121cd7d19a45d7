"""Explanation of Benefits extraction and analysis engine."""

from .analysis import analyze, appealable_issues, reconcile
from .detection import EOBDetector, detect_eob
from .errors import (
    AppealGenerationFailed,
    EOBReviewError,
    ExtractionFailed,
    NoAppealableIssues,
    UnsupportedDocument,
)
from .exports import export_csv, generate_appeal_letter
from .extraction import ClaimExtractor
from .narrative import narrate

__all__ = [
    "detect_eob",
    "EOBDetector",
    "ClaimExtractor",
    "reconcile",
    "analyze",
    "appealable_issues",
    "narrate",
    "export_csv",
    "generate_appeal_letter",
    "EOBReviewError",
    "ExtractionFailed",
    "NoAppealableIssues",
    "UnsupportedDocument",
    "AppealGenerationFailed",
]
