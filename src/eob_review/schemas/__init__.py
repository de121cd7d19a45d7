"""EOB review schemas for extraction, analysis and export."""

from .common import DetectionResult, IssueSeverity, IssueType
from .eob import EOBRecord, FinancialSummary, Issue, LineItem
from .exports import ExportFile

__all__ = [
    # Common
    "IssueType",
    "IssueSeverity",
    "DetectionResult",
    # EOB
    "LineItem",
    "FinancialSummary",
    "Issue",
    "EOBRecord",
    # Exports
    "ExportFile",
]
