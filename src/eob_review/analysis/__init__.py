"""Issue analysis engine for extracted EOB records."""

from ..schemas import FinancialSummary, Issue, IssueType, LineItem
from .consistency_checks import find_responsibility_mismatches
from .cost_checks import run_high_cost_checks, run_out_of_network_checks
from .denial_checks import run_denial_checks
from .duplicate_detection import run_duplicate_detection
from .reconciliation import reconcile

__all__ = [
    "reconcile",
    "analyze",
    "appealable_issues",
    "find_responsibility_mismatches",
    "run_duplicate_detection",
    "run_denial_checks",
    "run_high_cost_checks",
    "run_out_of_network_checks",
    "APPEALABLE_TYPES",
]

APPEALABLE_TYPES = (
    IssueType.DENIAL,
    IssueType.DUPLICATE_BILLING,
    IssueType.OUT_OF_NETWORK,
)


def analyze(line_items: list[LineItem], summary: FinancialSummary) -> list[Issue]:
    """Run all issue checks and return issues in detection-pass order.

    Passes run in a fixed order, which is also the display order:
    - Duplicate billing: same service date and procedure code
    - Denials: one issue per denied line item
    - High cost: patient responsibility over $500
    - Out-of-network: not-covered amount explains all patient responsibility

    Issues are not re-sorted by severity. The summary is accepted so every
    pass sees the same reconciled claim; no current pass reads it.
    """
    issues: list[Issue] = []

    issues.extend(run_duplicate_detection(line_items))
    issues.extend(run_denial_checks(line_items))
    issues.extend(run_high_cost_checks(line_items))
    issues.extend(run_out_of_network_checks(line_items))

    return issues


def appealable_issues(issues: list[Issue]) -> list[Issue]:
    """Issues an appeal letter can address. Unknown types never qualify."""
    return [issue for issue in issues if issue.type in APPEALABLE_TYPES]
