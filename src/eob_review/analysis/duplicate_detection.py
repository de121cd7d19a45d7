"""Duplicate billing detection within a single EOB."""

from collections import defaultdict

from ..schemas import Issue, IssueSeverity, IssueType, LineItem


def run_duplicate_detection(line_items: list[LineItem]) -> list[Issue]:
    """Flag services billed more than once on the same date.

    Line items are grouped by (service_date, procedure_code). Each group with
    two or more members becomes one issue. Savings assume one occurrence is
    legitimate and estimate half the group's patient responsibility.
    """
    issues: list[Issue] = []

    # Key: (service_date, procedure_code) -> line items in extraction order
    by_date_code: dict[tuple[str, str], list[LineItem]] = defaultdict(list)
    for item in line_items:
        by_date_code[(item.service_date, item.procedure_code)].append(item)

    for (service_date, procedure_code), occurrences in by_date_code.items():
        if len(occurrences) < 2:
            continue

        total_responsibility = sum(occ.patient_responsibility for occ in occurrences)

        issues.append(
            Issue(
                type=IssueType.DUPLICATE_BILLING,
                severity=IssueSeverity.HIGH,
                title="Possible Duplicate Billing Detected",
                description=f"The same service ({procedure_code}) on {service_date} appears {len(occurrences)} times. This may be duplicate billing.",
                affected_line_items=[occ.id for occ in occurrences],
                potential_savings=total_responsibility / 2,
                action_required="Contact your insurance company to verify if this is a duplicate charge.",
            )
        )

    return issues
