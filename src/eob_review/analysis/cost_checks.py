"""Cost exposure checks: high out-of-pocket lines and likely out-of-network care."""

from ..schemas import Issue, IssueSeverity, IssueType, LineItem

HIGH_COST_THRESHOLD = 500.0


def run_high_cost_checks(line_items: list[LineItem]) -> list[Issue]:
    """Flag each line item whose patient responsibility exceeds $500."""
    issues: list[Issue] = []

    for item in line_items:
        if item.patient_responsibility <= HIGH_COST_THRESHOLD:
            continue

        issues.append(
            Issue(
                type=IssueType.HIGH_COST,
                severity=IssueSeverity.MEDIUM,
                title="High Out-of-Pocket Cost",
                description=f"Service on {item.service_date} has a patient responsibility of ${item.patient_responsibility:.2f}.",
                affected_line_items=[item.id],
                action_required="Consider setting up a payment plan with the provider if needed.",
            )
        )

    return issues


def run_out_of_network_checks(line_items: list[LineItem]) -> list[Issue]:
    """Group lines whose whole patient responsibility is a not-covered amount.

    All matching lines share a single issue. Savings estimate half of the
    combined not-covered amount.
    """
    matching = [
        item
        for item in line_items
        if item.not_covered > 0 and item.not_covered == item.patient_responsibility
    ]
    if not matching:
        return []

    total_not_covered = sum(item.not_covered for item in matching)

    return [
        Issue(
            type=IssueType.OUT_OF_NETWORK,
            severity=IssueSeverity.HIGH,
            title="Possible Out-of-Network Services",
            description=f"{len(matching)} service(s) may have been provided by out-of-network providers, resulting in higher costs.",
            affected_line_items=[item.id for item in matching],
            potential_savings=total_not_covered * 0.5,
            action_required="Verify if these providers were in-network. You may be able to appeal if you were not properly informed.",
        )
    ]
