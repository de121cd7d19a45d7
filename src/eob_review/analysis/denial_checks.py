"""Denied service detection."""

from ..schemas import Issue, IssueSeverity, IssueType, LineItem

# General guidance only, not derived from the payer's actual policy.
APPEAL_DEADLINE_GUIDANCE = "Typically 180 days from denial date"


def run_denial_checks(line_items: list[LineItem]) -> list[Issue]:
    """Produce one issue per line item carrying a denial code or reason."""
    issues: list[Issue] = []

    for item in line_items:
        if not item.is_denied:
            continue

        issues.append(
            Issue(
                type=IssueType.DENIAL,
                severity=IssueSeverity.HIGH,
                title="Claim Denied or Partially Denied",
                description=f"Service on {item.service_date} was denied. Reason: {item.denial_reason or 'Not specified'}",
                affected_line_items=[item.id],
                potential_savings=item.patient_responsibility,
                action_required="You may be able to appeal this denial. Contact your insurance company for appeal procedures.",
                appeal_deadline=APPEAL_DEADLINE_GUIDANCE,
            )
        )

    return issues
