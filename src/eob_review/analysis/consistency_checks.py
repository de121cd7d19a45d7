"""Informational consistency checks on extracted line items."""

from ..schemas import LineItem

TOLERANCE = 0.01


def find_responsibility_mismatches(line_items: list[LineItem]) -> list[str]:
    """Return ids of line items whose cost-share parts don't add up.

    Compares deductible + copay + coinsurance + not covered against the
    reported patient responsibility. Lines with no parts reported are skipped.
    The reported value is never corrected.
    """
    mismatched: list[str] = []

    for item in line_items:
        breakdown_sum = item.deductible + item.copay + item.coinsurance + item.not_covered
        if breakdown_sum > 0 and abs(breakdown_sum - item.patient_responsibility) > TOLERANCE:
            mismatched.append(item.id)

    return mismatched
