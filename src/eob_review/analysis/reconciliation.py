"""Claim-level totals computed from EOB line items."""

import math

from ..schemas import FinancialSummary, LineItem


def reconcile(line_items: list[LineItem]) -> FinancialSummary:
    """Sum every monetary field across the line items.

    Uses math.fsum so the totals do not depend on line item order.
    """
    return FinancialSummary(
        total_billed=math.fsum(item.billed_amount for item in line_items),
        total_allowed=math.fsum(item.allowed_amount for item in line_items),
        total_plan_paid=math.fsum(item.plan_paid for item in line_items),
        total_patient_responsibility=math.fsum(
            item.patient_responsibility for item in line_items
        ),
        total_deductible=math.fsum(item.deductible for item in line_items),
        total_copay=math.fsum(item.copay for item in line_items),
        total_coinsurance=math.fsum(item.coinsurance for item in line_items),
        total_not_covered=math.fsum(item.not_covered for item in line_items),
    )
