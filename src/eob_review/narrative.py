"""Plain-language explanation of what the patient owes and why."""

from .schemas import FinancialSummary


def narrate(summary: FinancialSummary) -> str:
    """Render the financial summary as a short multi-line explanation.

    Cost-share components are listed only when non-zero.
    """
    parts = [f"You owe ${summary.total_patient_responsibility:.2f} because:"]

    if summary.total_deductible > 0:
        parts.append(f"- Deductible: ${summary.total_deductible:.2f} applied before your plan pays")
    if summary.total_copay > 0:
        parts.append(f"- Copay: ${summary.total_copay:.2f}")
    if summary.total_coinsurance > 0:
        parts.append(f"- Coinsurance: ${summary.total_coinsurance:.2f} (your share after insurance)")
    if summary.total_not_covered > 0:
        parts.append(f"- Not covered: ${summary.total_not_covered:.2f} not covered by your plan")

    parts.append(
        f"\nYour insurance paid ${summary.total_plan_paid:.2f} on a "
        f"${summary.total_allowed:.2f} allowed amount "
        f"(originally billed ${summary.total_billed:.2f})."
    )

    return "\n".join(parts)
