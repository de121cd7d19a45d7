"""CSV export of EOB line items and claim totals."""

import csv
import io
import re
import time

from ..schemas import EOBRecord, ExportFile, LineItem

CSV_CONTENT_TYPE = "text/csv"

CSV_HEADERS = [
    "Service Date",
    "Provider",
    "Procedure Code",
    "Procedure Description",
    "Diagnosis Code",
    "Billed Amount",
    "Allowed Amount",
    "Plan Paid",
    "Patient Responsibility",
    "Deductible",
    "Copay",
    "Coinsurance",
    "Not Covered",
    "Denial Code",
    "Denial Reason",
]

# Summary values sit under the first amount column.
SUMMARY_PADDING = CSV_HEADERS.index("Billed Amount") - 1


def export_csv(record: EOBRecord, timestamp_ms: int | None = None) -> ExportFile:
    """Render line items plus a trailing summary block as a CSV download."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(CSV_HEADERS)
    for item in record.line_items:
        writer.writerow(_line_item_row(item))

    summary = record.financial_summary
    writer.writerow([])
    writer.writerow(["SUMMARY"])
    for label, amount in (
        ("Total Billed", summary.total_billed),
        ("Total Allowed", summary.total_allowed),
        ("Total Plan Paid", summary.total_plan_paid),
        ("Total Patient Responsibility", summary.total_patient_responsibility),
    ):
        writer.writerow([label, *[""] * SUMMARY_PADDING, f"{amount:.2f}"])

    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    return ExportFile(
        content=buffer.getvalue(),
        filename=f"eob-{safe_filename_part(record.claim_number)}-{timestamp_ms}.csv",
        content_type=CSV_CONTENT_TYPE,
    )


def safe_filename_part(value: str) -> str:
    """Reduce a value to characters that are safe inside a filename."""
    cleaned = re.sub(r"[^\w-]", "", value.replace(" ", "_"))
    return cleaned or "unknown"


def _line_item_row(item: LineItem) -> list[str]:
    return [
        item.service_date,
        item.provider,
        item.procedure_code,
        item.procedure_description,
        item.diagnosis_code or "",
        f"{item.billed_amount:.2f}",
        f"{item.allowed_amount:.2f}",
        f"{item.plan_paid:.2f}",
        f"{item.patient_responsibility:.2f}",
        f"{item.deductible:.2f}",
        f"{item.copay:.2f}",
        f"{item.coinsurance:.2f}",
        f"{item.not_covered:.2f}",
        item.denial_code or "",
        item.denial_reason or "",
    ]
