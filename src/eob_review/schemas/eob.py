"""Explanation of Benefits (EOB) record schema."""

from typing import Any

from pydantic import Field

from .common import CamelModel, IssueSeverity, IssueType


class LineItem(CamelModel):
    """One billed service line from an EOB."""

    id: str
    service_date: str = ""
    provider: str = ""
    procedure_code: str = ""
    procedure_description: str = ""
    diagnosis_code: str | None = None
    diagnosis_description: str | None = None
    # Amounts
    billed_amount: float = 0.0
    allowed_amount: float = 0.0
    plan_paid: float = 0.0
    patient_responsibility: float = 0.0
    deductible: float = 0.0
    copay: float = 0.0
    coinsurance: float = 0.0
    not_covered: float = 0.0
    # Denial
    denial_code: str | None = None
    denial_reason: str | None = None

    @property
    def is_denied(self) -> bool:
        return bool(self.denial_code or self.denial_reason)


class FinancialSummary(CamelModel):
    """Claim-level totals, always recomputed from the line items."""

    total_billed: float = 0.0
    total_allowed: float = 0.0
    total_plan_paid: float = 0.0
    total_patient_responsibility: float = 0.0
    total_deductible: float = 0.0
    total_copay: float = 0.0
    total_coinsurance: float = 0.0
    total_not_covered: float = 0.0


class Issue(CamelModel):
    """A detected problem or notable condition on the claim."""

    type: IssueType | str = Field(union_mode="left_to_right")
    severity: IssueSeverity = IssueSeverity.LOW
    title: str
    description: str
    affected_line_items: list[str] = []
    potential_savings: float | None = None
    action_required: str | None = None
    appeal_deadline: str | None = None


class EOBRecord(CamelModel):
    """A fully processed Explanation of Benefits document."""

    # Payer
    payer_name: str = "Unknown Insurance Company"
    payer_address: str | None = None
    payer_phone: str | None = None
    # Member
    member_name: str = "Unknown Member"
    member_id: str = "Unknown"
    group_number: str | None = None
    # Claim
    claim_number: str = "Unknown"
    claim_date: str | None = None
    processed_date: str | None = None
    # Provider
    provider_name: str | None = None
    provider_npi: str | None = Field(default=None, alias="providerNPI")
    service_start_date: str | None = None
    service_end_date: str | None = None
    # Derived
    line_items: list[LineItem] = []
    financial_summary: FinancialSummary = FinancialSummary()
    plain_language_summary: str = ""
    issues: list[Issue] = []
    notes: list[str] = []

    def to_json_blob(self) -> dict[str, Any]:
        """Return the camelCase dict stored alongside the parent document."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
