"""Pytest fixtures for EOB review tests."""

import json

import pytest

from eob_review.schemas import LineItem


class FakeCompletionClient:
    """CompletionClient stand-in that records calls and returns canned text."""

    def __init__(self, response: str = "{}", error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    async def complete(
        self,
        system_instructions: str,
        user_content: str,
        response_format: str = "text",
    ) -> str:
        self.calls.append(
            {
                "system_instructions": system_instructions,
                "user_content": user_content,
                "response_format": response_format,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response


def make_line_item(item_id: str = "li-1", **overrides) -> LineItem:
    """Helper to create a LineItem with sensible defaults."""
    fields = {
        "service_date": "2024-01-15",
        "provider": "Dr. Smith",
        "procedure_code": "99213",
        "procedure_description": "Office visit",
        "billed_amount": 200.00,
        "allowed_amount": 150.00,
        "plan_paid": 120.00,
        "patient_responsibility": 30.00,
        "copay": 30.00,
    }
    fields.update(overrides)
    return LineItem(id=item_id, **fields)


SAMPLE_EXTRACTION = {
    "payerName": "Acme Health Plan",
    "payerPhone": "1-800-555-0100",
    "memberName": "Jane Doe",
    "memberId": "ABC123456",
    "groupNumber": "G-778",
    "claimNumber": "CLM-2024-0001",
    "providerName": "Riverside Medical Group",
    "serviceStartDate": "2024-01-15",
    "lineItems": [
        {
            "serviceDate": "2024-01-15",
            "procedureCode": "99213",
            "procedureDescription": "Office visit, established patient",
            "billedAmount": 200.0,
            "allowedAmount": 150.0,
            "planPaid": 120.0,
            "patientResponsibility": 30.0,
            "copay": 30.0,
        },
        {
            "serviceDate": "2024-01-15",
            "provider": "Riverside Lab",
            "procedureCode": "80053",
            "procedureDescription": "Comprehensive metabolic panel",
            "billedAmount": 900.0,
            "allowedAmount": 0.0,
            "planPaid": 0.0,
            "patientResponsibility": 900.0,
            "notCovered": 900.0,
            "denialCode": "CO-197",
            "denialReason": "Precertification absent",
        },
    ],
}


@pytest.fixture
def sample_extraction() -> dict:
    """A model response payload for a two-line EOB."""
    return json.loads(json.dumps(SAMPLE_EXTRACTION))


@pytest.fixture
def fake_client(sample_extraction) -> FakeCompletionClient:
    """Completion client returning the sample extraction as JSON."""
    return FakeCompletionClient(json.dumps(sample_extraction))


SAMPLE_EOB_TEXT = """ACME HEALTH PLAN
EXPLANATION OF BENEFITS - THIS IS NOT A BILL
Member ID: ABC123456    Claim Number: CLM-2024-0001
Date of Service: 01/15/2024    Provider NPI: 1234567890
Procedure Code (CPT) 99213  Billed Amount $200.00  Allowed Amount $150.00
Plan Paid $120.00  Copay $30.00  Deductible $0.00  Coinsurance $0.00
Patient Responsibility $30.00
"""


@pytest.fixture
def eob_text() -> str:
    return SAMPLE_EOB_TEXT
