"""Model-assisted extraction of a structured claim record from EOB text."""

import json
import logging
import math
import re
import uuid
from collections.abc import Callable
from typing import Any

from llama_index.core.prompts import PromptTemplate
from pydantic import ValidationError

from .analysis import analyze, find_responsibility_mismatches, reconcile
from .clients import CompletionClient
from .config import MAX_DOCUMENT_CHARS
from .errors import ExtractionFailed
from .narrative import narrate
from .schemas import EOBRecord, LineItem

logger = logging.getLogger(__name__)

UNKNOWN_PAYER = "Unknown Insurance Company"
UNKNOWN_MEMBER = "Unknown Member"
UNKNOWN_ID = "Unknown"

MONEY_FIELDS = {
    "billed_amount": "billedAmount",
    "allowed_amount": "allowedAmount",
    "plan_paid": "planPaid",
    "patient_responsibility": "patientResponsibility",
    "deductible": "deductible",
    "copay": "copay",
    "coinsurance": "coinsurance",
    "not_covered": "notCovered",
}

# Plain decimals with optional exponent, or signed Infinity. No separators,
# currency signs or underscores.
DECIMAL_AMOUNT = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII
)
PREFIXED_INTEGER = re.compile(r"0([xXoObB])([0-9a-fA-F]+)")
RADIX = {"x": 16, "o": 8, "b": 2}

OPTIONAL_CLAIM_FIELDS = {
    "payer_address": "payerAddress",
    "payer_phone": "payerPhone",
    "group_number": "groupNumber",
    "claim_date": "claimDate",
    "processed_date": "processedDate",
    "provider_name": "providerName",
    "provider_npi": "providerNPI",
    "service_start_date": "serviceStartDate",
    "service_end_date": "serviceEndDate",
}

_FENCE_START = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
_FENCE_END = re.compile(r"\n?```$")


# --- Prompts ---

EXTRACTION_SYSTEM_PROMPT = """You are an expert medical billing analyst. Extract structured data from Explanation of Benefits (EOB) documents.

Return ONLY valid JSON with no markdown formatting, no code blocks, no extra text.

Return a JSON object with this shape:

{
  "payerName": "Insurance company name",
  "payerAddress": "Insurance company address if found",
  "payerPhone": "Insurance company phone if found",
  "memberName": "Patient/member name",
  "memberId": "Member/subscriber ID",
  "groupNumber": "Group number if found",
  "claimNumber": "Claim number",
  "claimDate": "Claim date (YYYY-MM-DD format)",
  "processedDate": "Processed date (YYYY-MM-DD format)",
  "providerName": "Healthcare provider name",
  "providerNPI": "Provider NPI if found",
  "serviceStartDate": "Service start date (YYYY-MM-DD)",
  "serviceEndDate": "Service end date (YYYY-MM-DD)",
  "lineItems": [
    {
      "serviceDate": "YYYY-MM-DD",
      "provider": "Provider name",
      "procedureCode": "CPT/HCPCS code",
      "procedureDescription": "Procedure description",
      "diagnosisCode": "ICD code if found",
      "diagnosisDescription": "Diagnosis description if found",
      "billedAmount": 0.00,
      "allowedAmount": 0.00,
      "planPaid": 0.00,
      "patientResponsibility": 0.00,
      "deductible": 0.00,
      "copay": 0.00,
      "coinsurance": 0.00,
      "notCovered": 0.00,
      "denialCode": "Denial code if denied",
      "denialReason": "Denial reason if denied"
    }
  ]
}

For each line item:
- Extract ALL monetary amounts as numbers (not strings)
- Report patientResponsibility exactly as printed on the document
- Include denial information if the claim was denied or partially denied"""

EXTRACTION_PROMPT = PromptTemplate(
    """DOCUMENT TEXT:
{document_text}

Return ONLY the JSON object, no other text."""
)


# --- Extractor ---


class ClaimExtractor:
    """Turn EOB text into an EOBRecord using a text-completion client.

    The caller is expected to have gated the text with the EOB detector.
    """

    def __init__(
        self,
        client: CompletionClient,
        max_document_chars: int = MAX_DOCUMENT_CHARS,
    ):
        self.client = client
        self.max_document_chars = max_document_chars

    async def extract(self, text: str) -> EOBRecord:
        document_text = text
        if len(text) > self.max_document_chars:
            logger.warning(
                "Document text truncated from %d to %d characters for extraction",
                len(text),
                self.max_document_chars,
            )
            document_text = text[: self.max_document_chars]

        try:
            content = await self.client.complete(
                EXTRACTION_SYSTEM_PROMPT,
                EXTRACTION_PROMPT.format(document_text=document_text),
                response_format="json",
            )
        except Exception as e:
            logger.exception("Completion call for EOB extraction failed")
            raise ExtractionFailed("Failed to extract EOB data from document") from e

        data = parse_extraction_response(content)
        return build_record(data)


# --- Post-processing ---


def strip_code_fence(content: str) -> str:
    """Remove a surrounding ``` or ```json fence, if present."""
    stripped = content.strip()
    if stripped.startswith("```"):
        stripped = _FENCE_START.sub("", stripped, count=1)
        stripped = _FENCE_END.sub("", stripped, count=1)
    return stripped.strip()


def parse_extraction_response(content: str) -> dict[str, Any]:
    """Parse the model response into a JSON object, failing on anything else."""
    try:
        data = json.loads(strip_code_fence(content))
    except json.JSONDecodeError as e:
        logger.exception("Model response for EOB extraction is not valid JSON")
        raise ExtractionFailed("Failed to extract EOB data from document") from e

    if not isinstance(data, dict):
        raise ExtractionFailed(
            f"Expected a JSON object from extraction, got {type(data).__name__}"
        )
    return data


def build_record(
    data: dict[str, Any],
    id_factory: Callable[[], str] | None = None,
) -> EOBRecord:
    """Normalize extracted data and assemble the record with derived fields."""
    new_id = id_factory or _new_id

    raw_items = data.get("lineItems")
    if raw_items is None:
        raw_items = []
    if not isinstance(raw_items, list):
        raise ExtractionFailed("Extracted lineItems is not a list")

    claim_provider = _to_text(data.get("providerName")) or ""

    try:
        line_items = [
            _build_line_item(raw, new_id(), claim_provider) for raw in raw_items
        ]

        mismatched = find_responsibility_mismatches(line_items)
        if mismatched:
            logger.info(
                "%d line item(s) report patient responsibility that differs from their cost-share parts",
                len(mismatched),
            )

        summary = reconcile(line_items)

        record = EOBRecord(
            payer_name=_to_text(data.get("payerName")) or UNKNOWN_PAYER,
            member_name=_to_text(data.get("memberName")) or UNKNOWN_MEMBER,
            member_id=_to_text(data.get("memberId")) or UNKNOWN_ID,
            claim_number=_to_text(data.get("claimNumber")) or UNKNOWN_ID,
            **{
                field: _to_text(data.get(key))
                for field, key in OPTIONAL_CLAIM_FIELDS.items()
            },
            line_items=line_items,
            financial_summary=summary,
            plain_language_summary=narrate(summary),
            issues=analyze(line_items, summary),
            notes=[],
        )
    except ValidationError as e:
        raise ExtractionFailed("Extracted EOB data has an invalid shape") from e

    logger.info(
        "Extracted claim %s with %d line items and %d issues",
        record.claim_number,
        len(record.line_items),
        len(record.issues),
    )
    return record


def to_amount(value: Any) -> float:
    """Coerce a model-reported amount to a float.

    Numbers pass through and numeric strings are parsed after trimming
    whitespace. Formatted strings such as "$1,200.00", NaN, booleans and
    anything else become 0. Infinity is kept.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        number = _parse_numeric_string(value.strip())
    else:
        return 0.0
    if math.isnan(number):
        return 0.0
    return number


def _parse_numeric_string(text: str) -> float:
    if not text:
        return 0.0
    if DECIMAL_AMOUNT.fullmatch(text):
        return float(text)
    if match := PREFIXED_INTEGER.fullmatch(text):
        try:
            return float(int(match.group(2), RADIX[match.group(1).lower()]))
        except ValueError:
            return 0.0
    return 0.0


def _build_line_item(raw: Any, item_id: str, claim_provider: str) -> LineItem:
    if not isinstance(raw, dict):
        raise ExtractionFailed("Extracted line item is not an object")

    return LineItem(
        id=item_id,
        service_date=_to_text(raw.get("serviceDate")) or "",
        provider=_to_text(raw.get("provider")) or claim_provider,
        procedure_code=_to_text(raw.get("procedureCode")) or "",
        procedure_description=_to_text(raw.get("procedureDescription")) or "",
        diagnosis_code=_to_text(raw.get("diagnosisCode")),
        diagnosis_description=_to_text(raw.get("diagnosisDescription")),
        denial_code=_to_text(raw.get("denialCode")),
        denial_reason=_to_text(raw.get("denialReason")),
        **{field: to_amount(raw.get(key)) for field, key in MONEY_FIELDS.items()},
    )


def _to_text(value: Any) -> str | None:
    """Pass strings through, stringify numbers, drop anything else."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _new_id() -> str:
    return str(uuid.uuid4())
