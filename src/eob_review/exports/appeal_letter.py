"""Appeal letter generation for denials and disputed charges."""

import logging
import time

from llama_index.core.prompts import PromptTemplate

from ..analysis import appealable_issues
from ..clients import CompletionClient
from ..errors import AppealGenerationFailed, NoAppealableIssues
from ..schemas import EOBRecord, ExportFile, Issue
from .csv_export import safe_filename_part

logger = logging.getLogger(__name__)

APPEAL_CONTENT_TYPE = "text/plain"

APPEAL_SYSTEM_PROMPT = (
    "You are a professional medical billing advocate who writes clear, "
    "formal appeal letters for insurance claims."
)

APPEAL_PROMPT = PromptTemplate(
    """Generate a professional medical billing appeal letter based on the following information:

INSURANCE INFORMATION:
- Insurance Company: {payer_name}
- Member Name: {member_name}
- Member ID: {member_id}
- Claim Number: {claim_number}
- Service Date: {service_date}

ISSUES TO APPEAL:
{issues_text}

LINE ITEMS AFFECTED:
{line_items_text}

Generate a formal appeal letter that:
1. States the claim number and service dates
2. Explains each issue clearly and professionally
3. Requests a review of the claim
4. Asks for a response within 30 days
5. Includes a closing requesting reconsideration

Format the letter professionally with proper sections and placeholders for [MEMBER NAME] and [DATE]."""
)


def build_appeal_prompt(record: EOBRecord, issues: list[Issue]) -> str:
    """Describe the claim, each appealable issue and the lines it affects."""
    issue_blocks = []
    for idx, issue in enumerate(issues, start=1):
        block = f"{idx}. {issue.title}\n   Description: {issue.description}"
        if issue.potential_savings:
            block += f"\n   Disputed Amount: ${issue.potential_savings:.2f}"
        issue_blocks.append(block)

    affected_ids = {item_id for issue in issues for item_id in issue.affected_line_items}
    line_lines = [
        f"- {item.service_date}: {item.procedure_description} ({item.procedure_code}) - ${item.patient_responsibility:.2f}"
        for item in record.line_items
        if item.id in affected_ids
    ]

    return APPEAL_PROMPT.format(
        payer_name=record.payer_name,
        member_name=record.member_name,
        member_id=record.member_id,
        claim_number=record.claim_number,
        service_date=record.service_start_date or "Not specified",
        issues_text="\n\n".join(issue_blocks),
        line_items_text="\n".join(line_lines) or "- None listed",
    )


async def generate_appeal_letter(
    record: EOBRecord,
    client: CompletionClient,
    timestamp_ms: int | None = None,
) -> ExportFile:
    """Draft an appeal letter covering denials, duplicates and out-of-network charges.

    Raises NoAppealableIssues before any model call when there is nothing to
    appeal.
    """
    issues = appealable_issues(record.issues)
    if not issues:
        raise NoAppealableIssues(
            "This EOB does not contain any denials, duplicate billings, or "
            "out-of-network issues that can be appealed."
        )

    logger.info(
        "Generating appeal letter for claim %s covering %d issue(s)",
        record.claim_number,
        len(issues),
    )

    try:
        letter = await client.complete(
            APPEAL_SYSTEM_PROMPT,
            build_appeal_prompt(record, issues),
            response_format="text",
        )
    except Exception as e:
        logger.exception("Completion call for appeal letter failed")
        raise AppealGenerationFailed("Failed to generate appeal letter") from e

    if not letter.strip():
        raise AppealGenerationFailed("Model returned an empty appeal letter")

    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    return ExportFile(
        content=letter,
        filename=f"appeal-letter-claim-{safe_filename_part(record.claim_number)}-{timestamp_ms}.txt",
        content_type=APPEAL_CONTENT_TYPE,
    )
