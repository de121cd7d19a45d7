"""EOB review workflow.

A 2-step pipeline that:
1. Detects whether the document text is an Explanation of Benefits
2. Extracts the claim, reconciles totals, detects issues and writes a
   plain-language summary
"""

import logging
from typing import Annotated, Literal

from pydantic import BaseModel
from workflows import Context, Workflow, step
from workflows.events import Event, StartEvent, StopEvent
from workflows.resource import Resource, ResourceConfig

from .clients import CompletionClient, get_extraction_client
from .config import CONFIG_FILE, ExtractionSettings
from .detection import detect_eob
from .errors import ExtractionFailed
from .extraction import ClaimExtractor
from .schemas import DetectionResult, EOBRecord, IssueSeverity

logger = logging.getLogger(__name__)


# --- Events ---


class DocumentStartEvent(StartEvent):
    """Start event carrying extracted document text."""

    text: str
    force: bool = False


class StatusEvent(Event):
    """Progress status update for the client."""

    message: str
    level: Literal["info", "warning", "error"] = "info"


class DocumentDetectedEvent(Event):
    """Emitted when the text passes the EOB gate."""

    text: str
    detection: DetectionResult


# --- Output ---


class EOBReviewOutput(BaseModel):
    """Result of a workflow run. record is None when the gate rejected the text."""

    detection: DetectionResult
    record: EOBRecord | None = None


# --- Workflow ---


class EOBReviewWorkflow(Workflow):
    """Turn EOB text into a reconciled, analyzed claim record."""

    @step()
    async def detect_document(
        self, event: DocumentStartEvent, ctx: Context
    ) -> DocumentDetectedEvent | StopEvent:
        """Classify the text and stop early when it is not an EOB."""
        ctx.write_event_to_stream(StatusEvent(message="Checking document type..."))

        detection = detect_eob(event.text)

        if not detection.is_eob and not event.force:
            ctx.write_event_to_stream(
                StatusEvent(message=detection.reason, level="warning")
            )
            return StopEvent(result=EOBReviewOutput(detection=detection))

        ctx.write_event_to_stream(
            StatusEvent(
                message=f"Detected EOB ({detection.confidence}% confidence)"
                if detection.is_eob
                else f"Proceeding despite low EOB confidence ({detection.confidence}%)"
            )
        )
        return DocumentDetectedEvent(text=event.text, detection=detection)

    @step()
    async def extract_claim(
        self,
        event: DocumentDetectedEvent,
        ctx: Context,
        extract_settings: Annotated[
            ExtractionSettings,
            ResourceConfig(
                config_file=CONFIG_FILE,
                path_selector="extract",
                label="Extraction Settings",
                description="Model settings and document budget for claim extraction",
            ),
        ],
        client: Annotated[CompletionClient, Resource(get_extraction_client)],
    ) -> StopEvent:
        """Extract the claim record and derive totals, issues and narrative."""
        ctx.write_event_to_stream(StatusEvent(message="Extracting claim data..."))

        extractor = ClaimExtractor(
            client, max_document_chars=extract_settings.max_document_chars
        )

        try:
            record = await extractor.extract(event.text)
        except ExtractionFailed:
            ctx.write_event_to_stream(
                StatusEvent(message="Could not extract claim data", level="error")
            )
            raise

        high_issues = sum(
            1 for issue in record.issues if issue.severity == IssueSeverity.HIGH
        )
        if record.issues:
            ctx.write_event_to_stream(
                StatusEvent(
                    message=f"Found {len(record.issues)} issues ({high_issues} high severity)",
                    level="warning",
                )
            )
        else:
            ctx.write_event_to_stream(StatusEvent(message="No issues found"))

        return StopEvent(
            result=EOBReviewOutput(detection=event.detection, record=record)
        )


workflow = EOBReviewWorkflow(timeout=None)
