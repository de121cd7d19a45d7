"""Entry points the surrounding application calls.

Entitlement checks, storage and HTTP transport live outside this package.
"""

import logging

from .clients import CompletionClient, get_completion_client
from .config import AnalyzerConfig, load_config
from .detection import detect_eob
from .errors import UnsupportedDocument
from .exports import export_csv
from .exports import generate_appeal_letter as _generate_appeal_letter
from .extraction import ClaimExtractor
from .schemas import DetectionResult, EOBRecord, ExportFile

logger = logging.getLogger(__name__)

__all__ = [
    "detect_eob",
    "extract_eob_data",
    "export_csv",
    "generate_appeal_letter",
]


async def extract_eob_data(
    text: str,
    client: CompletionClient | None = None,
    config: AnalyzerConfig | None = None,
    require_eob: bool = False,
) -> EOBRecord:
    """Extract and analyze an EOB.

    With require_eob=True the detector gate is enforced here and
    UnsupportedDocument is raised for low-confidence text.
    """
    config = config or load_config()

    if require_eob:
        detection: DetectionResult = detect_eob(text)
        if not detection.is_eob:
            logger.info("Rejected document before extraction: %s", detection.reason)
            raise UnsupportedDocument(detection.confidence, detection.reason)

    if client is None:
        client = get_completion_client(config.extract)

    extractor = ClaimExtractor(
        client, max_document_chars=config.extract.max_document_chars
    )
    return await extractor.extract(text)


async def generate_appeal_letter(
    record: EOBRecord,
    client: CompletionClient | None = None,
    config: AnalyzerConfig | None = None,
) -> ExportFile:
    """Draft an appeal letter, creating the appeal model client if needed."""
    if client is None:
        config = config or load_config()
        client = get_completion_client(config.appeal)
    return await _generate_appeal_letter(record, client)
