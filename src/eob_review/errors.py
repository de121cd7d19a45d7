"""Exceptions raised by the EOB review engine."""


class EOBReviewError(Exception):
    """Base class for EOB review failures."""


class ExtractionFailed(EOBReviewError):
    """The model response could not be turned into a claim record."""


class NoAppealableIssues(EOBReviewError):
    """An appeal letter was requested for a record with nothing to appeal."""


class UnsupportedDocument(EOBReviewError):
    """The document text does not look like an Explanation of Benefits."""

    def __init__(self, confidence: int, reason: str):
        super().__init__(reason)
        self.confidence = confidence
        self.reason = reason


class AppealGenerationFailed(EOBReviewError):
    """The model call for an appeal letter failed or returned nothing."""
