"""Shared types for EOB review schemas."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class IssueType(str, Enum):
    """Kinds of problems the issue analyzer can report."""

    DUPLICATE_BILLING = "duplicate_billing"
    DENIAL = "denial"
    HIGH_COST = "high_cost"
    OUT_OF_NETWORK = "out_of_network"


class IssueSeverity(str, Enum):
    """Display severity for an issue. Not used for ordering."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CamelModel(BaseModel):
    """Base model whose JSON form uses camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DetectionResult(CamelModel):
    """Outcome of classifying a document as an EOB or not."""

    is_eob: bool
    confidence: int
    reason: str
