"""Configuration for the EOB review engine."""

import logging
import os
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "EOB_REVIEW_CONFIG"
CONFIG_FILE = "configs/config.json"
DEFAULT_CONFIG_FILE = Path(CONFIG_FILE)

# Characters of document text sent to the model. Trades cost and latency
# against coverage; longer documents are truncated, not rejected.
MAX_DOCUMENT_CHARS = 12_000


class ExtractionSettings(BaseModel):
    """Model settings for claim extraction."""

    model: str = "gpt-4o"
    temperature: float = 0.1
    max_tokens: int = 4000
    max_document_chars: int = MAX_DOCUMENT_CHARS


class AppealSettings(BaseModel):
    """Model settings for appeal letter generation."""

    model: str = "gpt-4o"
    temperature: float = 0.3
    max_tokens: int = 1500


class AnalyzerConfig(BaseModel):
    """Root configuration, one section per model-backed step."""

    extract: ExtractionSettings = ExtractionSettings()
    appeal: AppealSettings = AppealSettings()


def load_config(path: str | Path | None = None) -> AnalyzerConfig:
    """Load configuration from a JSON file for the service entry points.

    Workflow steps receive the same sections through resource injection.

    The path defaults to $EOB_REVIEW_CONFIG, then configs/config.json.
    A missing file yields the built-in defaults.
    """
    if path is None:
        path = os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE
    config_path = Path(path)

    if not config_path.is_file():
        logger.debug("No config file at %s, using defaults", config_path)
        return AnalyzerConfig()

    return AnalyzerConfig.model_validate_json(config_path.read_text())
