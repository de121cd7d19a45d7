"""Downloadable renderings of an EOB record."""

from .appeal_letter import build_appeal_prompt, generate_appeal_letter
from .csv_export import CSV_HEADERS, export_csv

__all__ = [
    "CSV_HEADERS",
    "export_csv",
    "build_appeal_prompt",
    "generate_appeal_letter",
]
