"""Grocery receipt extraction: OCR text to pantry-ready items."""

from .config import (
    DEFAULT_RULES,
    ExtractionConfig,
    ExtractionRules,
    ReceiptConfig,
    StoresConfig,
    load_config,
)
from .extractor import NoTextFoundError, ReceiptExtractor, extract_receipt
from .models import CATEGORIES, ExtractedItem, ItemCandidate, ReceiptSummary

__all__ = [
    "ReceiptExtractor",
    "extract_receipt",
    "NoTextFoundError",
    "ReceiptSummary",
    "ExtractedItem",
    "ItemCandidate",
    "CATEGORIES",
    "ExtractionRules",
    "DEFAULT_RULES",
    "ReceiptConfig",
    "ExtractionConfig",
    "StoresConfig",
    "load_config",
]
