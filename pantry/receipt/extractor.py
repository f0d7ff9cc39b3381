"""Receipt extraction pipeline: recognized text in, ReceiptSummary out."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable
from datetime import date

from .config import DEFAULT_RULES, ExtractionRules, ReceiptConfig
from .fallback import needs_fallback, scan_fallback
from .header import extract_date, extract_store_name, extract_totals
from .items import build_items, merge_and_dedupe, number_items
from .lines import normalize_lines
from .models import ExtractedItem, ReceiptSummary
from .segmenter import segment

logger = logging.getLogger(__name__)


class NoTextFoundError(ValueError):
    """Raised when a transcript is empty or too short to hold a receipt."""


class ReceiptExtractor:
    """Converts OCR transcripts of grocery receipts into structured data.

    Holds only immutable rules, so one instance can serve any number of
    receipts, concurrently or not.
    """

    def __init__(
        self,
        rules: ExtractionRules = DEFAULT_RULES,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._rules = rules
        self._clock = clock

    @classmethod
    def from_config(cls, config: ReceiptConfig) -> ReceiptExtractor:
        return cls(config.to_rules())

    @property
    def rules(self) -> ExtractionRules:
        return self._rules

    def extract(
        self, raw_text: str, ocr_confidence: float | None = None
    ) -> ReceiptSummary:
        """Extract store, date, totals and items from a transcript.

        Args:
            raw_text: Text recognized from the receipt image.
            ocr_confidence: Optional confidence reported by the OCR step.

        Raises:
            NoTextFoundError: If the transcript is empty or near-empty.
        """
        rules = self._rules
        lines = normalize_lines(raw_text)
        if len("".join(lines)) < rules.min_text_length:
            raise NoTextFoundError("no text found")

        logger.debug("Extracting receipt with %d line(s)", len(lines))

        primary = build_items(segment(lines, rules), rules)
        fallback: list[ExtractedItem] = []
        if needs_fallback(len(primary), rules):
            fallback = build_items(scan_fallback(lines, rules), rules)
            logger.debug(
                "Primary pass found %d item(s); fallback added %d candidate(s)",
                len(primary), len(fallback),
            )

        items = number_items(merge_and_dedupe(primary, fallback))
        totals = extract_totals(lines, rules)

        summary = ReceiptSummary(
            id=receipt_id(raw_text),
            store_name=extract_store_name(lines, rules),
            purchase_date=extract_date(lines, today=self._clock()),
            total_amount=totals.total,
            tax_amount=totals.tax,
            subtotal_amount=totals.subtotal,
            items=items,
            raw_text=raw_text,
            confidence=self._overall_confidence(ocr_confidence),
        )
        logger.info(
            "Extracted %d item(s) from %s (total %.2f)",
            summary.item_count, summary.store_name, summary.total_amount,
        )
        return summary

    def _overall_confidence(self, ocr_confidence: float | None) -> float:
        if ocr_confidence is None:
            return self._rules.default_confidence
        return min(max(float(ocr_confidence), 0.0), 1.0)


def receipt_id(raw_text: str) -> str:
    """Stable identifier derived from the transcript content."""
    return hashlib.sha1(raw_text.encode("utf-8")).hexdigest()[:12]


def extract_receipt(
    raw_text: str,
    ocr_confidence: float | None = None,
    rules: ExtractionRules = DEFAULT_RULES,
) -> ReceiptSummary:
    """Convenience wrapper around ``ReceiptExtractor(rules).extract``."""
    return ReceiptExtractor(rules).extract(raw_text, ocr_confidence)
