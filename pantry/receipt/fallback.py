"""Permissive second pass for receipts the primary pass under-matched."""

from __future__ import annotations

import logging

from .config import DEFAULT_RULES, ExtractionRules
from .header import extract_store_name
from .lines import (
    has_letter,
    is_address,
    is_date_or_time,
    is_end_marker,
    is_phone_number,
    is_section_header,
    is_skippable,
    parse_combined,
    parse_price_only,
)
from .models import PRICE_ESTIMATED, ItemCandidate

logger = logging.getLogger(__name__)

CONFIDENCE_FALLBACK = 0.5

_MIN_LENGTH = 4
_MAX_LENGTH = 80


def needs_fallback(primary_count: int, rules: ExtractionRules = DEFAULT_RULES) -> bool:
    """A small primary yield suggests the strict pass missed items."""
    return primary_count < rules.min_primary_items


def scan_fallback(
    lines: list[str], rules: ExtractionRules = DEFAULT_RULES
) -> list[ItemCandidate]:
    """Treat every plausible-looking line as an item.

    Unlike the primary pass this does not stop at end-of-items markers; it
    only ignores them. At most ``rules.fallback_cap`` candidates are
    returned. The line chosen as the store name is never an item.
    """
    candidates: list[ItemCandidate] = []
    store_line = extract_store_name(lines, rules)

    for number, line in enumerate(lines):
        if len(candidates) >= rules.fallback_cap:
            logger.debug("Fallback cap of %d reached at line %d", rules.fallback_cap, number)
            break
        if not _is_fallback_item(line, rules):
            continue

        combined = parse_combined(line)
        if combined is None and line == store_line:
            continue
        if combined is not None:
            name, price = combined
            candidates.append(
                ItemCandidate(
                    name=name,
                    price=price,
                    confidence=CONFIDENCE_FALLBACK,
                    line_number=number,
                )
            )
        else:
            candidates.append(
                ItemCandidate(
                    name=line,
                    price=rules.estimate_price(line),
                    confidence=CONFIDENCE_FALLBACK,
                    price_source=PRICE_ESTIMATED,
                    line_number=number,
                )
            )

    return candidates


def _is_fallback_item(line: str, rules: ExtractionRules) -> bool:
    if not _MIN_LENGTH <= len(line) <= _MAX_LENGTH:
        return False
    if not has_letter(line):
        return False
    if is_end_marker(line) or is_section_header(line) or is_skippable(line, rules):
        return False
    if is_date_or_time(line) or is_phone_number(line) or is_address(line):
        return False
    # "$3.49 F" has a letter but is still just a price
    return parse_price_only(line) is None
