"""Turn item candidates into validated, categorized, de-duplicated items."""

from __future__ import annotations

import logging
import re
from dataclasses import replace

from .config import DEFAULT_RULES, ExtractionRules
from .lines import has_letter
from .models import ExtractedItem, ItemCandidate

logger = logging.getLogger(__name__)

_ORGANIC_PREFIX = re.compile(r"^(?:ORGANIC|ORG)\s+", re.IGNORECASE)
_ORGANIC_SUFFIX = re.compile(r"\s+(?:ORGANIC|ORG)$", re.IGNORECASE)
_SIZE_SUFFIX = re.compile(r"\s+\d+(?:\.\d+)?\s*(?:LB|OZ|CT|GAL)S?$", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def clean_item_name(raw: str) -> str:
    """Normalize a receipt item name for display.

    Strips organic qualifiers and trailing weight/count labels, then
    capitalizes each word: "ORGANIC BANANAS 2 LBS" -> "Bananas".
    """
    name = raw.strip()

    # Qualifiers can be stacked ("Spinach Organic 5 oz"), so repeat until stable
    previous = None
    while name != previous:
        previous = name
        name = _ORGANIC_PREFIX.sub("", name)
        name = _ORGANIC_SUFFIX.sub("", name)
        name = _SIZE_SUFFIX.sub("", name)
        name = name.strip(" :-*")

    return " ".join(word[:1].upper() + word[1:].lower() for word in name.split())


def is_valid_item(
    name: str, price: float, rules: ExtractionRules = DEFAULT_RULES
) -> bool:
    """Gate applied to every item before it reaches the output."""
    return (
        len(name) >= rules.min_name_length
        and 0 < price < rules.max_price
        and has_letter(name)
    )


def build_items(
    candidates: list[ItemCandidate], rules: ExtractionRules = DEFAULT_RULES
) -> list[ExtractedItem]:
    """Clean, validate and categorize candidates, preserving order.

    Candidates failing the validity gate are dropped silently; ids are
    left blank until the final list is numbered.
    """
    items: list[ExtractedItem] = []
    for candidate in candidates:
        name = clean_item_name(candidate.name)
        if not is_valid_item(name, candidate.price, rules):
            logger.debug(
                "Dropped line %d %r (price %.2f)",
                candidate.line_number, candidate.name, candidate.price,
            )
            continue

        items.append(
            ExtractedItem(
                id="",
                name=name,
                price=round(candidate.price, 2),
                category=rules.categorize(name),
                confidence=candidate.confidence,
                price_source=candidate.price_source,
            )
        )
    return items


def normalized_key(name: str) -> str:
    """Lowercased name with all whitespace removed."""
    return _WHITESPACE.sub("", name.lower())


def dedupe_items(items: list[ExtractedItem]) -> list[ExtractedItem]:
    """Keep the first item for each normalized name."""
    seen: set[str] = set()
    unique: list[ExtractedItem] = []
    for item in items:
        key = normalized_key(item.name)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def merge_and_dedupe(
    primary: list[ExtractedItem], fallback: list[ExtractedItem]
) -> list[ExtractedItem]:
    """Combine both passes; primary-pass items win over fallback duplicates."""
    merged = dedupe_items([*primary, *fallback])
    dropped = len(primary) + len(fallback) - len(merged)
    if dropped:
        logger.debug("Removed %d duplicate item(s)", dropped)
    return merged


def number_items(items: list[ExtractedItem]) -> list[ExtractedItem]:
    """Assign run-unique ids ``item-1``, ``item-2``, ... in output order."""
    return [replace(item, id=f"item-{i}") for i, item in enumerate(items, start=1)]
