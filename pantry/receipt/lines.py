"""Line splitting and per-line classification for receipt transcripts.

Every function here looks at a single line in isolation. The segmenter and
the fallback scanner combine them into their own policies.
"""

from __future__ import annotations

import re

from .config import DEFAULT_RULES, ExtractionRules

# Lines that close the item list (totals, tenders, footers)
_END_MARKER = re.compile(
    r"^(?:sub\s*-?\s*total|sales\s+tax|amount\s+due|"
    r"change(?:\s+due)?|payment|tender(?:ed)?|cash|visa|master\s*card|amex|"
    r"discover|debit|credit|ebt|thank\s*you|thanks)\b",
    re.IGNORECASE,
)
# Bare amount labels; "TOTAL CEREAL" is an item, "TOTAL DUE" is not
_AMOUNT_LABEL = re.compile(r"^(?:total|tax|balance)\b(?P<rest>.*)$", re.IGNORECASE)
_AMOUNT_LABEL_WORDS: frozenset[str] = frozenset({
    "due", "amount", "amt", "sale", "sales", "paid", "purchase", "items",
    "item", "savings", "tax", "total", "balance", "owed", "remaining",
    "exempt", "number", "of", "sold", "usd",
})
_WORD = re.compile(r"[A-Za-z]+")

# Non-item boilerplate that may appear anywhere on the receipt
_SKIP_PATTERNS = re.compile(
    r"(?:super)?market$|grocery$|"
    r"\bstore\s*#|\bcashier\b|\bregister\b|\breg\s*#|\btrans(?:action)?\s*#|"
    r"\breceipt\b|\bdate\s*:|\btime\s*:|\bmember\b|\byou\s+saved\b|"
    r"\bsavings\b|\bcoupon\b|\bapproved\b|\bauth(?:orization)?\b|"
    r"www\.|\.com\b|\*{3,}\s*\d{4}",
    re.IGNORECASE,
)

_SECTION_HEADERS: frozenset[str] = frozenset({
    "PRODUCE", "GROCERY", "DAIRY", "MEAT", "MEATS", "SEAFOOD", "DELI",
    "BAKERY", "FROZEN", "FROZEN FOODS", "BEVERAGES", "HOUSEHOLD",
    "REFRIGERATED", "SNACKS", "PANTRY", "GENERAL MERCHANDISE",
    "HEALTH & BEAUTY",
})
# Aisle-numbered headers such as "21-GROCERY" or "33: BAKERY"
_SECTION_WITH_AISLE = re.compile(r"^\d{1,2}\s*[-:]\s*([A-Z][A-Z &]+)$")

_PHONE = re.compile(r"\(?\d{3}\)?[\s.-]?\d{3}[\s.-]\d{4}\b")
_STREET_ADDRESS = re.compile(
    r"^\d+\s+(?:[A-Za-z0-9.']+\s+)+"
    r"(?:street|st|avenue|ave|road|rd|boulevard|blvd|drive|dr|lane|ln|way|"
    r"highway|hwy|parkway|pkwy|court|place)\b\.?",
    re.IGNORECASE,
)
_CITY_STATE_ZIP = re.compile(r",\s*[A-Z]{2}\s+\d{5}(?:-\d{4})?\b")
_DATE_SHAPE = re.compile(
    r"\b\d{1,2}[/-]\d{1,2}[/-]\d{2,4}\b|\b\d{4}-\d{2}-\d{2}\b"
)
_TIME_ONLY = re.compile(r"^\d{1,2}:\d{2}(?::\d{2})?\s*(?:[AP]M)?$", re.IGNORECASE)

# Trailing tax code letter, never a unit such as "lb"
_TAX_CODE = r"(?:\s*(?!(?:lb|oz|ct|kg|ea|pk)\b)[A-Z]{1,2})?"

# "$3.49", "3.49", "$3.49 F" (trailing tax code)
_PRICE_ONLY = re.compile(r"^\$?\s?(\d+\.\d{2})" + _TAX_CODE + r"$", re.IGNORECASE)

# Name followed by a price on the same line, "$" form tried first
_COMBINED_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"^(?P<name>.*?[A-Za-z].*?)\s+\$\s?(?P<price>\d+\.\d{2})" + _TAX_CODE + r"$",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(?P<name>.*?[A-Za-z].*?)\s+(?P<price>\d+\.\d{2})" + _TAX_CODE + r"$",
        re.IGNORECASE,
    ),
)

_LETTER = re.compile(r"[A-Za-z]")


def normalize_lines(text: str) -> list[str]:
    """Split a transcript into trimmed, non-empty lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def has_letter(line: str) -> bool:
    return _LETTER.search(line) is not None


def is_end_marker(line: str) -> bool:
    """True for lines after which no more items are listed."""
    if _END_MARKER.match(line):
        return True
    m = _AMOUNT_LABEL.match(line)
    if m is None:
        return False
    # Single letters are tax codes or currency marks
    return all(
        len(word) == 1 or word.lower() in _AMOUNT_LABEL_WORDS
        for word in _WORD.findall(m.group("rest"))
    )


def is_label_lookalike(line: str) -> bool:
    """True for item lines that merely start with "total", "tax" or "balance"."""
    return _AMOUNT_LABEL.match(line) is not None and not is_end_marker(line)


def is_section_header(line: str) -> bool:
    """True for department headers such as "PRODUCE" or "21-GROCERY"."""
    normalized = re.sub(r"\s+", " ", line.strip().upper()).rstrip(":")
    if normalized in _SECTION_HEADERS:
        return True
    m = _SECTION_WITH_AISLE.match(normalized)
    return m is not None and m.group(1).strip() in _SECTION_HEADERS


def is_phone_number(line: str) -> bool:
    return _PHONE.search(line) is not None


def is_address(line: str) -> bool:
    return (
        _STREET_ADDRESS.match(line) is not None
        or _CITY_STATE_ZIP.search(line) is not None
    )


def is_date_or_time(line: str) -> bool:
    return (
        _DATE_SHAPE.search(line) is not None
        or _TIME_ONLY.match(line) is not None
    )


def is_store_banner(line: str, rules: ExtractionRules = DEFAULT_RULES) -> bool:
    """True if the line names a known retailer."""
    upper = line.upper()
    return any(upper.startswith(retailer) for retailer in rules.retailers)


def is_skippable(line: str, rules: ExtractionRules = DEFAULT_RULES) -> bool:
    """True for store header boilerplate, payment lines, addresses and phones."""
    return (
        is_store_banner(line, rules)
        or _SKIP_PATTERNS.search(line) is not None
        or is_phone_number(line)
        or is_address(line)
        or is_date_or_time(line)
    )


def parse_price_only(line: str) -> float | None:
    """Return the amount if the line is nothing but a price."""
    m = _PRICE_ONLY.match(line)
    if m is None:
        return None
    return float(m.group(1))


def parse_combined(line: str) -> tuple[str, float] | None:
    """Split a "name ... price" line into its name and price."""
    for pattern in _COMBINED_PATTERNS:
        m = pattern.match(line)
        if m:
            return m.group("name").strip(), float(m.group("price"))
    return None


def looks_like_item_name(line: str) -> bool:
    """True if a name-only line could plausibly be a purchased item."""
    if not has_letter(line):
        return False
    if not 3 <= len(line) <= 100:
        return False
    if parse_price_only(line) is not None:
        return False
    if is_date_or_time(line) or is_phone_number(line):
        return False
    return True
