"""Store name, purchase date and totals from the edges of a receipt."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from .config import DEFAULT_RULES, ExtractionRules
from .lines import is_label_lookalike

UNKNOWN_STORE = "Unknown Store"

_STORE_SUFFIX = re.compile(r"(?:MARKET|GROCERY)$", re.IGNORECASE)

# (month, day, year) capture groups, tried in order on each line
_DATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"Date:\s*(\d{1,2})/(\d{1,2})/(\d{2,4})\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{2,4})\b"),
    re.compile(r"\b(\d{1,2})-(\d{1,2})-(\d{4})\b"),
)
_ISO_DATE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")

_SUBTOTAL = re.compile(r"\bsub\s*-?\s*total\b.*?\$?(\d+\.\d{2})", re.IGNORECASE)
_TAX = re.compile(r"\btax\b.*?\$?(\d+\.\d{2})", re.IGNORECASE)
_TOTAL = re.compile(r"(?<![A-Za-z])total\b.*?\$?(\d+\.\d{2})", re.IGNORECASE)


@dataclass(frozen=True)
class ReceiptTotals:
    total: float = 0.0
    tax: float = 0.0
    subtotal: float = 0.0


def extract_store_name(
    lines: list[str], rules: ExtractionRules = DEFAULT_RULES
) -> str:
    """Find the store name among the first few lines.

    Known retailer names and lines ending in MARKET/GROCERY win; otherwise
    the first line is assumed to be the store banner.
    """
    for line in lines[: rules.header_lines]:
        upper = line.upper()
        if any(upper.startswith(retailer) for retailer in rules.retailers):
            return line
        if _STORE_SUFFIX.search(line):
            return line
    return lines[0] if lines else UNKNOWN_STORE


def extract_date(lines: list[str], today: date | None = None) -> date:
    """Return the first valid purchase date found, or ``today``."""
    for line in lines:
        for pattern in _DATE_PATTERNS:
            m = pattern.search(line)
            if m:
                parsed = _to_date(m.group(3), m.group(1), m.group(2))
                if parsed is not None:
                    return parsed
        m = _ISO_DATE.search(line)
        if m:
            parsed = _to_date(m.group(1), m.group(2), m.group(3))
            if parsed is not None:
                return parsed
    return today or date.today()


def _to_date(year: str, month: str, day: str) -> date | None:
    y = int(year)
    if y < 100:
        y += 2000
    try:
        return date(y, int(month), int(day))
    except ValueError:
        return None


def extract_totals(
    lines: list[str], rules: ExtractionRules = DEFAULT_RULES
) -> ReceiptTotals:
    """Read total, tax and subtotal from the last lines of the receipt.

    Only the trailing window is searched so item prices can't be mistaken
    for totals. The first match per label wins; missing labels are 0.
    """
    total = tax = subtotal = None

    for line in lines[-rules.totals_window:]:
        if is_label_lookalike(line):
            continue

        m = _SUBTOTAL.search(line)
        if m:
            if subtotal is None:
                subtotal = float(m.group(1))
            continue

        m = _TAX.search(line)
        if m:
            if tax is None:
                tax = float(m.group(1))
            continue

        m = _TOTAL.search(line)
        if m and total is None:
            total = float(m.group(1))

    return ReceiptTotals(
        total=total or 0.0,
        tax=tax or 0.0,
        subtotal=subtotal or 0.0,
    )
