"""Primary item pass: a single forward walk over the receipt lines.

The walk is an explicit finite-state machine. ``transition`` is a pure
function from (state, line) to (next state, emitted candidates), so each
branch can be exercised on its own:

* ``Idle`` -- no name is waiting for a price.
* ``AwaitingPrice`` -- a name-only line was seen; its price may arrive on
  the next line, never (estimated), or be superseded by another line.
* ``Terminated`` -- an end-of-items marker was reached; later lines are
  ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from .config import DEFAULT_RULES, ExtractionRules
from .lines import (
    is_end_marker,
    is_section_header,
    is_skippable,
    is_store_banner,
    looks_like_item_name,
    parse_combined,
    parse_price_only,
)
from .models import PRICE_ESTIMATED, ItemCandidate

logger = logging.getLogger(__name__)

CONFIDENCE_PRICE_NEXT_LINE = 0.9
CONFIDENCE_PRICE_SAME_LINE = 0.85
CONFIDENCE_ESTIMATED = 0.7
CONFIDENCE_ESTIMATED_UNRESOLVED = 0.6

_BANNER_MIN_LENGTH = 10


@dataclass(frozen=True)
class Idle:
    in_item_section: bool = False


@dataclass(frozen=True)
class AwaitingPrice:
    name: str
    line_number: int
    in_item_section: bool = False


@dataclass(frozen=True)
class Terminated:
    pass


SegmenterState = Idle | AwaitingPrice | Terminated


def transition(
    state: SegmenterState,
    line: str,
    line_number: int,
    rules: ExtractionRules = DEFAULT_RULES,
) -> tuple[SegmenterState, list[ItemCandidate]]:
    """Advance the machine by one line.

    Returns:
        (next_state, candidates emitted while consuming this line)
    """
    match state:
        case Terminated():
            return state, []
        case AwaitingPrice():
            pending: AwaitingPrice | None = state
        case _:
            pending = None

    in_section = state.in_item_section

    if is_end_marker(line):
        flushed = _flush(pending, rules, CONFIDENCE_ESTIMATED_UNRESOLVED)
        return Terminated(), flushed

    if is_section_header(line):
        return replace(state, in_item_section=True), []

    if is_skippable(line, rules):
        if is_store_banner(line, rules):
            return replace(state, in_item_section=True), []
        return state, []

    price = parse_price_only(line)
    if price is not None:
        if pending is None:
            # Orphan price with nothing to attach to
            return state, []
        candidate = ItemCandidate(
            name=pending.name,
            price=price,
            confidence=CONFIDENCE_PRICE_NEXT_LINE,
            line_number=pending.line_number,
        )
        return Idle(in_section), [candidate]

    combined = parse_combined(line)
    if combined is not None:
        name, price = combined
        candidate = ItemCandidate(
            name=name,
            price=price,
            confidence=CONFIDENCE_PRICE_SAME_LINE,
            line_number=line_number,
        )
        return Idle(in_section), [candidate]

    if not looks_like_item_name(line):
        return state, []

    if line_number == 0 and not in_section:
        # First line doubles as the store name when no retailer is known
        return replace(state, in_item_section=True), []
    if _is_header_banner(line, line_number, rules):
        in_section = True

    flushed = _flush(pending, rules, CONFIDENCE_ESTIMATED)
    return AwaitingPrice(line, line_number, in_section), flushed


def finish(
    state: SegmenterState, rules: ExtractionRules = DEFAULT_RULES
) -> list[ItemCandidate]:
    """Flush a name still waiting for a price when the input runs out."""
    match state:
        case AwaitingPrice():
            return _flush(state, rules, CONFIDENCE_ESTIMATED_UNRESOLVED)
        case _:
            return []


def segment(
    lines: list[str], rules: ExtractionRules = DEFAULT_RULES
) -> list[ItemCandidate]:
    """Run the state machine over all lines and collect item candidates."""
    state: SegmenterState = Idle()
    candidates: list[ItemCandidate] = []

    for number, line in enumerate(lines):
        state, emitted = transition(state, line, number, rules)
        candidates.extend(emitted)
        if isinstance(state, Terminated):
            logger.debug("Item list ended at line %d: %r", number, line)
            break

    candidates.extend(finish(state, rules))
    return candidates


def _flush(
    pending: AwaitingPrice | None,
    rules: ExtractionRules,
    confidence: float,
) -> list[ItemCandidate]:
    if pending is None:
        return []
    return [
        ItemCandidate(
            name=pending.name,
            price=rules.estimate_price(pending.name),
            confidence=confidence,
            price_source=PRICE_ESTIMATED,
            line_number=pending.line_number,
        )
    ]


def _is_header_banner(line: str, line_number: int, rules: ExtractionRules) -> bool:
    """A long all-caps line near the top of the receipt.

    Only marks the start of the item section; the line itself is still a
    name candidate, since many receipts print every item in capitals.
    """
    return (
        line_number < rules.header_lines
        and len(line) >= _BANNER_MIN_LENGTH
        and line.isupper()
    )
