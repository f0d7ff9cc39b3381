"""Data models for receipt extraction results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

CATEGORIES: tuple[str, ...] = (
    "protein",
    "vegetables",
    "fruits",
    "dairy",
    "grains",
    "oils",
    "spices",
    "herbs",
    "pantry",
    "other",
)

PRICE_FROM_RECEIPT = "receipt"
PRICE_ESTIMATED = "estimated"


@dataclass(frozen=True)
class ItemCandidate:
    """A provisional (name, price) pair before cleaning and validation."""

    name: str              # Raw line text
    price: float
    confidence: float
    price_source: str = PRICE_FROM_RECEIPT
    line_number: int = -1


@dataclass(frozen=True)
class ExtractedItem:
    """A purchased item ready to be offered for the pantry."""

    id: str
    name: str              # Cleaned display name
    price: float           # Line total, not unit price
    category: str          # One of CATEGORIES
    confidence: float
    quantity: float = 1.0
    unit: str = "each"
    price_source: str = PRICE_FROM_RECEIPT

    @property
    def is_estimated(self) -> bool:
        return self.price_source == PRICE_ESTIMATED

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "price": self.price,
            "category": self.category,
            "confidence": self.confidence,
            "price_source": self.price_source,
        }


@dataclass
class ReceiptSummary:
    """Everything extracted from one receipt transcript."""

    id: str
    store_name: str
    purchase_date: date
    total_amount: float = 0.0
    tax_amount: float = 0.0
    subtotal_amount: float = 0.0
    items: list[ExtractedItem] = field(default_factory=list)
    raw_text: str = ""
    confidence: float = 0.7

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def items_total(self) -> float:
        """Sum of item prices, rounded to cents."""
        return round(sum(item.price for item in self.items), 2)

    @property
    def estimated_items(self) -> list[ExtractedItem]:
        """Items whose price was estimated rather than read from the receipt."""
        return [item for item in self.items if item.is_estimated]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "store_name": self.store_name,
            "purchase_date": self.purchase_date.isoformat(),
            "total_amount": self.total_amount,
            "tax_amount": self.tax_amount,
            "subtotal_amount": self.subtotal_amount,
            "items": [item.to_dict() for item in self.items],
            "raw_text": self.raw_text,
            "confidence": self.confidence,
        }
