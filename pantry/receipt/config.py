"""TOML configuration loader for receipt extraction."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .models import CATEGORIES
from .taxonomy import (
    DEFAULT_CATEGORY_KEYWORDS,
    DEFAULT_ESTIMATED_PRICE,
    DEFAULT_PRICE_ESTIMATES,
    categorize,
    estimate_price,
)

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

CONFIG_ENV_VAR = "PANTRY_RECEIPT_CONFIG"

DEFAULT_RETAILERS: tuple[str, ...] = (
    "WHOLE FOODS",
    "TRADER JOE",
    "SAFEWAY",
    "KROGER",
    "WALMART",
    "TARGET",
    "COSTCO",
)


@dataclass(frozen=True)
class ExtractionRules:
    """Immutable heuristic tables and thresholds used by the pipeline."""

    category_keywords: tuple[tuple[str, tuple[str, ...]], ...] = DEFAULT_CATEGORY_KEYWORDS
    price_estimates: tuple[tuple[str, float], ...] = DEFAULT_PRICE_ESTIMATES
    default_estimated_price: float = DEFAULT_ESTIMATED_PRICE
    retailers: tuple[str, ...] = DEFAULT_RETAILERS
    min_primary_items: int = 10
    fallback_cap: int = 20
    header_lines: int = 5
    totals_window: int = 10
    max_price: float = 500.0
    min_name_length: int = 2
    min_text_length: int = 6
    default_confidence: float = 0.7

    def categorize(self, name: str) -> str:
        return categorize(name, self.category_keywords)

    def estimate_price(self, name: str) -> float:
        return estimate_price(
            name, self.price_estimates, self.default_estimated_price
        )


DEFAULT_RULES = ExtractionRules()


@dataclass
class ExtractionConfig:
    min_primary_items: int = 10
    fallback_cap: int = 20
    header_lines: int = 5
    totals_window: int = 10
    max_price: float = 500.0
    min_name_length: int = 2
    min_text_length: int = 6
    default_confidence: float = 0.7
    default_estimated_price: float = DEFAULT_ESTIMATED_PRICE


@dataclass
class StoresConfig:
    retailers: list[str] = field(default_factory=lambda: list(DEFAULT_RETAILERS))


@dataclass
class ReceiptConfig:
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    stores: StoresConfig = field(default_factory=StoresConfig)
    categories: dict[str, list[str]] = field(default_factory=lambda: {
        category: list(keywords)
        for category, keywords in DEFAULT_CATEGORY_KEYWORDS
    })
    price_estimates: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_PRICE_ESTIMATES)
    )

    def to_rules(self) -> ExtractionRules:
        """Freeze this configuration into the rules the pipeline consumes."""
        ext = self.extraction
        return ExtractionRules(
            category_keywords=tuple(
                (category, tuple(k.lower() for k in keywords))
                for category, keywords in self.categories.items()
            ),
            price_estimates=tuple(
                (keyword.lower(), float(price))
                for keyword, price in self.price_estimates.items()
            ),
            default_estimated_price=ext.default_estimated_price,
            retailers=tuple(r.upper() for r in self.stores.retailers),
            min_primary_items=ext.min_primary_items,
            fallback_cap=ext.fallback_cap,
            header_lines=ext.header_lines,
            totals_window=ext.totals_window,
            max_price=ext.max_price,
            min_name_length=ext.min_name_length,
            min_text_length=ext.min_text_length,
            default_confidence=ext.default_confidence,
        )


def load_config(path: str | Path | None = None) -> ReceiptConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    When ``path`` is None the PANTRY_RECEIPT_CONFIG environment variable
    is consulted.

    Raises:
        ValueError: If the file names a category outside the fixed taxonomy.
    """
    raw: dict = {}

    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None

    if path is not None:
        p = Path(path).expanduser()
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    ext = raw.get("extraction", {})
    sto = raw.get("stores", {})
    cat = raw.get("categories", {})
    est = raw.get("price_estimates", {})

    defaults = ExtractionConfig()

    # Custom keyword lists replace the default list of that category only
    categories = ReceiptConfig().categories
    for category, keywords in cat.items():
        if category not in CATEGORIES or category == "other":
            raise ValueError(
                f"Unknown category {category!r} "
                f"(choose from: {', '.join(CATEGORIES[:-1])})"
            )
        categories[category] = [str(k) for k in keywords]

    # Merge custom price estimates with defaults
    default_estimates = dict(DEFAULT_PRICE_ESTIMATES)
    price_estimates = {**default_estimates, **{k: float(v) for k, v in est.items()}}

    return ReceiptConfig(
        extraction=ExtractionConfig(
            min_primary_items=ext.get("min_primary_items", defaults.min_primary_items),
            fallback_cap=ext.get("fallback_cap", defaults.fallback_cap),
            header_lines=ext.get("header_lines", defaults.header_lines),
            totals_window=ext.get("totals_window", defaults.totals_window),
            max_price=float(ext.get("max_price", defaults.max_price)),
            min_name_length=ext.get("min_name_length", defaults.min_name_length),
            min_text_length=ext.get("min_text_length", defaults.min_text_length),
            default_confidence=float(
                ext.get("default_confidence", defaults.default_confidence)
            ),
            default_estimated_price=float(
                ext.get("default_estimated_price", defaults.default_estimated_price)
            ),
        ),
        stores=StoresConfig(
            retailers=sto.get("retailers", list(DEFAULT_RETAILERS)),
        ),
        categories=categories,
        price_estimates=price_estimates,
    )
