"""Keyword tables for categorizing items and estimating missing prices."""

from __future__ import annotations

# Ordered: the first category with a matching keyword wins.
DEFAULT_CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("protein", (
        "chicken", "beef", "pork", "fish", "salmon", "tuna", "turkey",
        "eggs", "tofu", "beans",
    )),
    ("vegetables", (
        "tomato", "onion", "carrot", "broccoli", "spinach", "lettuce",
        "pepper", "celery", "cucumber",
    )),
    ("fruits", (
        "banana", "apple", "orange", "grape", "berry", "avocado", "lemon",
        "lime", "peach",
    )),
    ("dairy", ("milk", "cheese", "yogurt", "butter", "cream", "sour cream")),
    ("grains", ("bread", "rice", "pasta", "oats", "flour", "quinoa", "cereal")),
    ("oils", ("oil", "olive oil", "vegetable oil", "coconut oil")),
    ("spices", ("salt", "pepper", "garlic powder", "onion powder", "paprika")),
    ("herbs", ("basil", "oregano", "thyme", "cilantro", "parsley")),
    ("pantry", ("sugar", "flour", "baking powder", "vanilla", "honey", "vinegar")),
)

# Ordered keyword -> price pairs used when a line never showed a price.
DEFAULT_PRICE_ESTIMATES: tuple[tuple[str, float], ...] = (
    ("organic", 8.99),
    ("meat", 12.99),
    ("chicken", 12.99),
    ("beef", 12.99),
    ("pork", 12.99),
    ("steak", 12.99),
    ("turkey", 12.99),
    ("salmon", 12.99),
    ("produce", 4.99),
)

DEFAULT_ESTIMATED_PRICE = 4.99

FALLBACK_CATEGORY = "other"


def categorize(
    name: str,
    category_keywords: tuple[tuple[str, tuple[str, ...]], ...] = DEFAULT_CATEGORY_KEYWORDS,
) -> str:
    """Return the category of a cleaned item name.

    Matching is a case-insensitive substring test, so "Roma Tomatoes"
    matches the "tomato" keyword.
    """
    lowered = name.lower()
    for category, keywords in category_keywords:
        for keyword in keywords:
            if keyword in lowered:
                return category
    return FALLBACK_CATEGORY


def estimate_price(
    name: str,
    price_estimates: tuple[tuple[str, float], ...] = DEFAULT_PRICE_ESTIMATES,
    default: float = DEFAULT_ESTIMATED_PRICE,
) -> float:
    """Guess a price for an item whose receipt line carried none."""
    lowered = name.lower()
    for keyword, price in price_estimates:
        if keyword in lowered:
            return price
    return default
