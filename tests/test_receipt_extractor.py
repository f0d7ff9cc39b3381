"""End-to-end tests for the receipt extraction pipeline."""

from datetime import date

import pytest

from pantry.receipt.config import ExtractionRules
from pantry.receipt.extractor import (
    NoTextFoundError,
    ReceiptExtractor,
    extract_receipt,
    receipt_id,
)
from pantry.receipt.items import normalized_key

TODAY = date(2026, 10, 18)


@pytest.fixture
def extractor():
    return ReceiptExtractor(clock=lambda: TODAY)


class TestExtractWholeFoods:
    def test_header_fields(self, extractor, whole_foods_text):
        summary = extractor.extract(whole_foods_text)
        assert summary.store_name == "WHOLE FOODS MARKET"
        assert summary.purchase_date == date(2025, 9, 10)
        assert summary.total_amount == 58.46
        assert summary.tax_amount == 4.33
        assert summary.subtotal_amount == 54.13

    def test_items(self, extractor, whole_foods_text):
        summary = extractor.extract(whole_foods_text)
        assert [(i.name, i.category) for i in summary.items] == [
            ("Bananas", "fruits"),
            ("Avocados Large", "fruits"),
            ("Chicken Breast", "protein"),
            ("Whole Milk", "dairy"),
            ("Sourdough Bread", "grains"),
            ("Olive Oil Extra Virgin", "oils"),
            ("Spinach", "vegetables"),
            ("Roma Tomatoes", "vegetables"),
            ("Greek Yogurt Plain", "dairy"),
            ("Brown Rice", "grains"),
        ]
        assert summary.items_total == 55.13

    def test_no_fallback_for_full_receipt(self, extractor, whole_foods_text):
        summary = extractor.extract(whole_foods_text)
        assert {i.confidence for i in summary.items} == {0.85}
        assert summary.estimated_items == []

    def test_item_ids(self, extractor, whole_foods_text):
        summary = extractor.extract(whole_foods_text)
        assert [i.id for i in summary.items] == [f"item-{n}" for n in range(1, 11)]

    def test_keeps_raw_text(self, extractor, whole_foods_text):
        summary = extractor.extract(whole_foods_text)
        assert summary.raw_text == whole_foods_text
        assert summary.id == receipt_id(whole_foods_text)


class TestExtractSplitLines:
    def test_items_with_fallback(self, extractor, split_line_text):
        summary = extractor.extract(split_line_text)
        assert [
            (i.name, i.category, i.price, i.confidence) for i in summary.items
        ] == [
            ("Bananas", "fruits", 3.49, 0.9),
            ("Gala Apples", "fruits", 2.99, 0.9),
            ("Cheddar Cheese", "dairy", 5.49, 0.85),
            ("Fresh Basil", "herbs", 4.99, 0.5),
        ]
        assert [i.name for i in summary.estimated_items] == ["Fresh Basil"]

    def test_header_fields(self, extractor, split_line_text):
        summary = extractor.extract(split_line_text)
        assert summary.store_name == "SAFEWAY STORE #1234"
        assert summary.total_amount == 42.67
        assert summary.subtotal_amount == 11.97
        assert summary.tax_amount == 0.0
        assert summary.purchase_date == TODAY


class TestExtractEdgeCases:
    def test_single_item_example(self, extractor):
        summary = extractor.extract("GROCERY\nOrganic Bananas\n$3.49")
        assert len(summary.items) == 1
        item = summary.items[0]
        assert item.name == "Bananas"
        assert item.category == "fruits"
        assert item.price == 3.49
        assert item.confidence == 0.9

    def test_empty_transcript(self, extractor):
        with pytest.raises(NoTextFoundError, match="no text found"):
            extractor.extract("")

    def test_near_empty_transcript(self, extractor):
        with pytest.raises(NoTextFoundError):
            extractor.extract("  \n ab \n\n")

    def test_no_text_error_is_value_error(self, extractor):
        with pytest.raises(ValueError):
            extractor.extract("   ")

    def test_zero_items_is_not_an_error(self, extractor):
        summary = extractor.extract("WHOLE FOODS MARKET\nTOTAL $0.00")
        assert summary.items == []
        assert summary.store_name == "WHOLE FOODS MARKET"

    def test_phone_number_is_never_an_item(self, extractor):
        summary = extractor.extract("SAFEWAY\n123-456-7890\nMilk $3.49")
        assert [i.name for i in summary.items] == ["Milk"]

    def test_total_in_last_ten_lines(self, extractor):
        summary = extractor.extract("Corner Shop\nMilk $3.49\nTOTAL $42.67")
        assert summary.total_amount == 42.67

    def test_missing_date_uses_clock(self, extractor):
        summary = extractor.extract("Corner Shop\nMilk $3.49")
        assert summary.purchase_date == TODAY

    def test_fallback_contributes_at_most_twenty(self, extractor):
        lines = ["TOTAL $5.00"] + [f"Pantry Item {i:02d}" for i in range(30)]
        summary = extractor.extract("\n".join(lines))
        assert len(summary.items) == 20
        assert all(i.confidence == 0.5 for i in summary.items)

    def test_fallback_recovers_items_after_end_marker(self, extractor):
        summary = extractor.extract("Milk $3.49\nTOTAL $3.49\nBread 2.49")
        assert [(i.name, i.confidence) for i in summary.items] == [
            ("Milk", 0.85),
            ("Bread", 0.5),
        ]

    def test_all_caps_items_keep_printed_prices(self, extractor):
        summary = extractor.extract("SAFEWAY\nCHICKEN BREAST\n$8.40\nGREEN APPLES\n$2.99")
        assert [(i.name, i.price, i.confidence) for i in summary.items] == [
            ("Chicken Breast", 8.40, 0.9),
            ("Green Apples", 2.99, 0.9),
        ]

    def test_unknown_store_banner_is_not_an_item(self, extractor):
        summary = extractor.extract("FRESH FOODS EMPORIUM\nMilk $3.49\nTOTAL $3.49")
        assert summary.store_name == "FRESH FOODS EMPORIUM"
        assert [i.name for i in summary.items] == ["Milk"]

    def test_invalid_items_are_dropped(self, extractor):
        summary = extractor.extract("SAFEWAY\nTV Stand $899.99\nMilk $3.49")
        assert [i.name for i in summary.items] == ["Milk"]


class TestOutputProperties:
    def test_items_pass_validity_gate(self, extractor, whole_foods_text, split_line_text):
        for text in (whole_foods_text, split_line_text):
            for item in extractor.extract(text).items:
                assert 0 < item.price < 500
                assert len(item.name) >= 2
                assert any(c.isalpha() for c in item.name)

    def test_no_duplicate_names(self, extractor, split_line_text):
        items = extractor.extract(split_line_text).items
        keys = [normalized_key(i.name) for i in items]
        assert len(keys) == len(set(keys))

    def test_deterministic(self, extractor, whole_foods_text):
        first = extractor.extract(whole_foods_text).to_dict()
        second = extractor.extract(whole_foods_text).to_dict()
        assert first == second


class TestConfidence:
    def test_default_confidence(self, extractor, whole_foods_text):
        assert extractor.extract(whole_foods_text).confidence == 0.7

    def test_ocr_confidence_passthrough(self, extractor, whole_foods_text):
        summary = extractor.extract(whole_foods_text, ocr_confidence=0.92)
        assert summary.confidence == 0.92

    def test_ocr_confidence_is_clamped(self, extractor, whole_foods_text):
        assert extractor.extract(whole_foods_text, ocr_confidence=1.4).confidence == 1.0
        assert extractor.extract(whole_foods_text, ocr_confidence=-0.2).confidence == 0.0


class TestExtractReceipt:
    def test_module_level_helper(self, whole_foods_text):
        summary = extract_receipt(whole_foods_text, ocr_confidence=0.85)
        assert summary.item_count == 10
        assert summary.confidence == 0.85

    def test_custom_rules(self):
        rules = ExtractionRules(min_primary_items=0)
        summary = extract_receipt("Milk $3.49\nTOTAL $3.49\nBread 2.49", rules=rules)
        assert [i.name for i in summary.items] == ["Milk"]

    def test_to_dict(self, whole_foods_text):
        data = extract_receipt(whole_foods_text).to_dict()
        assert data["purchase_date"] == "2025-09-10"
        assert data["items"][0] == {
            "id": "item-1",
            "name": "Bananas",
            "quantity": 1.0,
            "unit": "each",
            "price": 3.98,
            "category": "fruits",
            "confidence": 0.85,
            "price_source": "receipt",
        }
