"""Shared receipt transcripts for the extraction tests."""

import pytest

WHOLE_FOODS_RECEIPT = """\
WHOLE FOODS MARKET
123 Main Street
New York, NY 10001
(212) 555-0123

Date: 09/10/2025
Time: 2:41 PM

Organic Bananas 2.5 lbs        $3.98
Avocados Large 4 ct            $5.96
Chicken Breast 1.2 lbs         $8.40
Whole Milk 1 gal               $4.49
Sourdough Bread                $3.99
Olive Oil Extra Virgin         $12.99
Spinach Organic 5 oz          $2.99
Roma Tomatoes 1.5 lbs         $2.85
Greek Yogurt Plain 32 oz      $5.99
Brown Rice 2 lbs              $3.49

Subtotal:                     $54.13
Tax:                          $4.33
Total:                        $58.46

Payment: VISA ****1234
Thank you for shopping!
"""

# Names and prices printed on separate lines, one name never priced
SPLIT_LINE_RECEIPT = """\
SAFEWAY STORE #1234
PRODUCE
Organic Bananas
$3.49
Gala Apples
2.99 F
Fresh Basil
DAIRY
Cheddar Cheese $5.49
SUBTOTAL $11.97
TOTAL $42.67
"""


@pytest.fixture
def whole_foods_text():
    return WHOLE_FOODS_RECEIPT


@pytest.fixture
def split_line_text():
    return SPLIT_LINE_RECEIPT
