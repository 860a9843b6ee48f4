"""Tests for admin form validation."""
import pytest

from storefront.enums import DiscountType
from storefront.models import DiscountTier
from storefront.validators import (
    is_valid_coupon_code,
    is_valid_discount_rate,
    is_valid_price,
    is_valid_product_name,
    is_valid_quantity,
    is_valid_stock,
    validate_coupon_form,
    validate_discount_value,
    validate_product_form,
)


@pytest.mark.parametrize("code,expected", [
    ("PERCENT10", True),
    ("ABCD", True),
    ("ABC", False),
    ("ABCDEFGHIJKLM", False),
    ("lower1", False),
    ("", False),
    (None, False),
])
def test_coupon_code_format(code, expected):
    assert is_valid_coupon_code(code) is expected


def test_numeric_checks():
    assert is_valid_stock(0)
    assert not is_valid_stock(-1)
    assert not is_valid_stock(1.5)
    assert is_valid_price(1)
    assert not is_valid_price(0)
    assert not is_valid_price(float("inf"))
    assert not is_valid_price(float("nan"))
    assert not is_valid_price(1500.5)
    assert is_valid_price(1500.0)
    assert is_valid_discount_rate(0.3)
    assert not is_valid_discount_rate(1.2)
    assert not is_valid_discount_rate(0.005)
    assert is_valid_quantity(1)
    assert not is_valid_quantity(0)


def test_product_name_length():
    assert is_valid_product_name("Lamp")
    assert not is_valid_product_name("   ")
    assert not is_valid_product_name("x" * 51)


def test_validate_discount_value_clamps():
    assert validate_discount_value(150, DiscountType.PERCENTAGE)[:2] == (False, 100)
    assert validate_discount_value(200000, DiscountType.AMOUNT)[:2] == (False, 100000)
    assert validate_discount_value(-5, DiscountType.AMOUNT)[:2] == (False, 0)
    assert validate_discount_value(50, DiscountType.PERCENTAGE) == (True, 50, "")


def test_validate_product_form():
    assert validate_product_form("Lamp", 1000, 10).is_valid

    result = validate_product_form("", 0, 10000)
    assert not result.is_valid
    assert len(result.errors) == 3

    assert validate_product_form("Lamp", 1000, 10, [DiscountTier(min_quantity=5, rate=0.2)]).is_valid
    tiny_rate = validate_product_form("Lamp", 1000, 10, [DiscountTier(min_quantity=5, rate=0.001)])
    assert tiny_rate.errors == ["Discount rates must be between 1% and 100%"]


def test_validate_coupon_form():
    assert validate_coupon_form("Sale", "SALE10", DiscountType.PERCENTAGE, 10).is_valid

    result = validate_coupon_form(" ", "", DiscountType.AMOUNT, 0)
    assert result.errors == [
        "Coupon name is required",
        "Coupon code is required",
        "Discount value must be greater than 0",
    ]

    over = validate_coupon_form("Sale", "SALE10", DiscountType.PERCENTAGE, 120)
    assert over.errors == ["Percentage cannot exceed 100%"]
