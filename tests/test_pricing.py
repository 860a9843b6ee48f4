"""Tests for cart aggregation."""
import pytest

from storefront.enums import DiscountType
from storefront.models import CartItem, Coupon, DiscountTier, Product
from storefront.pricing import (
    calculate_cart_total,
    calculate_item_total,
    get_discount_benefit_info,
    get_item_discount_info,
    get_total_item_count,
)


def test_tier_discount_alone(tiered_product):
    """10 units at 10000 with a 10% tier and no bulk bonus in play."""
    item = CartItem(product=tiered_product, quantity=10)
    assert calculate_item_total(item, []) == 90000


def test_line_with_bulk_bonus(bulk_cart):
    first_line = bulk_cart[0]
    assert calculate_item_total(first_line, bulk_cart) == 85000


def test_line_rounding_is_half_up():
    product = Product(id="p5", name="Pen", price=25, stock=10,
                      discounts=[DiscountTier(min_quantity=1, rate=0.5)])
    item = CartItem(product=product, quantity=1)
    assert calculate_item_total(item, [item]) == 13


def test_cart_totals_without_coupon(bulk_cart):
    totals = calculate_cart_total(bulk_cart)

    assert totals.total_before_discount == 300000
    assert totals.total_after_discount == 85000 + 190000
    assert totals.coupon_discount == 0
    assert totals.final_total == 275000
    assert totals.total_discount == 25000


def test_percentage_coupon(tiered_product, percent_coupon):
    cart = [CartItem(product=tiered_product, quantity=10)]
    totals = calculate_cart_total(cart, percent_coupon)

    assert totals.total_after_discount == 85000
    assert totals.coupon_discount == 8500
    assert totals.final_total == 76500
    assert totals.total_discount == 100000 - 76500


def test_percentage_coupon_rounds_half_up(percent_coupon):
    product = Product(id="p6", name="Bag", price=10005, stock=10)
    totals = calculate_cart_total([CartItem(product=product, quantity=1)], percent_coupon)

    assert totals.coupon_discount == 1001
    assert totals.final_total == 9004


def test_amount_coupon_never_goes_negative(amount_coupon):
    product = Product(id="p4", name="Sticker", price=3000, stock=10)
    totals = calculate_cart_total([CartItem(product=product, quantity=1)], amount_coupon)

    assert totals.coupon_discount == 3000
    assert totals.final_total == 0
    assert totals.total_discount == 3000


def test_empty_cart():
    totals = calculate_cart_total([])
    assert totals.total_before_discount == 0
    assert totals.final_total == 0
    assert get_discount_benefit_info(totals).savings_rate == 0


@pytest.mark.parametrize("discount_type,value", [
    (None, None),
    (DiscountType.AMOUNT, 5000),
    (DiscountType.AMOUNT, 100000),
    (DiscountType.PERCENTAGE, 10),
    (DiscountType.PERCENTAGE, 100),
])
def test_totals_are_ordered(bulk_cart, cheap_product, discount_type, value):
    coupon = None
    if discount_type is not None:
        coupon = Coupon(name="c", code="CODE1", discount_type=discount_type, discount_value=value)

    for cart in ([], bulk_cart, [CartItem(product=cheap_product, quantity=1)]):
        totals = calculate_cart_total(cart, coupon)
        assert totals.final_total >= 0
        assert totals.final_total <= totals.total_after_discount <= totals.total_before_discount
        assert totals.total_discount == totals.total_before_discount - totals.final_total


def test_item_discount_info(bulk_cart):
    item = bulk_cart[0]
    info = get_item_discount_info(item, calculate_item_total(item, bulk_cart))

    assert info.has_discount is True
    assert info.discount_rate == 15
    assert info.original_price == 100000
    assert info.discount_amount == 15000


def test_item_discount_info_without_discount(other_product):
    item = CartItem(product=other_product, quantity=1)
    info = get_item_discount_info(item, calculate_item_total(item, [item]))
    assert info.has_discount is False
    assert info.discount_rate == 0


def test_discount_benefit_info(bulk_cart):
    info = get_discount_benefit_info(calculate_cart_total(bulk_cart))

    assert info.product_discount == 25000
    assert info.coupon_discount == 0
    assert info.total_savings == 25000
    assert info.savings_rate == 8
    assert info.has_savings is True


def test_total_item_count(bulk_cart):
    assert get_total_item_count(bulk_cart) == 20
