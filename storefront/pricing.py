"""Cart aggregation.

Every total is derived from the cart and the active coupon on each call. Lines
are rounded once, after their discount, and the cart total sums the rounded
lines.
"""
import logging
from decimal import Decimal
from typing import Optional, Sequence

from storefront.models import CartItem, CartTotals, Coupon, DiscountBenefitInfo, ItemDiscountInfo
from storefront.strategy import get_coupon_strategy, max_applicable_discount, round_half_up

logger = logging.getLogger(__name__)


def calculate_item_total(item: CartItem, cart: Sequence[CartItem]) -> int:
    """Price of one line after its product discount.

    Args:
        item: The cart line
        cart: The whole cart, used for the bulk purchase bonus

    Returns:
        int: ``price x quantity x (1 - rate)`` rounded half up
    """
    base_total = Decimal(item.product.price * item.quantity)
    rate = max_applicable_discount(item, cart)
    return round_half_up(base_total - base_total * rate)


def calculate_coupon_discount(coupon: Optional[Coupon], subtotal: int) -> int:
    if coupon is None:
        return 0
    return get_coupon_strategy(coupon).get_discount(coupon, subtotal)


def calculate_cart_total(cart: Sequence[CartItem], coupon: Optional[Coupon] = None) -> CartTotals:
    """Compute all cart totals.

    The discount order is fixed: product discounts per line first, then the
    coupon on the discounted subtotal.

    Args:
        cart: Lines in the cart
        coupon: The active coupon, if any

    Returns:
        CartTotals: Whole-unit totals where
            ``final_total <= total_after_discount <= total_before_discount``
    """
    total_before_discount = sum(item.product.price * item.quantity for item in cart)
    total_after_discount = sum(calculate_item_total(item, cart) for item in cart)

    coupon_discount = calculate_coupon_discount(coupon, total_after_discount)
    final_total = max(0, total_after_discount - coupon_discount)

    totals = CartTotals(
        total_before_discount=total_before_discount,
        total_after_discount=total_after_discount,
        coupon_discount=coupon_discount,
        final_total=final_total,
        total_discount=total_before_discount - final_total,
    )
    logger.debug(f"Recomputed cart totals: {totals}")
    return totals


def get_total_item_count(cart: Sequence[CartItem]) -> int:
    return sum(item.quantity for item in cart)


def get_item_discount_info(item: CartItem, item_total: int) -> ItemDiscountInfo:
    """Discount badge data for one cart line."""
    original_price = item.product.price * item.quantity
    has_discount = item_total < original_price
    discount_rate = (
        round_half_up((1 - Decimal(item_total) / Decimal(original_price)) * 100)
        if has_discount else 0
    )
    return ItemDiscountInfo(
        has_discount=has_discount,
        discount_rate=discount_rate,
        original_price=original_price,
        discount_amount=original_price - item_total,
    )


def get_discount_benefit_info(totals: CartTotals) -> DiscountBenefitInfo:
    product_discount = totals.total_before_discount - totals.total_after_discount
    total_savings = totals.total_discount
    savings_rate = (
        round_half_up(Decimal(total_savings) / Decimal(totals.total_before_discount) * 100)
        if totals.total_before_discount > 0 else 0
    )
    return DiscountBenefitInfo(
        product_discount=product_discount,
        coupon_discount=totals.coupon_discount,
        total_savings=total_savings,
        savings_rate=savings_rate,
        has_savings=total_savings > 0,
    )
