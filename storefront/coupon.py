"""Coupon application rule and coupon selection.

At most one coupon is active against a cart. Percentage coupons are gated by
the cart subtotal after product discounts; amount coupons are always accepted.
"""
import logging
import re
from typing import List, Optional, Sequence

from storefront.config import CART
from storefront.enums import DiscountType
from storefront.exceptions import DuplicateCouponCode, InvalidCoupon
from storefront.models import CartItem, Coupon, Outcome
from storefront.pricing import calculate_cart_total
from storefront.strategy import get_coupon_strategy

logger = logging.getLogger(__name__)


def normalize_coupon_code(value: str) -> str:
    """Uppercase ``value`` and drop everything but letters and digits."""
    return re.sub(r"[^A-Z0-9]", "", value.upper())


def format_coupon_description(coupon: Coupon) -> str:
    if coupon.discount_type == DiscountType.AMOUNT:
        return f"{coupon.discount_value:,.0f} off"
    return f"{coupon.discount_value:g}% off"


def can_apply_coupon(cart: Sequence[CartItem], coupon: Coupon) -> Outcome[Optional[Coupon]]:
    """Check whether ``coupon`` may become the active coupon of ``cart``.

    The subtotal is taken after product discounts and without any coupon.

    Returns:
        Outcome: The coupon when accepted, ``None`` with ``InvalidCoupon`` otherwise
    """
    subtotal = calculate_cart_total(cart, None).total_after_discount
    if not get_coupon_strategy(coupon).validate_coupon(coupon, subtotal):
        logger.warning(f"Rejected coupon {coupon.code}: subtotal {subtotal} below minimum")
        return Outcome.failure(
            None,
            InvalidCoupon(
                f"Percentage coupons require a purchase of at least "
                f"{CART.PERCENTAGE_COUPON_MIN_TOTAL:,}"
            ),
        )
    return Outcome.success(coupon)


def find_coupon(coupons: Sequence[Coupon], code: str) -> Optional[Coupon]:
    return next((coupon for coupon in coupons if coupon.code == code), None)


def add_coupon(coupons: Sequence[Coupon], coupon: Coupon) -> Outcome[List[Coupon]]:
    """Append ``coupon`` unless its code is already taken."""
    if find_coupon(coupons, coupon.code) is not None:
        logger.warning(f"Rejected coupon {coupon.code}: code already exists")
        return Outcome.failure(
            list(coupons), DuplicateCouponCode(f"Coupon code {coupon.code} already exists"))
    return Outcome.success([*coupons, coupon])


class CouponSelection:
    """The coupon currently applied to the cart.

    Two states: nothing selected, or exactly one coupon selected. Applying a
    coupon replaces the previous selection once the application rule accepts
    it; a rejected application leaves the selection as it was.
    """

    def __init__(self, coupon: Optional[Coupon] = None):
        self._coupon = coupon

    @property
    def coupon(self) -> Optional[Coupon]:
        return self._coupon

    @property
    def is_selected(self) -> bool:
        return self._coupon is not None

    def apply(self, cart: Sequence[CartItem], coupon: Coupon) -> Outcome[Optional[Coupon]]:
        outcome = can_apply_coupon(cart, coupon)
        if not outcome.ok:
            return Outcome.failure(self._coupon, outcome.error)

        self._coupon = coupon
        logger.info(f"Coupon {coupon.code} selected")
        return Outcome.success(coupon)

    def clear(self) -> None:
        self._coupon = None

    def coupon_deleted(self, code: str) -> bool:
        """Clear the selection if it is the deleted coupon. Returns whether it was."""
        if self._coupon is not None and self._coupon.code == code:
            logger.info(f"Active coupon {code} was deleted, clearing selection")
            self._coupon = None
            return True
        return False
