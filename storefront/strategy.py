import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Sequence

from storefront.config import CART
from storefront.enums import DiscountType
from storefront.models import CartItem, Coupon

logger = logging.getLogger(__name__)


def round_half_up(value) -> int:
    """Round to a whole currency unit, halves away from zero."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def to_decimal(value: float) -> Decimal:
    # via str so 0.1 stays 0.1 and not its binary approximation
    return Decimal(str(value))


class DiscountStrategy:
    """A source of discount rate for one cart line.

    Rates from every strategy are summed and the sum is capped, so a
    strategy never clamps its own contribution.
    """

    def __init__(self, name: str):
        self.name = name

    def get_rate(self, item: CartItem, cart: Sequence[CartItem]) -> Decimal:
        raise NotImplementedError

    def is_applicable(self, item: CartItem, cart: Sequence[CartItem]) -> bool:
        raise NotImplementedError


class TierDiscountStrategy(DiscountStrategy):
    """Best quantity tier of the line's own product."""

    def __init__(self, name: str):
        super().__init__(name=name)

    def get_rate(self, item: CartItem, cart: Sequence[CartItem]) -> Decimal:
        if not self.is_applicable(item, cart):
            logger.debug(f"Tier discount not applicable for {item.product.id}")
            return Decimal(0)

        return max(
            to_decimal(tier.rate)
            for tier in item.product.discounts
            if item.quantity >= tier.min_quantity
        )

    def is_applicable(self, item: CartItem, cart: Sequence[CartItem]) -> bool:
        return any(item.quantity >= tier.min_quantity for tier in item.product.discounts)


class BulkPurchaseDiscountStrategy(DiscountStrategy):
    """Flat bonus for every line once any line of the cart is bought in bulk."""

    def __init__(self, name: str):
        super().__init__(name=name)

    def get_rate(self, item: CartItem, cart: Sequence[CartItem]) -> Decimal:
        if not self.is_applicable(item, cart):
            return Decimal(0)
        return CART.BULK_PURCHASE_DISCOUNT

    def is_applicable(self, item: CartItem, cart: Sequence[CartItem]) -> bool:
        return any(line.quantity >= CART.BULK_PURCHASE_THRESHOLD for line in cart)


DEFAULT_STRATEGIES: List[DiscountStrategy] = [
    TierDiscountStrategy(name="TierDiscount"),
    BulkPurchaseDiscountStrategy(name="BulkPurchaseDiscount"),
]


def max_applicable_discount(
        item: CartItem,
        cart: Sequence[CartItem],
        strategies: Sequence[DiscountStrategy] = DEFAULT_STRATEGIES) -> Decimal:
    """Combined discount rate of a cart line.

    Args:
        item: The line being priced
        cart: The whole cart, needed for the bulk purchase bonus
        strategies: Rate sources to combine, in application order

    Returns:
        Decimal: Sum of all strategy rates, capped at ``CART.MAX_DISCOUNT_RATE``
    """
    rate = sum((strategy.get_rate(item, cart) for strategy in strategies), Decimal(0))
    return min(rate, CART.MAX_DISCOUNT_RATE)


class CouponStrategy:

    def __init__(self, name: str):
        self.name = name

    def get_discount(self, coupon: Coupon, subtotal: int) -> int:
        raise NotImplementedError

    def validate_coupon(self, coupon: Coupon, subtotal: int) -> bool:
        raise NotImplementedError


class AmountCouponStrategy(CouponStrategy):

    def __init__(self, name: str):
        super().__init__(name=name)

    def get_discount(self, coupon: Coupon, subtotal: int) -> int:
        # never takes more than what is left to pay
        return round_half_up(min(to_decimal(coupon.discount_value), Decimal(subtotal)))

    def validate_coupon(self, coupon: Coupon, subtotal: int) -> bool:
        return True


class PercentageCouponStrategy(CouponStrategy):

    def __init__(self, name: str):
        super().__init__(name=name)

    def get_discount(self, coupon: Coupon, subtotal: int) -> int:
        return round_half_up(Decimal(subtotal) * to_decimal(coupon.discount_value) / 100)

    def validate_coupon(self, coupon: Coupon, subtotal: int) -> bool:
        return subtotal >= CART.PERCENTAGE_COUPON_MIN_TOTAL


COUPON_STRATEGIES: Dict[DiscountType, CouponStrategy] = {
    DiscountType.AMOUNT: AmountCouponStrategy(name="AmountCoupon"),
    DiscountType.PERCENTAGE: PercentageCouponStrategy(name="PercentageCoupon"),
}


def get_coupon_strategy(coupon: Coupon) -> CouponStrategy:
    return COUPON_STRATEGIES[coupon.discount_type]
