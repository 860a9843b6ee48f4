"""Fixed business constants for the storefront.

Values are grouped by concern and exposed as module-level singletons. None of
them are configurable at runtime.
"""
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CartConstraints:
    MIN_QUANTITY: int = 1

    # Bulk purchase bonus
    BULK_PURCHASE_THRESHOLD: int = 10
    BULK_PURCHASE_DISCOUNT: Decimal = Decimal("0.05")
    MAX_DISCOUNT_RATE: Decimal = Decimal("0.5")

    # Percentage coupons need at least this much after product discounts
    PERCENTAGE_COUPON_MIN_TOTAL: int = 10_000


@dataclass(frozen=True)
class CouponConstraints:
    MIN_PERCENTAGE: int = 0
    MAX_PERCENTAGE: int = 100

    MIN_AMOUNT: int = 0
    MAX_AMOUNT: int = 100_000

    MIN_CODE_LENGTH: int = 4
    MAX_CODE_LENGTH: int = 12


@dataclass(frozen=True)
class ProductConstraints:
    MIN_PRICE: int = 0
    MAX_PRICE: int = 10_000_000

    MIN_STOCK: int = 0
    MAX_STOCK: int = 9999

    MIN_NAME_LENGTH: int = 1
    MAX_NAME_LENGTH: int = 50

    MIN_DISCOUNT_RATE: float = 0.01
    MAX_DISCOUNT_RATE: float = 1.0


@dataclass(frozen=True)
class DisplayConstraints:
    LOW_STOCK_THRESHOLD: int = 5
    CRITICAL_STOCK_THRESHOLD: int = 0

    SEARCH_DEBOUNCE_SECONDS: float = 0.5
    NOTIFICATION_TTL_SECONDS: float = 3.0


CART = CartConstraints()
COUPON = CouponConstraints()
PRODUCT = ProductConstraints()
DISPLAY = DisplayConstraints()
