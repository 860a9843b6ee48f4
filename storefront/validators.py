"""Input validation for the admin product and coupon forms."""
import math
import re
from typing import List, Sequence, Tuple

from storefront.config import COUPON, PRODUCT
from storefront.enums import DiscountType
from storefront.models import DiscountTier, ValidationResult

COUPON_CODE_PATTERN = re.compile(
    rf"^[A-Z0-9]{{{COUPON.MIN_CODE_LENGTH},{COUPON.MAX_CODE_LENGTH}}}$")


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def is_valid_coupon_code(code) -> bool:
    if not isinstance(code, str) or not code.strip():
        return False
    return COUPON_CODE_PATTERN.match(code.strip()) is not None


def is_valid_stock(stock) -> bool:
    return _is_number(stock) and stock >= PRODUCT.MIN_STOCK and float(stock).is_integer()


def is_valid_price(price) -> bool:
    return (_is_number(price) and math.isfinite(price)
            and price > PRODUCT.MIN_PRICE and float(price).is_integer())


def is_valid_product_name(name) -> bool:
    if not isinstance(name, str):
        return False
    return PRODUCT.MIN_NAME_LENGTH <= len(name.strip()) <= PRODUCT.MAX_NAME_LENGTH


def is_valid_discount_rate(rate) -> bool:
    return _is_number(rate) and PRODUCT.MIN_DISCOUNT_RATE <= rate <= PRODUCT.MAX_DISCOUNT_RATE


def is_valid_quantity(quantity) -> bool:
    return _is_number(quantity) and quantity >= 1 and float(quantity).is_integer()


def validate_discount_value(value: float, discount_type: DiscountType) -> Tuple[bool, float, str]:
    """Clamp a coupon discount value into the range of its type.

    Returns:
        Tuple[bool, float, str]: Whether the value was already valid, the
        corrected value, and an error message when it was not
    """
    if discount_type == DiscountType.PERCENTAGE:
        if value > COUPON.MAX_PERCENTAGE:
            return False, COUPON.MAX_PERCENTAGE, f"Percentage cannot exceed {COUPON.MAX_PERCENTAGE}%"
        if value < COUPON.MIN_PERCENTAGE:
            return False, COUPON.MIN_PERCENTAGE, f"Percentage must be at least {COUPON.MIN_PERCENTAGE}%"
    else:
        if value > COUPON.MAX_AMOUNT:
            return False, COUPON.MAX_AMOUNT, f"Amount cannot exceed {COUPON.MAX_AMOUNT:,}"
        if value < COUPON.MIN_AMOUNT:
            return False, COUPON.MIN_AMOUNT, f"Amount must be at least {COUPON.MIN_AMOUNT}"
    return True, value, ""


def validate_product_form(
        name: str,
        price: int,
        stock: int,
        discounts: Sequence[DiscountTier] = ()) -> ValidationResult:
    errors: List[str] = []

    if not is_valid_product_name(name):
        errors.append(
            f"Product name must be {PRODUCT.MIN_NAME_LENGTH}-{PRODUCT.MAX_NAME_LENGTH} characters")
    if not is_valid_price(price):
        errors.append("Price must be a whole number greater than 0")
    if not is_valid_stock(stock):
        errors.append("Stock must be a whole number of at least 0")
    elif stock > PRODUCT.MAX_STOCK:
        errors.append(f"Stock cannot exceed {PRODUCT.MAX_STOCK}")
    if not all(is_valid_quantity(tier.min_quantity) and is_valid_discount_rate(tier.rate)
               for tier in discounts):
        errors.append(
            f"Discount rates must be between {PRODUCT.MIN_DISCOUNT_RATE:.0%} "
            f"and {PRODUCT.MAX_DISCOUNT_RATE:.0%}")

    return ValidationResult(is_valid=not errors, errors=errors)


def validate_coupon_form(
        name: str,
        code: str,
        discount_type: DiscountType,
        discount_value: float) -> ValidationResult:
    errors: List[str] = []

    if not name.strip():
        errors.append("Coupon name is required")
    if not code.strip():
        errors.append("Coupon code is required")
    elif not is_valid_coupon_code(code):
        errors.append(
            f"Coupon code must be {COUPON.MIN_CODE_LENGTH}-{COUPON.MAX_CODE_LENGTH} "
            f"uppercase letters or digits")
    if discount_value <= 0:
        errors.append("Discount value must be greater than 0")
    else:
        is_valid, _, message = validate_discount_value(discount_value, discount_type)
        if not is_valid:
            errors.append(message)

    return ValidationResult(is_valid=not errors, errors=errors)
