"""Data models for the storefront.

Persisted values (products, cart lines, coupons) are pydantic dataclasses so a
freshly deserialized catalog or cart is checked for shape on construction.
Derived values (totals, outcomes, notifications) are plain dataclasses that are
recomputed on demand and never stored.
"""

from dataclasses import dataclass, field
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import Field, ValidationInfo, field_validator
from pydantic.dataclasses import dataclass as pydantic_dataclass

from storefront.config import COUPON, PRODUCT
from storefront.enums import DiscountType, NotificationType
from storefront.exceptions import StorefrontException

T = TypeVar("T")


@pydantic_dataclass
class DiscountTier:
    """A quantity-tier discount of a product.

    Attributes:
        min_quantity: Units of the product required in one cart line
        rate: Fraction of the line price taken off, in (0, 1]
    """
    min_quantity: Annotated[int, Field(ge=1)]
    rate: Annotated[float, Field(gt=0, le=1)]


@pydantic_dataclass
class Product:
    """A catalog product.

    Attributes:
        id: Opaque unique identifier
        name: Display name
        price: Unit price in whole currency units
        stock: Total units available, independent of any cart
        discounts: Quantity tiers; the best qualifying tier wins, not the first
        description: Optional free text shown in the catalog
        is_recommended: Whether the product carries the recommended badge
    """
    id: str
    name: str
    price: Annotated[int, Field(ge=PRODUCT.MIN_PRICE)]
    stock: Annotated[int, Field(ge=PRODUCT.MIN_STOCK, le=PRODUCT.MAX_STOCK)]
    discounts: List[DiscountTier] = field(default_factory=list)
    description: Optional[str] = None
    is_recommended: bool = False


@pydantic_dataclass
class CartItem:
    """One product line in the cart.

    Attributes:
        product: The product being purchased
        quantity: Units in the cart, always at least one
    """
    product: Product
    quantity: Annotated[int, Field(ge=1)]


@pydantic_dataclass
class Coupon:
    """A cart-wide discount selectable by the shopper.

    Attributes:
        name: Display name
        code: Unique key, uppercase alphanumerics
        discount_type: Flat amount or percentage of the discounted subtotal
        discount_value: Amount in currency units or percentage (0-100)
    """
    name: str
    code: str
    discount_type: DiscountType
    discount_value: Annotated[float, Field(ge=0)]

    @field_validator("discount_value")
    @classmethod
    def validate_discount_value(cls, v: float, info: ValidationInfo) -> float:
        """Keep the value within the ceiling of its discount type.

        Raises:
            ValueError: If a percentage exceeds 100 or an amount exceeds the cap
        """
        discount_type = info.data.get("discount_type")
        if discount_type == DiscountType.PERCENTAGE and v > COUPON.MAX_PERCENTAGE:
            raise ValueError(f"Percentage discount cannot exceed {COUPON.MAX_PERCENTAGE}")
        if discount_type == DiscountType.AMOUNT and v > COUPON.MAX_AMOUNT:
            raise ValueError(f"Amount discount cannot exceed {COUPON.MAX_AMOUNT}")
        return v


@dataclass(frozen=True)
class CartTotals:
    """Totals of a cart, recomputed from scratch on every change.

    Attributes:
        total_before_discount: Sum of price x quantity, undiscounted
        total_after_discount: Sum of per-line totals after product discounts
        coupon_discount: Amount taken off by the active coupon
        final_total: Amount payable, never negative
        total_discount: Product and coupon savings combined
    """
    total_before_discount: int
    total_after_discount: int
    coupon_discount: int
    final_total: int
    total_discount: int


@dataclass(frozen=True)
class ItemDiscountInfo:
    has_discount: bool
    discount_rate: int  # whole percent
    original_price: int
    discount_amount: int


@dataclass(frozen=True)
class DiscountBenefitInfo:
    product_discount: int
    coupon_discount: int
    total_savings: int
    savings_rate: int  # whole percent
    has_savings: bool


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of an operation that may be rejected.

    On rejection ``value`` holds the unchanged prior state and ``error`` the
    reason. Callers surface ``message`` to the shopper.
    """
    value: T
    error: Optional[StorefrontException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return str(self.error) if self.error is not None else ""

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, value: T, error: StorefrontException) -> "Outcome[T]":
        return cls(value=value, error=error)


@dataclass(frozen=True)
class Notification:
    id: str
    message: str
    type: NotificationType = NotificationType.SUCCESS
