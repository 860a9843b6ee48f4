class StorefrontException(Exception):
    """Base class for every rejected storefront operation.

    Core functions do not raise these. They return an instance inside an
    ``Outcome`` so the caller can surface the message and keep its prior state.
    """
    pass


class ProductNotFound(StorefrontException):
    """Raised when an operation references a product id absent from the catalog."""
    pass


class OutOfStock(StorefrontException):
    """Adding one more unit would exceed the remaining stock of the product."""
    pass


class StockExceeded(StorefrontException):
    """An explicit quantity change asks for more units than the product stock."""
    pass


class InvalidCoupon(StorefrontException):
    """The coupon cannot be applied to the current cart.

    Percentage coupons require a minimum subtotal after product discounts.
    """
    pass


class DuplicateCouponCode(StorefrontException):
    """A coupon with the same code already exists."""
    pass


class CouponNotFound(StorefrontException):
    """Raised when an operation references a coupon code that does not exist."""
    pass


class EmptyCart(StorefrontException):
    """An order was placed with nothing in the cart."""
    pass


class InvalidProduct(StorefrontException):
    """The admin product form failed validation."""
    pass


class InvalidCouponForm(StorefrontException):
    """The admin coupon form failed validation."""
    pass
