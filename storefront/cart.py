"""Stock accounting and cart mutations.

All functions are pure: they take a cart and return a new list, leaving the
input untouched. Rejections come back as an ``Outcome`` carrying the unchanged
cart and the reason.
"""
import dataclasses
import logging
from typing import List, Optional, Sequence

from storefront.config import CART, DISPLAY
from storefront.enums import StockStatus
from storefront.exceptions import OutOfStock, StockExceeded
from storefront.models import CartItem, Outcome, Product, ValidationResult

logger = logging.getLogger(__name__)


def find_cart_item(cart: Sequence[CartItem], product_id: str) -> Optional[CartItem]:
    return next((item for item in cart if item.product.id == product_id), None)


def has_item_in_cart(cart: Sequence[CartItem], product_id: str) -> bool:
    return find_cart_item(cart, product_id) is not None


def get_remaining_stock(product: Product, cart: Sequence[CartItem]) -> int:
    """Units of ``product`` that can still be added to ``cart``.

    Derived from the catalog stock and the cart on every call, never cached.
    """
    item = find_cart_item(cart, product.id)
    used_stock = item.quantity if item else 0
    return max(0, product.stock - used_stock)


def get_stock_status(remaining_stock: int) -> StockStatus:
    if remaining_stock <= DISPLAY.CRITICAL_STOCK_THRESHOLD:
        return StockStatus.OUT_OF_STOCK
    if remaining_stock <= DISPLAY.LOW_STOCK_THRESHOLD:
        return StockStatus.LOW
    return StockStatus.NORMAL


def remove_item_from_cart(cart: Sequence[CartItem], product_id: str) -> List[CartItem]:
    """Drop the line of ``product_id``. Absent ids are a no-op."""
    return [item for item in cart if item.product.id != product_id]


def update_cart_item_quantity(
        cart: Sequence[CartItem],
        product_id: str,
        quantity: int,
        stock: Optional[int] = None) -> Outcome[List[CartItem]]:
    """Set the quantity of a cart line.

    Args:
        cart: Current cart
        product_id: Line to change
        quantity: New quantity; zero or less removes the line
        stock: Catalog stock to check against, whether or not the product has
            a line. Defaults to the stock of the product held by the line.

    Returns:
        Outcome: The new cart, or the unchanged cart with ``StockExceeded``
    """
    if quantity < CART.MIN_QUANTITY:
        return Outcome.success(remove_item_from_cart(cart, product_id))

    item = find_cart_item(cart, product_id)
    available = item.product.stock if stock is None and item is not None else stock
    if available is not None and quantity > available:
        name = item.product.name if item is not None else product_id
        logger.warning(f"Rejected quantity {quantity} for product {product_id}: stock is {available}")
        return Outcome.failure(
            list(cart),
            StockExceeded(f"Only {available} units of {name} are in stock"),
        )

    if item is None:
        return Outcome.success(list(cart))

    return Outcome.success([
        dataclasses.replace(line, quantity=quantity) if line.product.id == product_id else line
        for line in cart
    ])


def add_item_to_cart(cart: Sequence[CartItem], product: Product) -> Outcome[List[CartItem]]:
    """Add one unit of ``product``.

    An existing line is incremented, otherwise a line with quantity one is
    appended.

    Returns:
        Outcome: The new cart, or the unchanged cart with ``OutOfStock``
    """
    if get_remaining_stock(product, cart) <= 0:
        logger.warning(f"Rejected add of product {product.id}: out of stock")
        return Outcome.failure(list(cart), OutOfStock(f"{product.name} is out of stock"))

    existing_item = find_cart_item(cart, product.id)
    if existing_item:
        outcome = update_cart_item_quantity(
            cart, product.id, existing_item.quantity + 1, stock=product.stock)
        if not outcome.ok:
            return Outcome.failure(list(cart), OutOfStock(f"{product.name} is out of stock"))
        return outcome

    return Outcome.success([*cart, CartItem(product=product, quantity=1)])


def get_out_of_stock_items(cart: Sequence[CartItem]) -> List[CartItem]:
    """Lines asking for more units than their product has in stock."""
    return [item for item in cart if item.quantity > item.product.stock]


def validate_cart(cart: Sequence[CartItem]) -> ValidationResult:
    """Check the cart can be ordered."""
    errors: List[str] = []

    if not cart:
        errors.append("The cart is empty")

    for item in get_out_of_stock_items(cart):
        errors.append(f"{item.product.name} does not have enough stock")

    return ValidationResult(is_valid=not errors, errors=errors)
