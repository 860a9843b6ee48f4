"""Service layer for the storefront session.

The services own the single mutable copy of the session state (catalog,
coupons, cart and coupon selection) and thread it through the pure functions
in ``cart``, ``pricing`` and ``coupon``. Every mutation is persisted through
the repositories and reported to the shopper as a notification. Rejections
never raise: they come back as an ``Outcome`` holding the unchanged state.
"""
import dataclasses
import logging
import threading
import time
import uuid
from typing import List, Optional

from storefront.cart import (
    add_item_to_cart,
    get_remaining_stock,
    remove_item_from_cart,
    update_cart_item_quantity,
    validate_cart,
)
from storefront.config import DISPLAY
from storefront.coupon import CouponSelection, add_coupon, normalize_coupon_code
from storefront.enums import DiscountType, NotificationType
from storefront.exceptions import (
    CouponNotFound,
    EmptyCart,
    InvalidCouponForm,
    InvalidProduct,
    OutOfStock,
    ProductNotFound,
)
from storefront.models import CartItem, CartTotals, Coupon, DiscountTier, Notification, Outcome, Product
from storefront.pricing import calculate_cart_total, calculate_item_total, get_total_item_count
from storefront.repository import CartRepository, CouponRepository, ProductRepository
from storefront.scheduler import CallbackScheduler
from storefront.validators import validate_coupon_form, validate_product_form

logger = logging.getLogger(__name__)


def _millis() -> int:
    return int(time.time() * 1000)


class NotificationService:
    """Queue of messages shown to the shopper.

    With a scheduler, each notification removes itself after ``ttl`` seconds.
    Expiry runs on the scheduler's timer thread, so the queue is guarded by a
    lock.
    """

    def __init__(self, scheduler: Optional[CallbackScheduler] = None,
                 ttl: float = DISPLAY.NOTIFICATION_TTL_SECONDS):
        self._notifications: List[Notification] = []
        self._lock = threading.Lock()
        self._scheduler = scheduler
        self._ttl = ttl

    @property
    def notifications(self) -> List[Notification]:
        with self._lock:
            return list(self._notifications)

    def add(self, message: str, type: NotificationType = NotificationType.SUCCESS) -> Notification:
        notification = Notification(id=uuid.uuid4().hex, message=message, type=type)
        with self._lock:
            self._notifications.append(notification)
        logger.info(f"[{type.value}] {message}")

        if self._scheduler is not None:
            self._scheduler.schedule(
                ("notification", notification.id),
                self._ttl,
                lambda: self.remove(notification.id),
            )
        return notification

    def remove(self, notification_id: str) -> None:
        with self._lock:
            self._notifications = [n for n in self._notifications if n.id != notification_id]

    def report(self, outcome: Outcome, success_message: Optional[str] = None) -> Outcome:
        """Post the outcome's error, or ``success_message`` when it succeeded."""
        if not outcome.ok:
            self.add(outcome.message, NotificationType.ERROR)
        elif success_message:
            self.add(success_message, NotificationType.SUCCESS)
        return outcome


class CartService:
    """Cart and coupon selection of the current session.

    Totals are recomputed from scratch whenever they are read, so they can
    never drift from the cart.
    """

    def __init__(self, product_repository: ProductRepository,
                 cart_repository: CartRepository,
                 notification_service: NotificationService):
        """Initialize with the catalog, the stored cart and the notification queue.

        Args:
            product_repository: Catalog used to resolve product ids and stock
            cart_repository: Where the cart is loaded from and saved to
            notification_service: Receives a message for each user action
        """
        self._product_repository = product_repository
        self._cart_repository = cart_repository
        self._notifications = notification_service
        self._cart: List[CartItem] = cart_repository.get_cart()
        self._selection = CouponSelection()

    @property
    def cart(self) -> List[CartItem]:
        return list(self._cart)

    @property
    def selected_coupon(self) -> Optional[Coupon]:
        return self._selection.coupon

    @property
    def totals(self) -> CartTotals:
        return calculate_cart_total(self._cart, self._selection.coupon)

    @property
    def total_item_count(self) -> int:
        return get_total_item_count(self._cart)

    def _set_cart(self, cart: List[CartItem]) -> None:
        self._cart = cart
        self._cart_repository.save_cart(cart)

    def get_item_total(self, item: CartItem) -> int:
        return calculate_item_total(item, self._cart)

    def get_remaining_stock(self, product_id: str) -> int:
        """Remaining stock of a catalog product, 0 when the id is unknown."""
        try:
            product = self._product_repository.get_product(product_id)
        except ProductNotFound:
            return 0
        return get_remaining_stock(product, self._cart)

    def add_to_cart(self, product: Product) -> Outcome[List[CartItem]]:
        outcome = add_item_to_cart(self._cart, product)
        if outcome.ok:
            self._set_cart(outcome.value)
        return self._notifications.report(outcome, "Added to cart")

    def remove_from_cart(self, product_id: str) -> Outcome[List[CartItem]]:
        self._set_cart(remove_item_from_cart(self._cart, product_id))
        return Outcome.success(self.cart)

    def update_quantity(self, product_id: str, quantity: int) -> Outcome[List[CartItem]]:
        """Set a line's quantity, checked against the current catalog stock.

        Returns:
            Outcome: The new cart, or the unchanged cart with ``ProductNotFound``
            or ``StockExceeded``
        """
        try:
            product = self._product_repository.get_product(product_id)
        except ProductNotFound as e:
            return self._notifications.report(Outcome.failure(self.cart, e))

        outcome = update_cart_item_quantity(self._cart, product_id, quantity, stock=product.stock)
        if outcome.ok:
            self._set_cart(outcome.value)
        return self._notifications.report(outcome)

    def apply_coupon(self, coupon: Coupon) -> Outcome[Optional[Coupon]]:
        outcome = self._selection.apply(self._cart, coupon)
        return self._notifications.report(outcome, "Coupon applied")

    def clear_coupon(self) -> None:
        self._selection.clear()

    def coupon_deleted(self, code: str) -> None:
        self._selection.coupon_deleted(code)

    def complete_order(self) -> Outcome[Optional[str]]:
        """Place the order, emptying the cart and the coupon selection.

        Returns:
            Outcome: The order number, or ``None`` with ``EmptyCart`` or
            ``OutOfStock`` when the cart cannot be ordered
        """
        validation = validate_cart(self._cart)
        if not validation.is_valid:
            error_cls = EmptyCart if not self._cart else OutOfStock
            return self._notifications.report(
                Outcome.failure(None, error_cls("; ".join(validation.errors))))

        order_number = f"ORD-{_millis()}"
        logger.info(f"Order {order_number} placed, final total {self.totals.final_total}")
        self._set_cart([])
        self._selection.clear()
        return self._notifications.report(
            Outcome.success(order_number), f"Order placed. Order number: {order_number}")


class ProductService:
    """Admin operations on the catalog and the shopper's product search."""

    def __init__(self, product_repository: ProductRepository,
                 notification_service: NotificationService,
                 scheduler: Optional[CallbackScheduler] = None):
        self._product_repository = product_repository
        self._notifications = notification_service
        self._scheduler = scheduler
        self._search_lock = threading.Lock()
        self.search_term = ""
        self.debounced_search_term = ""

    def get_all_products(self) -> List[Product]:
        return self._product_repository.get_all_products()

    def get_product_by_id(self, product_id: str) -> Product:
        """Retrieve a single product by its ID.

        Raises:
            ProductNotFound: If no product exists with the given ID
        """
        return self._product_repository.get_product(product_id=product_id)

    def _new_product_id(self) -> str:
        product_id = f"p{_millis()}"
        existing = {product.id for product in self.get_all_products()}
        suffix = 1
        candidate = product_id
        while candidate in existing:
            candidate = f"{product_id}-{suffix}"
            suffix += 1
        return candidate

    def add_product(self, name: str, price: int, stock: int,
                    discounts: Optional[List[DiscountTier]] = None,
                    description: Optional[str] = None,
                    is_recommended: bool = False) -> Outcome[Optional[Product]]:
        discounts = list(discounts or [])
        validation = validate_product_form(name, price, stock, discounts)
        if not validation.is_valid:
            return self._notifications.report(
                Outcome.failure(None, InvalidProduct("; ".join(validation.errors))))

        product = Product(
            id=self._new_product_id(),
            name=name.strip(),
            price=price,
            stock=stock,
            discounts=discounts,
            description=description,
            is_recommended=is_recommended,
        )
        self._product_repository.upsert(product)
        return self._notifications.report(Outcome.success(product), "Product added")

    def update_product(self, product_id: str, **updates) -> Outcome[Optional[Product]]:
        """Apply field ``updates`` to a product.

        The merged product is validated like a new one before it is stored.
        The id cannot be changed.
        """
        try:
            product = self._product_repository.get_product(product_id)
        except ProductNotFound as e:
            return self._notifications.report(Outcome.failure(None, e))

        editable = {f.name for f in dataclasses.fields(product)} - {"id"}
        unknown = sorted(set(updates) - editable)
        if unknown:
            return self._notifications.report(
                Outcome.failure(product, InvalidProduct(f"Cannot update field(s): {', '.join(unknown)}")))

        merged = {name: updates.get(name, getattr(product, name)) for name in editable}
        validation = validate_product_form(
            merged["name"], merged["price"], merged["stock"], merged["discounts"])
        if not validation.is_valid:
            return self._notifications.report(
                Outcome.failure(product, InvalidProduct("; ".join(validation.errors))))

        updated = dataclasses.replace(product, **updates)
        self._product_repository.upsert(updated)
        return self._notifications.report(Outcome.success(updated), "Product updated")

    def delete_product(self, product_id: str) -> Outcome[Optional[Product]]:
        try:
            product = self._product_repository.delete(product_id)
        except ProductNotFound as e:
            return self._notifications.report(Outcome.failure(None, e))
        return self._notifications.report(Outcome.success(product), "Product deleted")

    def search(self, term: str) -> List[Product]:
        """Products whose name or description contains ``term``, ignoring case."""
        products = self.get_all_products()
        needle = term.strip().lower()
        if not needle:
            return products
        return [
            product for product in products
            if needle in product.name.lower()
            or (product.description and needle in product.description.lower())
        ]

    def set_search_term(self, term: str) -> None:
        """Update the search box; the filter follows after the debounce delay."""
        with self._search_lock:
            self.search_term = term
            if self._scheduler is None:
                self.debounced_search_term = term
                return

        def apply():
            with self._search_lock:
                if self.search_term == term:
                    self.debounced_search_term = term

        self._scheduler.schedule("search", DISPLAY.SEARCH_DEBOUNCE_SECONDS, apply)

    @property
    def filtered_products(self) -> List[Product]:
        return self.search(self.debounced_search_term)


class CouponService:
    """Admin operations on coupons."""

    def __init__(self, coupon_repository: CouponRepository,
                 cart_service: CartService,
                 notification_service: NotificationService):
        self._coupon_repository = coupon_repository
        self._cart_service = cart_service
        self._notifications = notification_service

    def get_all_coupons(self) -> List[Coupon]:
        return self._coupon_repository.get_all_coupons()

    def add_coupon(self, name: str, code: str,
                   discount_type: DiscountType,
                   discount_value: float) -> Outcome[List[Coupon]]:
        code = normalize_coupon_code(code)
        validation = validate_coupon_form(name, code, discount_type, discount_value)
        if not validation.is_valid:
            return self._notifications.report(
                Outcome.failure(self.get_all_coupons(), InvalidCouponForm("; ".join(validation.errors))))

        coupon = Coupon(name=name.strip(), code=code,
                        discount_type=discount_type, discount_value=discount_value)
        outcome = add_coupon(self.get_all_coupons(), coupon)
        if outcome.ok:
            self._coupon_repository.upsert(coupon)
        return self._notifications.report(outcome, "Coupon added")

    def delete_coupon(self, code: str) -> Outcome[List[Coupon]]:
        try:
            self._coupon_repository.delete(code)
        except CouponNotFound as e:
            return self._notifications.report(Outcome.failure(self.get_all_coupons(), e))

        self._cart_service.coupon_deleted(code)
        return self._notifications.report(Outcome.success(self.get_all_coupons()), "Coupon deleted")

    def apply_coupon(self, code: str) -> Outcome[Optional[Coupon]]:
        """Select a stored coupon for the cart by its code."""
        try:
            coupon = self._coupon_repository.get_coupon(code)
        except CouponNotFound as e:
            return self._notifications.report(Outcome.failure(self._cart_service.selected_coupon, e))
        return self._cart_service.apply_coupon(coupon)
