import logging
from dataclasses import dataclass
from typing import Optional

from storefront.enums import DiscountType
from storefront.models import Coupon, DiscountTier, Product
from storefront.repository import CartRepository, CouponRepository, ProductRepository
from storefront.scheduler import CallbackScheduler
from storefront.service import CartService, CouponService, NotificationService, ProductService
from storefront.storage import InMemoryStorage, StateStorage

INITIAL_PRODUCTS = [
    Product(
        id="p1", name="Product 1", price=10000, stock=20,
        discounts=[DiscountTier(min_quantity=10, rate=0.1), DiscountTier(min_quantity=20, rate=0.2)],
        description="Premium quality product.",
    ),
    Product(
        id="p2", name="Product 2", price=20000, stock=20,
        discounts=[DiscountTier(min_quantity=10, rate=0.15)],
        description="Practical product with many features.",
        is_recommended=True,
    ),
    Product(
        id="p3", name="Product 3", price=30000, stock=20,
        discounts=[DiscountTier(min_quantity=10, rate=0.2), DiscountTier(min_quantity=30, rate=0.25)],
        description="High capacity, high performance product.",
    ),
]

INITIAL_COUPONS = [
    Coupon(name="5000 off", code="AMOUNT5000", discount_type=DiscountType.AMOUNT, discount_value=5000),
    Coupon(name="10% off", code="PERCENT10", discount_type=DiscountType.PERCENTAGE, discount_value=10),
]


@dataclass
class Storefront:
    products: ProductService
    coupons: CouponService
    cart: CartService
    notifications: NotificationService


class StorefrontFactory:

    def setup(self, storage: Optional[StateStorage] = None,
              scheduler: Optional[CallbackScheduler] = None) -> Storefront:
        storage = storage if storage is not None else InMemoryStorage()

        product_repository = ProductRepository(storage, initial_products=INITIAL_PRODUCTS)
        coupon_repository = CouponRepository(storage, initial_coupons=INITIAL_COUPONS)
        cart_repository = CartRepository(storage)

        notification_service = NotificationService(scheduler=scheduler)
        cart_service = CartService(
            product_repository=product_repository,
            cart_repository=cart_repository,
            notification_service=notification_service,
        )
        return Storefront(
            products=ProductService(product_repository, notification_service, scheduler=scheduler),
            coupons=CouponService(coupon_repository, cart_service, notification_service),
            cart=cart_service,
            notifications=notification_service,
        )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    shop = StorefrontFactory().setup()
    p1 = shop.products.get_product_by_id("p1")
    p2 = shop.products.get_product_by_id("p2")

    for _ in range(10):
        shop.cart.add_to_cart(p1)
    shop.cart.add_to_cart(p2)
    shop.coupons.apply_coupon("PERCENT10")

    for item in shop.cart.cart:
        print(f"{item.product.name} x{item.quantity}: {shop.cart.get_item_total(item)}")

    totals = shop.cart.totals
    print(f"Before discount: {totals.total_before_discount}")
    print(f"After discount: {totals.total_after_discount}")
    print(f"Coupon discount: {totals.coupon_discount}")
    print(f"Final total: {totals.final_total}")

    # Validate complete_order method
    print(shop.cart.complete_order().value)
