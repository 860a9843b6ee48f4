"""Repositories over the persistence port.

Each repository keeps an ordered in-memory copy of its collection, seeded from
storage (or from initial data when storage holds nothing), and writes the
whole collection back after every change.
"""
import logging
from typing import Dict, List, Optional

from storefront.exceptions import CouponNotFound, ProductNotFound
from storefront.models import CartItem, Coupon, Product
from storefront.storage import (
    CART_KEY,
    COUPONS_KEY,
    PRODUCTS_KEY,
    StateStorage,
    dump_state,
    load_state,
)

logger = logging.getLogger(__name__)


class ProductRepository:
    """Catalog of products keyed by id, in insertion order."""

    def __init__(self, storage: StateStorage, initial_products: Optional[List[Product]] = None):
        self._storage = storage
        stored = storage.load(PRODUCTS_KEY)
        if stored is None:
            products = list(initial_products or [])
        else:
            products = load_state(PRODUCTS_KEY, stored)
        self._products: Dict[str, Product] = {product.id: product for product in products}
        if stored is None:
            self._save()

    def _save(self) -> None:
        self._storage.save(PRODUCTS_KEY, dump_state(PRODUCTS_KEY, list(self._products.values())))

    def upsert(self, product: Product) -> None:
        self._products[product.id] = product
        self._save()

    def get_product(self, product_id: str) -> Product:
        if product_id not in self._products:
            raise ProductNotFound(f"Product with id {product_id} does not exist")
        return self._products[product_id]

    def get_all_products(self) -> List[Product]:
        return list(self._products.values())

    def add_products(self, products: List[Product]) -> None:
        for product in products:
            self.upsert(product=product)

    def delete(self, product_id: str) -> Product:
        if product_id not in self._products:
            raise ProductNotFound(f"Product with id {product_id} does not exist")
        product = self._products.pop(product_id)
        self._save()
        return product


class CouponRepository:
    """Coupons keyed by code, in insertion order."""

    def __init__(self, storage: StateStorage, initial_coupons: Optional[List[Coupon]] = None):
        self._storage = storage
        stored = storage.load(COUPONS_KEY)
        if stored is None:
            coupons = list(initial_coupons or [])
        else:
            coupons = load_state(COUPONS_KEY, stored)
        self._coupons: Dict[str, Coupon] = {coupon.code: coupon for coupon in coupons}
        if stored is None:
            self._save()

    def _save(self) -> None:
        self._storage.save(COUPONS_KEY, dump_state(COUPONS_KEY, list(self._coupons.values())))

    def upsert(self, coupon: Coupon) -> None:
        self._coupons[coupon.code] = coupon
        self._save()

    def get_coupon(self, code: str) -> Coupon:
        if code not in self._coupons:
            raise CouponNotFound(f"Coupon with code {code} does not exist")
        return self._coupons[code]

    def get_all_coupons(self) -> List[Coupon]:
        return list(self._coupons.values())

    def delete(self, code: str) -> Coupon:
        if code not in self._coupons:
            raise CouponNotFound(f"Coupon with code {code} does not exist")
        coupon = self._coupons.pop(code)
        self._save()
        return coupon


class CartRepository:
    """The shopper's cart as a single stored value."""

    def __init__(self, storage: StateStorage):
        self._storage = storage

    def get_cart(self) -> List[CartItem]:
        stored = self._storage.load(CART_KEY)
        if stored is None:
            return []
        return load_state(CART_KEY, stored)

    def save_cart(self, cart: List[CartItem]) -> None:
        self._storage.save(CART_KEY, dump_state(CART_KEY, cart))
        logger.debug(f"Saved cart with {len(cart)} lines")
