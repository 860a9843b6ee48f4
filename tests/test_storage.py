"""Tests for the persistence port and its codec."""
import pytest
from pydantic import ValidationError

from storefront.main import INITIAL_COUPONS, INITIAL_PRODUCTS
from storefront.models import CartItem
from storefront.storage import (
    CART_KEY,
    COUPONS_KEY,
    PRODUCTS_KEY,
    InMemoryStorage,
    JsonFileStorage,
    dump_state,
    dumps_state,
    load_state,
    loads_state,
)


def test_state_round_trips(bulk_cart):
    for key, value in (
            (PRODUCTS_KEY, INITIAL_PRODUCTS),
            (COUPONS_KEY, INITIAL_COUPONS),
            (CART_KEY, bulk_cart)):
        assert load_state(key, dump_state(key, value)) == value
        assert loads_state(key, dumps_state(key, value)) == value


def test_dumped_state_is_plain_json(bulk_cart):
    data = dump_state(CART_KEY, bulk_cart)
    assert data[0]["quantity"] == 10
    assert data[0]["product"]["discounts"] == [{"min_quantity": 10, "rate": 0.1}]

    coupons = dump_state(COUPONS_KEY, INITIAL_COUPONS)
    assert coupons[1]["discount_type"] == "percentage"


def test_malformed_state_raises():
    with pytest.raises(ValidationError):
        load_state(CART_KEY, [{"product": {"id": "p1"}, "quantity": 0}])


def test_in_memory_storage_copies_values():
    storage = InMemoryStorage({"cart": []})
    value = [{"a": 1}]
    storage.save("x", value)
    value.append({"b": 2})

    assert storage.load("x") == [{"a": 1}]
    assert storage.load("cart") == []
    assert storage.load("missing", "default") == "default"

    storage.remove("x")
    assert storage.load("x") is None


def test_json_file_storage(tmp_path, bulk_cart):
    storage = JsonFileStorage(str(tmp_path))
    storage.save(CART_KEY, dump_state(CART_KEY, bulk_cart))

    reopened = JsonFileStorage(str(tmp_path))
    assert load_state(CART_KEY, reopened.load(CART_KEY)) == bulk_cart

    reopened.remove(CART_KEY)
    reopened.remove(CART_KEY)
    assert reopened.load(CART_KEY, []) == []


def test_json_file_storage_unreadable_file_falls_back(tmp_path):
    (tmp_path / "products.json").write_text("{not json", encoding="utf-8")
    storage = JsonFileStorage(str(tmp_path))
    assert storage.load(PRODUCTS_KEY, "fallback") == "fallback"


def test_cart_items_compare_by_value(tiered_product):
    assert CartItem(product=tiered_product, quantity=2) == CartItem(product=tiered_product, quantity=2)
