"""Pytest fixtures for the storefront tests."""

import pytest

from storefront.enums import DiscountType
from storefront.main import StorefrontFactory
from storefront.models import CartItem, Coupon, DiscountTier, Product
from storefront.scheduler import CallbackScheduler
from storefront.storage import InMemoryStorage


class FakeTimer:
    """Stands in for threading.Timer; fires only when the test says so."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.function()


@pytest.fixture
def timers():
    return []


@pytest.fixture
def scheduler(timers) -> CallbackScheduler:
    def factory(interval, function):
        timer = FakeTimer(interval, function)
        timers.append(timer)
        return timer

    return CallbackScheduler(timer_factory=factory)


@pytest.fixture
def tiered_product() -> Product:
    return Product(
        id="p1", name="Keyboard", price=10000, stock=20,
        discounts=[DiscountTier(min_quantity=10, rate=0.1)],
    )


@pytest.fixture
def other_product() -> Product:
    return Product(id="p2", name="Mouse", price=20000, stock=20)


@pytest.fixture
def cheap_product() -> Product:
    return Product(id="p3", name="Cable", price=5000, stock=5)


@pytest.fixture
def percent_coupon() -> Coupon:
    return Coupon(name="10% off", code="PERCENT10",
                  discount_type=DiscountType.PERCENTAGE, discount_value=10)


@pytest.fixture
def amount_coupon() -> Coupon:
    return Coupon(name="5000 off", code="AMOUNT5000",
                  discount_type=DiscountType.AMOUNT, discount_value=5000)


@pytest.fixture
def bulk_cart(tiered_product, other_product) -> list:
    return [
        CartItem(product=tiered_product, quantity=10),
        CartItem(product=other_product, quantity=10),
    ]


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def shop(storage, scheduler):
    return StorefrontFactory().setup(storage=storage, scheduler=scheduler)
