"""Pytest fixtures for the cart and order managers (memory backend)."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from shop_cart.cart import CartManager
from shop_cart.models import Product
from shop_cart.orders import OrderManager
from shop_cart.store import MemoryKeyValueStore, Store


class Clock:
    """Returns a fixed time; advance() moves it forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now = self.now + timedelta(**delta)


@pytest.fixture
def backend() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def store(backend) -> Store:
    return Store(backend)


@pytest.fixture
def cart(store) -> CartManager:
    return CartManager(store)


@pytest.fixture
def clock() -> Clock:
    return Clock(datetime(2026, 10, 17, 15, 4, 5))


@pytest.fixture
def orders(store, clock) -> OrderManager:
    return OrderManager(store, clock=clock)


@pytest.fixture
def products() -> dict[int, Product]:
    return {
        1: Product(id=1, title="Backpack", price=Decimal("9.99"), image="https://img.example/1.jpg"),
        2: Product(id=2, title="Slim Fit T-Shirt", price=Decimal("22.30"), image="https://img.example/2.jpg"),
        3: Product(id=3, title="Cotton Jacket", price=Decimal("55.99"), image="https://img.example/3.jpg"),
    }
