from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple


@dataclass(slots=True, frozen=True)
class Product:
    id: int
    title: str
    price: Decimal
    image: str


@dataclass(slots=True)
class CartItem:
    id: int
    title: str
    price: Decimal
    image: str
    quantity: int = 1

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass(slots=True, frozen=True)
class OrderLine:
    id: int
    title: str
    price: Decimal
    image: str
    quantity: int

    @classmethod
    def from_cart_item(cls, item: CartItem) -> OrderLine:
        return cls(id=item.id, title=item.title, price=item.price, image=item.image, quantity=item.quantity)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass(slots=True, frozen=True)
class Order:
    """
    Immutable record of a completed checkout.

    `items` are frozen copies of the cart lines at checkout time.
    """

    id: int
    date: str
    items: Tuple[OrderLine, ...]
    total: Decimal


def cart_total(items) -> Decimal:
    return sum((item.subtotal for item in items), Decimal("0"))
