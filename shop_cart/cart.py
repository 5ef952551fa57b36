from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import List, Optional, Tuple

from shop_cart.models import CartItem, Product, cart_total
from shop_cart.store import CART_KEY, Store

CART_TYPE = List[CartItem]


class CartManager:
    """
    Owns the current cart.

    An item goes absent -> present(1) on its first add, present(q) -> present(q+1)
    on each repeat add, and back to absent as soon as its quantity would drop
    to zero or below. Every mutation is written to the store before it becomes
    visible in memory.
    """

    def __init__(self, store: Store):
        self.store = store
        self._items: List[CartItem] = self._load()

    def _load(self) -> List[CartItem]:
        items: List[CartItem] = []
        for stored in self.store.load(CART_KEY, CART_TYPE, []):
            if stored.quantity <= 0:
                continue
            # one line per product id; repeated lines fold into the first
            item = self._find(items, stored.id)
            if item:
                item.quantity += stored.quantity
            else:
                items.append(stored)
        return items

    def _commit(self, items: List[CartItem]) -> None:
        self.store.save(CART_KEY, CART_TYPE, items)
        self._items = items

    def _working_copy(self) -> List[CartItem]:
        return [replace(item) for item in self._items]

    def _find(self, items: List[CartItem], product_id: int) -> Optional[CartItem]:
        return next((item for item in items if item.id == product_id), None)

    def add_item(self, product_id: int, title: str, price: Decimal, image: str) -> CartItem:
        items = self._working_copy()
        item = self._find(items, product_id)
        if item:
            item.quantity += 1
        else:
            item = CartItem(id=product_id, title=title, price=price, image=image, quantity=1)
            items.append(item)

        self._commit(items)
        self.store.log(f"[cart] {title} added to cart! (qty={item.quantity})", product_id=product_id)
        return replace(item)

    def add_product(self, product: Product) -> CartItem:
        return self.add_item(product.id, product.title, product.price, product.image)

    def change_quantity(self, product_id: int, delta: int) -> None:
        items = self._working_copy()
        item = self._find(items, product_id)
        if not item:
            return

        item.quantity += delta
        if item.quantity <= 0:
            self.remove_item(product_id)
            return

        self._commit(items)
        self.store.log(f"[cart] quantity changed: id={product_id} delta={delta} (qty={item.quantity})")

    def remove_item(self, product_id: int) -> None:
        items = [item for item in self._working_copy() if item.id != product_id]
        removed = len(items) != len(self._items)
        self._commit(items)
        if removed:
            self.store.log(f"[cart] item removed: id={product_id}")

    def clear(self) -> None:
        self._commit([])
        self.store.log("[cart] cleared")

    def get_items(self) -> Tuple[CartItem, ...]:
        return tuple(replace(item) for item in self._items)

    def get_item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def get_total(self) -> Decimal:
        return cart_total(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items
