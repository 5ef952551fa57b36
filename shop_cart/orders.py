from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional, Tuple

from shop_cart.cart import CartManager
from shop_cart.checkout import CheckoutSaga, EmptyCartError
from shop_cart.models import Order, OrderLine, cart_total
from shop_cart.store import ORDERS_KEY, Store

ORDERS_TYPE = List[Order]

DATE_FORMAT = "%m/%d/%Y %I:%M:%S %p"


class OrderManager:
    """
    Owns the order history.

    History is append-only and kept in creation order; `list_orders` gives the
    newest order first without touching the stored order.
    """

    def __init__(self, store: Store, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock
        self._orders: List[Order] = self.store.load(ORDERS_KEY, ORDERS_TYPE, [])

    def __len__(self) -> int:
        return len(self._orders)

    def _next_id(self, now: datetime) -> int:
        order_id = int(now.timestamp() * 1000)
        if self._orders:
            order_id = max(order_id, self._orders[-1].id + 1)
        return order_id

    def build_order(self, cart: CartManager) -> Order:
        items = tuple(OrderLine.from_cart_item(item) for item in cart.get_items())
        now = self.clock()
        return Order(
            id=self._next_id(now),
            date=now.strftime(DATE_FORMAT),
            items=items,
            total=cart_total(items),
        )

    def checkout(self, cart: CartManager) -> Order:
        if cart.is_empty:
            self.store.log("[checkout] Your cart is empty!")
            raise EmptyCartError("Cannot check out an empty cart")

        order = self.build_order(cart)
        return CheckoutSaga(self.store, self, cart).execute(order)

    def append(self, order: Order) -> None:
        orders = [*self._orders, order]
        self.store.save(ORDERS_KEY, ORDERS_TYPE, orders)
        self._orders = orders
        self.store.log(f"[order={order.id}] recorded (history={len(orders)})")

    def discard(self, order_id: int) -> None:
        orders = [order for order in self._orders if order.id != order_id]
        self.store.save(ORDERS_KEY, ORDERS_TYPE, orders)
        self._orders = orders
        self.store.log(f"[order={order_id}] discarded (history={len(orders)})")

    def list_orders(self) -> Tuple[Order, ...]:
        return tuple(reversed(self._orders))

    def get_order(self, order_id: int) -> Optional[Order]:
        return next((order for order in self._orders if order.id == order_id), None)
