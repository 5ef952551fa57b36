from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

from shop_cart.models import Order
from shop_cart.store import Store

if TYPE_CHECKING:
    from shop_cart.cart import CartManager
    from shop_cart.orders import OrderManager


class EmptyCartError(Exception):
    pass


class CheckoutError(Exception):
    """A checkout write failed; completed steps have been compensated."""

    def __init__(self, step: str, order: Order, cause: Exception):
        super().__init__(f"Checkout of order {order.id} failed at step {step}: {cause}")
        self.step = step
        self.order = order


class Step(ABC):
    def __init__(self, store: Store, order: Order):
        self.store = store
        self.order = order

    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def execute(self) -> None: ...

    @abstractmethod
    def compensate(self) -> None: ...

    def run(self) -> None:
        self.store.log(f"[order={self.order.id}] STEP {self.name()}")
        self.execute()
        self.store.log(f"[order={self.order.id}] STEP {self.name()} OK")

    def run_compensation(self) -> None:
        self.store.log(f"[order={self.order.id}] COMPENSATE {self.name()}")
        self.compensate()
        self.store.log(f"[order={self.order.id}] COMPENSATE {self.name()} OK")


class RecordOrder(Step):
    def __init__(self, store: Store, order: Order, orders: OrderManager):
        super().__init__(store, order)
        self.orders = orders

    def name(self) -> str:
        return "RecordOrder"

    def execute(self) -> None:
        self.orders.append(self.order)

    def compensate(self) -> None:
        self.orders.discard(self.order.id)


class ClearCart(Step):
    def __init__(self, store: Store, order: Order, cart: CartManager):
        super().__init__(store, order)
        self.cart = cart

    def name(self) -> str:
        return "ClearCart"

    def execute(self) -> None:
        self.cart.clear()

    def compensate(self) -> None:
        # Last step: nothing after it can fail.
        self.store.log(f"[order={self.order.id}] clear cart has no compensation")


class CheckoutSaga:
    """
    Runs the checkout writes in order: record the order, then empty the cart.

    Success is only reported once both writes landed. If one fails, the steps
    already done are compensated in reverse and CheckoutError names the step
    that failed.
    """

    def __init__(self, store: Store, orders: OrderManager, cart: CartManager):
        self.store = store
        self.orders = orders
        self.cart = cart

    def execute(self, order: Order) -> Order:
        self.store.log(
            f"[order={order.id}] CHECKOUT START items={len(order.items)} total={order.total}",
            order_id=order.id,
        )

        steps: List[Step] = [
            RecordOrder(self.store, order, self.orders),
            ClearCart(self.store, order, self.cart),
        ]

        completed: List[Step] = []
        for step in steps:
            try:
                step.run()
            except Exception as e:
                self.store.log(f"[order={order.id}] CHECKOUT FAILED at {step.name()}: {e}")
                self._compensate(order, completed)
                raise CheckoutError(step.name(), order, e) from e
            completed.append(step)

        self.store.log(f"[order={order.id}] Order placed successfully")
        return order

    def _compensate(self, order: Order, completed: List[Step]) -> None:
        for step in reversed(completed):
            try:
                step.run_compensation()
            except Exception as comp_exc:
                self.store.log(f"[order={order.id}] COMPENSATION FAILED at {step.name()}: {comp_exc}")
        self.store.log(f"[order={order.id}] CHECKOUT END (failed)")
