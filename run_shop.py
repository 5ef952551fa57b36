from __future__ import annotations

import argparse
import sys
from decimal import Decimal
from typing import List, Optional

from shop_cart.cart import CartManager
from shop_cart.catalog import CatalogClient, CatalogFetchError
from shop_cart.checkout import CheckoutError, EmptyCartError
from shop_cart.config import ShopSettings
from shop_cart.log_config import configure_logging
from shop_cart.orders import OrderManager
from shop_cart.store import FileKeyValueStore, Store


def money(amount: Decimal) -> str:
    return f"${amount.quantize(Decimal('0.01'))}"


def print_cart(cart: CartManager) -> None:
    items = cart.get_items()
    if not items:
        print("Your cart is empty.")
        return
    for item in items:
        print(f"{item.id:>4}  {item.title[:48]:<48} {money(item.price):>10} x{item.quantity:<3} {money(item.subtotal):>10}")
    print(f"items: {cart.get_item_count()}  total: {money(cart.get_total())}")


def print_orders(orders: OrderManager) -> None:
    history = orders.list_orders()
    if not history:
        print("No past orders found.")
        return
    for order in history:
        print(f"Order #{order.id}  {order.date}  total: {money(order.total)}")
        for item in order.items:
            print(f"    {item.title[:48]:<48} x{item.quantity:<3} {money(item.subtotal):>10}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Browse the catalog, manage the cart and place orders.")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("products", help="List the catalog")
    add = sub.add_parser("add", help="Add one unit of a product to the cart")
    add.add_argument("product_id", type=int)
    qty = sub.add_parser("qty", help="Change an item's quantity by a signed delta")
    qty.add_argument("product_id", type=int)
    qty.add_argument("delta", type=int)
    remove = sub.add_parser("remove", help="Remove an item from the cart")
    remove.add_argument("product_id", type=int)
    sub.add_parser("clear", help="Empty the cart")
    sub.add_parser("cart", help="Show the cart")
    sub.add_parser("checkout", help="Turn the cart into an order")
    sub.add_parser("orders", help="Show past orders, newest first")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = ShopSettings()
    configure_logging(settings.log_format, settings.log_level)

    store = Store(FileKeyValueStore(settings.data_dir))
    cart = CartManager(store)
    orders = OrderManager(store)
    catalog = CatalogClient.from_settings(settings)

    try:
        if args.command == "products":
            for product in catalog.fetch_products():
                print(f"{product.id:>4}  {product.title[:60]:<60} {money(product.price):>10}")
        elif args.command == "add":
            product = next((p for p in catalog.fetch_products() if p.id == args.product_id), None)
            if product is None:
                print(f"Unknown product: {args.product_id}", file=sys.stderr)
                return 1
            cart.add_product(product)
            print(f"{product.title} added to cart!")
        elif args.command == "qty":
            cart.change_quantity(args.product_id, args.delta)
            print_cart(cart)
        elif args.command == "remove":
            cart.remove_item(args.product_id)
            print_cart(cart)
        elif args.command == "clear":
            cart.clear()
            print_cart(cart)
        elif args.command == "cart":
            print_cart(cart)
        elif args.command == "checkout":
            order = orders.checkout(cart)
            print(f"Order #{order.id} placed successfully! total: {money(order.total)}")
        elif args.command == "orders":
            print_orders(orders)
    except CatalogFetchError as e:
        print(f"Failed to load products. Please try again later. ({e})", file=sys.stderr)
        return 1
    except EmptyCartError:
        print("Your cart is empty!", file=sys.stderr)
        return 1
    except CheckoutError as e:
        print(f"Checkout failed at {e.step}; please try again. ({e})", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
