"""End-to-end runs of the command-line front end against a temp data dir."""
from decimal import Decimal

import pytest
import respx
from httpx import Response

import run_shop
from shop_cart.cart import CART_TYPE
from shop_cart.models import CartItem
from shop_cart.store import CART_KEY, FileKeyValueStore, Store

CATALOG_URL = "https://catalog.example/products"

PAYLOAD = [
    {"id": 1, "title": "Backpack", "price": 9.99, "image": "https://img.example/1.jpg"},
    {"id": 2, "title": "T-Shirt", "price": 22.3, "image": "https://img.example/2.jpg"},
]


@pytest.fixture(autouse=True)
def _settings_env(monkeypatch, tmp_path):
    monkeypatch.setattr(run_shop, "configure_logging", lambda *args, **kwargs: None)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SHOP_CATALOG_URL", CATALOG_URL)
    monkeypatch.setenv("SHOP_DATA_DIR", str(tmp_path / "data"))


@respx.mock
def test_add_then_checkout_then_list_orders(capsys):
    respx.get(CATALOG_URL).mock(return_value=Response(200, json=PAYLOAD))

    assert run_shop.main(["add", "1"]) == 0
    assert run_shop.main(["add", "1"]) == 0
    assert run_shop.main(["add", "2"]) == 0
    capsys.readouterr()

    assert run_shop.main(["cart"]) == 0
    out = capsys.readouterr().out
    assert "items: 3  total: $42.28" in out

    assert run_shop.main(["checkout"]) == 0
    assert "placed successfully" in capsys.readouterr().out

    assert run_shop.main(["cart"]) == 0
    assert "Your cart is empty." in capsys.readouterr().out

    assert run_shop.main(["orders"]) == 0
    out = capsys.readouterr().out
    assert "total: $42.28" in out
    assert "Backpack" in out


def test_checkout_with_empty_cart_fails(capsys):
    assert run_shop.main(["checkout"]) == 1
    assert "Your cart is empty!" in capsys.readouterr().err


def test_quantity_change_to_zero_removes_item(tmp_path, capsys):
    Store(FileKeyValueStore(tmp_path / "data")).save(
        CART_KEY, CART_TYPE, [CartItem(id=1, title="Backpack", price=Decimal("9.99"), image="x", quantity=1)]
    )

    assert run_shop.main(["qty", "1", "-1"]) == 0
    assert "Your cart is empty." in capsys.readouterr().out


@respx.mock
def test_catalog_failure_is_reported(capsys):
    respx.get(CATALOG_URL).mock(return_value=Response(500))

    assert run_shop.main(["products"]) == 1
    assert "Failed to load products" in capsys.readouterr().err


@respx.mock
def test_unknown_product(capsys):
    respx.get(CATALOG_URL).mock(return_value=Response(200, json=PAYLOAD))

    assert run_shop.main(["add", "99"]) == 1
    assert "Unknown product: 99" in capsys.readouterr().err
