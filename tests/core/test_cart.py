from __future__ import annotations

from decimal import Decimal

import pytest

from stockdesk_core.cart import CartEngine
from stockdesk_core.catalog_cache import CatalogCache
from stockdesk_core.errors import InsufficientStock


def test_add_to_cart_increments_existing_line(cache: CatalogCache) -> None:
    cart = CartEngine(cache)
    coffee = cache.find_item(1)
    cup = cache.find_item(3)
    assert coffee is not None and cup is not None

    cart.add_to_cart(coffee)
    cart.add_to_cart(coffee)
    cart.add_to_cart(cup)

    assert [(line.item_id, line.quantity) for line in cart.lines] == [(3, 1), (1, 2)]
    assert cart.total == Decimal("22.50")
    assert cart.error is None


def test_add_to_cart_stops_at_balance(cache: CatalogCache) -> None:
    cart = CartEngine(cache)
    coffee = cache.find_item(1)
    assert coffee is not None
    for _ in range(3):
        cart.add_to_cart(coffee)

    with pytest.raises(InsufficientStock) as exc_info:
        cart.add_to_cart(coffee)

    assert exc_info.value.available == 3
    assert cart.error == 'Insufficient stock for "Coffee beans". Available: 3'
    line = cart.line_for(1)
    assert line is not None
    assert line.quantity == 3


def test_add_to_cart_rejects_item_without_stock(cache: CatalogCache) -> None:
    cart = CartEngine(cache)
    paper = cache.find_item(2)
    assert paper is not None

    with pytest.raises(InsufficientStock):
        cart.add_to_cart(paper)

    assert cart.is_empty
    assert cart.error is not None


def test_add_to_cart_clears_previous_notices(cache: CatalogCache) -> None:
    cart = CartEngine(cache)
    cart.success = "Sale registered successfully."
    cart.error = "old"
    coffee = cache.find_item(1)
    assert coffee is not None

    cart.add_to_cart(coffee)

    assert cart.success is None
    assert cart.error is None


def test_missing_price_becomes_zero(cache: CatalogCache) -> None:
    cache.adjust(2, 4, reason="test")
    cart = CartEngine(cache)
    paper = cache.find_item(2)
    assert paper is not None

    line = cart.add_to_cart(paper)

    assert line.unit_price == Decimal("0")
    assert cart.total == Decimal("0")


def test_update_quantity_clamps_to_balance(cache: CatalogCache) -> None:
    cart = CartEngine(cache)
    coffee = cache.find_item(1)
    assert coffee is not None
    cart.add_to_cart(coffee)

    line = cart.update_quantity(1, 10)
    assert line is not None
    assert line.quantity == 3
    assert cart.error == 'Insufficient stock for "Coffee beans". Available: 3'

    assert cart.update_quantity(1, "2.7").quantity == 2
    assert cart.update_quantity(1, 0).quantity == 1
    assert cart.update_quantity(1, -4).quantity == 1
    assert cart.update_quantity(99, 2) is None


def test_update_quantity_keeps_one_when_stock_is_gone(cache: CatalogCache) -> None:
    cart = CartEngine(cache)
    coffee = cache.find_item(1)
    assert coffee is not None
    cart.add_to_cart(coffee)
    cache.adjust(1, -3, reason="elsewhere")

    line = cart.update_quantity(1, 5)

    assert line is not None
    assert line.quantity == 1
    assert line.stock == 0
    assert "Available: 0" in (cart.error or "")


def test_update_price_clamps_to_zero(cache: CatalogCache) -> None:
    cart = CartEngine(cache)
    cup = cache.find_item(3)
    assert cup is not None
    cart.add_to_cart(cup)
    cart.update_quantity(3, 2)

    assert cart.update_price(3, -5).unit_price == Decimal("0")
    line = cart.update_price(3, "3,75")
    assert line.unit_price == Decimal("3.75")
    assert line.line_total == Decimal("7.50")
    assert cart.update_price(42, 1) is None


def test_remove_and_clear(cache: CatalogCache) -> None:
    cart = CartEngine(cache)
    coffee = cache.find_item(1)
    cup = cache.find_item(3)
    assert coffee is not None and cup is not None
    cart.add_to_cart(coffee)
    cart.add_to_cart(cup)

    assert cart.remove_line(1) is True
    assert cart.remove_line(1) is False
    assert len(cart) == 1

    cart.error = "x"
    cart.clear()
    assert cart.is_empty
    assert cart.error is None
    assert cart.total == Decimal("0")
