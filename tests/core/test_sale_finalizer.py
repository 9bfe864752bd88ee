from __future__ import annotations

from decimal import Decimal

import pytest

from stockdesk_core.cart import CartEngine
from stockdesk_core.catalog_cache import CatalogCache
from stockdesk_core.errors import EmptyCart, InsufficientStock, RemoteFailure, Unauthorized
from stockdesk_core.identity import Caller
from stockdesk_core.sale_finalizer import SALE_SUCCESS_MESSAGE, SaleFinalizer
from stockdesk_sdk.exceptions import ValidationError as ApiValidationError


def _cart_with(cache: CatalogCache, *item_ids: int) -> CartEngine:
    cart = CartEngine(cache)
    for item_id in item_ids:
        item = cache.find_item(item_id)
        assert item is not None
        cart.add_to_cart(item)
    return cart


def test_finalize_requires_signed_in_seller(cache: CatalogCache, fake_session) -> None:
    cart = _cart_with(cache, 1)

    with pytest.raises(Unauthorized):
        SaleFinalizer(fake_session, cache).finalize(cart, None)

    assert fake_session.sales.sales == []
    assert cart.error is not None
    assert len(cart) == 1


def test_finalize_rejects_blank_seller_id(cache: CatalogCache, fake_session) -> None:
    cart = _cart_with(cache, 1)
    with pytest.raises(Unauthorized):
        SaleFinalizer(fake_session, cache).finalize(cart, Caller(auth_user_id="  "))
    assert fake_session.sales.sales == []


def test_finalize_rejects_empty_cart(cache: CatalogCache, fake_session, operator: Caller) -> None:
    cart = CartEngine(cache)

    with pytest.raises(EmptyCart):
        SaleFinalizer(fake_session, cache).finalize(cart, operator)

    assert fake_session.sales.sales == []
    assert cart.error == EmptyCart().message


def test_finalize_rechecks_balances_before_submitting(cache: CatalogCache, fake_session, operator: Caller) -> None:
    cart = _cart_with(cache, 1, 1)
    cache.adjust(1, -2, reason="concurrent")

    with pytest.raises(InsufficientStock) as exc_info:
        SaleFinalizer(fake_session, cache).finalize(cart, operator)

    assert exc_info.value.available == 1
    assert fake_session.sales.sales == []
    assert cart.line_for(1).quantity == 2
    assert cache.balance(1) == 1


def test_finalize_reports_first_short_line_in_cart_order(
    cache: CatalogCache, fake_session, operator: Caller
) -> None:
    cart = _cart_with(cache, 1, 1, 3)
    assert [line.item_id for line in cart.lines] == [3, 1]
    cache.adjust(1, -2, reason="concurrent")
    cache.adjust(3, -12, reason="concurrent")

    with pytest.raises(InsufficientStock) as exc_info:
        SaleFinalizer(fake_session, cache).finalize(cart, operator)

    assert exc_info.value.item_id == 3
    assert exc_info.value.available == 0
    assert cart.error == 'Insufficient stock for "Espresso cup". Available: 0'
    assert fake_session.sales.sales == []
    assert len(cart) == 2


def test_finalize_submits_and_projects_sale(cache: CatalogCache, fake_session, operator: Caller) -> None:
    cart = _cart_with(cache, 1, 3, 3)
    cart.update_price(3, "3")

    outcome = SaleFinalizer(fake_session, cache).finalize(cart, operator)

    sale = fake_session.sales.sales[0]
    assert sale.seller == "user-1"
    assert [(line.item, line.amount, line.price) for line in sale.lines] == [
        (3, 2, Decimal("3")),
        (1, 1, Decimal("10")),
    ]
    assert outcome.total == Decimal("16")
    assert outcome.keys.idempotency_key
    assert cache.balance(1) == 2
    assert cache.balance(3) == 10
    assert not cache.projection.is_authoritative
    assert cart.is_empty
    assert cart.success == SALE_SUCCESS_MESSAGE
    assert cart.error is None


def test_finalize_remote_failure_changes_nothing(cache: CatalogCache, fake_session, operator: Caller) -> None:
    fake_session.sales.fail = ApiValidationError(
        code="HTTP_ERROR", message="Saldo insuficiente", details=None, trace_id="t-9", status_code=400
    )
    cart = _cart_with(cache, 1)

    with pytest.raises(RemoteFailure) as exc_info:
        SaleFinalizer(fake_session, cache).finalize(cart, operator)

    assert exc_info.value.message == "Saldo insuficiente"
    assert exc_info.value.trace_id == "t-9"
    assert cart.error == "Saldo insuficiente"
    assert len(cart) == 1
    assert cache.balance(1) == 3
    assert cache.projection.is_authoritative


def test_finalize_after_refresh_adjusts_new_projection(cache: CatalogCache, fake_session, operator: Caller) -> None:
    cart = _cart_with(cache, 3)
    cache.refresh()

    SaleFinalizer(fake_session, cache).finalize(cart, operator)

    assert cache.balance(3) == 11
    assert cache.projection.snapshot.token == 2
