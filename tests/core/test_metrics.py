from __future__ import annotations

from decimal import Decimal

from stockdesk_core.metrics import LOW_STOCK_THRESHOLD, StockLevel, compute_dashboard_metrics, stock_level
from stockdesk_sdk.models import Item


def test_dashboard_metrics_for_small_catalog() -> None:
    items = [Item(id=1, name="A", price=Decimal("10")), Item(id=2, name="B", price=None)]

    metrics = compute_dashboard_metrics(items, {1: 3, 2: 0})

    assert metrics.total_items == 2
    assert metrics.total_units == 3
    assert metrics.zero_stock_items == 1
    assert [(entry.item.id, entry.stock) for entry in metrics.low_stock_items] == [(1, 3)]
    assert metrics.inventory_value == Decimal("30")


def test_low_stock_is_sorted_ascending_and_keeps_catalog_order_on_ties() -> None:
    items = [
        Item(id=1, name="A", price=Decimal("1")),
        Item(id=2, name="B", price=Decimal("1")),
        Item(id=3, name="C", price=Decimal("1")),
        Item(id=4, name="D", price=Decimal("1")),
        Item(id=5, name="E", price=Decimal("1")),
    ]
    balances = {1: 4, 2: 2, 3: 4, 4: LOW_STOCK_THRESHOLD + 1, 5: -1}

    metrics = compute_dashboard_metrics(items, balances)

    assert [entry.item.id for entry in metrics.low_stock_items] == [2, 1, 3]
    assert metrics.zero_stock_items == 0
    assert metrics.total_units == 4 + 2 + 4 + LOW_STOCK_THRESHOLD + 1 - 1


def test_missing_balance_counts_as_zero() -> None:
    items = [Item(id=9, name="Ghost", price=Decimal("7.5"))]
    metrics = compute_dashboard_metrics(items, {})
    assert metrics.zero_stock_items == 1
    assert metrics.inventory_value == Decimal("0")


def test_empty_catalog() -> None:
    metrics = compute_dashboard_metrics([], {})
    assert metrics.total_items == 0
    assert metrics.total_units == 0
    assert metrics.low_stock_items == ()
    assert metrics.inventory_value == Decimal("0")


def test_stock_level_bands() -> None:
    assert stock_level(-3) is StockLevel.OUT
    assert stock_level(0) is StockLevel.OUT
    assert stock_level(LOW_STOCK_THRESHOLD) is StockLevel.LOW
    assert stock_level(LOW_STOCK_THRESHOLD + 1) is StockLevel.OK
