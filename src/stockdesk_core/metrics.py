from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Mapping, Sequence

from stockdesk_sdk.models import Item

LOW_STOCK_THRESHOLD = 5


class StockLevel(str, Enum):
    OUT = "out"
    LOW = "low"
    OK = "ok"


def stock_level(balance: int) -> StockLevel:
    if balance <= 0:
        return StockLevel.OUT
    if balance <= LOW_STOCK_THRESHOLD:
        return StockLevel.LOW
    return StockLevel.OK


@dataclass(frozen=True)
class LowStockEntry:
    item: Item
    stock: int


@dataclass(frozen=True)
class DashboardMetrics:
    total_items: int
    total_units: int
    low_stock_items: tuple[LowStockEntry, ...]
    zero_stock_items: int
    inventory_value: Decimal


def compute_dashboard_metrics(items: Sequence[Item], balances: Mapping[int, int]) -> DashboardMetrics:
    stocked = [(item, balances.get(item.id, 0)) for item in items]
    low = [LowStockEntry(item=item, stock=stock) for item, stock in stocked if 0 < stock <= LOW_STOCK_THRESHOLD]
    # sorted() is stable, so equal balances keep catalog order
    low = sorted(low, key=lambda entry: entry.stock)
    return DashboardMetrics(
        total_items=len(stocked),
        total_units=sum(stock for _, stock in stocked),
        low_stock_items=tuple(low),
        zero_stock_items=sum(1 for _, stock in stocked if stock == 0),
        inventory_value=sum(
            (stock * (item.price if item.price is not None else Decimal("0")) for item, stock in stocked),
            Decimal("0"),
        ),
    )
