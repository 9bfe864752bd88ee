from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterator, Protocol

from stockdesk_sdk.models import Item

from .errors import InsufficientStock
from .validation import clamp_price, floor_quantity


class BalanceSource(Protocol):
    def balance(self, item_id: int) -> int: ...


@dataclass(frozen=True)
class CartLine:
    item_id: int
    name: str
    unit_price: Decimal
    quantity: int
    stock: int

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class CartEngine:
    """Sale in progress: at most one line per item, newest line first.

    Every line keeps ``quantity >= 1``. ``quantity <= balance`` is only checked
    when a line is mutated; balances may move afterwards, which is why the
    finalizer checks again.
    """

    def __init__(self, balances: BalanceSource) -> None:
        self.balances = balances
        self._lines: list[CartLine] = []
        self.error: str | None = None
        self.success: str | None = None

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def total(self) -> Decimal:
        return sum((line.line_total for line in self._lines), Decimal("0"))

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(list(self._lines))

    def line_for(self, item_id: int) -> CartLine | None:
        index = self._index(item_id)
        return self._lines[index] if index is not None else None

    def add_to_cart(self, item: Item) -> CartLine:
        self.error = None
        self.success = None
        stock = self.balances.balance(item.id)
        index = self._index(item.id)
        if index is not None:
            line = self._lines[index]
            if line.quantity + 1 > stock:
                raise self._reject(InsufficientStock.for_item(item.id, line.name, stock))
            updated = replace(line, quantity=line.quantity + 1, stock=stock)
            self._lines[index] = updated
            return updated

        if stock <= 0:
            raise self._reject(
                InsufficientStock(
                    message=f'No stock for "{item.name}".',
                    item_id=item.id,
                    item_name=item.name,
                    available=stock,
                )
            )
        line = CartLine(
            item_id=item.id,
            name=item.name,
            unit_price=item.price if item.price is not None else Decimal("0"),
            quantity=1,
            stock=stock,
        )
        self._lines.insert(0, line)
        return line

    def update_quantity(self, item_id: int, requested_qty: object) -> CartLine | None:
        """Set a line's quantity, clamping to [1, balance] instead of rejecting.

        Clamping down to the balance still leaves an insufficient-stock notice
        in ``error``. With no stock left at all the line stays at 1.
        """
        index = self._index(item_id)
        if index is None:
            return None
        line = self._lines[index]
        stock = self.balances.balance(item_id)
        quantity = floor_quantity(requested_qty)
        if quantity > stock:
            self.error = InsufficientStock.for_item(item_id, line.name, stock).message
            quantity = max(1, stock)
        updated = replace(line, quantity=quantity, stock=stock)
        self._lines[index] = updated
        return updated

    def update_price(self, item_id: int, requested_price: object) -> CartLine | None:
        index = self._index(item_id)
        if index is None:
            return None
        updated = replace(self._lines[index], unit_price=clamp_price(requested_price))
        self._lines[index] = updated
        return updated

    def remove_line(self, item_id: int) -> bool:
        index = self._index(item_id)
        if index is None:
            return False
        del self._lines[index]
        return True

    def clear(self) -> None:
        self._lines.clear()
        self.error = None
        self.success = None

    def _index(self, item_id: int) -> int | None:
        return next((idx for idx, line in enumerate(self._lines) if line.item_id == item_id), None)

    def _reject(self, exc: InsufficientStock) -> InsufficientStock:
        self.error = exc.message
        return exc
