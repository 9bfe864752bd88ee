from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..cart import CartEngine, CartLine
from ..errors import StockDeskError, ValidationError
from ..formatting import format_money
from ..sale_finalizer import SaleFinalizer
from .base import CatalogView


@dataclass
class SalesView(CatalogView):
    cart: CartEngine = field(init=False)
    finalizer: SaleFinalizer = field(init=False)
    is_submitting: bool = False

    def __post_init__(self) -> None:
        self.cart = CartEngine(self.context.cache)
        self.finalizer = SaleFinalizer(self.context.session, self.context.cache)

    def search(self, query: str | None = None) -> list[dict[str, Any]]:
        rows = super().search(query)
        for row in rows:
            row["can_add"] = row["stock"] > 0
        return rows

    def add(self, item_id: int) -> dict[str, Any]:
        item = self.context.cache.find_item(item_id)
        if item is None:
            return self._failure(ValidationError(message=f"Unknown item {item_id}.", field="item"))
        try:
            self.cart.add_to_cart(item)
        except StockDeskError as exc:
            return self._failure(exc, cart=self.render_cart())
        return {"ok": True, "cart": self.render_cart()}

    def set_quantity(self, item_id: int, quantity: object) -> dict[str, Any]:
        self.cart.error = None
        try:
            self.cart.update_quantity(item_id, quantity)
        except StockDeskError as exc:
            return self._failure(exc, cart=self.render_cart())
        return {"ok": True, "notice": self.cart.error, "cart": self.render_cart()}

    def set_price(self, item_id: int, price: object) -> dict[str, Any]:
        try:
            self.cart.update_price(item_id, price)
        except StockDeskError as exc:
            return self._failure(exc, cart=self.render_cart())
        return {"ok": True, "cart": self.render_cart()}

    def remove(self, item_id: int) -> dict[str, Any]:
        self.cart.remove_line(item_id)
        return {"ok": True, "cart": self.render_cart()}

    def clear(self) -> dict[str, Any]:
        self.cart.clear()
        self.error_message = None
        return {"ok": True, "cart": self.render_cart()}

    def finalize(self) -> dict[str, Any]:
        if self.is_submitting:
            return {"ok": False, "error": "Sale submission already in progress"}
        if self.loading:
            return {"ok": False, "error": "Catalog is still loading"}
        self.is_submitting = True
        try:
            outcome = self.finalizer.finalize(self.cart, self.context.caller)
        except StockDeskError as exc:
            return self._failure(exc, cart=self.render_cart(), not_applied=True)
        finally:
            self.is_submitting = False
        self.error_message = None
        return {
            "ok": True,
            "message": self.cart.success,
            "total": format_money(outcome.total),
            "transaction_id": outcome.keys.transaction_id,
            "idempotency_key": outcome.keys.idempotency_key,
        }

    def render_cart(self) -> dict[str, Any]:
        return {
            "count": len(self.cart),
            "rows": [self._cart_row(line) for line in self.cart.lines],
            "total": format_money(self.cart.total),
        }

    def _cart_row(self, line: CartLine) -> dict[str, Any]:
        return {
            "item_id": line.item_id,
            "name": line.name,
            "quantity": line.quantity,
            "unit_price": line.unit_price,
            "line_total": format_money(line.line_total),
            "stock": self.context.cache.balance(line.item_id),
        }
