from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..errors import StockDeskError
from ..movements import MovementAuthorizer, may_apply_delta
from .base import CatalogView


@dataclass
class StockView(CatalogView):
    authorizer: MovementAuthorizer = field(init=False)
    is_submitting: bool = False

    def __post_init__(self) -> None:
        self.authorizer = MovementAuthorizer(self.context.session, self.context.cache)

    def can_apply_negative(self) -> bool:
        caller = self.context.caller
        return caller is not None and may_apply_delta(caller.role, -1)

    def movement_hint(self) -> str:
        if self.can_apply_negative():
            return "Use positive values to add stock and negative values to remove it."
        return "Use positive values to add stock."

    def move(self, item_id: int, delta: object, note: str | None = None) -> dict[str, Any]:
        if self.is_submitting:
            return {"ok": False, "error": "Movement already in progress"}
        self.is_submitting = True
        try:
            outcome = self.authorizer.apply_movement(item_id, delta, note, self.context.caller)
        except StockDeskError as exc:
            return self._failure(exc, not_applied=True)
        finally:
            self.is_submitting = False
        self.error_message = None
        return {
            "ok": True,
            "item_id": outcome.item_id,
            "balance": outcome.balance,
            "transaction_id": outcome.keys.transaction_id,
        }

    def create_item(self, name: object, price: object = None) -> dict[str, Any]:
        try:
            item = self.context.cache.create_item(name, price)
        except StockDeskError as exc:
            return self._failure(exc)
        self.error_message = None
        return {"ok": True, "item": self._row(item)}
