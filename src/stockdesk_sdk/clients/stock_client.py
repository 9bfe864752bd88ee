from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..idempotency import IdempotencyKeys
from ..models import StockBalance, StockMovementRequest
from .base import BaseClient, coerce_model


@dataclass
class StockClient(BaseClient):
    def get_balance(self, item_id: int) -> StockBalance:
        payload = self._request("GET", f"/api/stock/{item_id}", operation="stock.get_balance")
        if not isinstance(payload, dict):
            raise ValueError("Expected stock balance response to be a JSON object")
        return StockBalance.model_validate(payload)

    def apply_movement(
        self,
        payload: StockMovementRequest | Mapping[str, Any],
        keys: IdempotencyKeys | None = None,
    ) -> Any:
        request = coerce_model(payload, StockMovementRequest)
        keys = keys or IdempotencyKeys.generate()
        return self._request(
            "POST",
            "/api/stock",
            json_body=request.model_dump(mode="json"),
            headers=keys.headers(),
            operation="stock.apply_movement",
        )
