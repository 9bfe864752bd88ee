from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..idempotency import IdempotencyKeys
from ..models import SaleCreateRequest
from .base import BaseClient, coerce_model


@dataclass
class SalesClient(BaseClient):
    def create_sale(
        self,
        payload: SaleCreateRequest | Mapping[str, Any],
        keys: IdempotencyKeys | None = None,
    ) -> Any:
        request = coerce_model(payload, SaleCreateRequest)
        keys = keys or IdempotencyKeys.generate()
        return self._request(
            "POST",
            "/api/selling",
            json_body=request.model_dump(mode="json", by_alias=True),
            headers=keys.headers(),
            operation="sales.create_sale",
        )
