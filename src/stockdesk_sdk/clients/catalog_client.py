from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models import Item, ItemCreateRequest, ItemListResponse
from .base import BaseClient, coerce_model


@dataclass
class CatalogClient(BaseClient):
    def list_items(self) -> list[Item]:
        payload = self._request("GET", "/api/items", operation="catalog.list_items")
        if isinstance(payload, list):
            payload = {"data": payload}
        if not isinstance(payload, dict):
            raise ValueError("Expected list items response to be a JSON object")
        return list(ItemListResponse.model_validate(payload).data)

    def create_item(self, payload: ItemCreateRequest | Mapping[str, Any]) -> Item:
        request = coerce_model(payload, ItemCreateRequest)
        data = self._request(
            "POST",
            "/api/items",
            json_body=request.model_dump(mode="json", by_alias=True),
            operation="catalog.create_item",
        )
        if not isinstance(data, dict):
            raise ValueError("Expected create item response to be a JSON object")
        return Item.model_validate(unwrap_created_item(data, request))


def unwrap_created_item(data: Mapping[str, Any], request: ItemCreateRequest) -> dict[str, Any]:
    """Accept ``{data: item}``, ``{item: item}`` or a bare item body."""
    body = dict(data)
    for key in ("data", "item"):
        nested = data.get(key)
        if isinstance(nested, Mapping):
            body = dict(nested)
            break
    body.setdefault("itemName", body.get("name") or request.name)
    if body.get("price") is None:
        body["price"] = request.price
    return body
