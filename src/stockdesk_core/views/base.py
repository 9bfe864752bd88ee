from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from stockdesk_sdk.models import Item

from ..bootstrap import ViewContext
from ..catalog_cache import filter_items
from ..errors import StaleLoad, StockDeskError
from ..formatting import format_money
from ..metrics import stock_level


@dataclass
class CatalogView:
    context: ViewContext
    error_message: str | None = None
    trace_id: str | None = None
    loading: bool = False

    def load(self) -> dict[str, Any]:
        self.loading = True
        self.error_message = None
        try:
            snapshot = self.context.cache.load()
        except StaleLoad:
            # a newer load owns the cache now
            return {"ok": False, "stale": True}
        except StockDeskError as exc:
            return self._failure(exc)
        finally:
            self.loading = False
        return {
            "ok": True,
            "items": len(snapshot.items),
            "degraded_item_ids": sorted(snapshot.degraded_item_ids),
        }

    def search(self, query: str | None = None) -> list[dict[str, Any]]:
        return [self._row(item) for item in filter_items(self.context.cache.items, query)]

    def _row(self, item: Item) -> dict[str, Any]:
        stock = self.context.cache.balance(item.id)
        return {
            "id": item.id,
            "name": item.name,
            "price": item.price,
            "price_label": format_money(item.price),
            "stock": stock,
            "level": stock_level(stock).value,
        }

    def _failure(self, exc: StockDeskError, **extra: Any) -> dict[str, Any]:
        self.error_message = exc.message
        self.trace_id = exc.trace_id
        return {"ok": False, "error": exc.message, "details": exc.details, "trace_id": exc.trace_id, **extra}
