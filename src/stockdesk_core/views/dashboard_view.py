from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..formatting import PLACEHOLDER, format_money
from ..metrics import DashboardMetrics, compute_dashboard_metrics
from .base import CatalogView


@dataclass
class DashboardView(CatalogView):
    def metrics(self) -> DashboardMetrics:
        cache = self.context.cache
        return compute_dashboard_metrics(cache.items, cache.projection.as_dict())

    def greeting(self) -> str:
        caller = self.context.caller
        return caller.display_name if caller else PLACEHOLDER

    def render(self) -> dict[str, Any]:
        metrics = self.metrics()
        return {
            "user": self.greeting(),
            "is_admin": self.context.is_admin,
            "total_items": metrics.total_items,
            "total_units": metrics.total_units,
            "zero_stock_items": metrics.zero_stock_items,
            "inventory_value": format_money(metrics.inventory_value),
            "low_stock": [
                {"id": entry.item.id, "name": entry.item.name, "stock": entry.stock}
                for entry in metrics.low_stock_items
            ],
            "error": self.error_message,
        }
