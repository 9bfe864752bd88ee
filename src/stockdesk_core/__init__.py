from .bootstrap import ViewContext, activate_view, configure_logging
from .cart import CartEngine, CartLine
from .catalog_cache import BalanceProjection, CatalogCache, CatalogSnapshot, filter_items
from .errors import (
    EmptyCart,
    Forbidden,
    InsufficientStock,
    InvalidDelta,
    RemoteFailure,
    StaleLoad,
    StockDeskError,
    Unauthorized,
    ValidationError,
)
from .identity import Caller, IdentityService, Role
from .metrics import LOW_STOCK_THRESHOLD, DashboardMetrics, compute_dashboard_metrics, stock_level
from .movements import MovementAuthorizer, MovementOutcome, may_apply_delta
from .sale_finalizer import SaleFinalizer, SaleOutcome

__all__ = [
    "BalanceProjection",
    "Caller",
    "CartEngine",
    "CartLine",
    "CatalogCache",
    "CatalogSnapshot",
    "DashboardMetrics",
    "EmptyCart",
    "Forbidden",
    "IdentityService",
    "InsufficientStock",
    "InvalidDelta",
    "LOW_STOCK_THRESHOLD",
    "MovementAuthorizer",
    "MovementOutcome",
    "RemoteFailure",
    "Role",
    "SaleFinalizer",
    "SaleOutcome",
    "StaleLoad",
    "StockDeskError",
    "Unauthorized",
    "ValidationError",
    "ViewContext",
    "activate_view",
    "compute_dashboard_metrics",
    "configure_logging",
    "filter_items",
    "may_apply_delta",
    "stock_level",
]
