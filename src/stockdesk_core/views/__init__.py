from .dashboard_view import DashboardView
from .sales_view import SalesView
from .stock_view import StockView

__all__ = ["DashboardView", "SalesView", "StockView"]
