from .catalog_client import CatalogClient
from .me_client import MeClient
from .sales_client import SalesClient
from .stock_client import StockClient

__all__ = ["CatalogClient", "MeClient", "SalesClient", "StockClient"]
