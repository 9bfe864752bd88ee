from __future__ import annotations

from dataclasses import dataclass

from .auth_store import AuthStore
from .clients.catalog_client import CatalogClient
from .clients.me_client import MeClient
from .clients.sales_client import SalesClient
from .clients.stock_client import StockClient
from .config import ClientConfig
from .http_client import HttpClient
from .models import SessionData
from .tracing import TraceContext


@dataclass
class ApiSession:
    config: ClientConfig
    auth_store: AuthStore | None = None
    trace: TraceContext | None = None
    token: str | None = None
    http: HttpClient | None = None

    def __post_init__(self) -> None:
        self.auth_store = self.auth_store or AuthStore()
        self.trace = self.trace or TraceContext()
        self.http = self.http or HttpClient(config=self.config, trace=self.trace)
        stored = self.auth_store.load()
        if stored and not self.token:
            self.token = stored.access_token

    def catalog_client(self) -> CatalogClient:
        return CatalogClient(http=self.http, access_token=self.token)

    def stock_client(self) -> StockClient:
        return StockClient(http=self.http, access_token=self.token)

    def sales_client(self) -> SalesClient:
        return SalesClient(http=self.http, access_token=self.token)

    def me_client(self) -> MeClient:
        return MeClient(http=self.http, access_token=self.token)

    def establish(self, access_token: str) -> None:
        self.token = access_token
        self.auth_store.save(SessionData(access_token=access_token, env_name=self.config.env_name))

    def clear(self) -> None:
        self.token = None
        if self.auth_store:
            self.auth_store.clear()
