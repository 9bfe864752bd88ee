from __future__ import annotations

import sys
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = BASE_DIR / "src"
sys.path.insert(0, str(SRC_DIR))

from stockdesk_core.bootstrap import ViewContext  # noqa: E402
from stockdesk_core.catalog_cache import CatalogCache  # noqa: E402
from stockdesk_core.identity import Caller, Role  # noqa: E402
from stockdesk_sdk.exceptions import NotFoundError  # noqa: E402
from stockdesk_sdk.models import (  # noqa: E402
    Item,
    ItemCreateRequest,
    MeResponse,
    SaleCreateRequest,
    StockBalance,
    StockMovementRequest,
)


@dataclass
class FakeCatalogClient:
    items: list[Item]
    fail: Exception | None = None
    on_list: Callable[[], None] | None = None
    created: list[ItemCreateRequest] = field(default_factory=list)
    next_id: int = 100

    def list_items(self) -> list[Item]:
        if self.on_list:
            hook, self.on_list = self.on_list, None
            hook()
        if self.fail:
            raise self.fail
        return list(self.items)

    def create_item(self, payload: ItemCreateRequest) -> Item:
        if self.fail:
            raise self.fail
        self.created.append(payload)
        item = Item(id=self.next_id, name=payload.name, price=payload.price)
        self.next_id += 1
        return item


@dataclass
class FakeStockClient:
    balances: dict[int, int]
    failing: set[int] = field(default_factory=set)
    fail_movement: Exception | None = None
    movements: list[StockMovementRequest] = field(default_factory=list)
    balance_calls: list[int] = field(default_factory=list)

    def get_balance(self, item_id: int) -> StockBalance:
        self.balance_calls.append(item_id)
        if item_id in self.failing:
            raise NotFoundError(code="NOT_FOUND", message="missing", details=None, trace_id=None, status_code=404)
        return StockBalance(item=item_id, balance=self.balances.get(item_id, 0))

    def apply_movement(self, payload: StockMovementRequest, keys: Any = None) -> dict[str, Any]:
        assert keys is not None
        if self.fail_movement:
            raise self.fail_movement
        self.movements.append(payload)
        return {"ok": True}


@dataclass
class FakeSalesClient:
    fail: Exception | None = None
    sales: list[SaleCreateRequest] = field(default_factory=list)

    def create_sale(self, payload: SaleCreateRequest, keys: Any = None) -> dict[str, Any]:
        assert keys is not None
        if self.fail:
            raise self.fail
        self.sales.append(payload)
        return {"ok": True}


@dataclass
class FakeMeClient:
    me: MeResponse | None = None
    fail: Exception | None = None

    def get_me(self) -> MeResponse:
        if self.fail:
            raise self.fail
        assert self.me is not None
        return self.me


class FakeSession:
    def __init__(self, catalog: FakeCatalogClient, stock: FakeStockClient, sales: FakeSalesClient, me: FakeMeClient) -> None:
        self.catalog = catalog
        self.stock = stock
        self.sales = sales
        self.me = me

    def catalog_client(self) -> FakeCatalogClient:
        return self.catalog

    def stock_client(self) -> FakeStockClient:
        return self.stock

    def sales_client(self) -> FakeSalesClient:
        return self.sales

    def me_client(self) -> FakeMeClient:
        return self.me


def make_items() -> list[Item]:
    return [
        Item(id=1, name="Coffee beans", price=Decimal("10")),
        Item(id=2, name="Paper filter", price=None),
        Item(id=3, name="Espresso cup", price=Decimal("2.50")),
    ]


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession(
        catalog=FakeCatalogClient(items=make_items()),
        stock=FakeStockClient(balances={1: 3, 2: 0, 3: 12}),
        sales=FakeSalesClient(),
        me=FakeMeClient(
            me=MeResponse(authUserId="user-1", email="op@example.com", profileId=7, fullname="Ana Op", isAdmin=False)
        ),
    )


@pytest.fixture
def cache(fake_session: FakeSession) -> CatalogCache:
    loaded = CatalogCache(fake_session, max_workers=4)  # type: ignore[arg-type]
    loaded.load()
    return loaded


@pytest.fixture
def operator() -> Caller:
    return Caller(auth_user_id="user-1", role=Role.OPERATOR, profile_id=7, fullname="Ana Op")


@pytest.fixture
def admin() -> Caller:
    return Caller(auth_user_id="admin-1", role=Role.ADMIN, profile_id=1, fullname="Root Admin")


@pytest.fixture
def view_context(fake_session: FakeSession, cache: CatalogCache, operator: Caller) -> ViewContext:
    return ViewContext(session=fake_session, cache=cache, caller=operator)  # type: ignore[arg-type]
