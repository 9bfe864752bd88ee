from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from stockdesk_sdk import ApiSession
from stockdesk_sdk.clients.stock_client import StockClient
from stockdesk_sdk.exceptions import ApiError
from stockdesk_sdk.models import Item, ItemCreateRequest

from .errors import RemoteFailure, StaleLoad
from .validation import parse_item_input

logger = logging.getLogger(__name__)

DEFAULT_BALANCE_FETCH_CONCURRENCY = 8


@dataclass(frozen=True)
class CatalogSnapshot:
    """Items and balances exactly as the remote service returned them."""

    items: tuple[Item, ...]
    balances: Mapping[int, int]
    fetched_at: datetime
    token: int
    degraded_item_ids: frozenset[int] = frozenset()

    @classmethod
    def empty(cls) -> "CatalogSnapshot":
        return cls(items=(), balances=MappingProxyType({}), fetched_at=datetime.now(timezone.utc), token=0)


@dataclass(frozen=True)
class BalanceAdjustment:
    item_id: int
    delta: int
    reason: str


@dataclass
class BalanceProjection:
    """Client-local view of stock on hand, seeded from a snapshot.

    Optimistic changes go through ``adjust`` and are kept in ``adjustments``
    until the next snapshot replaces the whole projection.
    """

    snapshot: CatalogSnapshot
    adjustments: list[BalanceAdjustment] = field(default_factory=list)
    _balances: dict[int, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._balances = dict(self.snapshot.balances)

    @property
    def is_authoritative(self) -> bool:
        return not self.adjustments

    def get(self, item_id: int) -> int:
        return self._balances.get(item_id, 0)

    def adjust(self, item_id: int, delta: int, reason: str) -> int:
        updated = self.get(item_id) + delta
        self._balances[item_id] = updated
        self.adjustments.append(BalanceAdjustment(item_id=item_id, delta=delta, reason=reason))
        return updated

    def track(self, item_id: int, balance: int = 0) -> None:
        self._balances.setdefault(item_id, balance)

    def as_dict(self) -> dict[int, int]:
        return dict(self._balances)


class CatalogCache:
    def __init__(
        self,
        session: ApiSession,
        *,
        max_workers: int = DEFAULT_BALANCE_FETCH_CONCURRENCY,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.session = session
        self.max_workers = max(1, max_workers)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._latest_token = 0
        self._items: list[Item] = []
        self._projection = BalanceProjection(CatalogSnapshot.empty())

    @property
    def items(self) -> list[Item]:
        return list(self._items)

    @property
    def projection(self) -> BalanceProjection:
        return self._projection

    @property
    def is_loaded(self) -> bool:
        return self._projection.snapshot.token > 0

    def balance(self, item_id: int) -> int:
        return self._projection.get(item_id)

    def adjust(self, item_id: int, delta: int, reason: str) -> int:
        """Apply an optimistic change to whichever projection is current."""
        with self._lock:
            return self._projection.adjust(item_id, delta, reason)

    def find_item(self, item_id: int) -> Item | None:
        return next((item for item in self._items if item.id == item_id), None)

    def load(self) -> CatalogSnapshot:
        """Fetch items, then every balance concurrently, and replace the cache.

        A failed item list raises ``RemoteFailure``; a failed single balance
        reads as 0. If another load started meanwhile, this result is dropped
        and ``StaleLoad`` is raised.
        """
        with self._lock:
            self._latest_token += 1
            token = self._latest_token
        logger.info("catalog_load_attempt", extra={"token": token})
        try:
            items = self.session.catalog_client().list_items()
        except ApiError as exc:
            logger.warning(
                "catalog_load_failure",
                extra={"token": token, "code": exc.code, "status_code": exc.status_code, "trace_id": exc.trace_id},
            )
            raise RemoteFailure.from_api_error(exc) from exc
        except ValueError as exc:
            logger.warning("catalog_load_failure", extra={"token": token, "code": "MALFORMED_RESPONSE"})
            raise RemoteFailure(message="Unexpected item list response", details=str(exc)) from exc

        balances, degraded = self._fetch_balances(items)
        snapshot = CatalogSnapshot(
            items=tuple(items),
            balances=MappingProxyType(balances),
            fetched_at=self._clock(),
            token=token,
            degraded_item_ids=frozenset(degraded),
        )
        with self._lock:
            if token != self._latest_token:
                logger.info("catalog_load_stale", extra={"token": token, "latest_token": self._latest_token})
                raise StaleLoad(token=token)
            self._items = list(snapshot.items)
            self._projection = BalanceProjection(snapshot)
        logger.info(
            "catalog_load_success",
            extra={"token": token, "items": len(items), "degraded": len(degraded)},
        )
        return snapshot

    def refresh(self) -> CatalogSnapshot:
        """Discard every optimistic adjustment and reload from the remote service."""
        return self.load()

    def create_item(self, name: object, price: object = None) -> Item:
        cleaned_name, parsed_price = parse_item_input(name, price)
        request = ItemCreateRequest(name=cleaned_name, price=parsed_price)
        try:
            created = self.session.catalog_client().create_item(request)
        except ApiError as exc:
            logger.warning(
                "item_create_failure",
                extra={"code": exc.code, "status_code": exc.status_code, "trace_id": exc.trace_id},
            )
            raise RemoteFailure.from_api_error(exc) from exc
        except ValueError as exc:
            raise RemoteFailure(message="Unexpected create item response", details=str(exc)) from exc
        with self._lock:
            self._items.insert(0, created)
            self._projection.track(created.id, 0)
        logger.info("item_create_success", extra={"item_id": created.id})
        return created

    def _fetch_balances(self, items: list[Item]) -> tuple[dict[int, int], list[int]]:
        balances: dict[int, int] = {}
        degraded: list[int] = []
        if not items:
            return balances, degraded
        client = self.session.stock_client()
        workers = min(self.max_workers, len(items))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="balance-fetch") as executor:
            futures = [executor.submit(_fetch_balance, client, item.id) for item in items]
            for future in as_completed(futures):
                item_id, balance = future.result()
                if balance is None:
                    degraded.append(item_id)
                    balance = 0
                balances[item_id] = balance
        return balances, degraded


def _fetch_balance(client: StockClient, item_id: int) -> tuple[int, int | None]:
    try:
        return item_id, client.get_balance(item_id).balance
    except (ApiError, ValueError) as exc:
        logger.warning(
            "balance_fetch_degraded",
            extra={"item_id": item_id, "error": getattr(exc, "code", type(exc).__name__)},
        )
        return item_id, None


def filter_items(items: Iterable[Item], query: str | None) -> list[Item]:
    needle = (query or "").strip().casefold()
    if not needle:
        return list(items)
    return [item for item in items if needle in item.name.casefold()]
