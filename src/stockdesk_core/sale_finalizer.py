from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from stockdesk_sdk import ApiSession
from stockdesk_sdk.exceptions import ApiError
from stockdesk_sdk.idempotency import IdempotencyKeys
from stockdesk_sdk.models import SaleCreateRequest, SaleLineCreate

from .cart import CartEngine, CartLine
from .catalog_cache import CatalogCache
from .errors import EmptyCart, InsufficientStock, RemoteFailure, StockDeskError, Unauthorized
from .identity import Caller, require_seller

logger = logging.getLogger(__name__)

SALE_SUCCESS_MESSAGE = "Sale registered successfully."


@dataclass(frozen=True)
class SaleOutcome:
    seller: str
    lines: tuple[CartLine, ...]
    total: Decimal
    keys: IdempotencyKeys
    response: Any = None


class SaleFinalizer:
    def __init__(self, session: ApiSession, cache: CatalogCache) -> None:
        self.session = session
        self.cache = cache

    def finalize(self, cart: CartEngine, caller: Caller | None) -> SaleOutcome:
        """Check the cart against live balances, submit it, then project the sale.

        Nothing is submitted unless every line passes; nothing local changes
        unless the submission succeeds.
        """
        try:
            seller = require_seller(caller)
        except Unauthorized as exc:
            cart.error = exc.message
            raise
        cart.error = None
        cart.success = None
        if cart.is_empty:
            raise self._fail(cart, EmptyCart())

        lines = tuple(cart.lines)
        for line in lines:
            available = self.cache.balance(line.item_id)
            if line.quantity > available:
                raise self._fail(cart, InsufficientStock.for_item(line.item_id, line.name, available))

        request = SaleCreateRequest(
            seller=seller,
            lines=[SaleLineCreate(item=line.item_id, amount=line.quantity, price=line.unit_price) for line in lines],
        )
        keys = IdempotencyKeys.generate()
        logger.info(
            "sale_submit_attempt",
            extra={"transaction_id": keys.transaction_id, "lines": len(lines)},
        )
        try:
            response = self.session.sales_client().create_sale(request, keys=keys)
        except ApiError as exc:
            logger.warning(
                "sale_submit_failure",
                extra={
                    "transaction_id": keys.transaction_id,
                    "code": exc.code,
                    "status_code": exc.status_code,
                    "trace_id": exc.trace_id,
                },
            )
            raise self._fail(cart, RemoteFailure.from_api_error(exc)) from exc

        for line in lines:
            self.cache.adjust(line.item_id, -line.quantity, reason=f"sale:{keys.transaction_id}")
        total = sum((line.line_total for line in lines), Decimal("0"))
        cart.clear()
        cart.success = SALE_SUCCESS_MESSAGE
        logger.info(
            "sale_submit_success",
            extra={"transaction_id": keys.transaction_id, "lines": len(lines), "total": str(total)},
        )
        return SaleOutcome(seller=seller, lines=lines, total=total, keys=keys, response=response)

    @staticmethod
    def _fail(cart: CartEngine, exc: StockDeskError) -> StockDeskError:
        cart.error = exc.message
        return exc
