from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from stockdesk_sdk import ApiSession
from stockdesk_sdk.exceptions import ApiError
from stockdesk_sdk.idempotency import IdempotencyKeys
from stockdesk_sdk.models import StockMovementRequest

from .catalog_cache import CatalogCache
from .errors import Forbidden, RemoteFailure, Unauthorized
from .identity import Caller, Role
from .validation import coerce_delta, normalize_note

logger = logging.getLogger(__name__)


def may_apply_delta(role: Role, delta: int) -> bool:
    """Operators may only add stock; admins may also remove it."""
    if delta < 0:
        return role is Role.ADMIN
    return True


@dataclass(frozen=True)
class MovementOutcome:
    item_id: int
    delta: int
    note: str | None
    balance: int
    keys: IdempotencyKeys
    response: Any = None


class MovementAuthorizer:
    def __init__(self, session: ApiSession, cache: CatalogCache) -> None:
        self.session = session
        self.cache = cache

    def apply_movement(
        self,
        item_id: int,
        delta: object,
        note: str | None,
        caller: Caller | None,
    ) -> MovementOutcome:
        value = coerce_delta(delta)
        if caller is None:
            raise Unauthorized(message="No signed-in user to register this movement.")
        if not may_apply_delta(caller.role, value):
            logger.warning(
                "movement_forbidden",
                extra={"item_id": item_id, "delta": value, "role": caller.role.value},
            )
            raise Forbidden(message="Negative adjustments are allowed for admins only.")

        cleaned_note = normalize_note(note)
        keys = IdempotencyKeys.generate()
        logger.info(
            "movement_submit_attempt",
            extra={"item_id": item_id, "delta": value, "transaction_id": keys.transaction_id},
        )
        try:
            response = self.session.stock_client().apply_movement(
                StockMovementRequest(item=item_id, qty=value, note=cleaned_note),
                keys=keys,
            )
        except ApiError as exc:
            logger.warning(
                "movement_submit_failure",
                extra={
                    "item_id": item_id,
                    "transaction_id": keys.transaction_id,
                    "code": exc.code,
                    "status_code": exc.status_code,
                    "trace_id": exc.trace_id,
                },
            )
            raise RemoteFailure.from_api_error(exc) from exc

        balance = self.cache.adjust(item_id, value, reason=f"movement:{keys.transaction_id}")
        logger.info(
            "movement_submit_success",
            extra={"item_id": item_id, "delta": value, "balance": balance},
        )
        return MovementOutcome(
            item_id=item_id,
            delta=value,
            note=cleaned_note,
            balance=balance,
            keys=keys,
            response=response,
        )
