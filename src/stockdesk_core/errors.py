from __future__ import annotations

from dataclasses import dataclass

from stockdesk_sdk.exceptions import ApiError
from stockdesk_sdk.ui_errors import to_user_facing_error


@dataclass
class StockDeskError(RuntimeError):
    """Base for every recoverable failure the core reports to the view layer.

    None of these are raised after a state change: when one surfaces, the
    cart and the balance projection are exactly as they were before the call.
    """

    message: str
    details: str | None = None
    trace_id: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationError(StockDeskError):
    field: str | None = None


@dataclass
class InvalidDelta(ValidationError):
    pass


@dataclass
class InsufficientStock(StockDeskError):
    item_id: int = 0
    item_name: str = ""
    available: int = 0

    @classmethod
    def for_item(cls, item_id: int, item_name: str, available: int) -> "InsufficientStock":
        return cls(
            message=f'Insufficient stock for "{item_name}". Available: {available}',
            item_id=item_id,
            item_name=item_name,
            available=available,
        )


@dataclass
class EmptyCart(StockDeskError):
    message: str = "Add at least one item to the cart."


@dataclass
class Unauthorized(StockDeskError):
    message: str = "No signed-in user to register this operation."


@dataclass
class Forbidden(StockDeskError):
    pass


@dataclass
class RemoteFailure(StockDeskError):
    status_code: int = 0

    @classmethod
    def from_api_error(cls, exc: ApiError) -> "RemoteFailure":
        user_facing = to_user_facing_error(exc)
        return cls(
            message=user_facing.message,
            details=user_facing.details,
            trace_id=user_facing.trace_id,
            status_code=exc.status_code,
        )


@dataclass
class StaleLoad(StockDeskError):
    token: int = 0
    message: str = "A newer catalog load replaced this one."
