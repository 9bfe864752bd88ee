from .auth_store import AuthStore
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from .http_client import HttpClient
from .idempotency import IdempotencyKeys
from .models import (
    Item,
    ItemCreateRequest,
    ItemListResponse,
    MeResponse,
    SaleCreateRequest,
    SaleLineCreate,
    SessionData,
    StockBalance,
    StockMovementRequest,
)
from .session import ApiSession
from .tracing import TraceContext
from .ui_errors import UserFacingError, to_user_facing_error

__all__ = [
    "ApiError",
    "ApiSession",
    "AuthStore",
    "ClientConfig",
    "ConfigError",
    "ConflictError",
    "ForbiddenError",
    "HttpClient",
    "IdempotencyKeys",
    "Item",
    "ItemCreateRequest",
    "ItemListResponse",
    "MeResponse",
    "NotFoundError",
    "SaleCreateRequest",
    "SaleLineCreate",
    "ServerError",
    "SessionData",
    "StockBalance",
    "StockMovementRequest",
    "TraceContext",
    "TransportError",
    "UnauthorizedError",
    "UserFacingError",
    "ValidationError",
    "load_config",
    "to_user_facing_error",
]
