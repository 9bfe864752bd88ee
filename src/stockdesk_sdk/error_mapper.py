from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)

_ERRORS_BY_STATUS: dict[int, type[ApiError]] = {
    400: ValidationError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}

# keys the backend has used for the human-readable reason, in priority order
_MESSAGE_KEYS = ("message", "error", "detail")


def error_message(status_code: int, payload: Mapping[str, object]) -> str:
    for key in _MESSAGE_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return f"HTTP {status_code}"


def map_error(status_code: int, payload: Mapping[str, object] | None, trace_id: str | None) -> ApiError:
    body = dict(payload or {})
    error_type = _ERRORS_BY_STATUS.get(status_code)
    if error_type is None:
        error_type = ServerError if status_code >= 500 else ApiError
    remote_trace = body.get("trace_id")
    return error_type(
        code=str(body.get("code") or "HTTP_ERROR"),
        message=error_message(status_code, body),
        details=body.get("details"),
        trace_id=str(remote_trace) if remote_trace else trace_id,
        status_code=status_code,
        raw_payload=body,
    )
