from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ApiError, TransportError


@dataclass(frozen=True)
class UserFacingError:
    message: str
    details: str | None = None
    trace_id: str | None = None


def to_user_facing_error(exc: ApiError) -> UserFacingError:
    """Keep the collaborator's own message; put codes and status in details."""
    primary = exc.message.strip()
    if isinstance(exc, TransportError):
        primary = primary or "Network error"
        details = f"{exc.code} (network)"
    else:
        primary = primary or f"HTTP {exc.status_code}"
        details = f"{exc.code} (HTTP {exc.status_code})"
    if exc.details:
        details = f"{details}: {exc.details}"
    return UserFacingError(message=primary, details=details, trace_id=exc.trace_id)
