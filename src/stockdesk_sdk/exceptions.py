from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    """A failed call to the inventory backend, already decoded.

    ``message`` is what the backend said (or ``HTTP <status>`` when it said
    nothing); ``status_code`` is 0 when no response arrived at all.
    """

    code: str
    message: str
    details: object | None = None
    trace_id: str | None = None
    status_code: int = 0
    raw_payload: object | None = None

    def __str__(self) -> str:
        suffix = f" (trace_id={self.trace_id})" if self.trace_id else ""
        return f"{self.code} HTTP {self.status_code}: {self.message}{suffix}"


class UnauthorizedError(ApiError):
    """Missing, expired or rejected bearer token."""


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    """The backend refused the payload, e.g. a sale exceeding stock."""


class ConflictError(ApiError):
    pass


class RateLimitError(ApiError):
    pass


class ServerError(ApiError):
    pass


class TransportError(ApiError):
    """No HTTP response: DNS, connection or timeout failure."""
