from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Mapping

TRACE_HEADER = "X-Trace-ID"
# response headers are case-insensitive; some deployments answer with a request id instead
_RESPONSE_TRACE_HEADERS = (TRACE_HEADER, "X-Request-ID")


@dataclass
class TraceContext:
    """Correlation id shared by every request a session sends.

    The client mints one lazily; the server may replace it through a response
    header or a ``trace_id`` field in an error body.
    """

    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = uuid.uuid4().hex
        return self.trace_id

    def adopt(self, headers: Mapping[str, str], payload: Mapping[str, object] | None = None) -> str | None:
        remote = _from_headers(headers) or _from_payload(payload or {})
        if remote:
            self.trace_id = remote
        return self.trace_id


def _from_headers(headers: Mapping[str, str]) -> str | None:
    return next((headers[name] for name in _RESPONSE_TRACE_HEADERS if headers.get(name)), None)


def _from_payload(payload: Mapping[str, object]) -> str | None:
    value = payload.get("trace_id")
    return value if isinstance(value, str) and value else None
