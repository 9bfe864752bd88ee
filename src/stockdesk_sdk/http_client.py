from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import TransportError
from .tracing import TRACE_HEADER, TraceContext

logger = logging.getLogger(__name__)

ResponseHook = Callable[[requests.Response], None]
RequestHook = Callable[[str, str, dict[str, Any]], None]

Payload = dict[str, Any] | list[Any] | None


@dataclass
class LastOperation:
    operation: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class HttpClient:
    config: ClientConfig
    trace: TraceContext | None = None
    session: requests.Session | None = None
    before_request: RequestHook | None = None
    after_response: ResponseHook | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.config.max_connections,
                pool_maxsize=self.config.max_connections,
            )
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)

    def _build_url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        operation: str = "unknown",
    ) -> Payload:
        """Send one request and return the decoded JSON body.

        Only GET/HEAD are retried (transport errors and 5xx). Commands are
        single-shot so a failure never leaves a half-applied duplicate behind.
        """
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        request_headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if headers:
            request_headers.update(headers)
        trace_context = self.trace or TraceContext()
        request_headers[TRACE_HEADER] = trace_context.ensure()

        normalized_method = method.upper()
        url = self._build_url(path)
        if self.before_request:
            self.before_request(
                normalized_method,
                url,
                {"headers": request_headers, "json_body": json_body, "params": params},
            )

        can_retry = normalized_method in {"GET", "HEAD"}
        attempts = self.config.retries + 1 if can_retry else 1
        started = time.monotonic()
        response: requests.Response | None = None
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method=normalized_method,
                    url=url,
                    headers=request_headers,
                    json=json_body,
                    params=params,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                if attempt >= attempts - 1:
                    self._record_operation(operation, started, "error", trace_context.trace_id)
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc) or type(exc).__name__,
                        details={"type": type(exc).__name__},
                        trace_id=trace_context.trace_id,
                        status_code=0,
                        raw_payload=None,
                    ) from exc
                logger.debug("http_retry", extra={"operation": operation, "attempt": attempt + 1})
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
                logger.debug(
                    "http_retry",
                    extra={"operation": operation, "attempt": attempt + 1, "status_code": response.status_code},
                )
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError("HTTP request finished without a response")

        if self.after_response:
            self.after_response(response)
        if response.ok:
            trace_context.adopt(response.headers)
            self._record_operation(operation, started, "success", trace_context.trace_id)
            if not response.content:
                return None
            return _success_payload(response, normalized_method)

        payload = _error_payload(response)
        trace_context.adopt(response.headers, payload)
        self._record_operation(operation, started, "error", trace_context.trace_id)
        raise map_error(response.status_code, payload, trace_context.trace_id)

    def _record_operation(self, operation: str, started: float, result: str, trace_id: str | None) -> None:
        self.last_operation = LastOperation(
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=trace_id,
        )


def _success_payload(response: requests.Response, method: str) -> Payload:
    """Decode a 2xx body; a non-JSON acknowledgement of a command is kept as text."""
    try:
        return response.json()
    except ValueError:
        if method in {"GET", "HEAD"}:
            raise
        return {"message": response.text}


def _error_payload(response: requests.Response) -> dict[str, Any]:
    text = response.text or ""
    if not text.strip():
        return {}
    try:
        decoded = response.json()
    except (json.JSONDecodeError, ValueError):
        return {"message": text}
    if isinstance(decoded, dict):
        return decoded
    return {"message": text}
