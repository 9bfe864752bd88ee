from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv

ENV_PREFIX = "STOCKDESK_"

_Number = TypeVar("_Number", int, float)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    retries: int = 2
    retry_backoff_seconds: float = 0.3
    max_connections: int = 20
    verify_ssl: bool = True
    balance_fetch_concurrency: int = 8
    log_level: str = "INFO"

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()


def _env(name: str) -> str | None:
    """Read ``STOCKDESK_<name>``; blank values count as unset."""
    value = os.getenv(ENV_PREFIX + name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _bounded(
    name: str,
    cast: Callable[[str], _Number],
    default: _Number,
    *,
    above: float | None = None,
    at_least: float | None = None,
) -> _Number:
    raw = _env(name)
    if raw is None:
        value = default
    else:
        try:
            value = cast(raw)
        except ValueError as exc:
            kind = "an integer" if cast is int else "a number"
            raise ConfigError(f"Invalid {ENV_PREFIX}{name}: expected {kind}, got {raw!r}") from exc
    if above is not None and not value > above:
        raise ConfigError(f"Invalid {ENV_PREFIX}{name}: expected > {above:g}, got {value}")
    if at_least is not None and not value >= at_least:
        raise ConfigError(f"Invalid {ENV_PREFIX}{name}: expected >= {at_least:g}, got {value}")
    return value


def _flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def load_config(env_file: str | None = None) -> ClientConfig:
    """Build the client config from the environment, after loading ``env_file``.

    The base URL may be set per profile (``STOCKDESK_API_BASE_URL_STAGING``)
    and falls back to ``STOCKDESK_API_BASE_URL``; one of them is required.
    """
    load_dotenv(env_file)

    env_name = _env("ENV") or "dev"
    api_base_url = _env(f"API_BASE_URL_{env_name.upper()}") or _env("API_BASE_URL")
    if not api_base_url:
        raise ConfigError(f"Missing required config values: {ENV_PREFIX}API_BASE_URL")

    timeout = _bounded("TIMEOUT_SECONDS", float, 10.0, above=0)
    connect_timeout = _bounded("CONNECT_TIMEOUT_SECONDS", float, min(timeout, 5.0), above=0)

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        connect_timeout_seconds=connect_timeout,
        read_timeout_seconds=_bounded("READ_TIMEOUT_SECONDS", float, max(timeout, connect_timeout), above=0),
        retries=_bounded("RETRIES", int, 2, at_least=0),
        retry_backoff_seconds=_bounded("RETRY_BACKOFF_SECONDS", float, 0.3, at_least=0),
        max_connections=_bounded("MAX_CONNECTIONS", int, 20, at_least=1),
        verify_ssl=_flag("VERIFY_SSL", True),
        balance_fetch_concurrency=_bounded("BALANCE_FETCH_CONCURRENCY", int, 8, at_least=1),
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
    )
