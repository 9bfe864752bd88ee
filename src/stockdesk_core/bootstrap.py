from __future__ import annotations

import logging
from dataclasses import dataclass

from stockdesk_sdk import ApiSession, ClientConfig, load_config

from .catalog_cache import CatalogCache
from .identity import Caller, IdentityService

logger = logging.getLogger(__name__)

_LOGGER_NAMES = ("stockdesk_core", "stockdesk_sdk")


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the package loggers, once."""
    for name in _LOGGER_NAMES:
        package_logger = logging.getLogger(name)
        package_logger.setLevel(level)
        if package_logger.handlers:
            continue
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        package_logger.addHandler(handler)


@dataclass
class ViewContext:
    """Everything one screen needs for its lifetime: session, caller and a fresh cache."""

    session: ApiSession
    cache: CatalogCache
    caller: Caller | None = None

    @property
    def is_admin(self) -> bool:
        return bool(self.caller and self.caller.is_admin)


def activate_view(
    config: ClientConfig | None = None,
    session: ApiSession | None = None,
    *,
    resolve_identity: bool = True,
) -> ViewContext:
    config = config or (session.config if session else load_config())
    configure_logging(config.log_level)
    session = session or ApiSession(config)
    caller = IdentityService(session).resolve() if resolve_identity else None
    cache = CatalogCache(session, max_workers=config.balance_fetch_concurrency)
    logger.info(
        "view_activated",
        extra={"env": config.normalized_env, "identified": caller is not None},
    )
    return ViewContext(session=session, cache=cache, caller=caller)
