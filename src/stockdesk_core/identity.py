from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from stockdesk_sdk import ApiSession
from stockdesk_sdk.exceptions import ApiError
from stockdesk_sdk.models import MeResponse

from .errors import Unauthorized

logger = logging.getLogger(__name__)


class Role(str, Enum):
    ADMIN = "admin"
    OPERATOR = "operator"


@dataclass(frozen=True)
class Caller:
    auth_user_id: str
    role: Role = Role.OPERATOR
    profile_id: int | None = None
    fullname: str | None = None
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def display_name(self) -> str:
        return self.fullname or self.email or "—"

    @classmethod
    def from_me(cls, me: MeResponse) -> "Caller":
        return cls(
            auth_user_id=me.auth_user_id,
            role=Role.ADMIN if me.is_admin else Role.OPERATOR,
            profile_id=me.profile_id,
            fullname=me.fullname,
            email=me.email,
        )


def require_seller(caller: Caller | None) -> str:
    """Return the seller identity for a sale, or raise ``Unauthorized``."""
    if caller is None or not (caller.auth_user_id or "").strip():
        raise Unauthorized()
    return caller.auth_user_id


class IdentityService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def resolve(self) -> Caller | None:
        """Resolve the signed-in caller; an unreachable identity endpoint means nobody."""
        try:
            me = self.session.me_client().get_me()
        except ApiError as exc:
            logger.warning(
                "identity_resolve_failure",
                extra={"code": exc.code, "status_code": exc.status_code, "trace_id": exc.trace_id},
            )
            return None
        except ValueError:
            logger.warning("identity_resolve_failure", extra={"code": "MALFORMED_IDENTITY"})
            return None
        caller = Caller.from_me(me)
        logger.info("identity_resolved", extra={"role": caller.role.value, "profile_id": caller.profile_id})
        return caller
