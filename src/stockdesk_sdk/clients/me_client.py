from __future__ import annotations

from dataclasses import dataclass

from ..models import MeResponse
from .base import BaseClient


@dataclass
class MeClient(BaseClient):
    def get_me(self) -> MeResponse:
        payload = self._request("GET", "/api/me", operation="identity.me")
        if not isinstance(payload, dict):
            raise ValueError("Expected me response to be a JSON object")
        body = payload.get("data", payload)
        return MeResponse.model_validate(body)
