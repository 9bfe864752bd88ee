from __future__ import annotations

import uuid
from dataclasses import dataclass

IDEMPOTENCY_HEADER = "Idempotency-Key"


@dataclass(frozen=True)
class IdempotencyKeys:
    """Keys for one sale or stock-movement submission.

    ``transaction_id`` only correlates local log lines; ``idempotency_key`` is
    sent so the server can recognise a repeated command.
    """

    transaction_id: str
    idempotency_key: str

    @classmethod
    def generate(cls) -> "IdempotencyKeys":
        return cls(transaction_id=uuid.uuid4().hex[:12], idempotency_key=str(uuid.uuid4()))

    def headers(self) -> dict[str, str]:
        return {IDEMPOTENCY_HEADER: self.idempotency_key}
