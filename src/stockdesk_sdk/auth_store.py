from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError as PydanticValidationError

from .models import SessionData

logger = logging.getLogger(__name__)


@dataclass
class AuthStore:
    """Bearer token kept between runs in the per-user data directory."""

    app_name: str = "stockdesk"
    filename: str = "session.json"
    base_dir: Path | None = None

    @property
    def path(self) -> Path:
        base = self.base_dir or Path(user_data_dir(self.app_name, appauthor=False))
        return base / self.filename

    def save(self, session: SessionData) -> None:
        target = self.path
        target.parent.mkdir(parents=True, exist_ok=True)
        staged = target.with_suffix(".tmp")
        staged.write_text(session.model_dump_json(indent=2))
        try:
            staged.chmod(0o600)
        except OSError:
            logger.warning("session_file_chmod_failed", extra={"path": str(staged)})
        staged.replace(target)

    def load(self) -> SessionData | None:
        try:
            raw = self.path.read_text()
        except FileNotFoundError:
            return None
        try:
            return SessionData.model_validate_json(raw)
        except PydanticValidationError:
            # unreadable tokens are dropped so the next run starts signed out
            logger.warning("session_file_corrupt", extra={"path": str(self.path)})
            self.clear()
            return None

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
