import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from nukkad_bot.logging_config import get_logger

logger = get_logger("auth_state")


class AuthStateStore(ABC):
    """Persisted device credentials. The blob is opaque to the bot."""

    @abstractmethod
    def load(self) -> Optional[dict]:
        pass

    @abstractmethod
    def save(self, credentials: dict) -> None:
        pass


class FileAuthState(AuthStateStore):
    """JSON file holding the latest credential blob."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Optional[dict]:
        if not self.path.exists():
            logger.info("No stored credentials, pairing required", extra={"context": {"path": str(self.path)}})
            return None
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read credentials: {e}", extra={"context": {"path": str(self.path)}})
            return None

    def save(self, credentials: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(credentials, handle)
        tmp_path.replace(self.path)
        logger.debug("Credentials saved", extra={"context": {"path": str(self.path)}})
