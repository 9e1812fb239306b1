from abc import ABC, abstractmethod
from typing import Any, List, Optional

import httpx

from nukkad_bot.logging_config import get_logger
from nukkad_bot.schemas.responses import Action, Section

logger = get_logger("transport")

PRESENCE_COMPOSING = "composing"
PRESENCE_PAUSED = "paused"
PRESENCE_AVAILABLE = "available"


class TransportDeliveryFailure(Exception):
    """Gateway call failed (network error or non-2xx answer)."""

    def __init__(self, operation: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.status_code = status_code


class Transport(ABC):
    """Abstract async interface to the WhatsApp channel."""

    @abstractmethod
    async def connect(self, credentials: Optional[dict]) -> None:
        """Open a session. Pairing and connection progress arrive as connection updates."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass

    @abstractmethod
    async def send_text(self, jid: str, text: str) -> None:
        pass

    @abstractmethod
    async def send_buttons(self, jid: str, body: str, actions: List[Action], footer: str = "") -> None:
        pass

    @abstractmethod
    async def send_list(
        self, jid: str, body: str, button_text: str, sections: List[Section], footer: str = "", title: str = ""
    ) -> None:
        pass

    @abstractmethod
    async def mark_read(self, jid: str, message_id: str, participant: Optional[str] = None) -> None:
        pass

    @abstractmethod
    async def send_presence(self, presence: str, jid: Optional[str] = None) -> None:
        pass

    async def aclose(self) -> None:
        """Release client resources. Default: nothing to release."""
        return None


class GatewayTransport(Transport):
    """Transport over the HTTP API of a Baileys gateway sidecar."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), headers=headers, timeout=timeout)

    async def _post(self, operation: str, path: str, payload: Optional[dict] = None) -> Any:
        try:
            response = await self._client.post(path, json=payload or {})
        except httpx.HTTPError as e:
            logger.error(f"Gateway {operation} error: {e}", extra={"context": {"path": path}})
            raise TransportDeliveryFailure(operation, str(e)) from e

        if response.status_code >= 300:
            logger.warning(
                f"Gateway {operation} rejected",
                extra={"context": {"path": path, "status_code": response.status_code, "body": response.text[:200]}},
            )
            raise TransportDeliveryFailure(operation, response.text[:200], status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    async def connect(self, credentials: Optional[dict]) -> None:
        await self._post("connect", "/session/connect", {"credentials": credentials})

    async def disconnect(self) -> None:
        await self._post("disconnect", "/session/disconnect")

    async def send_text(self, jid: str, text: str) -> None:
        await self._post("send_text", "/messages/text", {"jid": jid, "text": text})

    async def send_buttons(self, jid: str, body: str, actions: List[Action], footer: str = "") -> None:
        message = {
            "text": body,
            "footer": footer,
            "buttons": [
                {"buttonId": item.id, "buttonText": {"displayText": item.label}, "type": 1} for item in actions
            ],
            "headerType": 1,
        }
        await self._post("send_buttons", "/messages/buttons", {"jid": jid, "message": message})

    async def send_list(
        self, jid: str, body: str, button_text: str, sections: List[Section], footer: str = "", title: str = ""
    ) -> None:
        message = {
            "text": body,
            "footer": footer,
            "title": title,
            "buttonText": button_text,
            "sections": [
                {
                    "title": section.title,
                    "rows": [
                        {"rowId": row.id, "title": row.title, "description": row.description}
                        for row in section.rows
                    ],
                }
                for section in sections
            ],
        }
        await self._post("send_list", "/messages/list", {"jid": jid, "message": message})

    async def mark_read(self, jid: str, message_id: str, participant: Optional[str] = None) -> None:
        key = {"remoteJid": jid, "id": message_id}
        if participant:
            key["participant"] = participant
        await self._post("mark_read", "/messages/read", {"keys": [key]})

    async def send_presence(self, presence: str, jid: Optional[str] = None) -> None:
        await self._post("send_presence", "/presence", {"presence": presence, "jid": jid})

    async def aclose(self) -> None:
        await self._client.aclose()
