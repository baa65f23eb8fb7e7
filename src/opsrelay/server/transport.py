"""JSON message channel over a FastAPI WebSocket.

Wraps one accepted WebSocket and exchanges ``{"content": ...}`` frames.
Text and binary frames are both accepted inbound; replies are always
text frames.
"""

from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from opsrelay.domain.models import Message

logger = logging.getLogger(__name__)


class MessageChannel:
    """Reads and writes Message frames on a single connection."""

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket

    async def receive(self) -> Message:
        """Wait for the next frame and decode it.

        Raises:
            TransportError: If the connection was closed or reading failed.
            MalformedMessageError: If the frame is not a valid Message.
        """
        try:
            frame = await self._websocket.receive()
        except (RuntimeError, OSError) as e:
            raise TransportError(f"Read failed: {e}") from e

        if frame["type"] == "websocket.disconnect":
            raise TransportError(f"Client disconnected (code={frame.get('code')})")

        raw = frame.get("text")
        if raw is None:
            data = frame.get("bytes") or b""
            raw = data.decode("utf-8", errors="replace")
        try:
            return Message.model_validate_json(raw)
        except ValidationError as e:
            raise MalformedMessageError(f"Invalid message: {e}", raw=raw) from e

    async def send(self, message: Message) -> None:
        """Write ``message`` as a JSON text frame.

        Raises:
            TransportError: If the write failed.
        """
        try:
            await self._websocket.send_text(message.model_dump_json())
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            raise TransportError(f"Write failed: {e}") from e

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        try:
            await self._websocket.close(code=code, reason=reason)
        except (RuntimeError, OSError) as e:
            logger.debug("Close after failure ignored: %s", e)


class TransportError(Exception):
    """Raised when the underlying connection can no longer be used."""


class MalformedMessageError(Exception):
    """Raised when an inbound frame does not decode to a Message."""

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw
