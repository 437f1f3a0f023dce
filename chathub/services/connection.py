# chathub/services/connection.py

from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)


class WebSocketConnection:
    """
    Duplex framed connection used by the pump pair.

    Wraps an accepted FastAPI WebSocket so that:
        - one frame is one message, text or binary, returned as bytes
        - `close` may be called by both pumps; only the first call does anything
    """

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket
        self.closed = False

    async def read_frame(self) -> bytes:
        """
        Read one frame.

        Raises:
            WebSocketDisconnect: the peer closed the connection
        """
        message = await self.websocket.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(code=message.get("code", 1000))

        if message.get("bytes") is not None:
            return message["bytes"]
        return (message.get("text") or "").encode("utf-8")

    async def write_text(self, text: str) -> None:
        await self.websocket.send_text(text)

    async def close(self, code: int = 1000) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            await self.websocket.close(code=code)
        except (RuntimeError, OSError, WebSocketDisconnect) as e:
            # Peer already gone; nothing left to close
            logger.debug("Close on dead websocket ignored: %s", e)
