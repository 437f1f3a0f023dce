# chathub/api/websocket.py

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, status

from chathub.core import state
from chathub.core.config import settings
from chathub.services.connection import WebSocketConnection

logger = logging.getLogger(__name__)

router = APIRouter()

# ============================================================================
# WEBSOCKET ENDPOINT
# ============================================================================

def origin_allowed(origin: str | None) -> bool:
    """Exact match against settings.ALLOWED_ORIGINS; a missing Origin header is rejected."""
    return origin is not None and origin in settings.ALLOWED_ORIGINS


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for the chat room.

    Protocol:
    =========

    Client -> Server:
        Any text (or binary) frame is a chat message. No JSON wrapping.

    Server -> Client:
        {"type": "userJoined",  "message": "User3 joined the chat.", "user": "User3"}
        {"type": "userLeft",    "message": "User3 left the chat.",   "user": "User3"}
        {"type": "chatMessage", "message": "hi",                     "user": "User1"}

    Lifecycle:
    ==========
    1. Origin header checked against ALLOWED_ORIGINS (rejected with 403 otherwise)
    2. Connection accepted, participant gets the next "UserN" identity
    3. Everyone else receives userJoined
    4. Frames are broadcast to everyone but the sender
    5. On disconnect, everyone else receives userLeft
    """
    origin = websocket.headers.get("origin")
    if not origin_allowed(origin):
        logger.warning("Rejected websocket from origin %r", origin)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    hub = state.room_hub
    if hub is None or not hub.running:
        logger.error("Websocket refused: room hub is not running")
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
        return

    await websocket.accept()
    await hub.admit(WebSocketConnection(websocket))
