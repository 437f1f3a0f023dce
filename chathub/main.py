# chathub/main.py

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chathub.core import state
from chathub.core.config import settings
from chathub.core.logging import setup_logging
from chathub.services.room_hub import RoomHub
from chathub.api.routes import root, health, metrics
from chathub.api import websocket as websocket_module

# Configure logging first
setup_logging()
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(title="Chat Hub")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# REST routes
app.include_router(root.router)
app.include_router(health.router)
app.include_router(metrics.router)

# WebSocket routes
app.include_router(websocket_module.router)


@app.on_event("startup")
async def startup_event():
    logger.info("🚀 Application starting - single room chat hub")

    room_hub = RoomHub(
        message_buffer_size=settings.MESSAGE_BUFFER_SIZE,
        event_buffer=settings.HUB_EVENT_BUFFER,
        read_timeout=settings.READ_TIMEOUT_SECONDS,
    )
    room_hub.start()

    # Store globally
    state.room_hub = room_hub


@app.on_event("shutdown")
async def on_shutdown():
    if state.room_hub is not None:
        await state.room_hub.stop()
        state.room_hub = None


def run() -> None:
    import uvicorn
    logger.info("Starting web server on %s:%d", settings.HOST, settings.PORT)
    uvicorn.run("chathub.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
