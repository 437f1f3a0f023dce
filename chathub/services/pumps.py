# chathub/services/pumps.py

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

from fastapi import WebSocketDisconnect

from chathub.services.participant import Participant

if TYPE_CHECKING:
    from chathub.services.room_hub import RoomHub

logger = logging.getLogger(__name__)

# ============================================================================
# CONNECTION PUMP PAIR
# ============================================================================


async def receive_pump(
    participant: Participant,
    hub: "RoomHub",
    read_timeout: Optional[float] = None,
) -> None:
    """
    Read frames from the participant's connection and forward them to the hub.

    Args:
        participant: Owner of the connection
        hub: Room hub receiving FORWARD events
        read_timeout: Seconds of silence before the session is dropped (None = wait forever)

    Any read failure ends the loop. The connection is closed on the way out,
    which also stops the send pump if it is still writing.
    """
    connection = participant.connection
    try:
        while True:
            try:
                if read_timeout:
                    payload = await asyncio.wait_for(connection.read_frame(), read_timeout)
                else:
                    payload = await connection.read_frame()
            except WebSocketDisconnect as e:
                logger.info("✗ %s closed the connection (code=%s)", participant.user, e.code)
                break
            except asyncio.TimeoutError:
                logger.info("⏱ %s idle for %ss, dropping", participant.user, read_timeout)
                break
            except Exception as e:
                logger.warning("Read error for %s: %s", participant.user, e)
                break

            await hub.forward(participant, payload)
    finally:
        await connection.close()


async def send_pump(participant: Participant) -> None:
    """
    Write queued envelopes to the participant's connection in FIFO order.

    Stops when the outbound queue is closed and drained (the hub processed
    the participant's leave) or when a write fails. Closes the connection on exit.
    """
    connection = participant.connection
    try:
        while True:
            payload = await participant.outbound.get()
            if payload is None:
                break
            try:
                await connection.write_text(payload.decode("utf-8"))
            except Exception as e:
                logger.warning("Write error for %s: %s", participant.user, e)
                break
    finally:
        await connection.close()
