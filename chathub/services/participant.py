# chathub/services/participant.py

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, Deque, List, Optional


class OutboundQueue:
    """
    Bounded FIFO of serialized envelopes waiting to be written to one participant.

    The hub is the only producer and the participant's send pump the only
    consumer. `offer` never blocks: it reports False when the queue is full
    or closed, and the caller decides what to do with the message.

    `close` marks the end of the stream. Items already queued are still
    handed out by `get`, which returns None once the queue is closed and empty.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._items: Deque[bytes] = deque()
        self._closed = False
        self._ready = asyncio.Event()

    def __len__(self) -> int:
        return len(self._items)

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> List[bytes]:
        """
        Copy of the queued payloads, oldest first.

        Inspection only (tests, debugging); the send pump consumes with `get`.
        """
        return list(self._items)

    def full(self) -> bool:
        return len(self._items) >= self.capacity

    def offer(self, payload: bytes) -> bool:
        if self._closed or self.full():
            return False
        self._items.append(payload)
        self._ready.set()
        return True

    def close(self) -> None:
        self._closed = True
        self._ready.set()

    async def get(self) -> Optional[bytes]:
        while not self._items:
            if self._closed:
                return None
            self._ready.clear()
            await self._ready.wait()
        return self._items.popleft()


class Participant:
    """
    One connected chat session.

    Attributes:
        user: Display identity ("User1", "User2", ...)
        connection: The duplex framed connection the pumps read from / write to
        outbound: Bounded queue the hub broadcasts into
        dropped: Messages discarded for this participant because `outbound` was full

    Participants keep default identity equality and hashing, so two sessions are never
    confused even if their display names were to collide.
    """

    def __init__(self, user: str, connection: Any, capacity: int) -> None:
        self.user = user
        self.connection = connection
        self.outbound = OutboundQueue(capacity)
        self.dropped = 0

    def __repr__(self) -> str:
        return f"Participant(user={self.user!r}, queued={len(self.outbound)})"
