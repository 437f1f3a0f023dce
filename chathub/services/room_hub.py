# chathub/services/room_hub.py

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Set

from chathub.models.envelope import Envelope, decode_payload, encode_envelope
from chathub.services.identity import IdentityCounter
from chathub.services.participant import Participant
from chathub.services.pumps import receive_pump, send_pump

logger = logging.getLogger(__name__)

# Defaults mirror settings.MESSAGE_BUFFER_SIZE / settings.HUB_EVENT_BUFFER
MESSAGE_BUFFER_SIZE = 256
HUB_EVENT_BUFFER = 1


class EventKind(str, Enum):
    JOIN = "join"
    LEAVE = "leave"
    FORWARD = "forward"


@dataclass(frozen=True)
class HubEvent:
    kind: EventKind
    participant: Participant
    payload: bytes = b""


# ============================================================================
# ROOM HUB
# ============================================================================

class RoomHub:
    """
    Single-room broadcast hub.

    Every change to the participant set happens inside `run()`, which applies
    one event at a time in the order events were submitted. Nothing else
    touches `participants`, so the set needs no lock.

    Events:
        JOIN(p):     add p, tell everyone else "<p> joined the chat."
        LEAVE(p):    remove p, close p's outbound queue, tell everyone else "<p> left the chat."
        FORWARD(p):  wrap p's raw frame into a chatMessage from p, send to everyone but p

    Full outbound queue policy:
        The message is DROPPED for that recipient only. `dropped_messages`
        (hub-wide) and `participant.dropped` are incremented and a warning is
        logged. The hub never waits on a slow participant.

    Backpressure:
        Submitting an event (`join` / `leave` / `forward`) awaits a slot in the
        bounded event queue, so a busy hub slows down the receive pumps.
    """

    def __init__(
        self,
        message_buffer_size: int = MESSAGE_BUFFER_SIZE,
        event_buffer: int = HUB_EVENT_BUFFER,
        read_timeout: Optional[float] = None,
    ) -> None:
        self.message_buffer_size = message_buffer_size
        self.read_timeout = read_timeout or None
        self.identities = IdentityCounter()

        self.participants: Set[Participant] = set()
        self._events: asyncio.Queue[HubEvent] = asyncio.Queue(maxsize=event_buffer)
        self._task: Optional[asyncio.Task] = None

        # Metrics
        self.messages_forwarded: int = 0
        self.dropped_messages: int = 0
        self.participants_admitted: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Schedule the event loop on the running asyncio loop."""
        if not self.running:
            self._task = asyncio.create_task(self.run(), name="room-hub")
            logger.info("🚀 Room hub started")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

        # No loop left to apply LEAVE events; end every send pump here
        stranded = len(self.participants)
        for participant in self.participants:
            participant.outbound.close()
        self.participants.clear()
        logger.info("Room hub stopped (%d participants released)", stranded)

    async def settle(self) -> None:
        """Wait until every event submitted so far has been applied."""
        await self._events.join()

    async def run(self) -> None:
        while True:
            event = await self._events.get()
            try:
                self._apply(event)
            except Exception:
                logger.exception("Failed to apply %s event for %s", event.kind.value, event.participant.user)
            finally:
                self._events.task_done()

    # ------------------------------------------------------------------
    # Event submission
    # ------------------------------------------------------------------

    async def join(self, participant: Participant) -> None:
        await self._events.put(HubEvent(EventKind.JOIN, participant))

    async def leave(self, participant: Participant) -> None:
        await self._events.put(HubEvent(EventKind.LEAVE, participant))

    async def forward(self, participant: Participant, payload: bytes) -> None:
        await self._events.put(HubEvent(EventKind.FORWARD, participant, payload))

    # ------------------------------------------------------------------
    # State transitions (hub task only)
    # ------------------------------------------------------------------

    def _apply(self, event: HubEvent) -> None:
        participant = event.participant

        if event.kind is EventKind.JOIN:
            self.participants.add(participant)
            logger.info("→ %s joined (%d participants)", participant.user, len(self.participants))
            self.broadcast(Envelope.joined(participant.user), exclude=participant)

        elif event.kind is EventKind.LEAVE:
            if participant not in self.participants:
                logger.debug("Ignoring leave for unregistered %s", participant.user)
                return
            self.participants.discard(participant)
            participant.outbound.close()
            logger.info("← %s left (%d participants)", participant.user, len(self.participants))
            self.broadcast(Envelope.left(participant.user), exclude=participant)

        elif event.kind is EventKind.FORWARD:
            envelope = Envelope.chat(decode_payload(event.payload), participant.user)
            self.messages_forwarded += 1
            self.broadcast(envelope, exclude=participant)

    def broadcast(self, envelope: Envelope, exclude: Optional[Participant] = None) -> int:
        """
        Enqueue one envelope for every registered participant except `exclude`.

        Args:
            envelope: Message to deliver (serialized once)
            exclude: Participant that triggered the event, if any

        Returns:
            Number of participants the envelope was queued for
        """
        try:
            data = encode_envelope(envelope)
        except ValueError as e:
            logger.error("Error marshaling %s envelope: %s", envelope.type.value, e)
            return 0

        delivered = 0
        for participant in self.participants:
            if participant is exclude:
                continue
            if participant.outbound.offer(data):
                delivered += 1
            else:
                participant.dropped += 1
                self.dropped_messages += 1
                logger.warning(
                    "Outbound queue full for %s, dropped %s (%d dropped so far)",
                    participant.user,
                    envelope.type.value,
                    participant.dropped,
                )
        return delivered

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    def snapshot(self) -> Set[Participant]:
        return set(self.participants)

    def queue_depths(self) -> Dict[str, int]:
        """Messages waiting in each registered participant's outbound queue, by user."""
        return {p.user: len(p.outbound) for p in self.participants}

    # ------------------------------------------------------------------
    # Admission
    # ------------------------------------------------------------------

    def create_participant(self, connection: Any) -> Participant:
        participant = Participant(
            user=self.identities.next_user(),
            connection=connection,
            capacity=self.message_buffer_size,
        )
        self.participants_admitted += 1
        return participant

    async def admit(self, connection: Any) -> Participant:
        """
        Run one participant session from join to leave.

        Mints an identity, submits JOIN, starts the send pump as its own task
        and runs the receive pump on the caller's task. When the receive pump
        exits, LEAVE is submitted (or, with the hub stopped, the outbound
        queue is closed directly) and the send pump is awaited, so this only
        returns once the participant has fully disconnected.
        """
        participant = self.create_participant(connection)
        logger.info("✓ Admitting %s", participant.user)

        await self.join(participant)
        sender = asyncio.create_task(send_pump(participant), name=f"send-{participant.user}")
        try:
            await receive_pump(participant, self, read_timeout=self.read_timeout)
        finally:
            if self.running:
                await self.leave(participant)
            else:
                participant.outbound.close()
            await sender

        logger.info("✗ %s disconnected (%d dropped)", participant.user, participant.dropped)
        return participant
