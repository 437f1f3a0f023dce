# chathub/models/envelope.py
from enum import Enum

from pydantic import BaseModel, ConfigDict


class EnvelopeType(str, Enum):
    CHAT_MESSAGE = "chatMessage"
    USER_JOINED = "userJoined"
    USER_LEFT = "userLeft"


class Envelope(BaseModel):
    """
    The only message shape the hub ever writes to a participant.

    Wire format (compact JSON, fields in this order):
        {"type": "chatMessage", "message": "hi", "user": "User1"}

    Inbound frames are raw text; they are wrapped with `Envelope.chat`
    before being broadcast.
    """

    model_config = ConfigDict(frozen=True)

    type: EnvelopeType
    message: str
    user: str

    @classmethod
    def chat(cls, text: str, user: str) -> "Envelope":
        return cls(type=EnvelopeType.CHAT_MESSAGE, message=text, user=user)

    @classmethod
    def joined(cls, user: str) -> "Envelope":
        return cls(type=EnvelopeType.USER_JOINED, message=f"{user} joined the chat.", user=user)

    @classmethod
    def left(cls, user: str) -> "Envelope":
        return cls(type=EnvelopeType.USER_LEFT, message=f"{user} left the chat.", user=user)


def decode_payload(payload: bytes) -> str:
    """Raw inbound frame -> text for a chat envelope (bad UTF-8 is replaced)."""
    return payload.decode("utf-8", errors="replace")


def encode_envelope(envelope: Envelope) -> bytes:
    return envelope.model_dump_json().encode("utf-8")
