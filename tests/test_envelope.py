import pytest
from pydantic import ValidationError

from chathub.models.envelope import Envelope, EnvelopeType, decode_payload, encode_envelope


def test_chat_envelope_wire_format():
    data = encode_envelope(Envelope.chat("hi", "User1"))
    assert data == b'{"type":"chatMessage","message":"hi","user":"User1"}'


def test_join_and_leave_messages_name_the_user():
    joined = Envelope.joined("User7")
    left = Envelope.left("User7")

    assert joined.type is EnvelopeType.USER_JOINED
    assert joined.message == "User7 joined the chat."
    assert left.type is EnvelopeType.USER_LEFT
    assert left.message == "User7 left the chat."
    assert joined.user == left.user == "User7"


def test_envelope_is_immutable():
    env = Envelope.chat("hi", "User1")
    with pytest.raises(ValidationError):
        env.message = "changed"


def test_unknown_type_rejected():
    with pytest.raises(ValidationError):
        Envelope(type="shout", message="hi", user="User1")


def test_non_ascii_text_survives_encoding():
    data = encode_envelope(Envelope.chat("héllo 👋", "User2"))
    assert Envelope.model_validate_json(data).message == "héllo 👋"


def test_decode_payload_replaces_invalid_utf8():
    assert decode_payload(b"ok\xff") == "ok�"
