import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from chathub.api.websocket import origin_allowed
from chathub.core import state
from chathub.main import app

from fakes import chat, joined, left

ORIGIN = {"origin": "http://localhost:3000"}


def test_root_is_plain_text():
    with TestClient(app) as client:
        resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "Simple Server"


def test_health_reports_participants():
    with TestClient(app) as client:
        resp = client.get("/health")
    assert resp.json() == {"status": "healthy", "participants": 0}


def test_origin_must_match_exactly():
    assert origin_allowed("http://localhost:3000")
    assert not origin_allowed("http://localhost:3000/")
    assert not origin_allowed("https://localhost:3000")
    assert not origin_allowed(None)


@pytest.mark.parametrize("headers", [{}, {"origin": "http://evil.example"}])
def test_websocket_rejects_untrusted_origin(headers):
    with TestClient(app) as client:
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect("/ws", headers=headers):
                pass
        assert state.room_hub.participants_admitted == 0


def test_chat_round_trip_over_websockets():
    with TestClient(app) as client:
        with client.websocket_connect("/ws", headers=ORIGIN) as alice:
            with client.websocket_connect("/ws", headers=ORIGIN) as bob:
                assert alice.receive_json() == joined("User2")

                alice.send_text("hi")
                assert bob.receive_json() == chat("hi", "User1")

            # alice never sees her own "hi"; the next thing she gets is bob leaving
            assert alice.receive_json() == left("User2")

            metrics = client.get("/metrics").json()
            assert metrics["messages_forwarded"] == 1
            assert metrics["participants_admitted"] == 2
            assert metrics["dropped_messages"] == 0
            assert metrics["max_queue_depth"] >= 0
