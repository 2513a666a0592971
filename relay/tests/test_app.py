import json
import time

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from relay_api.app import create_app


def _wait_until(predicate, timeout: float = 2.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached")
        time.sleep(0.005)


def _frame(sender: str, receiver: str, content: str) -> str:
    return json.dumps({"sender": sender, "receiver": receiver, "content": content})


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def engine(app):
    return app.state.relay_server.engine


def test_offline_message_is_delivered_on_connect(client, engine):
    with client.websocket_connect("/ws?user_id=bob") as bob:
        bob.send_text(_frame("bob", "alice", "hi"))
        _wait_until(lambda: engine.queue.pending_count("alice") == 1)

        with client.websocket_connect("/ws?user_id=alice") as alice:
            received = alice.receive_json()
            assert {k: received[k] for k in ("sender", "receiver", "content")} == {
                "sender": "bob",
                "receiver": "alice",
                "content": "hi",
            }
            assert "time" in received
            bob.send_text(_frame("bob", "alice", "ping"))
            assert alice.receive_json()["content"] == "ping"

    assert engine.queue.pending_count("alice") == 0


def test_online_message_is_delivered_immediately(client, engine):
    with client.websocket_connect("/ws?user_id=alice") as alice:
        _wait_until(lambda: engine.registry.is_online("alice"))
        with client.websocket_connect("/ws?user_id=bob") as bob:
            bob.send_text(_frame("bob", "alice", "hi"))
            assert alice.receive_json()["content"] == "hi"
        assert engine.queue.pending_count("alice") == 0


def test_offline_messages_arrive_in_order(client, engine):
    with client.websocket_connect("/ws?user_id=bob") as bob:
        bob.send_text(_frame("bob", "alice", "first"))
        bob.send_text(_frame("bob", "alice", "second"))
        _wait_until(lambda: engine.queue.pending_count("alice") == 2)

    with client.websocket_connect("/ws?user_id=alice") as alice:
        assert alice.receive_json()["content"] == "first"
        assert alice.receive_json()["content"] == "second"


def test_malformed_frame_keeps_session_alive(client, engine, store):
    with client.websocket_connect("/ws?user_id=alice") as alice:
        _wait_until(lambda: engine.registry.is_online("alice"))
        with client.websocket_connect("/ws?user_id=bob") as bob:
            bob.send_text("this is not a message")
            bob.send_text(_frame("bob", "alice", "still here"))
            assert alice.receive_json()["content"] == "still here"
    assert [m.content for m in store.appended] == ["still here"]


def test_connection_without_user_id_is_dropped(client, engine):
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/ws") as ws:
            ws.receive_text()
    assert excinfo.value.code == 1011
    assert len(engine.registry) == 0


def test_user_id_header_is_accepted(client, engine):
    with client.websocket_connect("/ws", headers={"X-User-Id": "carol"}):
        _wait_until(lambda: engine.registry.is_online("carol"))
    _wait_until(lambda: not engine.registry.is_online("carol"))


def test_reconnect_supersedes_previous_connection(client, engine):
    with client.websocket_connect("/ws?user_id=alice") as first:
        _wait_until(lambda: engine.registry.is_online("alice"))
        old_handle = engine.registry.lookup("alice")
        with client.websocket_connect("/ws?user_id=alice") as second:
            _wait_until(lambda: engine.registry.lookup("alice") is not old_handle)
            with pytest.raises(WebSocketDisconnect) as excinfo:
                first.receive_text()
            assert excinfo.value.code == 1011

            with client.websocket_connect("/ws?user_id=bob") as bob:
                bob.send_text(_frame("bob", "alice", "to the new one"))
                assert second.receive_json()["content"] == "to the new one"


def test_health_reports_counts(client, engine):
    with client.websocket_connect("/ws?user_id=bob") as bob:
        bob.send_text(_frame("bob", "dave", "later"))
        _wait_until(lambda: engine.queue.pending_count("dave") == 1)
        body = client.get("/health").json()
    assert body == {"status": "ok", "online": 1, "users": ["bob"], "pending": 1}


def test_metrics_exposes_relay_counters(client):
    with client.websocket_connect("/ws?user_id=bob"):
        pass
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "relay_connection_attempts_total" in response.text
    assert 'outcome="accepted"' in response.text


def test_history_returns_conversation_newest_first(client, engine):
    with client.websocket_connect("/ws?user_id=bob") as bob:
        bob.send_text(_frame("bob", "alice", "one"))
        bob.send_text(_frame("bob", "erin", "other"))
        bob.send_text(_frame("bob", "alice", "two"))
        _wait_until(lambda: engine.queue.total_pending() == 3)

    response = client.get("/api/v1/messages", params={"user_id": "alice", "peer": "bob"})
    assert response.status_code == 200
    assert [item["content"] for item in response.json()["items"]] == ["two", "one"]


def test_history_requires_user_id(client):
    response = client.get("/api/v1/messages")
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "bad_request"


def test_history_limit_is_clamped(client):
    response = client.get("/api/v1/messages", params={"user_id": "alice", "limit": 100000})
    assert response.json()["limit"] == 500


def test_store_lifecycle_follows_app(settings, store):
    app = create_app(settings=settings, store=store)
    with TestClient(app):
        assert store.started
    assert store.closed
