"""End-to-end tests for messaging over REST and the ``/ws`` endpoint."""

import pytest
from sqlalchemy.exc import OperationalError
from starlette.websockets import WebSocketDisconnect

from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import create_user_token


def _open(client, user_id=None, token=None):
    path = "/ws" if token is None else f"/ws?token={token}"
    socket = client.websocket_connect(path).__enter__()
    greeting = socket.receive_json()
    assert greeting == {"type": "connection", "message": "Connected to DevQuery chat"}
    if user_id is not None:
        socket.send_json({"type": "register", "userId": user_id})
        assert socket.receive_json() == {"type": "registered", "userId": user_id}
        assert socket.receive_json()["type"] == "online_users"
    return socket


def _close(socket):
    socket.__exit__(None, None, None)


def _ping(socket, timestamp=1):
    socket.send_json({"type": "ping", "timestamp": timestamp})
    return socket.receive_json()


def test_register_broadcasts_online_users(client, make_user):
    alice_id, _ = make_user("alice")
    bob_id, _ = make_user("bob")

    alice = _open(client, alice_id)
    bob = _open(client, bob_id)

    assert alice.receive_json() == {
        "type": "online_users",
        "userIds": sorted([alice_id, bob_id]),
    }

    _close(bob)
    assert alice.receive_json() == {"type": "online_users", "userIds": [alice_id]}
    _close(alice)


def test_new_message_reaches_every_tab_of_receiver_only(client, make_user):
    alice_id, alice_headers = make_user("alice")
    bob_id, _ = make_user("bob")

    alice = _open(client, alice_id)
    bob_tab_one = _open(client, bob_id)
    alice.receive_json()
    bob_tab_two = _open(client, bob_id)
    alice.receive_json()
    bob_tab_one.receive_json()

    response = client.post(
        "/api/messages",
        json={"receiver_id": bob_id, "content": "hello bob"},
        headers=alice_headers,
    )
    assert response.status_code == 201
    message = response.json()

    for tab in (bob_tab_one, bob_tab_two):
        event = tab.receive_json()
        assert event["type"] == "new_message"
        assert event["message"]["id"] == message["id"]
        assert event["message"]["content"] == "hello bob"
        assert event["message"]["sender"]["username"] == "alice"

    assert _ping(alice, 77) == {"type": "pong", "timestamp": 77}

    for socket in (bob_tab_two, bob_tab_one, alice):
        _close(socket)


def test_offline_receiver_sees_message_when_polling(client, make_user):
    alice_id, alice_headers = make_user("alice")
    bob_id, bob_headers = make_user("bob")

    response = client.post(
        "/api/messages",
        json={"receiver_id": bob_id, "content": "are you there?"},
        headers=alice_headers,
    )
    assert response.status_code == 201

    assert client.get("/api/messages/unread-count", headers=bob_headers).json() == {"count": 1}
    [chat] = client.get("/api/messages/chats", headers=bob_headers).json()
    assert chat["user"]["id"] == alice_id
    assert chat["unread_count"] == 1
    assert chat["last_message"]["content"] == "are you there?"


def test_reading_a_conversation_notifies_the_sender(client, make_user):
    alice_id, alice_headers = make_user("alice")
    bob_id, bob_headers = make_user("bob")
    first = client.post(
        "/api/messages", json={"receiver_id": bob_id, "content": "one"}, headers=alice_headers
    ).json()
    second = client.post(
        "/api/messages", json={"receiver_id": bob_id, "content": "two"}, headers=alice_headers
    ).json()

    alice = _open(client, alice_id)

    conversation = client.get(f"/api/messages/{alice_id}", headers=bob_headers)
    assert conversation.status_code == 200
    assert [m["content"] for m in conversation.json()] == ["one", "two"]
    assert all(m["read"] for m in conversation.json())

    assert alice.receive_json() == {
        "type": "message_read",
        "readerId": bob_id,
        "messageIds": [first["id"], second["id"]],
    }

    again = client.post(f"/api/messages/{alice_id}/read", headers=bob_headers)
    assert again.json() == {"message_ids": []}
    assert _ping(alice)["type"] == "pong"
    assert client.get("/api/messages/unread-count", headers=bob_headers).json() == {"count": 0}
    _close(alice)


def test_cannot_message_yourself_or_missing_users(client, make_user):
    alice_id, headers = make_user("alice")

    own = client.post(
        "/api/messages", json={"receiver_id": alice_id, "content": "me"}, headers=headers
    )
    missing = client.post(
        "/api/messages", json={"receiver_id": 999, "content": "hi"}, headers=headers
    )

    assert own.status_code == 400
    assert missing.status_code == 404


def test_messaging_works_without_the_realtime_hub(client, make_user):
    alice_id, alice_headers = make_user("alice")
    bob_id, bob_headers = make_user("bob")
    client.app.state.realtime = None

    sent = client.post(
        "/api/messages", json={"receiver_id": bob_id, "content": "hi"}, headers=alice_headers
    )
    conversation = client.get(f"/api/messages/{alice_id}", headers=bob_headers)

    assert sent.status_code == 201
    assert conversation.status_code == 200
    assert [message["read"] for message in conversation.json()] == [True]
    assert client.get("/api/health").json()["realtime"] is False


def test_protocol_errors_keep_the_connection_open(client, make_user):
    alice_id, _ = make_user("alice")
    socket = _open(client)

    socket.send_text("{not json")
    assert socket.receive_json() == {"type": "error", "message": "Invalid message format"}

    socket.send_json({"type": "dance"})
    assert socket.receive_json() == {"type": "error", "message": "Unknown message type: dance"}

    socket.send_json({"type": "register", "userId": "abc"})
    assert socket.receive_json() == {"type": "error", "message": "A valid userId is required"}

    socket.send_json({"type": "register", "userId": 999})
    assert socket.receive_json() == {"type": "error", "message": "User not found"}

    socket.send_json({"type": "register", "userId": alice_id})
    assert socket.receive_json() == {"type": "registered", "userId": alice_id}
    _close(socket)


def test_out_of_range_user_id_keeps_the_connection_open(client, make_user):
    alice_id, _ = make_user("alice")
    socket = _open(client)

    socket.send_json({"type": "register", "userId": 10**30})
    assert socket.receive_json() == {"type": "error", "message": "A valid userId is required"}

    socket.send_json({"type": "register", "userId": alice_id})
    assert socket.receive_json() == {"type": "registered", "userId": alice_id}
    _close(socket)


def test_database_failure_during_register_reports_an_error(client, make_user, monkeypatch):
    alice_id, _ = make_user("alice")
    socket = _open(client)

    def broken_get(self, user_id):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    with monkeypatch.context() as patch:
        patch.setattr(UserRepository, "get", broken_get)
        socket.send_json({"type": "register", "userId": alice_id})
        assert socket.receive_json() == {"type": "error", "message": "Internal error"}

    socket.send_json({"type": "register", "userId": alice_id})
    assert socket.receive_json() == {"type": "registered", "userId": alice_id}
    _close(socket)


def test_token_pins_the_registered_identity(client, make_user):
    alice_id, _ = make_user("alice")
    bob_id, _ = make_user("bob")
    socket = _open(client, token=create_user_token(alice_id))

    socket.send_json({"type": "register", "userId": bob_id})
    assert socket.receive_json() == {
        "type": "error",
        "message": "userId does not match the authenticated user",
    }

    socket.send_json({"type": "register", "userId": alice_id})
    assert socket.receive_json() == {"type": "registered", "userId": alice_id}
    _close(socket)


def test_invalid_token_is_refused(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws?token=garbage") as socket:
            socket.receive_json()
