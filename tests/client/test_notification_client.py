"""Tests for the websocket/polling notification client."""

import asyncio
import json

import anyio
import httpx
import pytest
from websockets.exceptions import ConnectionClosedError

from app.client import MODE_POLLING, MODE_WEBSOCKET, NotificationClient, websocket_url


class FakeSocket:
    def __init__(self, frames=()):
        self.frames = list(frames)
        self.sent = []
        self.closed = False

    async def send(self, data):
        self.sent.append(json.loads(data))

    async def close(self):
        self.closed = True

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for frame in self.frames:
            yield frame


def _api(unread=2, chats=None, calls=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if request.url.path == "/api/messages/unread-count":
            return httpx.Response(200, json={"count": unread})
        if request.url.path == "/api/messages/chats":
            return httpx.Response(200, json=chats or [])
        return httpx.Response(404)

    return httpx.AsyncClient(base_url="http://api.test", transport=httpx.MockTransport(handler))


def _client(connect, **kwargs):
    kwargs.setdefault("http_client", _api())
    return NotificationClient(
        "http://api.test", token="tok", user_id=1, connect=connect, **kwargs
    )


def test_websocket_url_follows_scheme():
    assert websocket_url("http://localhost:5000", "abc") == "ws://localhost:5000/ws?token=abc"
    assert websocket_url("https://devquery.app") == "wss://devquery.app/ws"


@pytest.mark.anyio
async def test_connect_registers_and_feeds_store():
    socket = FakeSocket(
        [
            json.dumps({"type": "connection", "message": "hi"}),
            json.dumps({"type": "registered", "userId": 1}),
            json.dumps({"type": "online_users", "userIds": [1, 2]}),
            json.dumps({"type": "ping", "timestamp": 99}),
            "garbage",
            json.dumps({"type": "new_message", "message": {"sender_id": 2}}),
        ]
    )
    urls = []

    async def connect(url):
        urls.append(url)
        return socket

    client = _client(connect)

    assert await client.connect_or_fallback() is True
    assert client.mode == MODE_WEBSOCKET
    await client.listen()

    assert urls == ["ws://api.test/ws?token=tok"]
    assert socket.sent[0] == {"type": "register", "userId": 1}
    assert {"type": "pong", "timestamp": 99} in socket.sent
    assert client.store.registered
    assert client.store.is_user_online(2)
    assert client.store.unread_count == 1
    assert client.mode == MODE_POLLING


@pytest.mark.anyio
async def test_handshake_timeout_falls_back_to_polling():
    async def never_connects(url):
        await asyncio.sleep(10)

    client = _client(never_connects, connect_timeout=0.01)

    assert await client.connect_or_fallback() is False
    assert client.mode == MODE_POLLING


@pytest.mark.anyio
async def test_refused_connection_falls_back_to_polling():
    async def refused(url):
        raise ConnectionRefusedError("refused")

    client = _client(refused)

    assert await client.connect_or_fallback() is False
    assert client.mode == MODE_POLLING


class ClosingSocket(FakeSocket):
    async def send(self, data):
        raise ConnectionClosedError(None, None)


@pytest.mark.anyio
async def test_socket_closed_while_registering_falls_back_to_polling():
    socket = ClosingSocket()

    async def connect(url):
        return socket

    client = _client(connect)

    assert await client.connect_or_fallback() is False
    assert client.mode == MODE_POLLING
    assert socket.closed is True
    await client.listen()
    assert client.mode == MODE_POLLING


@pytest.mark.anyio
async def test_poll_once_updates_store_with_bearer_token():
    calls = []
    chats = [{"user": {"id": 2}, "unread_count": 3}]
    client = _client(None, http_client=_api(unread=3, chats=chats, calls=calls))

    await client.poll_once()

    assert client.store.unread_count == 3
    assert client.store.chats == chats
    assert all(request.headers["Authorization"] == "Bearer tok" for request in calls)


@pytest.mark.anyio
async def test_run_without_reconnect_polls_after_failure():
    attempts = []
    calls = []

    async def refused(url):
        attempts.append(url)
        raise ConnectionRefusedError("refused")

    client = _client(refused, http_client=_api(calls=calls), poll_interval=0.01)

    with anyio.move_on_after(0.1):
        await client.run()

    assert len(attempts) == 1
    assert len(calls) > 4
    assert client.store.unread_count == 2


@pytest.mark.anyio
async def test_run_with_reconnect_delay_retries_socket():
    attempts = []

    async def refused(url):
        attempts.append(url)
        raise ConnectionRefusedError("refused")

    client = _client(refused, reconnect_delay=0.01)

    with anyio.move_on_after(0.1):
        await client.run()

    assert len(attempts) > 1


@pytest.mark.anyio
async def test_polling_survives_server_errors():
    def handler(request):
        return httpx.Response(500)

    http_client = httpx.AsyncClient(
        base_url="http://api.test", transport=httpx.MockTransport(handler)
    )

    async def refused(url):
        raise ConnectionRefusedError("refused")

    client = _client(refused, http_client=http_client, poll_interval=0.01)

    with anyio.move_on_after(0.05):
        await client.run()

    assert client.store.unread_count == 0


@pytest.mark.anyio
async def test_aclose_closes_open_socket():
    socket = FakeSocket()

    async def connect(url):
        return socket

    client = _client(connect)
    await client.connect_or_fallback()
    await client.aclose()

    assert socket.closed
