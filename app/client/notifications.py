"""Async client that follows the notification stream of one user.

The client prefers the ``/ws`` websocket and falls back to polling the REST
API when the socket cannot be opened within ``connect_timeout`` seconds or
closes later on.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable
from contextlib import suppress
from typing import Any
from urllib.parse import urlencode, urlsplit, urlunsplit

import httpx
import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from .store import NotificationStore

logger = logging.getLogger(__name__)

MODE_IDLE = "idle"
MODE_WEBSOCKET = "websocket"
MODE_POLLING = "polling"

Connector = Callable[[str], Awaitable[Any]]


def websocket_url(base_url: str, token: str | None = None) -> str:
    """Return the ``/ws`` URL matching an ``http(s)`` API base URL."""

    parts = urlsplit(base_url)
    scheme = "wss" if parts.scheme == "https" else "ws"
    query = urlencode({"token": token}) if token else ""
    return urlunsplit((scheme, parts.netloc, "/ws", query, ""))


class NotificationClient:
    """Feed a :class:`NotificationStore` from the websocket or from polling.

    ``reconnect_delay`` makes the reconnection policy explicit: ``None`` keeps
    polling for good once the socket is unavailable or closed, a number retries
    the socket after that many seconds.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str,
        user_id: int,
        store: NotificationStore | None = None,
        http_client: httpx.AsyncClient | None = None,
        connect: Connector | None = None,
        connect_timeout: float = 5.0,
        ping_interval: float = 30.0,
        poll_interval: float = 30.0,
        reconnect_delay: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.user_id = user_id
        self.store = store or NotificationStore(user_id)
        self.connect_timeout = connect_timeout
        self.ping_interval = ping_interval
        self.poll_interval = poll_interval
        self.reconnect_delay = reconnect_delay
        self.mode = MODE_IDLE
        self._connect = connect or websockets.connect
        self._http = http_client or httpx.AsyncClient(base_url=self.base_url, timeout=10.0)
        self._owns_http = http_client is None
        self._socket: Any = None

    @property
    def ws_url(self) -> str:
        return websocket_url(self.base_url, self.token)

    async def connect_or_fallback(self) -> bool:
        """Open and register the websocket, or switch to polling mode.

        Never raises for transport failures; returns ``True`` when the socket
        is open.
        """

        try:
            socket = await asyncio.wait_for(self._connect(self.ws_url), self.connect_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Websocket handshake exceeded %ss, falling back to polling",
                self.connect_timeout,
            )
            self.mode = MODE_POLLING
            return False
        except (OSError, WebSocketException) as exc:
            logger.warning("Websocket unavailable (%s), falling back to polling", exc)
            self.mode = MODE_POLLING
            return False

        try:
            await socket.send(json.dumps({"type": "register", "userId": self.user_id}))
        except (ConnectionClosed, OSError) as exc:
            logger.warning(
                "Websocket closed during registration (%s), falling back to polling", exc
            )
            with suppress(Exception):
                await socket.close()
            self._socket = None
            self.mode = MODE_POLLING
            return False
        self._socket = socket
        self.mode = MODE_WEBSOCKET
        logger.info("Websocket connected to %s", self.base_url)
        return True

    async def listen(self) -> None:
        """Consume events until the socket closes, pinging on ``ping_interval``."""

        socket = self._socket
        if socket is None:
            return
        pinger = asyncio.create_task(self._ping_loop(socket))
        try:
            async for raw in socket:
                await self._handle_frame(socket, raw)
        except ConnectionClosed as exc:
            logger.info("Websocket closed: %s", exc)
        finally:
            pinger.cancel()
            with suppress(asyncio.CancelledError):
                await pinger
            self._socket = None
            self.mode = MODE_POLLING

    async def poll_once(self) -> None:
        """Refresh the unread count and chat list over REST."""

        headers = {"Authorization": f"Bearer {self.token}"}
        unread = await self._http.get("/api/messages/unread-count", headers=headers)
        unread.raise_for_status()
        chats = await self._http.get("/api/messages/chats", headers=headers)
        chats.raise_for_status()
        self.store.apply_snapshot(unread_count=unread.json()["count"], chats=chats.json())

    async def poll_forever(self) -> None:
        while True:
            try:
                await self.poll_once()
            except httpx.HTTPError as exc:
                logger.warning("Polling notifications failed: %s", exc)
            await asyncio.sleep(self.poll_interval)

    async def run(self) -> None:
        """Follow notifications until cancelled."""

        await self._poll_quietly()
        while True:
            if await self.connect_or_fallback():
                await self.listen()
                await self._poll_quietly()
            if self.reconnect_delay is None:
                break
            await asyncio.sleep(self.reconnect_delay)
        await self.poll_forever()

    async def aclose(self) -> None:
        socket, self._socket = self._socket, None
        if socket is not None:
            with suppress(Exception):
                await socket.close()
        if self._owns_http:
            await self._http.aclose()
        self.mode = MODE_IDLE

    async def _handle_frame(self, socket: Any, raw: str | bytes) -> None:
        try:
            event = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring malformed frame from server")
            return
        if not isinstance(event, dict):
            return
        if event.get("type") == "ping":
            await socket.send(json.dumps({"type": "pong", "timestamp": event.get("timestamp")}))
            return
        self.store.apply_event(event)

    async def _ping_loop(self, socket: Any) -> None:
        while True:
            await asyncio.sleep(self.ping_interval)
            try:
                await socket.send(
                    json.dumps({"type": "ping", "timestamp": int(time.time() * 1000)})
                )
            except ConnectionClosed:
                return

    async def _poll_quietly(self) -> None:
        try:
            await self.poll_once()
        except httpx.HTTPError as exc:
            logger.warning("Polling notifications failed: %s", exc)


__all__ = [
    "MODE_IDLE",
    "MODE_POLLING",
    "MODE_WEBSOCKET",
    "NotificationClient",
    "websocket_url",
]
