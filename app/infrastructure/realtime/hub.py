"""Composition root of the realtime layer."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Any

from .dispatcher import EventDispatcher
from .liveness import DEFAULT_PING_INTERVAL_SECONDS, LivenessMonitor
from .protocol import (
    CONNECTION_GREETING,
    EVENT_CONNECTION,
    EVENT_PONG,
    EVENT_REGISTERED,
    build_event,
)
from .registry import Connection, ConnectionRegistry, Transport

logger = logging.getLogger(__name__)


class RealtimeHub:
    """Own the registry, dispatcher and liveness monitor of one application.

    The hub is created by the application lifespan and stored on
    ``app.state``; :meth:`start` launches the liveness loop and :meth:`stop`
    cancels it, lets in-flight deliveries finish and closes every tracked
    connection.
    """

    def __init__(
        self,
        *,
        ping_interval: float = DEFAULT_PING_INTERVAL_SECONDS,
        registry: ConnectionRegistry | None = None,
    ) -> None:
        self.registry = registry or ConnectionRegistry()
        self.dispatcher = EventDispatcher(self.registry)
        self.liveness = LivenessMonitor(
            self.registry, self.dispatcher, interval=ping_interval
        )
        self._liveness_task: asyncio.Task | None = None
        self._deliveries: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._liveness_task is not None and not self._liveness_task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._liveness_task = asyncio.create_task(
            self.liveness.run(), name="realtime-liveness"
        )
        logger.info("Realtime hub started (ping every %ss)", self.liveness.interval)

    async def stop(self) -> None:
        task, self._liveness_task = self._liveness_task, None
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        if self._deliveries:
            await asyncio.gather(*self._deliveries, return_exceptions=True)
        await self.dispatcher.drop_connections(
            self.registry.tracked(), close=True, broadcast=False
        )
        logger.info("Realtime hub stopped")

    async def connect(self, transport: Transport) -> Connection:
        """Track an accepted transport and greet it."""

        connection = self.registry.track(transport)
        logger.info("Websocket connection %s opened", connection.id)
        await self.dispatcher.send_to_connection(
            connection, build_event(EVENT_CONNECTION, message=CONNECTION_GREETING)
        )
        return connection

    async def register(self, connection: Connection, user_id: int) -> bool:
        """Bind ``connection`` to ``user_id``, acknowledge it and share the roster."""

        inserted = self.registry.register(connection, user_id)
        if connection.is_closed:
            return False
        await self.dispatcher.send_to_connection(
            connection, build_event(EVENT_REGISTERED, userId=user_id)
        )
        if inserted:
            await self.dispatcher.broadcast_online_users()
        return inserted

    async def disconnect(self, connection: Connection) -> None:
        """Forget a connection whose transport already closed."""

        await self.dispatcher.drop_connections([connection], close=False)
        logger.info("Websocket connection %s closed", connection.id)

    async def pong(self, connection: Connection, timestamp: Any = None) -> None:
        self.liveness.mark_alive(connection)
        await self.dispatcher.send_to_connection(
            connection, build_event(EVENT_PONG, timestamp=timestamp)
        )

    def mark_alive(self, connection: Connection) -> None:
        self.liveness.mark_alive(connection)

    async def send_to_user(self, user_id: int, event: dict[str, Any]) -> int:
        return await self.dispatcher.send_to_user(user_id, event)

    def schedule_send_to_user(self, user_id: int, event: dict[str, Any]) -> asyncio.Task:
        """Deliver ``event`` in the background; :meth:`stop` waits for it."""

        task = asyncio.get_running_loop().create_task(self.send_to_user(user_id, event))
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)
        return task

    async def send_to_connection(self, connection: Connection, event: dict[str, Any]) -> bool:
        return await self.dispatcher.send_to_connection(connection, event)

    def is_online(self, user_id: int) -> bool:
        return self.registry.is_online(user_id)

    def list_online(self) -> set[int]:
        return self.registry.list_online()


__all__ = ["RealtimeHub"]
