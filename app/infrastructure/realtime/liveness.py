"""Ping/pong liveness probing for websocket connections."""

from __future__ import annotations

import asyncio
import logging

from .dispatcher import EventDispatcher
from .protocol import EVENT_PING, build_event, current_timestamp
from .registry import Connection, ConnectionRegistry

logger = logging.getLogger(__name__)

DEFAULT_PING_INTERVAL_SECONDS = 30.0


class LivenessMonitor:
    """Terminate connections that did not answer the previous ping.

    Each sweep first terminates every connection still flagged as not alive,
    then clears the flag on the survivors and pings them. A ``pong`` (or any
    proof of life routed through :meth:`mark_alive`) sets the flag again before
    the next sweep.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        dispatcher: EventDispatcher,
        *,
        interval: float = DEFAULT_PING_INTERVAL_SECONDS,
    ) -> None:
        self._registry = registry
        self._dispatcher = dispatcher
        self.interval = interval

    @staticmethod
    def mark_alive(connection: Connection) -> None:
        connection.is_alive = True

    async def sweep(self) -> list[Connection]:
        """Run one probe cycle and return the connections that were terminated."""

        dead: list[Connection] = []
        probed: list[Connection] = []
        for connection in self._registry.tracked():
            if connection.is_alive:
                connection.is_alive = False
                probed.append(connection)
            else:
                dead.append(connection)

        if dead:
            for connection in dead:
                logger.info(
                    "Terminating connection %s (user %s): missed pong",
                    connection.id,
                    connection.user_id,
                )
            await self._dispatcher.drop_connections(dead)

        if probed:
            await self._dispatcher.send_to_connections(
                probed, build_event(EVENT_PING, timestamp=current_timestamp())
            )
        return dead

    async def run(self) -> None:
        """Sweep forever every :attr:`interval` seconds until cancelled."""

        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.sweep()
            except Exception:  # pragma: no cover - keep probing after unexpected errors
                logger.exception("Liveness sweep failed")


__all__ = ["DEFAULT_PING_INTERVAL_SECONDS", "LivenessMonitor"]
