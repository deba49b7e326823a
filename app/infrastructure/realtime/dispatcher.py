"""Deliver realtime events to the connections tracked by the registry."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from .protocol import EVENT_ONLINE_USERS, build_event, serialize_event
from .registry import Connection, ConnectionRegistry

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Push serialized events to one user, a set of connections or everyone.

    Delivery is best-effort and at-most-once: nothing is queued for users
    without connections, and a connection whose write fails is treated as
    closed and pruned while delivery to the remaining connections continues.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry

    async def send_to_user(self, user_id: int, event: dict[str, Any]) -> int:
        """Send ``event`` to every connection of ``user_id``.

        Returns the number of connections that accepted the payload; ``0`` when
        the user is offline.
        """

        connections = self._registry.connections_for(user_id)
        if not connections:
            logger.debug("Dropping %s event for offline user %s", event.get("type"), user_id)
            return 0
        return await self.send_to_connections(connections, event)

    async def send_to_connection(self, connection: Connection, event: dict[str, Any]) -> bool:
        return bool(await self.send_to_connections([connection], event))

    async def send_to_connections(
        self, connections: Sequence[Connection], event: dict[str, Any]
    ) -> int:
        """Serialize ``event`` once and write it to each of ``connections``."""

        if not connections:
            return 0

        payload = serialize_event(event)
        delivered = 0
        failed: list[Connection] = []
        for connection in connections:
            try:
                await connection.transport.send_text(payload)
            except Exception as exc:  # noqa: BLE001
                logger.info(
                    "Pruning connection %s (user %s) after failed write: %s",
                    connection.id,
                    connection.user_id,
                    exc,
                )
                failed.append(connection)
            else:
                delivered += 1

        if failed:
            await self.drop_connections(failed)
        return delivered

    async def broadcast_online_users(self) -> int:
        """Send the full online roster to every registered connection."""

        event = build_event(
            EVENT_ONLINE_USERS, userIds=sorted(self._registry.list_online())
        )
        return await self.send_to_connections(self._registry.registered_connections(), event)

    async def drop_connections(
        self,
        connections: Iterable[Connection],
        *,
        close: bool = True,
        broadcast: bool = True,
    ) -> None:
        """Unregister ``connections`` and optionally close their transports.

        When any user goes offline as a result, the roster is broadcast again
        so every client converges on the same membership view.
        """

        went_offline = False
        for connection in connections:
            if self._registry.unregister(connection):
                went_offline = True
            if close:
                await close_quietly(connection)
        if went_offline and broadcast:
            await self.broadcast_online_users()


async def close_quietly(connection: Connection, code: int = 1000) -> None:
    """Close the transport of ``connection`` ignoring already-closed errors."""

    try:
        await connection.transport.close(code=code)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Ignoring error while closing connection %s: %s", connection.id, exc)


__all__ = ["EventDispatcher", "close_quietly"]
