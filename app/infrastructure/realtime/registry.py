"""Bookkeeping of live websocket connections grouped by user."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol
from uuid import uuid4

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Minimal surface of a websocket needed to push events."""

    async def send_text(self, data: str) -> None: ...

    async def close(self, code: int = 1000) -> None: ...


class ConnectionState(Enum):
    """Lifecycle of a single connection; ``CLOSED`` is terminal."""

    CONNECTING = "connecting"
    ANONYMOUS = "anonymous"
    REGISTERED = "registered"
    CLOSED = "closed"


@dataclass(eq=False)
class Connection:
    """One transport session, optionally bound to a user identity."""

    transport: Transport
    user_id: int | None = None
    is_alive: bool = True
    state: ConnectionState = ConnectionState.CONNECTING
    id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def is_registered(self) -> bool:
        return self.state is ConnectionState.REGISTERED

    @property
    def is_closed(self) -> bool:
        return self.state is ConnectionState.CLOSED


class ConnectionRegistry:
    """Map user identities to their active connections.

    A user appears in the map only while it owns at least one connection, so
    removing the last connection removes the user. Both :meth:`register` and
    :meth:`unregister` are idempotent. The registry must only be mutated from
    the event loop thread.
    """

    def __init__(self) -> None:
        self._tracked: dict[Connection, None] = {}
        self._by_user: dict[int, dict[Connection, None]] = {}

    def track(self, transport: Transport) -> Connection:
        """Start tracking an accepted, still anonymous ``transport``."""

        connection = Connection(transport=transport, state=ConnectionState.ANONYMOUS)
        self._tracked[connection] = None
        return connection

    def register(self, connection: Connection, user_id: int) -> bool:
        """Bind ``connection`` to ``user_id``.

        Returns ``True`` when the connection was added to the user's set and
        ``False`` when it was already there or is closed. Registering under a
        different user moves the connection.
        """

        if connection.is_closed:
            return False
        if connection.user_id == user_id and connection in self._by_user.get(user_id, {}):
            return False
        if connection.user_id is not None and connection.user_id != user_id:
            self._detach(connection)

        self._tracked[connection] = None
        self._by_user.setdefault(user_id, {})[connection] = None
        connection.user_id = user_id
        connection.state = ConnectionState.REGISTERED
        logger.info("Connection %s registered for user %s", connection.id, user_id)
        return True

    def unregister(self, connection: Connection) -> bool:
        """Forget ``connection``; returns ``True`` when its user went offline."""

        self._tracked.pop(connection, None)
        went_offline = self._detach(connection)
        connection.state = ConnectionState.CLOSED
        return went_offline

    def is_online(self, user_id: int) -> bool:
        return bool(self._by_user.get(user_id))

    def list_online(self) -> set[int]:
        return set(self._by_user)

    def connections_for(self, user_id: int) -> list[Connection]:
        return list(self._by_user.get(user_id, ()))

    def registered_connections(self) -> list[Connection]:
        return [
            connection
            for connections in self._by_user.values()
            for connection in connections
        ]

    def tracked(self) -> list[Connection]:
        return list(self._tracked)

    def _detach(self, connection: Connection) -> bool:
        user_id = connection.user_id
        if user_id is None:
            return False
        connections = self._by_user.get(user_id)
        if connections is None or connection not in connections:
            return False
        del connections[connection]
        if connections:
            return False
        del self._by_user[user_id]
        logger.info("User %s has no live connections left", user_id)
        return True


__all__ = ["Connection", "ConnectionRegistry", "ConnectionState", "Transport"]
