"""Client-side cache of unread counts, online users and chats."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[[dict[str, Any]], None]


class NotificationStore:
    """Keep the notification state of one signed-in user.

    The store is fed from two sources: events pushed over the websocket via
    :meth:`apply_event` and REST snapshots via :meth:`apply_snapshot`. A
    snapshot always wins because REST state is the source of truth.
    """

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        self.unread_count = 0
        self.online_user_ids: set[int] = set()
        self.chats: list[dict[str, Any]] = []
        self.read_message_ids: set[int] = set()
        self.registered = False
        self.last_error: str | None = None
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with every applied event; returns an unsubscribe callable."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def apply_event(self, event: dict[str, Any]) -> None:
        event_type = event.get("type")
        if event_type == "new_message":
            message = event.get("message") or {}
            if message.get("sender_id") != self.user_id:
                self.unread_count += 1
        elif event_type == "online_users":
            self.online_user_ids = {int(user_id) for user_id in event.get("userIds") or []}
        elif event_type == "message_read":
            self.read_message_ids.update(int(mid) for mid in event.get("messageIds") or [])
        elif event_type == "registered":
            self.registered = True
        elif event_type == "error":
            self.last_error = event.get("message")
            logger.warning("Server reported an error: %s", self.last_error)
        else:
            return
        self._notify(event)

    def apply_snapshot(self, *, unread_count: int, chats: Iterable[dict[str, Any]]) -> None:
        """Replace counters with the values fetched over REST."""

        self.unread_count = unread_count
        self.chats = list(chats)

    def is_user_online(self, user_id: int) -> bool:
        return user_id in self.online_user_ids

    def reset_unread_count(self) -> None:
        self.unread_count = 0

    def _notify(self, event: dict[str, Any]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Notification listener failed")


__all__ = ["Listener", "NotificationStore"]
