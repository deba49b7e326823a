"""Bridge committed domain changes to realtime events."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from anyio import from_thread

from app.domain.entities import Message

from .hub import RealtimeHub
from .protocol import EVENT_MESSAGE_READ, EVENT_NEW_MESSAGE, build_event

logger = logging.getLogger(__name__)


class RealtimePublisher:
    """Translate message changes into events delivered through ``hub``.

    Callers publish only after the change has been committed, so a client
    that receives an event can always fetch the matching state over REST.
    """

    def __init__(self, hub: RealtimeHub) -> None:
        self._hub = hub

    def publish_new_message(self, message: Message) -> None:
        """Notify the receiver of ``message``; the sender gets no echo."""

        event = build_event(EVENT_NEW_MESSAGE, message=serialize_message(message))
        self._schedule(message.receiver_id, event)

    def publish_messages_read(
        self,
        *,
        reader_id: int,
        other_user_id: int,
        message_ids: Sequence[int],
    ) -> None:
        """Tell ``other_user_id`` that ``reader_id`` read ``message_ids``."""

        if not message_ids:
            return
        event = build_event(
            EVENT_MESSAGE_READ, readerId=reader_id, messageIds=list(message_ids)
        )
        self._schedule(other_user_id, event)

    def _schedule(self, user_id: int, event: dict[str, Any]) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._hub.send_to_user, user_id, event)
            except RuntimeError as exc:
                logger.warning(
                    "Could not deliver %s event to user %s: %s",
                    event["type"],
                    user_id,
                    exc,
                )
        else:
            self._hub.schedule_send_to_user(user_id, event)


def serialize_message(message: Message) -> dict[str, object]:
    """Return a JSON-serializable representation of ``message``."""

    payload: dict[str, object] = {
        "id": message.id,
        "sender_id": message.sender_id,
        "receiver_id": message.receiver_id,
        "content": message.content,
        "read": message.read,
        "created_at": message.created_at.isoformat() if message.created_at else None,
    }
    sender = message.sender
    if sender is not None:
        payload["sender"] = {
            "id": sender.id,
            "username": sender.username,
            "role": sender.role,
            "avatar_url": sender.avatar_url,
        }
    return payload


__all__ = ["RealtimePublisher", "serialize_message"]
