"""Wire format shared by the ``/ws`` endpoint and its clients.

Every frame is a JSON object with a ``type`` discriminator; the remaining keys
depend on the type:

=================  =========  ==========================================
type               direction  payload
=================  =========  ==========================================
``register``       C→S        ``{userId}``
``connection``     S→C        ``{message}``
``registered``     S→C        ``{userId}``
``online_users``   S→C        ``{userIds: [int]}`` (sorted)
``new_message``    S→C        ``{message: {..., sender}}``
``message_read``   S→C        ``{readerId, messageIds}``
``ping``/``pong``  both       ``{timestamp?}`` (epoch milliseconds)
``error``          S→C        ``{message}``
=================  =========  ==========================================
"""

from __future__ import annotations

import json
import time
from datetime import date, datetime
from typing import Any

EVENT_REGISTER = "register"
EVENT_CONNECTION = "connection"
EVENT_REGISTERED = "registered"
EVENT_ONLINE_USERS = "online_users"
EVENT_NEW_MESSAGE = "new_message"
EVENT_MESSAGE_READ = "message_read"
EVENT_PING = "ping"
EVENT_PONG = "pong"
EVENT_ERROR = "error"

CLIENT_EVENTS = frozenset({EVENT_REGISTER, EVENT_PING, EVENT_PONG})

CONNECTION_GREETING = "Connected to DevQuery chat"

# Largest id a signed 64-bit INTEGER column can hold.
MAX_USER_ID = 2**63 - 1


class ProtocolError(ValueError):
    """Raised when a client frame cannot be interpreted."""


def build_event(event_type: str, **payload: Any) -> dict[str, Any]:
    """Return an event envelope of ``event_type`` carrying ``payload``."""

    return {"type": event_type, **payload}


def error_event(message: str) -> dict[str, Any]:
    return build_event(EVENT_ERROR, message=message)


def serialize_event(event: dict[str, Any]) -> str:
    """Return the JSON text sent over the wire for ``event``."""

    return json.dumps(event, default=_json_default, separators=(",", ":"))


def parse_client_frame(raw: str | bytes) -> dict[str, Any]:
    """Decode a client frame into a dictionary with a known ``type``."""

    try:
        frame = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ProtocolError("Invalid message format") from exc

    if not isinstance(frame, dict):
        raise ProtocolError("Invalid message format")

    frame_type = frame.get("type")
    if not isinstance(frame_type, str):
        raise ProtocolError("Message type is required")
    if frame_type not in CLIENT_EVENTS:
        raise ProtocolError(f"Unknown message type: {frame_type}")
    return frame


def parse_user_id(value: Any) -> int:
    """Return ``value`` as a positive user identifier.

    Numeric strings are accepted because browsers commonly send ids taken from
    URL parameters; booleans are rejected even though they are ``int``
    subclasses.
    """

    if isinstance(value, bool) or value is None:
        raise ProtocolError("A valid userId is required")
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise ProtocolError("A valid userId is required")
        value = int(value)
    if not isinstance(value, int) or value <= 0 or value > MAX_USER_ID:
        raise ProtocolError("A valid userId is required")
    return value


def current_timestamp() -> int:
    """Return the current time in epoch milliseconds."""

    return int(time.time() * 1000)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


__all__ = [
    "CLIENT_EVENTS",
    "CONNECTION_GREETING",
    "EVENT_CONNECTION",
    "EVENT_ERROR",
    "EVENT_MESSAGE_READ",
    "EVENT_NEW_MESSAGE",
    "EVENT_ONLINE_USERS",
    "EVENT_PING",
    "EVENT_PONG",
    "EVENT_REGISTER",
    "EVENT_REGISTERED",
    "MAX_USER_ID",
    "ProtocolError",
    "build_event",
    "current_timestamp",
    "error_event",
    "parse_client_frame",
    "parse_user_id",
    "serialize_event",
]
