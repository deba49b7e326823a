"""Python client for DevQuery notifications."""

from .notifications import (
    MODE_IDLE,
    MODE_POLLING,
    MODE_WEBSOCKET,
    NotificationClient,
    websocket_url,
)
from .store import NotificationStore

__all__ = [
    "MODE_IDLE",
    "MODE_POLLING",
    "MODE_WEBSOCKET",
    "NotificationClient",
    "NotificationStore",
    "websocket_url",
]
