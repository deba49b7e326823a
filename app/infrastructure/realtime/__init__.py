"""Realtime presence and notification delivery over websockets."""

from .dispatcher import EventDispatcher, close_quietly
from .hub import RealtimeHub
from .liveness import DEFAULT_PING_INTERVAL_SECONDS, LivenessMonitor
from .protocol import ProtocolError, build_event, error_event, parse_client_frame, parse_user_id
from .publisher import RealtimePublisher, serialize_message
from .registry import Connection, ConnectionRegistry, ConnectionState, Transport

__all__ = [
    "Connection",
    "ConnectionRegistry",
    "ConnectionState",
    "DEFAULT_PING_INTERVAL_SECONDS",
    "EventDispatcher",
    "LivenessMonitor",
    "ProtocolError",
    "RealtimeHub",
    "RealtimePublisher",
    "Transport",
    "build_event",
    "close_quietly",
    "error_event",
    "parse_client_frame",
    "parse_user_id",
    "serialize_message",
]
