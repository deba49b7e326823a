"""Websocket endpoint for presence and message notifications."""

from __future__ import annotations

import logging
from typing import Any

import anyio
from fastapi import APIRouter, Depends, WebSocket
from sqlalchemy.exc import SQLAlchemyError

from app.domain.entities import User
from app.infrastructure.database import SessionLocal
from app.infrastructure.realtime import (
    Connection,
    ProtocolError,
    RealtimeHub,
    error_event,
    parse_client_frame,
    parse_user_id,
)
from app.infrastructure.realtime.protocol import EVENT_PING, EVENT_PONG, EVENT_REGISTER
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import user_id_from_token
from app.interfaces.api.dependencies import get_realtime_hub

router = APIRouter(tags=["realtime"])
logger = logging.getLogger(__name__)

POLICY_VIOLATION = 1008


@router.websocket("/ws")
async def realtime_websocket(
    websocket: WebSocket,
    hub: RealtimeHub = Depends(get_realtime_hub),
) -> None:
    """Track the socket, then serve ``register``/``ping``/``pong`` frames until it closes.

    An optional ``token`` query parameter pins the identity the socket may
    register as; an invalid token is refused before the handshake completes.
    """

    token_user_id: int | None = None
    token = websocket.query_params.get("token")
    if token:
        try:
            token_user_id = user_id_from_token(token)
        except ValueError:
            await websocket.close(code=POLICY_VIOLATION)
            return

    await websocket.accept()
    connection = await hub.connect(websocket)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            await _handle_frame(hub, connection, raw, token_user_id)
    except Exception:
        if connection.is_closed:
            logger.debug("Connection %s ended after being terminated", connection.id)
        else:
            logger.exception("Websocket handler failed for connection %s", connection.id)
    finally:
        await hub.disconnect(connection)


async def _handle_frame(
    hub: RealtimeHub,
    connection: Connection,
    raw: str | bytes | None,
    token_user_id: int | None,
) -> None:
    try:
        frame = parse_client_frame(raw)
    except ProtocolError as exc:
        logger.warning("Rejected frame on connection %s: %s", connection.id, exc)
        await hub.send_to_connection(connection, error_event(str(exc)))
        return

    frame_type = frame["type"]
    try:
        if frame_type == EVENT_REGISTER:
            await _register(hub, connection, frame, token_user_id)
        elif frame_type == EVENT_PING:
            await hub.pong(connection, frame.get("timestamp"))
        elif frame_type == EVENT_PONG:
            hub.mark_alive(connection)
    except SQLAlchemyError:
        logger.exception(
            "Failed to handle %s frame on connection %s", frame_type, connection.id
        )
        await hub.send_to_connection(connection, error_event("Internal error"))


async def _register(
    hub: RealtimeHub,
    connection: Connection,
    frame: dict[str, Any],
    token_user_id: int | None,
) -> None:
    try:
        user_id = parse_user_id(frame.get("userId"))
    except ProtocolError as exc:
        await hub.send_to_connection(connection, error_event(str(exc)))
        return

    if token_user_id is not None and token_user_id != user_id:
        logger.warning(
            "Connection %s tried to register as %s with a token for %s",
            connection.id,
            user_id,
            token_user_id,
        )
        await hub.send_to_connection(
            connection, error_event("userId does not match the authenticated user")
        )
        return

    user = await anyio.to_thread.run_sync(_load_user, user_id)
    if user is None:
        await hub.send_to_connection(connection, error_event("User not found"))
        return

    await hub.register(connection, user_id)


def _load_user(user_id: int) -> User | None:
    with SessionLocal() as session:
        return UserRepository(session).get(user_id)
