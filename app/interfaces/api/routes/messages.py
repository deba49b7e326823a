"""Routes for direct messages.

Every mutation commits before the matching realtime event is published, so a
client reacting to ``new_message`` or ``message_read`` can immediately refetch
consistent state from these endpoints.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.application.use_cases import messages as messages_uc
from app.domain.entities import ChatSummary, Message, User
from app.infrastructure.database import get_db
from app.infrastructure.realtime import RealtimePublisher
from app.interfaces.api.dependencies import get_current_user, get_realtime_publisher
from app.interfaces.api.routes_helpers import http_error
from app.interfaces.api.schemas import (
    ChatRead,
    MessageCreate,
    MessageRead,
    MessagesReadResponse,
    UnreadCountRead,
    UserSummaryRead,
)

router = APIRouter(prefix="/api/messages", tags=["messages"])
logger = logging.getLogger(__name__)


def _to_chat(chat: ChatSummary) -> ChatRead:
    return ChatRead(
        user=UserSummaryRead.model_validate(chat.user),
        last_message=MessageRead.model_validate(chat.last_message),
        unread_count=chat.unread_count,
    )


def _to_message(message: Message) -> MessageRead:
    return MessageRead.model_validate(message)


@router.get("/chats", response_model=list[ChatRead])
def list_chats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return one entry per conversation partner, most recent first."""

    return [_to_chat(chat) for chat in messages_uc.list_chats(db, current_user.id)]


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return UnreadCountRead(count=messages_uc.get_unread_count(db, current_user.id))


@router.get("/{user_id}", response_model=list[MessageRead])
def read_conversation(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    publisher: RealtimePublisher | None = Depends(get_realtime_publisher),
):
    """Return the conversation with ``user_id`` and mark it read for the caller."""

    try:
        messages = messages_uc.get_conversation(
            db,
            user_id=current_user.id,
            other_user_id=user_id,
            publisher=publisher,
        )
    except ValueError as exc:
        raise http_error(exc) from exc
    return [_to_message(message) for message in messages]


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def send_message(
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    publisher: RealtimePublisher | None = Depends(get_realtime_publisher),
):
    try:
        message = messages_uc.send_message(
            db,
            sender_id=current_user.id,
            receiver_id=payload.receiver_id,
            content=payload.content,
            publisher=publisher,
        )
    except ValueError as exc:
        raise http_error(exc) from exc
    logger.info(
        "User %s sent message %s to user %s",
        current_user.id,
        message.id,
        message.receiver_id,
    )
    return _to_message(message)


@router.post("/{user_id}/read", response_model=MessagesReadResponse)
def mark_read(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    publisher: RealtimePublisher | None = Depends(get_realtime_publisher),
):
    """Mark everything ``user_id`` sent to the caller as read."""

    message_ids = messages_uc.mark_conversation_read(
        db,
        reader_id=current_user.id,
        other_user_id=user_id,
        publisher=publisher,
    )
    return MessagesReadResponse(message_ids=message_ids)
