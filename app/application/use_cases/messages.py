"""Use cases for direct messaging between users."""

from sqlalchemy.orm import Session

from app.application.use_cases.errors import NotFoundError
from app.domain.entities import ChatSummary, Message
from app.infrastructure.realtime import RealtimePublisher
from app.infrastructure.repositories import MessageRepository, UserRepository

MAX_MESSAGE_LENGTH = 5000


def send_message(
    session: Session,
    *,
    sender_id: int,
    receiver_id: int,
    content: str,
    publisher: RealtimePublisher | None = None,
) -> Message:
    """Persist a message and notify its receiver once it is committed."""

    text = (content or "").strip()
    if not text:
        raise ValueError("Message content is required")
    if len(text) > MAX_MESSAGE_LENGTH:
        raise ValueError(f"Message content cannot exceed {MAX_MESSAGE_LENGTH} characters")
    if sender_id == receiver_id:
        raise ValueError("You cannot send a message to yourself")
    if UserRepository(session).get(receiver_id) is None:
        raise NotFoundError("Receiver not found")

    repository = MessageRepository(session)
    created = repository.create(
        Message(id=None, sender_id=sender_id, receiver_id=receiver_id, content=text)
    )
    message = repository.get(created.id) or created
    if publisher is not None:
        publisher.publish_new_message(message)
    return message


def get_conversation(
    session: Session,
    *,
    user_id: int,
    other_user_id: int,
    publisher: RealtimePublisher | None = None,
) -> list[Message]:
    """Return the conversation between both users, reading it as ``user_id``.

    Messages received by ``user_id`` are marked read before the list is
    loaded, so the returned rows already reflect the new state.
    """

    if UserRepository(session).get(other_user_id) is None:
        raise NotFoundError("User not found")
    mark_conversation_read(
        session, reader_id=user_id, other_user_id=other_user_id, publisher=publisher
    )
    return MessageRepository(session).list_between(user_id, other_user_id)


def mark_conversation_read(
    session: Session,
    *,
    reader_id: int,
    other_user_id: int,
    publisher: RealtimePublisher | None = None,
) -> list[int]:
    """Mark everything ``other_user_id`` sent to ``reader_id`` as read.

    Returns the identifiers of the messages that changed. ``other_user_id`` is
    told about them only when there is at least one.
    """

    message_ids = MessageRepository(session).mark_conversation_read(reader_id, other_user_id)
    if message_ids and publisher is not None:
        publisher.publish_messages_read(
            reader_id=reader_id, other_user_id=other_user_id, message_ids=message_ids
        )
    return message_ids


def list_chats(session: Session, user_id: int) -> list[ChatSummary]:
    return MessageRepository(session).recent_chats(user_id)


def get_unread_count(session: Session, user_id: int) -> int:
    return MessageRepository(session).unread_count(user_id)


__all__ = [
    "MAX_MESSAGE_LENGTH",
    "get_conversation",
    "get_unread_count",
    "list_chats",
    "mark_conversation_read",
    "send_message",
]
