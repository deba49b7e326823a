"""Domain entities for direct messages and chat summaries."""

from dataclasses import dataclass
from datetime import datetime

from .user import User


@dataclass
class Message:
    """Direct message sent from one user to another."""

    id: int | None
    sender_id: int
    receiver_id: int
    content: str
    read: bool = False
    created_at: datetime | None = None
    sender: User | None = None


@dataclass
class ChatSummary:
    """Latest state of a conversation as seen by one participant."""

    user: User
    last_message: Message
    unread_count: int


__all__ = ["ChatSummary", "Message"]
