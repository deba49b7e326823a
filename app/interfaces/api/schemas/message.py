"""Direct message schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummaryRead


class MessageCreate(BaseModel):
    receiver_id: int = Field(..., ge=1)
    content: str = Field(..., min_length=1, max_length=5000)


class MessageRead(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    read: bool
    created_at: datetime | None = None
    sender: UserSummaryRead | None = None

    model_config = ConfigDict(from_attributes=True)


class ChatRead(BaseModel):
    user: UserSummaryRead
    last_message: MessageRead
    unread_count: int

    model_config = ConfigDict(from_attributes=True)


class UnreadCountRead(BaseModel):
    count: int


class MessagesReadResponse(BaseModel):
    message_ids: list[int]
