"""Answer schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummaryRead


class AnswerCreate(BaseModel):
    content: str = Field(..., min_length=1)
    image_url: str | None = Field(default=None, max_length=255)


class AnswerUpdate(BaseModel):
    content: str | None = Field(default=None, min_length=1)
    image_url: str | None = Field(default=None, max_length=255)

    model_config = ConfigDict(extra="forbid")


class AnswerRead(BaseModel):
    id: int
    question_id: int
    user_id: int
    content: str
    image_url: str | None = None
    accepted: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AnswerDetailRead(AnswerRead):
    user: UserSummaryRead
    votes_count: int
