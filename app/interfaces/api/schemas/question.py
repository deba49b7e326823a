"""Question and tag schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummaryRead


class TagRead(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class QuestionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    image_url: str | None = Field(default=None, max_length=255)


class QuestionUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)
    image_url: str | None = Field(default=None, max_length=255)

    model_config = ConfigDict(extra="forbid")


class QuestionRead(BaseModel):
    id: int
    user_id: int
    title: str
    content: str
    image_url: str | None = None
    solved: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class QuestionDetailRead(QuestionRead):
    user: UserSummaryRead
    tags: list[TagRead]
    votes_count: int
    answers_count: int


class SolveQuestionRequest(BaseModel):
    answer_id: int = Field(..., ge=1)
