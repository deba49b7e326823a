"""Vote schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class VoteCreate(BaseModel):
    value: int
    question_id: int | None = None
    answer_id: int | None = None


class VoteRead(BaseModel):
    id: int
    user_id: int
    value: int
    question_id: int | None = None
    answer_id: int | None = None
    created_at: datetime | None = None
    votes_count: int = 0

    model_config = ConfigDict(from_attributes=True)
