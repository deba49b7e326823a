"""Follow schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FollowCreate(BaseModel):
    following_id: int = Field(..., ge=1)


class FollowRead(BaseModel):
    id: int
    follower_id: int
    following_id: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
