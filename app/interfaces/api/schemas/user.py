"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserSummaryRead(BaseModel):
    id: int
    username: str
    role: str
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserRead(BaseModel):
    id: int
    username: str
    email: EmailStr
    role: str
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserProfileRead(UserRead):
    questions_count: int
    answers_count: int
    follower_count: int
    following_count: int


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: str = "student"
    bio: str | None = Field(default=None, max_length=500)
    avatar_url: str | None = Field(default=None, max_length=255)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)
