"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime

ROLE_STUDENT = "student"
ROLE_TEACHER = "teacher"
USER_ROLES = (ROLE_STUDENT, ROLE_TEACHER)


@dataclass
class User:
    """Core attributes describing a DevQuery account."""

    id: int | None
    username: str
    email: str
    password: str
    role: str = ROLE_STUDENT
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None


@dataclass
class UserProfile:
    """Public profile of a user with activity counters."""

    user: User
    questions_count: int
    answers_count: int
    follower_count: int
    following_count: int


__all__ = ["ROLE_STUDENT", "ROLE_TEACHER", "USER_ROLES", "User", "UserProfile"]
