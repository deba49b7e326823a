"""Domain entities describing answers."""

from dataclasses import dataclass
from datetime import datetime

from .user import User


@dataclass
class Answer:
    """An answer posted to a question."""

    id: int | None
    question_id: int
    user_id: int
    content: str
    image_url: str | None = None
    accepted: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class AnswerDetails:
    """Answer enriched with its author and vote sum."""

    answer: Answer
    user: User
    votes_count: int = 0


__all__ = ["Answer", "AnswerDetails"]
