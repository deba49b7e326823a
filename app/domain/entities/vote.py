"""Domain entity representing a vote."""

from dataclasses import dataclass
from datetime import datetime

UPVOTE = 1
DOWNVOTE = -1


@dataclass
class Vote:
    """Up or down vote on exactly one question or answer."""

    id: int | None
    user_id: int
    value: int
    question_id: int | None = None
    answer_id: int | None = None
    created_at: datetime | None = None


__all__ = ["DOWNVOTE", "UPVOTE", "Vote"]
