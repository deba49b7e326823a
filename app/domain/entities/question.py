"""Domain entities describing questions and their tags."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .user import User

SORT_NEWEST = "newest"
SORT_VOTES = "votes"
SORT_ACTIVE = "active"
QUESTION_SORTS = (SORT_NEWEST, SORT_VOTES, SORT_ACTIVE)

FILTER_UNANSWERED = "unanswered"
FILTER_SOLVED = "solved"
QUESTION_FILTERS = (FILTER_UNANSWERED, FILTER_SOLVED)


@dataclass
class Tag:
    """Label attached to questions."""

    id: int | None
    name: str


@dataclass
class Question:
    """A question asked by a user."""

    id: int | None
    user_id: int
    title: str
    content: str
    image_url: str | None = None
    solved: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class QuestionDetails:
    """Question enriched with its author, tags and aggregate counters."""

    question: Question
    user: User
    tags: list[Tag] = field(default_factory=list)
    votes_count: int = 0
    answers_count: int = 0


__all__ = [
    "FILTER_SOLVED",
    "FILTER_UNANSWERED",
    "QUESTION_FILTERS",
    "QUESTION_SORTS",
    "SORT_ACTIVE",
    "SORT_NEWEST",
    "SORT_VOTES",
    "Question",
    "QuestionDetails",
    "Tag",
]
