"""Domain entities exposed by the application."""

from .answer import Answer, AnswerDetails
from .follow import Follow
from .message import ChatSummary, Message
from .question import (
    FILTER_SOLVED,
    FILTER_UNANSWERED,
    QUESTION_FILTERS,
    QUESTION_SORTS,
    SORT_ACTIVE,
    SORT_NEWEST,
    SORT_VOTES,
    Question,
    QuestionDetails,
    Tag,
)
from .user import ROLE_STUDENT, ROLE_TEACHER, USER_ROLES, User, UserProfile
from .vote import DOWNVOTE, UPVOTE, Vote

__all__ = [
    "Answer",
    "AnswerDetails",
    "ChatSummary",
    "DOWNVOTE",
    "FILTER_SOLVED",
    "FILTER_UNANSWERED",
    "Follow",
    "Message",
    "QUESTION_FILTERS",
    "QUESTION_SORTS",
    "Question",
    "QuestionDetails",
    "ROLE_STUDENT",
    "ROLE_TEACHER",
    "SORT_ACTIVE",
    "SORT_NEWEST",
    "SORT_VOTES",
    "Tag",
    "UPVOTE",
    "USER_ROLES",
    "User",
    "UserProfile",
    "Vote",
]
