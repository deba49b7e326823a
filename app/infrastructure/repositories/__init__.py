"""Repository implementations for infrastructure layer."""

from .answer_repository import AnswerRepository
from .follow_repository import FollowRepository
from .message_repository import MessageRepository
from .question_repository import QuestionRepository
from .tag_repository import TagRepository
from .user_repository import UserRepository
from .vote_repository import VoteRepository

__all__ = [
    "AnswerRepository",
    "FollowRepository",
    "MessageRepository",
    "QuestionRepository",
    "TagRepository",
    "UserRepository",
    "VoteRepository",
]
