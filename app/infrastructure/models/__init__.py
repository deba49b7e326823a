"""ORM models used by the application infrastructure."""

from .answer import AnswerModel
from .follow import FollowModel
from .message import MessageModel
from .question import QuestionModel
from .tag import TagModel, question_tag_table
from .user import UserModel
from .vote import VoteModel

__all__ = [
    "AnswerModel",
    "FollowModel",
    "MessageModel",
    "QuestionModel",
    "TagModel",
    "question_tag_table",
    "UserModel",
    "VoteModel",
]
