from .answer import AnswerCreate, AnswerDetailRead, AnswerRead, AnswerUpdate
from .auth import LoginRequest, MessageResponse, RegisterResponse, Token
from .follow import FollowCreate, FollowRead
from .message import (
    ChatRead,
    MessageCreate,
    MessageRead,
    MessagesReadResponse,
    UnreadCountRead,
)
from .question import (
    QuestionCreate,
    QuestionDetailRead,
    QuestionRead,
    QuestionUpdate,
    SolveQuestionRequest,
    TagRead,
)
from .user import (
    ChangePasswordRequest,
    UserCreate,
    UserProfileRead,
    UserRead,
    UserSummaryRead,
)
from .vote import VoteCreate, VoteRead

__all__ = [
    "AnswerCreate",
    "AnswerDetailRead",
    "AnswerRead",
    "AnswerUpdate",
    "ChangePasswordRequest",
    "ChatRead",
    "FollowCreate",
    "FollowRead",
    "LoginRequest",
    "MessageCreate",
    "MessageRead",
    "MessageResponse",
    "MessagesReadResponse",
    "QuestionCreate",
    "QuestionDetailRead",
    "QuestionRead",
    "QuestionUpdate",
    "RegisterResponse",
    "SolveQuestionRequest",
    "TagRead",
    "Token",
    "UnreadCountRead",
    "UserCreate",
    "UserProfileRead",
    "UserRead",
    "UserSummaryRead",
    "VoteCreate",
    "VoteRead",
]
