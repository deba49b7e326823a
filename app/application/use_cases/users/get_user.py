"""Use cases for reading users and their public profiles."""

from sqlalchemy.orm import Session

from app.application.use_cases.errors import NotFoundError
from app.domain.entities import User, UserProfile
from app.infrastructure.repositories import (
    AnswerRepository,
    FollowRepository,
    QuestionRepository,
    UserRepository,
)

MIN_SEARCH_LENGTH = 2


def get_user(session: Session, user_id: int) -> User:
    """Return the requested user or raise an error if it does not exist."""

    user = UserRepository(session).get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_user_profile(session: Session, user_id: int) -> UserProfile:
    """Return ``user_id`` together with its activity counters."""

    user = get_user(session, user_id)
    follows = FollowRepository(session)
    return UserProfile(
        user=user,
        questions_count=QuestionRepository(session).count_by_user(user_id),
        answers_count=AnswerRepository(session).count_by_user(user_id),
        follower_count=follows.follower_count(user_id),
        following_count=follows.following_count(user_id),
    )


def search_users(session: Session, query: str) -> list[User]:
    """Return users whose username or email contains ``query``."""

    text = (query or "").strip()
    if len(text) < MIN_SEARCH_LENGTH:
        raise ValueError(
            f"Search query must be at least {MIN_SEARCH_LENGTH} characters"
        )
    return UserRepository(session).search(text)
