"""Use cases for following other users."""

from sqlalchemy.orm import Session

from app.application.use_cases.errors import ConflictError, NotFoundError
from app.domain.entities import Follow, User
from app.infrastructure.repositories import FollowRepository, UserRepository


def follow_user(session: Session, *, follower_id: int, following_id: int) -> Follow:
    if follower_id == following_id:
        raise ValueError("You cannot follow yourself")
    if UserRepository(session).get(following_id) is None:
        raise NotFoundError("User not found")

    repository = FollowRepository(session)
    if repository.get_by_pair(follower_id, following_id):
        raise ConflictError("Already following this user")
    return repository.create(follower_id, following_id)


def unfollow_user(session: Session, *, follower_id: int, following_id: int) -> None:
    if not FollowRepository(session).delete(follower_id, following_id):
        raise NotFoundError("Follow relationship not found")


def list_following(session: Session, user_id: int) -> list[User]:
    """Return the users ``user_id`` follows."""

    follows = FollowRepository(session).list_by_follower(user_id)
    return UserRepository(session).get_many([follow.following_id for follow in follows])


__all__ = ["follow_user", "list_following", "unfollow_user"]
