"""Use case for registering users."""

from sqlalchemy.orm import Session

from app.application.use_cases.errors import ConflictError
from app.domain.entities import ROLE_STUDENT, USER_ROLES, User
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import get_password_hash
from app.utils import now_in_app_timezone


def create_user(
    session: Session,
    *,
    username: str,
    email: str,
    password: str,
    role: str = ROLE_STUDENT,
    bio: str | None = None,
    avatar_url: str | None = None,
) -> User:
    """Create a new user ensuring unique usernames."""

    repository = UserRepository(session)

    username = username.strip()
    if not username:
        raise ValueError("Username is required")
    if repository.get_by_username(username):
        raise ConflictError("Username already exists")
    if role not in USER_ROLES:
        raise ValueError("Role must be one of: " + ", ".join(USER_ROLES))

    user = User(
        id=None,
        username=username,
        email=email,
        password=get_password_hash(password),
        role=role,
        bio=bio,
        avatar_url=avatar_url,
        created_at=now_in_app_timezone(),
    )
    return repository.create(user)
