"""Use case for changing the password of the authenticated user."""

from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import get_password_hash, verify_password


def change_password(
    session: Session,
    user: User,
    *,
    current_password: str,
    new_password: str,
) -> User:
    """Replace the password of ``user`` after checking the current one."""

    if not verify_password(current_password, user.password):
        raise ValueError("Current password is incorrect")
    if current_password == new_password:
        raise ValueError("New password must be different from the current one")
    return UserRepository(session).update_password(user.id, get_password_hash(new_password))
