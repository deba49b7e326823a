"""Use cases for managing users."""

from .authenticate_user import AuthenticationStatus, authenticate_user
from .change_password import change_password
from .create_user import create_user
from .get_user import get_user, get_user_profile, search_users

__all__ = [
    "AuthenticationStatus",
    "authenticate_user",
    "change_password",
    "create_user",
    "get_user",
    "get_user_profile",
    "search_users",
]
