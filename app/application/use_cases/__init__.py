"""Aggregate application use cases."""

from .errors import ConflictError, NotFoundError, PermissionDeniedError
from .users import authenticate_user, create_user

__all__ = [
    "ConflictError",
    "NotFoundError",
    "PermissionDeniedError",
    "authenticate_user",
    "create_user",
]
