"""Helper utilities shared across API route handlers."""

from fastapi import HTTPException, status

from app.application.use_cases.errors import NotFoundError, PermissionDeniedError


def status_code_for(exc: ValueError) -> int:
    """Return the HTTP status code matching a use case error.

    Conflicts (duplicate usernames, repeated follows) stay ``400`` because the
    web client only inspects that status.
    """

    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, PermissionDeniedError):
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_400_BAD_REQUEST


def http_error(exc: ValueError) -> HTTPException:
    """Translate a use case error into an :class:`HTTPException`."""

    return HTTPException(status_code=status_code_for(exc), detail=str(exc))
