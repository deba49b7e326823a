"""Error types raised by use cases.

Every error derives from ``ValueError`` so callers that only care about
"the request could not be fulfilled" can keep catching ``ValueError``; routes
inspect the concrete type to choose the HTTP status code.
"""


class NotFoundError(ValueError):
    """The referenced record does not exist."""


class PermissionDeniedError(ValueError):
    """The acting user is not allowed to modify the record."""


class ConflictError(ValueError):
    """The operation collides with existing state (duplicates, repeated follows)."""


__all__ = ["ConflictError", "NotFoundError", "PermissionDeniedError"]
