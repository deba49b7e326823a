"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, status
from fastapi.requests import HTTPConnection
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.database import get_db
from app.infrastructure.realtime import RealtimeHub, RealtimePublisher
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import user_id_from_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/login")


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        user_id = user_id_from_token(token)
    except ValueError as exc:
        raise _credentials_exception() from exc

    user = UserRepository(db).get(user_id)
    if user is None:
        raise _credentials_exception("User not found")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_realtime_hub(connection: HTTPConnection) -> RealtimeHub:
    """Return the hub started by the application lifespan.

    Works for both HTTP requests and websocket connections.
    """

    hub = getattr(connection.app.state, "realtime", None)
    if hub is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Realtime service is not running",
        )
    return hub


def get_realtime_publisher(connection: HTTPConnection) -> RealtimePublisher | None:
    """Return a publisher for the running hub, or ``None`` when it is not running.

    Without a hub, message endpoints still work and simply skip notifications.
    """

    hub = getattr(connection.app.state, "realtime", None)
    if hub is None:
        return None
    return RealtimePublisher(hub)
