"""Endpoints for registration, login and password management."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.application.use_cases.users import (
    AuthenticationStatus,
    authenticate_user,
    change_password as change_password_uc,
    create_user as create_user_uc,
)
from app.domain.entities import User
from app.infrastructure.database import get_db
from app.infrastructure.security import create_user_token
from app.interfaces.api.dependencies import get_current_user
from app.interfaces.api.routes_helpers import http_error
from app.interfaces.api.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterResponse,
    Token,
    UserCreate,
    UserRead,
)

router = APIRouter(prefix="/api", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    """Create an account and return it together with an access token."""

    try:
        user = create_user_uc(
            db,
            username=payload.username,
            email=payload.email,
            password=payload.password,
            role=payload.role,
            bio=payload.bio,
            avatar_url=payload.avatar_url,
        )
    except ValueError as exc:
        raise http_error(exc) from exc

    logger.info("Registered user %s (%s)", user.id, user.username)
    return RegisterResponse(
        user=UserRead.model_validate(user),
        access_token=create_user_token(user.id),
    )


@router.post("/login", response_model=Token)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate by username and return a JWT."""

    user, auth_status = authenticate_user(db, payload.username, payload.password)
    if auth_status is AuthenticationStatus.INVALID_CREDENTIALS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(access_token=create_user_token(user.id))


@router.get("/user", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_user)):
    return UserRead.model_validate(current_user)


@router.post("/users/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        change_password_uc(
            db,
            current_user,
            current_password=payload.current_password,
            new_password=payload.new_password,
        )
    except ValueError as exc:
        raise http_error(exc) from exc
    return MessageResponse(message="Password updated successfully")
