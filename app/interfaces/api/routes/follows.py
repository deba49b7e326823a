"""Routes for following other users."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.application.use_cases.follows import follow_user, list_following, unfollow_user
from app.domain.entities import User
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_current_user
from app.interfaces.api.routes_helpers import http_error
from app.interfaces.api.schemas import FollowCreate, FollowRead, UserRead

router = APIRouter(prefix="/api", tags=["follows"])


@router.post("/follow", response_model=FollowRead, status_code=status.HTTP_201_CREATED)
def follow(
    payload: FollowCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        created = follow_user(
            db, follower_id=current_user.id, following_id=payload.following_id
        )
    except ValueError as exc:
        raise http_error(exc) from exc
    return FollowRead.model_validate(created)


@router.delete("/follow/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def unfollow(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    try:
        unfollow_user(db, follower_id=current_user.id, following_id=user_id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/user/following", response_model=list[UserRead])
def following(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [UserRead.model_validate(user) for user in list_following(db, current_user.id)]
