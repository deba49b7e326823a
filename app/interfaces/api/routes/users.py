"""Routes for public user profiles and search."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.application.use_cases.answers import list_user_answers
from app.application.use_cases.questions import list_user_questions
from app.application.use_cases.users import get_user, get_user_profile, search_users
from app.domain.entities import User
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_current_user
from app.interfaces.api.routes.answers import to_answer_detail
from app.interfaces.api.routes.questions import to_question_detail
from app.interfaces.api.routes_helpers import http_error
from app.interfaces.api.schemas import (
    AnswerDetailRead,
    QuestionDetailRead,
    UserProfileRead,
    UserRead,
)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/search", response_model=list[UserRead])
def search(
    q: str = Query(""),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """Find users whose username or email contains ``q``."""

    try:
        users = search_users(db, q)
    except ValueError as exc:
        raise http_error(exc) from exc
    return [UserRead.model_validate(user) for user in users]


@router.get("/{user_id}", response_model=UserProfileRead)
def read_profile(user_id: int, db: Session = Depends(get_db)):
    try:
        profile = get_user_profile(db, user_id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return UserProfileRead(
        **UserRead.model_validate(profile.user).model_dump(),
        questions_count=profile.questions_count,
        answers_count=profile.answers_count,
        follower_count=profile.follower_count,
        following_count=profile.following_count,
    )


@router.get("/{user_id}/questions", response_model=list[QuestionDetailRead])
def read_user_questions(user_id: int, db: Session = Depends(get_db)):
    try:
        get_user(db, user_id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return [to_question_detail(details) for details in list_user_questions(db, user_id)]


@router.get("/{user_id}/answers", response_model=list[AnswerDetailRead])
def read_user_answers(user_id: int, db: Session = Depends(get_db)):
    try:
        get_user(db, user_id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return [to_answer_detail(details) for details in list_user_answers(db, user_id)]
