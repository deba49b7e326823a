"""Routes for answers."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.application.use_cases import answers as answers_uc
from app.domain.entities import AnswerDetails, User
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_current_user
from app.interfaces.api.routes_helpers import http_error
from app.interfaces.api.schemas import (
    AnswerCreate,
    AnswerDetailRead,
    AnswerRead,
    AnswerUpdate,
    UserSummaryRead,
)

router = APIRouter(prefix="/api", tags=["answers"])


def to_answer_detail(details: AnswerDetails) -> AnswerDetailRead:
    return AnswerDetailRead(
        **AnswerRead.model_validate(details.answer).model_dump(),
        user=UserSummaryRead.model_validate(details.user),
        votes_count=details.votes_count,
    )


@router.get("/questions/{question_id}/answers", response_model=list[AnswerDetailRead])
def list_answers(question_id: int, db: Session = Depends(get_db)):
    """Return the answers of a question, accepted first then by votes."""

    return [
        to_answer_detail(details)
        for details in answers_uc.list_question_answers(db, question_id)
    ]


@router.post(
    "/questions/{question_id}/answers",
    response_model=AnswerDetailRead,
    status_code=status.HTTP_201_CREATED,
)
def create_answer(
    question_id: int,
    payload: AnswerCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        answer = answers_uc.create_answer(
            db,
            question_id,
            user_id=current_user.id,
            content=payload.content,
            image_url=payload.image_url,
        )
    except ValueError as exc:
        raise http_error(exc) from exc
    return to_answer_detail(answers_uc.get_answer_details(db, answer.id))


@router.patch("/answers/{answer_id}", response_model=AnswerDetailRead)
def update_answer(
    answer_id: int,
    payload: AnswerUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        answers_uc.update_answer(
            db,
            answer_id,
            acting_user_id=current_user.id,
            changes=payload.model_dump(exclude_unset=True),
        )
    except ValueError as exc:
        raise http_error(exc) from exc
    return to_answer_detail(answers_uc.get_answer_details(db, answer_id))


@router.delete("/answers/{answer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_answer(
    answer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    try:
        answers_uc.delete_answer(db, answer_id, acting_user_id=current_user.id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
