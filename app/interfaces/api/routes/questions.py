"""Routes for questions, their answers and tags."""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.application.use_cases import questions as questions_uc
from app.domain.entities import QuestionDetails, SORT_NEWEST, User
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_current_user
from app.interfaces.api.routes_helpers import http_error
from app.interfaces.api.schemas import (
    MessageResponse,
    QuestionCreate,
    QuestionDetailRead,
    QuestionRead,
    QuestionUpdate,
    SolveQuestionRequest,
    TagRead,
    UserSummaryRead,
)

router = APIRouter(prefix="/api", tags=["questions"])
logger = logging.getLogger(__name__)


def to_question_detail(details: QuestionDetails) -> QuestionDetailRead:
    return QuestionDetailRead(
        **QuestionRead.model_validate(details.question).model_dump(),
        user=UserSummaryRead.model_validate(details.user),
        tags=[TagRead.model_validate(tag) for tag in details.tags],
        votes_count=details.votes_count,
        answers_count=details.answers_count,
    )


@router.get("/questions", response_model=list[QuestionDetailRead])
def list_questions(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    sort_by: str = Query(SORT_NEWEST, alias="sortBy"),
    filter_by: str | None = Query(None, alias="filter"),
    db: Session = Depends(get_db),
):
    """Return a page of questions with author, tags and counters."""

    questions = questions_uc.list_questions(
        db, limit=limit, offset=offset, sort_by=sort_by, filter_by=filter_by
    )
    return [to_question_detail(details) for details in questions]


@router.get("/questions/{question_id}", response_model=QuestionDetailRead)
def read_question(question_id: int, db: Session = Depends(get_db)):
    try:
        details = questions_uc.get_question_details(db, question_id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return to_question_detail(details)


@router.post("/questions", response_model=QuestionDetailRead, status_code=status.HTTP_201_CREATED)
def create_question(
    payload: QuestionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    question = questions_uc.create_question(
        db,
        user_id=current_user.id,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        image_url=payload.image_url,
    )
    logger.info("User %s asked question %s", current_user.id, question.id)
    return to_question_detail(questions_uc.get_question_details(db, question.id))


@router.patch("/questions/{question_id}", response_model=QuestionDetailRead)
def update_question(
    question_id: int,
    payload: QuestionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        questions_uc.update_question(
            db,
            question_id,
            acting_user_id=current_user.id,
            changes=payload.model_dump(exclude_unset=True),
        )
    except ValueError as exc:
        raise http_error(exc) from exc
    return to_question_detail(questions_uc.get_question_details(db, question_id))


@router.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(
    question_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    try:
        questions_uc.delete_question(db, question_id, acting_user_id=current_user.id)
    except ValueError as exc:
        raise http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/questions/{question_id}/solve", response_model=MessageResponse)
def solve_question(
    question_id: int,
    payload: SolveQuestionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Accept an answer and flag the question as solved."""

    try:
        questions_uc.solve_question(
            db,
            question_id,
            answer_id=payload.answer_id,
            acting_user_id=current_user.id,
        )
    except ValueError as exc:
        raise http_error(exc) from exc
    return MessageResponse(message="Question marked as solved")


@router.get("/tags", response_model=list[TagRead])
def list_tags(db: Session = Depends(get_db)):
    return [TagRead.model_validate(tag) for tag in questions_uc.list_tags(db)]
