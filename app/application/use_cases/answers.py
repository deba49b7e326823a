"""Use cases for answering questions."""

from typing import Any

from sqlalchemy.orm import Session

from app.application.use_cases.errors import NotFoundError, PermissionDeniedError
from app.domain.entities import Answer, AnswerDetails
from app.infrastructure.repositories import AnswerRepository, QuestionRepository


def list_question_answers(session: Session, question_id: int) -> list[AnswerDetails]:
    return AnswerRepository(session).list_by_question(question_id)


def list_user_answers(session: Session, user_id: int) -> list[AnswerDetails]:
    return AnswerRepository(session).list_by_user(user_id)


def get_answer_details(session: Session, answer_id: int) -> AnswerDetails:
    details = AnswerRepository(session).get_details(answer_id)
    if details is None:
        raise NotFoundError("Answer not found")
    return details


def create_answer(
    session: Session,
    question_id: int,
    *,
    user_id: int,
    content: str,
    image_url: str | None = None,
) -> Answer:
    """Attach a new answer to ``question_id``."""

    if QuestionRepository(session).get(question_id) is None:
        raise NotFoundError("Question not found")
    answer = Answer(
        id=None,
        question_id=question_id,
        user_id=user_id,
        content=content,
        image_url=image_url,
    )
    return AnswerRepository(session).create(answer)


def update_answer(
    session: Session,
    answer_id: int,
    *,
    acting_user_id: int,
    changes: dict[str, Any],
) -> Answer:
    repository = AnswerRepository(session)
    _ensure_author(repository.get(answer_id), acting_user_id)
    updated = repository.update(answer_id, changes)
    if updated is None:
        raise NotFoundError("Answer not found")
    return updated


def delete_answer(session: Session, answer_id: int, *, acting_user_id: int) -> None:
    repository = AnswerRepository(session)
    _ensure_author(repository.get(answer_id), acting_user_id)
    repository.delete(answer_id)


def _ensure_author(answer: Answer | None, acting_user_id: int) -> None:
    if answer is None:
        raise NotFoundError("Answer not found")
    if answer.user_id != acting_user_id:
        raise PermissionDeniedError("Forbidden")


__all__ = [
    "create_answer",
    "delete_answer",
    "get_answer_details",
    "list_question_answers",
    "list_user_answers",
    "update_answer",
]
