"""Use cases for asking, editing and solving questions."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy.orm import Session

from app.application.use_cases.errors import NotFoundError, PermissionDeniedError
from app.domain.entities import (
    QUESTION_FILTERS,
    QUESTION_SORTS,
    SORT_NEWEST,
    Question,
    QuestionDetails,
    Tag,
)
from app.infrastructure.repositories import QuestionRepository, TagRepository


def list_questions(
    session: Session,
    *,
    limit: int = 10,
    offset: int = 0,
    sort_by: str = SORT_NEWEST,
    filter_by: str | None = None,
) -> list[QuestionDetails]:
    """Return a page of questions.

    Unknown sort keys fall back to ``newest`` and unknown filters are ignored,
    matching what the web client sends for its default tabs.
    """

    if sort_by not in QUESTION_SORTS:
        sort_by = SORT_NEWEST
    if filter_by not in QUESTION_FILTERS:
        filter_by = None
    return QuestionRepository(session).list(
        limit=limit, offset=offset, sort_by=sort_by, filter_by=filter_by
    )


def get_question_details(session: Session, question_id: int) -> QuestionDetails:
    details = QuestionRepository(session).get_details(question_id)
    if details is None:
        raise NotFoundError("Question not found")
    return details


def list_user_questions(session: Session, user_id: int) -> list[QuestionDetails]:
    return QuestionRepository(session).list_by_user(user_id)


def create_question(
    session: Session,
    *,
    user_id: int,
    title: str,
    content: str,
    tags: Sequence[str] = (),
    image_url: str | None = None,
) -> Question:
    """Persist a new question creating any tag that does not exist yet."""

    question = Question(
        id=None,
        user_id=user_id,
        title=title,
        content=content,
        image_url=image_url,
    )
    return QuestionRepository(session).create(question, tags)


def update_question(
    session: Session,
    question_id: int,
    *,
    acting_user_id: int,
    changes: dict[str, Any],
) -> Question:
    repository = QuestionRepository(session)
    _ensure_author(repository.get(question_id), acting_user_id)
    updated = repository.update(question_id, changes)
    if updated is None:
        raise NotFoundError("Question not found")
    return updated


def delete_question(session: Session, question_id: int, *, acting_user_id: int) -> None:
    repository = QuestionRepository(session)
    _ensure_author(repository.get(question_id), acting_user_id)
    repository.delete(question_id)


def solve_question(
    session: Session,
    question_id: int,
    *,
    answer_id: int,
    acting_user_id: int,
) -> None:
    """Mark ``question_id`` as solved by ``answer_id``.

    Only the author of the question may do this and the answer must belong to
    the question.
    """

    repository = QuestionRepository(session)
    question = repository.get(question_id)
    if question is None:
        raise NotFoundError("Question not found")
    if question.user_id != acting_user_id:
        raise PermissionDeniedError("Only the question author can mark as solved")
    if not repository.mark_solved(question_id, answer_id):
        raise ValueError("Failed to mark question as solved")


def list_tags(session: Session) -> list[Tag]:
    return TagRepository(session).list_all()


def _ensure_author(question: Question | None, acting_user_id: int) -> None:
    if question is None:
        raise NotFoundError("Question not found")
    if question.user_id != acting_user_id:
        raise PermissionDeniedError("Forbidden")


__all__ = [
    "create_question",
    "delete_question",
    "get_question_details",
    "list_questions",
    "list_tags",
    "list_user_questions",
    "solve_question",
    "update_question",
]
