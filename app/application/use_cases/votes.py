"""Use case for voting on questions and answers."""

from sqlalchemy.orm import Session

from app.application.use_cases.errors import NotFoundError
from app.domain.entities import DOWNVOTE, UPVOTE, Vote
from app.infrastructure.repositories import (
    AnswerRepository,
    QuestionRepository,
    VoteRepository,
)


def cast_vote(
    session: Session,
    *,
    user_id: int,
    value: int,
    question_id: int | None = None,
    answer_id: int | None = None,
) -> Vote:
    """Create or replace the vote of ``user_id`` on exactly one target."""

    if value not in (UPVOTE, DOWNVOTE):
        raise ValueError("Vote value must be 1 or -1")
    if (question_id is None) == (answer_id is None):
        raise ValueError("Either question_id or answer_id must be provided, but not both")

    if question_id is not None and QuestionRepository(session).get(question_id) is None:
        raise NotFoundError("Question not found")
    if answer_id is not None and AnswerRepository(session).get(answer_id) is None:
        raise NotFoundError("Answer not found")

    vote = Vote(
        id=None,
        user_id=user_id,
        value=value,
        question_id=question_id,
        answer_id=answer_id,
    )
    return VoteRepository(session).create_or_update(vote)


def count_votes(
    session: Session, *, question_id: int | None = None, answer_id: int | None = None
) -> int:
    return VoteRepository(session).count(question_id=question_id, answer_id=answer_id)


__all__ = ["cast_vote", "count_votes"]
