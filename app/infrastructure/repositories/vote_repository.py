"""Persistence layer for votes."""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.entities import Vote
from app.infrastructure.models import VoteModel
from app.utils import ensure_app_timezone, now_in_app_naive_datetime


class VoteRepository:
    """Store one vote per user and target, replacing the value on re-votes."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_for_user(
        self,
        user_id: int,
        *,
        question_id: int | None = None,
        answer_id: int | None = None,
    ) -> Vote | None:
        model = self._get_model(user_id, question_id=question_id, answer_id=answer_id)
        return self._to_entity(model) if model else None

    def create_or_update(self, vote: Vote) -> Vote:
        model = self._get_model(
            vote.user_id, question_id=vote.question_id, answer_id=vote.answer_id
        )
        if model is None:
            model = VoteModel(
                user_id=vote.user_id,
                question_id=vote.question_id,
                answer_id=vote.answer_id,
                created_at=now_in_app_naive_datetime(),
            )
        model.value = vote.value
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def count(self, *, question_id: int | None = None, answer_id: int | None = None) -> int:
        """Return the vote sum for a question or an answer (``0`` without votes)."""

        query = self.session.query(func.coalesce(func.sum(VoteModel.value), 0))
        if question_id is not None:
            query = query.filter(VoteModel.question_id == question_id)
        elif answer_id is not None:
            query = query.filter(VoteModel.answer_id == answer_id)
        return int(query.scalar() or 0)

    def _get_model(
        self,
        user_id: int,
        *,
        question_id: int | None,
        answer_id: int | None,
    ) -> VoteModel | None:
        query = self.session.query(VoteModel).filter(VoteModel.user_id == user_id)
        if question_id is not None:
            query = query.filter(VoteModel.question_id == question_id)
        elif answer_id is not None:
            query = query.filter(VoteModel.answer_id == answer_id)
        else:
            return None
        return query.first()

    @staticmethod
    def _to_entity(model: VoteModel) -> Vote:
        return Vote(
            id=model.id,
            user_id=model.user_id,
            value=model.value,
            question_id=model.question_id,
            answer_id=model.answer_id,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["VoteRepository"]
