"""Persistence layer for answers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.domain.entities import Answer, AnswerDetails
from app.infrastructure.models import AnswerModel, QuestionModel, VoteModel
from app.infrastructure.repositories.user_repository import UserRepository
from app.utils import ensure_app_timezone, now_in_app_naive_datetime

_UPDATABLE_FIELDS = ("content", "image_url")


class AnswerRepository:
    """Provide CRUD operations for answers."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, answer_id: int) -> Answer | None:
        model = self.session.get(AnswerModel, answer_id)
        return self._to_entity(model) if model else None

    def get_details(self, answer_id: int) -> AnswerDetails | None:
        model = (
            self.session.query(AnswerModel)
            .options(joinedload(AnswerModel.user))
            .filter(AnswerModel.id == answer_id)
            .first()
        )
        if model is None:
            return None
        return self._to_details([model])[0]

    def list_by_question(self, question_id: int) -> list[AnswerDetails]:
        """Return answers for ``question_id``, accepted first then by votes."""

        query = (
            self.session.query(AnswerModel)
            .options(joinedload(AnswerModel.user))
            .filter(AnswerModel.question_id == question_id)
            .order_by(AnswerModel.created_at.asc(), AnswerModel.id.asc())
        )
        details = self._to_details(query.all())
        return sorted(
            details,
            key=lambda item: (not item.answer.accepted, -item.votes_count),
        )

    def list_by_user(self, user_id: int) -> list[AnswerDetails]:
        query = (
            self.session.query(AnswerModel)
            .options(joinedload(AnswerModel.user))
            .filter(AnswerModel.user_id == user_id)
            .order_by(AnswerModel.created_at.desc(), AnswerModel.id.desc())
        )
        return self._to_details(query.all())

    def count_by_user(self, user_id: int) -> int:
        return (
            self.session.query(func.count(AnswerModel.id))
            .filter(AnswerModel.user_id == user_id)
            .scalar()
            or 0
        )

    def create(self, answer: Answer) -> Answer:
        now = now_in_app_naive_datetime()
        model = AnswerModel(
            question_id=answer.question_id,
            user_id=answer.user_id,
            content=answer.content,
            image_url=answer.image_url,
            accepted=False,
            created_at=now,
            updated_at=now,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, answer_id: int, changes: dict[str, Any]) -> Answer | None:
        model = self.session.get(AnswerModel, answer_id)
        if model is None:
            return None
        for field_name in _UPDATABLE_FIELDS:
            if field_name in changes:
                setattr(model, field_name, changes[field_name])
        model.updated_at = now_in_app_naive_datetime()
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, answer_id: int) -> bool:
        model = self.session.get(AnswerModel, answer_id)
        if model is None:
            return False
        self.session.query(VoteModel).filter(VoteModel.answer_id == answer_id).delete(
            synchronize_session=False
        )
        self.session.delete(model)
        self.session.commit()
        return True

    def accept(self, answer_id: int) -> bool:
        """Accept ``answer_id`` and flag its question as solved."""

        model = self.session.get(AnswerModel, answer_id)
        if model is None:
            return False

        now = now_in_app_naive_datetime()
        self.session.query(AnswerModel).filter(
            AnswerModel.question_id == model.question_id,
            AnswerModel.id != answer_id,
            AnswerModel.accepted.is_(True),
        ).update(
            {AnswerModel.accepted: False, AnswerModel.updated_at: now},
            synchronize_session=False,
        )
        self.session.query(QuestionModel).filter(
            QuestionModel.id == model.question_id
        ).update(
            {QuestionModel.solved: True, QuestionModel.updated_at: now},
            synchronize_session=False,
        )
        model.accepted = True
        model.updated_at = now
        self.session.add(model)
        self.session.commit()
        return True

    def _to_details(self, models: Sequence[AnswerModel]) -> list[AnswerDetails]:
        vote_sums = self._vote_sums([model.id for model in models])
        return [
            AnswerDetails(
                answer=self._to_entity(model),
                user=UserRepository._to_entity(model.user),
                votes_count=vote_sums.get(model.id, 0),
            )
            for model in models
        ]

    def _vote_sums(self, answer_ids: Sequence[int]) -> dict[int, int]:
        if not answer_ids:
            return {}
        rows = (
            self.session.query(VoteModel.answer_id, func.sum(VoteModel.value))
            .filter(VoteModel.answer_id.in_(answer_ids))
            .group_by(VoteModel.answer_id)
            .all()
        )
        return {answer_id: int(total or 0) for answer_id, total in rows}

    @staticmethod
    def _to_entity(model: AnswerModel) -> Answer:
        return Answer(
            id=model.id,
            question_id=model.question_id,
            user_id=model.user_id,
            content=model.content,
            image_url=model.image_url,
            accepted=bool(model.accepted),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["AnswerRepository"]
