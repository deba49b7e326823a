"""Persistence layer for questions and their tags."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import exists, func
from sqlalchemy.orm import Session, joinedload

from app.domain.entities import (
    FILTER_SOLVED,
    FILTER_UNANSWERED,
    SORT_ACTIVE,
    SORT_VOTES,
    Question,
    QuestionDetails,
    Tag,
)
from app.infrastructure.models import AnswerModel, QuestionModel, VoteModel
from app.infrastructure.repositories.tag_repository import TagRepository
from app.infrastructure.repositories.user_repository import UserRepository
from app.utils import ensure_app_timezone, now_in_app_naive_datetime

_UPDATABLE_FIELDS = ("title", "content", "image_url")


class QuestionRepository:
    """Provide CRUD operations and listings for questions."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, question_id: int) -> Question | None:
        model = self.session.get(QuestionModel, question_id)
        return self._to_entity(model) if model else None

    def get_details(self, question_id: int) -> QuestionDetails | None:
        model = (
            self.session.query(QuestionModel)
            .options(joinedload(QuestionModel.user))
            .filter(QuestionModel.id == question_id)
            .first()
        )
        if model is None:
            return None
        return self._to_details([model])[0]

    def list(
        self,
        *,
        limit: int = 10,
        offset: int = 0,
        sort_by: str = "newest",
        filter_by: str | None = None,
    ) -> list[QuestionDetails]:
        query = self.session.query(QuestionModel).options(joinedload(QuestionModel.user))

        if filter_by == FILTER_UNANSWERED:
            has_answers = exists().where(AnswerModel.question_id == QuestionModel.id)
            query = query.filter(~has_answers)
        elif filter_by == FILTER_SOLVED:
            query = query.filter(QuestionModel.solved.is_(True))

        if sort_by == SORT_VOTES:
            vote_sums = (
                self.session.query(
                    VoteModel.question_id.label("question_id"),
                    func.sum(VoteModel.value).label("vote_sum"),
                )
                .filter(VoteModel.question_id.isnot(None))
                .group_by(VoteModel.question_id)
                .subquery()
            )
            query = query.outerjoin(
                vote_sums, vote_sums.c.question_id == QuestionModel.id
            ).order_by(
                func.coalesce(vote_sums.c.vote_sum, 0).desc(),
                QuestionModel.created_at.desc(),
                QuestionModel.id.desc(),
            )
        elif sort_by == SORT_ACTIVE:
            latest_answers = (
                self.session.query(
                    AnswerModel.question_id.label("question_id"),
                    func.max(AnswerModel.created_at).label("latest_answer"),
                )
                .group_by(AnswerModel.question_id)
                .subquery()
            )
            query = query.outerjoin(
                latest_answers, latest_answers.c.question_id == QuestionModel.id
            ).order_by(
                func.coalesce(
                    latest_answers.c.latest_answer, QuestionModel.created_at
                ).desc(),
                QuestionModel.id.desc(),
            )
        else:
            query = query.order_by(QuestionModel.created_at.desc(), QuestionModel.id.desc())

        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return self._to_details(query.all())

    def list_by_user(self, user_id: int) -> list[QuestionDetails]:
        query = (
            self.session.query(QuestionModel)
            .options(joinedload(QuestionModel.user))
            .filter(QuestionModel.user_id == user_id)
            .order_by(QuestionModel.created_at.desc(), QuestionModel.id.desc())
        )
        return self._to_details(query.all())

    def count_by_user(self, user_id: int) -> int:
        return (
            self.session.query(func.count(QuestionModel.id))
            .filter(QuestionModel.user_id == user_id)
            .scalar()
            or 0
        )

    def create(self, question: Question, tag_names: Iterable[str] = ()) -> Question:
        now = now_in_app_naive_datetime()
        model = QuestionModel(
            user_id=question.user_id,
            title=question.title,
            content=question.content,
            image_url=question.image_url,
            solved=False,
            created_at=now,
            updated_at=now,
        )
        model.tags = TagRepository(self.session).get_or_create_models(tag_names)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, question_id: int, changes: dict[str, Any]) -> Question | None:
        model = self.session.get(QuestionModel, question_id)
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

    def delete(self, question_id: int) -> bool:
        model = self.session.get(QuestionModel, question_id)
        if model is None:
            return False

        answer_ids = [
            answer_id
            for (answer_id,) in self.session.query(AnswerModel.id)
            .filter(AnswerModel.question_id == question_id)
            .all()
        ]
        if answer_ids:
            self.session.query(VoteModel).filter(
                VoteModel.answer_id.in_(answer_ids)
            ).delete(synchronize_session=False)
            self.session.query(AnswerModel).filter(
                AnswerModel.id.in_(answer_ids)
            ).delete(synchronize_session=False)
        self.session.query(VoteModel).filter(
            VoteModel.question_id == question_id
        ).delete(synchronize_session=False)
        model.tags = []
        self.session.delete(model)
        self.session.commit()
        return True

    def mark_solved(self, question_id: int, answer_id: int) -> bool:
        """Flag the question as solved and accept ``answer_id``.

        Returns ``False`` when either record is missing or the answer belongs to
        a different question. Any previously accepted answer is unflagged.
        """

        question = self.session.get(QuestionModel, question_id)
        answer = self.session.get(AnswerModel, answer_id)
        if question is None or answer is None or answer.question_id != question_id:
            return False

        now = now_in_app_naive_datetime()
        self.session.query(AnswerModel).filter(
            AnswerModel.question_id == question_id,
            AnswerModel.id != answer_id,
            AnswerModel.accepted.is_(True),
        ).update(
            {AnswerModel.accepted: False, AnswerModel.updated_at: now},
            synchronize_session=False,
        )
        question.solved = True
        question.updated_at = now
        answer.accepted = True
        answer.updated_at = now
        self.session.add_all([question, answer])
        self.session.commit()
        return True

    def _to_details(self, models: Sequence[QuestionModel]) -> list[QuestionDetails]:
        question_ids = [model.id for model in models]
        vote_sums = self._vote_sums(question_ids)
        answer_counts = self._answer_counts(question_ids)
        return [
            QuestionDetails(
                question=self._to_entity(model),
                user=UserRepository._to_entity(model.user),
                tags=[Tag(id=tag.id, name=tag.name) for tag in model.tags],
                votes_count=vote_sums.get(model.id, 0),
                answers_count=answer_counts.get(model.id, 0),
            )
            for model in models
        ]

    def _vote_sums(self, question_ids: Sequence[int]) -> dict[int, int]:
        if not question_ids:
            return {}
        rows = (
            self.session.query(VoteModel.question_id, func.sum(VoteModel.value))
            .filter(VoteModel.question_id.in_(question_ids))
            .group_by(VoteModel.question_id)
            .all()
        )
        return {question_id: int(total or 0) for question_id, total in rows}

    def _answer_counts(self, question_ids: Sequence[int]) -> dict[int, int]:
        if not question_ids:
            return {}
        rows = (
            self.session.query(AnswerModel.question_id, func.count(AnswerModel.id))
            .filter(AnswerModel.question_id.in_(question_ids))
            .group_by(AnswerModel.question_id)
            .all()
        )
        return {question_id: int(count) for question_id, count in rows}

    @staticmethod
    def _to_entity(model: QuestionModel) -> Question:
        return Question(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            content=model.content,
            image_url=model.image_url,
            solved=bool(model.solved),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["QuestionRepository"]
